"""Quantum gate matrices."""

from .standard import (
    RX,
    RY,
    RZ,
    SUPPORTED_GATES,
    SWAP,
    H,
    I,
    S,
    T,
    X,
    Y,
    Z,
    controlled,
    gate_matrix,
    gate_num_qubits,
    is_unitary,
)

__all__ = [
    "I",
    "X",
    "Y",
    "Z",
    "H",
    "S",
    "T",
    "RX",
    "RY",
    "RZ",
    "SWAP",
    "SUPPORTED_GATES",
    "gate_num_qubits",
    "gate_matrix",
    "controlled",
    "is_unitary",
]
