"""Standard gate matrices used by primitive blocks.

Every constructor returns a complex ``(2**k, 2**k)`` tensor. Multi-qubit
matrices follow the LSB-first convention of the register: the first qubit a
gate is placed on is the least significant bit of the matrix index.
"""

from __future__ import annotations

import cmath
import math
from typing import Callable, Dict, Optional, Sequence

import torch

_SQRT1_2 = 1.0 / math.sqrt(2.0)


def _defaults(
    dtype: torch.dtype | None, device: torch.device | None
) -> tuple[torch.dtype, torch.device]:
    return dtype or torch.complex64, device or torch.device("cpu")


def I(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Identity gate (single-qubit)."""
    dtype, device = _defaults(dtype, device)
    return torch.eye(2, dtype=dtype, device=device)


def X(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Pauli-X gate (bit-flip, NOT gate)."""
    dtype, device = _defaults(dtype, device)
    return torch.tensor([[0.0, 1.0], [1.0, 0.0]], dtype=dtype, device=device)


def Y(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Pauli-Y gate."""
    dtype, device = _defaults(dtype, device)
    return torch.tensor([[0.0, -1.0j], [1.0j, 0.0]], dtype=dtype, device=device)


def Z(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Pauli-Z gate (phase-flip)."""
    dtype, device = _defaults(dtype, device)
    return torch.tensor([[1.0, 0.0], [0.0, -1.0]], dtype=dtype, device=device)


def H(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """
    Hadamard gate.

    Maps |0> to (|0> + |1>)/sqrt(2) and |1> to (|0> - |1>)/sqrt(2).
    """
    dtype, device = _defaults(dtype, device)
    return torch.tensor(
        [[_SQRT1_2, _SQRT1_2], [_SQRT1_2, -_SQRT1_2]], dtype=dtype, device=device
    )


def S(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Phase gate, diag(1, i)."""
    dtype, device = _defaults(dtype, device)
    return torch.tensor([[1.0, 0.0], [0.0, 1.0j]], dtype=dtype, device=device)


def T(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """pi/8 gate, diag(1, exp(i pi/4))."""
    dtype, device = _defaults(dtype, device)
    return torch.tensor(
        [[1.0, 0.0], [0.0, cmath.exp(1j * math.pi / 4)]], dtype=dtype, device=device
    )


def RX(theta: float, dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """
    Rotation around the X axis, RX(theta) = exp(-i theta X / 2).

    Args:
        theta: Rotation angle in radians.
        dtype: Complex dtype for the gate matrix. Defaults to torch.complex64.
        device: PyTorch device. Defaults to CPU.
    """
    dtype, device = _defaults(dtype, device)
    c, s = math.cos(theta / 2.0), math.sin(theta / 2.0)
    return torch.tensor([[c, -1.0j * s], [-1.0j * s, c]], dtype=dtype, device=device)


def RY(theta: float, dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Rotation around the Y axis, RY(theta) = exp(-i theta Y / 2)."""
    dtype, device = _defaults(dtype, device)
    c, s = math.cos(theta / 2.0), math.sin(theta / 2.0)
    return torch.tensor([[c, -s], [s, c]], dtype=dtype, device=device)


def RZ(theta: float, dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Rotation around the Z axis, RZ(theta) = exp(-i theta Z / 2)."""
    dtype, device = _defaults(dtype, device)
    return torch.tensor(
        [[cmath.exp(-0.5j * theta), 0.0], [0.0, cmath.exp(0.5j * theta)]],
        dtype=dtype,
        device=device,
    )


def SWAP(dtype: torch.dtype | None = None, device: torch.device | None = None) -> torch.Tensor:
    """Two-qubit SWAP gate."""
    dtype, device = _defaults(dtype, device)
    m = torch.zeros((4, 4), dtype=dtype, device=device)
    m[0, 0] = m[1, 2] = m[2, 1] = m[3, 3] = 1.0
    return m


_FIXED: Dict[str, Callable[..., torch.Tensor]] = {
    "I": I,
    "X": X,
    "Y": Y,
    "Z": Z,
    "H": H,
    "S": S,
    "T": T,
    "SWAP": SWAP,
}

_ROTATIONS: Dict[str, Callable[..., torch.Tensor]] = {
    "RX": RX,
    "RY": RY,
    "RZ": RZ,
}

SUPPORTED_GATES = tuple(sorted(_FIXED) + sorted(_ROTATIONS))


def gate_num_qubits(name: str) -> int:
    """Return how many target qubits the named gate acts on."""
    n = name.upper()
    if n not in _FIXED and n not in _ROTATIONS:
        raise ValueError(
            f"Unsupported gate name {name!r}. Supported gates: {', '.join(SUPPORTED_GATES)}."
        )
    return 2 if n == "SWAP" else 1


def gate_matrix(
    name: str,
    params: Optional[Sequence[float]] = None,
    dtype: torch.dtype | None = None,
    device: torch.device | None = None,
) -> torch.Tensor:
    """
    Map a gate name and optional parameters to its unitary matrix.

    Raises:
        ValueError: If the name is unknown or the parameter count is wrong.
    """
    n = name.upper()
    if n in _FIXED:
        if params:
            raise ValueError(f"Gate {n} takes no parameters, got {tuple(params)}.")
        return _FIXED[n](dtype=dtype, device=device)
    if n in _ROTATIONS:
        if not params or len(params) != 1:
            raise ValueError(f"Gate {n} requires exactly one parameter.")
        return _ROTATIONS[n](float(params[0]), dtype=dtype, device=device)
    raise ValueError(
        f"Unsupported gate name {name!r}. Supported gates: {', '.join(SUPPORTED_GATES)}."
    )


def controlled(matrix: torch.Tensor, n_controls: int) -> torch.Tensor:
    """
    Embed ``matrix`` as the all-ones-control block of a larger identity.

    Control qubits occupy the high bits, so the controlled block is the last
    ``matrix.shape[0]`` rows and columns.
    """
    if n_controls < 0:
        raise ValueError(f"n_controls must be >= 0, got {n_controls}")
    dim = matrix.shape[0]
    total = dim * 2**n_controls
    full = torch.eye(total, dtype=matrix.dtype, device=matrix.device)
    full[total - dim :, total - dim :] = matrix
    return full


def is_unitary(matrix: torch.Tensor, atol: float = 1e-6) -> bool:
    """Return True if ``matrix`` is square and U^dagger U = I within ``atol``."""
    if matrix.dim() != 2 or matrix.shape[0] != matrix.shape[1]:
        return False
    eye = torch.eye(matrix.shape[0], dtype=matrix.dtype, device=matrix.device)
    return torch.allclose(matrix.conj().T @ matrix, eye, atol=atol)


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
