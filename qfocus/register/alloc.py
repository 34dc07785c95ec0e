"""Register allocation routines."""

from __future__ import annotations

import math
from typing import Optional, Union

import numpy as np
import torch

from qfocus.errors import InvalidBasisState
from qfocus.register.dense import DenseRegister

DeviceLike = Union[str, torch.device, None]


def resolve_device(device: DeviceLike = None) -> torch.device:
    """
    Map a device argument to a torch.device.

    Args:
        device: ``"cpu"``, ``"cuda"``, a torch.device, or None (CPU).

    Raises:
        RuntimeError: If CUDA is requested but not available.
        ValueError: If the device type is not supported.
    """
    if device is None:
        return torch.device("cpu")
    if isinstance(device, str):
        device = torch.device(device)
    if not isinstance(device, torch.device):
        raise TypeError(f"device must be str, torch.device, or None, got {type(device)}")
    if device.type == "cuda" and not torch.cuda.is_available():
        raise RuntimeError("CUDA device requested but torch.cuda.is_available() is False")
    if device.type not in ("cpu", "cuda"):
        raise ValueError(
            f"Unsupported device type: {device.type}. Only 'cpu' and 'cuda' are supported."
        )
    return device


def _check_sizes(n_qubits: int, nbatch: int) -> None:
    if n_qubits < 1:
        raise ValueError(f"n_qubits must be >= 1, got {n_qubits}")
    if nbatch < 1:
        raise ValueError(f"nbatch must be >= 1, got {nbatch}")


def product_register(
    n_qubits: int,
    bits: int,
    nbatch: int = 1,
    device: DeviceLike = None,
    dtype: Optional[torch.dtype] = None,
) -> DenseRegister:
    """
    Allocate the computational basis state ``|bits>`` on ``n_qubits`` qubits.

    Qubit ``j`` holds bit ``j`` of ``bits`` (LSB-first). Every batch member
    gets the same state. All qubits start active.

    Raises:
        InvalidBasisState: If ``bits`` is outside ``[0, 2**n_qubits)``.
    """
    _check_sizes(n_qubits, nbatch)
    if bits < 0 or bits >= 2**n_qubits:
        raise InvalidBasisState(f"basis state {bits} out of range [0, {2**n_qubits})")
    state = torch.zeros(
        (2**n_qubits, 1, nbatch),
        dtype=dtype or torch.complex64,
        device=resolve_device(device),
    )
    state[bits] = 1.0 + 0.0j
    return DenseRegister(state)


def zero_register(
    n_qubits: int,
    nbatch: int = 1,
    device: DeviceLike = None,
    dtype: Optional[torch.dtype] = None,
) -> DenseRegister:
    """Allocate ``|0...0>`` on ``n_qubits`` qubits for ``nbatch`` batch members."""
    return product_register(n_qubits, 0, nbatch=nbatch, device=device, dtype=dtype)


def uniform_register(
    n_qubits: int,
    nbatch: int = 1,
    device: DeviceLike = None,
    dtype: Optional[torch.dtype] = None,
) -> DenseRegister:
    """Allocate the equal superposition of all ``2**n_qubits`` basis states."""
    _check_sizes(n_qubits, nbatch)
    dim = 2**n_qubits
    state = torch.full(
        (dim, 1, nbatch),
        1.0 / math.sqrt(dim),
        dtype=dtype or torch.complex64,
        device=resolve_device(device),
    )
    return DenseRegister(state)


def rand_register(
    n_qubits: int,
    nbatch: int = 1,
    generator: Optional[torch.Generator] = None,
    device: DeviceLike = None,
    dtype: Optional[torch.dtype] = None,
) -> DenseRegister:
    """Allocate normalized random states with Gaussian complex amplitudes."""
    _check_sizes(n_qubits, nbatch)
    dim = 2**n_qubits
    torch_device = resolve_device(device)
    real = torch.randn((dim, 1, nbatch), generator=generator, device=torch_device)
    imag = torch.randn((dim, 1, nbatch), generator=generator, device=torch_device)
    state = torch.complex(real, imag).to(dtype=dtype or torch.complex64)
    return DenseRegister(state).normalize_()


def from_state(
    state: Union[torch.Tensor, np.ndarray],
    device: DeviceLike = None,
    dtype: Optional[torch.dtype] = None,
) -> DenseRegister:
    """
    Wrap amplitudes in a register with every qubit active.

    Args:
        state: Shape ``(2**n,)`` for a single state or ``(2**n, batch)`` for
            a batch (batch axis last). NumPy arrays are accepted. The
            amplitudes are copied, so the input is never modified.
        device: Optional target device.
        dtype: Optional complex target dtype.

    Raises:
        ValueError: If the shape is not 1D/2D or the dimension is not a
            power of 2.
    """
    if isinstance(state, np.ndarray):
        state = torch.from_numpy(state)
    if state.ndim == 1:
        state = state.unsqueeze(1)
    elif state.ndim != 2:
        raise ValueError(f"state must be 1D or 2D, got shape {tuple(state.shape)}")

    if device is not None:
        state = state.to(device=resolve_device(device))
    if dtype is not None:
        if dtype not in (torch.complex64, torch.complex128):
            raise ValueError(f"dtype must be complex (complex64 or complex128), got {dtype}")
        state = state.to(dtype=dtype)
    # Registers own their storage; the caller's buffer must not see in-place updates.
    return DenseRegister(state.unsqueeze(1).clone())


__all__ = [
    "resolve_device",
    "zero_register",
    "product_register",
    "uniform_register",
    "rand_register",
    "from_state",
]
