"""Owning, dense register."""

from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

import torch

from qfocus.errors import QubitCountMismatch
from qfocus.register.base import AbstractRegister, RegisterKind


def _log2_exact(dim: int, what: str) -> int:
    n = int(math.log2(dim)) if dim > 0 else -1
    if n < 0 or 2**n != dim:
        raise ValueError(f"{what} dimension {dim} is not a power of 2")
    return n


class DenseRegister(AbstractRegister):
    """
    Register that owns its amplitude tensor.

    Attributes
    ----------
    state : torch.Tensor
        Complex tensor of shape ``(2**active, 2**remaining, batch)``. Real
        input is promoted to complex128.
    order : tuple of int
        Global qubit index of each storage bit; defaults to the canonical
        order ``(0, ..., n-1)``.

    Examples
    --------
    >>> import torch
    >>> from qfocus.register import DenseRegister
    >>> psi = torch.zeros(4, 1, 3, dtype=torch.complex64)
    >>> psi[0] = 1.0
    >>> reg = DenseRegister(psi)
    >>> reg.total_qubits, reg.active_qubits, reg.batch_size
    (2, 2, 3)
    """

    kind = RegisterKind.DENSE

    def __init__(self, state: torch.Tensor, order: Optional[Sequence[int]] = None) -> None:
        if state.ndim != 3:
            raise ValueError(
                "state must be a 3D tensor with shape (active_dim, remaining_dim, batch), "
                f"got shape {tuple(state.shape)}"
            )
        n_active = _log2_exact(state.shape[0], "active")
        n_remain = _log2_exact(state.shape[1], "remaining")
        if state.shape[2] < 1:
            raise ValueError("batch size must be >= 1")

        n = n_active + n_remain
        if order is None:
            order = tuple(range(n))
        order = tuple(int(q) for q in order)
        if sorted(order) != list(range(n)):
            raise QubitCountMismatch(
                f"order {order} is not a permutation of the {n} qubits implied by the state shape"
            )

        if not torch.is_complex(state):
            state = state.to(dtype=torch.complex128)

        self._state = state
        self._order: Tuple[int, ...] = order
        self._n_active = n_active
        self._version = 0

    def raw_state(self) -> torch.Tensor:
        return self._state

    @property
    def order(self) -> Tuple[int, ...]:
        return self._order

    @property
    def active_qubits(self) -> int:
        return self._n_active

    @property
    def batch_size(self) -> int:
        return self._state.shape[2]

    def copy(self) -> "DenseRegister":
        return DenseRegister(self._state.clone(), order=self._order)

    def view_batch(self, index: int) -> "AbstractRegister":
        from qfocus.register.view import BatchView

        return BatchView(self, index)

    def _check_writable(self) -> None:
        return None

    def _assign(self, state: torch.Tensor, order: Tuple[int, ...], n_active: int) -> None:
        if state.shape[0] != 2**n_active or state.shape[1] != 2 ** (len(order) - n_active):
            raise QubitCountMismatch(
                f"state shape {tuple(state.shape)} does not match {n_active} active "
                f"of {len(order)} qubits"
            )
        self._state = state
        self._order = tuple(order)
        self._n_active = n_active
        self._version += 1


__all__ = ["DenseRegister"]
