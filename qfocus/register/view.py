"""Read-only single-batch views of a dense register."""

from __future__ import annotations

from typing import Tuple

import torch

from qfocus.errors import ReadOnlyRegisterError, StaleViewError
from qfocus.register.base import AbstractRegister, RegisterKind
from qfocus.register.dense import DenseRegister


class BatchView(AbstractRegister):
    """
    Batch slot ``index`` (0-indexed) of a :class:`DenseRegister`.

    ``raw_state()`` aliases the parent's storage, so the view costs no copy.
    The view is read-only: every mutating operation raises
    :class:`ReadOnlyRegisterError`. Once the parent changes its layout or
    storage, every operation on the view raises :class:`StaleViewError`.
    Use :meth:`copy` to get an independent register.
    """

    kind = RegisterKind.VIEW

    def __init__(self, parent: DenseRegister, index: int) -> None:
        if not 0 <= index < parent.batch_size:
            raise IndexError(f"batch index {index} out of range [0, {parent.batch_size})")
        self._parent = parent
        self._index = index
        self._version = parent._version

    def _fresh_parent(self) -> DenseRegister:
        if self._parent._version != self._version:
            raise StaleViewError("parent register changed after this batch view was taken")
        return self._parent

    @property
    def index(self) -> int:
        return self._index

    def raw_state(self) -> torch.Tensor:
        state = self._fresh_parent().raw_state()
        return state[:, :, self._index : self._index + 1]

    @property
    def order(self) -> Tuple[int, ...]:
        return self._fresh_parent().order

    @property
    def active_qubits(self) -> int:
        return self._fresh_parent().active_qubits

    @property
    def batch_size(self) -> int:
        return 1

    def copy(self) -> DenseRegister:
        return DenseRegister(self.raw_state().clone(), order=self.order)

    def view_batch(self, index: int) -> "BatchView":
        if index != 0:
            raise IndexError(f"batch index {index} out of range [0, 1)")
        self._fresh_parent()
        return self

    def _check_writable(self) -> None:
        raise ReadOnlyRegisterError(
            "batch views are read-only; call copy() to get a mutable register"
        )

    def _assign(self, state: torch.Tensor, order: Tuple[int, ...], n_active: int) -> None:
        self._check_writable()


__all__ = ["BatchView"]
