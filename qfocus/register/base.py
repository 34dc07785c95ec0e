"""Abstract quantum register.

A register tracks ``batch_size`` independent states over ``total_qubits``
qubits. Only the first ``active_qubits`` of them (in focus order) are exposed
to operators. The amplitude tensor always has shape
``(2**active_qubits, 2**remaining_qubits, batch_size)``.

Bit-order convention: LSB-first. ``focus_(r, 2, 0)`` makes qubit 2 the least
significant bit and qubit 0 the next bit of the active index; measurement
outcomes and ``select_`` bits are read the same way.

Register kinds form a closed set (:class:`RegisterKind`): dense registers own
their tensor, batch views alias one batch slot of a dense register and are
read-only. Every mutating operation funnels through ``_check_writable`` and
``_assign`` so that a view rejects it before any work is done.
"""

from __future__ import annotations

import operator
from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Optional, Sequence, Tuple, Union

import torch

from qfocus.diagnostics import state_norm
from qfocus.errors import (
    BatchSizeMismatch,
    InvalidBasisState,
    InvalidQubitIndex,
    MalformedProbability,
    QubitCountMismatch,
)
from qfocus.logging import get_logger
from qfocus.register._layout import check_locs, flatten_locs, reorder

if TYPE_CHECKING:
    from qfocus.register.dense import DenseRegister

logger = get_logger(__name__)

Bits = Union[int, Sequence[int], torch.Tensor]

# Loose enough for complex64 amplitudes.
PROBABILITY_ATOL = 1e-4


class RegisterKind(Enum):
    """Closed set of register variants."""

    DENSE = "dense"
    VIEW = "view"


class AbstractRegister(ABC):
    """Common behaviour of dense registers and batch views."""

    kind: RegisterKind

    # -- storage capability -------------------------------------------------

    @abstractmethod
    def raw_state(self) -> torch.Tensor:
        """Return the amplitude tensor ``(active_dim, remaining_dim, batch)``."""

    @property
    @abstractmethod
    def order(self) -> Tuple[int, ...]:
        """Global qubit index of every storage bit, active qubits first."""

    @property
    @abstractmethod
    def active_qubits(self) -> int:
        """Number of qubits currently exposed to operators."""

    @property
    @abstractmethod
    def batch_size(self) -> int:
        """Number of independent states tracked together."""

    @abstractmethod
    def copy(self) -> "DenseRegister":
        """Return an owning register with its own storage."""

    @abstractmethod
    def view_batch(self, index: int) -> "AbstractRegister":
        """Return a read-only register over batch slot ``index`` (0-indexed)."""

    @abstractmethod
    def _check_writable(self) -> None:
        """Raise if this register may not be mutated."""

    @abstractmethod
    def _assign(self, state: torch.Tensor, order: Tuple[int, ...], n_active: int) -> None:
        """Replace storage and layout in one step."""

    # -- accounting ---------------------------------------------------------

    @property
    def total_qubits(self) -> int:
        return len(self.order)

    @property
    def remaining_qubits(self) -> int:
        return self.total_qubits - self.active_qubits

    @property
    def active_locs(self) -> Tuple[int, ...]:
        """Global indices of the active qubits, in focus order."""
        return self.order[: self.active_qubits]

    @property
    def datatype(self) -> torch.dtype:
        return self.raw_state().dtype

    def basis(self) -> range:
        """All basis-state integers of the register's full Hilbert space."""
        return range(2**self.total_qubits)

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(batch_size={self.batch_size}, dtype={self.datatype})"
            f"\n    active qubits: {self.active_qubits}/{self.total_qubits}"
        )

    # -- focusing -------------------------------------------------------------

    def focus_(self, *locs: int) -> "AbstractRegister":
        """
        Make the qubits at global indices ``locs`` the active set, in order.

        Accepts ``reg.focus_(0, 2)`` as well as ``reg.focus_([0, 2])``.
        Qubits that are not focused keep their current relative order in the
        remaining set.

        Raises
        ------
        InvalidQubitIndex
            If an index is out of range or repeated.
        """
        self._check_writable()
        locs = check_locs(flatten_locs(locs), self.total_qubits)
        chosen = set(locs)
        new_order = locs + tuple(q for q in self.order if q not in chosen)
        self._relayout(new_order, len(locs))
        return self

    def relax_(
        self, locs: Union[int, Sequence[int], None] = None, nbit: Optional[int] = None
    ) -> "AbstractRegister":
        """
        Return ``locs`` (default: every active qubit) to the remaining set.

        When no qubit is left active, the register goes back to its unfocused
        layout: every qubit active, in ascending global order. ``relax_()``
        therefore always restores the layout of a freshly allocated register.

        Parameters
        ----------
        locs:
            Global index, or indices, of currently active qubits.
        nbit:
            Expected total qubit count; checked before anything is moved.

        Raises
        ------
        InvalidQubitIndex
            If a loc is out of range, repeated, or not active.
        QubitCountMismatch
            If ``nbit`` is given and differs from ``total_qubits``.
        """
        self._check_writable()
        if nbit is not None and nbit != self.total_qubits:
            raise QubitCountMismatch(
                f"relax_ expected a register of {nbit} qubits, got {self.total_qubits}"
            )

        active = self.active_locs
        if locs is None:
            released = active
        else:
            if not hasattr(locs, "__iter__"):
                locs = (locs,)
            released = check_locs(locs, self.total_qubits)
            for q in released:
                if q not in active:
                    raise InvalidQubitIndex(f"qubit {q} is not active (active: {active})")

        kept = tuple(q for q in active if q not in released)
        if kept:
            moved = tuple(q for q in active if q in released)
            new_order = kept + moved + self.order[self.active_qubits :]
            self._relayout(new_order, len(kept))
        else:
            n = self.total_qubits
            self._relayout(tuple(range(n)), n)
        return self

    def _relayout(self, new_order: Tuple[int, ...], new_n_active: int) -> None:
        state = reorder(
            self.raw_state(), self.order, self.active_qubits, new_order, new_n_active
        )
        logger.debug("layout %s/%d -> %s/%d", self.order, self.active_qubits, new_order, new_n_active)
        self._assign(state, new_order, new_n_active)

    # -- measurement ------------------------------------------------------------

    def probabilities(self, atol: float = PROBABILITY_ATOL) -> torch.Tensor:
        """
        Return the ``(2**active_qubits, batch_size)`` outcome distribution.

        Raises
        ------
        MalformedProbability
            If a probability is negative or non-finite, or a batch column does
            not sum to 1 within ``atol``.
        """
        state = self.raw_state()
        probs = (state.abs() ** 2).sum(dim=1)
        if not torch.all(torch.isfinite(probs)):
            raise MalformedProbability("measurement probabilities contain non-finite values")
        if torch.any(probs < 0):
            raise MalformedProbability("measurement probabilities contain negative values")
        sums = probs.sum(dim=0)
        if not torch.allclose(sums, torch.ones_like(sums), atol=atol, rtol=0.0):
            raise MalformedProbability(
                f"measurement probabilities do not sum to 1 within {atol}: "
                f"{sums.detach().cpu().tolist()}"
            )
        return probs / sums

    def measure(
        self, ntimes: int = 1, generator: Optional[torch.Generator] = None
    ) -> torch.Tensor:
        """
        Sample active-qubit outcomes without changing the register.

        Parameters
        ----------
        ntimes:
            Number of shots per batch member.
        generator:
            Optional torch.Generator for reproducible sampling.

        Returns
        -------
        torch.Tensor
            int64 tensor of shape ``(ntimes, batch_size)`` with values in
            ``[0, 2**active_qubits)``.
        """
        if ntimes <= 0:
            raise ValueError(f"ntimes must be a positive integer, got {ntimes}")
        probs = self.probabilities()
        samples = torch.multinomial(
            probs.T.contiguous(), num_samples=ntimes, replacement=True, generator=generator
        )
        return samples.T.contiguous()

    def measure_collapse_(self, generator: Optional[torch.Generator] = None) -> torch.Tensor:
        """
        Measure the active qubits once and collapse onto the outcome.

        The active qubits stay in the register; the state is renormalized.
        Returns the ``(batch_size,)`` outcomes.
        """
        self._check_writable()
        outcomes = self.measure(1, generator=generator)[0]
        state = self.raw_state()
        index = self._gather_index(outcomes, state.shape[1])
        collapsed = torch.zeros_like(state).scatter_(0, index, state.gather(0, index))
        self._assign(collapsed, self.order, self.active_qubits)
        self.normalize_()
        return outcomes

    def measure_remove_(self, generator: Optional[torch.Generator] = None) -> torch.Tensor:
        """
        Measure the active qubits once and remove them from the register.

        Equivalent to ``select_`` on the sampled outcomes followed by
        ``normalize_``. Returns the ``(batch_size,)`` outcomes.
        """
        self._check_writable()
        outcomes = self.measure(1, generator=generator)[0]
        self.select_(outcomes)
        self.normalize_()
        return outcomes

    def measure_reset_(
        self, value: int = 0, generator: Optional[torch.Generator] = None
    ) -> torch.Tensor:
        """Measure the active qubits, then reset them to basis state ``value``."""
        self._check_writable()
        self._basis_indices(value)
        outcomes = self.measure(1, generator=generator)[0]
        state = self.raw_state()
        picked = state.gather(0, self._gather_index(outcomes, state.shape[1]))
        reset = torch.zeros_like(state)
        reset[value] = picked[0]
        self._assign(reset, self.order, self.active_qubits)
        self.normalize_()
        return outcomes

    # -- selection ------------------------------------------------------------

    def _basis_indices(self, bits: Bits) -> torch.Tensor:
        limit = 2**self.active_qubits
        if isinstance(bits, torch.Tensor):
            if bits.dtype.is_floating_point or bits.is_complex() or bits.dtype == torch.bool:
                raise InvalidBasisState(f"basis states must be integers, got dtype {bits.dtype}")
            values = [int(b) for b in bits.reshape(-1).tolist()]
        else:
            raw = bits if isinstance(bits, Sequence) else [bits]
            try:
                values = [operator.index(b) for b in raw]
            except TypeError as exc:
                raise InvalidBasisState(f"basis states must be integers, got {bits!r}") from exc

        if len(values) == 1:
            values = values * self.batch_size
        elif len(values) != self.batch_size:
            raise BatchSizeMismatch(
                f"expected 1 or {self.batch_size} basis states, got {len(values)}"
            )
        for v in values:
            if v < 0 or v >= limit:
                raise InvalidBasisState(f"basis state {v} out of range [0, {limit})")
        return torch.tensor(values, dtype=torch.int64, device=self.raw_state().device)

    @staticmethod
    def _gather_index(indices: torch.Tensor, remaining_dim: int) -> torch.Tensor:
        return indices.reshape(1, 1, -1).expand(1, remaining_dim, indices.numel())

    def select_(self, bits: Bits, out: Optional["AbstractRegister"] = None) -> "AbstractRegister":
        """
        Project onto the active basis state(s) ``bits`` and drop the active axis.

        ``bits`` is one integer for the whole batch or one per batch member.
        Afterwards the register has ``active_qubits == 0`` and the surviving
        qubits are renumbered ``0..m-1`` by ascending former index; call
        ``relax_()`` or ``focus_`` before applying operators again. The result
        is not renormalized.

        Parameters
        ----------
        bits:
            Basis-state integer(s) of the active qubits.
        out:
            If given, the selection is written into ``out`` (which must have
            the same batch size) and ``self`` is left untouched.

        Returns
        -------
        AbstractRegister
            The register holding the selection (``self`` or ``out``).
        """
        target = self if out is None else out
        target._check_writable()
        if target.batch_size != self.batch_size:
            raise BatchSizeMismatch(
                f"out has batch size {target.batch_size}, expected {self.batch_size}"
            )

        indices = self._basis_indices(bits)
        state = self.raw_state()
        selected = state.gather(0, self._gather_index(indices, state.shape[1]))

        remaining = self.order[self.active_qubits :]
        rank = {q: i for i, q in enumerate(sorted(remaining))}
        new_order = tuple(rank[q] for q in remaining)
        logger.debug("selected %s on %s, %d qubits remain", indices.tolist(), self.active_locs, len(new_order))
        target._assign(selected, new_order, 0)
        return target

    def select(self, bits: Bits) -> "DenseRegister":
        """Non-mutating :meth:`select_`; the result shares no storage with ``self``."""
        return self.copy().select_(bits)

    # -- other mutations ----------------------------------------------------------

    def addbit_(self, n: int) -> "AbstractRegister":
        """
        Append ``n`` qubits in |0> at the high end of the remaining set.

        The new qubits get global indices ``total_qubits .. total_qubits+n-1``.
        """
        self._check_writable()
        if n < 0:
            raise ValueError(f"n must be >= 0, got {n}")
        if n == 0:
            return self
        state = self.raw_state()
        active_dim, remaining_dim, batch = state.shape
        grown = state.new_zeros((active_dim, remaining_dim * 2**n, batch))
        grown[:, :remaining_dim, :] = state
        total = self.total_qubits
        self._assign(grown, self.order + tuple(range(total, total + n)), self.active_qubits)
        return self

    def normalize_(self) -> "AbstractRegister":
        """Rescale every batch member to unit norm."""
        self._check_writable()
        state = self.raw_state()
        norms = state_norm(state)
        if torch.any(norms < 1e-12):
            raise MalformedProbability("cannot normalize a zero-norm state")
        self._assign(state / norms.to(state.dtype), self.order, self.active_qubits)
        return self

    # -- derived quantities ----------------------------------------------------------

    def density_matrix(self) -> torch.Tensor:
        """
        Reduced density matrix of the active qubits.

        Returns a ``(2**active_qubits, 2**active_qubits, batch_size)`` tensor,
        tracing out the remaining qubits.
        """
        psi = self.raw_state()
        return torch.einsum("arb,crb->acb", psi, psi.conj())

    rho = density_matrix


__all__ = ["AbstractRegister", "RegisterKind", "PROBABILITY_ATOL"]
