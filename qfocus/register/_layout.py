"""Exact qubit-axis permutations for register tensors.

A register tensor has shape ``(2**n_active, 2**n_remain, batch)``. Its flat
basis index is ``a + 2**n_active * r``, and storage bit ``k`` of that index
belongs to the global qubit ``order[k]`` (LSB-first). Changing the layout is
one ``permute`` over per-qubit axes followed by a ``reshape``, so amplitudes
are moved but never recomputed.
"""

from __future__ import annotations

import operator
from typing import Iterable, List, Sequence, Tuple

import torch

from qfocus.errors import InvalidQubitIndex


def _axis_qubits(order: Sequence[int], n_active: int) -> List[int]:
    # Row-major reshape puts the most significant bit of each block first.
    n = len(order)
    active = [order[n_active - 1 - i] for i in range(n_active)]
    remain = [order[n - 1 - i] for i in range(n - n_active)]
    return active + remain


def reorder(
    state: torch.Tensor,
    order: Sequence[int],
    n_active: int,
    new_order: Sequence[int],
    new_n_active: int,
) -> torch.Tensor:
    """
    Move ``state`` from layout ``(order, n_active)`` to ``(new_order, new_n_active)``.

    Both orders must be permutations of the same qubit set. The result has
    shape ``(2**new_n_active, 2**(n - new_n_active), batch)``.
    """
    n = len(order)
    batch = state.shape[-1]
    new_shape = (2**new_n_active, 2 ** (n - new_n_active), batch)

    # A bare reshape keeps the flat index only when the active width is unchanged.
    if tuple(order) == tuple(new_order) and n_active == new_n_active:
        return state.reshape(new_shape)

    current = _axis_qubits(order, n_active)
    wanted = _axis_qubits(new_order, new_n_active)
    perm = [current.index(q) for q in wanted] + [n]
    return state.reshape((2,) * n + (batch,)).permute(perm).reshape(new_shape)


def to_canonical(state: torch.Tensor, order: Sequence[int], n_active: int) -> torch.Tensor:
    """Return a ``(2**n, batch)`` tensor where qubit ``j`` is bit ``j`` of the index."""
    n = len(order)
    flat = reorder(state, order, n_active, tuple(range(n)), n)
    return flat.reshape(2**n, state.shape[-1])


def check_locs(locs: Iterable[int], n_qubits: int) -> Tuple[int, ...]:
    """
    Validate global qubit indices and return them as a tuple of ints.

    Raises
    ------
    InvalidQubitIndex
        If an index is not an integer, out of ``[0, n_qubits)``, or repeated.
    """
    locs = tuple(locs)
    out: List[int] = []
    for loc in locs:
        try:
            q = operator.index(loc)
        except TypeError as exc:
            raise InvalidQubitIndex(f"qubit index must be an integer, got {loc!r}") from exc
        if q < 0 or q >= n_qubits:
            raise InvalidQubitIndex(f"qubit index {q} out of range [0, {n_qubits})")
        if q in out:
            raise InvalidQubitIndex(f"duplicate qubit index {q} in {tuple(locs)}")
        out.append(q)
    return tuple(out)


def flatten_locs(locs: Sequence) -> Tuple:
    """Accept both ``f(0, 2)`` and ``f([0, 2])`` call styles."""
    if len(locs) == 1 and not isinstance(locs[0], int) and hasattr(locs[0], "__iter__"):
        return tuple(locs[0])
    return tuple(locs)
