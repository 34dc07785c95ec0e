"""Operator application on a register's active qubits.

This is the consumer side of the register query surface: it reads
``active_qubits``, ``batch_size`` and ``raw_state`` to validate an operator
and then overwrites the amplitudes in place. Registers know nothing about
this module.
"""

from __future__ import annotations

from typing import Sequence

import torch

from qfocus.diagnostics import assert_normalized, is_debug_enabled
from qfocus.errors import InvalidQubitIndex, QubitCountMismatch, ReadOnlyRegisterError
from qfocus.register import AbstractRegister, RegisterKind


def _einsum_active(matrix: torch.Tensor, state: torch.Tensor) -> torch.Tensor:
    """Contract ``matrix`` with the active axis of a register tensor."""
    return torch.einsum("ij,jrb->irb", matrix, state)


def apply_matrix_(reg: AbstractRegister, matrix: torch.Tensor) -> AbstractRegister:
    """
    Apply a ``(2**active, 2**active)`` matrix to every batch member in place.

    Args:
        reg: Target register. Batch views are rejected.
        matrix: Square operator over the active qubits, LSB-first.

    Returns:
        ``reg``, for chaining.

    Raises:
        ReadOnlyRegisterError: If ``reg`` is a batch view.
        QubitCountMismatch: If the matrix size does not match the active space.
    """
    if reg.kind is RegisterKind.VIEW:
        raise ReadOnlyRegisterError("operators cannot be applied to a batch view")

    dim = 2**reg.active_qubits
    if matrix.dim() != 2 or matrix.shape != (dim, dim):
        raise QubitCountMismatch(
            f"operator of shape {tuple(matrix.shape)} does not fit "
            f"{reg.active_qubits} active qubits (expected ({dim}, {dim}))"
        )

    state = reg.raw_state()
    matrix = matrix.to(dtype=state.dtype, device=state.device)
    state.copy_(_einsum_active(matrix, state))

    if is_debug_enabled():
        assert_normalized(state, atol=1e-4)

    return reg


def apply_gate_(
    reg: AbstractRegister, gate: torch.Tensor, locs: Sequence[int]
) -> AbstractRegister:
    """
    Apply ``gate`` to the active qubits at local positions ``locs``.

    ``locs[0]`` is the least significant bit of the gate's matrix index.
    The register's focus is restored exactly afterwards.

    Raises:
        InvalidQubitIndex: If a position is outside the active set or repeated.
        QubitCountMismatch: If the gate size does not match ``len(locs)``.
    """
    locs = tuple(locs)
    n_active = reg.active_qubits
    for loc in locs:
        if loc < 0 or loc >= n_active:
            raise InvalidQubitIndex(f"gate location {loc} out of range [0, {n_active})")
    if len(set(locs)) != len(locs):
        raise InvalidQubitIndex(f"duplicate gate locations {locs}")
    dim = 2 ** len(locs)
    if gate.shape != (dim, dim):
        raise QubitCountMismatch(
            f"gate of shape {tuple(gate.shape)} does not act on {len(locs)} qubits"
        )

    saved = reg.active_locs
    reg.focus_(*(saved[loc] for loc in locs))
    try:
        apply_matrix_(reg, gate)
    finally:
        reg.focus_(*saved)
    return reg


def measure_probs(reg: AbstractRegister) -> torch.Tensor:
    """
    Probability of each active basis state, per batch member.

    Unlike ``reg.probabilities()`` this renormalizes silently instead of
    rejecting an unnormalized state.

    Returns:
        Real tensor of shape ``(2**active, batch)``.
    """
    probs = (reg.raw_state().abs() ** 2).sum(dim=1).contiguous()
    probs_sum = probs.sum(dim=0, keepdim=True)
    return probs / torch.clamp(probs_sum, min=1e-12)


__all__ = ["apply_matrix_", "apply_gate_", "measure_probs"]
