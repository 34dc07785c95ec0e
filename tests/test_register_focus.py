"""Tests for focus_/relax_ subspace algebra."""

from __future__ import annotations

import pytest
import torch

from qfocus.errors import InvalidQubitIndex, QubitCountMismatch
from qfocus.register import focus_, from_state, product_register, rand_register, relax_


def test_focus_reorders_active_axis() -> None:
    """locs[0] becomes the least significant bit of the active index."""
    # Qubit 0 is |1>, qubits 1 and 2 are |0>.
    reg = product_register(3, 0b001)
    focus_(reg, 2, 0)
    assert reg.active_qubits == 2
    assert reg.remaining_qubits == 1
    assert reg.active_locs == (2, 0)
    assert reg.order == (2, 0, 1)
    state = reg.raw_state()
    assert state.shape == (4, 2, 1)
    # active index = q2 + 2 * q0 = 2, remaining index = q1 = 0
    assert state[2, 0, 0] == 1
    assert torch.count_nonzero(state) == 1


def test_focus_matches_manual_permutation() -> None:
    amps = torch.tensor([0.1, 0.2, 0.3, 0.4], dtype=torch.complex128)
    reg = from_state(amps)
    reg.focus_(1, 0)
    # new index = q1 + 2 * q0
    expected = torch.tensor([0.1, 0.3, 0.2, 0.4], dtype=torch.complex128)
    assert torch.equal(reg.raw_state()[:, 0, 0], expected)


def test_focus_accepts_sequence_argument() -> None:
    a = product_register(3, 0b110).focus_(2, 0)
    b = product_register(3, 0b110).focus_([2, 0])
    assert a.order == b.order
    assert torch.equal(a.raw_state(), b.raw_state())


def test_focus_returns_register_for_chaining() -> None:
    reg = product_register(2, 0)
    assert reg.focus_(1) is reg
    assert reg.relax_() is reg


@pytest.mark.parametrize("locs", [(0, 0), (3,), (-1,), (1, 1, 2)])
def test_focus_rejects_invalid_locs(locs) -> None:
    reg = product_register(3, 0)
    with pytest.raises(InvalidQubitIndex):
        reg.focus_(*locs)
    # Register untouched
    assert reg.active_qubits == 3
    assert reg.order == (0, 1, 2)


def test_invalid_qubit_index_is_value_error() -> None:
    reg = product_register(2, 0)
    with pytest.raises(ValueError, match="out of range"):
        reg.focus_(5)


def test_refocus_uses_global_indices() -> None:
    """A second focus_ reads indices globally, not relative to the active set."""
    reg = product_register(3, 0b010)
    reg.focus_(2, 0)
    reg.focus_(1)
    assert reg.active_locs == (1,)
    assert torch.all(reg.measure(20) == 1)


def test_relax_restores_original_state_exactly(torch_rng: torch.Generator) -> None:
    reg = rand_register(4, nbatch=2, generator=torch_rng)
    original = reg.raw_state().clone()
    reg.focus_(3, 1)
    assert not torch.equal(reg.raw_state().reshape(-1), original.reshape(-1))
    relax_(reg)
    assert reg.order == (0, 1, 2, 3)
    assert reg.active_qubits == 4
    assert torch.equal(reg.raw_state(), original)


def test_focus_after_relax_round_trip(torch_rng: torch.Generator) -> None:
    reg = rand_register(4, generator=torch_rng)
    reg.focus_(3, 1)
    focused = reg.raw_state().clone()
    reg.relax_().focus_(3, 1)
    assert reg.active_locs == (3, 1)
    assert torch.equal(reg.raw_state(), focused)


def test_partial_relax_moves_locs_to_remaining() -> None:
    reg = product_register(4, 0b0100)
    reg.focus_(0, 2, 3)
    reg.relax_([2])
    assert reg.active_locs == (0, 3)
    assert reg.remaining_qubits == 2
    assert set(reg.order[reg.active_qubits :]) == {1, 2}
    # q0 = 0 and q3 = 0
    assert torch.all(reg.measure(10) == 0)
    reg.relax_()
    assert reg.active_qubits == 4
    assert torch.all(reg.measure(10) == 0b0100)


def test_relax_rejects_inactive_loc() -> None:
    reg = product_register(3, 0).focus_(0)
    with pytest.raises(InvalidQubitIndex, match="not active"):
        reg.relax_([1])


def test_relax_checks_expected_qubit_count() -> None:
    reg = product_register(3, 0).focus_(1)
    with pytest.raises(QubitCountMismatch):
        reg.relax_(nbit=4)
    # Nothing moved on failure
    assert reg.active_locs == (1,)
    assert reg.relax_(nbit=3).active_qubits == 3


def test_focus_on_prefix_of_current_order() -> None:
    """Focusing a leading qubit keeps it as the active bit."""
    reg = product_register(3, 0b001).focus_(0)
    assert torch.all(reg.measure(10) == 1)
    reg.relax_()
    assert torch.all(reg.measure(10) == 0b001)


def test_relax_accepts_bare_int() -> None:
    reg = product_register(3, 0b011).focus_(0, 1)
    relax_(reg, 1)
    assert reg.active_locs == (0,)
    assert torch.all(reg.measure(10) == 1)
    with pytest.raises(InvalidQubitIndex):
        reg.relax_(2)
