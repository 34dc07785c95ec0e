"""Tests for measurement, collapse variants and density matrices."""

from __future__ import annotations

import math

import pytest
import torch

from qfocus.backend import measure_probs
from qfocus.diagnostics import state_norm
from qfocus.errors import InvalidBasisState, MalformedProbability
from qfocus.register import (
    DenseRegister,
    density_matrix,
    from_state,
    measure,
    product_register,
    uniform_register,
)


def test_measure_plus_state_is_balanced(torch_rng: torch.Generator) -> None:
    """|+> yields outcome 1 with frequency close to 0.5."""
    reg = from_state(torch.tensor([1.0, 1.0], dtype=torch.complex64) / math.sqrt(2.0))
    shots = 10000
    samples = measure(reg, shots, generator=torch_rng)
    assert samples.shape == (shots, 1)
    assert samples.dtype == torch.int64
    freq = samples.float().mean().item()
    assert abs(freq - 0.5) < 0.03


def test_measure_basis_state_is_deterministic() -> None:
    reg = product_register(3, 6)
    assert torch.all(reg.measure(50) == 6)


def test_measure_is_independent_per_batch() -> None:
    states = torch.tensor([[1.0, 0.0], [0.0, 1.0]], dtype=torch.complex64)
    reg = from_state(states)
    samples = reg.measure(20)
    assert samples.shape == (20, 2)
    assert torch.all(samples[:, 0] == 0)
    assert torch.all(samples[:, 1] == 1)


def test_measure_does_not_mutate(torch_rng: torch.Generator) -> None:
    reg = uniform_register(2).focus_(1)
    before = reg.raw_state().clone()
    reg.measure(100, generator=torch_rng)
    assert torch.equal(reg.raw_state(), before)
    assert reg.active_locs == (1,)


def test_measure_reads_only_active_qubits() -> None:
    reg = product_register(3, 0b100).focus_(2)
    assert torch.all(reg.measure(10) == 1)


def test_measure_rejects_unnormalized_state() -> None:
    state = torch.full((2, 1, 1), 2.0, dtype=torch.complex64)
    reg = DenseRegister(state)
    with pytest.raises(MalformedProbability, match="sum to 1"):
        reg.measure()


def test_measure_rejects_non_finite_state() -> None:
    state = torch.tensor([float("nan"), 0.0], dtype=torch.complex64).reshape(2, 1, 1)
    with pytest.raises(MalformedProbability, match="non-finite"):
        DenseRegister(state).measure()


def test_measure_rejects_bad_ntimes() -> None:
    with pytest.raises(ValueError, match="ntimes"):
        product_register(1, 0).measure(0)


def test_measure_collapse_keeps_qubits(torch_rng: torch.Generator) -> None:
    reg = uniform_register(2).focus_(0)
    outcomes = reg.measure_collapse_(generator=torch_rng)
    assert outcomes.shape == (1,)
    assert reg.total_qubits == 2
    assert reg.active_locs == (0,)
    assert torch.allclose(state_norm(reg.raw_state()), torch.ones(1), atol=1e-5)
    assert torch.all(reg.measure(100) == outcomes[0])


def test_measure_remove_drops_active_qubits(torch_rng: torch.Generator) -> None:
    reg = uniform_register(3, nbatch=2).focus_(1)
    outcomes = reg.measure_remove_(generator=torch_rng)
    assert outcomes.shape == (2,)
    assert reg.total_qubits == 2
    assert reg.active_qubits == 0
    assert torch.allclose(state_norm(reg.raw_state()), torch.ones(2), atol=1e-5)
    reg.relax_()
    assert reg.active_qubits == 2


def test_measure_reset_moves_to_value(torch_rng: torch.Generator) -> None:
    reg = product_register(1, 1)
    outcomes = reg.measure_reset_(0, generator=torch_rng)
    assert outcomes.tolist() == [1]
    assert torch.all(reg.measure(20) == 0)


def test_measure_reset_rejects_bad_value() -> None:
    reg = product_register(1, 0)
    with pytest.raises(InvalidBasisState):
        reg.measure_reset_(2)


def test_probabilities_and_measure_probs_agree() -> None:
    reg = uniform_register(2)
    expected = torch.full((4, 1), 0.25)
    assert torch.allclose(reg.probabilities(), expected, atol=1e-6)
    assert torch.allclose(measure_probs(reg), expected, atol=1e-6)


def test_density_matrix_of_bell_pair_is_mixed() -> None:
    amp = 1.0 / math.sqrt(2.0)
    reg = from_state(torch.tensor([amp, 0.0, 0.0, amp], dtype=torch.complex128))
    reg.focus_(0)
    rho = density_matrix(reg)
    assert rho.shape == (2, 2, 1)
    expected = torch.tensor([[0.5, 0.0], [0.0, 0.5]], dtype=torch.complex128)
    assert torch.allclose(rho[:, :, 0], expected, atol=1e-12)


def test_density_matrix_of_pure_state() -> None:
    reg = uniform_register(1, dtype=torch.complex128)
    rho = reg.rho()
    assert torch.allclose(rho[:, :, 0], torch.full((2, 2), 0.5, dtype=torch.complex128))
