"""Benchmark register layout changes and focused gate application."""

import time
from typing import Dict

import torch

from qfocus.backend import apply_gate_
from qfocus.gates import standard as stdgates
from qfocus.register import rand_register


def benchmark_focus_relax(
    n_qubits: int,
    n_rounds: int = 1000,
    batch_size: int = 1,
    device: str = "cpu",
    dtype: torch.dtype = torch.complex64,
) -> Dict[str, float]:
    """Benchmark a focus_/relax_ round trip on a two-qubit subset.

    Args:
        n_qubits: Number of qubits.
        n_rounds: Number of focus/relax round trips.
        batch_size: Batch size.
        device: Device ('cpu' or 'cuda').
        dtype: Data type.

    Returns:
        Dictionary with timing results.
    """
    reg = rand_register(n_qubits, nbatch=batch_size, device=device, dtype=dtype)

    # Warmup
    for _ in range(10):
        reg.focus_(n_qubits - 1, 0).relax_()

    start = time.perf_counter()
    for i in range(n_rounds):
        a = i % n_qubits
        b = (i + 1) % n_qubits
        reg.focus_(a, b).relax_()
    end = time.perf_counter()

    total_time = end - start
    return {
        "n_qubits": n_qubits,
        "batch_size": batch_size,
        "n_rounds": n_rounds,
        "total_time_sec": total_time,
        "time_per_round_sec": total_time / n_rounds,
    }


def benchmark_focused_gate(
    n_qubits: int,
    n_gates: int = 1000,
    batch_size: int = 1,
    device: str = "cpu",
    dtype: torch.dtype = torch.complex64,
) -> Dict[str, float]:
    """Benchmark apply_gate_ with the target cycling over all qubits."""
    reg = rand_register(n_qubits, nbatch=batch_size, device=device, dtype=dtype)
    gate = stdgates.H(dtype=dtype, device=torch.device(device))

    for _ in range(10):
        apply_gate_(reg, gate, [0])

    start = time.perf_counter()
    for i in range(n_gates):
        apply_gate_(reg, gate, [i % n_qubits])
    end = time.perf_counter()

    total_time = end - start
    return {
        "n_qubits": n_qubits,
        "batch_size": batch_size,
        "n_gates": n_gates,
        "total_time_sec": total_time,
        "time_per_gate_sec": total_time / n_gates,
        "gates_per_sec": n_gates / total_time,
    }


def benchmark_measure(
    n_qubits: int,
    ntimes: int = 10000,
    batch_size: int = 10,
    device: str = "cpu",
) -> Dict[str, float]:
    """Benchmark sampling ``ntimes`` outcomes from every batch member."""
    reg = rand_register(n_qubits, nbatch=batch_size, device=device)
    reg.measure(10)

    start = time.perf_counter()
    samples = reg.measure(ntimes)
    end = time.perf_counter()

    total_time = end - start
    return {
        "n_qubits": n_qubits,
        "batch_size": batch_size,
        "n_samples": samples.numel(),
        "total_time_sec": total_time,
        "samples_per_sec": samples.numel() / total_time,
    }


if __name__ == "__main__":
    print("Benchmarking register focus...")

    results = benchmark_focus_relax(n_qubits=12, n_rounds=500)
    print("Focus/relax round trip (12 qubits, 500 rounds):")
    print(f"  Time per round: {results['time_per_round_sec']*1e6:.2f} μs")

    results = benchmark_focused_gate(n_qubits=12, n_gates=500, batch_size=8)
    print("\nFocused H gate (12 qubits, batch_size=8, 500 gates):")
    print(f"  Time per gate: {results['time_per_gate_sec']*1e6:.2f} μs")
    print(f"  Gates per second: {results['gates_per_sec']:.0f}")

    results = benchmark_measure(n_qubits=10, ntimes=10000, batch_size=10)
    print("\nMeasurement (10 qubits, batch_size=10, 10000 shots each):")
    print(f"  Samples per second: {results['samples_per_sec']:.0f}")
