"""Backend routines that act on register amplitudes."""

from .statevector import apply_gate_, apply_matrix_, measure_probs

__all__ = ["apply_matrix_", "apply_gate_", "measure_probs"]
