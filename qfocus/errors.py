"""Error taxonomy for qfocus.

Two independent roots keep register failures apart from cosmetic rendering
failures:

- RegisterError: every failure of qubit accounting, focusing, selection,
  measurement or composition on a register.
- RenderError: failures of the circuit renderer (e.g. a bad output filename).

Register errors additionally derive from the builtin exception a caller would
naturally expect (ValueError for bad arguments, TypeError for forbidden
mutation, ...), so ``except ValueError`` keeps working around index checks.
"""

from __future__ import annotations

__all__ = [
    "RegisterError",
    "InvalidQubitIndex",
    "QubitCountMismatch",
    "BatchSizeMismatch",
    "InvalidBasisState",
    "MalformedProbability",
    "ReadOnlyRegisterError",
    "StaleViewError",
    "RenderError",
    "TexFilenameError",
]


class RegisterError(Exception):
    """Base exception for all register errors."""


class InvalidQubitIndex(RegisterError, ValueError):
    """A qubit index is out of range, duplicated, or not in the expected set."""


class QubitCountMismatch(RegisterError, ValueError):
    """Qubit accounting does not match what the caller or operator expects."""


class BatchSizeMismatch(RegisterError, ValueError):
    """Registers (or per-batch arguments) disagree on the batch size."""


class InvalidBasisState(RegisterError, ValueError):
    """A basis-state integer lies outside ``[0, 2**active_qubits)``."""


class MalformedProbability(RegisterError, ArithmeticError):
    """A measurement distribution is negative, non-finite or not normalized.

    This signals a defect upstream in how the state was built, not a user
    error in the measurement call itself.
    """


class ReadOnlyRegisterError(RegisterError, TypeError):
    """A mutating operation was attempted on a read-only batch view."""


class StaleViewError(RegisterError, RuntimeError):
    """The parent of a batch view changed its layout after the view was taken."""


class RenderError(Exception):
    """Base exception for circuit rendering errors."""


class TexFilenameError(RenderError, ValueError):
    """Output filename for a TeX document does not end in ``.tex``."""
