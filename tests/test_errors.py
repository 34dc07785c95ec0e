"""Exception hierarchy checks."""

import pytest

from qfocus import errors


@pytest.mark.parametrize(
    "exc, builtin",
    [
        (errors.InvalidQubitIndex, ValueError),
        (errors.QubitCountMismatch, ValueError),
        (errors.BatchSizeMismatch, ValueError),
        (errors.InvalidBasisState, ValueError),
        (errors.MalformedProbability, ArithmeticError),
        (errors.ReadOnlyRegisterError, TypeError),
        (errors.StaleViewError, RuntimeError),
    ],
)
def test_register_errors_share_a_root(exc, builtin) -> None:
    assert issubclass(exc, errors.RegisterError)
    assert issubclass(exc, builtin)
    assert not issubclass(exc, errors.RenderError)


def test_render_errors_are_separate() -> None:
    assert issubclass(errors.TexFilenameError, errors.RenderError)
    assert issubclass(errors.TexFilenameError, ValueError)
    assert not issubclass(errors.RenderError, errors.RegisterError)
