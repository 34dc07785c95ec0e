"""Batched quantum registers with focusable active qubits.

Examples
--------
    >>> from qfocus.register import zero_register, join
    >>> reg = join(zero_register(1), zero_register(1))
    >>> reg.total_qubits
    2
    >>> reg.focus_(1).active_qubits
    1
    >>> reg.relax_().active_qubits
    2
"""

from .alloc import (
    from_state,
    product_register,
    rand_register,
    resolve_device,
    uniform_register,
    zero_register,
)
from .base import PROBABILITY_ATOL, AbstractRegister, RegisterKind
from .dense import DenseRegister
from .ops import (
    active_qubits,
    addbit_,
    basis,
    batch_size,
    datatype,
    density_matrix,
    focus_,
    join,
    measure,
    measure_collapse_,
    measure_remove_,
    measure_reset_,
    normalize_,
    raw_state,
    relax_,
    remaining_qubits,
    repeat,
    rho,
    select,
    select_,
    total_qubits,
    view_batch,
)
from .view import BatchView

__all__ = [
    "AbstractRegister",
    "RegisterKind",
    "DenseRegister",
    "BatchView",
    "PROBABILITY_ATOL",
    "resolve_device",
    "zero_register",
    "product_register",
    "uniform_register",
    "rand_register",
    "from_state",
    "total_qubits",
    "active_qubits",
    "remaining_qubits",
    "batch_size",
    "datatype",
    "raw_state",
    "view_batch",
    "basis",
    "density_matrix",
    "rho",
    "focus_",
    "relax_",
    "measure",
    "measure_collapse_",
    "measure_remove_",
    "measure_reset_",
    "select_",
    "select",
    "addbit_",
    "normalize_",
    "join",
    "repeat",
]
