"""qfocus - batched quantum registers with focusable active qubits."""

__version__ = "0.1.0"

# Operators
from .backend import apply_gate_, apply_matrix_, measure_probs
from .circuit import BlockKind, ChainBlock, PrimitiveBlock, apply_block_, chain, control, put

# Diagnostics
from .diagnostics import (
    assert_normalized,
    debug_context,
    is_debug_enabled,
    set_debug_enabled,
    state_norm,
)

# Errors
from .errors import (
    BatchSizeMismatch,
    InvalidBasisState,
    InvalidQubitIndex,
    MalformedProbability,
    QubitCountMismatch,
    ReadOnlyRegisterError,
    RegisterError,
    RenderError,
    StaleViewError,
    TexFilenameError,
)

# Registers
from .register import (
    AbstractRegister,
    BatchView,
    DenseRegister,
    RegisterKind,
    active_qubits,
    addbit_,
    basis,
    batch_size,
    datatype,
    density_matrix,
    focus_,
    from_state,
    join,
    measure,
    measure_collapse_,
    measure_remove_,
    measure_reset_,
    normalize_,
    product_register,
    rand_register,
    raw_state,
    relax_,
    remaining_qubits,
    repeat,
    rho,
    select,
    select_,
    total_qubits,
    uniform_register,
    view_batch,
    zero_register,
)

# Rendering
from .viz import FontFamily, TexStyle, iter_tex_lines, latexify, texcircuit

__all__ = [
    # Version
    "__version__",
    # Registers
    "AbstractRegister",
    "RegisterKind",
    "DenseRegister",
    "BatchView",
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
    # Operators
    "apply_matrix_",
    "apply_gate_",
    "measure_probs",
    "apply_block_",
    # Blocks
    "BlockKind",
    "PrimitiveBlock",
    "ChainBlock",
    "put",
    "control",
    "chain",
    # Rendering
    "FontFamily",
    "TexStyle",
    "iter_tex_lines",
    "texcircuit",
    "latexify",
    # Diagnostics
    "state_norm",
    "assert_normalized",
    "is_debug_enabled",
    "set_debug_enabled",
    "debug_context",
    # Errors
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
