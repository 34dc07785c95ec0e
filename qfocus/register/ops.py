"""Functional surface over registers.

Each function mirrors a register method so callers can write
``focus_(reg, 0, 2)`` or ``reg.focus_(0, 2)`` interchangeably, plus the two
constructors that build a new register out of existing ones (:func:`join`,
:func:`repeat`).
"""

from __future__ import annotations

from typing import Optional, Sequence, Union

import torch

from qfocus.errors import BatchSizeMismatch
from qfocus.logging import get_logger
from qfocus.register._layout import reorder, to_canonical
from qfocus.register.base import AbstractRegister, Bits
from qfocus.register.dense import DenseRegister

logger = get_logger(__name__)


def total_qubits(reg: AbstractRegister) -> int:
    return reg.total_qubits


def active_qubits(reg: AbstractRegister) -> int:
    return reg.active_qubits


def remaining_qubits(reg: AbstractRegister) -> int:
    return reg.remaining_qubits


def batch_size(reg: AbstractRegister) -> int:
    return reg.batch_size


def datatype(reg: AbstractRegister) -> torch.dtype:
    return reg.datatype


def raw_state(reg: AbstractRegister) -> torch.Tensor:
    return reg.raw_state()


def view_batch(reg: AbstractRegister, index: int) -> AbstractRegister:
    return reg.view_batch(index)


def basis(reg: AbstractRegister) -> range:
    return reg.basis()


def density_matrix(reg: AbstractRegister) -> torch.Tensor:
    return reg.density_matrix()


rho = density_matrix


def focus_(reg: AbstractRegister, *locs: int) -> AbstractRegister:
    return reg.focus_(*locs)


def relax_(
    reg: AbstractRegister,
    locs: Union[int, Sequence[int], None] = None,
    nbit: Optional[int] = None,
) -> AbstractRegister:
    return reg.relax_(locs, nbit=nbit)


def measure(
    reg: AbstractRegister, ntimes: int = 1, generator: Optional[torch.Generator] = None
) -> torch.Tensor:
    return reg.measure(ntimes, generator=generator)


def measure_collapse_(
    reg: AbstractRegister, generator: Optional[torch.Generator] = None
) -> torch.Tensor:
    return reg.measure_collapse_(generator=generator)


def measure_remove_(
    reg: AbstractRegister, generator: Optional[torch.Generator] = None
) -> torch.Tensor:
    return reg.measure_remove_(generator=generator)


def measure_reset_(
    reg: AbstractRegister, value: int = 0, generator: Optional[torch.Generator] = None
) -> torch.Tensor:
    return reg.measure_reset_(value, generator=generator)


def select_(
    reg: AbstractRegister, bits: Bits, out: Optional[AbstractRegister] = None
) -> AbstractRegister:
    return reg.select_(bits, out=out)


def select(reg: AbstractRegister, bits: Bits) -> DenseRegister:
    return reg.select(bits)


def addbit_(reg: AbstractRegister, n: int) -> AbstractRegister:
    return reg.addbit_(n)


def normalize_(reg: AbstractRegister) -> AbstractRegister:
    return reg.normalize_()


def join(*regs: AbstractRegister) -> DenseRegister:
    """
    Tensor-product registers into one.

    Qubits of the first register keep indices ``0..n1-1``, the second
    register's qubits follow, and so on, so the first register occupies the
    low bits of the joined basis index. The joined active set is the
    operands' active sets concatenated in operand order.

    Raises
    ------
    BatchSizeMismatch
        If the registers do not share one batch size.
    """
    if not regs:
        raise ValueError("join requires at least one register")
    nbatch = regs[0].batch_size
    for reg in regs[1:]:
        if reg.batch_size != nbatch:
            raise BatchSizeMismatch(
                f"cannot join registers with batch sizes {[r.batch_size for r in regs]}"
            )

    vec: Optional[torch.Tensor] = None
    actives: list = []
    remains: list = []
    offset = 0
    for reg in regs:
        canon = to_canonical(reg.raw_state(), reg.order, reg.active_qubits)
        # New index = low + 2**n_low * high.
        vec = canon if vec is None else (canon[:, None, :] * vec[None, :, :]).reshape(-1, nbatch)
        actives.extend(q + offset for q in reg.active_locs)
        remains.extend(q + offset for q in reg.order[reg.active_qubits :])
        offset += reg.total_qubits

    n = offset
    new_order = tuple(actives) + tuple(remains)
    state = reorder(vec.reshape(2**n, 1, nbatch), tuple(range(n)), n, new_order, len(actives))
    logger.debug("joined %d registers into %d qubits", len(regs), n)
    return DenseRegister(state, order=new_order)


def repeat(reg: AbstractRegister, n: int) -> DenseRegister:
    """
    Stack ``n`` independent copies of a single-batch register.

    Raises
    ------
    BatchSizeMismatch
        If ``reg`` has more than one batch member.
    """
    if reg.batch_size != 1:
        raise BatchSizeMismatch(f"repeat requires batch size 1, got {reg.batch_size}")
    if n < 1:
        raise ValueError(f"n must be >= 1, got {n}")
    return DenseRegister(reg.raw_state().repeat(1, 1, n), order=reg.order)


__all__ = [
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
