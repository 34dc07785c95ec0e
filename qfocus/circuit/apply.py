"""Run a block tree on a register."""

from __future__ import annotations

from qfocus.backend.statevector import apply_gate_
from qfocus.circuit.blocks import BlockKind
from qfocus.errors import QubitCountMismatch
from qfocus.logging import get_logger
from qfocus.register import AbstractRegister

logger = get_logger(__name__)


def apply_block_(reg: AbstractRegister, block) -> AbstractRegister:
    """
    Apply ``block`` to the active qubits of ``reg`` in place.

    Block qubit ``j`` is the ``j``-th active qubit of the register, so a
    focused register runs a narrower circuit on just its focused wires.

    Raises
    ------
    QubitCountMismatch
        If the block width differs from ``reg.active_qubits``.
    TypeError
        If the tree contains a block of unknown kind.
    """
    if block.n_qubits != reg.active_qubits:
        raise QubitCountMismatch(
            f"block spans {block.n_qubits} qubits but the register has "
            f"{reg.active_qubits} active qubits"
        )
    _apply(reg, block)
    return reg


def _apply(reg: AbstractRegister, block) -> None:
    kind = getattr(block, "kind", None)
    if kind is BlockKind.CHAIN:
        for sub in block.subblocks():
            _apply(reg, sub)
    elif kind is BlockKind.PRIMITIVE:
        state = reg.raw_state()
        matrix = block.matrix(dtype=state.dtype, device=state.device)
        logger.debug("apply %s on %s", block.name, block.qubits)
        apply_gate_(reg, matrix, block.qubits)
    else:
        raise TypeError(f"cannot apply block of type {type(block).__name__}")


__all__ = ["apply_block_"]
