"""Circuit block tree.

A circuit is a tree of blocks. The set of block kinds is closed
(:class:`BlockKind`): a :class:`ChainBlock` runs sub-blocks in sequence, a
:class:`PrimitiveBlock` is one named gate on target qubits with optional
control qubits. Consumers dispatch on ``block.kind`` and treat any other
kind as a no-op/fallback.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, Optional, Sequence, Tuple, Union

import torch

from qfocus.gates import standard as stdgates


class BlockKind(Enum):
    """Closed set of block variants."""

    CHAIN = "chain"
    PRIMITIVE = "primitive"


def _check_qubits(qubits: Tuple[int, ...], n_qubits: int) -> None:
    for q in qubits:
        if q < 0 or q >= n_qubits:
            raise ValueError(
                f"Qubit index {q} is out of range for this block (n_qubits={n_qubits})."
            )
    if len(set(qubits)) != len(qubits):
        raise ValueError(f"Qubit indices must be distinct, got {qubits}.")


@dataclass(frozen=True)
class PrimitiveBlock:
    """
    One gate application.

    Attributes
    ----------
    name:
        Gate name, e.g. "X", "H", "RZ", "SWAP".
    n_qubits:
        Width of the circuit this block lives in.
    targets:
        Target qubit indices; ``targets[0]`` is the least significant bit of
        the gate matrix.
    controls:
        Control qubit indices (active on |1>).
    params:
        Optional numeric parameters (rotation angles).
    """

    name: str
    n_qubits: int
    targets: Tuple[int, ...]
    controls: Tuple[int, ...] = ()
    params: Optional[Tuple[float, ...]] = None
    kind: BlockKind = field(default=BlockKind.PRIMITIVE, init=False)

    def __post_init__(self) -> None:
        if not self.targets:
            raise ValueError("A gate must act on at least one qubit.")
        _check_qubits(self.targets + self.controls, self.n_qubits)
        width = stdgates.gate_num_qubits(self.name)
        if width != len(self.targets):
            raise ValueError(
                f"Gate {self.name!r} acts on {width} qubit(s), got targets {self.targets}."
            )

    @property
    def qubits(self) -> Tuple[int, ...]:
        """Every qubit the gate touches, targets first."""
        return self.targets + self.controls

    def matrix(
        self,
        dtype: torch.dtype | None = None,
        device: torch.device | None = None,
    ) -> torch.Tensor:
        """
        Return the gate matrix over ``self.qubits``.

        Controls occupy the high bits, so the result is the identity except
        for the block where every control qubit is |1>.
        """
        base = stdgates.gate_matrix(self.name, self.params, dtype=dtype, device=device)
        return stdgates.controlled(base, len(self.controls))


@dataclass
class ChainBlock:
    """
    Ordered sequence of sub-blocks on ``n_qubits`` qubits.

    Examples
    --------
    >>> bell = ChainBlock(2).add_gate("H", [0]).add_gate("X", [1], controls=[0])
    >>> len(bell)
    2
    """

    n_qubits: int
    blocks: List["Block"] = field(default_factory=list)
    kind: BlockKind = field(default=BlockKind.CHAIN, init=False)

    def __post_init__(self) -> None:
        if self.n_qubits <= 0:
            raise ValueError("ChainBlock requires n_qubits >= 1.")
        for blk in self.blocks:
            self._check_width(blk)

    def _check_width(self, blk: "Block") -> None:
        if blk.n_qubits != self.n_qubits:
            raise ValueError(
                f"Sub-block spans {blk.n_qubits} qubits, chain spans {self.n_qubits}."
            )

    def append(self, blk: "Block") -> "ChainBlock":
        self._check_width(blk)
        self.blocks.append(blk)
        return self

    def add_gate(
        self,
        name: str,
        targets: Sequence[int],
        controls: Sequence[int] = (),
        params: Optional[Sequence[float]] = None,
    ) -> "ChainBlock":
        """Append a primitive gate and return ``self``."""
        return self.append(
            PrimitiveBlock(
                name=name,
                n_qubits=self.n_qubits,
                targets=tuple(int(q) for q in targets),
                controls=tuple(int(q) for q in controls),
                params=None if params is None else tuple(float(p) for p in params),
            )
        )

    def subblocks(self) -> Tuple["Block", ...]:
        return tuple(self.blocks)

    def primitives(self) -> Iterator[PrimitiveBlock]:
        """Yield every primitive in execution order, flattening nested chains."""
        for blk in self.blocks:
            if blk.kind is BlockKind.CHAIN:
                yield from blk.primitives()
            elif blk.kind is BlockKind.PRIMITIVE:
                yield blk

    def gate_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for op in self.primitives():
            counts[op.name] = counts.get(op.name, 0) + 1
        return counts

    def __len__(self) -> int:
        return len(self.blocks)


Block = Union[PrimitiveBlock, ChainBlock]


def put(n_qubits: int, loc: int, name: str, *params: float) -> PrimitiveBlock:
    """Single gate ``name`` on qubit ``loc`` of an ``n_qubits`` circuit."""
    return PrimitiveBlock(name, n_qubits, (loc,), params=tuple(params) or None)


def control(n_qubits: int, ctrl, target: int, name: str, *params: float) -> PrimitiveBlock:
    """Gate ``name`` on ``target`` controlled by one qubit or a sequence of qubits."""
    ctrls = (ctrl,) if isinstance(ctrl, int) else tuple(ctrl)
    return PrimitiveBlock(name, n_qubits, (target,), controls=ctrls, params=tuple(params) or None)


def chain(n_qubits: int, *blocks) -> ChainBlock:
    """Chain ``blocks`` (all of width ``n_qubits``) in order."""
    return ChainBlock(n_qubits, list(blocks))


__all__ = [
    "Block",
    "BlockKind",
    "PrimitiveBlock",
    "ChainBlock",
    "put",
    "control",
    "chain",
]
