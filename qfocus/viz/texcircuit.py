"""LaTeX (qcircuit) rendering of circuit block trees.

The renderer reads the block tree and, optionally, the qubit count of a
register; it never reads amplitudes. Styling is an explicit
:class:`TexStyle` value passed per call, so rendering is a pure function of
its arguments.
"""

from __future__ import annotations

import math
import os
import re
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Dict, Iterator, List, Optional, Union

from qfocus.circuit.blocks import BlockKind, PrimitiveBlock
from qfocus.errors import QubitCountMismatch, TexFilenameError
from qfocus.logging import get_logger
from qfocus.register import AbstractRegister

logger = get_logger(__name__)

WIRE = r"\qw"
COLUMN_SEP = " & "
ROW_END = r" \\"

MINIMAL_HEAD = (
    r"\documentclass{minimal}",
    r"\usepackage[matrix,frame,arrow]{xypic}",
    r"\usepackage[braket]{qcircuit}",
)
MINIMAL_BEGIN = (r"\begin{document}", r"\[")
MINIMAL_FOOT = (r"\]", r"\end{document}")

_COLOR_RE = re.compile(r"^[A-Za-z][A-Za-z0-9!.]*$")


class FontFamily(Enum):
    """Font used for gate labels."""

    ROMAN = "mathrm"
    SANS = "mathsf"
    MONOSPACE = "mathtt"


@dataclass(frozen=True)
class TexStyle:
    """
    Rendering options for :func:`texcircuit`.

    Attributes
    ----------
    col_spacing:
        Column spacing in em (``@C``). Must be >= 0.
    row_spacing:
        Row spacing in em (``@R``). Must be >= 0.
    font_family:
        Font for gate labels.
    text_color:
        Optional xcolor name for gate labels (e.g. ``"blue"`` or
        ``"red!60"``). When set, the standalone preamble loads xcolor.
    """

    col_spacing: float = 1.0
    row_spacing: float = 0.7
    font_family: FontFamily = FontFamily.ROMAN
    text_color: Optional[str] = None

    def __post_init__(self) -> None:
        if self.col_spacing < 0:
            raise ValueError("Column spacing needs to be positive.")
        if self.row_spacing < 0:
            raise ValueError("Row spacing needs to be positive.")
        if not isinstance(self.font_family, FontFamily):
            value = self.font_family
            if isinstance(value, str) and value.upper() in FontFamily.__members__:
                value = FontFamily[value.upper()]
            object.__setattr__(self, "font_family", FontFamily(value))
        if self.text_color is not None and not _COLOR_RE.match(self.text_color):
            raise ValueError(f"Invalid xcolor name: {self.text_color!r}")


def format_angle(theta: float, atol: float = 1e-8) -> str:
    """
    Format an angle in radians for a TeX label.

    Multiples of pi/4 become fractions of ``\\pi``; anything else is printed
    with three decimals.
    """
    k = round(theta / (math.pi / 4.0))
    if not math.isclose(theta, k * math.pi / 4.0, abs_tol=atol):
        return f"{theta:.3f}"
    if k == 0:
        return "0"
    frac = Fraction(k, 4)
    sign = "-" if frac < 0 else ""
    num, den = abs(frac.numerator), frac.denominator
    body = r"\pi" if num == 1 else rf"{num}\pi"
    return f"{sign}{body}" if den == 1 else f"{sign}{body}/{den}"


def _label(op: PrimitiveBlock, style: TexStyle) -> str:
    text = op.name.upper()
    if op.params:
        text += "(" + ",".join(format_angle(p) for p in op.params) + ")"
    label = "\\" + style.font_family.value + "{" + text + "}"
    if style.text_color is not None:
        label = rf"{{\color{{{style.text_color}}}{label}}}"
    return label


class _CircuitTeX:
    """Column grid of qcircuit cells, filled one primitive at a time."""

    def __init__(self, n_wires: int, style: TexStyle) -> None:
        self.n_wires = n_wires
        self.style = style
        self.columns: List[Dict[int, str]] = []
        self._next_free = [0] * n_wires

    def header(self) -> str:
        return rf"\Qcircuit @C={self.style.col_spacing}em @R={self.style.row_spacing}em {{"

    @staticmethod
    def footer() -> str:
        return "}"

    def _column_for(self, rows: range) -> Dict[int, str]:
        col = max(self._next_free[r] for r in rows)
        while len(self.columns) <= col:
            self.columns.append({})
        for r in rows:
            self._next_free[r] = col + 1
        return self.columns[col]

    def draw(self, block) -> None:
        kind = getattr(block, "kind", None)
        if kind is BlockKind.CHAIN:
            for sub in block.subblocks():
                self.draw(sub)
        elif kind is BlockKind.PRIMITIVE:
            self._draw_primitive(block)
        else:
            logger.debug("no TeX glyph for %s; skipped", type(block).__name__)

    def _draw_primitive(self, op: PrimitiveBlock) -> None:
        if op.name.upper() == "I" and not op.controls:
            return
        qubits = op.qubits
        cells = self._column_for(range(min(qubits), max(qubits) + 1))
        anchor = op.targets[0]

        for c in op.controls:
            cells[c] = rf"\ctrl{{{anchor - c}}}"

        name = op.name.upper()
        if name == "X" and op.controls:
            cells[anchor] = r"\targ"
        elif name == "SWAP":
            upper, lower = sorted(op.targets)
            cells[upper] = rf"\qswap \qwx[{lower - upper}]"
            cells[lower] = r"\qswap"
        else:
            label = _label(op, self.style)
            for t in op.targets:
                cells[t] = rf"\gate{{{label}}}"

    def wire_lines(self) -> Iterator[str]:
        for row in range(self.n_wires):
            cells = [WIRE] + [col.get(row, WIRE) for col in self.columns] + [WIRE]
            line = "& " + COLUMN_SEP.join(cells)
            yield line + ROW_END if row < self.n_wires - 1 else line


def iter_tex_lines(
    block,
    *,
    register: Optional[AbstractRegister] = None,
    style: Optional[TexStyle] = None,
    minimal_wrap: bool = False,
) -> Iterator[str]:
    """
    Lazily yield the qcircuit source for ``block``, one line at a time.

    Parameters
    ----------
    block:
        Root of the block tree.
    register:
        If given, one wire is drawn per qubit of the register
        (``register.total_qubits``); otherwise one per qubit of ``block``.
    style:
        Rendering options; defaults to ``TexStyle()``.
    minimal_wrap:
        Wrap the diagram in a standalone ``minimal`` document.

    Raises
    ------
    QubitCountMismatch
        If the block is wider than the register.
    """
    style = style or TexStyle()
    n_wires = block.n_qubits if register is None else register.total_qubits
    if block.n_qubits > n_wires:
        raise QubitCountMismatch(
            f"block spans {block.n_qubits} qubits but the register has {n_wires}"
        )

    tex = _CircuitTeX(n_wires, style)
    tex.draw(block)

    if minimal_wrap:
        yield from MINIMAL_HEAD
        if style.text_color is not None:
            yield r"\usepackage{xcolor}"
        yield from MINIMAL_BEGIN
    yield tex.header()
    yield from tex.wire_lines()
    yield tex.footer()
    if minimal_wrap:
        yield from MINIMAL_FOOT


def texcircuit(
    block,
    *,
    register: Optional[AbstractRegister] = None,
    style: Optional[TexStyle] = None,
    filename: Union[str, "os.PathLike[str]", None] = None,
    minimal_wrap: bool = False,
) -> Optional[str]:
    """
    Render ``block`` as a qcircuit diagram.

    Parameters
    ----------
    filename:
        If given, the document is written there and None is returned. The
        name must end in ``.tex``.

    Returns
    -------
    str or None
        The TeX source when ``filename`` is None.

    Raises
    ------
    TexFilenameError
        If ``filename`` does not end in ``.tex``.
    """
    if filename is not None and not os.fspath(filename).endswith(".tex"):
        raise TexFilenameError(f"filename should end in .tex, got {os.fspath(filename)!r}")

    tex = "\n".join(
        iter_tex_lines(block, register=register, style=style, minimal_wrap=minimal_wrap)
    )
    if filename is None:
        return tex

    with open(filename, "w", encoding="utf-8") as fh:
        fh.write(tex)
    logger.info("wrote qcircuit diagram to %s", os.fspath(filename))
    return None


latexify = texcircuit


__all__ = [
    "FontFamily",
    "TexStyle",
    "format_angle",
    "iter_tex_lines",
    "texcircuit",
    "latexify",
]
