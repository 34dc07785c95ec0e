"""Tests for the qcircuit renderer."""

from __future__ import annotations

import math

import pytest

from qfocus.circuit import ChainBlock, PrimitiveBlock, chain, control, put
from qfocus.errors import QubitCountMismatch, RegisterError, RenderError, TexFilenameError
from qfocus.register import zero_register
from qfocus.viz import FontFamily, TexStyle, iter_tex_lines, latexify, texcircuit
from qfocus.viz.texcircuit import format_angle


def test_empty_circuit_draws_bare_wires() -> None:
    lines = texcircuit(ChainBlock(3)).split("\n")
    assert len(lines) == 5
    assert lines[0] == r"\Qcircuit @C=1.0em @R=0.7em {"
    assert lines[1] == r"& \qw & \qw \\"
    assert lines[2] == r"& \qw & \qw \\"
    assert lines[3] == r"& \qw & \qw"
    assert lines[4] == "}"


def test_iter_tex_lines_is_lazy_and_single_pass() -> None:
    lines = iter_tex_lines(ChainBlock(2))
    assert next(lines).startswith(r"\Qcircuit")
    rest = list(lines)
    assert rest[-1] == "}"
    assert list(lines) == []


def test_register_sets_wire_count() -> None:
    lines = list(iter_tex_lines(ChainBlock(2), register=zero_register(4)))
    assert len(lines) == 6


def test_block_wider_than_register() -> None:
    with pytest.raises(QubitCountMismatch):
        list(iter_tex_lines(ChainBlock(3), register=zero_register(2)))


def test_single_qubit_gate_glyph() -> None:
    lines = texcircuit(chain(2, put(2, 0, "H"))).split("\n")
    assert lines[1] == r"& \qw & \gate{\mathrm{H}} & \qw \\"
    assert lines[2] == r"& \qw & \qw & \qw"


def test_controlled_x_glyphs() -> None:
    lines = texcircuit(chain(2, control(2, 0, 1, "X"))).split("\n")
    assert r"\ctrl{1}" in lines[1]
    assert r"\targ" in lines[2]


def test_control_below_target_points_up() -> None:
    lines = texcircuit(chain(2, control(2, 1, 0, "Z"))).split("\n")
    assert r"\gate{\mathrm{Z}}" in lines[1]
    assert r"\ctrl{-1}" in lines[2]


def test_disjoint_gates_share_a_column() -> None:
    lines = texcircuit(chain(2, put(2, 0, "H"), put(2, 1, "X"))).split("\n")
    assert lines[1].count(" & ") == 2
    assert lines[2].count(" & ") == 2


def test_sequential_gates_take_new_columns() -> None:
    lines = texcircuit(chain(2, put(2, 0, "H"), put(2, 0, "X"))).split("\n")
    assert lines[1] == r"& \qw & \gate{\mathrm{H}} & \gate{\mathrm{X}} & \qw \\"
    assert lines[2] == r"& \qw & \qw & \qw & \qw"


def test_controlled_gate_blocks_spanned_wires() -> None:
    circuit = chain(3, control(3, 0, 2, "X"), put(3, 1, "H"))
    lines = texcircuit(circuit).split("\n")
    # The H cannot share the CNOT column because the vertical wire crosses qubit 1.
    assert lines[2] == r"& \qw & \qw & \gate{\mathrm{H}} & \qw \\"


def test_identity_gate_draws_nothing() -> None:
    assert texcircuit(chain(1, put(1, 0, "I"))) == texcircuit(ChainBlock(1))


def test_swap_glyphs() -> None:
    lines = texcircuit(chain(3, PrimitiveBlock("SWAP", 3, (0, 2)))).split("\n")
    assert r"\qswap \qwx[2]" in lines[1]
    assert lines[2] == r"& \qw & \qw & \qw \\"
    assert r"\qswap" in lines[3]


def test_parametric_label() -> None:
    text = texcircuit(chain(1, put(1, 0, "RZ", math.pi / 2)))
    assert r"\gate{\mathrm{RZ(\pi/2)}}" in text


def test_format_angle() -> None:
    assert format_angle(0.0) == "0"
    assert format_angle(math.pi) == r"\pi"
    assert format_angle(-math.pi / 2) == r"-\pi/2"
    assert format_angle(3 * math.pi / 4) == r"3\pi/4"
    assert format_angle(2 * math.pi) == r"2\pi"
    assert format_angle(0.123) == "0.123"


def test_style_spacing_and_validation() -> None:
    style = TexStyle(col_spacing=2.0, row_spacing=1.5)
    assert texcircuit(ChainBlock(1), style=style).startswith(r"\Qcircuit @C=2.0em @R=1.5em {")
    with pytest.raises(ValueError, match="Column spacing"):
        TexStyle(col_spacing=-1.0)
    with pytest.raises(ValueError, match="Row spacing"):
        TexStyle(row_spacing=-0.1)
    with pytest.raises(ValueError):
        TexStyle(text_color="not a color")


def test_style_font_and_color() -> None:
    style = TexStyle(font_family=FontFamily.MONOSPACE, text_color="blue")
    text = texcircuit(chain(1, put(1, 0, "H")), style=style, minimal_wrap=True)
    assert r"\gate{{\color{blue}\mathtt{H}}}" in text
    assert r"\usepackage{xcolor}" in text
    assert TexStyle(font_family="sans").font_family is FontFamily.SANS


def test_minimal_wrap() -> None:
    lines = texcircuit(ChainBlock(1), minimal_wrap=True).split("\n")
    assert lines[0] == r"\documentclass{minimal}"
    assert r"\usepackage[braket]{qcircuit}" in lines
    assert r"\usepackage{xcolor}" not in lines
    assert lines[-2] == r"\]"
    assert lines[-1] == r"\end{document}"


def test_write_to_file(tmp_path) -> None:
    circuit = chain(2, put(2, 0, "H"))
    path = tmp_path / "bell.tex"
    assert texcircuit(circuit, filename=path) is None
    assert path.read_text(encoding="utf-8") == texcircuit(circuit)


def test_filename_must_end_in_tex(tmp_path) -> None:
    with pytest.raises(TexFilenameError) as excinfo:
        texcircuit(ChainBlock(1), filename=tmp_path / "circuit.txt")
    assert isinstance(excinfo.value, RenderError)
    assert not isinstance(excinfo.value, RegisterError)
    assert not (tmp_path / "circuit.txt").exists()


def test_latexify_alias() -> None:
    assert latexify is texcircuit
