"""Circuit visualization."""

from .texcircuit import FontFamily, TexStyle, format_angle, iter_tex_lines, latexify, texcircuit

__all__ = [
    "FontFamily",
    "TexStyle",
    "format_angle",
    "iter_tex_lines",
    "texcircuit",
    "latexify",
]
