"""Circuit block trees and their application to registers."""

from .apply import apply_block_
from .blocks import Block, BlockKind, ChainBlock, PrimitiveBlock, chain, control, put

__all__ = [
    "Block",
    "BlockKind",
    "PrimitiveBlock",
    "ChainBlock",
    "put",
    "control",
    "chain",
    "apply_block_",
]
