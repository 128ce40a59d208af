"""
HPGL command handling.

Tokenizes a raw command buffer and classifies each token against the
accept set of cutter-compatible mnemonics.
"""

from hpgl_distiller.hpgl.commands import (
    ACCEPTED_MNEMONICS,
    COORDINATE_MNEMONICS,
    DEFAULT_ACCEPT_SET,
    AcceptSet,
    Command,
    Token,
    classify,
)
from hpgl_distiller.hpgl.tokenizer import tokenize

__all__ = [
    "ACCEPTED_MNEMONICS",
    "COORDINATE_MNEMONICS",
    "DEFAULT_ACCEPT_SET",
    "AcceptSet",
    "Command",
    "Token",
    "classify",
    "tokenize",
]
