"""Split a raw HPGL buffer into command tokens.

Commands are separated by ``;``, ``\\n`` or ``\\r``.  Runs of delimiters
form a single boundary, so empty tokens are never produced.  The source
buffer is only read, never modified, and tokens are yielded lazily in
document order.
"""

from __future__ import annotations

import re
from typing import Iterator

from hpgl_distiller.hpgl.commands import Token

DELIMITERS = b";\n\r"

_TOKEN_RE = re.compile(b"[^" + re.escape(DELIMITERS) + b"]+")


def tokenize(buffer: bytes) -> Iterator[Token]:
    """Yield the tokens of *buffer* in order.

    Parameters
    ----------
    buffer : bytes
        Whole command document.

    Yields
    ------
    Token
        Non-empty token with its byte offset in *buffer*.
    """
    for match in _TOKEN_RE.finditer(buffer):
        yield Token(raw=match.group(), offset=match.start())
