"""HPGL command vocabulary -- tokens, the accept set and classification.

A *token* is one raw command slice of the input stream (``PA100,200``,
``SP1``, ``LBhello``).  Classification decides whether its leading
mnemonic belongs to the small set of commands a two-axis cutter
understands; accepted tokens become :class:`Command` values that the
rest of the pipeline works with.

Accepted mnemonics (case-sensitive):

========  ==========================
``IN``    Initialize
``PA``    Plot Absolute
``PD``    Pen Down
``PU``    Pen Up
``PG``    Page Feed
``PR``    Plot Relative
``!PG``   Page Feed (device escape)
========  ==========================

Matching is by exact-length prefix and longest entry first, so a token
``!PG`` is classified as ``!PG`` and ``PGfoo`` as ``PG``.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

ACCEPTED_MNEMONICS: tuple[str, ...] = ("IN", "PA", "PD", "PU", "PG", "PR", "!PG")

COORDINATE_MNEMONICS: frozenset[str] = frozenset({"PA", "PD", "PU", "PR"})
"""Mnemonics whose arguments are (x, y) pairs subject to normalisation."""

# Two leading integers, like sscanf("%ld,%ld"): whitespace may precede a
# number but the comma must follow the first number directly.
_LEADING_PAIR_RE = re.compile(rb"\s*([+-]?\d+),\s*([+-]?\d+)")
_INTEGER_RE = re.compile(rb"[+-]?\d+")

CoordinatePair = tuple[int, int]


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Token:
    """One delimiter-separated slice of the command stream.

    Parameters
    ----------
    raw : bytes
        Token bytes, never empty, without delimiters.
    offset : int
        Byte offset of the token within the source document.
    """

    raw: bytes
    offset: int = 0

    def __post_init__(self) -> None:
        if not self.raw:
            raise ValueError("Token must not be empty")

    def text(self) -> str:
        """Printable form for diagnostics."""
        return self.raw.decode("ascii", errors="replace")


@dataclass(frozen=True, slots=True)
class Command:
    """An accepted token split into mnemonic and argument text.

    Parameters
    ----------
    mnemonic : str
        Matched accept-set entry.
    arguments : bytes
        Everything after the mnemonic, verbatim.
    """

    mnemonic: str
    arguments: bytes = b""

    @property
    def has_coordinates(self) -> bool:
        """``True`` for PA/PD/PU/PR, the commands that carry (x, y) pairs."""
        return self.mnemonic in COORDINATE_MNEMONICS

    def encode(self) -> bytes:
        """Wire form without the ``;`` terminator."""
        return self.mnemonic.encode("ascii") + self.arguments

    def leading_pair(self) -> CoordinatePair | None:
        """Parse the first two integers of the argument text.

        Returns ``None`` unless the arguments start with ``<int>,<int>``.
        Further pairs are ignored.
        """
        match = _LEADING_PAIR_RE.match(self.arguments)
        if match is None:
            return None
        return int(match.group(1)), int(match.group(2))

    def coordinate_pairs(self) -> tuple[CoordinatePair, ...] | None:
        """Parse the whole argument text as a list of (x, y) pairs.

        Returns
        -------
        tuple[CoordinatePair, ...] | None
            Empty tuple for a command without arguments, ``None`` when the
            arguments are not an even-length comma-separated integer list.
        """
        text = self.arguments.strip()
        if not text:
            return ()
        fields = [f.strip() for f in text.split(b",")]
        if len(fields) % 2 or not all(_INTEGER_RE.fullmatch(f) for f in fields):
            return None
        values = [int(f) for f in fields]
        return tuple(zip(values[0::2], values[1::2]))

    def with_pairs(self, pairs: tuple[CoordinatePair, ...]) -> Command:
        """Return a copy whose arguments are replaced by *pairs*."""
        args = ",".join(f"{x},{y}" for x, y in pairs)
        return Command(self.mnemonic, args.encode("ascii"))


# ---------------------------------------------------------------------------
# Accept set / classifier
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AcceptSet:
    """Immutable set of recognised mnemonics.

    Parameters
    ----------
    mnemonics : frozenset[str]
        Accepted entries.  Defaults to the cutter subset.
    """

    mnemonics: frozenset[str] = frozenset(ACCEPTED_MNEMONICS)
    _order: tuple[tuple[str, bytes], ...] = field(
        init=False, repr=False, compare=False,
    )

    def __post_init__(self) -> None:
        if not self.mnemonics:
            raise ValueError("AcceptSet requires at least one mnemonic")
        for m in self.mnemonics:
            if not m or any(ch.isdigit() for ch in m):
                raise ValueError(f"Invalid mnemonic {m!r}")
        # Longest first so an overlapping shorter entry can't shadow it.
        order = sorted(self.mnemonics, key=lambda m: (-len(m), m))
        object.__setattr__(
            self, "_order", tuple((m, m.encode("ascii")) for m in order),
        )

    def __contains__(self, mnemonic: object) -> bool:
        return mnemonic in self.mnemonics

    def match(self, raw: bytes) -> str | None:
        """Return the entry *raw* starts with, or ``None``."""
        for mnemonic, prefix in self._order:
            if raw.startswith(prefix):
                return mnemonic
        return None


DEFAULT_ACCEPT_SET = AcceptSet()


def classify(token: Token, accept_set: AcceptSet = DEFAULT_ACCEPT_SET) -> Command | None:
    """Classify *token* against *accept_set*.

    Returns
    -------
    Command | None
        The accepted command, or ``None`` when the mnemonic is not
        recognised.  Rejection is routine filtering, not an error.
    """
    mnemonic = accept_set.match(token.raw)
    if mnemonic is None:
        logger.debug("in: %s  ignored", token.text())
        return None
    logger.debug("in: %s  good", token.text())
    return Command(mnemonic, token.raw[len(mnemonic):])
