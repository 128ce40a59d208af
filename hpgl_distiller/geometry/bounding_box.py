"""Bounding-box normalisation of accepted coordinate commands.

Shifts a plot so its drawn extents start at the origin, optionally moved
by a user offset -- useful when the source artwork is not anchored at
(0, 0) on the target material::

    x' = x - min_x + x_offset
    y' = y - min_y + y_offset

The minimum is only known once every coordinate has been seen, so this
is a two-pass operation: :func:`compute_bounding_box` over the whole
accepted stream, then :func:`normalize` to rewrite it.  Without a
bounding box only the user offsets are applied.

Coordinate commands are PA, PD, PU and PR (see
``hpgl.commands.COORDINATE_MNEMONICS``).  A coordinate command whose
arguments are not an even list of integers is left untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator

from hpgl_distiller.hpgl.commands import Command

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """Axis-aligned extents of all coordinate pairs.

    ``width``/``height`` are ``max - min`` and are reported for
    diagnostics only; the rewrite uses the minimum corner.
    """

    min_x: int
    min_y: int
    width: int
    height: int

    @property
    def max_x(self) -> int:
        return self.min_x + self.width

    @property
    def max_y(self) -> int:
        return self.min_y + self.height


def compute_bounding_box(commands: Iterable[Command]) -> BoundingBox | None:
    """Collect the extents of every coordinate pair in *commands*.

    Parameters
    ----------
    commands : Iterable[Command]
        Accepted commands; non-coordinate mnemonics are skipped.

    Returns
    -------
    BoundingBox | None
        ``None`` if no coordinate pair was found.
    """
    bounds: list[int] | None = None  # [min_x, min_y, max_x, max_y]
    for cmd in commands:
        if not cmd.has_coordinates:
            continue
        pairs = cmd.coordinate_pairs()
        if not pairs:
            continue
        for x, y in pairs:
            if bounds is None:
                bounds = [x, y, x, y]
                continue
            bounds[0] = min(bounds[0], x)
            bounds[1] = min(bounds[1], y)
            bounds[2] = max(bounds[2], x)
            bounds[3] = max(bounds[3], y)

    if bounds is None:
        return None

    min_x, min_y, max_x, max_y = bounds
    bbox = BoundingBox(
        min_x=min_x,
        min_y=min_y,
        width=max_x - min_x,
        height=max_y - min_y,
    )
    logger.debug(
        "Bounding box: origin=(%d, %d) size=%dx%d",
        bbox.min_x, bbox.min_y, bbox.width, bbox.height,
    )
    return bbox


def normalize(
    commands: Iterable[Command],
    bbox: BoundingBox | None,
    x_offset: int = 0,
    y_offset: int = 0,
) -> Iterator[Command]:
    """Rewrite the coordinate pairs of *commands*.

    Parameters
    ----------
    commands : Iterable[Command]
        Accepted commands in emission order.
    bbox : BoundingBox | None
        Extents from :func:`compute_bounding_box`; ``None`` applies the
        offsets only.
    x_offset, y_offset : int
        User shift added after normalisation.

    Yields
    ------
    Command
        Commands in input order; those without a rewrite are yielded as is.
    """
    shift_x = x_offset - (bbox.min_x if bbox else 0)
    shift_y = y_offset - (bbox.min_y if bbox else 0)

    for cmd in commands:
        if (shift_x == 0 and shift_y == 0) or not cmd.has_coordinates:
            yield cmd
            continue
        pairs = cmd.coordinate_pairs()
        if not pairs:
            yield cmd
            continue
        yield cmd.with_pairs(tuple((x + shift_x, y + shift_y) for x, y in pairs))
