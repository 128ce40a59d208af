"""Head travel-time estimation used to pace command emission.

Some cutters hang off a serial line without flow control and cannot
buffer commands faster than the head moves.  When a slew constant is
configured, every coordinate-bearing command is followed by a wait
proportional to the distance the head has to travel::

    delay_us = distance * slew_us

Distance is Euclidean and truncated toward zero (integer square root of
the integer sum of squares), so ``PA3,4`` from the origin costs exactly
``5 * slew_us``.

Commands with a comma whose two leading integers cannot be parsed fall
back to a fixed ``10 * slew_us`` and leave the pen position untouched.
Commands without a comma (``PU``, ``IN``) cost nothing.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass

from hpgl_distiller.hpgl.commands import Command

logger = logging.getLogger(__name__)

FALLBACK_DISTANCE = 10
"""Distance units charged when a coordinate argument fails to parse."""


@dataclass
class PenPosition:
    """Last coordinate sent to the device."""

    x: int = 0
    y: int = 0

    def distance_to(self, x: int, y: int) -> int:
        """Euclidean distance to (x, y), truncated toward zero."""
        dx = x - self.x
        dy = y - self.y
        return math.isqrt(dx * dx + dy * dy)


class MotionTimer:
    """Compute the pacing delay owed after each emitted command.

    Parameters
    ----------
    slew_us : int
        Microseconds of delay per unit of travel.  ``0`` disables pacing.

    Notes
    -----
    The timer only computes delays and tracks the pen position; the
    emitter performs the blocking wait.
    """

    def __init__(self, slew_us: int) -> None:
        if slew_us < 0:
            raise ValueError(f"slew_us must be >= 0, got {slew_us}")
        self._slew_us = slew_us
        self.position = PenPosition()
        self.total_delay_us = 0

    @property
    def slew_us(self) -> int:
        return self._slew_us

    @property
    def enabled(self) -> bool:
        return self._slew_us > 0

    def delay_for(self, command: Command) -> int:
        """Return the delay in microseconds owed after *command*.

        Updates the pen position when the command carries a parseable
        ``x,y`` pair.
        """
        if not self.enabled or b"," not in command.arguments:
            return 0

        pair = command.leading_pair()
        if pair is None:
            delay = FALLBACK_DISTANCE * self._slew_us
            logger.debug(
                "Unparseable coordinates in %s, fallback delay %d us",
                command.encode().decode("ascii", errors="replace"),
                delay,
            )
        else:
            x, y = pair
            distance = self.position.distance_to(x, y)
            delay = distance * self._slew_us
            logger.debug("Distance: %d", distance)
            self.position = PenPosition(x, y)

        self.total_delay_us += delay
        return delay
