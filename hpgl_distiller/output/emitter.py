"""Emitter -- writes distilled commands to a byte sink.

Output framing::

    <init string>\\n
    <MNEMONIC><args>;\\n
    ...

Each command is flushed as soon as it is written, then the emitter
blocks for the pacing delay the :class:`MotionTimer` owes for it, so the
device receives the command before the head starts moving.
"""

from __future__ import annotations

import logging
import time
from typing import BinaryIO, Callable

from hpgl_distiller.hpgl.commands import Command
from hpgl_distiller.motion.timing import MotionTimer

logger = logging.getLogger(__name__)

LINE_TERMINATOR = b"\n"
COMMAND_TERMINATOR = b";"


class Emitter:
    """Write the init string and accepted commands to *sink*.

    Parameters
    ----------
    sink : BinaryIO
        Writable binary stream, already opened for overwrite.
    init_string : str
        Written verbatim, followed by a line terminator, before any command.
    timer : MotionTimer | None
        Pacing source.  ``None`` emits without delays.
    sleep : Callable[[float], None]
        Blocking wait taking seconds.  Injected so tests never sleep.
    """

    def __init__(
        self,
        sink: BinaryIO,
        init_string: str,
        timer: MotionTimer | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._sink = sink
        self._init = init_string.encode("utf-8")
        self._timer = timer
        self._sleep = sleep
        self.commands_written = 0

    def start(self) -> None:
        """Write the initialisation string."""
        self._sink.write(self._init + LINE_TERMINATOR)
        self._sink.flush()

    def emit(self, command: Command) -> int:
        """Write one command, then wait for the head to catch up.

        Returns
        -------
        int
            Pacing delay applied, in microseconds.
        """
        self._sink.write(command.encode() + COMMAND_TERMINATOR + LINE_TERMINATOR)
        self._sink.flush()
        self.commands_written += 1

        if self._timer is None:
            return 0
        delay_us = self._timer.delay_for(command)
        if delay_us > 0:
            self._sleep(delay_us / 1_000_000)
        return delay_us

    def finish(self) -> None:
        """Flush the sink; closing it stays with the caller."""
        self._sink.flush()
        logger.debug("Emitted %d commands", self.commands_written)
