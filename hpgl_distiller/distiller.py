"""Distillation engine -- tokenize, filter, normalise, emit.

Runs one document per call, wholly in memory, on the calling thread::

    buffer -> tokenize -> classify -> [bounding box / offsets] -> Emitter

Filtering is order-preserving: accepted commands leave in the order they
arrived.  When pacing is enabled the emitter blocks after each
coordinate command, which directly throttles the output rate; there is
no cancellation short of interrupting the process.

Re-distilling already distilled output yields the same command sequence,
but the init string is prepended again on every run (and its own
commands, ``IN;PU;`` by default, are accepted like any others).
"""

from __future__ import annotations

import io
import logging
import time
from dataclasses import dataclass
from typing import BinaryIO, Callable, Iterable, Iterator

from hpgl_distiller.configs.loader import DistillerConfig
from hpgl_distiller.geometry.bounding_box import (
    BoundingBox,
    compute_bounding_box,
    normalize,
)
from hpgl_distiller.hpgl.commands import Command, classify
from hpgl_distiller.hpgl.tokenizer import tokenize
from hpgl_distiller.motion.timing import MotionTimer
from hpgl_distiller.output.emitter import Emitter

logger = logging.getLogger(__name__)


@dataclass
class DistillResult:
    """Statistics of one distillation run."""

    tokens_seen: int = 0
    accepted: int = 0
    rejected: int = 0
    total_delay_us: int = 0
    bounding_box: BoundingBox | None = None


class Distiller:
    """Distil HPGL documents according to a fixed configuration.

    Parameters
    ----------
    config : DistillerConfig
        Frozen configuration; shared read-only by every component.
    sleep : Callable[[float], None]
        Blocking wait used for pacing (seconds).
    """

    def __init__(
        self,
        config: DistillerConfig | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._cfg = config if config is not None else DistillerConfig()
        self._sleep = sleep

    @property
    def config(self) -> DistillerConfig:
        return self._cfg

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def accepted_commands(
        self,
        buffer: bytes,
        result: DistillResult | None = None,
    ) -> Iterator[Command]:
        """Yield the accepted commands of *buffer* in document order.

        Token counts are recorded on *result* as the stream is consumed.
        """
        for token in tokenize(buffer):
            if result is not None:
                result.tokens_seen += 1
            command = classify(token, self._cfg.accept_set)
            if command is None:
                if result is not None:
                    result.rejected += 1
                continue
            if result is not None:
                result.accepted += 1
            yield command

    def rewrite(
        self,
        commands: Iterable[Command],
        result: DistillResult | None = None,
    ) -> Iterable[Command]:
        """Apply bounding-box normalisation and user offsets.

        Collects the whole stream first when normalising, since the
        minimum corner is unknown until every coordinate has been seen.
        """
        if not self._cfg.rewrites_coordinates:
            return commands

        bbox = None
        if self._cfg.normalize:
            commands = list(commands)
            bbox = compute_bounding_box(commands)
            if bbox is None:
                logger.warning("Normalisation requested but no coordinates found")
            else:
                logger.info(
                    "Bounding box origin=(%d, %d) width=%d height=%d",
                    bbox.min_x, bbox.min_y, bbox.width, bbox.height,
                )
            if result is not None:
                result.bounding_box = bbox

        return normalize(commands, bbox, self._cfg.x_offset, self._cfg.y_offset)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def run(self, buffer: bytes, sink: BinaryIO) -> DistillResult:
        """Distil *buffer* into *sink*.

        Parameters
        ----------
        buffer : bytes
            Whole input document.
        sink : BinaryIO
            Writable binary stream; flushed, not closed.

        Returns
        -------
        DistillResult
            Token counts, total pacing delay and bounding box.
        """
        result = DistillResult()
        timer = MotionTimer(self._cfg.slew_us) if self._cfg.pacing_enabled else None
        emitter = Emitter(sink, self._cfg.init_string, timer, self._sleep)

        commands = self.rewrite(self.accepted_commands(buffer, result), result)

        emitter.start()
        for command in commands:
            result.total_delay_us += emitter.emit(command)
        emitter.finish()

        logger.info(
            "Distilled %d of %d tokens (%d ignored)",
            result.accepted, result.tokens_seen, result.rejected,
        )
        if timer is not None:
            logger.info("Total pacing delay %.3f s", result.total_delay_us / 1_000_000)
        return result


def distill(
    buffer: bytes,
    sink: BinaryIO,
    config: DistillerConfig | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> DistillResult:
    """Convenience wrapper around :meth:`Distiller.run`."""
    return Distiller(config, sleep).run(buffer, sink)


def distill_bytes(
    buffer: bytes,
    config: DistillerConfig | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> bytes:
    """Distil *buffer* and return the output document."""
    sink = io.BytesIO()
    Distiller(config, sleep).run(buffer, sink)
    return sink.getvalue()
