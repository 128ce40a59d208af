"""Tests for the emitter: framing, flushing and pacing order."""

from __future__ import annotations

import io

from hpgl_distiller.hpgl.commands import Command
from hpgl_distiller.motion.timing import MotionTimer
from hpgl_distiller.output.emitter import Emitter


class RecordingSink(io.BytesIO):
    """BytesIO that logs writes and flushes into a shared event list."""

    def __init__(self, events: list[tuple[str, object]]) -> None:
        super().__init__()
        self.events = events

    def write(self, data) -> int:  # type: ignore[override]
        self.events.append(("write", bytes(data)))
        return super().write(data)

    def flush(self) -> None:
        self.events.append(("flush", None))
        super().flush()


class TestFraming:
    def test_init_string_then_newline(self) -> None:
        sink = io.BytesIO()
        Emitter(sink, "IN;PU;").start()
        assert sink.getvalue() == b"IN;PU;\n"

    def test_init_string_verbatim(self) -> None:
        sink = io.BytesIO()
        Emitter(sink, "IN;SP1;  ").start()
        assert sink.getvalue() == b"IN;SP1;  \n"

    def test_command_terminated(self) -> None:
        sink = io.BytesIO()
        emitter = Emitter(sink, "IN;")
        emitter.start()
        emitter.emit(Command("PA", b"10,20"))
        emitter.emit(Command("!PG"))
        emitter.finish()
        assert sink.getvalue() == b"IN;\nPA10,20;\n!PG;\n"
        assert emitter.commands_written == 2

    def test_each_command_flushed(self) -> None:
        events: list[tuple[str, object]] = []
        emitter = Emitter(RecordingSink(events), "IN;")
        emitter.emit(Command("PU"))
        assert events == [("write", b"PU;\n"), ("flush", None)]

    def test_sink_left_open(self) -> None:
        sink = io.BytesIO()
        emitter = Emitter(sink, "IN;")
        emitter.start()
        emitter.finish()
        assert not sink.closed


class TestPacing:
    def test_no_timer_never_sleeps(self, fake_sleep) -> None:
        emitter = Emitter(io.BytesIO(), "IN;", None, fake_sleep)
        assert emitter.emit(Command("PA", b"100,0")) == 0
        assert fake_sleep.calls == []

    def test_delay_converted_to_seconds(self, fake_sleep) -> None:
        emitter = Emitter(io.BytesIO(), "IN;", MotionTimer(1000), fake_sleep)
        assert emitter.emit(Command("PA", b"100,0")) == 100_000
        assert fake_sleep.calls == [0.1]

    def test_zero_delay_skips_sleep(self, fake_sleep) -> None:
        emitter = Emitter(io.BytesIO(), "IN;", MotionTimer(1000), fake_sleep)
        emitter.emit(Command("PU"))
        assert fake_sleep.calls == []

    def test_write_reaches_sink_before_wait(self) -> None:
        events: list[tuple[str, object]] = []
        sink = RecordingSink(events)

        def sleep(seconds: float) -> None:
            events.append(("sleep", seconds))

        emitter = Emitter(sink, "IN;", MotionTimer(10), sleep)
        emitter.emit(Command("PD", b"0,50"))
        assert [kind for kind, _ in events] == ["write", "flush", "sleep"]
        assert events[-1] == ("sleep", 500 / 1_000_000)
