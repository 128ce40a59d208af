"""Tests for the HPGL tokenizer.

Validates delimiter handling (``;``, ``\\n``, ``\\r`` and runs of them),
empty input, offsets, and single-pass lazy iteration.
"""

from __future__ import annotations

import types

from hpgl_distiller.hpgl.tokenizer import DELIMITERS, tokenize


def _raw(buffer: bytes) -> list[bytes]:
    return [t.raw for t in tokenize(buffer)]


# ---------------------------------------------------------------------------
# Delimiters
# ---------------------------------------------------------------------------


class TestDelimiters:
    def test_semicolon_separated(self) -> None:
        assert _raw(b"IN;PU;PA10,10;") == [b"IN", b"PU", b"PA10,10"]

    def test_each_delimiter_splits(self) -> None:
        for delim in DELIMITERS:
            assert _raw(b"PU" + bytes([delim]) + b"PD") == [b"PU", b"PD"]

    def test_newline_and_carriage_return(self) -> None:
        assert _raw(b"IN\nPU\rPD1,2") == [b"IN", b"PU", b"PD1,2"]

    def test_delimiter_runs_form_one_boundary(self) -> None:
        assert _raw(b"IN;;\r\n\n;PU") == [b"IN", b"PU"]

    def test_leading_delimiters_skipped(self) -> None:
        assert _raw(b";;\nIN") == [b"IN"]

    def test_trailing_delimiters_yield_no_empty_token(self) -> None:
        assert _raw(b"PU;\r\n;;") == [b"PU"]

    def test_last_token_without_delimiter(self) -> None:
        assert _raw(b"IN;PA5,5") == [b"IN", b"PA5,5"]

    def test_other_whitespace_is_kept(self) -> None:
        assert _raw(b"PA 10, 20;LB a b") == [b"PA 10, 20", b"LB a b"]

    def test_non_ascii_bytes_survive(self) -> None:
        assert _raw(b"LB\xe9\x03;PU") == [b"LB\xe9\x03", b"PU"]


# ---------------------------------------------------------------------------
# Empty input
# ---------------------------------------------------------------------------


class TestEmpty:
    def test_empty_buffer(self) -> None:
        assert _raw(b"") == []

    def test_delimiters_only(self) -> None:
        assert _raw(b";\n\r;;") == []


# ---------------------------------------------------------------------------
# Iteration semantics
# ---------------------------------------------------------------------------


class TestIteration:
    def test_is_lazy_generator(self) -> None:
        assert isinstance(tokenize(b"IN;PU"), types.GeneratorType)

    def test_single_pass(self) -> None:
        tokens = tokenize(b"IN;PU;PD")
        assert next(tokens).raw == b"IN"
        assert [t.raw for t in tokens] == [b"PU", b"PD"]
        assert list(tokens) == []

    def test_offsets_point_into_buffer(self) -> None:
        buffer = b"IN;\r\nPA10,20;PU"
        for token in tokenize(buffer):
            assert buffer[token.offset:token.offset + len(token.raw)] == token.raw

    def test_source_buffer_untouched(self) -> None:
        buffer = bytearray(b"IN;PU;PA1,2;")
        snapshot = bytes(buffer)
        list(tokenize(bytes(buffer)))
        assert bytes(buffer) == snapshot

    def test_order_preserved(self) -> None:
        names = [b"A%d" % i for i in range(50)]
        assert _raw(b";".join(names)) == names
