"""Shared fixtures for the distiller test suite."""

from __future__ import annotations

import logging

import pytest

from hpgl_distiller.configs.loader import DistillerConfig
from hpgl_distiller.utils import logging_config


class FakeSleep:
    """Records requested waits instead of blocking."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)

    @property
    def total_us(self) -> int:
        return round(sum(self.calls) * 1_000_000)


@pytest.fixture()
def fake_sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture()
def config() -> DistillerConfig:
    """Built-in defaults: ``IN;PU;`` init, no pacing, no normalisation."""
    return DistillerConfig()


@pytest.fixture()
def pstoedit_document() -> bytes:
    """Typical full HPGL as emitted by ``pstoedit -f plot-hpgl``."""
    return (
        b"IN;SC;PU;SP1;LT;VS36;\n"
        b"PU100,100;PD200,100;PD200,200;PD100,200;PD100,100;\n"
        b"SP2;PW0.35;PU-50,30;PA10,20;PR5,5;LBhello\x03;\n"
        b"!PG;PGfoo;PU;SP0;\r\n"
    )


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logging_config.shutdown()
    logging_config.pop_context()
    logging.getLogger().setLevel(logging.WARNING)
