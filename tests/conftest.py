"""Root pytest configuration and shared fixtures."""

from __future__ import annotations

import os
from typing import Callable

import pytest

from quiesce.catalog import Catalog
from quiesce.config import QuiesceSettings, reset_default_values
from quiesce.quiescer import Quiescer, create_quiescer
from tests.helpers.fake_host import NOW, RUNNING, SUSPENDED, FakeHost, SleepRecorder

for _name in [key for key in os.environ if key.startswith("QUIESCE_")]:
    del os.environ[_name]


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch, tmp_path):
    """Keep .env lookups and log files inside the test's temp directory."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    reset_default_values()
    yield
    reset_default_values()


@pytest.fixture
def catalog() -> Catalog:
    return Catalog(
        services=("WSearch", "SysMain", "Spooler", "Missing"),
        processes=("Creative Cloud", "CCXProcess", "OneDrive", "Paused", "Ghost"),
        high_latency_service="WSearch",
    )


@pytest.fixture
def fake_host() -> FakeHost:
    return FakeHost(
        services={"WSearch": True, "SysMain": True, "Spooler": False},
        processes={"Creative Cloud": RUNNING, "CCXProcess": RUNNING, "OneDrive": RUNNING, "Paused": SUSPENDED},
        paths={
            "Creative Cloud": r"C:\Program Files\Adobe\Creative Cloud\ACC\Creative Cloud.exe",
            "CCXProcess": r"C:\Program Files\Adobe\CCXProcess\CCXProcess.exe",
            "OneDrive": r"C:\Users\bench\AppData\Local\Microsoft\OneDrive\OneDrive.exe",
            "Paused": r"C:\Tools\Paused.exe",
        },
    )


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def settings() -> QuiesceSettings:
    return QuiesceSettings()


@pytest.fixture
def make_quiescer(catalog, settings, sleep_recorder) -> Callable[[FakeHost], Quiescer]:
    def factory(host: FakeHost) -> Quiescer:
        return create_quiescer(host=host, catalog=catalog, settings=settings, sleep=sleep_recorder, clock=lambda: NOW)

    return factory
