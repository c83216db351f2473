"""Shared test configuration: markers and a pinned host local time zone."""

import os
import time
from collections.abc import Generator
from typing import Any

import pytest

# POSIX TZ rule (US Pacific), needs no tzdata. DST starts 2024-03-10, ends 2024-11-03.
PINNED_LOCAL_TZ = "PST8PDT,M3.2.0,M11.1.0"


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "integration: Multi-module pipeline tests")


@pytest.fixture(autouse=True)
def pinned_local_timezone() -> Generator[str, Any, None]:
    """Pin the host local time zone so instant arithmetic is deterministic.

    All instants are floating local time, so day boundaries depend on the
    process TZ. The previous value is restored after each test.
    """
    previous = os.environ.get("TZ")
    os.environ["TZ"] = PINNED_LOCAL_TZ
    if hasattr(time, "tzset"):
        time.tzset()
    yield PINNED_LOCAL_TZ
    if previous is None:
        os.environ.pop("TZ", None)
    else:
        os.environ["TZ"] = previous
    if hasattr(time, "tzset"):
        time.tzset()
