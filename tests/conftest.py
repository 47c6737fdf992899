"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Generator

import pytest

from src.probing.registry import ProbeRegistry
from tests.fakes import FakeCheck


@pytest.fixture
def fake_check() -> FakeCheck:
    """A check capability that always reports healthy."""
    return FakeCheck()


@pytest.fixture
def registry(fake_check: FakeCheck) -> Generator[ProbeRegistry, None, None]:
    """A registry using ``fake_check`` as its default capability."""
    reg = ProbeRegistry(check=fake_check)
    yield reg
    reg.close()
