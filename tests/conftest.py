"""Pytest configuration and shared fixtures for laserbox tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from laserbox.application import GenerateBoxCommand
from laserbox.domain import BoxInputs

FIXTURES_PATH = Path(__file__).parent / "fixtures" / "configs"


def pytest_configure(config: pytest.Config) -> None:
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "slow: tests that take a long time to run")


@pytest.fixture
def fixtures_path() -> Path:
    """Directory holding the JSON configuration fixtures."""
    return FIXTURES_PATH


@pytest.fixture
def simple_inputs() -> BoxInputs:
    """A 120 x 80 x 60 mm open box in 3 mm stock with 10 mm fingers."""
    return BoxInputs(width=120, depth=80, height=60, thickness=3, kerf=0.15, finger_width=10)


@pytest.fixture
def default_inputs() -> BoxInputs:
    """A 120 x 80 x 60 mm open box with default finger bounds."""
    return BoxInputs(width=120, depth=80, height=60)


@pytest.fixture
def generate_command() -> GenerateBoxCommand:
    return GenerateBoxCommand()
