"""Shared test fixtures for the coherence test suite."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Generator

import pytest

from src.coherence.models import PackageRecord
from src.shared.constants import LOGGER_NAMESPACE
from tests.fixtures import make_package, sample_path


@pytest.fixture(autouse=True)
def reset_package_logger() -> Generator[None, None, None]:
    """Undo any setup_logging() call so handlers never leak between tests."""
    yield
    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def scenario_records() -> list[PackageRecord]:
    """A (1.0, depends on B >= 1.0 for net45) and B (2.0), both product packages."""
    return [
        make_package("A", "1.0", {"net45": [("B", "1.0")]}),
        make_package("B", "2.0"),
    ]


@pytest.fixture
def sample_manifest() -> Path:
    return sample_path("packages.yaml")


@pytest.fixture
def sample_config() -> Path:
    return sample_path("coherence.yaml")
