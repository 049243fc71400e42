"""Shared pytest fixtures for ckms-quantile tests."""

import logging
import random
from pathlib import Path

import pytest

OUTPUT_ROOT = Path(__file__).parent.parent / "test_output"


@pytest.fixture
def test_output_dir(request) -> Path:
    """Per-test folder for charts and CSVs: test_output/<module>/<test>/.

    Kept after the run so the artifacts can be inspected.
    """
    folder = OUTPUT_ROOT / request.module.__name__.rpartition(".")[2] / request.node.name
    folder.mkdir(parents=True, exist_ok=True)
    return folder


@pytest.fixture
def shuffled_values():
    """Factory for 0..n-1 in a seeded shuffle order."""

    def make(n: int, seed: int = 0xDEADBEEF) -> list[int]:
        values = list(range(n))
        random.Random(seed).shuffle(values)
        return values

    return make


def _restore_package_logger() -> None:
    logger = logging.getLogger("ckmsquantile")
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.NOTSET)


@pytest.fixture(autouse=True)
def quiet_package_logger():
    """Every test starts and ends with only the import-time NullHandler."""
    _restore_package_logger()
    yield
    _restore_package_logger()
