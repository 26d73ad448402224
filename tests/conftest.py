"""Shared test fixtures and configuration for relayarr tests."""

import pytest

import relayarr.logger as logger_module
from relayarr.definitions import (
    BUNDLED_DEFINITIONS_DIR,
    ValidDefinition,
    load_definition,
)


def pytest_configure(config: pytest.Config) -> None:
    """Initialize logger once for all tests."""
    if getattr(logger_module, "_logger_instance", None) is None:
        logger_module.init_logger("debug")


@pytest.fixture
def announce_line() -> str:
    """A PolishTracker announce line."""
    return (
        "::: PolishTracker ::: Torrent ( Some.Movie.2017.PLSUB.1080p.BDRip.x264-GROUP ) "
        "|| Kategoria: ( movies HD ) || Rozmiar: ( 2.14 GB ) "
        "|| Link: ( https://pte.nu/torrents/000000 )"
    )


@pytest.fixture
def polishtracker() -> ValidDefinition:
    """The bundled PolishTracker definition."""
    return load_definition(BUNDLED_DEFINITIONS_DIR / "polishtracker.yaml")


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    """Run anyio-marked tests on asyncio, the loop aiohttp requires."""
    return "asyncio"
