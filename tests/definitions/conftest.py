"""Shared fixtures for definition tests."""

import pytest

from relayarr.definitions import (
    Definition,
    LinePattern,
    ParseSpec,
    SettingSpec,
    SettingType,
    ValidDefinition,
    validate,
)


def _make_definition(
    lines: list[LinePattern] | None = None,
    match: dict[str, str] | None = None,
    settings: list[SettingSpec] | None = None,
    identifier: str = "example",
) -> Definition:
    """Build a small definition for tests."""
    if lines is None:
        lines = [
            LinePattern(
                pattern=r"New: (.+) \[(\w+)\] id=(\d+)",
                vars=("torrentName", "category", "torrentId"),
            )
        ]
    return Definition(
        identifier=identifier,
        parse=ParseSpec(
            lines=tuple(lines),
            match=match
            if match is not None
            else {
                "torrenturl": (
                    "https://example.org/dl/{{ .torrentId }}?key={{ .passkey }}"
                )
            },
        ),
        settings=tuple(
            settings
            if settings is not None
            else [SettingSpec(name="passkey", type=SettingType.SECRET, required=True)]
        ),
    )


@pytest.fixture
def make_definition():
    """Factory building small definitions."""
    return _make_definition


@pytest.fixture
def example_definition() -> ValidDefinition:
    """A validated single-pattern definition."""
    return validate(_make_definition())
