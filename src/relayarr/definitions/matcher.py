"""Announce line matching against validated definitions.

All functions in this module are pure: the validated definition is only
read, so any number of lines may be matched concurrently.
"""

from collections.abc import Iterable

from .models import MatchResult, ValidDefinition


def match(valid: ValidDefinition, line: str) -> MatchResult | None:
    """Match one announce line against a definition's patterns.

    Patterns are tried in declared order and the first one that matches wins.
    Anchoring, case and whitespace handling come from the pattern text alone;
    the line is not trimmed or normalized.

    Args:
        valid: Validated definition.
        line: Raw announce line.

    Returns:
        MatchResult | None: Captured variables, or None if no pattern matches.
    """
    for index, compiled in enumerate(valid.compiled):
        found = compiled.regex.search(line)
        if found is None:
            continue
        # Groups that did not take part in the match capture ""
        values = found.groups(default="")
        return MatchResult(
            variables=dict(zip(compiled.vars, values)),
            pattern_index=index,
        )
    return None


def match_any(
    definitions: Iterable[ValidDefinition], line: str
) -> tuple[ValidDefinition, MatchResult] | None:
    """Match a line against several definitions, first match wins.

    Args:
        definitions: Validated definitions, in priority order.
        line: Raw announce line.

    Returns:
        The matching definition and its result, or None.
    """
    for valid in definitions:
        result = match(valid, line)
        if result is not None:
            return valid, result
    return None
