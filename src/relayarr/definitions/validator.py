"""Load-time validation of indexer definitions."""

import re
from collections import Counter
from collections.abc import Mapping

from .. import logger
from .matcher import match
from .models import CompiledPattern, Definition, ValidDefinition
from .template import malformed_tokens, placeholders


class DefinitionError(ValueError):
    """Definition is malformed and must not be used."""


class SettingsError(ValueError):
    """Operator-supplied settings do not satisfy a definition's schema."""


def validate(definition: Definition | ValidDefinition) -> ValidDefinition:
    """Compile and check a definition.

    Checks run in this order and stop at the first violation: every pattern
    compiles, each pattern has one variable per capture group, every template
    placeholder names a declared variable or setting, and no pattern declares
    the same variable twice.

    Args:
        definition: Definition to validate. An already validated definition
            is validated again from its source data.

    Returns:
        ValidDefinition: Read-only handle holding the compiled patterns.

    Raises:
        DefinitionError: On the first violation found.
    """
    if isinstance(definition, ValidDefinition):
        definition = definition.definition

    ident = definition.identifier or "<unnamed>"
    if not definition.identifier:
        raise DefinitionError("Definition has no identifier")
    if not definition.patterns:
        raise DefinitionError(f"{ident}: definition declares no patterns")

    regexes: list[re.Pattern[str]] = []
    for i, line in enumerate(definition.patterns):
        try:
            regexes.append(re.compile(line.pattern))
        except re.error as e:
            raise DefinitionError(
                f"{ident}: pattern {i} does not compile: {e}"
            ) from e

    for i, (line, regex) in enumerate(zip(definition.patterns, regexes)):
        if regex.groups != len(line.vars):
            raise DefinitionError(
                f"{ident}: pattern {i} has {regex.groups} capture group(s) "
                f"but declares {len(line.vars)} variable(s)"
            )

    variable_names = frozenset(v for line in definition.patterns for v in line.vars)
    declared = variable_names | frozenset(definition.settings_schema)
    for field, template in definition.match_templates.items():
        bad_tokens = malformed_tokens(template)
        if bad_tokens:
            raise DefinitionError(
                f"{ident}: template {field!r} has malformed placeholder "
                f"{bad_tokens[0]!r}"
            )
        for name in placeholders(template):
            if name not in declared:
                raise DefinitionError(
                    f"{ident}: template {field!r} references undeclared "
                    f"name {name!r}"
                )

    for i, line in enumerate(definition.patterns):
        duplicates = [name for name, n in Counter(line.vars).items() if n > 1]
        if duplicates:
            raise DefinitionError(
                f"{ident}: pattern {i} declares variable {duplicates[0]!r} "
                "more than once"
            )

    logger.debug(
        "Validated definition %s (%d pattern(s))", ident, len(definition.patterns)
    )
    return ValidDefinition(
        definition=definition,
        compiled=tuple(
            CompiledPattern(regex=regex, vars=line.vars)
            for line, regex in zip(definition.patterns, regexes)
        ),
        variable_names=variable_names,
    )


def run_definition_tests(valid: ValidDefinition) -> list[str]:
    """Run the example lines shipped with each pattern.

    An example is expected to be matched by the pattern it is listed under;
    first-match-wins means an earlier pattern claiming it is a failure too.

    Args:
        valid: Validated definition.

    Returns:
        list[str]: Failure descriptions, empty when every example passes.
    """
    failures = []
    for i, line in enumerate(valid.definition.patterns):
        for example in line.test:
            result = match(valid, example)
            if result is None:
                failures.append(f"pattern {i}: example does not match: {example}")
            elif result.pattern_index != i:
                failures.append(
                    f"pattern {i}: example claimed by pattern "
                    f"{result.pattern_index}: {example}"
                )
    return failures


def resolve_settings(
    valid: ValidDefinition, supplied: Mapping[str, str] | None = None
) -> dict[str, str]:
    """Merge operator-supplied settings with a definition's declared defaults.

    Args:
        valid: Validated definition.
        supplied: Operator-supplied values, e.g. from the config file.

    Returns:
        dict[str, str]: Value for every declared setting that has one.

    Raises:
        SettingsError: If a required setting has no value and no default.
    """
    supplied = supplied or {}
    definition = valid.definition
    known = set(definition.settings_schema)
    if definition.irc is not None:
        known.update(s.name for s in definition.irc.settings)

    for key in supplied:
        if key not in known:
            logger.warning(
                "Ignoring unknown setting %r for indexer %s", key, valid.identifier
            )

    resolved = {}
    for spec in definition.settings:
        value = supplied.get(spec.name) or spec.default
        if value:
            resolved[spec.name] = value
        elif spec.required:
            raise SettingsError(
                f"{valid.identifier}: required setting {spec.name!r} is missing"
            )
    return resolved
