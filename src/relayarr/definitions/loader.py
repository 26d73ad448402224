"""Load indexer definitions from YAML documents."""

from pathlib import Path

import msgspec
import yaml

from .. import logger
from .models import Definition, ValidDefinition
from .validator import DefinitionError, run_definition_tests, validate

# Definitions shipped with relayarr
BUNDLED_DEFINITIONS_DIR = Path(__file__).parent / "data"

DEFINITION_SUFFIXES = (".yaml", ".yml")


def parse_definition(content: str | bytes, source: str = "<string>") -> Definition:
    """Parse a YAML definition document without validating it.

    Args:
        content: YAML text.
        source: Name used in error messages.

    Returns:
        Definition: The parsed definition.

    Raises:
        DefinitionError: If the document is not valid YAML or does not have
            the definition shape.
    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise DefinitionError(f"{source}: invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise DefinitionError(f"{source}: definition must be a mapping")

    try:
        return msgspec.convert(data, type=Definition)
    except msgspec.ValidationError as e:
        raise DefinitionError(f"{source}: {e}") from e


def load_definition(path: str | Path, strict: bool = False) -> ValidDefinition:
    """Load and validate one definition file.

    Args:
        path: Path to a YAML definition.
        strict: If True, failing pattern examples make the definition invalid;
            otherwise they are only logged.

    Returns:
        ValidDefinition: The validated definition.

    Raises:
        DefinitionError: If the file is malformed or fails validation.
    """
    path = Path(path)
    valid = validate(parse_definition(path.read_text(encoding="utf-8"), str(path)))

    failures = run_definition_tests(valid)
    if failures:
        if strict:
            raise DefinitionError(f"{valid.identifier}: {failures[0]}")
        for failure in failures:
            logger.warning("Definition %s: %s", valid.identifier, failure)

    return valid


def load_definitions(
    directory: str | Path = BUNDLED_DEFINITIONS_DIR, strict: bool = False
) -> list[ValidDefinition]:
    """Load every definition file in a directory, sorted by file name.

    Args:
        directory: Directory containing YAML definitions.
        strict: Forwarded to load_definition.

    Returns:
        list[ValidDefinition]: Validated definitions.

    Raises:
        FileNotFoundError: If the directory does not exist.
        DefinitionError: If any definition is invalid.
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Definitions directory not found: {directory}")

    definitions = []
    for path in sorted(directory.iterdir()):
        if path.suffix not in DEFINITION_SUFFIXES:
            continue
        logger.debug("Loading definition file %s", path.name)
        definitions.append(load_definition(path, strict=strict))
    return definitions
