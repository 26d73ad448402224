"""Definition-driven announce parsing for relayarr."""

from .loader import (
    BUNDLED_DEFINITIONS_DIR,
    load_definition,
    load_definitions,
    parse_definition,
)
from .matcher import match, match_any
from .models import (
    CompiledPattern,
    Definition,
    IRCSpec,
    LinePattern,
    MatchResult,
    ParseSpec,
    Release,
    SettingSpec,
    SettingType,
    ValidDefinition,
)
from .normalizer import normalize
from .registry import DefinitionRegistry, get_definitions, init_definitions
from .template import RenderError, placeholders, render
from .validator import (
    DefinitionError,
    SettingsError,
    resolve_settings,
    run_definition_tests,
    validate,
)

__all__ = [
    "BUNDLED_DEFINITIONS_DIR",
    "CompiledPattern",
    "Definition",
    "DefinitionError",
    "DefinitionRegistry",
    "IRCSpec",
    "LinePattern",
    "MatchResult",
    "ParseSpec",
    "Release",
    "RenderError",
    "SettingSpec",
    "SettingType",
    "SettingsError",
    "ValidDefinition",
    "get_definitions",
    "init_definitions",
    "load_definition",
    "load_definitions",
    "match",
    "match_any",
    "normalize",
    "parse_definition",
    "placeholders",
    "render",
    "resolve_settings",
    "run_definition_tests",
    "validate",
]
