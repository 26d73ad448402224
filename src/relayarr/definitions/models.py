"""Data models for indexer definitions and parsed releases."""

import re
from enum import StrEnum

import msgspec


class SettingType(StrEnum):
    """Kind of an operator-supplied definition setting."""

    TEXT = "text"
    SECRET = "secret"


class SettingSpec(msgspec.Struct, frozen=True):
    """Declared setting of a definition (e.g. an RSS key).

    Attributes:
        name: Setting key, referenced from templates as ``{{ .name }}``.
        type: Whether the value is plain text or a secret.
        required: Whether the operator must supply a value.
        default: Value used when the operator supplies none.
        label: Human readable label.
        help: Help text shown to the operator.
    """

    name: str
    type: SettingType = SettingType.TEXT
    required: bool = False
    default: str | None = None
    label: str = ""
    help: str = ""


class LinePattern(msgspec.Struct, frozen=True):
    """One announce line grammar: a regex and the names of its groups.

    Attributes:
        pattern: Regular expression with positional capture groups.
        vars: Variable names, one per capture group, in group order.
        test: Example announce lines the pattern must match.
    """

    pattern: str
    vars: tuple[str, ...] = ()
    test: tuple[str, ...] = ()


class ParseSpec(msgspec.Struct, frozen=True):
    """The ``parse`` block of a definition document."""

    lines: tuple[LinePattern, ...]
    match: dict[str, str] = msgspec.field(default_factory=dict)
    type: str = "single"


class IRCSpec(msgspec.Struct, frozen=True):
    """IRC network details of a definition, consumed by the IRC collaborator."""

    network: str = ""
    server: str = ""
    port: int = 6667
    tls: bool = False
    channels: tuple[str, ...] = ()
    announcers: tuple[str, ...] = ()
    settings: tuple[SettingSpec, ...] = ()


class Definition(msgspec.Struct, frozen=True):
    """Declarative description of one tracker's announce grammar."""

    identifier: str
    parse: ParseSpec
    name: str = ""
    description: str = ""
    language: str = ""
    urls: tuple[str, ...] = ()
    privacy: str = ""
    protocol: str = "torrent"
    supports: tuple[str, ...] = ()
    source: str = ""
    settings: tuple[SettingSpec, ...] = ()
    irc: IRCSpec | None = None

    @property
    def patterns(self) -> tuple[LinePattern, ...]:
        """Ordered line patterns."""
        return self.parse.lines

    @property
    def match_templates(self) -> dict[str, str]:
        """Output field name to template string."""
        return self.parse.match

    @property
    def settings_schema(self) -> dict[str, SettingSpec]:
        """Setting name to its declaration."""
        return {setting.name: setting for setting in self.settings}


class CompiledPattern(msgspec.Struct, frozen=True):
    """A line pattern whose regex has been compiled and checked."""

    regex: re.Pattern[str]
    vars: tuple[str, ...]


class ValidDefinition(msgspec.Struct, frozen=True):
    """Validated, read-only handle on a definition.

    Only produced by ``validate``. Holds the compiled regexes so matching
    never recompiles; safe to share between concurrent matchers.
    """

    definition: Definition
    compiled: tuple[CompiledPattern, ...]
    variable_names: frozenset[str]

    @property
    def identifier(self) -> str:
        return self.definition.identifier

    @property
    def declared_names(self) -> frozenset[str]:
        """Names a template may reference: variables plus settings."""
        return self.variable_names | frozenset(self.definition.settings_schema)

    @property
    def secret_settings(self) -> frozenset[str]:
        """Names of settings whose values must never be logged."""
        return frozenset(
            s.name for s in self.definition.settings if s.type == SettingType.SECRET
        )


class MatchResult(msgspec.Struct, frozen=True):
    """Variables captured from one announce line.

    Frozen at the top level only; the variables dict is not copied here.

    Attributes:
        variables: Variable name to captured string.
        pattern_index: Index of the pattern that matched.
    """

    variables: dict[str, str]
    pattern_index: int = 0


class Release(msgspec.Struct, frozen=True):
    """Canonical release produced from one matched announce line.

    Frozen at the top level only. ``normalize`` gives every release its own
    copies of ``raw_variables`` and ``rendered``.

    Attributes:
        title: Release name.
        category: Tracker category as announced.
        size: Size as announced, e.g. "2.14 GB". Not parsed.
        download_url: Rendered download URL. May embed secrets.
        indexer: Identifier of the definition that produced the release.
        protocol: Download protocol, e.g. "torrent".
        raw_variables: Every captured variable.
        rendered: Every rendered match template, by field name.
    """

    title: str = ""
    category: str = ""
    size: str = ""
    download_url: str = ""
    indexer: str = ""
    protocol: str = "torrent"
    raw_variables: dict[str, str] = msgspec.field(default_factory=dict)
    rendered: dict[str, str] = msgspec.field(default_factory=dict)
