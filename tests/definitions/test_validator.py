"""Unit tests for definition validation and settings resolution."""

import pytest

from relayarr.definitions import (
    DefinitionError,
    LinePattern,
    SettingSpec,
    SettingsError,
    SettingType,
    ValidDefinition,
    resolve_settings,
    run_definition_tests,
    validate,
)

# --- Tests for validate ---


class TestValidate:
    """Tests for validate."""

    def test_valid_definition_compiles_patterns(self, make_definition) -> None:
        """Should return a handle holding one compiled pattern per line."""
        valid = validate(make_definition())

        assert isinstance(valid, ValidDefinition)
        assert len(valid.compiled) == 1
        assert valid.compiled[0].vars == ("torrentName", "category", "torrentId")
        assert valid.variable_names == {"torrentName", "category", "torrentId"}

    def test_validate_is_idempotent(self, make_definition) -> None:
        """Should produce equivalent results when validating twice."""
        definition = make_definition()

        first = validate(definition)
        second = validate(definition)

        assert first == second
        assert validate(first) == first

    def test_pattern_that_does_not_compile(self, make_definition) -> None:
        """Should reject a pattern with invalid regex syntax."""
        definition = make_definition(
            lines=[LinePattern(pattern=r"Torrent \( (.*", vars=("name",))]
        )

        with pytest.raises(DefinitionError, match="pattern 0 does not compile"):
            validate(definition)

    def test_group_count_mismatch(self, make_definition) -> None:
        """Should reject a pattern whose vars do not match its groups."""
        definition = make_definition(
            lines=[LinePattern(pattern=r"(\w+) (\w+)", vars=("torrentName",))]
        )

        with pytest.raises(DefinitionError, match="2 capture group"):
            validate(definition)

    def test_too_many_vars(self, make_definition) -> None:
        """Should reject more variables than capture groups."""
        definition = make_definition(
            lines=[
                LinePattern(pattern=r"(\d+)", vars=("torrentId", "torrentName")),
            ]
        )

        with pytest.raises(DefinitionError, match="declares 2 variable"):
            validate(definition)

    def test_undeclared_template_reference(self, make_definition) -> None:
        """Should reject a template naming neither a variable nor a setting."""
        definition = make_definition(
            match={"torrenturl": "https://example.org/{{ .rsskey }}/{{ .torrentId }}"}
        )

        with pytest.raises(DefinitionError, match="undeclared name 'rsskey'"):
            validate(definition)

    def test_template_may_reference_setting(self, make_definition) -> None:
        """Should accept templates referencing declared settings."""
        definition = make_definition(
            match={"torrenturl": "{{ .passkey }}"},
        )

        assert validate(definition).declared_names >= {"passkey", "torrentId"}

    def test_malformed_placeholder(self, make_definition) -> None:
        """Should reject a placeholder without the leading dot."""
        definition = make_definition(match={"torrenturl": "{{ torrentId }}"})

        with pytest.raises(DefinitionError, match="malformed placeholder"):
            validate(definition)

    def test_duplicate_variable_in_pattern(self, make_definition) -> None:
        """Should reject a pattern declaring the same variable twice."""
        definition = make_definition(
            lines=[LinePattern(pattern=r"(\w+) (\w+)", vars=("name", "name"))],
            match={},
        )

        with pytest.raises(DefinitionError, match="'name' more than once"):
            validate(definition)

    def test_same_variable_in_different_patterns(self, make_definition) -> None:
        """Should allow different patterns to reuse variable names."""
        definition = make_definition(
            lines=[
                LinePattern(pattern=r"A: (\w+)", vars=("torrentName",)),
                LinePattern(pattern=r"B: (\w+)", vars=("torrentName",)),
            ],
            match={},
        )

        assert len(validate(definition).compiled) == 2

    def test_compile_error_reported_before_arity(self, make_definition) -> None:
        """Should report the first check that fails, in check order."""
        definition = make_definition(
            lines=[
                LinePattern(pattern=r"(\w+) (\w+)", vars=("a",)),
                LinePattern(pattern=r"[unclosed", vars=()),
            ],
            match={},
        )

        with pytest.raises(DefinitionError, match="pattern 1 does not compile"):
            validate(definition)

    def test_no_patterns(self, make_definition) -> None:
        """Should reject a definition without patterns."""
        with pytest.raises(DefinitionError, match="no patterns"):
            validate(make_definition(lines=[], match={}))

    def test_no_identifier(self, make_definition) -> None:
        """Should reject a definition without identifier."""
        with pytest.raises(DefinitionError, match="no identifier"):
            validate(make_definition(identifier=""))

    def test_polishtracker_is_valid(self, polishtracker: ValidDefinition) -> None:
        """Should validate the bundled definition."""
        assert polishtracker.identifier == "polishtracker"
        assert polishtracker.secret_settings == {"rsskey"}


# --- Tests for run_definition_tests ---


class TestRunDefinitionTests:
    """Tests for run_definition_tests."""

    def test_bundled_examples_pass(self, polishtracker: ValidDefinition) -> None:
        """Should report no failures for the shipped examples."""
        assert run_definition_tests(polishtracker) == []

    def test_reports_non_matching_example(self, make_definition) -> None:
        """Should report an example that no pattern matches."""
        valid = validate(
            make_definition(
                lines=[
                    LinePattern(
                        pattern=r"^New: (\w+)$",
                        vars=("torrentName",),
                        test=("New: Foo", "Old: Bar"),
                    )
                ],
                match={},
            )
        )

        failures = run_definition_tests(valid)

        assert failures == ["pattern 0: example does not match: Old: Bar"]

    def test_reports_example_claimed_by_earlier_pattern(self, make_definition) -> None:
        """Should report an example shadowed by an earlier pattern."""
        valid = validate(
            make_definition(
                lines=[
                    LinePattern(pattern=r"New: (.+)", vars=("torrentName",)),
                    LinePattern(
                        pattern=r"New: (\w+) \[(\w+)\]",
                        vars=("torrentName", "category"),
                        test=("New: Foo [tv]",),
                    ),
                ],
                match={},
            )
        )

        failures = run_definition_tests(valid)

        assert len(failures) == 1
        assert "claimed by pattern 0" in failures[0]


# --- Tests for resolve_settings ---


class TestResolveSettings:
    """Tests for resolve_settings."""

    def test_supplied_value_used(self, example_definition: ValidDefinition) -> None:
        """Should return the operator-supplied value."""
        assert resolve_settings(example_definition, {"passkey": "s3cret"}) == {
            "passkey": "s3cret"
        }

    def test_missing_required_setting(self, example_definition: ValidDefinition) -> None:
        """Should raise SettingsError for a missing required setting."""
        with pytest.raises(SettingsError, match="'passkey' is missing"):
            resolve_settings(example_definition, {})

    def test_default_fills_required(self, make_definition) -> None:
        """Should fall back to the declared default."""
        valid = validate(
            make_definition(
                settings=[
                    SettingSpec(
                        name="passkey",
                        type=SettingType.SECRET,
                        required=True,
                        default="fallback",
                    )
                ]
            )
        )

        assert resolve_settings(valid, None) == {"passkey": "fallback"}

    def test_optional_setting_omitted(self, polishtracker: ValidDefinition) -> None:
        """Should omit optional settings without value or default."""
        assert resolve_settings(polishtracker, {}) == {}

    def test_unknown_setting_ignored(self, polishtracker: ValidDefinition) -> None:
        """Should ignore keys the definition does not declare."""
        resolved = resolve_settings(
            polishtracker, {"rsskey": "ABC123", "bogus": "x", "nickserv.password": "p"}
        )

        assert resolved == {"rsskey": "ABC123"}
