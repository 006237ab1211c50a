"""
Tests for the validation rule model and fluent builder.
"""

import re

import pytest

from navparams.faults import RuleDefinitionFault
from navparams.validation.rules import (
    RuleKind,
    ValidationRule,
    ValidationRuleBuilder,
    rules_from_template,
)


class TestBuilder:

    def test_defaults(self):
        rule = ValidationRuleBuilder().build()
        assert rule == ValidationRule()
        assert rule.kind == RuleKind.STRING
        assert not rule.required

    def test_chaining_returns_builder(self):
        builder = ValidationRuleBuilder()
        assert builder.string().required().min_length(2).max_length(5) is builder

    def test_full_string_rule(self):
        rule = (
            ValidationRuleBuilder()
            .string()
            .required()
            .min_length(3)
            .max_length(10)
            .pattern(r"^[a-z]+$")
            .build()
        )
        assert rule.required
        assert rule.min_length == 3
        assert rule.max_length == 10
        assert rule.pattern.pattern == "^[a-z]+$"

    def test_optional_undoes_required(self):
        assert not ValidationRuleBuilder().required().optional().build().required

    def test_pattern_accepts_compiled_regex(self):
        regex = re.compile(r"^\d+$")
        assert ValidationRuleBuilder().pattern(regex).build().pattern is regex

    def test_pattern_flags(self):
        rule = ValidationRuleBuilder().pattern("^abc$", re.IGNORECASE).build()
        assert rule.pattern.match("ABC")

    def test_rule_is_frozen(self):
        rule = ValidationRuleBuilder().build()
        with pytest.raises(AttributeError):
            rule.required = True

    def test_builder_is_single_use(self):
        builder = ValidationRuleBuilder()
        builder.build()

        with pytest.raises(RuleDefinitionFault) as exc_info:
            builder.required()
        assert exc_info.value.code == "BUILDER_CONSUMED"

        with pytest.raises(RuleDefinitionFault):
            builder.build()


class TestBuilderErrors:

    def test_invalid_regex(self):
        with pytest.raises(RuleDefinitionFault) as exc_info:
            ValidationRuleBuilder().pattern("[a-")
        assert exc_info.value.code == "INVALID_PATTERN"
        assert exc_info.value.metadata["pattern"] == "[a-"

    def test_pattern_wrong_type(self):
        with pytest.raises(RuleDefinitionFault):
            ValidationRuleBuilder().pattern(42)

    @pytest.mark.parametrize("value", [-1, 1.5, True, "3"])
    def test_invalid_length(self, value):
        with pytest.raises(RuleDefinitionFault) as exc_info:
            ValidationRuleBuilder().min_length(value)
        assert exc_info.value.code == "INVALID_LENGTH"

    @pytest.mark.parametrize("kind", ["number", "boolean"])
    def test_length_on_lengthless_kind(self, kind):
        builder = getattr(ValidationRuleBuilder(), kind)().min_length(1)
        with pytest.raises(RuleDefinitionFault) as exc_info:
            builder.build()
        assert exc_info.value.code == "INVALID_RULE_COMBINATION"

    def test_min_exceeds_max(self):
        builder = ValidationRuleBuilder().min_length(5).max_length(2)
        with pytest.raises(RuleDefinitionFault) as exc_info:
            builder.build()
        assert exc_info.value.code == "INVALID_RULE_COMBINATION"

    def test_failed_build_leaves_builder_open(self):
        builder = ValidationRuleBuilder().min_length(5).max_length(2)
        with pytest.raises(RuleDefinitionFault):
            builder.build()
        assert builder.max_length(8).build().max_length == 8

    def test_custom_must_be_callable(self):
        with pytest.raises(RuleDefinitionFault) as exc_info:
            ValidationRuleBuilder().custom("nope")
        assert exc_info.value.code == "INVALID_PREDICATE"


class TestPresets:

    def test_uuid_preset_is_required(self):
        rule = ValidationRuleBuilder.uuid().build()
        assert rule.required
        assert rule.pattern.match("550E8400-E29B-41D4-A716-446655440000")

    def test_presets_registry(self):
        assert set(ValidationRuleBuilder.presets) == {"uuid", "email", "slug", "date"}
        rule = ValidationRuleBuilder.presets["slug"]().required().build()
        assert rule.required
        assert rule.pattern.match("my-post-1")

    def test_email_preset_kind(self):
        assert ValidationRuleBuilder.email().build().kind == RuleKind.EMAIL

    def test_date_preset(self):
        rule = ValidationRuleBuilder.date().build()
        assert rule.pattern.match("2024-01-31")
        assert not rule.pattern.match("31/01/2024")

    def test_presets_return_fresh_builders(self):
        assert ValidationRuleBuilder.slug() is not ValidationRuleBuilder.slug()


class TestFingerprint:

    def test_equal_rules_equal_fingerprints(self):
        first = ValidationRuleBuilder().string().required().min_length(2).build()
        second = ValidationRuleBuilder().string().required().min_length(2).build()
        assert first.fingerprint() == second.fingerprint()

    def test_different_rules_differ(self):
        first = ValidationRuleBuilder().string().build()
        second = ValidationRuleBuilder().number().build()
        assert first.fingerprint() != second.fingerprint()

    def test_pattern_flags_part_of_fingerprint(self):
        first = ValidationRuleBuilder().pattern("^a$").build()
        second = ValidationRuleBuilder().pattern("^a$", re.IGNORECASE).build()
        assert first.fingerprint() != second.fingerprint()

    def test_to_dict(self):
        data = ValidationRuleBuilder().number().required().build().to_dict()
        assert data == {
            "kind": "number",
            "required": True,
            "min_length": None,
            "max_length": None,
            "pattern": None,
            "custom": False,
            "default": None,
        }


class TestRulesFromTemplate:

    def test_required_follows_optional_marker(self):
        rules = rules_from_template("/org/:orgId/team/:teamId?")
        assert rules["orgId"].required
        assert not rules["teamId"].required
        assert all(rule.kind == RuleKind.STRING for rule in rules.values())

    def test_repeated_names_once(self):
        assert list(rules_from_template("/:a/:a/:b")) == ["a", "b"]


class TestFormatAndDefaults:

    def test_format_kinds(self):
        assert ValidationRuleBuilder().uuid_format().build().kind == RuleKind.UUID
        assert ValidationRuleBuilder().email_format().build().kind == RuleKind.EMAIL

    def test_default(self):
        assert ValidationRuleBuilder().default("asc").build().default == "asc"

    @pytest.mark.parametrize("value", ["", 1, None])
    def test_invalid_default(self, value):
        with pytest.raises(RuleDefinitionFault) as exc_info:
            ValidationRuleBuilder().default(value)
        assert exc_info.value.code == "INVALID_DEFAULT"

    def test_default_on_required_rule(self):
        builder = ValidationRuleBuilder().required().default("x")
        with pytest.raises(RuleDefinitionFault) as exc_info:
            builder.build()
        assert exc_info.value.code == "INVALID_RULE_COMBINATION"

    def test_default_part_of_fingerprint(self):
        first = ValidationRuleBuilder().default("a").build()
        second = ValidationRuleBuilder().default("b").build()
        assert first.fingerprint() != second.fingerprint()

    def test_fingerprint_ignores_predicate_identity(self):
        first = ValidationRuleBuilder().custom(lambda v: True).build()
        second = ValidationRuleBuilder().custom(lambda v: False).build()
        assert first.fingerprint() == second.fingerprint()

    def test_rules_from_template_defaults(self):
        rules = rules_from_template("/list/:page?/:size?", defaults={"page": "1"})
        assert rules["page"].default == "1"
        assert rules["size"].default is None

    def test_rules_from_template_default_for_required(self):
        with pytest.raises(RuleDefinitionFault):
            rules_from_template("/users/:id", defaults={"id": "1"})
