"""
Tests for the validator: typed rules and parent-dependency warnings.
"""

import pytest

from navparams.patterns.hierarchy import build_hierarchy
from navparams.validation.rules import ValidationRuleBuilder
from navparams.validation.validator import (
    DependencyWarning,
    check_dependencies,
    check_rule,
    validate,
    validate_nested_parameters,
)

UUID = "550e8400-e29b-41d4-a716-446655440000"


class TestTypedRules:

    def test_number_rule(self):
        rule = ValidationRuleBuilder().number().build()
        assert check_rule("n", "abc", rule) == ["Parameter n must be a number"]
        assert check_rule("n", "123", rule) == []
        assert check_rule("n", "-1.5e3", rule) == []

    @pytest.mark.parametrize("value", ["nan", "inf", "-Infinity"])
    def test_number_rejects_non_finite(self, value):
        rule = ValidationRuleBuilder().number().build()
        assert check_rule("n", value, rule) == ["Parameter n must be a number"]

    def test_boolean_rule(self):
        rule = ValidationRuleBuilder().boolean().build()
        assert check_rule("flag", "TRUE", rule) == []
        assert check_rule("flag", "false", rule) == []
        assert check_rule("flag", "yes", rule) == ["Parameter flag must be a boolean"]

    def test_uuid_preset(self):
        rule = ValidationRuleBuilder.uuid().build()
        assert check_rule("id", UUID, rule) == []
        assert check_rule("id", "not-a-uuid", rule) == ["Parameter id does not match required pattern"]

    def test_email_preset(self):
        rule = ValidationRuleBuilder.email().build()
        assert check_rule("to", "a@b.io", rule) == []
        assert check_rule("to", "a@b", rule) == ["Parameter to must be a valid email"]

    def test_required_empty_value(self):
        rule = ValidationRuleBuilder().required().min_length(3).build()
        assert check_rule("q", "", rule) == ["Parameter q is required"]

    def test_optional_empty_value_skips_checks(self):
        rule = ValidationRuleBuilder().number().build()
        assert check_rule("q", "", rule) == []

    def test_length_bounds(self):
        rule = ValidationRuleBuilder().min_length(3).max_length(5).build()
        assert check_rule("s", "ab", rule) == ["Parameter s must be at least 3 characters long"]
        assert check_rule("s", "abcdef", rule) == ["Parameter s cannot exceed 5 characters"]
        assert check_rule("s", "abcd", rule) == []

    def test_pattern_and_custom(self):
        rule = (
            ValidationRuleBuilder()
            .pattern(r"^[a-z]+$")
            .custom(lambda v: v != "admin")
            .build()
        )
        assert check_rule("u", "bob", rule) == []
        assert check_rule("u", "Bob", rule) == ["Parameter u does not match required pattern"]
        assert check_rule("u", "admin", rule) == ["Parameter u failed custom validation"]

    def test_errors_accumulate(self):
        rule = ValidationRuleBuilder().min_length(5).pattern(r"^\d+$").build()
        assert check_rule("s", "ab", rule) == [
            "Parameter s must be at least 5 characters long",
            "Parameter s does not match required pattern",
        ]

    def test_predicate_exception_propagates(self):
        def explode(value):
            raise RuntimeError("boom")

        rule = ValidationRuleBuilder().custom(explode).build()
        with pytest.raises(RuntimeError):
            check_rule("x", "value", rule)


class TestDependencies:

    def test_child_without_parent_warns(self):
        hierarchy = build_hierarchy("/products/:category?/:subcategory?/:productId")
        params = {"category": "", "subcategory": "phones", "productId": "p1"}

        warnings = check_dependencies(params, hierarchy)

        assert warnings == [DependencyWarning(name="subcategory", parent="category")]
        assert warnings[0].message == "Parameter subcategory requires parent parameter category"

    def test_empty_child_does_not_warn(self):
        hierarchy = build_hierarchy("/:a?/:b?")
        assert check_dependencies({"a": "", "b": ""}, hierarchy) == []

    def test_roots_never_warn(self):
        hierarchy = build_hierarchy("/:a")
        assert check_dependencies({"a": "x"}, hierarchy) == []


class TestValidate:

    def test_valid(self):
        hierarchy = build_hierarchy("/users/:id")
        result = validate({"id": UUID}, hierarchy, {"id": ValidationRuleBuilder.uuid().build()})

        assert result.is_valid
        assert result.errors == ()
        assert result.warnings == ()
        assert result.validation_time_ms >= 0.0

    def test_warnings_do_not_affect_validity(self):
        hierarchy = build_hierarchy("/:a?/:b")
        result = validate({"a": "", "b": "x"}, hierarchy, {})

        assert result.is_valid
        assert result.warnings[0].name == "b"

    def test_rule_for_unbound_parameter(self):
        result = validate({}, {}, {"id": ValidationRuleBuilder().required().build()})
        assert not result.is_valid
        assert result.errors == ("Parameter id is required",)

    def test_no_rules(self):
        assert validate({"a": "1"}, build_hierarchy("/:a")).is_valid

    def test_host_entry_point(self):
        rules = {"n": ValidationRuleBuilder().number().build()}
        result = validate_nested_parameters({"n": "abc"}, build_hierarchy("/:n"), rules)
        assert result.errors == ("Parameter n must be a number",)

    def test_to_dict(self):
        result = validate({"a": "", "b": "x"}, build_hierarchy("/:a?/:b"), {})
        data = result.to_dict()
        assert data["is_valid"] is True
        assert data["warnings"][0]["parent"] == "a"


class TestNumberGrammar:

    @pytest.mark.parametrize("value", ["0", "-12", "+3.5", ".5", "5.", "1e3", "2.5E-4", "0x1A", "0o17", "0b101", " 42 "])
    def test_accepted(self, value):
        rule = ValidationRuleBuilder().number().build()
        assert check_rule("n", value, rule) == []

    @pytest.mark.parametrize("value", ["1_000", "١٢", "1e999", "Infinity", "-0x1A", "1.2.3", "e5", "0x"])
    def test_rejected(self, value):
        rule = ValidationRuleBuilder().number().build()
        assert check_rule("n", value, rule) == ["Parameter n must be a number"]


class TestFormatKinds:

    def test_uuid_format(self):
        rule = ValidationRuleBuilder().uuid_format().build()
        assert check_rule("id", UUID.upper(), rule) == []
        assert check_rule("id", "not-a-uuid", rule) == ["Parameter id must be a valid UUID"]

    def test_email_format(self):
        rule = ValidationRuleBuilder().email_format().build()
        assert check_rule("to", "bad", rule) == ["Parameter to must be a valid email"]


class TestDefaults:

    def test_default_reported_not_applied(self):
        hierarchy = build_hierarchy("/list/:page?")
        params = {"page": ""}
        rules = {"page": ValidationRuleBuilder().number().default("1").build()}

        result = validate(params, hierarchy, rules)

        assert result.is_valid
        assert dict(result.defaults_applied) == {"page": "1"}
        assert params == {"page": ""}
        assert result.resolve(params) == {"page": "1"}

    def test_present_value_wins(self):
        rules = {"page": ValidationRuleBuilder().default("1").build()}
        result = validate({"page": "7"}, build_hierarchy("/:page?"), rules)
        assert dict(result.defaults_applied) == {}

    def test_default_is_checked(self):
        rules = {"page": ValidationRuleBuilder().number().default("first").build()}
        result = validate({}, build_hierarchy("/:page?"), rules)
        assert result.errors == ("Parameter page must be a number",)

    def test_to_dict_includes_defaults(self):
        rules = {"sort": ValidationRuleBuilder().default("asc").build()}
        data = validate({}, build_hierarchy("/:sort?"), rules).to_dict()
        assert data["defaults_applied"] == {"sort": "asc"}
