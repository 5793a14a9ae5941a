"""Tests for vetter.parser - rule specification parsing."""

import pytest

from vetter.parser import ParsedRule, parse_rule


class TestPlainForm:
    def test_name_only(self) -> None:
        assert parse_rule("required") == ParsedRule("required", ())

    def test_single_param(self) -> None:
        assert parse_rule("min:3") == ParsedRule("min", ("3",))

    def test_multiple_params(self) -> None:
        assert parse_rule("password:8,strong") == ParsedRule("password", ("8", "strong"))

    def test_params_stay_strings(self) -> None:
        parsed = parse_rule("between:1,10")
        assert parsed.params == ("1", "10")
        assert all(isinstance(p, str) for p in parsed.params)

    def test_empty_remainder_yields_no_params(self) -> None:
        assert parse_rule("min:").params == ()

    def test_splits_on_first_colon_only(self) -> None:
        parsed = parse_rule("after:2025-01-04 10:30:00")
        assert parsed.name == "after"
        assert parsed.params == ("2025-01-04 10:30:00",)

    def test_variadic(self) -> None:
        assert parse_rule("in:admin,user,guest").params == ("admin", "user", "guest")

    def test_empty_params_between_commas_kept(self) -> None:
        assert parse_rule("in:a,,b").params == ("a", "", "b")

    def test_blank_name_is_not_special(self) -> None:
        assert parse_rule(":x") == ParsedRule("", ("x",))

    def test_comma_inside_pattern_splits(self) -> None:
        # No escaping in the plain form
        assert parse_rule(r"regex:/^\d{1,3}$/").params == (r"/^\d{1", r"3}$/")


class TestBracketedPlainForm:
    @pytest.mark.parametrize(
        ("spec", "params"),
        [
            ("in:[1]", ("[1]",)),
            ("in:[]", ("[]",)),
            ("regex:[1]", ("[1]",)),
            ('in:["a,b","c"]', ('["a', 'b"', '"c"]')),
        ],
    )
    def test_taken_literally_by_default(self, spec: str, params: tuple[str, ...]) -> None:
        assert parse_rule(spec).params == params


class TestJsonForm:
    def test_array_of_strings(self) -> None:
        assert parse_rule('in:["a,b","c"]', json_params=True).params == ("a,b", "c")

    def test_pattern_with_comma(self) -> None:
        parsed = parse_rule(r'regex:["/^\\d{1,3}$/"]', json_params=True)
        assert parsed.params == (r"/^\d{1,3}$/",)

    def test_scalars_become_strings(self) -> None:
        assert parse_rule("in:[1, true, null]", json_params=True).params == ("1", "true", "")

    def test_invalid_json_falls_back(self) -> None:
        assert parse_rule("regex:/[a-z]+/", json_params=True).params == ("/[a-z]+/",)

    def test_bracketed_word_falls_back(self) -> None:
        assert parse_rule("in:[draft]", json_params=True).params == ("[draft]",)

    def test_nested_array_falls_back(self) -> None:
        assert parse_rule("in:[[1],[2]]", json_params=True).params == ("[[1]", "[2]]")


class TestParsedRule:
    @pytest.mark.parametrize("spec", ["required", "min:3", "in:a,b,c"])
    def test_str_round_trip(self, spec: str) -> None:
        assert str(parse_rule(spec)) == spec

    def test_frozen(self) -> None:
        parsed = parse_rule("min:3")
        with pytest.raises(AttributeError):
            parsed.name = "max"  # type: ignore[misc]
