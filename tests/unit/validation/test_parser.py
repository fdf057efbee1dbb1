"""Unit tests for tag parsing."""

import pytest

from tagvalidator.errors import TagParseError, UnknownRuleError
from tagvalidator.validation.parser import RuleSpec, is_skip, parse_tag, split_tag


class TestSplitTag:
    """Test splitting a tag into segments."""

    def test_plain_commas(self):
        assert split_tag("nonzero,min=3") == ["nonzero", "min=3"]

    def test_escaped_comma_is_restored(self):
        """Test that \\, stays inside the segment as a literal comma."""
        assert split_tag(r"min=0,regexp=^a{3\,10}") == ["min=0", "regexp=^a{3,10}"]

    def test_quoted_segment_keeps_commas(self):
        assert split_tag('"regexp=^a{1,2}$",nonzero') == ["regexp=^a{1,2}$", "nonzero"]

    def test_doubled_quote_inside_quotes(self):
        assert split_tag('"regexp=say ""hi"""') == ['regexp=say "hi"']

    def test_unterminated_quote(self):
        with pytest.raises(TagParseError):
            split_tag('"regexp=abc')


class TestParseTag:
    """Test parsing tags into rule specs."""

    def test_empty_tag_has_no_rules(self):
        assert parse_tag("") == []
        assert parse_tag("   ") == []

    def test_single_rule_without_param(self):
        assert parse_tag("nonzero") == [RuleSpec("nonzero")]

    def test_name_and_param_are_trimmed(self):
        assert parse_tag(" min = 3 , max=10") == [RuleSpec("min", "3"), RuleSpec("max", "10")]

    def test_declaration_order_is_kept(self):
        names = [spec.name for spec in parse_tag("len=8,min=6,max=4")]
        assert names == ["len", "min", "max"]

    def test_param_split_on_first_equals(self):
        assert parse_tag("regexp=a=b") == [RuleSpec("regexp", "a=b")]

    def test_escaped_comma_param(self):
        specs = parse_tag(r"min=0,regexp=^a{3\,10}")
        assert specs == [RuleSpec("min", "0"), RuleSpec("regexp", "^a{3,10}")]

    def test_empty_param_is_kept_empty(self):
        assert parse_tag("min=") == [RuleSpec("min", "")]

    @pytest.mark.parametrize("tag", ["=3", "min,,max", "nonzero,", " , "])
    def test_empty_rule_name(self, tag):
        with pytest.raises(TagParseError):
            parse_tag(tag)

    def test_unknown_rule_names_the_rule(self):
        with pytest.raises(UnknownRuleError) as exc_info:
            parse_tag("nonzero,foo", {"nonzero"})

        assert exc_info.value.name == "foo"
        assert "foo" in str(exc_info.value)

    def test_unknown_rule_is_a_parse_error(self):
        assert issubclass(UnknownRuleError, TagParseError)

    def test_names_not_checked_without_registry(self):
        assert parse_tag("foo") == [RuleSpec("foo")]


class TestIsSkip:
    """Test the skip marker."""

    def test_dash(self):
        assert is_skip("-")
        assert is_skip(" - ")

    def test_not_skip(self):
        assert not is_skip("")
        assert not is_skip("-,nonzero")
        assert not is_skip("nonzero")
