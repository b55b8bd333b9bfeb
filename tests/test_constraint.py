"""Tests for composer constraint tokenizing and dev rewriting."""

import pytest

from versioning.constraint import (
    ComposerConstraint,
    core_range_to_dev,
    extract_ranges,
    lightning_range_to_dev,
    numeric_part,
    range_to_dev,
    to_dev,
)
from versioning.models import TransformMode


class TestExtractRanges:
    """Test splitting constraints into range tokens."""

    @pytest.mark.parametrize(
        "constraint, expected",
        [
            ("^2.8 || ^3.0", ["^2.8", "^3.0"]),
            (">=1.0 <1.1 || >=1.2", [">=1.0", "<1.1", ">=1.2"]),
            (">=1.0.0.0-dev <3.0.0.0-dev", [">=1.0.0.0-dev", "<3.0.0.0-dev"]),
            ("8.5.3 || 8.5.3", ["8.5.3", "8.5.3"]),
            ("*", ["*"]),
        ],
    )
    def test_extracts_tokens_in_order(self, constraint, expected):
        """Tokens come back left to right with duplicates kept."""
        assert extract_ranges(constraint) == expected

    @pytest.mark.parametrize("constraint", ["", "   ", "||", " || | "])
    def test_separator_only_input_yields_nothing(self, constraint):
        """Empty and separator-only constraints have no ranges."""
        assert extract_ranges(constraint) == []

    def test_comma_separates_tokens(self):
        """Characters outside the token class end a token."""
        assert extract_ranges(">=1.0,<2.0") == [">=1.0", "<2.0"]


class TestCoreRangeToDev:
    """Test the trailing (core) transform."""

    @pytest.mark.parametrize(
        "range_, expected",
        [
            ("8.5.3", "8.5.x-dev"),
            ("8.5.31", "8.5.x-dev"),
            ("^8.5.3", "8.5.x-dev"),
            ("~8.6.3", "8.6.x-dev"),
            (">=1.0.0.0-dev", "1.0.0.x-dev"),
        ],
    )
    def test_replaces_last_group(self, range_, expected):
        """The last digit group becomes x-dev and operators are dropped."""
        assert core_range_to_dev(range_) == expected

    def test_two_groups_is_a_no_op(self):
        """'^8.5' has no trailing group to replace."""
        assert core_range_to_dev("^8.5") == "8.5"

    def test_single_group_is_a_no_op(self):
        """A bare major version is returned as its numeric part."""
        assert core_range_to_dev(">=8") == "8"

    def test_garbage_strips_to_empty(self):
        """Non-numeric input degrades to an empty string."""
        assert core_range_to_dev("dev-master") == ""


class TestLightningRangeToDev:
    """Test the leading (lightning) transform."""

    @pytest.mark.parametrize(
        "range_, expected",
        [
            ("1.3.0", "1.x-dev"),
            ("^1.3.0", "1.x-dev"),
            ("^2.5", "2.x-dev"),
            ("10.3.0", "10.x-dev"),
        ],
    )
    def test_keeps_first_group(self, range_, expected):
        """Only the major version survives."""
        assert lightning_range_to_dev(range_) == expected

    def test_no_dot_is_a_no_op(self):
        """Without a dot the numeric part comes back unchanged."""
        assert lightning_range_to_dev("^3") == "3"


class TestRangeToDev:
    """Test mode dispatch."""

    def test_dispatches_built_in_modes(self):
        """Built-in modes map to their transforms."""
        assert range_to_dev("^8.5.3", TransformMode.CORE) == "8.5.x-dev"
        assert range_to_dev("^8.5.3", TransformMode.LIGHTNING) == "8.x-dev"

    def test_accepts_custom_callable(self):
        """A callable is applied to the range as is."""
        assert range_to_dev("^1.2.3", lambda r: numeric_part(r) + "@dev") == "1.2.3@dev"

    def test_mode_aliases(self):
        """trailing/leading resolve to core/lightning."""
        assert TransformMode.from_name("Trailing") is TransformMode.CORE
        assert TransformMode.from_name("leading") is TransformMode.LIGHTNING
        assert TransformMode.from_name("core") is TransformMode.CORE

    def test_unknown_mode_name(self):
        """Unknown names raise ValueError."""
        with pytest.raises(ValueError):
            TransformMode.from_name("patch")


class TestToDev:
    """Test rewriting whole constraints."""

    @pytest.mark.parametrize(
        "constraint, expected",
        [
            ("10.3.0", "10.x-dev"),
            ("^1.3.0", "1.x-dev"),
            ("^1.3.0 || ~2.3.0", "1.x-dev || 2.x-dev"),
        ],
    )
    def test_lightning(self, constraint, expected):
        """Lightning dev versions keep the first digit group."""
        assert to_dev(constraint, TransformMode.LIGHTNING) == expected

    @pytest.mark.parametrize(
        "constraint, expected",
        [
            ("8.5.31", "8.5.x-dev"),
            ("^8.5.3", "8.5.x-dev"),
            ("8.5.3 || 8.6.3", "8.5.x-dev || 8.6.x-dev"),
            ("~8.5.3 || ^8.6.3", "8.5.x-dev || 8.6.x-dev"),
            ("8.5.3 || 8.5.3", "8.5.x-dev || 8.5.x-dev"),
        ],
    )
    def test_core(self, constraint, expected):
        """Core dev versions replace the last digit group."""
        assert to_dev(constraint, TransformMode.CORE) == expected

    def test_previously_inserted_text_is_not_replaced_again(self):
        """Output for one range is never matched by a later range."""
        assert to_dev("8.5.3 || 8.5", TransformMode.CORE) == "8.5.x-dev || 8.5"

    def test_unconvertible_ranges_are_kept(self):
        """Ranges the mode cannot convert stay verbatim, operators included."""
        assert to_dev("^8.5 || ^8.4", TransformMode.CORE) == "^8.5 || ^8.4"

    def test_separators_are_preserved(self):
        """Whitespace and OR operators are copied through."""
        assert to_dev("^1.3.0   ||  ~2.3.0", TransformMode.LIGHTNING) == "1.x-dev   ||  2.x-dev"

    @pytest.mark.parametrize("mode", [TransformMode.CORE, TransformMode.LIGHTNING])
    @pytest.mark.parametrize("constraint", ["^1.3.0 || ~2.3.0", "8.5.3 || 8.6.3", "8.5.3 || 8.5"])
    def test_idempotent_on_own_output(self, mode, constraint):
        """Converting an already converted constraint changes nothing."""
        once = to_dev(constraint, mode)
        assert to_dev(once, mode) == once

    def test_empty_constraint(self):
        """Empty input comes back empty."""
        assert to_dev("", TransformMode.CORE) == ""

    def test_custom_callable_is_used_per_token(self):
        """Custom transforms run once per distinct token."""
        calls = []

        def transform(range_):
            calls.append(range_)
            return range_.upper()

        assert to_dev("a1 || a1 || b2", transform) == "A1 || A1 || B2"
        assert calls == ["a1", "b2"]


class TestComposerConstraint:
    """Test the value wrapper."""

    def test_ranges_and_dev_forms(self):
        """Wrapper delegates to the module functions."""
        constraint = ComposerConstraint("8.4.3 || ^8.5.3")
        assert constraint.ranges == ["8.4.3", "^8.5.3"]
        assert constraint.core_dev() == "8.4.x-dev || 8.5.x-dev"
        assert constraint.lightning_dev() == "8.x-dev || 8.x-dev"
        assert str(constraint) == constraint.raw == "8.4.3 || ^8.5.3"
