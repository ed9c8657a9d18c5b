"""Tests for the roll service entry point."""

import random
import re

import pytest

from roller.service import (
    HELP_MESSAGE,
    INVALID_COMMAND_MESSAGE,
    RollService,
    evaluate,
)
from shared.exceptions import GrammarError

GROUP_PATTERN = re.compile(r"\[(-?\d+)([^\]]*)\]")


class TestHelp:
    """Tests for the help trigger."""

    @pytest.mark.parametrize("formula", ["help", " help ", " he lp ", "h\te\nl p"])
    def test_help_text(self, formula):
        """Any whitespace variant of the trigger returns the help text."""
        assert evaluate(formula) == HELP_MESSAGE

    def test_help_lists_every_form(self):
        """Help gives one example per grammar form."""
        lines = HELP_MESSAGE.splitlines()
        assert len(lines) == 5
        assert any("3d6h2" in line for line in lines)
        assert any("3d6l2" in line for line in lines)
        assert any("2#3d6" in line for line in lines)
        assert "roll three six-sided die and keep the two highest" in HELP_MESSAGE

    def test_custom_trigger(self):
        """The trigger word is configurable."""
        service = RollService(help_trigger="aide")
        assert service.evaluate("aide") == HELP_MESSAGE
        assert service.evaluate("help") == INVALID_COMMAND_MESSAGE

    def test_help_rolls_nothing(self, scripted_rng):
        """Help never touches the random source."""
        rng = scripted_rng([])
        RollService(rng=rng).evaluate("help")
        assert rng.calls == []


class TestInvalid:
    """Tests for rejected formulas."""

    @pytest.mark.parametrize(
        "formula",
        ["abc", "d6", "3d", "0d6", "3d0", "3d6h", "3d6h0", "", "2#", "100#1d6", "3d6+d6", "1d6+"],
    )
    def test_invalid_message(self, formula):
        """Malformed formulas return the fixed invalid-command message."""
        assert evaluate(formula) == INVALID_COMMAND_MESSAGE

    def test_no_dice_rolled_when_any_term_invalid(self, scripted_rng):
        """Validation happens before any random draw."""
        rng = scripted_rng([])
        result = RollService(rng=rng).evaluate("3d6+1d20+x")
        assert result == INVALID_COMMAND_MESSAGE
        assert rng.calls == []

    def test_roll_raises_grammar_error(self):
        """The structured API raises instead of returning text."""
        with pytest.raises(GrammarError):
            RollService().roll("abc")


class TestEvaluate:
    """Tests for successful evaluation and report shape."""

    def test_flat_positive(self):
        """A flat term reports its value with no trace."""
        assert evaluate("+5") == "+5: [5]"

    def test_flat_negative(self):
        """A negative flat term reports a negative total."""
        assert evaluate("-5") == "-5: [-5]"

    def test_repeat_groups(self):
        """2#1d1 yields two groups, each totalling 1."""
        assert evaluate("2#1d1") == "2#1d1: [1 1d1=1] [1 1d1=1]"

    def test_keep_highest_example(self, scripted_rng):
        """3d6h2 shows all dice sorted and totals the top two."""
        service = RollService(rng=scripted_rng([2, 6, 4]))
        assert service.evaluate("3d6h2") == "3d6h2: [10 3d6h2=2,4,6]"

    def test_keep_lowest_example(self, scripted_rng):
        """3d6l2 totals the bottom two."""
        service = RollService(rng=scripted_rng([2, 6, 4]))
        assert service.evaluate("3d6l2") == "3d6l2: [6 3d6l2=2,4,6]"

    def test_multiple_fragments(self, scripted_rng):
        """Dice fragments are separated by '; ' and flats only change the total."""
        service = RollService(rng=scripted_rng([3, 5, 1, 19]))
        result = service.evaluate("2d6 + 2d20l1 - 2")
        assert result == "2d6+2d20l1-2: [7 2d6=3,5; 2d20l1=1,19]"

    def test_keep_clamped(self, scripted_rng):
        """Keeping more dice than rolled keeps them all."""
        service = RollService(rng=scripted_rng([1, 2]))
        assert service.evaluate("2d6h5") == "2d6h5: [3 2d6h5=1,2]"

    def test_whole_pipeline_seeded(self):
        """3d6h2 report total equals the sum of the two highest rolled faces."""
        for seed in range(50):
            result = RollService(rng=random.Random(seed)).evaluate("3d6h2")
            groups = GROUP_PATTERN.findall(result)
            assert len(groups) == 1
            total, trace = groups[0]
            faces = [int(f) for f in trace.strip().split("=")[1].split(",")]
            assert len(faces) == 3
            assert faces == sorted(faces)
            assert all(1 <= f <= 6 for f in faces)
            assert int(total) == faces[1] + faces[2]

    def test_d20_plus_five_range(self):
        """1d20+5 always lies in [6, 25]."""
        service = RollService(rng=random.Random(42))
        for _ in range(200):
            report = service.roll("1d20+5")
            assert 6 <= report.totals[0] <= 25

    def test_roll_returns_structured_report(self, scripted_rng):
        """roll() exposes totals and fragments per pass."""
        report = RollService(rng=scripted_rng([4, 1])).roll("2#1d6")
        assert report.formula == "2#1d6"
        assert report.totals == [4, 1]

    def test_max_repeat(self):
        """99 passes produce 99 groups."""
        result = evaluate("99#1d1")
        assert len(GROUP_PATTERN.findall(result)) == 99


class TestAnswer:
    """Tests for answer(), which pairs the reply with its report."""

    def test_roll_has_report(self, scripted_rng):
        """Rolled formulas return the rendered text and the report."""
        result, report = RollService(rng=scripted_rng([3])).answer("1d6")
        assert result == "1d6: [3 1d6=3]"
        assert report is not None
        assert report.totals == [3]

    def test_help_has_no_report(self):
        """Help requests produce no report."""
        assert RollService().answer("help") == (HELP_MESSAGE, None)

    def test_invalid_has_no_report(self):
        """Rejected formulas produce no report."""
        assert RollService().answer("abc") == (INVALID_COMMAND_MESSAGE, None)
