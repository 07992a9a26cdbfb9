"""Tests for the confirmation prompt"""

import pytest

from aurkeep.core import ask_yes_no


@pytest.fixture
def replies(monkeypatch):
    """Feed scripted answers to input() and record the prompts shown."""
    queue: list[str] = []
    shown: list[str] = []

    def fake_input(prompt: str = "") -> str:
        shown.append(prompt)
        return queue.pop(0)

    monkeypatch.setattr("builtins.input", fake_input)
    return queue, shown


class TestAskYesNo:

    @pytest.mark.parametrize(
        "answer, expected",
        [
            ("", True),
            ("   ", True),
            ("y", True),
            ("YES", True),
            ("n", False),
            ("No", False),
        ],
    )
    def test_answers(self, replies, answer, expected):
        queue, shown = replies
        queue.append(answer)
        assert ask_yes_no(":: Upgrade foo?") is expected
        assert shown == [":: Upgrade foo? [Y/n] "]

    def test_reprompts_on_unknown_answer(self, replies):
        queue, shown = replies
        queue.extend(["maybe", "y"])
        assert ask_yes_no(":: Upgrade foo?") is True
        assert len(shown) == 2
