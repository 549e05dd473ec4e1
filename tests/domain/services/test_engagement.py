"""Tests for engagement decision and message cleaning."""

import re

import pytest

from relaybot.domain.services import DEFAULT_FILLER_TEXT, clean_message, should_engage


class TestShouldEngage:
    """should_engage tests."""

    def test_direct_message_always_engages(self) -> None:
        """Direct messages are always answered."""
        assert should_engage("just chatting", "Steve", True, None)

    def test_nick_substring_case_insensitive(self) -> None:
        """A case-insensitive nick mention triggers a reply."""
        assert should_engage("anyone seen steve?", "Steve", False, None)

    def test_no_mention_no_pattern(self) -> None:
        """Unrelated channel chatter is ignored."""
        assert not should_engage("just chatting", "Steve", False, None)

    def test_trigger_pattern_match(self) -> None:
        """A matching trigger pattern triggers a reply."""
        pattern = re.compile(r"(?i)(bot|^!)")

        assert should_engage("!weather", "Steve", False, pattern)
        assert should_engage("is this a BOT?", "Steve", False, pattern)

    def test_trigger_pattern_searches_anywhere(self) -> None:
        """The pattern may match anywhere in the line."""
        pattern = re.compile(r"help")

        assert should_engage("can someone help me", "Steve", False, pattern)

    def test_trigger_pattern_no_match(self) -> None:
        """A non-matching pattern does not trigger a reply."""
        pattern = re.compile(r"^!")

        assert not should_engage("hello all", "Steve", False, pattern)

    def test_empty_nick_does_not_match_everything(self) -> None:
        """An empty nick is not treated as a mention."""
        assert not should_engage("hello", "", False, None)


class TestCleanMessage:
    """clean_message tests."""

    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("Steve: hello there", "hello there"),
            ("steve, what's up?", "what's up?"),
            ("STEVE:hi", "hi"),
            ("  Steve:   spaced   ", "spaced"),
            ("hey Steve, how are you", "hey how are you"),
            ("no salutation here", "no salutation here"),
            ("Steve is great", "Steve is great"),
        ],
    )
    def test_strips_salutation(self, text: str, expected: str) -> None:
        """Salutations addressed to the nick are removed."""
        assert clean_message(text, "Steve") == expected

    def test_empty_after_strip_returns_filler(self) -> None:
        """A bare salutation becomes the filler greeting."""
        assert clean_message("Steve,", "Steve") == DEFAULT_FILLER_TEXT

    def test_whitespace_only_returns_filler(self) -> None:
        """Whitespace-only text becomes the filler greeting."""
        assert clean_message("   ", "Steve") == "Hello!"

    def test_custom_filler(self) -> None:
        """The filler text can be configured."""
        assert clean_message("Steve:", "Steve", filler_text="Hi!") == "Hi!"

    def test_nick_with_regex_characters(self) -> None:
        """Nicks with regex metacharacters are matched literally."""
        assert clean_message("[bot]|x: hi", "[bot]|x") == "hi"
