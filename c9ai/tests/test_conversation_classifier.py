"""Unit Tests for conversational/actionable classification"""

import pytest

from c9ai.core.conversation_classifier import ConversationClassifier, is_actionable


@pytest.fixture
def classifier():
    return ConversationClassifier()


class TestCommandIntentWins:
    """Command-intent patterns beat conversational markers"""

    def test_command_with_question_mark(self, classifier):
        """Test that a trailing question does not make a command conversational"""
        assert classifier.is_actionable("check disk usage, do you think?")

    def test_modal_question_mentioning_disk_usage(self, classifier):
        """Test that a modal question about disk usage stays actionable"""
        result = classifier.classify("do you think disk usage is too high?")
        assert result.actionable
        assert result.rule == "command_intent"

    def test_greeting_with_command_noun(self, classifier):
        """Test that command nouns override a greeting"""
        assert classifier.is_actionable("hello, where are my files?")

    @pytest.mark.parametrize("text", [
        "open excel",
        "list everything here",
        "search for python tutorials",
        "git status please",
        "install the latest release",
    ])
    def test_command_verbs(self, classifier, text):
        """Test leading command verbs"""
        assert classifier.classify(text).rule == "command_intent"


class TestConversational:
    """Conversational patterns and heuristics"""

    def test_greeting(self, classifier):
        assert not classifier.is_actionable("hello there")

    def test_thanks(self, classifier):
        assert not classifier.is_actionable("thanks a lot for that")

    def test_identity(self, classifier):
        assert classifier.classify("tell me who are you exactly").rule == "conversational_pattern"

    def test_modal_question(self, classifier):
        """Test modal questions ending in a question mark"""
        assert classifier.classify("is it going to rain tomorrow?").rule == "conversational_pattern"

    def test_wh_question_without_command_noun(self, classifier):
        """Test WH-questions without command nouns"""
        result = classifier.classify("why is the sky blue in summer?")
        assert not result.actionable
        assert result.rule == "wh_question"

    def test_hedging(self, classifier):
        """Test that hedging words mark conversation"""
        result = classifier.classify("I really enjoy working with you today")
        assert not result.actionable
        assert result.rule == "hedging"


class TestDefaults:
    """Fallback rules at the end of the table"""

    def test_short_input_is_conversational(self, classifier):
        assert classifier.classify("ok cool").rule == "short_input"

    def test_long_statement_is_actionable(self, classifier):
        result = classifier.classify("update the homebrew packages to latest versions")
        assert result.actionable
        assert result.rule == "default"

    def test_module_level_helper(self):
        assert is_actionable("open the calculator")


class TestWhQuestions:
    """WH-questions that mention a command noun are not conversational"""

    @pytest.mark.parametrize("text", [
        "which processes use the most memory?",
        "where are my directories?",
        "what process is listening here?",
        "why are these scripts slow?",
    ])
    def test_command_nouns_in_plural_and_singular(self, classifier, text):
        assert not classifier._is_wh_question(text)

    def test_plain_wh_question(self, classifier):
        assert classifier._is_wh_question("why is the sky blue?")
