"""Tests for the AI overview trigger (intent classifier + heuristics)."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from search_fusion.application.overview.training_data import INTENTS, TRAINING_SAMPLES
from search_fusion.application.overview.trigger import (
    NAVIGATION_KEYWORDS,
    OverviewTrigger,
    TriggerDecision,
    bigrams,
    trigrams,
)

# ============================================================
# Training
# ============================================================


class TestTraining:
    def test_labels_cover_all_intents(self, overview_trigger):
        assert set(overview_trigger.labels) == set(INTENTS)

    def test_corpus_is_labeled_with_known_intents(self):
        assert {label for _, label in TRAINING_SAMPLES} <= set(INTENTS)

    def test_empty_corpus_rejected(self):
        with pytest.raises(ValueError):
            OverviewTrigger(samples=())

    @pytest.mark.parametrize(
        ("text", "intent"),
        [
            ("what is the capital of Australia", "information"),
            ("Python官网登录", "navigation"),
            ("现在的比特币价格是多少", "realtime"),
            ("cheapest flights to london", "commercial"),
        ],
    )
    def test_training_samples_classified(self, overview_trigger, text, intent):
        assert overview_trigger.classify(overview_trigger.tokenize(text)) == intent


# ============================================================
# Structure
# ============================================================


class TestStructure:
    def test_ngrams(self):
        assert bigrams(["a", "b", "c"]) == [("a", "b"), ("b", "c")]
        assert trigrams(["a", "b", "c"]) == [("a", "b", "c")]
        assert trigrams(["a", "b"]) == []

    @pytest.mark.parametrize(
        ("tokens", "expected"),
        [
            ([], False),
            (["a", "b"], False),
            (["a", "b", "c"], False),
            (["a", "b", "c", "d"], True),
            (["a", "b", "c", "d", "e", "f"], True),
        ],
    )
    def test_complexity(self, tokens, expected):
        assert OverviewTrigger.is_complex_information_query(tokens) is expected

    def test_english_features(self, overview_trigger):
        features = overview_trigger.analyze_structure("How does a quantum computer work")
        assert features.word_count == 6
        assert features.has_question_word
        assert features.is_long_sentence
        assert not features.has_nav_keyword
        assert not features.has_realtime_keyword

    def test_two_word_navigation_keyword(self, overview_trigger):
        assert "go to" in NAVIGATION_KEYWORDS
        assert overview_trigger.analyze_structure("go to youtube").has_nav_keyword

    def test_year_counts_as_realtime(self, overview_trigger):
        assert overview_trigger.analyze_structure("olympics 2024 results").has_realtime_keyword

    def test_realtime_keyword(self, overview_trigger):
        assert overview_trigger.analyze_structure("latest python release").has_realtime_keyword


# ============================================================
# Decision
# ============================================================


class TestDecide:
    @pytest.mark.parametrize(
        "text",
        [
            "什么是量子计算",
            "how does a quantum computer work",
            "explain the process of photosynthesis",
        ],
    )
    def test_information_questions_trigger(self, overview_trigger, text):
        decision = overview_trigger.decide(text)
        assert decision.trigger is True
        assert decision.intent == "information"
        assert "triggered" in decision.reason

    @pytest.mark.parametrize(
        "text",
        [
            "今天天气怎么样",
            "go to youtube",
            "Python官网登录",
            "预订机票",
            "stock prices now",
        ],
    )
    def test_non_information_queries_do_not_trigger(self, overview_trigger, text):
        assert overview_trigger.decide(text).trigger is False

    def test_simple_information_query_does_not_trigger(self, overview_trigger):
        decision = overview_trigger.decide("Python")
        assert decision.trigger is False
        assert decision.intent == "information"
        assert "too simple" in decision.reason

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_blank_input(self, overview_trigger, text):
        decision = overview_trigger.decide(text)
        assert decision.trigger is False
        assert decision.intent is None

    def test_punctuation_only(self, overview_trigger):
        assert overview_trigger.decide("?!...").trigger is False

    def test_classifier_failure_never_raises(self, overview_trigger):
        with patch.object(overview_trigger, "classify", side_effect=RuntimeError("model broken")):
            decision = overview_trigger.decide("what is python")
        assert decision.trigger is False
        assert "model broken" in decision.reason

    def test_decision_is_deterministic(self, overview_trigger):
        first = overview_trigger.decide("how does a quantum computer work")
        second = overview_trigger.decide("how does a quantum computer work")
        assert first == second

    def test_to_dict(self, overview_trigger):
        data = overview_trigger.decide("how does a quantum computer work").to_dict()
        assert data["trigger"] is True
        assert data["intent"] == "information"
        assert data["isComplex"] is True
        assert data["features"]["has_question_word"] is True

    def test_blank_decision_to_dict(self):
        assert TriggerDecision(trigger=False, reason="empty").to_dict()["features"] is None
