"""Tests for language detection and query tokenization."""

from __future__ import annotations

import pytest

from search_fusion.application.overview.tokenizer import QueryTokenizer, detect_language


@pytest.fixture(scope="module")
def tokenizer() -> QueryTokenizer:
    return QueryTokenizer(user_words=["官网", "为什么", "x"])


class TestDetectLanguage:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("什么是量子计算", "zh"),
            ("Python官网", "zh"),
            ("what is python", "en"),
            ("2024", "en"),
            ("", "en"),
        ],
    )
    def test_detect(self, text, expected):
        assert detect_language(text) == expected


class TestTokenize:
    def test_english_word_runs(self, tokenizer):
        assert tokenizer.tokenize("How does a quantum computer work?") == [
            "How",
            "does",
            "a",
            "quantum",
            "computer",
            "work",
        ]

    def test_english_punctuation_dropped(self, tokenizer):
        assert tokenizer.tokenize("last night's scores!") == ["last", "night", "s", "scores"]

    def test_chinese_segmented(self, tokenizer):
        tokens = tokenizer.tokenize("什么是量子计算")
        assert "".join(tokens) == "什么是量子计算"
        assert len(tokens) > 1

    def test_chinese_whitespace_and_punctuation_dropped(self, tokenizer):
        tokens = tokenizer.tokenize("量子 计算，是什么？")
        assert all(t.strip() for t in tokens)
        assert "，" not in tokens
        assert "？" not in tokens

    def test_user_word_kept_whole(self, tokenizer):
        assert "官网" in tokenizer.tokenize("Python官网登录")

    def test_mixed_script_keeps_latin_token(self, tokenizer):
        assert "Python" in tokenizer.tokenize("Python官网登录")

    @pytest.mark.parametrize("text", ["", "   ", None, 42])
    def test_blank_or_non_string(self, tokenizer, text):
        assert tokenizer.tokenize(text) == []

    def test_order_preserved(self, tokenizer):
        tokens = tokenizer.tokenize("machine learning basics")
        assert tokens == ["machine", "learning", "basics"]
