"""
Language-aware query tokenization.

Text containing CJK ideographs is segmented with jieba (dictionary based,
precise mode). Everything else is split into word-character runs.
Whitespace and punctuation never survive as tokens.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from typing import Literal

import jieba

logger = logging.getLogger(__name__)

jieba.setLogLevel(logging.WARNING)

Language = Literal["zh", "en"]

_CJK_RE = re.compile(r"[\u4e00-\u9fff]")
_WORD_RE = re.compile(r"\w+")


def detect_language(text: str) -> Language:
    """``"zh"`` when the text contains any CJK ideograph, else ``"en"``."""
    return "zh" if _CJK_RE.search(text) else "en"


class QueryTokenizer:
    """
    Tokenizer shared by classifier training and query analysis.

    Args:
        user_words: Extra dictionary words for the CJK segmenter, so closed
            keyword sets (e.g. 官网, 为什么) come out as single tokens.
    """

    def __init__(self, user_words: Iterable[str] = ()) -> None:
        self._segmenter = jieba.Tokenizer()
        self._user_words = [w for w in user_words if len(w) > 1 and _CJK_RE.search(w)]
        self._initialized = False

    def _ensure_segmenter(self) -> jieba.Tokenizer:
        if not self._initialized:
            for word in self._user_words:
                self._segmenter.add_word(word)
            self._initialized = True
        return self._segmenter

    def tokenize(self, text: str) -> list[str]:
        """Ordered tokens of ``text``; empty list for blank/non-string input."""
        if not isinstance(text, str) or not text.strip():
            return []

        if detect_language(text) == "zh":
            pieces = self._ensure_segmenter().lcut(text, cut_all=False, HMM=True)
            return [p.strip() for p in pieces if _WORD_RE.search(p)]
        return _WORD_RE.findall(text)
