"""
OverviewTrigger - Decides whether a query deserves an AI overview.

Two stages:
1. Statistical intent: a multinomial Naive Bayes bag-of-tokens classifier,
   trained once at construction on a small fixed corpus.
2. Structural heuristics: question words, sentence length, keyword sets and
   token n-gram complexity.

The classifier alone is too weak on ~40 samples to trust for short or
borderline queries; the heuristics keep expensive summarization calls from
firing on every information-looking query.

Decision table:
    navigation / realtime / commercial          → no
    information, long + question + complex      → yes
    information, question or complex           → yes
    information, neither                        → no
    anything else                               → no

Example:
    >>> trigger = OverviewTrigger()
    >>> trigger.decide("什么是量子计算").trigger
    True
    >>> trigger.decide("go to youtube").trigger
    False
"""

from __future__ import annotations

import logging
import re
from dataclasses import asdict, dataclass, field
from typing import Any

from sklearn.feature_extraction.text import CountVectorizer
from sklearn.naive_bayes import MultinomialNB
from sklearn.pipeline import Pipeline

from search_fusion.application.overview.tokenizer import QueryTokenizer, detect_language
from search_fusion.application.overview.training_data import TRAINING_SAMPLES
from search_fusion.core.exceptions import ClassifierError

logger = logging.getLogger(__name__)

# =============================================================================
# Keyword sets
# =============================================================================

QUESTION_WORDS: dict[str, frozenset[str]] = {
    "en": frozenset(
        {
            "what", "how", "why", "when", "where", "which", "who", "whom", "whose",
            "can", "should", "is", "are", "do", "does", "will", "would",
        }
    ),
    "zh": frozenset(
        {
            "什么", "如何", "为什么", "何时", "哪里", "哪个", "谁", "谁的",
            "能否", "可以", "是", "有没有", "将", "会", "是否",
        }
    ),
}

NAVIGATION_KEYWORDS = frozenset(
    {
        "官网", "登录", "下载", "安装", "注册", "地址", "网址", "官方", "访问", "前往",
        "official", "site", "login", "download", "register", "url", "access", "go to", "open", "app",
    }
)

REALTIME_KEYWORDS = frozenset(
    {
        "最新", "今天", "现在", "实时", "数据", "更新", "新闻", "行情", "价格",
        "current", "today", "latest", "real-time", "news", "price", "update", "year", "month", "day",
    }
)

NON_TRIGGER_INTENTS = frozenset({"navigation", "realtime", "commercial"})

_YEAR_RE = re.compile(r"^\d{4}年?$")

LONG_SENTENCE_TOKENS = 5
COMPLEX_MIN_TOKENS = 4


# =============================================================================
# Results
# =============================================================================


@dataclass(frozen=True)
class QueryFeatures:
    """Structural features computed from the query's tokens."""

    word_count: int
    has_question_word: bool
    is_long_sentence: bool
    has_nav_keyword: bool
    has_realtime_keyword: bool


@dataclass(frozen=True)
class TriggerDecision:
    """Outcome of ``OverviewTrigger.decide``."""

    trigger: bool
    reason: str
    intent: str | None = None
    is_complex: bool = False
    features: QueryFeatures | None = None
    tokens: tuple[str, ...] = field(default=(), repr=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "trigger": self.trigger,
            "reason": self.reason,
            "intent": self.intent,
            "isComplex": self.is_complex,
            "features": asdict(self.features) if self.features else None,
        }


# =============================================================================
# Helpers
# =============================================================================


def _identity(tokens: list[str]) -> list[str]:
    return tokens


def bigrams(tokens: list[str]) -> list[tuple[str, str]]:
    return list(zip(tokens, tokens[1:]))


def trigrams(tokens: list[str]) -> list[tuple[str, str, str]]:
    return list(zip(tokens, tokens[1:], tokens[2:]))


def _phrases(tokens: list[str]) -> set[str]:
    """Tokens plus adjacent pairs, so two-word keywords like 'go to' match."""
    return set(tokens) | {f"{a} {b}" for a, b in bigrams(tokens)}


# =============================================================================
# Trigger
# =============================================================================


class OverviewTrigger:
    """
    Combined statistical + rule-based AI overview trigger.

    Training happens once in ``__init__``; ``decide`` is read-only and safe
    to share across requests.
    """

    def __init__(
        self,
        samples: tuple[tuple[str, str], ...] = TRAINING_SAMPLES,
        tokenizer: QueryTokenizer | None = None,
    ) -> None:
        keyword_vocab = set(NAVIGATION_KEYWORDS) | set(REALTIME_KEYWORDS) | set(QUESTION_WORDS["zh"])
        self._tokenizer = tokenizer or QueryTokenizer(user_words=sorted(keyword_vocab))
        self._pipeline = Pipeline(
            [
                ("vectorizer", CountVectorizer(analyzer=_identity, lowercase=False)),
                ("classifier", MultinomialNB(alpha=1.0)),
            ]
        )
        self._labels: tuple[str, ...] = ()
        self._train(samples)

    @property
    def labels(self) -> tuple[str, ...]:
        return self._labels

    def _train(self, samples: tuple[tuple[str, str], ...]) -> None:
        if not samples:
            raise ValueError("Intent classifier needs at least one training sample")

        documents = [self._normalized_tokens(text) for text, _ in samples]
        labels = [label for _, label in samples]
        self._pipeline.fit(documents, labels)
        self._labels = tuple(str(c) for c in self._pipeline.classes_)
        logger.info(
            f"Intent classifier trained: {len(samples)} samples covering {len(set(labels))} intents"
        )

    def _normalized_tokens(self, text: str) -> list[str]:
        return [t.lower() for t in self._tokenizer.tokenize(text)]

    # -------------------------------------------------------------------------
    # Stages
    # -------------------------------------------------------------------------

    def tokenize(self, text: str) -> list[str]:
        return self._tokenizer.tokenize(text)

    def classify(self, tokens: list[str]) -> str:
        """Most probable intent label for already tokenized text."""
        return str(self._pipeline.predict([[t.lower() for t in tokens]])[0])

    def analyze_structure(self, text: str, tokens: list[str] | None = None) -> QueryFeatures:
        if tokens is None:
            tokens = self.tokenize(text)
        lowered = [t.lower() for t in tokens]
        phrases = _phrases(lowered)
        question_words = QUESTION_WORDS[detect_language(text)]

        return QueryFeatures(
            word_count=len(tokens),
            has_question_word=any(t in question_words for t in lowered),
            is_long_sentence=len(tokens) >= LONG_SENTENCE_TOKENS,
            has_nav_keyword=bool(phrases & NAVIGATION_KEYWORDS),
            has_realtime_keyword=any(t in REALTIME_KEYWORDS or _YEAR_RE.match(t) for t in lowered),
        )

    @staticmethod
    def is_complex_information_query(tokens: list[str]) -> bool:
        """
        At least four tokens forming two bigrams or one trigram.

        Any four-token sequence satisfies the n-gram part; the formula is
        kept as-is.
        """
        if len(tokens) < 3:
            return False
        return len(tokens) >= COMPLEX_MIN_TOKENS and (len(bigrams(tokens)) >= 2 or len(trigrams(tokens)) >= 1)

    # -------------------------------------------------------------------------
    # Decision
    # -------------------------------------------------------------------------

    def decide(self, text: str) -> TriggerDecision:
        """
        Decide whether ``text`` should launch an AI overview.

        Never raises: blank input and internal failures both answer
        ``trigger=False``.
        """
        if not isinstance(text, str) or not text.strip():
            return TriggerDecision(trigger=False, reason="Query is empty; AI overview not triggered")

        try:
            return self._decide(text)
        except Exception as e:
            error = ClassifierError(f"Intent classification failed: {e}", query=text)
            logger.warning(f"{error}; defaulting to no AI overview")
            return TriggerDecision(trigger=False, reason=str(error))

    def _decide(self, text: str) -> TriggerDecision:
        tokens = self.tokenize(text)
        if not tokens:
            return TriggerDecision(trigger=False, reason="Query has no word tokens; AI overview not triggered")

        intent = self.classify(tokens)
        features = self.analyze_structure(text, tokens)
        is_complex = self.is_complex_information_query(tokens)

        def decision(trigger: bool, reason: str) -> TriggerDecision:
            return TriggerDecision(
                trigger=trigger,
                reason=reason,
                intent=intent,
                is_complex=is_complex,
                features=features,
                tokens=tuple(tokens),
            )

        if intent in NON_TRIGGER_INTENTS:
            return decision(False, f"Query has [{intent}] intent (not informational); AI overview not triggered")

        if intent == "information":
            if features.is_long_sentence and features.has_question_word and is_complex:
                return decision(
                    True,
                    "Query has [information] intent and is a long, complex question; AI overview triggered",
                )
            if features.has_question_word or is_complex:
                return decision(
                    True,
                    "Query has [information] intent with a question word or basic complexity; "
                    "AI overview triggered",
                )
            return decision(
                False,
                f"Query has [information] intent but is too simple ({features.word_count} tokens); "
                "AI overview not triggered",
            )

        return decision(False, f"Query has unknown intent [{intent}]; AI overview not triggered")
