"""Keyword-based intent classifier for the HospitalCare chat assistant."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

INTENT_GREETING = "greeting"
INTENT_BOOK = "book_appointment"
INTENT_DOCTOR_SEARCH = "doctor_search"
INTENT_HOURS = "faq_hours"
INTENT_SYMPTOM = "symptom_triage"
INTENT_CANCEL = "cancel_appointment"
INTENT_EMERGENCY = "emergency"
INTENT_FALLBACK = "fallback"

INTENTS: Tuple[str, ...] = (
    INTENT_GREETING,
    INTENT_BOOK,
    INTENT_DOCTOR_SEARCH,
    INTENT_HOURS,
    INTENT_SYMPTOM,
    INTENT_CANCEL,
    INTENT_EMERGENCY,
    INTENT_FALLBACK,
)

# Literal substrings that always mean "send them to the ER".
EMERGENCY_PHRASES: Tuple[str, ...] = (
    "chest pain",
    "difficulty breathing",
    "shortness of breath",
    "coughing blood",
    "severe bleeding",
    "severe abdominal pain",
    "unconscious",
    "stroke",
    "heart attack",
)


@dataclass(frozen=True)
class IntentRule:
    name: str
    pattern: re.Pattern

    def matches(self, text: str) -> bool:
        return self.pattern.search(text) is not None


@dataclass(frozen=True)
class IntentPatterns:
    """Everything the classifier matches against. Rules are tried in order."""

    emergency_phrases: Tuple[str, ...]
    emergency_pattern: re.Pattern
    rules: Tuple[IntentRule, ...]


def _rule(name: str, pattern: str) -> IntentRule:
    return IntentRule(name, re.compile(pattern, re.I))


DEFAULT_PATTERNS = IntentPatterns(
    emergency_phrases=EMERGENCY_PHRASES,
    emergency_pattern=re.compile(r"\b(emergency|urgent|911|ambulance|critical)\b", re.I),
    rules=(
        _rule(INTENT_GREETING, r"\b(hi|hello|hey|good morning|good afternoon|good evening)\b"),
        # action word AND target word, e.g. "book ... doctor"
        _rule(
            INTENT_BOOK,
            r"\b(book|schedule|appointment|visit|reserve|slot|make)\b.*\b(appointment|doctor|visit)\b",
        ),
        _rule(
            INTENT_DOCTOR_SEARCH,
            r"\b(find|search|show|list|which|doctors?|cardiologist|orthopedist|"
            r"pediatrician|neurologist|surgeon|specialist)\b",
        ),
        _rule(INTENT_HOURS, r"\b(visiting hours?|opening hours?|timings?|open|close|when|hours)\b"),
        _rule(
            INTENT_SYMPTOM,
            r"\b(chest pain|sweating|dizzy|faint|fever|swollen|bleeding|cough|blood|"
            r"breath|abdominal pain|symptom)\b",
        ),
        _rule(INTENT_CANCEL, r"\b(cancel|remove)\b.*\b(appointment|booking)\b"),
    ),
)


def mentions_emergency_phrase(text: str, phrases: Iterable[str] = EMERGENCY_PHRASES) -> bool:
    t = (text or "").lower()
    return any(p in t for p in phrases)


class IntentClassifier:
    """Maps a message to exactly one intent. Holds no per-call state."""

    def __init__(self, patterns: Optional[IntentPatterns] = None) -> None:
        self.patterns = patterns or DEFAULT_PATTERNS

    def is_emergency(self, text: str) -> bool:
        return (
            mentions_emergency_phrase(text, self.patterns.emergency_phrases)
            or self.patterns.emergency_pattern.search(text) is not None
        )

    def classify(self, message: str) -> str:
        msg = (message or "").strip().lower()
        if not msg:
            return INTENT_FALLBACK

        # emergency beats everything, including symptom wording
        if self.is_emergency(msg):
            return INTENT_EMERGENCY

        for rule in self.patterns.rules:
            if rule.matches(msg):
                return rule.name

        return INTENT_FALLBACK


_DEFAULT_CLASSIFIER = IntentClassifier()


def classify(message: str) -> str:
    """Return the intent name for *message* using the default patterns."""
    return _DEFAULT_CLASSIFIER.classify(message)
