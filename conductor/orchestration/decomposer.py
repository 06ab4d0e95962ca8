"""Task decomposition - splits a composite request into typed subtasks."""

from __future__ import annotations

import re
from collections import Counter

from conductor.common.models import (
    CRM_RESEARCH,
    GENERAL_TASK_TYPE,
    WEB_RESEARCH,
    Priority,
    Subtask,
    TaskSummary,
)

# Ranked by specificity; applied one after another across the working set.
TASK_SEPARATORS: tuple[str, ...] = (
    " and ",
    " then ",
    " also ",
    " plus ",
    " additionally ",
    " furthermore ",
    " moreover ",
    ". ",
    ", and ",
    "; ",
)

WEB_KEYWORDS: tuple[str, ...] = (
    "search",
    "find",
    "google",
    "web",
    "internet",
    "look up",
    "news",
    "article",
    "website",
    "online",
)

CRM_KEYWORDS: tuple[str, ...] = (
    "crm",
    "customer",
    "client",
    "contact",
    "hubspot",
    "salesforce",
    "history",
    "record",
    "account",
)

RETRIEVAL_VERBS: tuple[str, ...] = ("pull", "get", "retrieve")
LOOKUP_VERBS: tuple[str, ...] = ("search", "find")

HIGH_PRIORITY_WORDS: tuple[str, ...] = ("urgent", "asap", "immediately")
LOW_PRIORITY_PHRASES: tuple[str, ...] = ("when possible", "if you can")

_LEADING_CONJUNCTION = re.compile(
    r"^(and|then|also|plus|additionally|furthermore|moreover)\s+", re.IGNORECASE
)
_LEADING_NON_WORD = re.compile(r"^\W+")
_TRAILING_NON_WORD = re.compile(r"\W+$")
_TERMINAL_PUNCTUATION = re.compile(r"[.!?]$")


class TaskDecomposer:
    """
    Decomposes free text into an ordered list of ``Subtask`` values.

    Rule-based and pure: the same text always yields the same subtasks.
    Separators are matched literally, so a separator occurring inside a
    longer token is still a split point.
    """

    def __init__(self, separators: tuple[str, ...] = TASK_SEPARATORS):
        self.separators = separators

    def decompose(self, text: str) -> list[Subtask]:
        """
        Split *text* into subtasks and classify each one.

        Args:
            text: Raw user request

        Returns:
            Subtasks in input order; empty for empty or whitespace-only text
        """
        return [
            Subtask(
                original_text=piece,
                task_types=self.classify_task_types(piece),
                priority=self.classify_priority(piece),
            )
            for piece in self.split(text)
        ]

    def split(self, text: str) -> list[str]:
        """Split and clean *text* without classifying the pieces."""
        units = [text]

        for separator in self.separators:
            next_units: list[str] = []
            for unit in units:
                pieces = unit.split(separator)
                if len(pieces) > 1:
                    next_units.extend(p for p in pieces if p.strip())
                else:
                    next_units.append(unit)
            units = next_units

        stripped = (unit.strip() for unit in units)
        return [self.clean(piece) for piece in stripped if piece]

    @staticmethod
    def clean(piece: str) -> str:
        """Normalise one split piece into a sentence-like task description."""
        cleaned = _LEADING_CONJUNCTION.sub("", piece)
        cleaned = _LEADING_NON_WORD.sub("", cleaned)
        cleaned = _TRAILING_NON_WORD.sub("", cleaned)

        if not cleaned:
            # Nothing but punctuation; keep the input rather than lose it.
            return piece

        if not _TERMINAL_PUNCTUATION.search(cleaned):
            cleaned += "."

        return cleaned

    @staticmethod
    def classify_task_types(piece: str) -> tuple[str, ...]:
        """Tag a piece with web and/or CRM research, or a fallback type."""
        lowered = piece.lower()
        types: list[str] = []

        if any(keyword in lowered for keyword in WEB_KEYWORDS):
            types.append(WEB_RESEARCH)

        if any(keyword in lowered for keyword in CRM_KEYWORDS):
            types.append(CRM_RESEARCH)

        if not types:
            if any(verb in lowered for verb in RETRIEVAL_VERBS):
                types.append(CRM_RESEARCH)
            elif any(verb in lowered for verb in LOOKUP_VERBS):
                types.append(WEB_RESEARCH)
            else:
                types.append(GENERAL_TASK_TYPE)

        return tuple(types)

    @staticmethod
    def classify_priority(piece: str) -> Priority:
        lowered = piece.lower()

        if any(word in lowered for word in HIGH_PRIORITY_WORDS):
            return Priority.HIGH

        if any(phrase in lowered for phrase in LOW_PRIORITY_PHRASES):
            return Priority.LOW

        return Priority.MEDIUM

    @staticmethod
    def summarize(subtasks: list[Subtask]) -> TaskSummary:
        """Count subtasks per task type and per priority."""
        type_counts: Counter[str] = Counter()
        priority_counts: Counter[str] = Counter()

        for subtask in subtasks:
            type_counts.update(subtask.task_types)
            priority_counts[subtask.priority.value] += 1

        return TaskSummary(
            total_tasks=len(subtasks),
            task_types=dict(type_counts),
            priorities=dict(priority_counts),
        )
