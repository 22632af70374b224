"""
Input Parser for Synapse

Splits a free-form brain dump into sentences and classifies each one as a
task, idea, concern or project using ordered regex pattern families. Whole
input signals (complexity, emotional tone, urgency) are derived alongside.

Classification is first-match-wins over a fixed family order:
    task -> idea -> concern -> project
A sentence matching none of them is "general" and is dropped.
"""

from typing import Dict, List, Optional, Pattern, Tuple
import logging
import re

from ..core.models import ParsedInput, ParsedUnit


class InputParser:
    """
    Deterministic, rule-based brain-dump parser.

    No statistical NLP: the same input always yields the same ParsedInput.
    """

    # Pattern families, checked in this order. The first capture group (if
    # any) becomes the unit content.
    PATTERN_FAMILIES: List[Tuple[str, List[str]]] = [
        ("task", [
            r"need to (.+)",
            r"should (.+)",
            r"have to (.+)",
            r"must (.+)",
            r"fix (.+)",
            r"update (.+)",
            r"create (.+)",
            r"implement (.+)",
            r"build (.+)",
        ]),
        ("idea", [
            r"what if (.+)",
            r"maybe (.+)",
            r"could (.+)",
            r"thinking about (.+)",
            r"idea: (.+)",
        ]),
        ("concern", [
            r"worried about (.+)",
            r"problem with (.+)",
            r"issue (.+)",
            r"(.+) is broken",
            r"not working (.+)",
        ]),
        ("project", [
            r"working on (.+)",
            r"project (.+)",
            r"building (.+)",
            r"developing (.+)",
        ]),
    ]

    NEGATIVE_WORDS = ["worried", "problem", "issue", "broken", "not working", "bad", "hate"]
    POSITIVE_WORDS = ["great", "good", "idea", "excited", "love"]

    # Urgency levels, checked in this order
    URGENCY_PATTERNS: List[Tuple[str, str]] = [
        ("critical", r"(urgent|asap|immediately|now)"),
        ("high", r"(soon|today|this week)"),
        ("medium", r"(next week|eventually)"),
    ]

    SENTENCE_SPLIT = re.compile(r"[.!?]+")

    def __init__(self):
        self.logger = logging.getLogger("agent.parser")
        self._families: List[Tuple[str, List[Pattern]]] = [
            (kind, [re.compile(p, re.IGNORECASE) for p in patterns])
            for kind, patterns in self.PATTERN_FAMILIES
        ]
        self._urgency = [(level, re.compile(p, re.IGNORECASE)) for level, p in self.URGENCY_PATTERNS]

    def analyze(self, text: str) -> ParsedInput:
        """
        Parse a brain dump into typed units and whole-input signals.

        Never fails: empty or whitespace-only input yields empty sequences,
        low complexity, neutral tone and low urgency.

        Args:
            text: Raw brain-dump text

        Returns:
            ParsedInput with units in sentence order
        """
        text = text or ""
        buckets: Dict[str, List[ParsedUnit]] = {
            "task": [], "idea": [], "concern": [], "project": []
        }

        for sentence in self.segment_sentences(text):
            kind, content = self.classify_sentence(sentence)
            if kind in buckets:
                buckets[kind].append(ParsedUnit(content=content))

        tasks, ideas = buckets["task"], buckets["idea"]
        concerns, projects = buckets["concern"], buckets["project"]

        parsed = ParsedInput(
            tasks=tuple(tasks),
            ideas=tuple(ideas),
            concerns=tuple(concerns),
            projects=tuple(projects),
            complexity=self.calculate_complexity(len(tasks) + len(ideas) + len(concerns) + len(projects)),
            emotional_tone=self.detect_emotional_tone(text),
            urgency_level=self.detect_urgency(text),
        )

        self.logger.debug("Parsed %d units (%s complexity)", parsed.total_units, parsed.complexity)
        return parsed

    def segment_sentences(self, text: str) -> List[str]:
        """Split on runs of '.', '!' and '?', discarding blank fragments."""
        return [s for s in self.SENTENCE_SPLIT.split(text) if s.strip()]

    def classify_sentence(self, sentence: str) -> Tuple[str, Optional[str]]:
        """
        Classify one sentence.

        Returns:
            (kind, content) where kind is task/idea/concern/project/general.
            Content is the trimmed capture group, or the trimmed sentence when
            the pattern has none; None for general sentences.
        """
        for kind, patterns in self._families:
            for pattern in patterns:
                match = pattern.search(sentence)
                if match:
                    content = match.group(1) if match.groups() else sentence
                    return kind, content.strip()
        return "general", None

    @staticmethod
    def calculate_complexity(total_units: int) -> str:
        """More than 5 units is high, more than 2 is medium."""
        if total_units > 5:
            return "high"
        if total_units > 2:
            return "medium"
        return "low"

    def detect_emotional_tone(self, text: str) -> str:
        """Each keyword present scores once: positive +1, negative -1."""
        lowered = text.lower()
        score = sum(1 for word in self.POSITIVE_WORDS if word in lowered)
        score -= sum(1 for word in self.NEGATIVE_WORDS if word in lowered)

        if score < 0:
            return "negative"
        if score > 0:
            return "positive"
        return "neutral"

    def detect_urgency(self, text: str) -> str:
        for level, pattern in self._urgency:
            if pattern.search(text):
                return level
        return "low"


_default_parser = InputParser()


def analyze(text: str) -> ParsedInput:
    """Module-level shortcut for InputParser().analyze(text)."""
    return _default_parser.analyze(text)
