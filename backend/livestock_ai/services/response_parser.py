"""Parser for the four-line labeled diagnosis format returned by the model.

Grammar (line oriented, labels case-insensitive)::

    label_line := WS* LABEL WS* ":" content
    LABEL      := "DISEASE" | "CONFIDENCE" | "EXPLANATION" | "TREATMENT"

A section runs from its label line through every following line until the
next terminating label line or end of text. EXPLANATION is terminated only by
TREATMENT; the other sections are terminated by any label. The first
occurrence of a label wins.
"""

from __future__ import annotations

import logging
import re

from livestock_ai.models.rag import Confidence, Diagnosis

logger = logging.getLogger(__name__)

DISEASE = "DISEASE"
CONFIDENCE = "CONFIDENCE"
EXPLANATION = "EXPLANATION"
TREATMENT = "TREATMENT"

LABELS = (DISEASE, CONFIDENCE, EXPLANATION, TREATMENT)

_TERMINATORS: dict[str, frozenset[str]] = {
    DISEASE: frozenset(LABELS),
    CONFIDENCE: frozenset(LABELS),
    EXPLANATION: frozenset({TREATMENT}),
    TREATMENT: frozenset(LABELS),
}

_LABEL_LINE = re.compile(
    r"^\s*(" + "|".join(LABELS) + r")\s*:(.*)$",
    re.IGNORECASE,
)
_CONFIDENCE_WORD = re.compile(r"\b(high|medium|low)\b", re.IGNORECASE)
_CONFIDENCE_LEVELS: dict[str, Confidence] = {"high": "High", "medium": "Medium", "low": "Low"}

DEFAULT_DISEASE = "Unable to diagnose"
DEFAULT_CONFIDENCE: Confidence = "Low"
DEFAULT_TREATMENT = "Consult veterinarian"
EMPTY_RESPONSE_EXPLANATION = "No explanation provided."


def _label_of(line: str) -> tuple[str, str] | None:
    """Return ``(LABEL, rest_of_line)`` if ``line`` is a label line."""
    match = _LABEL_LINE.match(line)
    if match is None:
        return None
    return match.group(1).upper(), match.group(2)


def parse_sections(raw: str) -> dict[str, str]:
    """Extract labeled sections from ``raw``.

    Only labels that are present appear in the result. Values are stripped
    and may be empty when the label line carries no content.
    """
    lines = raw.splitlines()
    labels = [_label_of(line) for line in lines]

    sections: dict[str, str] = {}
    for idx, found in enumerate(labels):
        if found is None:
            continue
        label, first = found
        if label in sections:
            continue

        captured = [first]
        for line, nxt in zip(lines[idx + 1 :], labels[idx + 1 :]):
            if nxt is not None and nxt[0] in _TERMINATORS[label]:
                break
            captured.append(line)
        sections[label] = "\n".join(captured).strip()

    return sections


def normalize_confidence(value: str) -> Confidence:
    """Map free-form confidence text onto High/Medium/Low.

    Text naming no level, or more than one distinct level (an echoed
    ``[High/Medium/Low]`` placeholder, "not high, rather low"), is ``Low``.
    """
    levels = {word.lower() for word in _CONFIDENCE_WORD.findall(value)}
    if len(levels) != 1:
        return DEFAULT_CONFIDENCE
    return _CONFIDENCE_LEVELS[levels.pop()]


def parse_diagnosis(raw: str) -> Diagnosis:
    """Parse model output into a ``Diagnosis``, filling defaults for gaps."""
    sections = parse_sections(raw)
    missing = [label for label in LABELS if not sections.get(label)]
    if missing:
        logger.warning("Diagnosis response missing sections: %s", ", ".join(missing))

    explanation = sections.get(EXPLANATION) or (raw if raw.strip() else EMPTY_RESPONSE_EXPLANATION)
    confidence = sections.get(CONFIDENCE)

    return Diagnosis(
        disease=sections.get(DISEASE) or DEFAULT_DISEASE,
        confidence=normalize_confidence(confidence) if confidence else DEFAULT_CONFIDENCE,
        explanation=explanation,
        treatment=sections.get(TREATMENT) or DEFAULT_TREATMENT,
        raw_response=raw,
        provenance="model",
    )
