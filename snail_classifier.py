from __future__ import annotations

from dataclasses import dataclass

import llm_engine
from assessment import SnailRisk
from logger import logger


SNAIL_PROMPT = """Analyze this image of a snail.
1. Identify if it looks like a Biomphalaria or Bulinus species (vectors for Schistosomiasis) or a generic garden snail.
2. If it is a vector, state "HIGH RISK". If harmless, state "LOW RISK".
3. Provide a 1 sentence explanation."""

# Any of these anywhere in the reply (case-insensitive) marks a vector snail.
# Paraphrases ("dangerous", "intermediate host") are not recognised.
HIGH_RISK_MARKERS = ("high risk", "bulinus", "biomphalaria")

FALLBACK_ANALYSIS = "Could not identify. Please try again."


class ClassificationError(Exception):
    pass


@dataclass(frozen=True)
class SnailClassification:
    vector_risk: SnailRisk
    analysis: str


def interpret_analysis(text: str) -> SnailRisk:
    lowered = (text or "").lower()
    if lowered and any(marker in lowered for marker in HIGH_RISK_MARKERS):
        return SnailRisk.HIGH
    return SnailRisk.NONE


def classify_image(image_bytes: bytes, mime_type: str = "image/jpeg") -> SnailClassification:
    """Ask the vision model about a snail photo and reduce its answer to a risk level."""
    if not image_bytes:
        raise ClassificationError("Empty image")

    try:
        text = llm_engine.safe_analyze_image(SNAIL_PROMPT, image_bytes, mime_type)
    except Exception as e:
        logger.error(f"Snail classification call failed: {e}")
        raise ClassificationError(str(e)) from e

    risk = interpret_analysis(text)
    logger.info(f"Snail classified as {risk.value}")
    return SnailClassification(vector_risk=risk, analysis=text)
