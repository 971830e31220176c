from enum import Enum
from typing import List

from assessment import AssessmentRecord, Occupation, RiskResult, SnailRisk, WaterActivity


MAX_SCORE = 100

# Weights
BLOOD_IN_URINE = 50
PAINFUL_URINATION = 20
NEAR_WATER = 20
STAGNANT_WATER = 10
WATER_CONTACT = 20
OCCUPATION = 15
NO_LATRINE = 10
VECTOR_SNAILS = 25

HIGH_CONTACT_ACTIVITIES = {WaterActivity.SWIMMING, WaterActivity.FISHING}
HIGH_RISK_OCCUPATIONS = {Occupation.FARMER, Occupation.FISHERMAN}


class RiskTier(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


_TIER_LABELS = {
    "en": {RiskTier.LOW: "Low Risk", RiskTier.MODERATE: "Moderate Risk", RiskTier.HIGH: "High Risk"},
    "luo": {RiskTier.LOW: "Masira Matin", RiskTier.MODERATE: "Masira", RiskTier.HIGH: "Masira Maduong"},
}


def score(record: AssessmentRecord) -> RiskResult:
    """Weighted risk score for an assessment record.

    Pure: reads the record, never mutates it. Reasons come out in the order
    the factors are evaluated.
    """
    total = 0
    reasons: List[str] = []

    # Clinical (highest weight)
    if record.has_blood_in_urine:
        total += BLOOD_IN_URINE
        reasons.append("Hematuria (Blood in urine) is a critical symptom.")
    if record.has_painful_urination:
        total += PAINFUL_URINATION
        reasons.append("Painful urination suggests infection.")

    # Environmental
    if record.near_water:
        total += NEAR_WATER
        if record.detected_zone_name:
            reasons.append(f"Located near {record.detected_zone_name} (High Risk Zone).")
        else:
            reasons.append("Proximity to water body detected.")

        if record.stagnant_water:
            total += STAGNANT_WATER
            reasons.append("Stagnant water supports snail breeding.")

    # Behavioral
    if record.water_contact_activities & HIGH_CONTACT_ACTIVITIES:
        total += WATER_CONTACT
        reasons.append("Direct water contact activities are high risk.")
    if record.occupation in HIGH_RISK_OCCUPATIONS:
        total += OCCUPATION
        reasons.append("Occupational hazard detected.")
    if not record.has_latrine_access:
        total += NO_LATRINE
        reasons.append("Lack of sanitation contributes to transmission cycles.")

    # Snail
    if record.snail_vector_risk == SnailRisk.HIGH:
        total += VECTOR_SNAILS
        reasons.append("Presence of vector snails confirmed.")

    return RiskResult(score=min(total, MAX_SCORE), reasons=tuple(reasons))


def risk_tier(value: int) -> RiskTier:
    if value < 20:
        return RiskTier.LOW
    if value < 50:
        return RiskTier.MODERATE
    return RiskTier.HIGH


def tier_label(tier: RiskTier, language: str = "en") -> str:
    # Swahili has no dedicated tier labels; it reads the English ones
    labels = _TIER_LABELS.get(language, _TIER_LABELS["en"])
    return labels[RiskTier(tier)]
