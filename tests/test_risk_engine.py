import itertools

import pytest

from assessment import AssessmentRecord, Occupation, SnailRisk, WaterActivity
from risk_engine import RiskTier, risk_tier, score, tier_label


def test_no_risk_factors_scores_zero(record):
    record.has_latrine_access = True
    result = score(record)
    assert result.score == 0
    assert result.reasons == ()


def test_scenario_hematuria_only(record):
    record.has_blood_in_urine = True
    result = score(record)
    assert result.score == 50
    assert risk_tier(result.score) == RiskTier.HIGH
    assert list(result.reasons) == ["Hematuria (Blood in urine) is a critical symptom."]


def test_scenario_near_named_zone(record):
    record.near_water = True
    record.detected_zone_name = "Lake Victoria Basin (Kisumu/Homa Bay)"
    result = score(record)
    assert result.score == 20
    assert risk_tier(result.score) == RiskTier.MODERATE
    assert any("Lake Victoria Basin (Kisumu/Homa Bay)" in r for r in result.reasons)


def test_near_water_without_zone_uses_generic_text(record):
    record.near_water = True
    assert score(record).reasons == ("Proximity to water body detected.",)


def test_scenario_farmer_fishing_no_latrine(record):
    record.occupation = Occupation.FARMER
    record.water_contact_activities = {WaterActivity.FISHING}
    record.has_latrine_access = False
    result = score(record)
    assert result.score == 45
    assert risk_tier(result.score) == RiskTier.MODERATE
    assert result.reasons == (
        "Direct water contact activities are high risk.",
        "Occupational hazard detected.",
        "Lack of sanitation contributes to transmission cycles.",
    )


def test_scenario_capped_at_100(record):
    record.has_blood_in_urine = True
    record.near_water = True
    record.stagnant_water = True
    record.snail_vector_risk = SnailRisk.HIGH
    result = score(record)
    assert result.score == 100
    assert risk_tier(result.score) == RiskTier.HIGH
    assert len(result.reasons) == 4


def test_stagnant_water_needs_near_water(record):
    record.stagnant_water = True
    assert score(record).score == 0
    assert score(record).reasons == ()

    record.near_water = True
    assert score(record).score == 30


def test_swimming_and_fishing_count_once(record):
    record.water_contact_activities = {WaterActivity.SWIMMING, WaterActivity.FISHING}
    assert score(record).score == 20


@pytest.mark.parametrize("activity", [WaterActivity.WASHING, WaterActivity.PLAYING])
def test_low_contact_activities_do_not_score(record, activity):
    record.water_contact_activities = {activity}
    assert score(record).score == 0


@pytest.mark.parametrize("occupation,expected", [
    (Occupation.FARMER, 15),
    (Occupation.FISHERMAN, 15),
    (Occupation.STUDENT, 0),
    (Occupation.OTHER, 0),
    (Occupation.UNSPECIFIED, 0),
])
def test_occupation_weight(record, occupation, expected):
    record.occupation = occupation
    assert score(record).score == expected


@pytest.mark.parametrize("snail_risk,expected", [
    (SnailRisk.NONE, 0),
    (SnailRisk.POSSIBLE, 0),
    (SnailRisk.HIGH, 25),
])
def test_only_high_snail_risk_scores(record, snail_risk, expected):
    record.snail_vector_risk = snail_risk
    assert score(record).score == expected


def test_painful_urination_and_near_water_are_independent(record):
    record.near_water = True
    near_only = score(record).score
    record.has_painful_urination = True
    both = score(record).score
    record.near_water = False
    pain_only = score(record).score
    assert both == near_only + pain_only


def test_reason_order_follows_evaluation_order():
    record = AssessmentRecord(
        has_blood_in_urine=True,
        has_painful_urination=True,
        near_water=True,
        stagnant_water=True,
        water_contact_activities={WaterActivity.SWIMMING},
        occupation=Occupation.FISHERMAN,
        has_latrine_access=False,
        snail_vector_risk=SnailRisk.HIGH,
    )
    result = score(record)
    assert result.score == 100
    assert result.reasons == (
        "Hematuria (Blood in urine) is a critical symptom.",
        "Painful urination suggests infection.",
        "Proximity to water body detected.",
        "Stagnant water supports snail breeding.",
        "Direct water contact activities are high risk.",
        "Occupational hazard detected.",
        "Lack of sanitation contributes to transmission cycles.",
        "Presence of vector snails confirmed.",
    )


def test_score_always_within_bounds():
    flags = itertools.product([False, True], repeat=7)
    for blood, pain, near, stagnant, swim, latrine, snail in flags:
        record = AssessmentRecord(
            has_blood_in_urine=blood,
            has_painful_urination=pain,
            near_water=near,
            stagnant_water=stagnant,
            water_contact_activities={WaterActivity.SWIMMING} if swim else set(),
            has_latrine_access=latrine,
            snail_vector_risk=SnailRisk.HIGH if snail else SnailRisk.NONE,
            occupation=Occupation.FARMER,
        )
        assert 0 <= score(record).score <= 100


def test_score_is_pure(record):
    record.has_blood_in_urine = True
    record.near_water = True
    before = record.to_dict()
    first = score(record)
    second = score(record)
    assert first == second
    assert record.to_dict() == before


@pytest.mark.parametrize("value,tier", [
    (0, RiskTier.LOW),
    (19, RiskTier.LOW),
    (20, RiskTier.MODERATE),
    (49, RiskTier.MODERATE),
    (50, RiskTier.HIGH),
    (100, RiskTier.HIGH),
])
def test_tier_boundaries(value, tier):
    assert risk_tier(value) == tier


def test_tier_labels():
    assert tier_label(RiskTier.LOW) == "Low Risk"
    assert tier_label(RiskTier.MODERATE, "en") == "Moderate Risk"
    assert tier_label(RiskTier.HIGH, "luo") == "Masira Maduong"
    # No Swahili tier labels: English is shown
    assert tier_label(RiskTier.HIGH, "sw") == "High Risk"
