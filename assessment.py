from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Set, Tuple


class Step(str, Enum):
    INTRO = "intro"
    GEO = "geo"
    BEHAVIOR = "behavior"
    CLINICAL = "clinical"
    SNAIL = "snail"
    RESULT = "result"


STEP_ORDER = [Step.INTRO, Step.GEO, Step.BEHAVIOR, Step.CLINICAL, Step.SNAIL, Step.RESULT]


class GeoStatus(str, Enum):
    IDLE = "idle"
    LOCATING = "locating"
    FOUND = "found"
    DENIED = "denied"


class Occupation(str, Enum):
    UNSPECIFIED = "unspecified"
    FARMER = "farmer"
    FISHERMAN = "fisherman"
    STUDENT = "student"
    OTHER = "other"


class WaterActivity(str, Enum):
    SWIMMING = "swimming"
    FISHING = "fishing"
    WASHING = "washing"
    PLAYING = "playing"


class SnailRisk(str, Enum):
    NONE = "none"
    POSSIBLE = "possible"
    HIGH = "high"


MIN_AGE = 1
MAX_AGE = 100


@dataclass
class AssessmentRecord:
    """Answers collected by one run of the risk-assessment wizard.

    Every step writes into the same record; the scoring engine only reads it.
    """

    # Geo
    coordinates: Optional[Tuple[float, float]] = None
    detected_zone_name: str = ""
    near_water: bool = False
    stagnant_water: bool = False

    # Behavior
    occupation: Occupation = Occupation.UNSPECIFIED
    water_contact_activities: Set[WaterActivity] = field(default_factory=set)
    has_latrine_access: bool = True

    # Clinical
    age: int = 18
    has_blood_in_urine: bool = False
    has_painful_urination: bool = False

    # Snail (set from the image classifier only)
    snail_vector_risk: SnailRisk = SnailRisk.NONE

    def toggle_activity(self, activity: WaterActivity) -> None:
        activity = WaterActivity(activity)
        if activity in self.water_contact_activities:
            self.water_contact_activities.discard(activity)
        else:
            self.water_contact_activities.add(activity)

    def set_age(self, age: int) -> None:
        if isinstance(age, bool) or not isinstance(age, int):
            raise ValueError(f"Age must be an integer, got {age!r}")
        if not MIN_AGE <= age <= MAX_AGE:
            raise ValueError(f"Age must be between {MIN_AGE} and {MAX_AGE}, got {age}")
        self.age = age

    def to_dict(self) -> Dict[str, Any]:
        return {
            "coordinates": list(self.coordinates) if self.coordinates else None,
            "detected_zone_name": self.detected_zone_name,
            "near_water": self.near_water,
            "stagnant_water": self.stagnant_water,
            "occupation": self.occupation.value,
            "water_contact_activities": sorted(a.value for a in self.water_contact_activities),
            "has_latrine_access": self.has_latrine_access,
            "age": self.age,
            "has_blood_in_urine": self.has_blood_in_urine,
            "has_painful_urination": self.has_painful_urination,
            "snail_vector_risk": self.snail_vector_risk.value,
        }


@dataclass(frozen=True)
class RiskResult:
    score: int
    reasons: Tuple[str, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, "reasons": list(self.reasons)}
