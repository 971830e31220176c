"""
Risk assessment wizard.

Linear flow: intro -> geo -> behavior -> clinical -> snail -> result.

Each wizard instance owns exactly one AssessmentRecord; nothing here is
module-global, so every Streamlit session (or test) gets its own assessment.

Slow external work (location lookup, snail photo classification) goes through
request tokens: begin_* hands out a new token, complete_* only applies an
outcome whose token is still the current one. Anything that finishes after
the user restarted or cancelled is dropped.
"""

from __future__ import annotations

from typing import Callable, Optional, Sequence, Tuple

from assessment import AssessmentRecord, GeoStatus, RiskResult, SnailRisk, Step, STEP_ORDER
from geo.geocoder import LocationFix, LocationProvider, LocationUnavailable
from geo.geofence import HotspotZone, KENYAN_RISK_ZONES, match_zone
from logger import logger
from risk_engine import score
from snail_classifier import FALLBACK_ANALYSIS, ClassificationError, SnailClassification, classify_image


_FORWARD = {
    Step.GEO: Step.BEHAVIOR,
    Step.BEHAVIOR: Step.CLINICAL,
    Step.CLINICAL: Step.SNAIL,
    Step.SNAIL: Step.RESULT,
}

_BACK = {
    Step.BEHAVIOR: Step.GEO,
    Step.CLINICAL: Step.BEHAVIOR,
    Step.SNAIL: Step.CLINICAL,
}

DATA_STEPS = len(STEP_ORDER) - 1

Classifier = Callable[[bytes, str], SnailClassification]


class InvalidTransition(Exception):
    def __init__(self, step: Step, action: str):
        super().__init__(f"Cannot {action} from step '{step.value}'")
        self.step = step
        self.action = action


class RiskAssessmentWizard:

    def __init__(self, zones: Sequence[HotspotZone] = KENYAN_RISK_ZONES):
        self.zones = zones
        self.record = AssessmentRecord()
        self.step = Step.INTRO
        self.geo_status = GeoStatus.IDLE
        self.location_label = ""
        self.snail_analysis = ""

        self._last_token = 0
        self._location_token: Optional[int] = None
        self._classification_token: Optional[int] = None

    # -----------------------------
    # Request tokens
    # -----------------------------
    def _new_token(self) -> int:
        self._last_token += 1
        return self._last_token

    @property
    def classification_pending(self) -> bool:
        return self._classification_token is not None

    def cancel_pending(self) -> None:
        """Forget every in-flight request; their outcomes will be ignored."""
        if self._location_token is not None and self.geo_status == GeoStatus.LOCATING:
            self.geo_status = GeoStatus.IDLE
        self._location_token = None
        self._classification_token = None

    # -----------------------------
    # Location acquisition
    # -----------------------------
    def begin_location_request(self) -> int:
        if self.step != Step.INTRO:
            raise InvalidTransition(self.step, "request location")
        token = self._new_token()
        self._location_token = token
        self.geo_status = GeoStatus.LOCATING
        logger.debug(f"Location request {token} started")
        return token

    def complete_location(
        self,
        token: int,
        fix: Optional[LocationFix] = None,
        failure: Optional[LocationUnavailable] = None,
    ) -> bool:
        """Apply a location outcome. Returns False when the outcome is stale."""
        if token != self._location_token:
            logger.info(f"Discarding stale location outcome (token {token})")
            return False
        self._location_token = None

        if fix is None:
            reason = failure.reason if failure else "denied"
            self.geo_status = GeoStatus.DENIED
            logger.info(f"Location not available ({reason}); continuing with manual entry")
            return True

        match = match_zone(fix.latitude, fix.longitude, self.zones)
        self.record.coordinates = (fix.latitude, fix.longitude)
        self.record.near_water = match.near_risk_zone
        self.record.detected_zone_name = match.zone_name
        self.location_label = fix.label
        self.geo_status = GeoStatus.FOUND
        logger.info(f"Location found; hotspot match: {match.zone_name or 'none'}")
        return True

    def locate(self, provider: LocationProvider) -> GeoStatus:
        """Run one location lookup through the provider. Never raises for lookup failures."""
        token = self.begin_location_request()
        try:
            fix = provider()
        except LocationUnavailable as e:
            self.complete_location(token, failure=e)
        else:
            self.complete_location(token, fix=fix)
        return self.geo_status

    def proceed_to_geo(self) -> None:
        if self.step != Step.INTRO or self.geo_status not in (GeoStatus.FOUND, GeoStatus.DENIED):
            raise InvalidTransition(self.step, "enter the environment step")
        self._go(Step.GEO)

    def start(self, provider: LocationProvider) -> GeoStatus:
        status = self.locate(provider)
        self.proceed_to_geo()
        return status

    # -----------------------------
    # Snail classification
    # -----------------------------
    def begin_classification_request(self) -> int:
        token = self._new_token()
        self._classification_token = token
        return token

    def complete_classification(
        self,
        token: int,
        classification: Optional[SnailClassification] = None,
        error: Optional[Exception] = None,
    ) -> bool:
        if token != self._classification_token:
            logger.info(f"Discarding stale classification outcome (token {token})")
            return False
        self._classification_token = None

        if classification is None:
            # Keep whatever snail risk we had; the user can upload again
            self.snail_analysis = FALLBACK_ANALYSIS
            logger.warning(f"Snail classification failed: {error}")
            return True

        self.snail_analysis = classification.analysis
        self.record.snail_vector_risk = classification.vector_risk
        return True

    def classify_snail(self, image_bytes: bytes, mime_type: str, classifier: Classifier = classify_image) -> SnailRisk:
        token = self.begin_classification_request()
        try:
            outcome = classifier(image_bytes, mime_type)
        except ClassificationError as e:
            self.complete_classification(token, error=e)
        else:
            self.complete_classification(token, classification=outcome)
        return self.record.snail_vector_risk

    # -----------------------------
    # Navigation
    # -----------------------------
    def _go(self, step: Step) -> None:
        logger.debug(f"Wizard step {self.step.value} -> {step.value}")
        self.step = step

    def next(self) -> Step:
        if self.step not in _FORWARD:
            raise InvalidTransition(self.step, "advance")
        self._go(_FORWARD[self.step])
        if self.step == Step.RESULT:
            result = self.result()
            logger.info(f"Risk assessment completed: score={result.score}, factors={len(result.reasons)}")
        return self.step

    def back(self) -> Step:
        if self.step not in _BACK:
            raise InvalidTransition(self.step, "go back")
        self._go(_BACK[self.step])
        return self.step

    def start_over(self) -> None:
        """Return to the intro screen.

        Only zone detection, proximity to water, hematuria and the snail risk are
        cleared. Age, occupation, activities, latrine access, painful urination,
        stagnant water and coordinates carry over into the next run.
        """
        if self.step != Step.RESULT:
            raise InvalidTransition(self.step, "start over")
        self.cancel_pending()
        self.record.detected_zone_name = ""
        self.record.near_water = False
        self.record.has_blood_in_urine = False
        self.record.snail_vector_risk = SnailRisk.NONE
        self.snail_analysis = ""
        self.location_label = ""
        self.geo_status = GeoStatus.IDLE
        self._go(Step.INTRO)

    # -----------------------------
    # Derived views
    # -----------------------------
    def result(self) -> RiskResult:
        return score(self.record)

    def progress(self) -> Tuple[int, int]:
        return STEP_ORDER.index(self.step), DATA_STEPS
