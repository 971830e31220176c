import pytest

import chat_history
import profile_store
from assessment import AssessmentRecord
from wizard import RiskAssessmentWizard


# Kisumu town, inside the Lake Victoria Basin hotspot
KISUMU = (-0.0917, 34.7680)
# Nairobi, outside every hotspot
NAIROBI = (-1.2921, 36.8219)


@pytest.fixture
def record():
    return AssessmentRecord()


@pytest.fixture
def wizard():
    return RiskAssessmentWizard()


@pytest.fixture
def file_stores(tmp_path, monkeypatch):
    """Point both local stores at temp files and keep MongoDB out of the picture."""
    monkeypatch.setattr(profile_store, "_get_collection", lambda: None)
    monkeypatch.setattr(profile_store, "PROFILE_STORE_FILE", str(tmp_path / "profiles.json"))
    monkeypatch.setattr(chat_history, "CHAT_HISTORY_FILE", str(tmp_path / "chat_history.json"))
    return tmp_path
