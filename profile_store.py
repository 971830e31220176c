import os
import json
import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from pymongo import MongoClient, ASCENDING, ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import PyMongoError

from logger import logger

# Configuration
MONGO_URI = os.getenv("MONGO_URI", "mongodb://localhost:27017/")
DB_NAME = os.getenv("MONGO_DB_NAME", "schistocare")
COLLECTION_NAME = os.getenv("MONGO_PROFILE_COLLECTION", "profiles")
STRICT_MONGO = os.getenv("STRICT_MONGO", "0").strip() == "1"
PROFILE_STORE_FILE = os.getenv("PROFILE_STORE_FILE", "profile_store.json")

FREE_PROMPT_LIMIT = 15
PLANS = ("monthly", "biweekly")

_client = None
_collection = None
_mongo_unavailable = False


def _get_collection() -> Optional[Collection]:
    global _client, _collection, _mongo_unavailable
    if _collection is not None:
        return _collection
    if _mongo_unavailable:
        return None

    try:
        _client = MongoClient(MONGO_URI, serverSelectionTimeoutMS=2000)
        col = _client[DB_NAME][COLLECTION_NAME]
        col.create_index([("id", ASCENDING)], unique=True)
        col.create_index([("email", ASCENDING)])
        _collection = col
    except PyMongoError as e:
        logger.warning(f"MongoDB unavailable, using {PROFILE_STORE_FILE}: {e}")
        if STRICT_MONGO:
            raise
        _mongo_unavailable = True
        return None
    return _collection


def _new_profile(user_id: str, email: str) -> Dict[str, Any]:
    return {
        "id": user_id,
        "email": email,
        "prompt_count": 0,
        "is_premium": False,
        "subscription_plan": None,
        "created_at": datetime.now().isoformat(),
    }


def _clean(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    if not doc:
        return None
    return {
        "id": doc.get("id"),
        "email": doc.get("email") or "",
        "prompt_count": int(doc.get("prompt_count") or 0),
        "is_premium": bool(doc.get("is_premium")),
        "subscription_plan": doc.get("subscription_plan"),
    }


# -----------------------------
# File-based fallback (profile_store.json)
# -----------------------------
def _load_file() -> Dict[str, Any]:
    if not os.path.exists(PROFILE_STORE_FILE):
        return {}
    with open(PROFILE_STORE_FILE, "r", encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError:
            logger.warning(f"{PROFILE_STORE_FILE} is not valid JSON; starting empty")
            return {}


def _save_file(data: Dict[str, Any]) -> None:
    with open(PROFILE_STORE_FILE, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2)


def _update_file(user_id: str, changes: Dict[str, Any], increment: int = 0) -> Optional[Dict[str, Any]]:
    data = _load_file()
    record = data.get(user_id)
    if record is None:
        return None
    record.update(changes)
    if increment:
        record["prompt_count"] = int(record.get("prompt_count") or 0) + increment
    record["updated_at"] = datetime.now().isoformat()
    data[user_id] = record
    _save_file(data)
    return record


# -----------------------------
# Public API
# -----------------------------
def profile_id_for_email(email: str) -> str:
    """Stable id for an email address (used until a real auth provider supplies one)."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, f"mailto:{email.strip().lower()}"))


def get_profile(user_id: str) -> Optional[Dict[str, Any]]:
    col = _get_collection()
    if col is not None:
        return _clean(col.find_one({"id": user_id}))
    return _clean(_load_file().get(user_id))


def get_or_create_profile(user_id: str, email: str) -> Dict[str, Any]:
    existing = get_profile(user_id)
    if existing:
        return existing

    profile = _new_profile(user_id, email)
    col = _get_collection()
    if col is not None:
        col.update_one({"id": user_id}, {"$setOnInsert": profile}, upsert=True)
    else:
        data = _load_file()
        data.setdefault(user_id, profile)
        _save_file(data)
    logger.info(f"Created profile {user_id}")
    return get_profile(user_id)


def increment_prompt_count(user_id: str) -> Optional[Dict[str, Any]]:
    col = _get_collection()
    if col is not None:
        doc = col.find_one_and_update(
            {"id": user_id},
            {"$inc": {"prompt_count": 1}, "$set": {"updated_at": datetime.now().isoformat()}},
            return_document=ReturnDocument.AFTER,
        )
        return _clean(doc)
    return _clean(_update_file(user_id, {}, increment=1))


def record_prompt(profile: Dict[str, Any]) -> Dict[str, Any]:
    """Count one sent prompt. A store failure is logged and the profile returned as it was."""
    try:
        return increment_prompt_count(profile["id"]) or profile
    except PyMongoError as e:
        logger.error(f"Failed to record prompt usage for {profile['id']}: {e}")
        return profile


def upgrade(user_id: str, plan: str) -> Optional[Dict[str, Any]]:
    if plan not in PLANS:
        raise ValueError(f"Unknown subscription plan: {plan!r}")

    changes = {"is_premium": True, "subscription_plan": plan}
    col = _get_collection()
    if col is not None:
        doc = col.find_one_and_update(
            {"id": user_id},
            {"$set": {**changes, "updated_at": datetime.now().isoformat()}},
            return_document=ReturnDocument.AFTER,
        )
        result = _clean(doc)
    else:
        result = _clean(_update_file(user_id, changes))
    logger.info(f"Profile {user_id} upgraded to {plan}")
    return result


def can_send_prompt(profile: Optional[Dict[str, Any]]) -> bool:
    if not profile:
        return False
    return bool(profile.get("is_premium")) or int(profile.get("prompt_count") or 0) < FREE_PROMPT_LIMIT


def remaining_prompts(profile: Optional[Dict[str, Any]]) -> Optional[int]:
    """None means unlimited."""
    if not profile:
        return 0
    if profile.get("is_premium"):
        return None
    return max(0, FREE_PROMPT_LIMIT - int(profile.get("prompt_count") or 0))
