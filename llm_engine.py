import os
import base64
from typing import Dict, List, Optional

from tenacity import retry, retry_if_not_exception_type, stop_after_attempt, wait_exponential
from openai import OpenAI
from dotenv import load_dotenv

from logger import logger

# Local .env for `streamlit run`; deployed runtimes inject the variables directly
load_dotenv()

# Prefer GROQ key when present, fall back to OPENAI_API_KEY for compatibility
_GROQ_KEY = os.getenv("GROQ_API_KEY")
_OPENAI_KEY = os.getenv("OPENAI_API_KEY")
_GROQ_BASE = os.getenv("GROQ_API_BASE", "https://api.groq.com/openai/v1")

CHAT_MODEL = os.getenv("LLM_CHAT_MODEL", "gpt-4o-mini")
VISION_MODEL = os.getenv("LLM_VISION_MODEL", "gpt-4o-mini")

# OpenAI model names -> Groq equivalents
MODEL_MAPPING = {
    "gpt-4o-mini": "llama-3.3-70b-versatile",
    "gpt-4o": "llama-3.3-70b-versatile",
    "vision": "meta-llama/llama-4-scout-17b-16e-instruct",
}

openai_client = None
if _GROQ_KEY:
    openai_client = OpenAI(api_key=_GROQ_KEY, base_url=_GROQ_BASE)
elif _OPENAI_KEY:
    openai_client = OpenAI(api_key=_OPENAI_KEY)


class LLMNotConfigured(ValueError):
    pass


def _ensure_openai():
    if openai_client is None:
        raise LLMNotConfigured("GROQ_API_KEY or OPENAI_API_KEY not configured in environment (.env)")


def _extract_text_from_response(resp) -> str:
    try:
        return resp.choices[0].message.content or ""
    except (AttributeError, IndexError):
        return ""


def _get_model_name(requested_model: str, vision: bool = False) -> str:
    """Map a requested model to the Groq equivalent when talking to Groq."""
    if _GROQ_KEY and "groq" in _GROQ_BASE:
        if vision:
            return MODEL_MAPPING["vision"]
        return MODEL_MAPPING.get(requested_model, "llama-3.3-70b-versatile")
    return requested_model


def image_data_url(image_bytes: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def _has_image(messages: List[Dict]) -> bool:
    for m in messages:
        content = m.get("content")
        if isinstance(content, list) and any(
            isinstance(part, dict) and part.get("type") == "image_url" for part in content
        ):
            return True
    return False


def call_chat(messages: List[Dict], temperature: float = 0.4, timeout: Optional[int] = None) -> str:
    """
    Chat completion over a full message list (system + history + new turn).
    A conversation carrying any image part goes to the vision model.
    Returns the assistant's text.
    """
    _ensure_openai()
    kwargs = {}
    if timeout is not None:
        kwargs["timeout"] = timeout

    if _has_image(messages):
        model = _get_model_name(VISION_MODEL, vision=True)
    else:
        model = _get_model_name(CHAT_MODEL)

    resp = openai_client.chat.completions.create(
        model=model,
        messages=messages,
        temperature=temperature,
        **kwargs,
    )
    return _extract_text_from_response(resp)


def analyze_image(prompt: str, image_bytes: bytes, mime_type: str) -> str:
    """
    Vision call: one user turn holding the instruction and the image.
    Returns free-form text; interpreting it is the caller's job.
    """
    _ensure_openai()

    resp = openai_client.chat.completions.create(
        model=_get_model_name(VISION_MODEL, vision=True),
        messages=[{
            "role": "user",
            "content": [
                {"type": "text", "text": prompt},
                {"type": "image_url", "image_url": {"url": image_data_url(image_bytes, mime_type)}},
            ],
        }],
        temperature=0.2,
    )
    text = _extract_text_from_response(resp)
    logger.debug(f"Vision model returned {len(text)} chars")
    return text


_retrying = retry(
    retry=retry_if_not_exception_type(LLMNotConfigured),
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=8),
    reraise=True,
)


@_retrying
def safe_chat(messages: List[Dict], temperature: float = 0.4) -> str:
    """Chat call with retry logic."""
    return call_chat(messages, temperature=temperature)


@_retrying
def safe_analyze_image(prompt: str, image_bytes: bytes, mime_type: str) -> str:
    """Vision call with retry logic."""
    return analyze_image(prompt, image_bytes, mime_type)
