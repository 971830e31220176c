from __future__ import annotations

import json
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

import llm_engine
from logger import logger


SUGGESTIONS_MARKER = "<<SUGGESTIONS>>"
TITLE_LENGTH = 30

USER = "user"
BOT = "bot"

_FORMAT_INSTRUCTION = {
    "en": ' At the end of your response, provide 3 short, relevant follow-up questions in this exact format: <<SUGGESTIONS>>["Question 1", "Question 2", "Question 3"]',
    "sw": ' Mwishoni mwa jibu lako, toa maswali 3 mafupi ya kufuatilia katika muundo huu halisi: <<SUGGESTIONS>>["Swali 1", "Swali 2", "Swali 3"]',
    "luo": ' Gikoni mar wechego, chiw penjo 3 machuok manyalo konyo japenjo e fomu ni: <<SUGGESTIONS>>["Penjo 1", "Penjo 2", "Penjo 3"]',
}

_SYSTEM_INSTRUCTION = {
    "en": """You are a helpful and compassionate medical assistant specializing in schistosomiasis, a disease caused by parasitic flatworms. Provide clear, accurate, and easy-to-understand information about its causes, symptoms, prevention, and treatment options.
Key Information to provide:
- Cause: Infection with Schistosoma parasites from contaminated freshwater.
- Symptoms: Rash, fever, chills, cough, muscle aches. Chronic infection can lead to severe organ damage.
- Prevention: Avoid swimming or wading in freshwater in areas where schistosomiasis is common. Drink safe water.
- Diagnosis: Stool or urine samples, blood tests.
- Treatment: Praziquantel is the recommended drug.

STORE: If documents are uploaded, use them to answer user queries accurately.
IMPORTANT: Always strongly advise users to consult a healthcare professional for diagnosis and treatment. Do not provide medical advice that could replace a doctor's consultation. Your role is informational and supportive.""",
    "sw": """Wewe ni msaidizi wa matibabu mwenye huruma na unayebobea katika ugonjwa wa kichocho (schistosomiasis). Toa maelezo wazi, sahihi, na rahisi kueleweka kuhusu sababu zake, dalili, kinga, na njia za matibabu.
Maelezo Muhimu:
- Sababu: Maambukizi ya vimelea vya Schistosoma kutoka kwa maji safi yaliyoambukizwa.
- Dalili: Upele, homa, baridi, kikohozi, maumivu ya mwili. Maambukizi ya muda mrefu yanaweza kusababisha uharibifu mkubwa wa viungo.
- Kinga: Epuka kuogelea au kutembea kwenye maji safi katika maeneo ambapo kichocho ni kawaida. Kunywa maji safi.
- Utambuzi: Sampuli za choo au mkojo, vipimo vya damu.
- Tiba: Praziquantel ndiyo dawa inayopendekezwa.

DAKUKO: Ukipewa nyaraka, zitumie kujibu maswali ya mtumiaji.
MUHIMU: Daima shauri watumiaji kuwasiliana na mtaalamu wa afya kwa utambuzi na matibabu. Usitoe ushauri wa kimatibabu unaoweza kuchukua nafasi ya daktari.""",
    "luo": """In jatich manyalo konyo ji e weche mag Kichocho (Schistosomiasis). Wuo e dholuo maler kendo mayot winjo.

Weche Madongo:
- Gima kelo tuo: Pi man gi njokni mag kichocho.
- Ranyisi: Dhendi nyalo kwiny, del lit, ahonda, kirowo. Ka tuo obedo e del kuom kinde malach, onyalo hinyo nyukta.
- Geng'o: Kik iwuothi kata gweng'o e pi ma ok ler. Madh pi motwe.
- Fwenyo: Itimo pimo mar cieth kata lach e ospital.
- Thieth: Yath miluongo ni Praziquantel.

Nyaraka: Ka oormi picha kata ndiko, ti godo e dwoko penjo.
MUHIMU: Nyis ji ni gidhi e ospital mondo oneg-gi daktari. Kik ichiw thieth ka daktari ma oting'o rang'iny.""",
}

_GREETING = {
    "en": (
        "Hello! I am the Schisto-Care Assistant. You can upload documents to the Store for me to analyze, or ask me questions directly.",
        ["What are the symptoms?", "How is it treated?", "Is it contagious?"],
    ),
    "sw": (
        "Hujambo! Mimi ni Msaidizi wa Schisto-Care. Unaweza kupakia nyaraka ili nichambue, au uniulize maswali moja kwa moja.",
        ["Dalili ni zipi?", "Inatibiwaje?", "Je, inaambukiza?"],
    ),
    "luo": (
        "Amosi! An Jakony mar Schisto-Care. Inyalo oro picha mag weche thieth kata penja penjo direct.",
        ["Ranyisi gin mage?", "Ithiethe nade?", "Inyalo yude kuom ng'ato?"],
    ),
}

_INGESTION = {
    "en": "I have uploaded a document: {name}. Please analyze it and use it to answer future questions.",
    "sw": "Nimepakia waraka: {name}. Tafadhali uchambue na uutumie kujibu maswali yajayo.",
    "luo": "Ase oro ndiko: {name}. Noni kendo itigo kuom dwoko penjo mabiro.",
}

ERROR_REPLY = "I encountered an error. Please try again."
LIMIT_REPLY = "You have reached your free trial limit of {limit} prompts. Please upgrade to Premium to continue chatting."


@dataclass
class ChatMessage:
    sender: str
    text: str
    suggestions: List[str] = field(default_factory=list)
    # Structured content sent to the model in place of `text` (attachments)
    content: Optional[Any] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {"sender": self.sender, "text": self.text}
        if self.suggestions:
            data["suggestions"] = list(self.suggestions)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChatMessage":
        return cls(
            sender=data.get("sender", BOT),
            text=data.get("text", ""),
            suggestions=list(data.get("suggestions") or []),
        )


@dataclass
class ChatSession:
    id: str
    title: str
    date: float
    messages: List[ChatMessage] = field(default_factory=list)
    # Profile id of the account that saved the conversation
    owner: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "date": self.date,
            "owner": self.owner,
            "messages": [m.to_dict() for m in self.messages],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChatSession":
        return cls(
            id=str(data["id"]),
            title=data.get("title") or "New Conversation",
            date=float(data.get("date") or 0),
            messages=[ChatMessage.from_dict(m) for m in data.get("messages") or []],
            owner=str(data.get("owner") or ""),
        )


def _lang(language: str) -> str:
    return language if language in _SYSTEM_INSTRUCTION else "en"


def system_instruction(language: str = "en") -> str:
    lang = _lang(language)
    return _SYSTEM_INSTRUCTION[lang] + _FORMAT_INSTRUCTION[lang]


def greeting(language: str = "en") -> ChatMessage:
    text, suggestions = _GREETING[_lang(language)]
    return ChatMessage(sender=BOT, text=text, suggestions=list(suggestions))


def split_suggestions(text: str) -> Tuple[str, List[str]]:
    """Separate the model's answer from its trailing follow-up questions."""
    if not text or SUGGESTIONS_MARKER not in text:
        return text or "", []

    body, _, tail = text.partition(SUGGESTIONS_MARKER)
    try:
        parsed = json.loads(tail.strip())
    except json.JSONDecodeError:
        logger.debug("Could not parse follow-up suggestions")
        return body.strip(), []

    if not isinstance(parsed, list):
        return body.strip(), []
    return body.strip(), [str(s) for s in parsed if str(s).strip()]


def session_title(messages: List[ChatMessage]) -> str:
    first_user = next((m for m in messages if m.sender == USER), None)
    if first_user is None:
        return "New Conversation"
    return first_user.text[:TITLE_LENGTH] + "..."


def new_session(messages: List[ChatMessage], owner: str = "") -> ChatSession:
    return ChatSession(
        id=str(uuid.uuid4()),
        title=session_title(messages),
        date=datetime.now().timestamp(),
        messages=list(messages),
        owner=owner,
    )


def attachment_message(name: str, mime_type: str, data: bytes, language: str = "en") -> ChatMessage:
    """User turn announcing an uploaded file; the file itself rides in `content`."""
    prompt = _INGESTION[_lang(language)].format(name=name)
    parts: List[Dict[str, Any]] = [{"type": "text", "text": prompt}]

    if mime_type.startswith("image/"):
        parts.append({"type": "image_url", "image_url": {"url": llm_engine.image_data_url(data, mime_type)}})
    elif mime_type.startswith("text/"):
        parts[0]["text"] += f"\n\nContent of {name}:\n{data.decode('utf-8', errors='replace')}"
    else:
        parts[0]["text"] += f"\n\n[Attached file: {name} ({mime_type})]"

    return ChatMessage(sender=USER, text=f"\U0001F4C2 {name}", content=parts)


def build_messages(history: List[ChatMessage], language: str = "en") -> List[Dict[str, Any]]:
    messages: List[Dict[str, Any]] = [{"role": "system", "content": system_instruction(language)}]
    for m in history:
        role = "user" if m.sender == USER else "assistant"
        messages.append({"role": role, "content": m.content if m.content is not None else m.text})
    return messages


def reply(history: List[ChatMessage], language: str = "en") -> ChatMessage:
    """Ask the model for the next bot turn. LLM errors propagate to the caller."""
    raw = llm_engine.safe_chat(build_messages(history, language))
    body, suggestions = split_suggestions(raw)
    return ChatMessage(sender=BOT, text=body, suggestions=suggestions)
