from types import SimpleNamespace

import pytest

import assistant
import llm_engine
from assistant import BOT, USER, ChatMessage


def test_split_suggestions():
    body, suggestions = assistant.split_suggestions(
        'Praziquantel is the recommended drug.\n<<SUGGESTIONS>>["Is it safe?", "What dose?", "Where can I get it?"]'
    )
    assert body == "Praziquantel is the recommended drug."
    assert suggestions == ["Is it safe?", "What dose?", "Where can I get it?"]


def test_split_suggestions_without_marker():
    assert assistant.split_suggestions("Just an answer.") == ("Just an answer.", [])


def test_split_suggestions_malformed_list():
    body, suggestions = assistant.split_suggestions("Answer <<SUGGESTIONS>>[\"unterminated")
    assert body == "Answer"
    assert suggestions == []


@pytest.mark.parametrize("language", ["en", "sw", "luo"])
def test_system_instruction_asks_for_suggestions(language):
    instruction = assistant.system_instruction(language)
    assert "Praziquantel" in instruction
    assert "<<SUGGESTIONS>>" in instruction


def test_unknown_language_falls_back_to_english():
    assert assistant.system_instruction("fr") == assistant.system_instruction("en")
    assert assistant.greeting("fr").text == assistant.greeting("en").text


def test_greeting_has_three_suggestions():
    msg = assistant.greeting("sw")
    assert msg.sender == BOT
    assert msg.text.startswith("Hujambo")
    assert len(msg.suggestions) == 3


def test_session_title():
    messages = [assistant.greeting(), ChatMessage(USER, "What are the symptoms of bilharzia in children?")]
    assert assistant.session_title(messages) == "What are the symptoms of bilha..."
    assert assistant.session_title([assistant.greeting()]) == "New Conversation"


def test_build_messages_maps_roles():
    history = [assistant.greeting(), ChatMessage(USER, "Hi")]
    messages = assistant.build_messages(history, "en")
    assert messages[0]["role"] == "system"
    assert [m["role"] for m in messages[1:]] == ["assistant", "user"]
    assert messages[2]["content"] == "Hi"


def test_image_attachment_becomes_image_part():
    msg = assistant.attachment_message("snail.png", "image/png", b"png-bytes")
    assert msg.sender == USER
    assert "snail.png" in msg.text
    assert msg.content[1]["type"] == "image_url"
    # The structured content is what the model sees
    assert assistant.build_messages([msg])[1]["content"] == msg.content


def test_text_attachment_is_inlined():
    msg = assistant.attachment_message("notes.txt", "text/plain", b"Avoid lake water.", "en")
    assert len(msg.content) == 1
    assert "Avoid lake water." in msg.content[0]["text"]


def test_other_attachment_is_described():
    msg = assistant.attachment_message("report.pdf", "application/pdf", b"%PDF")
    assert "[Attached file: report.pdf (application/pdf)]" in msg.content[0]["text"]


def test_reply_splits_model_output(monkeypatch):
    seen = []

    def fake_chat(messages):
        seen.append(messages)
        return 'Avoid wading in lakes. <<SUGGESTIONS>>["Why?", "Where?", "When?"]'

    monkeypatch.setattr(llm_engine, "safe_chat", fake_chat)

    msg = assistant.reply([assistant.greeting(), ChatMessage(USER, "How do I prevent it?")])
    assert msg.sender == BOT
    assert msg.text == "Avoid wading in lakes."
    assert msg.suggestions == ["Why?", "Where?", "When?"]
    assert seen[0][-1] == {"role": "user", "content": "How do I prevent it?"}


def test_reply_propagates_llm_errors(monkeypatch):
    def broken(messages):
        raise llm_engine.LLMNotConfigured("no key")

    monkeypatch.setattr(llm_engine, "safe_chat", broken)
    with pytest.raises(llm_engine.LLMNotConfigured):
        assistant.reply([ChatMessage(USER, "hi")])


def test_reply_to_image_attachment_uses_vision_model(monkeypatch):
    calls = []

    def create(**kwargs):
        calls.append(kwargs)
        message = SimpleNamespace(content="That looks like a Biomphalaria snail.")
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    monkeypatch.setattr(llm_engine, "openai_client", client)
    monkeypatch.setattr(llm_engine, "_GROQ_KEY", "gsk-test")
    monkeypatch.setattr(llm_engine, "_GROQ_BASE", "https://api.groq.com/openai/v1")

    history = [assistant.greeting(), assistant.attachment_message("snail.png", "image/png", b"png-bytes")]
    msg = assistant.reply(history)

    assert msg.text == "That looks like a Biomphalaria snail."
    assert calls[0]["model"] == llm_engine.MODEL_MAPPING["vision"]
