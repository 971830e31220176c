import chat_history
from assistant import USER, ChatMessage, greeting

ALICE = "profile-alice"
BOB = "profile-bob"


def _conversation(question="How is it treated?"):
    return [greeting(), ChatMessage(USER, question), ChatMessage("bot", "With Praziquantel.", ["Is it safe?"])]


def test_empty_when_no_file(file_stores):
    assert chat_history.load_history(ALICE) == []


def test_save_and_load_round_trip(file_stores):
    saved = chat_history.save_session(ALICE, _conversation())
    loaded = chat_history.load_history(ALICE)

    assert len(loaded) == 1
    assert loaded[0].id == saved.id
    assert loaded[0].owner == ALICE
    assert loaded[0].title == "How is it treated?..."
    assert loaded[0].messages[-1].suggestions == ["Is it safe?"]


def test_upsert_keeps_id_and_moves_to_top(file_stores):
    first = chat_history.save_session(ALICE, _conversation("first question"))
    chat_history.save_session(ALICE, _conversation("second question"))

    messages = _conversation("first question") + [ChatMessage(USER, "follow up")]
    updated = chat_history.save_session(ALICE, messages, first.id)

    history = chat_history.load_history(ALICE)
    assert updated.id == first.id
    assert [s.id for s in history][0] == first.id
    assert len(history) == 2
    assert len(history[0].messages) == 4


def test_delete_session(file_stores):
    keep = chat_history.save_session(ALICE, _conversation("keep"))
    drop = chat_history.save_session(ALICE, _conversation("drop"))

    remaining = chat_history.delete_session(ALICE, drop.id)

    assert [s.id for s in remaining] == [keep.id]
    assert [s.id for s in chat_history.load_history(ALICE)] == [keep.id]


def test_histories_are_separate_per_owner(file_stores):
    alice = chat_history.save_session(ALICE, _conversation("alice asks"))
    bob = chat_history.save_session(BOB, _conversation("bob asks"))

    assert [s.id for s in chat_history.load_history(ALICE)] == [alice.id]
    assert [s.id for s in chat_history.load_history(BOB)] == [bob.id]

    # Neither user can touch the other's conversations
    chat_history.delete_session(BOB, alice.id)
    other = chat_history.save_session(BOB, _conversation("bob again"), alice.id)
    assert other.id != alice.id
    assert [s.title for s in chat_history.load_history(ALICE)] == ["alice asks..."]
    assert len(chat_history.load_history(BOB)) == 2


def test_rolling_window_is_per_owner(file_stores, monkeypatch):
    monkeypatch.setattr(chat_history, "MAX_SESSIONS", 3)
    chat_history.save_session(BOB, _conversation("bob's only question"))
    for i in range(5):
        chat_history.save_session(ALICE, _conversation(f"question {i}"))

    titles = [s.title for s in chat_history.load_history(ALICE)]
    assert titles == ["question 4...", "question 3...", "question 2..."]
    assert len(chat_history.load_history(BOB)) == 1


def test_corrupt_file_reads_as_empty(file_stores):
    (file_stores / "chat_history.json").write_text("{not json", encoding="utf-8")
    assert chat_history.load_history(ALICE) == []
