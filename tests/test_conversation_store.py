"""Tests for the append-only conversation log."""

import pytest
from pydantic import ValidationError

from adventure.schemas.conversation import Message, MessageRole
from adventure.services.conversation_store import ConversationStore


def test_new_store_is_empty():
    store = ConversationStore()
    assert len(store) == 0
    assert store.as_context() == []
    assert list(store) == []


def test_append_keeps_turn_order():
    store = ConversationStore()
    store.append(Message.assistant("You stand at the foot of a lighthouse."))
    store.append(Message.user("go north"))
    store.append(Message.assistant("A locked door."))

    assert [m.role for m in store] == [MessageRole.ASSISTANT, MessageRole.USER, MessageRole.ASSISTANT]
    assert store.as_context() == [
        {"role": "assistant", "content": "You stand at the foot of a lighthouse."},
        {"role": "user", "content": "go north"},
        {"role": "assistant", "content": "A locked door."},
    ]


def test_iteration_is_restartable():
    store = ConversationStore.from_messages([Message.user("look"), Message.assistant("Fog.")])
    first = list(store)
    second = list(store)
    assert first == second
    assert len(first) == 2


def test_iteration_is_a_snapshot():
    """Appending while iterating does not change the running iteration."""
    store = ConversationStore.from_messages([Message.user("look")])
    seen = []
    for message in store:
        seen.append(message)
        store.append(Message.assistant("Fog."))
    assert len(seen) == 1
    assert len(store) == 2


def test_as_context_returns_a_fresh_list():
    store = ConversationStore.from_messages([Message.user("look")])
    context = store.as_context()
    context.append({"role": "user", "content": "sneaky"})
    assert len(store) == 1


def test_append_rejects_non_messages():
    store = ConversationStore()
    with pytest.raises(TypeError):
        store.append({"role": "user", "content": "go north"})


def test_message_rejects_null_content_and_unknown_role():
    with pytest.raises(ValidationError):
        Message(role=MessageRole.USER, content=None)
    with pytest.raises(ValidationError):
        Message(role="system", content="hi")


def test_message_is_immutable():
    message = Message.user("go north")
    with pytest.raises(ValidationError):
        message.content = "go south"
