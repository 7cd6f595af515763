"""Tests for core data models."""
from __future__ import annotations

import dataclasses

import pytest

from ai_cli.core.models import Message, Role, Usage


def test_role_values() -> None:
    assert Role.SYSTEM.value == "system"
    assert Role.USER.value == "user"
    assert Role.ASSISTANT.value == "assistant"


def test_role_parse_ignores_case() -> None:
    assert Role.parse("USER") is Role.USER
    assert Role.parse(" Assistant ") is Role.ASSISTANT


def test_role_parse_rejects_unknown() -> None:
    with pytest.raises(ValueError, match="developer"):
        Role.parse("developer")


def test_constructors_set_role() -> None:
    assert Message.system("s").role is Role.SYSTEM
    assert Message.user("u").role is Role.USER
    assert Message.assistant("a").role is Role.ASSISTANT


def test_equality_is_structural() -> None:
    assert Message.user("hi") == Message(Role.USER, "hi")
    assert Message.user("hi") != Message.assistant("hi")
    assert Message.user("hi") != Message.user("hi ")


def test_message_is_immutable() -> None:
    m = Message.user("hi")
    with pytest.raises(dataclasses.FrozenInstanceError):
        m.content = "bye"  # type: ignore[misc]


def test_empty_content_allowed() -> None:
    assert Message.assistant("").content == ""


def test_to_dict_uses_wire_role() -> None:
    assert Message.user("Hello, world!").to_dict() == {"role": "user", "content": "Hello, world!"}


def test_usage_defaults() -> None:
    usage = Usage()
    assert usage.prompt_tokens is None
    assert usage.completion_tokens is None
    assert usage.total_tokens is None
