"""Data models for chats."""

from __future__ import annotations

from typing import Any, Optional, TypedDict

from campusrides.core.types import FirestoreDocument


class Chat(FirestoreDocument, total=False):
    """A conversation between two users in ``chats``."""

    participants: list[str]
    lastMessage: str
    lastMessageSenderId: Optional[str]
    lastMessageSeen: bool
    unreadCount: dict[str, int]
    chatType: str
    listingId: Optional[str]


class Message(TypedDict, total=False):
    """A message stored under ``chats/{chatId}/messages``."""

    id: str
    text: str
    senderId: str
    createdAt: Any
    seen: bool
    seenAt: Any
