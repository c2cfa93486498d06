"""Service layer for one-to-one chats."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Optional

from firebase_admin import firestore

from campusrides.core.constants import (
    CHAT_DIRECT,
    CHAT_MARKETPLACE,
    CHAT_PREVIEW_LENGTH,
    CHATS_COLLECTION,
    MESSAGES_SUBCOLLECTION,
    NOTIFICATIONS_COLLECTION,
    USERS_COLLECTION,
)
from campusrides.core.transactions import run_transaction
from campusrides.core.types import Failure, Result, Success

if TYPE_CHECKING:
    from google.cloud.firestore_v1.client import Client
    from google.cloud.firestore_v1.collection import CollectionReference
    from google.cloud.firestore_v1.document import DocumentReference
    from google.cloud.firestore_v1.transaction import Transaction

    from .models import Chat, Message

logger = logging.getLogger(__name__)

CHAT_NOT_FOUND = "Chat does not exist!"
NOT_IN_CHAT = "You are not part of this chat."


def message_preview(text: str, length: int = CHAT_PREVIEW_LENGTH) -> str:
    """Shorten a message for notifications."""
    return text if len(text) <= length else text[:length] + "..."


class ChatService:
    """Service class for chats and their messages."""

    @staticmethod
    def _chats(db: Client) -> Any:
        return db.collection(CHATS_COLLECTION)

    @staticmethod
    def _messages(db: Client, chat_id: str) -> Any:
        return (
            ChatService._chats(db).document(chat_id).collection(MESSAGES_SUBCOLLECTION)
        )

    @staticmethod
    def find_chat(db: Client, user_id: str, other_id: str) -> Optional[str]:
        """Return the id of a chat between two users, if they have one."""
        query = ChatService._chats(db).where(
            filter=firestore.FieldFilter("participants", "array_contains", user_id)
        )
        for doc in query.stream():
            if other_id in (doc.to_dict() or {}).get("participants", []):
                return doc.id
        return None

    @staticmethod
    def start_chat(
        db: Client, user_id: str, other_id: str, listing_id: Optional[str] = None
    ) -> Result:
        """Open a chat with another user, or return the one they already share."""
        if not other_id:
            return Failure.validation("Who do you want to message?")
        if other_id == user_id:
            return Failure.validation("You cannot message yourself.")

        try:
            existing = ChatService.find_chat(db, user_id, other_id)
            if existing:
                return Success("Chat found.", id=existing)

            chat_data = {
                "participants": [user_id, other_id],
                "createdAt": firestore.SERVER_TIMESTAMP,
                "updatedAt": firestore.SERVER_TIMESTAMP,
                "lastMessage": "",
                "lastMessageSenderId": None,
                "lastMessageSeen": True,
                "unreadCount": {user_id: 0, other_id: 0},
                "chatType": CHAT_MARKETPLACE if listing_id else CHAT_DIRECT,
                "listingId": listing_id,
            }
            _, chat_ref = ChatService._chats(db).add(chat_data)
        except Exception as e:
            logger.error(f"Error starting chat between {user_id} and {other_id}: {e}")
            return Failure.store()

        logger.info(f"Chat {chat_ref.id} started by {user_id}")
        return Success("Chat started!", id=chat_ref.id)

    @staticmethod
    def get_chat(db: Client, chat_id: str, user_id: str) -> Result:
        """Fetch a chat the user takes part in."""
        try:
            chat_doc = ChatService._chats(db).document(chat_id).get()
        except Exception as e:
            logger.error(f"Error fetching chat {chat_id}: {e}")
            return Failure.store()
        if not chat_doc.exists:
            return Failure.not_found(CHAT_NOT_FOUND)

        chat: Chat = {**chat_doc.to_dict(), "id": chat_doc.id}
        if user_id not in chat.get("participants", []):
            return Failure.forbidden(NOT_IN_CHAT)
        return Success("Chat found.", id=chat_doc.id, data=chat)

    @staticmethod
    def _send_message_transaction(  # noqa: PLR0913
        transaction: Transaction,
        chat_ref: DocumentReference,
        notifications: CollectionReference,
        sender_id: str,
        text: str,
        sender_name: str,
        title: str,
    ) -> Result:
        """Add a message and bump the recipient's unread count."""
        snapshot = chat_ref.get(transaction=transaction)
        if not snapshot.exists:
            return Failure.not_found(CHAT_NOT_FOUND)

        chat = snapshot.to_dict() or {}
        participants = chat.get("participants") or []
        if sender_id not in participants:
            return Failure.forbidden(NOT_IN_CHAT)
        recipient_id = next((p for p in participants if p != sender_id), None)

        message_ref = chat_ref.collection(MESSAGES_SUBCOLLECTION).document()
        message: Message = {
            "text": text,
            "senderId": sender_id,
            "createdAt": firestore.SERVER_TIMESTAMP,
            "seen": False,
            "seenAt": None,
        }
        transaction.set(message_ref, message)

        chat_update: dict[str, Any] = {
            "lastMessage": text,
            "lastMessageSenderId": sender_id,
            "lastMessageSeen": False,
            "updatedAt": firestore.SERVER_TIMESTAMP,
        }
        if recipient_id:
            unread = (chat.get("unreadCount") or {}).get(recipient_id, 0)
            chat_update[f"unreadCount.{recipient_id}"] = unread + 1
            transaction.set(
                notifications.document(),
                {
                    "userId": recipient_id,
                    "title": title,
                    "message": f"{sender_name}: {message_preview(text)}",
                    "type": "chat",
                    "chatId": chat_ref.id,
                    "read": False,
                    "createdAt": firestore.SERVER_TIMESTAMP,
                },
            )
        transaction.update(chat_ref, chat_update)
        return Success(
            "Message sent!", id=message_ref.id, data={"recipientId": recipient_id}
        )

    @staticmethod
    def send_message(  # noqa: PLR0913
        db: Client,
        chat_id: str,
        sender_id: str,
        text: str,
        sender_name: str = "Someone",
        title: str = "New Message",
    ) -> Result:
        """Post a message to a chat and notify the other participant.

        On success ``data`` carries the recipient's id and, when their
        profile has one, their email address.
        """
        text = (text or "").strip()
        if not text:
            return Failure.validation("Message cannot be empty.")

        chat_ref = ChatService._chats(db).document(chat_id)
        try:
            result = run_transaction(
                db,
                ChatService._send_message_transaction,
                chat_ref,
                db.collection(NOTIFICATIONS_COLLECTION),
                sender_id,
                text,
                sender_name,
                title,
            )
        except Exception as e:
            logger.error(f"Error sending message in chat {chat_id}: {e}")
            return Failure.store()
        if not result.ok:
            logger.info(f"Rejected message in chat {chat_id}: {result.message}")
            return result

        recipient_id = result.data["recipientId"]
        recipient_email = None
        if recipient_id:
            try:
                recipient = db.collection(USERS_COLLECTION).document(recipient_id).get()
                if recipient.exists:
                    recipient_email = recipient.to_dict().get("email")
            except Exception as e:
                logger.warning(f"Could not look up recipient {recipient_id}: {e}")
        return Success(
            result.message,
            id=result.id,
            data={"recipientId": recipient_id, "recipientEmail": recipient_email},
        )

    @staticmethod
    def _messages_query(db: Client, chat_id: str) -> Any:
        return ChatService._messages(db, chat_id).order_by(
            "createdAt", direction=firestore.Query.ASCENDING
        )

    @staticmethod
    def get_messages(db: Client, chat_id: str) -> list[Message]:
        """Return a chat's messages, oldest first."""
        return [
            {**doc.to_dict(), "id": doc.id}
            for doc in ChatService._messages_query(db, chat_id).stream()
        ]

    @staticmethod
    def watch_messages(
        db: Client, chat_id: str, callback: Callable[[list[Message]], None]
    ) -> Callable[[], None]:
        """Call ``callback`` with the chat's messages now and after every change.

        Returns a function that stops the subscription.
        """

        def on_snapshot(docs: Any, changes: Any, read_time: Any) -> None:
            callback([{**doc.to_dict(), "id": doc.id} for doc in docs])

        watch = ChatService._messages_query(db, chat_id).on_snapshot(on_snapshot)
        return watch.unsubscribe

    @staticmethod
    def mark_messages_seen(db: Client, chat_id: str, user_id: str) -> Result:
        """Mark the other participant's unseen messages as seen by ``user_id``."""
        result = ChatService.get_chat(db, chat_id, user_id)
        if not result.ok:
            return result
        chat = result.data

        try:
            unseen = [
                doc
                for doc in ChatService._messages(db, chat_id)
                .where(filter=firestore.FieldFilter("seen", "==", False))
                .stream()
                if (doc.to_dict() or {}).get("senderId") != user_id
            ]
            if unseen:
                batch = db.batch()
                for doc in unseen:
                    batch.update(
                        doc.reference,
                        {"seen": True, "seenAt": firestore.SERVER_TIMESTAMP},
                    )
                chat_update: dict[str, Any] = {f"unreadCount.{user_id}": 0}
                if chat.get("lastMessageSenderId") != user_id:
                    chat_update["lastMessageSeen"] = True
                batch.update(ChatService._chats(db).document(chat_id), chat_update)
                batch.commit()
        except Exception as e:
            logger.error(f"Error marking messages seen in chat {chat_id}: {e}")
            return Failure.store()

        return Success(f"Marked {len(unseen)} messages as seen", id=chat_id)

    @staticmethod
    def get_chats_for_user(db: Client, user_id: str) -> list[Chat]:
        """Return a user's chats, most recently active first."""
        query = (
            ChatService._chats(db)
            .where(
                filter=firestore.FieldFilter("participants", "array_contains", user_id)
            )
            .order_by("updatedAt", direction=firestore.Query.DESCENDING)
        )
        return [{**doc.to_dict(), "id": doc.id} for doc in query.stream()]
