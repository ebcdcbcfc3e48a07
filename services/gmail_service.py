from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from googleapiclient.discovery import build

from models.label import Label
from services.auth_service import AuthService
from utils.config import AppConfig

LOGGER = logging.getLogger(__name__)


class GmailService:
    """Gmail REST implementation of the ``MailProvider`` protocol.

    The API client is built on first use, so constructing the service never
    touches the network.
    """

    def __init__(self, config: AppConfig, auth_service: AuthService, client: Any = None):
        self._config = config
        self._auth_service = auth_service
        self._client = client

    @property
    def user_id(self) -> str:
        return self._config.user_id

    @property
    def client(self) -> Any:
        if self._client is None:
            creds = self._auth_service.authenticate()
            self._client = build("gmail", "v1", credentials=creds, cache_discovery=False)
        return self._client

    def list_messages(self, query: str, max_results: int) -> List[Dict[str, Any]]:
        response = (
            self.client.users()
            .messages()
            .list(userId=self.user_id, q=query, maxResults=max_results)
            .execute()
        )

        messages = response.get("messages", []) or []
        LOGGER.info("Listed %s message ids for %r", len(messages), query)
        return messages

    def get_message_metadata(self, message_id: str, header_names: Sequence[str]) -> Dict[str, Any]:
        response = (
            self.client.users()
            .messages()
            .get(
                userId=self.user_id,
                id=message_id,
                format="metadata",
                metadataHeaders=list(header_names),
            )
            .execute()
        )
        payload = response.get("payload") or {}
        return {"headers": payload.get("headers", []), "snippet": response.get("snippet", "")}

    def get_thread(self, thread_id: str) -> List[Dict[str, Any]]:
        response = self.client.users().threads().get(userId=self.user_id, id=thread_id).execute()

        messages: List[Dict[str, Any]] = []
        for message in response.get("messages", []) or []:
            payload = message.get("payload") or {}
            messages.append(
                {
                    "id": message.get("id"),
                    "payload": payload,
                    "headers": payload.get("headers", []),
                    "snippet": message.get("snippet", ""),
                }
            )
        LOGGER.debug("Thread %s has %s messages", thread_id, len(messages))
        return messages

    def create_draft(self, thread_id: str, raw: str) -> Optional[str]:
        body = {"message": {"raw": raw, "threadId": thread_id}}
        response = self.client.users().drafts().create(userId=self.user_id, body=body).execute()
        draft_id = response.get("id")
        LOGGER.info("Created draft %s in thread %s", draft_id, thread_id)
        return draft_id

    def list_labels(self) -> List[Label]:
        response = self.client.users().labels().list(userId=self.user_id).execute()
        return [Label.from_api(item) for item in response.get("labels", []) or []]

    def modify_thread_labels(self, thread_id: str, add_label_ids: Sequence[str]) -> None:
        if not add_label_ids:
            LOGGER.debug("No labels supplied for thread %s", thread_id)
            return
        body = {"addLabelIds": list(add_label_ids)}
        self.client.users().threads().modify(userId=self.user_id, id=thread_id, body=body).execute()
        LOGGER.info("Applied labels %s to thread %s", list(add_label_ids), thread_id)
