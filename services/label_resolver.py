from __future__ import annotations

import logging
from typing import FrozenSet

from models.label import SOURCE_SYSTEM, SOURCE_USER, LabelResolution
from services.mail_provider import MailProvider

LOGGER = logging.getLogger(__name__)
SYSTEM_LABELS: FrozenSet[str] = frozenset({"INBOX", "SPAM", "TRASH", "UNREAD", "STARRED", "IMPORTANT"})


class LabelResolver:
    """Map a human label name to the Gmail label id to apply.

    System labels short-circuit without a provider call. Other names are
    looked up case-insensitively among the account's labels; an unknown name
    yields ``LabelResolution.missing()`` and is never created. Provider errors
    are not caught here.
    """

    def __init__(self, provider: MailProvider):
        self._provider = provider

    def resolve(self, label_name: str) -> LabelResolution:
        candidate = label_name.upper()
        if candidate in SYSTEM_LABELS:
            LOGGER.debug("Using system label %s", candidate)
            return LabelResolution(label_id=candidate, source=SOURCE_SYSTEM)

        wanted = label_name.lower()
        for label in self._provider.list_labels():
            if label.name.lower() == wanted and label.id:
                LOGGER.debug("Label %s resolved to %s", label_name, label.id)
                return LabelResolution(label_id=label.id, source=SOURCE_USER)

        LOGGER.info("Label %s not found", label_name)
        return LabelResolution.missing()
