from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol
from uuid import uuid4

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailMessage:
    """Outgoing HTML email."""

    to: str
    subject: str
    html: str
    sender: str | None = None


@dataclass(frozen=True)
class EmailReceipt:
    """Provider acknowledgement for a sent message."""

    message_id: str
    accepted: list[str] = field(default_factory=list)


class EmailSender(Protocol):
    """Outbound email transport. Callers treat every send as fire-and-forget."""

    def send(self, message: EmailMessage) -> EmailReceipt:
        """Deliver ``message`` or raise; callers log failures and carry on."""


class LoggingEmailSender(EmailSender):
    """Development transport: records messages and logs them instead of sending."""

    def __init__(self) -> None:
        self.outbox: list[EmailMessage] = []

    def send(self, message: EmailMessage) -> EmailReceipt:
        self.outbox.append(message)
        receipt = EmailReceipt(message_id=uuid4().hex, accepted=[message.to])
        logger.info(
            "Email queued",
            extra={"to": message.to, "subject": message.subject, "message_id": receipt.message_id},
        )
        return receipt
