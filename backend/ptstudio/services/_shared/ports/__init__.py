"""
ptstudio.services._shared.ports
===============================

*Ports* (hexagonal interfaces) for the external collaborators the service
layer calls after a transaction commits.

Modules
-------
- :mod:`media_store`:
    :class:`~.MediaStore` (``upload``/``destroy``) and the in-memory
    :class:`~.InMemoryMediaStore` used in development and tests.
- :mod:`email_sender`:
    :class:`~.EmailSender` (``send``) and :class:`~.LoggingEmailSender`.

Concrete third-party adapters implement these protocols outside the service
layer and are injected into the services that need them.
"""

from __future__ import annotations

from .email_sender import EmailMessage, EmailReceipt, EmailSender, LoggingEmailSender
from .media_store import InMemoryMediaStore, MediaStore, UploadResult

__all__ = [
    "EmailMessage",
    "EmailReceipt",
    "EmailSender",
    "LoggingEmailSender",
    "InMemoryMediaStore",
    "MediaStore",
    "UploadResult",
]
