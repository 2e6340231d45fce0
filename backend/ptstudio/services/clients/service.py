from __future__ import annotations

import logging
import secrets
from datetime import timedelta
from typing import Any

from ptstudio.core.ids import EntityKind, encode_id
from ptstudio.models.base import utcnow
from ptstudio.models.user import User, UserRole, UserStatus
from ptstudio.services._shared.base import BaseService, ServiceContext
from ptstudio.services._shared.dto import Connection, SuccessOut, build_connection
from ptstudio.services._shared.errors import (
    ConflictError,
    InvalidArgumentError,
    NotFoundError,
)
from ptstudio.services._shared.guards import ensure_owned
from ptstudio.services._shared.ports import EmailSender, LoggingEmailSender
from ptstudio.services.media import PhotoOut

from .dto import ClientCreateIn, ClientListIn, ClientOut, ClientUpdateIn
from .emails import registration_email, registration_link

logger = logging.getLogger(__name__)

_DUPLICATE_EMAIL = "A client with this email already exists"
_LISTABLE_STATUSES = {UserStatus.PENDING.value, UserStatus.ACTIVE.value, UserStatus.DEACTIVATED.value}


def client_to_out(row: User) -> ClientOut:
    details = row.details
    photo = None
    if details is not None and details.photography_url:
        photo = PhotoOut(url=details.photography_url, key=details.photography_key or "")
    return ClientOut(
        id=encode_id(EntityKind.USER, row.id),
        name=row.name,
        email=row.email,
        status=row.status,
        created_at=row.created_at,
        updated_at=row.updated_at,
        deactivated_at=row.deactivated_at,
        photo=photo,
    )


class ClientService(BaseService):
    """
    Client accounts invited and managed by the calling trainer.

    New clients start ``pending`` with a one-time registration token; the
    invitation email goes out after commit and a failed send never fails the
    operation.
    """

    DEFAULT_TOKEN_TTL_DAYS = 7

    def __init__(
        self,
        *,
        ctx: ServiceContext | None = None,
        session: Any = None,
        email_sender: EmailSender | None = None,
    ) -> None:
        super().__init__(ctx=ctx, session=session)
        self.email_sender = email_sender or LoggingEmailSender()

    # ------------------------------- Queries --------------------------------

    def paginate(self, dto: ClientListIn) -> Connection[ClientOut]:
        owner_id = self.actor_id
        first, after_id = self.page_window(dto.first, dto.after)
        status = (dto.status or "").strip().lower() or None
        if status is not None and status not in _LISTABLE_STATUSES:
            raise InvalidArgumentError(f"Unknown client status: {dto.status}")

        with self.ro_uow() as uow:
            page = uow.users.paginate_clients(
                owner_id, first=first, after_id=after_id, status=status, search=dto.search
            )
            return build_connection(page, client_to_out)

    def get(self, client_id: str) -> ClientOut:
        owner_id = self.actor_id
        numeric_id = self.require_id(EntityKind.USER, client_id, field="id")
        with self.ro_uow() as uow:
            ensure_owned(uow.session, EntityKind.USER, numeric_id, owner_id)
            client = uow.users.get_client(numeric_id, owner_id)
            if client is None:
                raise NotFoundError("Client", numeric_id, "Client does not exist")
            return client_to_out(client)

    # ------------------------------ Mutations -------------------------------

    def add(self, dto: ClientCreateIn) -> ClientOut:
        """Invite a client: create it ``pending`` and send the registration email."""
        owner_id = self.actor_id
        name = self.require_text(dto.name, field="name")
        email = self.require_text(dto.email, field="email").lower()

        with self.rw_uow() as uow:
            if uow.users.email_taken(owner_id, email):
                raise ConflictError("Client", _DUPLICATE_EMAIL)
            token, expires_at = self._new_token()
            client = uow.users.add(
                User(
                    name=name,
                    email=email,
                    role_id=UserRole.CLIENT,
                    created_by=owner_id,
                    status=UserStatus.PENDING.value,
                    registration_token=token,
                    registration_token_expires_at=expires_at,
                )
            )
            out = client_to_out(client)
            logger.info("Client invited", extra={"client_id": client.id})

        self._send_registration(email=email, name=name, token=token)
        return out

    def edit(self, dto: ClientUpdateIn) -> ClientOut:
        owner_id = self.actor_id
        client_id = self.require_id(EntityKind.USER, dto.id, field="id")
        name = self.require_text(dto.name, field="name")
        email = self.require_text(dto.email, field="email").lower()

        with self.rw_uow() as uow:
            ensure_owned(uow.session, EntityKind.USER, client_id, owner_id)
            if uow.users.email_taken(owner_id, email, exclude_id=client_id):
                raise ConflictError("Client", _DUPLICATE_EMAIL)
            client = uow.users.get(client_id)
            uow.users.update(client, name=name, email=email)
            logger.info("Client updated", extra={"client_id": client_id})
            return client_to_out(client)

    def delete(self, client_id: str) -> str:
        """Archive the client (``archived_at`` + status ``archived``)."""
        owner_id = self.actor_id
        numeric_id = self.require_id(EntityKind.USER, client_id, field="id")
        with self.rw_uow() as uow:
            ensure_owned(uow.session, EntityKind.USER, numeric_id, owner_id)
            uow.users.delete(uow.users.get(numeric_id))
            logger.info("Client archived", extra={"client_id": numeric_id})
        return encode_id(EntityKind.USER, numeric_id)

    def activate(self, client_id: str) -> ClientOut:
        return self._set_status(client_id, UserStatus.ACTIVE)

    def deactivate(self, client_id: str) -> ClientOut:
        return self._set_status(client_id, UserStatus.DEACTIVATED)

    def resend_registration(self, client_id: str) -> SuccessOut:
        """Rotate the registration token of a pending client and email it again."""
        owner_id = self.actor_id
        numeric_id = self.require_id(EntityKind.USER, client_id, field="userId")

        with self.rw_uow() as uow:
            ensure_owned(uow.session, EntityKind.USER, numeric_id, owner_id)
            client = uow.users.get(numeric_id)
            if client.deactivated_at is not None:
                raise InvalidArgumentError("Client is deactivated")
            if client.status != UserStatus.PENDING.value:
                raise NotFoundError("Client", numeric_id, "No pending registration for this client")
            token, expires_at = self._new_token()
            uow.users.update(
                client, registration_token=token, registration_token_expires_at=expires_at
            )
            email, name = client.email, client.name
            logger.info("Registration token rotated", extra={"client_id": numeric_id})

        self._send_registration(email=email, name=name, token=token)
        return SuccessOut(success=True)

    # ------------------------------- Helpers --------------------------------

    def _set_status(self, client_id: str, status: UserStatus) -> ClientOut:
        owner_id = self.actor_id
        numeric_id = self.require_id(EntityKind.USER, client_id, field="id")
        with self.rw_uow() as uow:
            ensure_owned(uow.session, EntityKind.USER, numeric_id, owner_id)
            client = uow.users.get(numeric_id)
            uow.users.update(
                client,
                status=status.value,
                deactivated_at=utcnow() if status is UserStatus.DEACTIVATED else None,
            )
            logger.info(
                "Client status changed", extra={"client_id": numeric_id, "status": status.value}
            )
            return client_to_out(client)

    def _new_token(self):
        ttl_days = int(self.setting("REGISTRATION_TOKEN_TTL_DAYS", self.DEFAULT_TOKEN_TTL_DAYS))
        return secrets.token_hex(32), utcnow() + timedelta(days=ttl_days)

    def _send_registration(self, *, email: str, name: str, token: str) -> None:
        """Fire-and-forget: a failed send is logged and otherwise ignored."""
        message = registration_email(
            to=email,
            name=name,
            link=registration_link(self.setting("APP_URL", ""), token),
            ttl_days=int(
                self.setting("REGISTRATION_TOKEN_TTL_DAYS", self.DEFAULT_TOKEN_TTL_DAYS)
            ),
            sender=self.setting("EMAIL_FROM", None),
        )
        try:
            self.email_sender.send(message)
        except Exception:
            logger.warning("Registration email failed", extra={"to": email}, exc_info=True)
