"""Registration email sent to newly invited clients."""

from __future__ import annotations

from html import escape

from ptstudio.services._shared.ports import EmailMessage

REGISTRATION_SUBJECT = "Complete your registration"

_REGISTRATION_HTML = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h1>Hello {name}!</h1>
  <p>Welcome to the platform!</p>
  <p>Click the button below to set your password and activate your account:</p>
  <a href="{link}"
     style="display: inline-block; padding: 12px 24px; background-color: #4F46E5;
            color: white; text-decoration: none; border-radius: 6px; margin: 20px 0;">
    Set your password
  </a>
  <p style="color: #999; font-size: 12px;">This link expires in {ttl_days} days.</p>
  <p><b>Happy training!</b></p>
</div>
"""


def registration_link(app_url: str, token: str) -> str:
    """``<APP_URL>register/<token>``; ``APP_URL`` is expected to end with ``/``."""
    return f"{app_url}register/{token}"


def registration_email(
    *, to: str, name: str, link: str, ttl_days: int, sender: str | None = None
) -> EmailMessage:
    html = _REGISTRATION_HTML.format(name=escape(name), link=escape(link), ttl_days=ttl_days)
    return EmailMessage(to=to, subject=REGISTRATION_SUBJECT, html=html, sender=sender)
