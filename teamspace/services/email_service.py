"""Email delivery for account verification and workspace invitations."""

from __future__ import annotations

import html
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from teamspace.config import get_settings
from teamspace.errors import EmailDeliveryError

logger = logging.getLogger(__name__)

VERIFICATION_SUBJECT = "Verify Your Email Address"


def _button(link: str, label: str) -> str:
    return (
        f'<p style="text-align:center;margin:2rem 0;">'
        f'<a href="{html.escape(link)}" '
        'style="background-color:#007bff;color:#ffffff;padding:12px 30px;'
        'text-decoration:none;border-radius:5px;display:inline-block;font-weight:bold;">'
        f"{label}</a></p>"
    )


def build_verification_bodies(name: str, link: str, expire_hours: int) -> tuple[str, str]:
    """Return (text, html) bodies for the verification email."""
    text_body = "\n".join(
        [
            f"Hi {name},",
            "",
            "Thank you for registering! Please verify your email address by visiting "
            "the following link:",
            "",
            link,
            "",
            f"This link will expire in {expire_hours} hours. If you didn't create an "
            "account, please ignore this email.",
        ]
    )
    html_body = (
        "<html><body>"
        f"<h2>Welcome, {html.escape(name)}!</h2>"
        "<p>Thank you for registering! Please verify your email address by clicking "
        "the button below:</p>"
        f"{_button(link, 'Verify Email Address')}"
        f"<p>Or copy this link into your browser:<br>{html.escape(link)}</p>"
        f"<p style=\"color:#666;font-size:0.85rem;\">This link will expire in {expire_hours} "
        "hours. If you didn't create an account, please ignore this email.</p>"
        "</body></html>"
    )
    return text_body, html_body


def build_invitation_bodies(
    inviter_name: str,
    workspace_name: str,
    link: str,
    expire_days: int,
) -> tuple[str, str]:
    """Return (text, html) bodies for the invitation email."""
    text_body = "\n".join(
        [
            f"{inviter_name} has invited you to join the workspace \"{workspace_name}\".",
            "",
            "Accept the invitation by visiting the following link:",
            "",
            link,
            "",
            f"This invitation will expire in {expire_days} days.",
        ]
    )
    html_body = (
        "<html><body>"
        f"<h2>You're invited to {html.escape(workspace_name)}</h2>"
        f"<p><strong>{html.escape(inviter_name)}</strong> has invited you to join the "
        f"workspace <strong>{html.escape(workspace_name)}</strong>.</p>"
        f"{_button(link, 'Accept Invitation')}"
        f"<p>Or copy this link into your browser:<br>{html.escape(link)}</p>"
        f"<p style=\"color:#666;font-size:0.85rem;\">This invitation will expire in "
        f"{expire_days} days.</p>"
        "</body></html>"
    )
    return text_body, html_body


def _deliver(
    recipient: str,
    subject: str,
    text_body: str,
    html_body: str,
    settings,
) -> bool:
    """Send one multipart message.

    Returns False (and logs) when no recipient or SMTP host is configured.
    Raises EmailDeliveryError when the SMTP exchange fails.
    """
    if not recipient:
        logger.warning("email_send_skipped: no recipient")
        return False

    smtp_host = getattr(settings, "smtp_host", "")
    if not smtp_host:
        logger.warning("email_send_skipped: SMTP host not configured")
        return False

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = getattr(settings, "smtp_from", "")
    msg["To"] = recipient
    msg.attach(MIMEText(text_body, "plain"))
    msg.attach(MIMEText(html_body, "html"))

    try:
        with smtplib.SMTP(smtp_host, getattr(settings, "smtp_port", 587)) as server:
            server.starttls()
            smtp_user = getattr(settings, "smtp_user", "")
            smtp_password = getattr(settings, "smtp_password", "")
            if smtp_user:
                server.login(smtp_user, smtp_password)
            server.sendmail(msg["From"], [recipient], msg.as_string())
    except smtplib.SMTPAuthenticationError as exc:
        logger.error("email_auth_failed: could not authenticate with SMTP server")
        raise EmailDeliveryError("Failed to send email") from exc
    except (smtplib.SMTPException, OSError) as exc:
        logger.error("email_send_failed: %s", exc)
        raise EmailDeliveryError("Failed to send email") from exc

    logger.info("email_sent: recipient=%s subject=%s", recipient, subject)
    return True


def send_verification_email(
    recipient: str,
    name: str,
    token: str,
    settings=None,
) -> bool:
    """Send the email-verification link for ``token`` to ``recipient``."""
    if settings is None:
        settings = get_settings()
    link = f"{settings.frontend_url}/verify-email?token={token}"
    text_body, html_body = build_verification_bodies(
        name, link, settings.verification_token_expire_hours
    )
    return _deliver(recipient, VERIFICATION_SUBJECT, text_body, html_body, settings)


def send_invitation_email(
    recipient: str,
    inviter_name: str,
    workspace_name: str,
    token: str,
    settings=None,
) -> bool:
    """Send a workspace invitation link for ``token`` to ``recipient``."""
    if settings is None:
        settings = get_settings()
    link = f"{settings.frontend_url}/accept-invite?token={token}"
    text_body, html_body = build_invitation_bodies(
        inviter_name, workspace_name, link, settings.invitation_expire_days
    )
    subject = f"You're invited to join {workspace_name}"
    return _deliver(recipient, subject, text_body, html_body, settings)
