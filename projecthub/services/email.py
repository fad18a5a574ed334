"""Transactional email delivery through the Brevo API."""

import logging
from datetime import datetime
from html import escape
from typing import Any

import httpx

from projecthub.config import Settings

logger = logging.getLogger(__name__)


class DeliveryError(Exception):
    """An email could not be handed to the provider."""


class EmailNotifier:
    """Sends signup passcodes, invitations and task reminders."""

    def __init__(self, settings: Settings, transport: httpx.BaseTransport | None = None) -> None:
        self.settings = settings
        self.api_url = settings.brevo_api_url
        self.timeout = settings.email_timeout_seconds
        self._transport = transport

    def send(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        to_name: str | None = None,
    ) -> dict[str, Any]:
        """Send one email and return the provider's receipt.

        Raises:
            DeliveryError: when the API key is missing, the request fails or the
                provider answers with a non-2xx status
        """
        if not self.settings.brevo_api_key:
            logger.warning("BREVO_API_KEY not configured, cannot send email")
            raise DeliveryError("Email delivery is not configured")

        payload = {
            "sender": {
                "name": self.settings.email_sender_name,
                "email": self.settings.email_sender_address,
            },
            "to": [{"email": to_email, "name": to_name or to_email.split("@")[0] or "User"}],
            "subject": subject,
            "htmlContent": html_content,
        }
        headers = {
            "accept": "application/json",
            "content-type": "application/json",
            "api-key": self.settings.brevo_api_key,
        }

        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(self.api_url, json=payload, headers=headers)
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(f"Brevo rejected email to {to_email}: HTTP {e.response.status_code}")
            raise DeliveryError(f"Provider returned HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"Brevo request failed for {to_email}: {e}")
            raise DeliveryError("Provider request failed") from e

        try:
            receipt = response.json()
        except ValueError:
            receipt = {}
        logger.info(f"Email '{subject}' sent to {to_email}")
        return receipt

    def send_otp(self, email: str, code: str) -> dict[str, Any]:
        """Deliver a signup passcode."""
        minutes = self.settings.otp_expiration_minutes
        html = (
            f"<p>Your OTP code to complete signup is:</p>"
            f"<p><strong>{code}</strong></p>"
            f"<p>This OTP will expire in {minutes} minutes. "
            f"If you did not request this, please ignore this email.</p>"
        )
        return self.send(email, "Your OTP Code for ProjectHub Signup", html)

    def send_invite(self, email: str, subject: str | None = None) -> dict[str, Any]:
        """Invite someone to sign up."""
        html = (
            f"<p>You've been invited to join <strong>ProjectHub</strong>.</p>"
            f'<p><a href="{self.settings.invite_url}">Accept Invite</a></p>'
            f"<p>If you didn't expect this email, you can safely ignore it.</p>"
        )
        return self.send(email, subject or "You are invited to ProjectHub!", html)

    def send_task_reminder(
        self,
        email: str,
        name: str | None,
        task_title: str,
        due_date: datetime,
    ) -> dict[str, Any]:
        """Remind an assignee that a task is due tomorrow."""
        html = (
            f"<p>Hello {escape(name or '')},</p>"
            f"<p>This is a reminder that your assigned task <b>{escape(task_title)}</b> "
            f"is due on <b>{due_date.strftime('%Y-%m-%d')}</b>.</p>"
            f"<p>Please log in to ProjectHub to view or update your task.</p>"
        )
        return self.send(email, f'Reminder: "{task_title}" is due tomorrow!', html, to_name=name)
