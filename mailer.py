# SPDX-License-Identifier: GPL-3.0-only
"""Email provider clients used to deliver composed submissions.

Each client exposes ``send(message) -> (success, message)``. A provider-side
rejection is reported as ``(False, provider_error)``; transport problems
(network, DNS, TLS) are raised to the caller.

SendGrid v3 Mail Send API: https://docs.sendgrid.com/api-reference/mail-send/mail-send
Resend API: https://resend.com/docs/api-reference/emails/send-email
"""

from typing import Dict, List, Tuple

import requests
import resend
from resend.exceptions import ResendError
from config import RelayConfig
from logutils import get_logger
from schemas.v1.models import OutboundMessage
from utils import obfuscate_email

logger = get_logger(__name__)


class EmailSender:
    """Interface for a single delivery attempt of an outbound message."""

    name = "abstract"

    def send(self, message: OutboundMessage) -> Tuple[bool, str]:
        raise NotImplementedError


class SendGridSender(EmailSender):
    """Sends through the SendGrid HTTP API with ``requests``."""

    name = "sendgrid"

    def __init__(self, api_key: str, api_base_url: str = "https://api.sendgrid.com"):
        self.api_key = api_key
        self.api_base_url = api_base_url.rstrip("/")

    def _get_headers(self) -> Dict[str, str]:
        """Generate API request headers with authentication."""
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def build_payload(self, message: OutboundMessage) -> Dict:
        sender = {"email": message.from_email}
        if message.from_name:
            sender["name"] = message.from_name

        payload = {
            "personalizations": [{"to": [{"email": message.to}]}],
            "from": sender,
            "subject": message.subject,
            "content": [{"type": "text/html", "value": message.html}],
        }
        if message.attachments:
            payload["attachments"] = [
                attachment.model_dump() for attachment in message.attachments
            ]
        return payload

    @staticmethod
    def _extract_errors(response: requests.Response) -> str:
        """Join the provider's error messages, falling back to the raw body."""
        try:
            errors = response.json().get("errors", [])
            messages = [e.get("message") for e in errors if e.get("message")]
        except (ValueError, AttributeError):
            messages = []

        if messages:
            return "; ".join(messages)
        return response.text or f"SendGrid responded with HTTP {response.status_code}"

    def send(self, message: OutboundMessage) -> Tuple[bool, str]:
        """Deliver the message; raises ``requests.RequestException`` on transport errors."""
        url = f"{self.api_base_url}/v3/mail/send"
        response = requests.post(
            url,
            json=self.build_payload(message),
            headers=self._get_headers(),
            timeout=30,
        )

        if response.ok:
            logger.info(
                "SendGrid accepted message to %s (HTTP %d)",
                obfuscate_email(message.to),
                response.status_code,
            )
            return True, "Email accepted by SendGrid"

        error_msg = self._extract_errors(response)
        logger.error(
            "SendGrid rejected message to %s (HTTP %d): %s",
            obfuscate_email(message.to),
            response.status_code,
            error_msg,
        )
        return False, error_msg


class ResendSender(EmailSender):
    """Sends through the Resend SDK."""

    name = "resend"

    def __init__(self, api_key: str):
        resend.api_key = api_key

    def build_params(self, message: OutboundMessage) -> Dict:
        sender = message.from_email
        if message.from_name:
            sender = f"{message.from_name} <{message.from_email}>"

        params = {
            "from": sender,
            "to": [message.to],
            "subject": message.subject,
            "html": message.html,
        }
        if message.attachments:
            attachments: List[Dict] = [
                {
                    "filename": attachment.filename,
                    "content": attachment.content,
                    "content_type": attachment.type,
                }
                for attachment in message.attachments
            ]
            params["attachments"] = attachments
        return params

    def send(self, message: OutboundMessage) -> Tuple[bool, str]:
        """Deliver the message; SDK errors other than API rejections propagate."""
        try:
            response = resend.Emails.send(self.build_params(message))
        except ResendError as e:
            error_msg = getattr(e, "message", None) or str(e)
            logger.error(
                "Resend rejected message to %s: %s",
                obfuscate_email(message.to),
                error_msg,
            )
            return False, error_msg

        logger.info(
            "Resend accepted message to %s: %s",
            obfuscate_email(message.to),
            response.get("id") if isinstance(response, dict) else response,
        )
        return True, "Email accepted by Resend"


def build_sender(config: RelayConfig) -> EmailSender:
    """Create the sender for the configured provider."""
    if config.provider == "resend":
        return ResendSender(config.api_key)
    if config.provider == "sendgrid":
        return SendGridSender(config.api_key, config.sendgrid_base_url)
    raise ValueError(f"Unsupported email provider '{config.provider}'")
