# SPDX-License-Identifier: GPL-3.0-only

import os
from typing import List, Optional, Tuple
from logutils import get_logger
from schemas.v1.models import SubmittedForm
from utils import get_env_var, megabytes_to_bytes, obfuscate_email, split_csv

logger = get_logger(__name__)

DEFAULT_TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "email_templates")
SUPPORTED_PROVIDERS = ("sendgrid", "resend")


class RelayConfig:
    """Settings for the relay, built once at startup and passed explicitly."""

    def __init__(
        self,
        sender_email: str,
        recipient_email: str,
        api_key: str,
        sender_name: Optional[str] = None,
        provider: str = "sendgrid",
        sendgrid_base_url: str = "https://api.sendgrid.com",
        max_file_size: int = 10 * 1024 * 1024,
        max_total_size: int = 25 * 1024 * 1024,
        cors_origins: Optional[List[str]] = None,
        subject_prefix: str = "Neue Anfrage",
        subject_fields: Tuple[str, str] = ("vorname", "nachname"),
        message_placeholder: str = "—",
        template_dir: str = DEFAULT_TEMPLATE_DIR,
        environment: str = "development",
    ):
        provider = provider.lower()
        if provider not in SUPPORTED_PROVIDERS:
            raise ValueError(
                f"Unsupported email provider '{provider}'. "
                f"Expected one of: {', '.join(SUPPORTED_PROVIDERS)}"
            )

        if len(subject_fields) != 2:
            raise ValueError("Exactly two subject fields are required")
        unknown = [f for f in subject_fields if f not in SubmittedForm.model_fields]
        if unknown:
            raise ValueError(f"Unknown subject fields: {', '.join(unknown)}")

        if max_total_size < max_file_size:
            logger.warning(
                "Aggregate size limit (%d) is below the per-file limit (%d)",
                max_total_size,
                max_file_size,
            )

        self.sender_email = sender_email
        self.sender_name = sender_name
        self.recipient_email = recipient_email
        self.api_key = api_key
        self.provider = provider
        self.sendgrid_base_url = sendgrid_base_url.rstrip("/")
        self.max_file_size = max_file_size
        self.max_total_size = max_total_size
        self.cors_origins = cors_origins if cors_origins is not None else ["*"]
        self.subject_prefix = subject_prefix
        self.subject_fields = tuple(subject_fields)
        self.message_placeholder = message_placeholder
        self.template_dir = template_dir
        self.environment = environment.lower()

    @classmethod
    def from_env(cls) -> "RelayConfig":
        """Build the configuration from environment variables."""
        config = cls(
            sender_email=get_env_var("MAIL_FROM", strict=True),
            sender_name=get_env_var("MAIL_FROM_NAME"),
            recipient_email=get_env_var("MAIL_TO", strict=True),
            api_key=get_env_var("EMAIL_API_KEY", strict=True),
            provider=get_env_var("EMAIL_PROVIDER", "sendgrid"),
            sendgrid_base_url=get_env_var(
                "SENDGRID_API_BASE_URL", "https://api.sendgrid.com"
            ),
            max_file_size=megabytes_to_bytes(
                "MAX_FILE_SIZE_MB", get_env_var("MAX_FILE_SIZE_MB", "10")
            ),
            max_total_size=megabytes_to_bytes(
                "MAX_TOTAL_SIZE_MB", get_env_var("MAX_TOTAL_SIZE_MB", "25")
            ),
            cors_origins=split_csv(get_env_var("CORS_ORIGIN", "*")) or ["*"],
            subject_prefix=get_env_var("SUBJECT_PREFIX", "Neue Anfrage"),
            subject_fields=tuple(
                split_csv(get_env_var("SUBJECT_FIELDS", "vorname,nachname"))
            ),
            message_placeholder=get_env_var("MESSAGE_PLACEHOLDER", "—"),
            template_dir=get_env_var("EMAIL_TEMPLATE_DIR", DEFAULT_TEMPLATE_DIR),
            environment=get_env_var("ENVIRONMENT", "development"),
        )
        logger.info(
            "Relay configured: provider=%s, from=%s, to=%s",
            config.provider,
            obfuscate_email(config.sender_email),
            obfuscate_email(config.recipient_email),
        )
        return config
