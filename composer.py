# SPDX-License-Identifier: GPL-3.0-only

import re
from typing import Sequence
from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup, escape
from config import RelayConfig
from logutils import get_logger
from schemas.v1.models import Attachment, OutboundMessage, SubmittedForm

logger = get_logger(__name__)

TEMPLATE_NAME = "submission.html"
LINE_BREAK = re.compile(r"\r?\n")


def nl2br(value: str) -> Markup:
    """Escape free text and turn its line breaks into ``<br/>`` tags."""
    lines = LINE_BREAK.split(str(value))
    return Markup("<br/>").join(escape(line) for line in lines)


class MessageComposer:
    """Turns a submission into the outbound email."""

    def __init__(self, config: RelayConfig):
        """Load the submission template from the configured directory."""
        self.config = config
        self.jinja_env = Environment(
            loader=FileSystemLoader(config.template_dir),
            autoescape=True,
        )
        self.jinja_env.filters["nl2br"] = nl2br
        # Fail at startup rather than on the first submission.
        self.template = self.jinja_env.get_template(TEMPLATE_NAME)
        logger.info("Loaded template %s from %s", TEMPLATE_NAME, config.template_dir)

    def build_subject(self, form: SubmittedForm) -> str:
        values = (getattr(form, name).strip() for name in self.config.subject_fields)
        names = " ".join(value for value in values if value)
        return f"{self.config.subject_prefix}: {names}".strip()

    def render_body(
        self, form: SubmittedForm, attachments: Sequence[Attachment] = ()
    ) -> str:
        return self.template.render(
            form=form,
            attachments=attachments,
            placeholder=self.config.message_placeholder,
        )

    def compose(
        self, form: SubmittedForm, attachments: Sequence[Attachment]
    ) -> OutboundMessage:
        """Build the single message for a submission.

        Args:
            form (SubmittedForm): The submitted text fields.
            attachments (Sequence[Attachment]): Collected attachments, kept
                in order.

        Returns:
            OutboundMessage: The message addressed to the configured recipient.
        """
        message = OutboundMessage(
            to=self.config.recipient_email,
            from_email=self.config.sender_email,
            from_name=self.config.sender_name,
            subject=self.build_subject(form),
            html=self.render_body(form, attachments),
            attachments=tuple(attachments),
        )
        logger.debug(
            "Composed message '%s' with %d attachment(s)",
            message.subject,
            len(message.attachments),
        )
        return message
