# SPDX-License-Identifier: GPL-3.0-only

from typing import Mapping, Optional
from attachments import SLOTS, collect_attachments, is_present
from composer import MessageComposer
from config import RelayConfig
from errors import SendRejected, SendTransportFailure
from logutils import get_logger
from mailer import EmailSender
from schemas.v1.models import SubmissionResponse, SubmittedForm, UploadedFile
from utils import obfuscate_email

logger = get_logger(__name__)


def relay_submission(
    form: SubmittedForm,
    uploads: Mapping[str, Optional[UploadedFile]],
    config: RelayConfig,
    composer: MessageComposer,
    sender: EmailSender,
) -> SubmissionResponse:
    """Collect, compose and send one submission in a single attempt.

    Raises:
        PayloadTooLarge: Before anything is sent.
        SendRejected: The provider refused the message.
        SendTransportFailure: The provider could not be reached.
    """
    attachments = collect_attachments(uploads, config.max_total_size)
    message = composer.compose(form, attachments)

    logger.info(
        "Sending '%s' to %s via %s with %d attachment(s)",
        message.subject,
        obfuscate_email(message.to),
        sender.name,
        len(message.attachments),
    )

    try:
        success, detail = sender.send(message)
    except Exception as e:
        logger.exception("Failed to send email via %s: %s", sender.name, e)
        raise SendTransportFailure() from e

    if not success:
        logger.error(
            "Email to %s rejected by %s: %s",
            obfuscate_email(message.to),
            sender.name,
            detail,
        )
        raise SendRejected(detail)

    logger.info("Email sent successfully to %s", obfuscate_email(message.to))
    received = [slot for slot in SLOTS if is_present(uploads.get(slot))]
    return SubmissionResponse(ok=True, received=received)
