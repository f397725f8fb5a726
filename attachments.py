# SPDX-License-Identifier: GPL-3.0-only
"""Collects the uploaded files of a submission into email attachments."""

import base64
from typing import Dict, List, Mapping, Optional
from logutils import get_logger
from schemas.v1.models import Attachment, UploadedFile
from errors import PayloadTooLarge

logger = get_logger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"

# Slot name -> filename used when the client sent none. Order is significant.
SLOT_FALLBACK_NAMES: Dict[str, str] = {
    "screenshot_front": "preview-front.jpg",
    "screenshot_back": "preview-back.jpg",
    "design_front": "design-front",
    "design_back": "design-back",
}

SLOTS = tuple(SLOT_FALLBACK_NAMES)


def is_present(upload: Optional[UploadedFile]) -> bool:
    """An empty, nameless part is what browsers send for an unused file input."""
    if upload is None:
        return False
    return bool(upload.content) or bool(upload.filename)


def to_attachment(slot: str, upload: UploadedFile) -> Attachment:
    """Encode one upload, filling in filename and content type when missing."""
    return Attachment(
        content=base64.b64encode(upload.content).decode("ascii"),
        filename=upload.filename or SLOT_FALLBACK_NAMES[slot],
        type=upload.content_type or DEFAULT_CONTENT_TYPE,
    )


def collect_attachments(
    uploads: Mapping[str, Optional[UploadedFile]], max_total_size: int
) -> List[Attachment]:
    """Build attachments for the fixed slots in order.

    Args:
        uploads: Slot name to upload. Missing slots and slots outside the
            fixed set are ignored.
        max_total_size: Aggregate ceiling in bytes across all attachments.

    Returns:
        list[Attachment]: One attachment per supplied slot.

    Raises:
        PayloadTooLarge: If the decoded sizes sum past ``max_total_size``.
    """
    attachments = []
    total_size = 0

    for slot in SLOTS:
        upload = uploads.get(slot)
        if not is_present(upload):
            logger.debug("No file for slot %s", slot)
            continue

        attachment = to_attachment(slot, upload)
        total_size += attachment.size
        attachments.append(attachment)
        logger.info(
            "Collected %s as %s (%s, %d bytes)",
            slot,
            attachment.filename,
            attachment.type,
            attachment.size,
        )

    if total_size > max_total_size:
        raise PayloadTooLarge(total_size, max_total_size)

    return attachments
