# SPDX-License-Identifier: GPL-3.0-only

from typing import Dict, Optional
from fastapi import APIRouter, Depends, Header, Request
from starlette.concurrency import run_in_threadpool
from starlette.datastructures import UploadFile
from attachments import SLOTS
from errors import DuplicateFile, FileTooLarge, OriginNotAllowed
from logutils import get_logger
from relay import relay_submission
from schemas.v1.models import SubmissionResponse, SubmittedForm, UploadedFile

logger = get_logger(__name__)

router = APIRouter()

KNOWN_FIELDS = set(SubmittedForm.model_fields) | {
    field.alias for field in SubmittedForm.model_fields.values() if field.alias
}


async def read_upload(
    slot: str, upload: UploadFile, max_file_size: int
) -> UploadedFile:
    """Read one file part, rejecting it once it passes the per-file ceiling."""
    if upload.size is not None and upload.size > max_file_size:
        logger.warning("File %s rejected: %d bytes", slot, upload.size)
        raise FileTooLarge(slot, max_file_size)

    content = await upload.read(max_file_size + 1)
    if len(content) > max_file_size:
        logger.warning("File %s rejected: more than %d bytes", slot, max_file_size)
        raise FileTooLarge(slot, max_file_size)

    return UploadedFile(
        content=content,
        content_type=upload.content_type or None,
        filename=upload.filename or None,
    )


def verify_origin(request: Request, origin: Optional[str] = Header(None)):
    """Dependency rejecting browsers on origins outside the allowlist."""
    config = request.app.state.config
    if origin is None or "*" in config.cors_origins:
        return origin

    if origin not in config.cors_origins:
        logger.warning("Rejected submission from origin %s", origin)
        raise OriginNotAllowed(origin)

    return origin


@router.post(
    "/send", response_model=SubmissionResponse, response_model_exclude_none=True
)
async def send_submission(
    request: Request, _: Optional[str] = Depends(verify_origin)
):
    """Relay a multipart print order submission as one email."""
    config = request.app.state.config

    async with request.form() as form_data:
        uploads: Dict[str, Optional[UploadedFile]] = {}
        for slot in SLOTS:
            parts = [p for p in form_data.getlist(slot) if isinstance(p, UploadFile)]
            if len(parts) > 1:
                logger.warning("Submission sent %d files for %s", len(parts), slot)
                raise DuplicateFile(slot)
            if parts:
                uploads[slot] = await read_upload(slot, parts[0], config.max_file_size)

        fields = {
            key: value for key, value in form_data.items() if isinstance(value, str)
        }

    form = SubmittedForm.model_validate(fields)
    logger.info(
        "Received submission with %d field(s) and files: %s",
        len(fields),
        ", ".join(uploads) or "none",
    )
    ignored = sorted(set(fields) - KNOWN_FIELDS)
    if ignored:
        logger.debug("Ignoring unknown form fields: %s", ", ".join(ignored))

    return await run_in_threadpool(
        relay_submission,
        form,
        uploads,
        config,
        request.app.state.composer,
        request.app.state.sender,
    )
