# SPDX-License-Identifier: GPL-3.0-only

from utils import format_size

GENERIC_SEND_ERROR = "Failed to send email. Please try again later."


class RelayError(Exception):
    """Base for failures that end a submission with ``{"ok": false}``."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FileTooLarge(RelayError):
    """A single uploaded file exceeded the per-file ceiling."""

    status_code = 413

    def __init__(self, slot: str, max_file_size: int):
        self.slot = slot
        self.max_file_size = max_file_size
        super().__init__(
            f"File '{slot}' exceeds the limit of {format_size(max_file_size)}"
        )


class PayloadTooLarge(RelayError):
    """The attachments together exceeded the aggregate ceiling."""

    status_code = 413

    def __init__(self, total_size: int, max_total_size: int):
        self.total_size = total_size
        self.max_total_size = max_total_size
        super().__init__(
            f"Attachments total {format_size(total_size)}, "
            f"which exceeds the limit of {format_size(max_total_size)}"
        )


class SendRejected(RelayError):
    """The email provider answered with a non-success status."""

    status_code = 502


class SendTransportFailure(RelayError):
    """The call to the email provider could not complete."""

    status_code = 502

    def __init__(self, message: str = GENERIC_SEND_ERROR):
        super().__init__(message)


class OriginNotAllowed(RelayError):
    """The request came from an origin outside the allowlist."""

    status_code = 403

    def __init__(self, origin: str):
        self.origin = origin
        super().__init__(f"Not allowed by CORS: {origin}")


class DuplicateFile(RelayError):
    """More than one file was sent for the same slot."""

    status_code = 400

    def __init__(self, slot: str):
        self.slot = slot
        super().__init__(f"Only one file is allowed for '{slot}'")
