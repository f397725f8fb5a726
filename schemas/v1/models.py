# SPDX-License-Identifier: GPL-3.0-only

from typing import List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator


class SubmittedForm(BaseModel):
    """Text fields of a print order submission.

    Every field is optional and defaults to an empty string. Incoming form
    names are the shop form's labels; unknown fields are ignored.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    vorname: str = Field("", alias="Vorname")
    nachname: str = Field("", alias="Nachname")
    firma: str = Field("", alias="Firma")
    email: str = Field("", alias="E-Mail")
    telefon: str = Field("", alias="Telefon")
    strasse: str = Field("", alias="Strasse")
    plz: str = Field("", alias="PLZ")
    ort: str = Field("", alias="Ort")
    land: str = Field("", alias="Land")
    produkt: str = Field("", alias="Produkt")
    farbe: str = Field("", alias="Farbe")
    groesse: str = Field("", alias="Groesse")
    menge: str = Field("", alias="Menge")
    druckart: str = Field("", alias="Druckart")
    druckposition: str = Field("", alias="Druckposition")
    nachricht: str = Field("", alias="Nachricht")

    @field_validator("*", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        if value is None:
            return ""
        if isinstance(value, (int, float)):
            return str(value)
        return value


class UploadedFile(BaseModel):
    """Raw file part as received from the client."""

    content: bytes
    content_type: Optional[str] = None
    filename: Optional[str] = None


class Attachment(BaseModel):
    """Base64 encoded attachment in the provider's wire shape."""

    model_config = ConfigDict(frozen=True)

    content: str
    filename: str
    type: str
    disposition: str = "attachment"

    @property
    def size(self) -> int:
        """Decoded byte length of the attachment."""
        padding = self.content[-2:].count("=")
        return len(self.content) * 3 // 4 - padding


class OutboundMessage(BaseModel):
    """Email ready for handoff to a send capability."""

    model_config = ConfigDict(frozen=True)

    to: str
    from_email: str
    from_name: Optional[str] = None
    subject: str
    html: str
    attachments: Tuple[Attachment, ...] = ()


class SubmissionResponse(BaseModel):
    """Response model for a relayed submission."""

    ok: bool
    error: Optional[str] = None
    received: Optional[List[str]] = None
