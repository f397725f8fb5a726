"""
Message composer tests.

Coverage:
  - Subject built from the configured fields and prefix
  - Missing fields render empty, never "None"
  - Free-text line breaks and placeholder
  - Field values are HTML-escaped
  - Attachments and addresses carried into the OutboundMessage
"""

import pytest
from pydantic import ValidationError

from composer import MessageComposer, nl2br
from conftest import make_config
from schemas.v1.models import Attachment, SubmittedForm


def _attachment(filename: str) -> Attachment:
    return Attachment(content="aGVsbG8=", filename=filename, type="image/png")


# ===========================================================================
# SubmittedForm
# ===========================================================================

class TestSubmittedForm:

    def test_all_fields_default_to_empty_string(self):
        form = SubmittedForm()
        assert all(value == "" for value in form.model_dump().values())

    def test_accepts_form_labels(self):
        form = SubmittedForm.model_validate(
            {"Vorname": "Anna", "E-Mail": "anna@example.com", "PLZ": "8000"}
        )
        assert form.vorname == "Anna"
        assert form.email == "anna@example.com"
        assert form.plz == "8000"

    def test_none_and_numbers_are_normalised(self):
        form = SubmittedForm.model_validate({"Vorname": None, "Menge": 50})
        assert form.vorname == ""
        assert form.menge == "50"

    def test_unknown_fields_are_ignored(self):
        form = SubmittedForm.model_validate({"honeypot": "x", "Ort": "Zürich"})
        assert form.ort == "Zürich"
        assert "honeypot" not in form.model_dump()


# ===========================================================================
# Subject
# ===========================================================================

class TestSubject:

    def test_subject_contains_both_names(self, composer):
        form = SubmittedForm(Vorname="Anna", Nachname="Muster")
        assert composer.build_subject(form) == "Neue Anfrage: Anna Muster"

    def test_subject_with_missing_fields_is_trimmed(self, composer):
        assert composer.build_subject(SubmittedForm()) == "Neue Anfrage:"

    def test_subject_with_one_field(self, composer):
        form = SubmittedForm(Nachname="  Muster ")
        assert composer.build_subject(form) == "Neue Anfrage: Muster"

    def test_subject_fields_are_configurable(self):
        composer = MessageComposer(
            make_config(subject_prefix="Druckauftrag", subject_fields=("produkt", "farbe"))
        )
        form = SubmittedForm(Produkt="T-Shirt", Farbe="Schwarz", Vorname="Anna")
        assert composer.build_subject(form) == "Druckauftrag: T-Shirt Schwarz"

    def test_unknown_subject_field_is_rejected(self):
        with pytest.raises(ValueError):
            make_config(subject_fields=("vorname", "shoe_size"))


# ===========================================================================
# HTML body
# ===========================================================================

class TestBody:

    def test_multiline_message_gets_line_breaks(self, composer):
        html = composer.render_body(SubmittedForm(Nachricht="line1\nline2"))
        assert "line1<br/>line2" in html

    def test_windows_line_endings(self, composer):
        html = composer.render_body(SubmittedForm(Nachricht="a\r\nb"))
        assert "a<br/>b" in html

    def test_empty_message_renders_placeholder(self, composer):
        html = composer.render_body(SubmittedForm())
        assert "<p>—</p>" in html

    def test_custom_placeholder(self):
        composer = MessageComposer(make_config(message_placeholder="(keine Angabe)"))
        html = composer.render_body(SubmittedForm())
        assert "(keine Angabe)" in html

    def test_missing_fields_never_render_none(self, composer):
        html = composer.render_body(SubmittedForm())
        assert "None" not in html

    def test_fields_are_interpolated(self, composer):
        form = SubmittedForm(
            Vorname="Anna",
            Nachname="Muster",
            Telefon="+41 44 000 00 00",
            Produkt="Hoodie",
            Druckposition="Rücken",
        )
        html = composer.render_body(form)
        for value in ("Anna", "Muster", "+41 44 000 00 00", "Hoodie", "Rücken"):
            assert value in html

    def test_field_values_are_html_escaped(self, composer):
        form = SubmittedForm(Vorname="<script>alert(1)</script>", Firma="A & B")
        html = composer.render_body(form)
        assert "<script>" not in html
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
        assert "A &amp; B" in html

    def test_message_is_escaped_before_line_breaks(self, composer):
        html = composer.render_body(SubmittedForm(Nachricht="<b>hi</b>\nbye"))
        assert "&lt;b&gt;hi&lt;/b&gt;<br/>bye" in html

    def test_attachment_names_listed(self, composer):
        html = composer.render_body(SubmittedForm(), [_attachment("logo.png")])
        assert "<li>logo.png</li>" in html

    def test_nl2br_single_line(self):
        assert str(nl2br("one line")) == "one line"

    def test_nl2br_only_splits_on_newlines(self):
        assert str(nl2br("a\x0cb\n")) == "a\x0cb<br/>"

    def test_whitespace_only_message_renders_placeholder(self, composer):
        html = composer.render_body(SubmittedForm(Nachricht="\n  "))
        assert "<p>—</p>" in html
        assert "<p></p>" not in html


# ===========================================================================
# OutboundMessage
# ===========================================================================

class TestCompose:

    def test_message_addresses_come_from_config(self, composer):
        message = composer.compose(SubmittedForm(), [])
        assert message.to == "orders@prostich.test"
        assert message.from_email == "shop@prostich.test"
        assert message.from_name == "ProStich Formular"

    def test_empty_attachment_list(self, composer):
        message = composer.compose(SubmittedForm(Vorname="Anna"), [])
        assert message.attachments == ()

    def test_attachments_kept_in_order(self, composer):
        attachments = [_attachment("a.png"), _attachment("b.png"), _attachment("c.png")]
        message = composer.compose(SubmittedForm(), attachments)
        assert list(message.attachments) == attachments

    def test_message_is_immutable(self, composer):
        message = composer.compose(SubmittedForm(), [])
        with pytest.raises(ValidationError):
            message.subject = "changed"

    def test_missing_template_fails_at_startup(self, tmp_path):
        from jinja2 import TemplateNotFound

        with pytest.raises(TemplateNotFound):
            MessageComposer(make_config(template_dir=str(tmp_path)))
