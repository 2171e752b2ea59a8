"""Tests for the figure form: scale formatting, URL checks, validation."""

from __future__ import annotations

import pytest

from enrichment.form import INVALID_URL_MESSAGE, FigureForm, format_scale, validate_url
from enrichment.models import Populated, RequiresManualAction


class TestFormatScale:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("0.125", "1/8"),
            ("0.142857", "1/7"),
            ("0.4", "1/3"),  # 2.5 rounds up
            ("1", "1/1"),
            ("1/7", "1/7"),
            ("Non-scale", "Non-scale"),
            ("2", "2"),
            ("0", "0"),
            ("-0.5", "-0.5"),
            ("", ""),
        ],
    )
    def test_format_scale(self, text, expected):
        assert format_scale(text) == expected

    def test_scale_blur_updates_field(self):
        form = FigureForm(scale="0.25")
        form.on_scale_blur()
        assert form.scale == "1/4"


class TestValidateUrl:
    @pytest.mark.parametrize(
        "value",
        ["https://myfigurecollection.net/item/1", "http://localhost:5000", "mailto:someone@example.com", "", None],
    )
    def test_valid(self, value):
        assert validate_url(value) is None

    @pytest.mark.parametrize("value", ["not a url", "example.com/path", "https://"])
    def test_invalid(self, value):
        assert validate_url(value) == INVALID_URL_MESSAGE


class TestFigureForm:
    def test_from_dict_ignores_unknown_keys(self):
        form = FigureForm.from_dict({"name": "Miku", "scale": None, "id": "abc123"})

        assert form.name == "Miku"
        assert form.scale == ""
        assert "id" not in form.to_dict()

    def test_unknown_field_access_raises(self):
        form = FigureForm()
        with pytest.raises(KeyError):
            form.get_field("price")
        with pytest.raises(KeyError):
            form.set_field("price", "10")

    def test_set_none_clears_field(self):
        form = FigureForm(name="Miku")
        form.set_field("name", None)
        assert form.name == ""

    def test_image_reference_variants(self):
        assert FigureForm().image_reference() is None
        assert FigureForm(imageUrl="https://example.com/a.jpg").image_reference() == Populated(
            "https://example.com/a.jpg"
        )
        reference = FigureForm(imageUrl="MANUAL_EXTRACT:login required").image_reference()
        assert reference == RequiresManualAction("login required")
        assert reference.to_wire() == "MANUAL_EXTRACT:login required"


class TestValidate:
    def test_empty_form_reports_required_fields(self):
        errors = FigureForm().validate()

        assert errors == {
            "manufacturer": "Manufacturer is required",
            "name": "Figure name is required",
            "mfcLink": "MFC link is required",
        }

    def test_complete_form_is_valid(self):
        form = FigureForm(
            manufacturer="Good Smile",
            name="Miku",
            mfcLink="https://myfigurecollection.net/item/12345",
            imageUrl="https://example.com/miku.jpg",
        )
        assert form.validate() == {}

    def test_bad_urls_reported(self):
        form = FigureForm(manufacturer="A", name="B", mfcLink="nope", imageUrl="also nope")

        errors = form.validate()

        assert errors == {"mfcLink": INVALID_URL_MESSAGE, "imageUrl": INVALID_URL_MESSAGE}

    def test_manual_extract_image_is_accepted(self):
        form = FigureForm(
            manufacturer="A",
            name="B",
            mfcLink="https://myfigurecollection.net/item/1",
            imageUrl="MANUAL_EXTRACT:captcha",
        )
        assert form.validate() == {}
