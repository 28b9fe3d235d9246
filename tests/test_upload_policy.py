"""
Tests for upload admission, storage naming and classification.
"""
import re

import pytest

from app.exceptions import PayloadTooLargeError, TooManyFilesError, UnsupportedMediaTypeError
from app.models.upload import IncomingFile
from app.services import upload_policy
from app.services.upload_policy import (
    MAX_FILE_SIZE,
    append_attachment_name,
    check_admission,
    check_file_count,
    generate_unique_filename,
    is_pdf_file,
    resource_type_for,
    sanitize_filename
)

KEY_FORMAT = re.compile(r"^(?P<field>[^_]+)_(?P<base>.+)_(?P<ts>\d+)_(?P<rand>\d{9})\.(?P<ext>.+)$")


def incoming(filename="report.pdf", content_type="application/pdf", size=128):
    return IncomingFile(filename=filename, content_type=content_type, content=b"x" * size)


class TestAdmission:
    """Test type and size checks."""

    def test_pdf_is_admitted_and_stored_raw(self):
        check_admission(incoming())
        assert resource_type_for("application/pdf") == "raw"

    @pytest.mark.parametrize("mimetype", [
        "image/png",
        "image/jpeg",
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/vnd.ms-excel",
    ])
    def test_other_allowed_types_use_auto(self, mimetype):
        check_admission(incoming("archivo.bin", mimetype))
        assert resource_type_for(mimetype) == "auto"

    @pytest.mark.parametrize("size", [0, 10, MAX_FILE_SIZE + 1])
    def test_disallowed_type_is_rejected_whatever_its_size(self, size):
        with pytest.raises(UnsupportedMediaTypeError) as exc_info:
            check_admission(incoming("notas.txt", "text/plain", size))
        assert exc_info.value.status_code == 415

    def test_file_over_limit(self):
        with pytest.raises(PayloadTooLargeError) as exc_info:
            check_admission(incoming("foto.png", "image/png", MAX_FILE_SIZE + 1))
        assert exc_info.value.status_code == 413

    def test_file_at_limit(self):
        check_admission(incoming("foto.png", "image/png", MAX_FILE_SIZE))

    def test_file_count(self):
        check_file_count(10)
        with pytest.raises(TooManyFilesError) as exc_info:
            check_file_count(11)
        assert exc_info.value.error == "LIMIT_FILE_COUNT"

    def test_pdf_with_generic_mimetype_is_not_raw(self):
        assert resource_type_for("application/octet-stream") == "auto"
        assert is_pdf_file("report.PDF", "application/octet-stream")
        assert not is_pdf_file("report.docx", "application/msword")


class TestNaming:
    """Test storage key generation."""

    def test_same_name_same_millisecond_gives_distinct_keys(self, monkeypatch):
        monkeypatch.setattr(upload_policy.time, "time", lambda: 1718900000.0)

        first = generate_unique_filename("report.pdf", "archivo")
        second = generate_unique_filename("report.pdf", "archivo")

        assert first != second
        for key in (first, second):
            match = KEY_FORMAT.match(key)
            assert match is not None
            assert match["field"] == "archivo"
            assert match["base"] == "report"
            assert match["ts"] == "1718900000000"
            assert match["ext"] == "pdf"

    def test_base_stops_at_first_dot(self):
        key = generate_unique_filename("Hoja de Vida.final.v2.docx", "archivos")
        match = KEY_FORMAT.match(key)
        assert match["base"] == "hoja_de_vida"
        assert match["ext"] == "docx"

    @pytest.mark.parametrize("original, expected", [
        ("Cédula Juan.pdf", "c_dula_juan.pdf"),
        ("contrato  (firmado)!!.PDF", "contrato_firmado_.pdf"),
        ("ya-limpio.png", "ya-limpio.png"),
    ])
    def test_sanitize(self, original, expected):
        assert sanitize_filename(original) == expected


class TestAttachmentName:
    """Test the fl_attachment suffix."""

    def test_query_separator(self):
        url = "https://res.cloudinary.com/demo/raw/upload/fl_attachment/uploads/a.pdf"
        assert append_attachment_name(url, "a.pdf") == f"{url}?fl_attachment=a.pdf"
        assert append_attachment_name(f"{url}?v=1", "a.pdf") == f"{url}?v=1&fl_attachment=a.pdf"

    def test_name_is_percent_encoded(self):
        url = append_attachment_name("https://x/raw/upload/a.pdf", "Hoja de vida ñ.pdf")
        assert url.endswith("?fl_attachment=Hoja%20de%20vida%20%C3%B1.pdf")

    def test_without_name(self):
        assert append_attachment_name("https://x/a.pdf", None) == "https://x/a.pdf"
