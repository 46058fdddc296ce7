"""Filename sanitizing and MIME allow-list matching for uploads."""

import io

import pytest

from dataroom.application.use_cases.files.upload import (
    _compute_checksum_and_size_sync,
    mime_type_allowed,
    normalize_mime_type,
    sanitize_filename,
)
from dataroom.domain.exceptions import ValidationException


class TestSanitizeFilename:
    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("report.pdf", "report.pdf"),
            ("../../etc/passwd", "passwd"),
            ("C:\\Users\\me\\deck.pdf", "deck.pdf"),
            ("  notes.pdf. ", "notes.pdf"),
            ("a\x00b.pdf", "ab.pdf"),
        ],
    )
    def test_strips_paths_and_noise(self, raw: str, expected: str) -> None:
        assert sanitize_filename(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "...", "dir/"])
    def test_nothing_usable_is_rejected(self, raw) -> None:
        with pytest.raises(ValidationException):
            sanitize_filename(raw)

    def test_too_long_is_rejected(self) -> None:
        with pytest.raises(ValidationException):
            sanitize_filename("x" * 252 + ".pdf")


class TestMimeTypes:
    def test_normalize_drops_parameters(self) -> None:
        assert normalize_mime_type("Application/PDF; charset=binary") == "application/pdf"
        assert normalize_mime_type(None) == ""

    def test_exact_and_wildcards(self) -> None:
        assert mime_type_allowed("application/pdf", frozenset({"application/pdf"}))
        assert not mime_type_allowed("image/png", frozenset({"application/pdf"}))
        assert mime_type_allowed("image/png", frozenset({"image/*"}))
        assert mime_type_allowed("text/plain", frozenset({"*/*"}))

    def test_missing_type_never_allowed(self) -> None:
        assert not mime_type_allowed("", frozenset({"*/*"}))


def test_checksum_and_size_rewinds_stream() -> None:
    data = io.BytesIO(b"hello")
    data.read(2)
    checksum, size = _compute_checksum_and_size_sync(data)
    assert size == 5
    assert checksum == "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
    assert data.tell() == 0
