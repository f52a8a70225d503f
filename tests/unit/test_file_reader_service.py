"""
Unit tests for uploaded file reading.
"""

from unittest.mock import MagicMock, patch
import pytest

from exceptions import FileReadError, UnsupportedFileTypeError
from services.file_reader_service import read_file, extract_pdf_text


def _word(text: str, x0: float, x1: float, top: float) -> dict:
    return {"text": text, "x0": x0, "x1": x1, "top": top}


def _mock_pdf(*pages_words: list[dict]) -> MagicMock:
    pdf = MagicMock()
    pages = []
    for words in pages_words:
        page = MagicMock()
        page.extract_words.return_value = words
        pages.append(page)
    pdf.pages = pages
    return pdf


# ===================
# TEXT FILE TESTS
# ===================

class TestReadTextFiles:
    """Tests for text-like uploads."""

    def test_utf8(self):
        assert read_file("Weight: 738 g\n".encode("utf-8"), "specs.txt") == "Weight: 738 g\n"

    def test_utf8_bom(self):
        assert read_file(b"\xef\xbb\xbfColor: Black", "specs.csv") == "Color: Black"

    def test_cp1252_fallback(self):
        assert read_file(b"Temp: 20\xb0C", "specs.txt") == "Temp: 20°C"

    def test_extension_case_insensitive(self):
        assert read_file(b"Color: Black", "SPECS.TXT") == "Color: Black"

    def test_rtf_control_words_removed(self):
        text = read_file(rb"{\rtf1\ansi Weight: 738 g\par Color: Black}", "specs.rtf")
        assert "Weight: 738 g" in text
        assert "Color: Black" in text
        assert "\\" not in text

    @pytest.mark.parametrize("filename", ["photo.jpg", "scan.PNG", "archive.zip", "noextension"])
    def test_unsupported(self, filename):
        with pytest.raises(UnsupportedFileTypeError):
            read_file(b"data", filename)


# ===================
# PDF TESTS
# ===================

class TestReadPdf:
    """Tests for PDF linearization."""

    @patch("services.file_reader_service.pdfplumber.open")
    def test_columns_become_tabs(self, mock_open):
        """Words on one line join with spaces; wide gaps become tabs."""
        mock_open.return_value.__enter__.return_value = _mock_pdf([
            _word("Weight", 10, 50, 100.0),
            _word("738", 200, 220, 100.0),
            _word("g", 222, 228, 100.4),
            _word("Sensor", 10, 48, 120.0),
            _word("Type", 52, 80, 120.0),
            _word("CMOS", 200, 240, 120.0),
        ])

        text = read_file(b"%PDF-1.4", "specs.pdf")
        assert text == "Weight\t738 g\nSensor Type\tCMOS"

    @patch("services.file_reader_service.pdfplumber.open")
    def test_pages_separated_by_blank_line(self, mock_open):
        mock_open.return_value.__enter__.return_value = _mock_pdf(
            [_word("Weight:", 10, 50, 100.0), _word("738", 54, 70, 100.0)],
            [_word("Color:", 10, 40, 100.0), _word("Black", 44, 70, 100.0)],
        )

        assert extract_pdf_text(b"%PDF-1.4") == "Weight: 738\n\nColor: Black"

    @patch("services.file_reader_service.pdfplumber.open")
    def test_corrupt_pdf(self, mock_open):
        mock_open.side_effect = Exception("No /Root object")

        with pytest.raises(FileReadError) as exc_info:
            read_file(b"not a pdf", "broken.pdf")
        assert exc_info.value.details["reason"] == "No /Root object"
