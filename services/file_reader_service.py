"""
Turn an uploaded spec sheet into plain text for the parser.

Text-like files are decoded; PDFs are linearized with pdfplumber so that
table columns come out tab-separated. No OCR: scanned PDFs and images
yield nothing useful and are rejected up front.
"""

from collections import defaultdict
from io import BytesIO
from pathlib import Path
import re
import pdfplumber
import structlog

from exceptions import FileReadError, UnsupportedFileTypeError

logger = structlog.get_logger(__name__)

TEXT_EXTENSIONS = {".txt", ".csv", ".tsv", ".md", ".rtf", ".html", ".htm"}
PDF_EXTENSIONS = {".pdf"}
IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp", ".heic", ".bmp", ".tif", ".tiff"}
SUPPORTED_EXTENSIONS = sorted(TEXT_EXTENSIONS | PDF_EXTENSIONS)

# Words whose tops round to the same bucket share a visual line
LINE_BUCKET_POINTS = 3
# Horizontal gap (points) that separates table columns
COLUMN_GAP_POINTS = 30

_RTF_CONTROL = re.compile(r'\\[a-z]+-?\d* ?|\\[^a-z]|[{}]', re.IGNORECASE)


def _decode_text(content: bytes, filename: str) -> str:
    """UTF-8 (BOM tolerated) first, then cp1252."""
    for encoding in ("utf-8-sig", "cp1252"):
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    raise FileReadError(filename, "File is not valid UTF-8 or Windows-1252 text")


def _strip_rtf(text: str) -> str:
    if not text.lstrip().startswith("{\\rtf"):
        return text
    text = text.replace("\\par", "\n").replace("\\tab", "\t")
    return _RTF_CONTROL.sub("", text)


def _join_words(words: list[dict]) -> str:
    words = sorted(words, key=lambda w: w["x0"])
    line = words[0]["text"]
    for previous, word in zip(words, words[1:]):
        gap = word["x0"] - previous["x1"]
        line += ("\t" if gap > COLUMN_GAP_POINTS else " ") + word["text"]
    return line.strip()


def extract_pdf_text(content: bytes, filename: str = "document.pdf") -> str:
    """
    Linearize a PDF into lines of text.

    Words are grouped into visual lines by their vertical position and
    joined left to right; a gap wider than COLUMN_GAP_POINTS becomes a tab.
    Pages are separated by a blank line.

    Raises:
        FileReadError: Corrupt or unreadable PDF
    """
    parts: list[str] = []
    try:
        with pdfplumber.open(BytesIO(content)) as pdf:
            page_count = len(pdf.pages)
            for page_number, page in enumerate(pdf.pages, start=1):
                lines: dict[int, list[dict]] = defaultdict(list)
                for word in page.extract_words():
                    if not word["text"].strip():
                        continue
                    lines[round(word["top"] / LINE_BUCKET_POINTS)].append(word)

                for bucket in sorted(lines):
                    parts.append(_join_words(lines[bucket]))

                if page_number < page_count:
                    parts.append("")
    except FileReadError:
        raise
    except Exception as e:
        logger.error("pdf_read_failed", filename=filename, error=str(e))
        raise FileReadError(filename, "Failed to read PDF", {"reason": str(e)})

    return "\n".join(parts)


def read_file(content: bytes, filename: str) -> str:
    """
    Read an uploaded file as text.

    Args:
        content: Raw file bytes
        filename: Original filename (extension decides the reader)

    Returns:
        Text ready for parse_product_text

    Raises:
        UnsupportedFileTypeError: Images and unknown extensions
        FileReadError: Undecodable or corrupt file
    """
    extension = Path(filename or "").suffix.lower()

    if extension in IMAGE_EXTENSIONS or extension not in SUPPORTED_EXTENSIONS:
        logger.warning("unsupported_file_type", filename=filename, extension=extension)
        raise UnsupportedFileTypeError(filename, SUPPORTED_EXTENSIONS)

    if extension in PDF_EXTENSIONS:
        text = extract_pdf_text(content, filename)
    else:
        text = _decode_text(content, filename)
        if extension == ".rtf":
            text = _strip_rtf(text)

    logger.info("file_read", filename=filename, extension=extension, chars=len(text))
    return text
