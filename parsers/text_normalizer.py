"""
Input normalizer.

Turns raw text from any origin (paste, file, fetched page) into clean,
line-oriented text. Markup is reduced to "key<TAB>value" lines where the
source had table or definition-list structure.

The normalizer never touches the network or the filesystem; callers hand it
text that collaborators already produced.
"""

from dataclasses import dataclass, field
from typing import Optional
import re
import structlog
from bs4 import BeautifulSoup, Comment, Tag

from exceptions import EmptyInputError
from models.smart_paste import SourceKind

logger = structlog.get_logger(__name__)

# Elements with no extractable text
_NO_TEXT_TAGS = [
    "script", "style", "noscript", "template",
    "img", "svg", "picture", "video", "audio", "iframe", "canvas", "object", "embed",
    "button", "nav", "footer", "form",
]
_BLOCK_TAGS = [
    "p", "div", "li", "h1", "h2", "h3", "h4", "h5", "h6",
    "section", "article", "header", "blockquote", "tr", "dt", "dd",
]
_MARKUP_HINT = re.compile(r'</?(?:table|tr|td|th|div|p|br|li|dl|dt|dd|span|h[1-6])\b', re.IGNORECASE)


@dataclass
class NormalizedText:
    """Clean lines ready for pair extraction."""
    lines: list[str] = field(default_factory=list)
    source_kind: SourceKind = SourceKind.PASTE
    used_markup: bool = False

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


def looks_like_markup(text: Optional[str]) -> bool:
    """True when text carries HTML structure worth cleaning."""
    return bool(text) and _MARKUP_HINT.search(text) is not None


def _own_text(tag: Tag, boundary: list[str]) -> str:
    """
    Text of a tag, leaving out anything under a nested boundary tag.

    With html.parser an unclosed <td> or <dd> swallows the cells that follow
    it, so each cell keeps only the strings whose nearest boundary is itself.
    """
    parts = [s for s in tag.find_all(string=True) if s.find_parent(boundary) is tag]
    return re.sub(r'\s+', ' ', ''.join(parts)).strip()


def _table_lines(table: Tag) -> list[str]:
    lines = []
    for row in table.find_all("tr"):
        if row.find_parent("table") is not table:
            continue
        cells = [
            text for text in (
                _own_text(cell, ["td", "th"])
                for cell in row.find_all(["td", "th"])
                if cell.find_parent("tr") is row
            )
            if text
        ]
        if len(cells) >= 2:
            lines.append(cells[0] + '\t' + ', '.join(cells[1:]))
        elif cells:
            lines.append(cells[0])
    return lines


def _definition_lines(definition_list: Tag) -> list[str]:
    lines = []
    for term in definition_list.find_all("dt"):
        if term.find_parent("dl") is not definition_list:
            continue
        key = _own_text(term, ["dt", "dd"])
        following = term.find_next(["dt", "dd"])
        value = _own_text(following, ["dt", "dd"]) if following is not None and following.name == "dd" else ""
        if key and value:
            lines.append(key + '\t' + value)
        elif key or value:
            lines.append(key or value)
    return lines


def clean_markup(text: Optional[str]) -> str:
    """
    Reduce HTML (or text with stray tags) to plain line-oriented text.

    - Table rows become "first cell<TAB>other cells joined by ', '"
    - <dt>/<dd> pairs become "term<TAB>value"
    - Block elements, <br> and <hr> end lines
    - Entities are decoded, tab runs and blank-line runs collapsed

    Optional end tags (</td>, </tr>, </dd>) may be left out.

    Args:
        text: Raw text or HTML

    Returns:
        Cleaned text ("" for empty input)
    """
    if not text:
        return ""

    soup = BeautifulSoup(text, "html.parser")
    for tag in soup.find_all(_NO_TEXT_TAGS):
        tag.extract()
    for comment in soup.find_all(string=lambda s: isinstance(s, Comment)):
        comment.extract()

    # Structure first, innermost first, before block breaks split the cells
    for table in reversed(soup.find_all("table")):
        table.replace_with('\n' + '\n'.join(_table_lines(table)) + '\n')
    for definition_list in reversed(soup.find_all("dl")):
        definition_list.replace_with('\n' + '\n'.join(_definition_lines(definition_list)) + '\n')

    for tag in soup.find_all(["br", "hr"]):
        tag.replace_with('\n')
    for tag in soup.find_all(_BLOCK_TAGS):
        tag.append('\n')

    cleaned = soup.get_text().replace('\xa0', ' ')

    cleaned = re.sub(r'\t+', '\t', cleaned)
    cleaned = re.sub(r'[ \t]*\n[ \t]*', '\n', cleaned)
    cleaned = re.sub(r'\n{3,}', '\n\n', cleaned)
    return cleaned.strip()


def _clean_plain(text: Optional[str]) -> str:
    if not text:
        return ""
    text = text.replace('\r\n', '\n').replace('\r', '\n').replace('\xa0', ' ')
    return clean_markup(text) if looks_like_markup(text) else text


def _lines(text: str) -> list[str]:
    lines = []
    for line in text.split('\n'):
        line = re.sub(r'[ ]{2,}', ' ', line).strip()
        if line:
            lines.append(line)
    return lines


def count_column_lines(lines: list[str]) -> int:
    """Lines carrying a column separator (tab)."""
    return sum(1 for line in lines if '\t' in line)


def normalize(
    raw: Optional[str],
    source_kind: SourceKind = SourceKind.PASTE,
    html: Optional[str] = None
) -> NormalizedText:
    """
    Normalize raw input into trimmed, non-blank lines.

    When a structured (HTML) rendering is supplied alongside the plain one,
    whichever yields more tab-separated lines wins; ties go to the
    structured rendering.

    Args:
        raw: Plain-text rendering (may itself contain markup)
        source_kind: paste, file or url
        html: Optional structured rendering of the same content

    Returns:
        NormalizedText

    Raises:
        EmptyInputError: Nothing but whitespace/markup in every rendering
    """
    plain_lines = _lines(_clean_plain(raw))
    used_markup = looks_like_markup(raw)
    lines = plain_lines

    if html:
        markup_lines = _lines(clean_markup(html))
        if markup_lines and count_column_lines(markup_lines) >= count_column_lines(plain_lines):
            lines = markup_lines
            used_markup = True

    if not lines:
        logger.warning("empty_input", source_kind=source_kind.value)
        raise EmptyInputError(source=source_kind.value)

    logger.debug(
        "input_normalized",
        source_kind=source_kind.value,
        lines=len(lines),
        used_markup=used_markup
    )
    return NormalizedText(lines=lines, source_kind=source_kind, used_markup=used_markup)
