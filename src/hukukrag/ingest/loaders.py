"""Local document loaders — turn .txt/.md, .pdf and .html files into plain text.

Fetching sources (mevzuat.gov.tr, court databases) is the caller's job; these
loaders only pre-parse files that are already on disk so they can be passed
to ``semantic_chunk``.
"""

from __future__ import annotations

from pathlib import Path

import html2text
import pypdf
from bs4 import BeautifulSoup

TEXT_EXTS = {".txt", ".text", ".md", ".markdown", ".rst"}
PDF_EXTS = {".pdf"}
HTML_EXTS = {".html", ".htm"}
SUPPORTED_EXTS = TEXT_EXTS | PDF_EXTS | HTML_EXTS

_h2t = html2text.HTML2Text()
_h2t.ignore_links = True
_h2t.ignore_images = True
_h2t.body_width = 0


def load_document(path: Path) -> str:
    """Return the plain text of the document at *path*.

    Raises:
        ValueError: If the file extension is not supported.
    """
    ext = path.suffix.lower()
    if ext in TEXT_EXTS:
        return path.read_text(encoding="utf-8", errors="replace")
    if ext in PDF_EXTS:
        return _pdf_text(path)
    if ext in HTML_EXTS:
        return html_to_text(path.read_text(encoding="utf-8", errors="replace"))
    raise ValueError(
        f"Unsupported file type '{ext}' for '{path}'. "
        f"Accepted: {', '.join(sorted(SUPPORTED_EXTS))}"
    )


def _pdf_text(path: Path) -> str:
    """Extract all page text; pages without a text layer are skipped."""
    reader = pypdf.PdfReader(str(path))
    parts: list[str] = []
    for page in reader.pages:
        page_text = (page.extract_text() or "").strip()
        if page_text:
            parts.append(page_text)
    return "\n\n".join(parts)


def html_to_text(html: str) -> str:
    """Strip navigation/script tags and convert the rest of *html* to text."""
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all(["script", "style", "nav", "footer", "head"]):
        tag.decompose()
    return _h2t.handle(str(soup)).strip()
