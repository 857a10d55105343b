from typing import Sequence

import fitz  # PyMuPDF

_PAGE_WIDTH = 595  # A4 in points
_PAGE_HEIGHT = 842
_MARGIN = 72

# Base-14 Helvetica covers these code pages; PyMuPDF picks the glyph set
_ENCODINGS = (
    ("latin-1", fitz.TEXT_ENCODING_LATIN),
    ("cp1251", fitz.TEXT_ENCODING_CYRILLIC),
    ("cp1253", fitz.TEXT_ENCODING_GREEK),
)


def _encoding_for(text: str) -> int:
    for codec, encoding in _ENCODINGS:
        try:
            text.encode(codec)
        except UnicodeEncodeError:
            continue
        return encoding
    return fitz.TEXT_ENCODING_LATIN


def placeholder_pdf(title: str, lines: Sequence[str] = ()) -> bytes:
    """
    Build a one-page PDF showing `title` and a few lines of text.

    Used for the sample documents created at startup and as the body served
    when a record's GridFS file has gone missing. The title is also stored
    in the document metadata, which keeps any script intact.
    """
    doc = fitz.open()

    try:
        doc.set_metadata({"title": title})
        page = doc.new_page(width=_PAGE_WIDTH, height=_PAGE_HEIGHT)

        y = _MARGIN + 18
        page.insert_text((_MARGIN, y), title[:120], fontsize=18, fontname="helv",
                         encoding=_encoding_for(title))
        for line in lines:
            y += 24
            page.insert_text((_MARGIN, y), line[:200], fontsize=12, fontname="helv",
                             encoding=_encoding_for(line))

        return doc.tobytes()
    finally:
        doc.close()
