"""Builds page-subset artifacts (new PDF or text dump) from an open PyMuPDF document."""

import logging
from typing import List

import pymupdf

from ..errors import ExtractionFailure

logger = logging.getLogger(__name__)

PAGE_MARKER = "--- Page {page} ---"


def _page_index(doc: pymupdf.Document, page_num: int) -> int:
    # insert_pdf clamps out-of-range indices instead of failing
    if not 1 <= page_num <= doc.page_count:
        raise ExtractionFailure(
            page_num, f"document has {doc.page_count} pages"
        )
    return page_num - 1


def page_text_fragments(page) -> List[str]:
    """Collect the text spans of a page in reading order."""
    fragments = []
    text_dict = page.get_text("dict", sort=True)

    for block in text_dict.get("blocks", []):
        if block.get("type") != 0:  # type 0 = text block
            continue
        for line in block.get("lines", []):
            for span in line.get("spans", []):
                fragments.append(span.get("text", ""))

    return fragments


def extract_pages_as_document(doc: pymupdf.Document, pages: List[int]) -> bytes:
    """
    Copy the given pages, in the given order, into a new PDF.

    Args:
        doc: Open source document
        pages: 1-indexed page numbers

    Returns:
        Serialized PDF bytes with exactly len(pages) pages

    Raises:
        ExtractionFailure: If pages is empty, or any page cannot be copied
            or the new document cannot be serialized
    """
    if not pages:
        raise ExtractionFailure(None, "no pages selected")

    new_doc = pymupdf.open()
    try:
        for page_num in pages:
            index = _page_index(doc, page_num)
            try:
                new_doc.insert_pdf(doc, from_page=index, to_page=index)
            except Exception as e:
                raise ExtractionFailure(page_num, str(e)) from e

        logger.debug(f"Copied {len(new_doc)} pages into new document")
        try:
            return new_doc.tobytes(garbage=3, deflate=True)
        except Exception as e:
            raise ExtractionFailure(None, str(e)) from e
    finally:
        new_doc.close()


def extract_pages_as_text(doc: pymupdf.Document, pages: List[int]) -> str:
    """
    Concatenate the text of the given pages, each preceded by a page marker.

    Each page contributes "--- Page N ---", a blank line, its fragments
    joined with single spaces, and a blank line.

    Raises:
        ExtractionFailure: If any page cannot be loaded or read
    """
    output = ""

    for page_num in pages:
        index = _page_index(doc, page_num)
        try:
            page = doc.load_page(index)
            page_text = " ".join(page_text_fragments(page))
        except Exception as e:
            raise ExtractionFailure(page_num, str(e)) from e

        output += PAGE_MARKER.format(page=page_num) + "\n\n" + page_text + "\n\n"

    return output
