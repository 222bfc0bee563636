"""Text extraction backend using PyMuPDF text spans."""

import logging
from typing import Dict, Any, Tuple

from .base import Backend, open_pdf, select_pages
from ..converters.page_transformer import extract_pages_as_text
from ..utils.page_filter import format_page_list, output_filename

logger = logging.getLogger(__name__)


class TextExtractionBackend(Backend):
    """Backend for dumping the text of selected pages with page markers."""

    SUPPORTED_OPERATIONS = ["extract_text"]

    def process(
        self,
        data: bytes,
        operation: str,
        options: Dict[str, str]
    ) -> Tuple[bytes, str, Dict[str, Any]]:
        if not self.supports(operation):
            raise ValueError(f"Operation '{operation}' not supported")

        page_range = options.get("pages", "")

        doc = open_pdf(data)
        try:
            total_pages = doc.page_count
            pages = select_pages(page_range, total_pages)
            logger.info(f"Extracting text from {len(pages)} of {total_pages} pages")
            text = extract_pages_as_text(doc, pages)
        finally:
            doc.close()

        metadata = {
            "total_pages": str(total_pages),
            "pages_extracted": str(len(pages)),
            "pages": format_page_list(pages),
            "total_characters": str(len(text)),
            "filename": output_filename(
                options.get("filename", ""), pages, total_pages, "txt"
            ),
        }

        return text.encode("utf-8"), "txt", metadata
