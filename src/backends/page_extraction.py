"""Page extraction backend: copies selected pages into a new PDF."""

import logging
from typing import Dict, Any, Tuple

from .base import Backend, open_pdf, select_pages
from ..converters.page_transformer import extract_pages_as_document
from ..utils.page_filter import format_page_list, output_filename

logger = logging.getLogger(__name__)


class PageExtractionBackend(Backend):
    """Backend for building a new PDF from a subset of source pages."""

    SUPPORTED_OPERATIONS = ["extract_pages"]

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
            logger.info(f"Extracting {len(pages)} of {total_pages} pages")
            output_data = extract_pages_as_document(doc, pages)
        finally:
            doc.close()

        metadata = {
            "total_pages": str(total_pages),
            "pages_extracted": str(len(pages)),
            "pages": format_page_list(pages),
            "filename": output_filename(
                options.get("filename", ""), pages, total_pages, "pdf"
            ),
        }

        return output_data, "pdf", metadata
