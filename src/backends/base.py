"""Base backend interface for PDF page operations."""

import logging
from abc import ABC, abstractmethod
from typing import Dict, Any, List, Tuple

import pymupdf

from ..errors import EmptyPageRange, UnreadableDocument
from ..utils.page_filter import parse_page_range

logger = logging.getLogger(__name__)


class Backend(ABC):
    """Abstract base class for PDF page backends."""

    SUPPORTED_OPERATIONS: List[str] = []

    def supports(self, operation: str, format: str = "") -> bool:
        """
        Check if this backend can handle the specified operation.

        Args:
            operation: The operation name (e.g., "extract_pages", "extract_text")
            format: Optional format hint (e.g., "pdf")

        Returns:
            True if this backend supports the operation, False otherwise
        """
        return operation in self.SUPPORTED_OPERATIONS

    @abstractmethod
    def process(
        self,
        data: bytes,
        operation: str,
        options: Dict[str, str]
    ) -> Tuple[bytes, str, Dict[str, Any]]:
        """
        Process PDF with the specified operation.

        Args:
            data: Raw PDF bytes
            operation: Operation to perform
            options: Operation-specific options ("pages", "filename")

        Returns:
            Tuple of (output_data, format, metadata)
            - output_data: Processed output bytes
            - format: Output format (e.g., "pdf", "txt", "json")
            - metadata: Additional information about the processing

        Raises:
            ValueError: If operation is not supported or invalid options
            RuntimeError: If processing fails
        """
        pass


def open_pdf(data: bytes) -> pymupdf.Document:
    """Open PDF bytes read-only, rejecting anything PyMuPDF cannot use."""
    try:
        doc = pymupdf.open(stream=data, filetype="pdf")
    except Exception as e:
        raise UnreadableDocument("Invalid or corrupted PDF file") from e

    if doc.needs_pass:
        doc.close()
        raise UnreadableDocument("PDF is encrypted")

    if doc.page_count == 0:
        doc.close()
        raise UnreadableDocument("PDF has no pages")

    return doc


def select_pages(page_range: str, total_pages: int) -> List[int]:
    """Resolve the requested range, defaulting to the whole document."""
    if not page_range.strip():
        pages = list(range(1, total_pages + 1))
    else:
        pages = parse_page_range(page_range, total_pages)

    if not pages:
        raise EmptyPageRange(page_range, total_pages)

    return pages
