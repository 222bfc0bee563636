"""Inspection backend: reports page count and the default page range."""

import json
import logging
from typing import Dict, Any, Tuple

from .base import Backend, open_pdf
from ..utils.page_filter import full_range

logger = logging.getLogger(__name__)


class DocumentInspectionBackend(Backend):
    """Backend for reading the page count of a PDF before extraction."""

    SUPPORTED_OPERATIONS = ["inspect"]

    def process(
        self,
        data: bytes,
        operation: str,
        options: Dict[str, str]
    ) -> Tuple[bytes, str, Dict[str, Any]]:
        if not self.supports(operation):
            raise ValueError(f"Operation '{operation}' not supported")

        doc = open_pdf(data)
        try:
            total_pages = doc.page_count
        finally:
            doc.close()

        result = {
            "total_pages": total_pages,
            "pages": full_range(total_pages),
        }

        output_data = json.dumps(result, indent=2).encode("utf-8")
        metadata = {
            "total_pages": str(total_pages),
        }

        return output_data, "json", metadata
