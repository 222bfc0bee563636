"""Error types raised while extracting pages from a PDF."""

from typing import Optional


class InvalidFileType(ValueError):
    """Uploaded file is not a PDF."""


class UnreadableDocument(ValueError):
    """PyMuPDF could not open the document (corrupt, encrypted or unsupported)."""


class EmptyPageRange(ValueError):
    """The requested page range selects no valid pages."""

    def __init__(self, page_range: str, total_pages: int):
        self.page_range = page_range
        self.total_pages = total_pages
        super().__init__(
            f"Page range '{page_range}' selects no pages "
            f"(document has {total_pages} pages)"
        )


class ExtractionFailure(RuntimeError):
    """Copying a page or reading its text failed; no partial output is produced."""

    def __init__(self, page_number: Optional[int], reason: str):
        self.page_number = page_number
        if page_number is None:
            super().__init__(f"Failed to build output document: {reason}")
        else:
            super().__init__(f"Failed to extract page {page_number}: {reason}")
