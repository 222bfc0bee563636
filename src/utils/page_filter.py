"""Utility functions for page selection and filtering."""

import logging
import re
from typing import List, Optional

logger = logging.getLogger(__name__)


_PAGE_NUMBER = re.compile(r"\d+", re.ASCII)


def _to_int(value: str) -> Optional[int]:
    # Plain ASCII digits only; int() would also take "+3", "1_0" and non-ASCII digits
    value = value.strip()
    if not _PAGE_NUMBER.fullmatch(value):
        return None
    return int(value)


def parse_page_range(page_range: str, max_page: int) -> List[int]:
    """
    Parse page range string into list of page numbers.

    Malformed tokens, descending ranges and pages outside 1..max_page are
    dropped without raising. An empty result means nothing valid was selected.

    Args:
        page_range: Page range string (e.g., "1,3,5-10")
                   Pages are 1-indexed.
        max_page: Number of pages in the document

    Returns:
        Sorted list of distinct page numbers (1-indexed)
    """
    pages = set()

    for part in page_range.split(','):
        part = part.strip()
        if not part:
            continue

        if '-' in part:
            start, end = part.split('-', 1)
            start = _to_int(start)
            end = _to_int(end)
            if start is None or end is None:
                logger.debug(f"Skipping malformed range token: {part!r}")
                continue
            # Clip before enumerating so "1-999999999" stays cheap
            pages.update(range(max(start, 1), min(end, max_page) + 1))
        else:
            page = _to_int(part)
            if page is None:
                logger.debug(f"Skipping malformed page token: {part!r}")
                continue
            if 1 <= page <= max_page:
                pages.add(page)

    return sorted(pages)


def full_range(total_pages: int) -> str:
    """Default range string covering the whole document."""
    if total_pages < 1:
        return ""
    return f"1-{total_pages}"


def format_page_list(pages: List[int]) -> str:
    """
    Format pages as a compact range string, e.g. [1, 2, 3, 5] -> "1-3,5".

    The output parses back to the same pages with parse_page_range.
    """
    runs = []
    run_start = run_end = None

    for page in pages:
        if run_end is not None and page == run_end + 1:
            run_end = page
            continue
        if run_start is not None:
            runs.append((run_start, run_end))
        run_start = run_end = page

    if run_start is not None:
        runs.append((run_start, run_end))

    return ",".join(
        str(start) if start == end else f"{start}-{end}"
        for start, end in runs
    )


def range_descriptor(pages: List[int], total_pages: int) -> str:
    """
    Summarize selected pages for use in an output filename.

    Returns "all" when every page of the document is selected. Otherwise the
    pages are written with format_page_list: consecutive runs collapse to
    "start-end" and runs are joined with commas, so [2, 3, 7] gives "2-3,7".
    """
    if total_pages > 0 and list(pages) == list(range(1, total_pages + 1)):
        return "all"
    return format_page_list(pages)


def output_filename(
    original_name: str,
    pages: List[int],
    total_pages: int,
    ext: str,
) -> str:
    """Build the download name <base>_pages_<descriptor>.<ext>."""
    base = (original_name or "").strip()
    if base.lower().endswith(".pdf"):
        base = base[:-4]
    if not base:
        base = "document"

    return f"{base}_pages_{range_descriptor(pages, total_pages)}.{ext}"
