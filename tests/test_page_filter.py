"""Tests for page range parsing and download naming."""

import pytest

from src.utils.page_filter import (
    format_page_list,
    full_range,
    output_filename,
    parse_page_range,
    range_descriptor,
)


class TestParsePageRange:
    """Tests for parse_page_range."""

    def test_parse_single_page(self):
        assert parse_page_range("1", 10) == [1]

    def test_parse_multiple_pages(self):
        assert parse_page_range("1,3,5", 10) == [1, 3, 5]

    def test_parse_page_range(self):
        assert parse_page_range("1-3", 10) == [1, 2, 3]

    def test_parse_mixed_format(self):
        assert parse_page_range("1, 3, 5-10, 15", 20) == [1, 3, 5, 6, 7, 8, 9, 10, 15]

    def test_overlapping_ranges_deduplicate(self):
        assert parse_page_range("1-5,3", 10) == [1, 2, 3, 4, 5]

    def test_out_of_range_single_page_dropped(self):
        assert parse_page_range("999", 10) == []

    def test_range_clipped_at_bound(self):
        assert parse_page_range("5-10", 7) == [5, 6, 7]

    def test_range_clipped_below_one(self):
        assert parse_page_range("0-2", 5) == [1, 2]

    def test_descending_range_yields_nothing(self):
        assert parse_page_range("10-5", 20) == []

    def test_malformed_token_skipped(self):
        assert parse_page_range("abc, 3", 10) == [3]

    def test_malformed_range_side_skips_token(self):
        assert parse_page_range("2-x, x-4, 7", 10) == [7]

    def test_negative_number_is_malformed(self):
        assert parse_page_range("-3", 10) == []

    @pytest.mark.parametrize("page_range", ["1_0", "+3", "\u0663", "1_0-12", "2-\u0665"])
    def test_signed_or_underscored_or_non_ascii_digits_are_malformed(self, page_range):
        assert parse_page_range(page_range, 20) == []

    def test_malformed_number_does_not_hide_valid_tokens(self):
        assert parse_page_range("1_0, 4, +5", 20) == [4]

    def test_whitespace_inside_range(self):
        assert parse_page_range(" 2 - 4 ", 10) == [2, 3, 4]

    def test_stray_commas_ignored(self):
        assert parse_page_range(",,2,,4,", 10) == [2, 4]

    def test_empty_string(self):
        assert parse_page_range("", 10) == []

    def test_zero_max_page(self):
        assert parse_page_range("1-5, 3", 0) == []

    def test_huge_range_is_bounded(self):
        assert parse_page_range("1-999999999999", 3) == [1, 2, 3]

    def test_unsorted_input_is_sorted(self):
        assert parse_page_range("9, 2, 5-6, 1", 10) == [1, 2, 5, 6, 9]

    @pytest.mark.parametrize("page_range", [
        "1-5,3",
        "9, 2, 5-6, 1",
        "abc, 3, 4-2, 8-20, 0, -1",
        "15, 14, 13-15, 1-1",
    ])
    def test_output_strictly_ascending(self, page_range):
        pages = parse_page_range(page_range, 15)
        assert all(a < b for a, b in zip(pages, pages[1:]))
        assert all(1 <= p <= 15 for p in pages)

    @pytest.mark.parametrize("page_range", ["1-5,3", "2, 4-6, 9", "abc, 3, 7-9"])
    def test_reparse_of_joined_output_is_stable(self, page_range):
        pages = parse_page_range(page_range, 10)
        assert parse_page_range(",".join(str(p) for p in pages), 10) == pages


class TestFormatPageList:
    """Tests for compact page list formatting."""

    def test_collapses_runs(self):
        assert format_page_list([1, 2, 3, 5]) == "1-3,5"

    def test_single_pages(self):
        assert format_page_list([2, 4]) == "2,4"

    def test_single_page(self):
        assert format_page_list([7]) == "7"

    def test_empty(self):
        assert format_page_list([]) == ""

    def test_round_trips_through_parser(self):
        pages = [1, 2, 3, 6, 8, 9, 12]
        assert parse_page_range(format_page_list(pages), 12) == pages


class TestRangeDescriptor:
    """Tests for the filename range descriptor."""

    def test_full_range_is_all(self):
        assert range_descriptor([1, 2, 3, 4, 5], 5) == "all"

    def test_subset_is_literal(self):
        assert range_descriptor([2, 4], 5) == "2,4"

    def test_contiguous_subset(self):
        assert range_descriptor([2, 3, 4], 5) == "2-4"

    def test_full_range_of_larger_document_is_not_all(self):
        assert range_descriptor([1, 2, 3], 4) == "1-3"

    def test_runs_and_single_pages(self):
        assert range_descriptor([2, 3, 7], 10) == "2-3,7"


class TestOutputFilename:
    """Tests for download file names."""

    def test_pdf_all(self):
        assert output_filename("report.pdf", [1, 2], 2, "pdf") == "report_pages_all.pdf"

    def test_text_subset(self):
        assert output_filename("report.pdf", [2, 3], 5, "txt") == "report_pages_2-3.txt"

    def test_uppercase_extension_stripped(self):
        assert output_filename("SCAN.PDF", [1], 3, "pdf") == "SCAN_pages_1.pdf"

    def test_name_without_extension(self):
        assert output_filename("notes", [1, 3], 3, "pdf") == "notes_pages_1,3.pdf"

    def test_missing_name(self):
        assert output_filename("", [1], 1, "txt") == "document_pages_all.txt"


class TestFullRange:
    """Tests for the default range string."""

    def test_full_range(self):
        assert full_range(12) == "1-12"

    def test_empty_document(self):
        assert full_range(0) == ""
