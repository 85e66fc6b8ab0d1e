"""Tests for Paginator slicing, page counts and configuration."""

import pytest

from filtertable import InvalidPageConfiguration, PageConfig, PageCountPolicy, Paginator
from filtertable.core.pagination import (
    PAGE_COUNT_POLICY_ENV,
    count_pages,
    slice_page,
)


class TestPaginatorSlice:
    """Tests for page slicing with 125 rows and 50 rows per page."""

    def test_first_page(self, numbered_rows):
        paginator = Paginator({"currentPage": 1, "pageLength": 50})

        page = paginator.slice(numbered_rows)

        assert [row["id"] for row in page] == list(range(50))

    def test_last_partial_page(self, numbered_rows):
        paginator = Paginator(PageConfig(current_page=3, page_length=50))

        page = paginator.slice(numbered_rows)

        assert len(page) == 25
        assert page[0]["id"] == 100
        assert page[-1]["id"] == 124

    def test_page_past_the_end_is_empty(self, numbered_rows):
        paginator = Paginator(PageConfig(current_page=4, page_length=50))

        assert paginator.slice(numbered_rows) == []

    def test_explicit_page_config_overrides_current_page(self, numbered_rows):
        paginator = Paginator(PageConfig(current_page=1, page_length=50))

        page = paginator.slice(numbered_rows, {"currentPage": 2, "pageLength": 10})

        assert [row["id"] for row in page] == list(range(10, 20))

    def test_set_page_without_bounds_check(self, numbered_rows):
        """Out-of-range pages are accepted and give an empty slice."""
        paginator = Paginator(PageConfig(page_length=50))

        paginator.set_page(99)
        assert paginator.current_page == 99
        assert paginator.slice(numbered_rows) == []

        paginator.set_page(0)
        assert paginator.slice(numbered_rows) == []

        paginator.set_page(-1)
        assert paginator.slice(numbered_rows) == []

    def test_set_page_calls_on_change(self):
        pages = []
        paginator = Paginator(PageConfig(page_length=10, on_change=pages.append))

        paginator.set_page(2)
        paginator.set_page(5)

        assert pages == [2, 5]

    def test_restore_page_does_not_call_on_change(self):
        pages = []
        paginator = Paginator(PageConfig(page_length=10, on_change=pages.append))

        paginator.restore_page(3)

        assert paginator.current_page == 3
        assert pages == []

    def test_slice_page_on_empty_rows(self):
        assert slice_page([], 1, 50) == []


class TestPageCount:
    """Tests for page-count policies."""

    def test_floor_policy_hides_partial_page(self, numbered_rows):
        """125 rows at 50 per page give exactly 2 page links."""
        paginator = Paginator(PageConfig(page_length=50), policy="floor")

        assert paginator.page_count(numbered_rows) == 2

    def test_ceil_policy_counts_partial_page(self, numbered_rows):
        paginator = Paginator(PageConfig(page_length=50), policy=PageCountPolicy.CEIL)

        assert paginator.page_count(numbered_rows) == 3

    def test_floor_is_default(self, numbered_rows, monkeypatch):
        monkeypatch.delenv(PAGE_COUNT_POLICY_ENV, raising=False)
        paginator = Paginator(PageConfig(page_length=50))

        assert paginator.policy is PageCountPolicy.FLOOR
        assert paginator.page_count(numbered_rows) == 2

    def test_policy_from_environment(self, numbered_rows, monkeypatch):
        monkeypatch.setenv(PAGE_COUNT_POLICY_ENV, "CEIL")
        paginator = Paginator(PageConfig(page_length=50))

        assert paginator.policy is PageCountPolicy.CEIL
        assert paginator.page_count(numbered_rows) == 3

    def test_explicit_page_length(self, numbered_rows):
        paginator = Paginator(PageConfig(page_length=50))

        assert paginator.page_count(numbered_rows, page_length=25) == 5

    def test_count_pages_exact_multiple(self):
        assert count_pages(100, 50) == 2
        assert count_pages(100, 50, PageCountPolicy.CEIL) == 2
        assert count_pages(0, 50, PageCountPolicy.CEIL) == 0

    def test_should_paginate_only_when_rows_overflow(self, numbered_rows):
        paginator = Paginator(PageConfig(page_length=50))

        assert paginator.should_paginate(numbered_rows)
        assert not paginator.should_paginate(numbered_rows[:50])
        assert not paginator.should_paginate([])


class TestPageConfigValidation:
    """Tests for construction-time validation."""

    def test_defaults(self):
        config = PageConfig()

        assert config.current_page == 1
        assert config.page_length == 50
        assert config.offset == 0

    @pytest.mark.parametrize("page_length", [0, -5, 2.5, "50", True, None])
    def test_invalid_page_length(self, page_length):
        with pytest.raises(InvalidPageConfiguration, match="page_length"):
            PageConfig(page_length=page_length)

    @pytest.mark.parametrize("current_page", [0, -1, 1.0])
    def test_invalid_current_page(self, current_page):
        with pytest.raises(InvalidPageConfiguration, match="current_page"):
            PageConfig(current_page=current_page)

    def test_paginator_rejects_invalid_dict(self):
        with pytest.raises(InvalidPageConfiguration):
            Paginator({"currentPage": 1, "pageLength": 0})

    def test_invalid_configuration_is_a_value_error(self):
        with pytest.raises(ValueError):
            PageConfig(page_length=0)

    def test_unknown_policy_rejected(self):
        with pytest.raises(InvalidPageConfiguration, match="page count policy"):
            Paginator(policy="round")

    def test_page_count_rejects_invalid_page_length(self, numbered_rows):
        with pytest.raises(InvalidPageConfiguration):
            Paginator().page_count(numbered_rows, page_length=0)

    def test_from_dict_snake_case(self):
        config = PageConfig.from_dict({"current_page": 2, "page_length": 20})

        assert config.offset == 20
