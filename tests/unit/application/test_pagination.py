"""Unit tests for pagination primitives."""
from __future__ import annotations

import pytest

from dt_export.application.pagination import Page, PageRequest, Sort, SortDirection


class TestSortDirection:
    def test_parse_case_insensitive(self) -> None:
        assert SortDirection.parse("DESC") is SortDirection.DESC

    def test_parse_passthrough(self) -> None:
        assert SortDirection.parse(SortDirection.ASC) is SortDirection.ASC

    def test_parse_invalid(self) -> None:
        with pytest.raises(ValueError):
            SortDirection.parse("sideways")


class TestSort:
    def test_defaults_to_id_ascending(self) -> None:
        assert Sort() == Sort(field="id", direction=SortDirection.ASC)


class TestPageRequest:
    def test_offset(self) -> None:
        assert PageRequest(page=3, size=20).offset == 40

    def test_next(self) -> None:
        assert PageRequest(page=1, size=50).next() == PageRequest(page=2, size=50)

    @pytest.mark.parametrize(("page", "size"), [(0, 10), (1, 0), (-1, 5)])
    def test_invalid(self, page: int, size: int) -> None:
        with pytest.raises(ValueError):
            PageRequest(page=page, size=size)


class TestPage:
    def test_of_slices(self) -> None:
        page = Page.of(list(range(50)), PageRequest(page=3, size=20))
        assert page.items == list(range(40, 50))
        assert page.total == 50
        assert page.is_short

    def test_of_beyond_end(self) -> None:
        page = Page.of(list(range(5)), PageRequest(page=2, size=5))
        assert page.items == []
        assert page.is_short

    def test_total_pages(self) -> None:
        assert Page(items=[], page=1, size=20, total=41).total_pages == 3

    def test_total_pages_unknown(self) -> None:
        assert Page(items=[], page=1, size=20).total_pages is None

    def test_full_page_not_short(self) -> None:
        assert not Page(items=[1, 2], page=1, size=2).is_short
