"""Application – export use cases (framework-agnostic)."""

from dt_export.application.pagination import Page, PageRequest, Sort, SortDirection

__all__ = ["Page", "PageRequest", "Sort", "SortDirection"]
