"""Application pagination – page and sort primitives."""
from dt_export.application.pagination.page import Page
from dt_export.application.pagination.page_request import PageRequest, Sort, SortDirection

__all__ = ["Page", "PageRequest", "Sort", "SortDirection"]
