"""Turn list query parameters into a page request."""

from __future__ import annotations

from flask import current_app, request

from gold_ledger.errors import ValidationError
from gold_ledger.schemas.common import PaginationQuerySchema
from gold_ledger.services.paging import Page, PageRequest
from gold_ledger.utils.responses import pagination

_query_schema = PaginationQuerySchema()


def page_request_from_args() -> tuple[PageRequest, str]:
    """Parse ``page``, ``limit`` and ``search`` from the query string."""

    args = _query_schema.load(request.args.to_dict())

    limit = args["limit"] or int(current_app.config.get("DEFAULT_PAGE_SIZE", 10))
    max_limit = int(current_app.config.get("MAX_PAGE_SIZE", 100))
    if limit > max_limit:
        raise ValidationError(f"limit must be <= {max_limit}")

    return PageRequest(page=int(args["page"]), limit=int(limit)), str(args["search"]).strip()


def page_metadata(page: Page) -> dict[str, int]:
    return pagination(page.request.page, page.request.limit, page.total_count)
