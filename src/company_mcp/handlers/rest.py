"""
REST Endpoint Handlers

Translate /search and /get-company requests into pipeline calls.
"""

import logging
from typing import Optional

from ..config import Settings
from ..query import normalize_record, run_query
from ..store import RecordStore
from ..models import SearchRequest, SearchResponse, CompanyResponse

logger = logging.getLogger(__name__)


def search(request: SearchRequest, store: RecordStore, settings: Settings) -> SearchResponse:
    """Run a filtered, sorted, paginated search over the store."""
    limit = settings.default_limit if request.limit is None else request.limit
    page = run_query(
        store.records,
        filters=request.filters,
        sort=request.sort,
        limit=limit,
        offset=request.offset,
        max_limit=settings.max_limit,
        missing_value=settings.missing_value,
    )
    logger.debug(f"search matched {page.total} records, returning {page.showing}")
    return SearchResponse(**page.model_dump())


def get_company(
    store: RecordStore,
    settings: Settings,
    name: Optional[str] = None,
    record_id: Optional[str] = None,
) -> Optional[CompanyResponse]:
    """Look up one company by id or name; None when there is no match."""
    found = store.lookup(name=name, record_id=record_id)
    if found is None:
        return None
    return CompanyResponse(company=normalize_record(found, settings.missing_value))
