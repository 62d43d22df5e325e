"""Concurrent fan-out of independent search queries.

Each query runs in its own worker thread through the full submit + poll
pipeline. Branches share nothing; their outcomes are collected as they
complete and merged once every branch has finished. A failing branch never
cancels its siblings.
"""

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from gopher_client.types import Document

from .types import BatchSearchResponse, QueryErrorRecord

logger = logging.getLogger(__name__)

MAX_WORKERS = 16


@dataclass
class QueryResult:
    query: str
    documents: List[Document] = field(default_factory=list)
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def run_queries(
    queries: Sequence[str],
    search: Callable[[str], List[Document]],
    max_workers: int = MAX_WORKERS,
) -> List[QueryResult]:
    """Run `search` for every query concurrently and return all outcomes.

    Results are in completion order. Exceptions raised by a branch are
    recorded on its QueryResult instead of propagating.
    """
    if not queries:
        return []
    results: List[QueryResult] = []
    with ThreadPoolExecutor(max_workers=min(max_workers, len(queries))) as pool:
        futures = {pool.submit(search, q): q for q in queries}
        for fut in as_completed(futures):
            q = futures[fut]
            try:
                results.append(QueryResult(query=q, documents=list(fut.result())))
            except Exception as exc:
                logger.warning("Query %r failed: %s", q, exc)
                results.append(QueryResult(query=q, error=exc))
    return results


def aggregate(results: Sequence[QueryResult]) -> BatchSearchResponse:
    documents = []
    errors: List[QueryErrorRecord] = []
    for r in results:
        if r.ok:
            documents.extend(d.to_dict() for d in r.documents)
        else:
            errors.append({"error": True, "query": r.query, "error_msg": str(r.error)})

    response: BatchSearchResponse = {
        "documents": documents,
        "total_queries": len(results),
        "successful_queries": len(results) - len(errors),
        "failed_queries": len(errors),
    }
    if errors:
        response["errors"] = errors
    return response


__all__ = ["QueryResult", "run_queries", "aggregate", "MAX_WORKERS"]
