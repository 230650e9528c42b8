"""Services package initialization."""

from rollfetch.services.batch_fetcher import BatchFetcher, FetchReport
from rollfetch.services.result_service import ResultService, result_service

__all__ = [
    "result_service",
    "ResultService",
    "BatchFetcher",
    "FetchReport",
]
