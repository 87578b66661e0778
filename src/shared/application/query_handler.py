"""
Base Query Handler
Read-side counterpart of CommandHandler
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from shared.application.base_query import BaseQuery
from shared.domain.result import Result
from shared.infrastructure.observability.logger import get_logger

logger = get_logger(__name__)

TQuery = TypeVar("TQuery", bound=BaseQuery)
TResult = TypeVar("TResult")


class QueryHandler(ABC, Generic[TQuery, TResult]):
    """
    Query handlers read through a unit of work and never commit it.

    Malformed identifiers and missing or foreign resources come back as a
    failed ``Result``. Repository faults propagate.
    """

    @abstractmethod
    async def handle(self, query: TQuery) -> Result[TResult]:
        ...

    async def __call__(self, query: TQuery) -> Result[TResult]:
        query_name = type(query).__name__
        context = {"query": query_name, "query_id": str(query.query_id)}

        try:
            result = await self.handle(query)
        except Exception as e:
            logger.error(f"Query failed: {query_name}", extra={**context, "error": str(e)})
            raise

        if result.is_failure():
            logger.info(f"Query rejected: {query_name}", extra={**context, "error_code": result.error.code})
        else:
            logger.debug(f"Query served: {query_name}", extra=context)
        return result
