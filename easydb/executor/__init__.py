"""Executor package for EasyDB."""

from easydb.executor.binder import BoundParameter, ParameterBinder
from easydb.executor.query import QueryExecutor, is_insert, is_query

__all__ = [
    "BoundParameter",
    "ParameterBinder",
    "QueryExecutor",
    "is_insert",
    "is_query",
]
