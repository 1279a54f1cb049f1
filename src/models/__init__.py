"""Pydantic models for the query service protocol.

Provides type safety and validation for requests, streamed state and results.

Models:
    - QuestionRequest: Outgoing question payload
    - QueryResult: Final answer with optional tabular data and chart hint
    - ResponseState: Response-in-progress folded from streamed events
    - TabularData: Columns and rows of a query result
    - Visualization / EventType: Protocol enums
"""

from src.models.schemas import (
    EventType,
    QueryResult,
    QuestionRequest,
    ResponseState,
    TabularData,
    Visualization,
)

__all__ = [
    "EventType",
    "QueryResult",
    "QuestionRequest",
    "ResponseState",
    "TabularData",
    "Visualization",
]
