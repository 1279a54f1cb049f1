from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Visualization(str, Enum):
    """Chart hints the query service may attach to a result."""

    BAR = "bar"
    LINE = "line"
    PIE = "pie"
    TABLE = "table"


class EventType(str, Enum):
    """Discriminant values of streamed event envelopes."""

    STATUS = "status"
    METADATA = "metadata"
    CHUNK = "chunk"
    COMPLETE = "complete"
    ERROR = "error"


class QuestionRequest(BaseModel):
    """Request payload for the ask-question endpoints.

    Attributes:
        question: Natural-language question.
        session_id: Optional session for conversation continuity.
        org_id: Optional organisation scope for the query.
    """

    question: str = Field(..., min_length=1)
    session_id: str | None = None
    org_id: int | None = None

    @field_validator("question", mode="before")
    @classmethod
    def strip_question(cls, v: str) -> str:
        """Strip whitespace from question before validation."""
        if isinstance(v, str):
            return v.strip()
        return v

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class TabularData(BaseModel):
    """Tabular query output.

    Attributes:
        columns: Column headers in display order.
        rows: Row values aligned with columns.
    """

    columns: list[str]
    rows: list[list[Any]]


class QueryResult(BaseModel):
    """Final answer to a question.

    Attributes:
        success: Whether the service answered the question.
        response: Answer text.
        sql: Generated query, when the service reports it.
        data: Tabular results, only when both columns and rows are known.
        visualization: Suggested chart type.
        error: Error message reported by the service.
    """

    success: bool
    response: str = ""
    sql: str | None = None
    data: TabularData | None = None
    visualization: Visualization | None = None
    error: str | None = None


class ResponseState(BaseModel):
    """Response-in-progress built while a stream is decoded.

    A frozen value: every folding step returns a new instance, and once
    ``completed`` is set no later event changes it.
    """

    model_config = ConfigDict(frozen=True)

    accumulated_text: str = ""
    columns: list[str] | None = None
    rows: list[list[Any]] | None = None
    visualization: Visualization | None = None
    success: bool = False
    completed: bool = False
    error: str | None = None

    @property
    def data(self) -> TabularData | None:
        if self.columns is None or self.rows is None:
            return None
        return TabularData(columns=self.columns, rows=self.rows)

    def to_result(self, success: bool | None = None) -> QueryResult:
        """Snapshot the state as a :class:`QueryResult`.

        Args:
            success: Overrides the recorded success flag when given.
        """
        return QueryResult(
            success=self.success if success is None else success,
            response=self.accumulated_text,
            data=self.data,
            visualization=self.visualization,
        )
