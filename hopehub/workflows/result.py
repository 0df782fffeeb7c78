"""
Outcome of a user-facing workflow.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from hopehub.core.errors import HopeHubError

T = TypeVar("T")

GENERIC_FAILURE_MESSAGE = "Something went wrong. Please try again."


@dataclass
class WorkflowResult(Generic[T]):
    """
    What the caller needs to update its own state.

    On failure, record is None and error holds the exception; the caller
    keeps its form state. On success, reset_form tells it to clear the form.
    """
    ok: bool
    message: str
    record: Optional[T] = None
    error: Optional[HopeHubError] = None
    reset_form: bool = False
    dismiss_after: Optional[float] = None  # seconds until the confirmation closes

    @classmethod
    def success(cls, record: T, message: str,
                dismiss_after: Optional[float] = None) -> "WorkflowResult[T]":
        return cls(ok=True, message=message, record=record,
                   reset_form=True, dismiss_after=dismiss_after)

    @classmethod
    def failure(cls, error: HopeHubError, message: Optional[str] = None) -> "WorkflowResult[T]":
        return cls(ok=False, message=message or str(error) or GENERIC_FAILURE_MESSAGE, error=error)
