"""
Mutation lifecycle.

Wraps a call in an idle -> pending -> success | error state machine. Errors
from the catalog client are captured into ``error`` instead of being raised,
so view-models can render them.
"""

from __future__ import annotations

from typing import Any, Callable, Generic, Optional, TypeVar

from ..utils.exceptions import CatalogError
from ..utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

IDLE = "idle"
PENDING = "pending"
SUCCESS = "success"
ERROR = "error"


class Mutation(Generic[T]):
    def __init__(
        self,
        fn: Callable[..., T],
        on_success: Optional[Callable[[T], Any]] = None,
        on_error: Optional[Callable[[CatalogError], Any]] = None,
        name: str = "mutation",
    ):
        self.fn = fn
        self.on_success = on_success
        self.on_error = on_error
        self.name = name
        self.status = IDLE
        self.data: Optional[T] = None
        self.error: Optional[CatalogError] = None

    @property
    def is_pending(self) -> bool:
        return self.status == PENDING

    @property
    def is_error(self) -> bool:
        return self.status == ERROR

    @property
    def is_success(self) -> bool:
        return self.status == SUCCESS

    def reset(self) -> None:
        self.status = IDLE
        self.data = None
        self.error = None

    def mutate(self, *args: Any, **kwargs: Any) -> Optional[T]:
        """Run the mutation. Returns the result, or None when it failed."""
        self.status = PENDING
        self.error = None
        try:
            result = self.fn(*args, **kwargs)
        except CatalogError as e:
            self.status = ERROR
            self.error = e
            self.data = None
            logger.info("Mutation failed", mutation=self.name, error=str(e))
            if self.on_error:
                self.on_error(e)
            return None
        self.status = SUCCESS
        self.data = result
        if self.on_success:
            self.on_success(result)
        return result
