"""Call outcome variants shared by every upstream operation."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar, Union

from .provider import ProviderId

T = TypeVar("T")
R = TypeVar("R")

RATE_LIMIT_CODES = frozenset({403, 429})


class _OutcomeMixin:
    """Helpers common to every outcome variant."""

    @property
    def is_success(self) -> bool:
        return isinstance(self, Success)

    @property
    def is_error(self) -> bool:
        return isinstance(self, Error)

    @property
    def is_loading(self) -> bool:
        return isinstance(self, Loading)

    def get_or_none(self) -> Any:
        """Return the payload for Success, None otherwise."""
        return self.data if isinstance(self, Success) else None

    def on_success(self, action: Callable[[Any], None]) -> "CallOutcome":
        if isinstance(self, Success):
            action(self.data)
        return self

    def on_error(self, action: Callable[["Error"], None]) -> "CallOutcome":
        if isinstance(self, Error):
            action(self)
        return self

    def map(self, transform: Callable[[Any], Any]) -> "CallOutcome":
        """Transform a Success payload; other variants pass through."""
        if isinstance(self, Success):
            return Success(transform(self.data))
        return self


@dataclass(frozen=True)
class Success(_OutcomeMixin, Generic[T]):
    """Upstream call succeeded."""

    data: T


@dataclass(frozen=True)
class Error(_OutcomeMixin):
    """Upstream call failed.

    Attributes:
        message: Human readable failure description
        provider: Provider the failure came from
        code: HTTP-style status code when one is known
    """

    message: str
    provider: ProviderId
    code: int | None = None

    @property
    def is_rate_limited(self) -> bool:
        """True when the failure means the provider refused on quota."""
        return self.code in RATE_LIMIT_CODES


class Loading(_OutcomeMixin):
    """Transient in-progress state, never persisted."""

    _instance: "Loading | None" = None

    def __new__(cls) -> "Loading":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Loading"


LOADING = Loading()

CallOutcome = Union[Success[T], Error, Loading]
