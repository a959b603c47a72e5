"""Data structures representing harvested links and their check outcomes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple, Union

NO_TEXT = "No text"
BODY_LOCATION = "Body"


@dataclass(frozen=True, slots=True)
class LinkRecord:
    """Anchor discovered on the origin page during harvest."""

    id: str
    href: str
    text: str
    index: int
    location: str = BODY_LOCATION

    @property
    def position(self) -> int:
        """1-based position used in progress output and screenshot names."""
        return self.index + 1


@dataclass(frozen=True, slots=True)
class Skipped:
    """Special-scheme link that was never probed."""

    reason: str = "Special Protocol"
    is_failure = False

    @property
    def status(self) -> str:
        return f"Skipped - {self.reason}"


@dataclass(frozen=True, slots=True)
class Working:
    """Link answered with a status in [200, 400)."""

    status_code: int
    is_failure = False

    @property
    def status(self) -> int:
        return self.status_code


@dataclass(frozen=True, slots=True)
class Broken:
    """Link answered outside [200, 400), or the navigation produced no response."""

    status_code: Optional[int] = None
    is_failure = True

    @property
    def status(self) -> Union[int, str]:
        return self.status_code if self.status_code is not None else "No Response"


@dataclass(frozen=True, slots=True)
class Errored:
    """Navigation failed before any status was obtainable."""

    message: str
    is_failure = True

    @property
    def status(self) -> str:
        return "Error"


CheckOutcome = Union[Skipped, Working, Broken, Errored]


@dataclass(frozen=True, slots=True)
class LinkResult:
    """Outcome of checking one link, kept apart from the record itself."""

    record: LinkRecord
    outcome: CheckOutcome
    screenshot: Optional[str] = None


@dataclass(frozen=True, slots=True)
class CrawlReport:
    """Final partition of all link results for one run."""

    working: Tuple[LinkResult, ...]
    broken: Tuple[LinkResult, ...]
    total: int
