"""Bill records and the derived category/impact types."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from loguru import logger

NO_DESCRIPTION = "No description available."


class BillCategory(StrEnum):
    """Display category of a bill. Closed set."""

    HOUSING = "housing"
    TRANSIT = "transit"
    SAFETY = "safety"
    CONSTRUCTION = "construction"
    CAMPUS = "campus"
    MISC = "misc"


class Impact(StrEnum):
    """Impact tier of a bill, from most to least urgent."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# Ranking for impact ordering (lower = shown first)
IMPACT_RANK: dict[Impact, int] = {
    Impact.HIGH: 0,
    Impact.MEDIUM: 1,
    Impact.LOW: 2,
}


def parse_api_datetime(value: Any) -> datetime | None:
    """Parse an Open States date or timestamp into an aware UTC datetime.

    Date-only values ("2025-03-04") become midnight UTC. Missing or
    unparseable values return None.
    """
    if not value:
        return None
    try:
        parsed = datetime.fromisoformat(str(value))
    except ValueError:
        logger.warning("Ignoring unparseable date {!r}", value)
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _strings(values: Any) -> tuple[str, ...]:
    """Keep the non-empty string items of an upstream list, dropping everything else."""
    if not isinstance(values, list | tuple):
        return ()
    return tuple(v for v in values if isinstance(v, str) and v)


def _text(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


@dataclass(frozen=True)
class Pagination:
    """Paging metadata attached to an upstream list response."""

    page: int
    max_page: int
    per_page: int
    total_items: int

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Pagination:
        return cls(
            page=int(data.get("page", 1)),
            max_page=int(data.get("max_page", 1)),
            per_page=int(data.get("per_page", 0)),
            total_items=int(data.get("total_items", 0)),
        )


@dataclass(frozen=True)
class Bill:
    """Read-only snapshot of an Open States bill."""

    id: str
    identifier: str
    title: str
    classification: tuple[str, ...] = ()
    subject: tuple[str, ...] = ()
    latest_action_date: datetime | None = None
    latest_action_description: str | None = None
    latest_passage_date: datetime | None = None
    first_action_date: datetime | None = None
    abstracts: tuple[str, ...] = ()
    source_urls: tuple[str, ...] = ()
    openstates_url: str | None = None
    from_organization: str | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Bill:
        """Build a Bill from an Open States ``/bills`` result.

        Raises:
            KeyError: If ``id`` or ``title`` is missing.
        """
        organization = data.get("from_organization")
        if not isinstance(organization, dict):
            organization = {}
        abstracts = [a for a in data.get("abstracts") or () if isinstance(a, dict)]
        sources = [s for s in data.get("sources") or () if isinstance(s, dict)]
        return cls(
            id=data["id"],
            identifier=_text(data.get("identifier")) or "",
            title=data["title"],
            classification=_strings(data.get("classification")),
            subject=_strings(data.get("subject")),
            latest_action_date=parse_api_datetime(data.get("latest_action_date")),
            latest_action_description=_text(data.get("latest_action_description")),
            latest_passage_date=parse_api_datetime(data.get("latest_passage_date")),
            first_action_date=parse_api_datetime(data.get("first_action_date")),
            abstracts=_strings([a.get("abstract") for a in abstracts]),
            source_urls=_strings([s.get("url") for s in sources]),
            openstates_url=_text(data.get("openstates_url")),
            from_organization=_text(organization.get("name")),
            updated_at=parse_api_datetime(data.get("updated_at")),
        )

    @property
    def display_title(self) -> str:
        return f"{self.identifier}: {self.title}" if self.identifier else self.title

    @property
    def summary(self) -> str:
        """First abstract, else the latest action description."""
        if self.abstracts:
            return self.abstracts[0]
        return self.latest_action_description or NO_DESCRIPTION

    @property
    def source_url(self) -> str | None:
        if self.openstates_url:
            return self.openstates_url
        return self.source_urls[0] if self.source_urls else None


@dataclass(frozen=True)
class BillPage:
    """One page of bills with its pagination metadata."""

    results: tuple[Bill, ...]
    pagination: Pagination | None = None


@dataclass(frozen=True)
class ScoredBill:
    """A bill augmented with its derived category and impact."""

    bill: Bill
    category: BillCategory
    impact: Impact


@dataclass(frozen=True)
class ScoredBillPage:
    """A page of scored bills, sorted by impact."""

    results: list[ScoredBill] = field(default_factory=list)
    pagination: Pagination | None = None
