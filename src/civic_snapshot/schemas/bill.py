"""Pydantic v2 schemas for scored bills."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from civic_snapshot.lib.legislation import BillCategory, Impact, ScoredBill, ScoredBillPage
from civic_snapshot.schemas.common import PaginationMeta


class BillResponse(BaseModel):
    """A bill with its derived category, impact and display fields."""

    id: str
    identifier: str
    title: str
    display_title: str = Field(description='"<identifier>: <title>"')
    summary: str = Field(description="First abstract, else latest action description")
    category: BillCategory
    impact: Impact
    classification: list[str] = Field(default_factory=list)
    subject: list[str] = Field(default_factory=list)
    latest_action_date: datetime | None = None
    latest_action_description: str | None = None
    latest_passage_date: datetime | None = None
    first_action_date: datetime | None = None
    from_organization: str | None = None
    source_url: str | None = None

    @classmethod
    def from_domain(cls, scored: ScoredBill) -> BillResponse:
        bill = scored.bill
        return cls(
            id=bill.id,
            identifier=bill.identifier,
            title=bill.title,
            display_title=bill.display_title,
            summary=bill.summary,
            category=scored.category,
            impact=scored.impact,
            classification=list(bill.classification),
            subject=list(bill.subject),
            latest_action_date=bill.latest_action_date,
            latest_action_description=bill.latest_action_description,
            latest_passage_date=bill.latest_passage_date,
            first_action_date=bill.first_action_date,
            from_organization=bill.from_organization,
            source_url=bill.source_url,
        )


class BillListResponse(BaseModel):
    """One page of scored bills, sorted by impact."""

    items: list[BillResponse]
    pagination: PaginationMeta | None = None

    @classmethod
    def from_domain(cls, page: ScoredBillPage) -> BillListResponse:
        return cls(
            items=[BillResponse.from_domain(b) for b in page.results],
            pagination=PaginationMeta.from_domain(page.pagination),
        )
