"""Pydantic v2 schemas for legislators."""

from __future__ import annotations

from pydantic import BaseModel, Field

from civic_snapshot.lib.officials import Legislator, Office
from civic_snapshot.schemas.common import PaginationMeta


class OfficeResponse(BaseModel):
    """Contact office of a legislator."""

    name: str
    voice: str | None = None
    fax: str | None = None
    email: str | None = None
    address: str | None = None

    @classmethod
    def from_domain(cls, office: Office) -> OfficeResponse:
        return cls(
            name=office.name,
            voice=office.voice,
            fax=office.fax,
            email=office.email,
            address=office.address,
        )


class LegislatorResponse(BaseModel):
    """A legislator as shown on a civic snapshot."""

    id: str
    name: str
    title: str = Field(description="Current role title, e.g. Senator")
    district: str | None = None
    chamber: str | None = Field(default=None, description="Open States org_classification (upper/lower)")
    party: list[str] = Field(default_factory=list)
    email: str | None = None
    phone: str | None = None
    image: str | None = None
    links: list[str] = Field(default_factory=list)
    offices: list[OfficeResponse] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, legislator: Legislator) -> LegislatorResponse:
        role = legislator.current_role
        return cls(
            id=legislator.id,
            name=legislator.name,
            title=legislator.title,
            district=role.district if role else None,
            chamber=role.org_classification if role else None,
            party=list(legislator.party),
            email=legislator.email,
            phone=legislator.phone,
            image=legislator.image,
            links=list(legislator.links),
            offices=[OfficeResponse.from_domain(o) for o in legislator.offices],
        )


class LegislatorListResponse(BaseModel):
    """Ranked legislators, senators first."""

    items: list[LegislatorResponse]
    pagination: PaginationMeta | None = None
