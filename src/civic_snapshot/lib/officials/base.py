"""Legislator records returned by civic-data providers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from civic_snapshot.lib.legislation.base import Pagination


@dataclass(frozen=True)
class CurrentRole:
    """The office a legislator currently holds."""

    title: str
    district: str | None = None
    org_classification: str | None = None
    division_id: str | None = None


@dataclass(frozen=True)
class Office:
    """A contact office (capitol, district) of a legislator."""

    name: str
    voice: str | None = None
    fax: str | None = None
    email: str | None = None
    address: str | None = None


@dataclass(frozen=True)
class Legislator:
    """Normalized representation of an Open States person."""

    id: str
    name: str
    current_role: CurrentRole | None = None
    party: tuple[str, ...] = ()
    email: str | None = None
    offices: tuple[Office, ...] = ()
    image: str | None = None
    links: tuple[str, ...] = ()

    @property
    def title(self) -> str:
        return self.current_role.title if self.current_role else ""

    @property
    def phone(self) -> str | None:
        """Voice number of the first office that lists one."""
        return next((office.voice for office in self.offices if office.voice), None)

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> Legislator:
        """Build a Legislator from an Open States person object.

        Raises:
            KeyError: If ``id`` or ``name`` is missing.
        """
        role = data.get("current_role")
        current_role = None
        if isinstance(role, dict):
            district_raw = role.get("district")
            current_role = CurrentRole(
                title=role.get("title") if isinstance(role.get("title"), str) else "",
                district=str(district_raw) if district_raw not in (None, "") else None,
                org_classification=role.get("org_classification") or None,
                division_id=role.get("division_id") or None,
            )

        offices = tuple(
            Office(
                name=office.get("name") or "",
                voice=office.get("voice") or None,
                fax=office.get("fax") or None,
                email=office.get("email") or None,
                address=office.get("address") or None,
            )
            for office in data.get("offices") or ()
            if isinstance(office, dict)
        )
        links = tuple(link["url"] for link in data.get("links") or () if isinstance(link, dict) and link.get("url"))

        return cls(
            id=data["id"],
            name=data["name"],
            current_role=current_role,
            party=_parse_party(data.get("party")),
            email=data.get("email") or None,
            offices=offices,
            image=data.get("image") or None,
            links=links,
        )


def _parse_party(raw: Any) -> tuple[str, ...]:
    """Normalize party data: a plain string or a list of strings / ``{"name": ...}`` objects."""
    if not raw:
        return ()
    if isinstance(raw, str):
        return (raw,)
    names: list[str] = []
    for item in raw:
        if isinstance(item, dict):
            name = item.get("name")
        else:
            name = item
        if name:
            names.append(str(name))
    return tuple(names)


@dataclass(frozen=True)
class PeoplePage:
    """One page of legislators with optional pagination metadata."""

    results: tuple[Legislator, ...]
    pagination: Pagination | None = None
