"""CLI commands for civic snapshots and jurisdiction lookup."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Annotated

import typer

from civic_snapshot.lib.legislation import BillCategory
from civic_snapshot.lib.upstream import CivicDataError

if TYPE_CHECKING:
    from civic_snapshot.services.snapshot_service import CivicSnapshot, SnapshotService


def snapshot(
    zip_code: Annotated[str, typer.Argument(help="Five-digit US ZIP code")],
    as_json: Annotated[bool, typer.Option("--json", help="Print the snapshot as JSON")] = False,
    category: Annotated[
        BillCategory | None, typer.Option("--category", help="Only include bills in this category")
    ] = None,
) -> None:
    """Fetch the civic snapshot for a ZIP code."""
    from civic_snapshot.core.config import get_settings
    from civic_snapshot.services.snapshot_service import build_snapshot_service

    settings = get_settings()
    try:
        service = build_snapshot_service(settings)
    except CivicDataError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=2) from e

    result = asyncio.run(_snapshot_impl(service, zip_code, category))

    if as_json:
        from civic_snapshot.schemas.snapshot import CivicSnapshotResponse

        typer.echo(CivicSnapshotResponse.from_domain(result).model_dump_json(indent=2))
    else:
        _print_snapshot(result)

    if not result.geocode.ok:
        raise typer.Exit(code=1)


async def _snapshot_impl(
    service: SnapshotService, zip_code: str, category: BillCategory | None
) -> CivicSnapshot:
    """Async implementation of the snapshot command."""
    try:
        return await service.get_civic_snapshot(zip_code, category=category)
    finally:
        await service.close()


def _print_snapshot(result: CivicSnapshot) -> None:
    """Render a snapshot as plain text."""
    if result.geocode.error is not None:
        typer.echo(f"Could not locate ZIP {result.zip_code}: {result.geocode.error.message}", err=True)
        return

    location = result.geocode.value
    typer.echo(f"ZIP {result.zip_code}: {location.city}, {location.state_abbreviation or location.state}")
    typer.echo(f"  ({location.latitude:.4f}, {location.longitude:.4f})")

    typer.echo("\nLegislators:")
    if result.legislators.error is not None:
        typer.echo(f"  unavailable [{result.legislators.error.code}] {result.legislators.error.message}")
    elif not result.legislators.value:
        typer.echo("  none found")
    for person in result.legislators.value or []:
        party = ", ".join(person.party) or "unknown party"
        district = person.current_role.district if person.current_role else None
        suffix = f" (district {district})" if district else ""
        typer.echo(f"  {person.title or 'Legislator'} {person.name}, {party}{suffix}")

    typer.echo("\nBills:")
    if result.bills.error is not None:
        typer.echo(f"  unavailable [{result.bills.error.code}] {result.bills.error.message}")
    elif not result.bills.value:
        typer.echo("  none found")
    for scored in result.bills.value or []:
        typer.echo(f"  [{scored.impact}] [{scored.category}] {scored.bill.display_title}")


def jurisdiction(
    state: Annotated[str, typer.Argument(help="State name or two-letter abbreviation")],
) -> None:
    """Show the Open States jurisdiction ID for a state."""
    from civic_snapshot.lib.jurisdiction import resolve_jurisdiction, resolve_state_code, state_name

    try:
        code = resolve_state_code(state)
        typer.echo(f"{state_name(code)} ({code}): {resolve_jurisdiction(code)}")
    except CivicDataError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e
