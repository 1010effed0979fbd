"""CLI commands for event RSVP management."""

import asyncio
from datetime import date, datetime, time
from uuid import UUID

import typer

from event_checker.config.settings import settings
from event_checker.events.dtos import EventCreateDTO, HostAccessDeniedError
from event_checker.events.features.create_event.write_model import SqlEventCreateWriteModel
from event_checker.events.links import LinkBuilder
from event_checker.events.repository.read_models import SqlEventSummaryReadModel

app = typer.Typer(help="CLI commands for event RSVP management")


@app.command()
def create_event(
    title: str = typer.Option(..., "--title", "-t", help="Event title"),
    host_name: str = typer.Option(..., "--host-name", help="Host name"),
    event_date: str = typer.Option(..., "--date", "-d", help="Event date (YYYY-MM-DD)"),
    event_time: str = typer.Option(..., "--time", help="Event time (HH:MM)"),
    location: str = typer.Option(..., "--location", "-l", help="Event location"),
    deadline: str = typer.Option(
        None,
        "--deadline",
        help="RSVP deadline (ISO timestamp). Defaults to 24h before the event",
    ),
    include_maybe: bool = typer.Option(
        False,
        "--include-maybe/--exclude-maybe",
        help="Count 'maybe' answers in the adults/children totals",
    ),
    base_url: str = typer.Option(
        None,
        "--base-url",
        help="Base URL for the printed links (defaults to BASE_URL setting)",
    ),
):
    """Create an event and print its guest and host links."""
    try:
        data = EventCreateDTO(
            title=title,
            host_name=host_name,
            date=date.fromisoformat(event_date),
            time=time.fromisoformat(event_time),
            location=location,
            rsvp_deadline=datetime.fromisoformat(deadline) if deadline else None,
            include_maybe_in_counts=include_maybe,
        )
        created = asyncio.run(SqlEventCreateWriteModel().create_event(data))
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)

    links = LinkBuilder(base_url or settings.base_url or "http://localhost:8000")

    typer.secho("Event created!", fg=typer.colors.GREEN)
    typer.secho(f"  Event ID: {created.event_id}", fg=typer.colors.CYAN)
    typer.secho(f"  RSVP deadline: {created.rsvp_deadline.isoformat()}", fg=typer.colors.BLUE)
    typer.secho(f"  Guest link: {links.guest_link(created.event_id)}", fg=typer.colors.CYAN)
    typer.secho(
        f"  Host link: {links.host_link(created.event_id, created.host_key)}",
        fg=typer.colors.MAGENTA,
    )


@app.command()
def summary(
    event_id: str = typer.Argument(..., help="Event UUID"),
    key: str = typer.Option(None, "--key", "-k", help="Host key"),
):
    """Show attendance totals for an event."""
    try:
        totals = asyncio.run(SqlEventSummaryReadModel().get_summary(UUID(event_id), key=key))
    except ValueError as e:
        typer.secho(str(e), fg=typer.colors.RED)
        raise typer.Exit(1)
    except HostAccessDeniedError:
        typer.secho("Host key rejected", fg=typer.colors.RED)
        raise typer.Exit(1)

    if totals is None:
        typer.secho(f"Event not found: {event_id}", fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.secho("Responses", fg=typer.colors.GREEN)
    typer.secho(f"  All: {totals.all}", fg=typer.colors.BLUE)
    typer.secho(f"  Going: {totals.going}", fg=typer.colors.BLUE)
    typer.secho(f"  Maybe: {totals.maybe}", fg=typer.colors.BLUE)
    typer.secho(f"  Not going: {totals.not_going}", fg=typer.colors.BLUE)
    typer.echo()
    counted = "going + maybe" if totals.include_maybe_in_counts else "going"
    typer.secho(f"Headcount ({counted})", fg=typer.colors.GREEN)
    typer.secho(f"  Adults: {totals.adults}", fg=typer.colors.CYAN)
    typer.secho(f"  Children: {totals.children}", fg=typer.colors.CYAN)


@app.command()
def serve(
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the API server."""
    import uvicorn

    uvicorn.run(
        "event_checker.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=reload,
    )


if __name__ == "__main__":
    app()
