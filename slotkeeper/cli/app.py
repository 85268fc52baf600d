"""
Main CLI application using Typer.
"""

import asyncio
import logging
from pathlib import Path
from typing import Optional, Annotated

import pendulum
import typer
from pendulum import DateTime
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from ..config import AppConfig, get_default_config_path
from ..adapters.memory_store import SAMPLE_DATA_FILE, InMemoryDataStore
from ..domain.exceptions import SlotkeeperError, ThrottledError
from ..domain.slot_planner import SlotPlanner
from ..domain.throttle import attempt_throttle
from ..messages import throttle_wait_message
from ..services.availability import AvailabilityService
from ..services.booking import BookingRequest, BookingService
from ..services.catalogue import CatalogueService
from ..utils.phone import format_phone_display

app = typer.Typer(
    name="slotkeeper",
    help="Offer bookable appointment slots and guard booking attempts",
    add_completion=False
)

console = Console()

ConfigOption = Annotated[
    Optional[Path],
    typer.Option("--config", "-c", help="Path to config file. Defaults to ./config.yaml"),
]
DataOption = Annotated[
    Optional[Path],
    typer.Option("--data", help="JSON file with services, staff, schedules and appointments."),
]
NowOption = Annotated[
    Optional[str],
    typer.Option("--now", help="Pretend the current time is this ISO timestamp."),
]


def _load_config(config_file: Optional[Path]) -> AppConfig:
    """
    Load the configuration file.

    An explicitly given file must exist; without one, defaults are used
    when no config.yaml is found.
    """
    if config_file is not None:
        return AppConfig.load_from_yaml(config_file)

    default_path = get_default_config_path()
    if default_path.exists():
        return AppConfig.load_from_yaml(default_path)
    return AppConfig()


def _setup_logging(config: AppConfig) -> None:
    logging.basicConfig(
        level=config.get_log_level(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )


def _build_services(config: AppConfig, data_file: Optional[Path]):
    """Wire store, planner and services together."""
    store = InMemoryDataStore.from_json(
        data_file or config.data_file or SAMPLE_DATA_FILE,
        timezone=config.timezone,
    )
    planner = SlotPlanner(timezone=config.timezone, step_minutes=config.slot_step_minutes)
    availability = AvailabilityService(store=store, planner=planner)
    booking = BookingService(
        store=store,
        availability=availability,
        throttle=attempt_throttle,
        limits=config.get_throttle_limits(),
    )
    catalogue = CatalogueService(
        store=store,
        throttle=attempt_throttle,
        limits=config.get_throttle_limits(),
    )
    return availability, booking, catalogue


def _parse_now(now_option: Optional[str], tz: str) -> DateTime:
    if not now_option:
        return pendulum.now(tz)
    try:
        parsed = pendulum.parse(now_option, tz=tz)
    except ValueError as e:
        console.print(f"[red]Could not parse --now: {e}[/red]")
        raise typer.Exit(1)
    if not isinstance(parsed, DateTime):
        console.print(f"[red]Could not parse --now: {now_option!r} is not a date and time[/red]")
        raise typer.Exit(1)
    return parsed


def _parse_day(day_option: str, tz: str):
    try:
        return pendulum.from_format(day_option, "YYYY-MM-DD", tz=tz).date()
    except ValueError as e:
        console.print(f"[red]Could not parse date: {e}[/red]")
        raise typer.Exit(1)


@app.command()
def slots(
    staff: Annotated[str, typer.Argument(help="Staff member id")],
    day: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    service: Annotated[str, typer.Option("--service", "-s", help="Service id")],
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    now: NowOption = None,
):
    """
    Show the slots a client can book with a staff member on one day.

    Examples:

        slotkeeper slots anna 2026-10-20 --service haircut
        slotkeeper slots anna 2026-10-20 -s beard --now 2026-10-20T12:00
    """
    try:
        config = _load_config(config_file)
        _setup_logging(config)
        availability, _, _ = _build_services(config, data_file)

        target_day = _parse_day(day, config.timezone)
        current = _parse_now(now, config.timezone)

        found = asyncio.run(
            availability.find_slots(
                staff_id=staff,
                service_id=service,
                day=target_day,
                now=current,
            )
        )

        console.print()
        if not found:
            console.print(
                "[yellow]⚠ No free slots on this day.[/yellow]\n"
                "Try another day or use the 'upcoming' command."
            )
        else:
            console.print(f"[bold green]✓ {len(found)} free slot(s) on {target_day.isoformat()}:[/bold green]\n")
            console.print("  " + "  ".join(found))
        console.print()

    except (FileNotFoundError, ValueError, SlotkeeperError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def upcoming(
    staff: Annotated[str, typer.Argument(help="Staff member id")],
    service: Annotated[str, typer.Option("--service", "-s", help="Service id")],
    days: Annotated[Optional[int], typer.Option("--days", help="How many days to look ahead")] = None,
    per_day: Annotated[Optional[int], typer.Option("--per-day", help="Slots shown per day")] = None,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    now: NowOption = None,
):
    """
    Show the nearest free slots over the coming days.
    """
    try:
        config = _load_config(config_file)
        _setup_logging(config)
        availability, _, _ = _build_services(config, data_file)
        current = _parse_now(now, config.timezone)

        preview = asyncio.run(
            availability.upcoming_slots(
                staff_id=staff,
                service_id=service,
                now=current,
                days=days or config.upcoming_days,
                per_day=per_day or config.upcoming_per_day,
            )
        )

        if not preview:
            console.print("[yellow]⚠ No free slots in the coming days.[/yellow]")
            return

        table = Table(title="Nearest free slots", show_header=True, header_style="bold cyan")
        table.add_column("Date", style="bold yellow")
        table.add_column("Weekday", style="dim")
        table.add_column("Slots")

        for entry in preview:
            table.add_row(
                entry.day.strftime("%d.%m"),
                entry.day.strftime("%A"),
                "  ".join(entry.slots),
            )

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError, SlotkeeperError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def book(
    staff: Annotated[str, typer.Argument(help="Staff member id")],
    day: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    slot: Annotated[str, typer.Argument(help="Start time (HH:mm) as offered by 'slots'")],
    service: Annotated[str, typer.Option("--service", "-s", help="Service id")],
    name: Annotated[str, typer.Option("--name", help="Client name")],
    phone: Annotated[str, typer.Option("--phone", help="Client phone number")],
    email: Annotated[Optional[str], typer.Option("--email", help="Client e-mail")] = None,
    config_file: ConfigOption = None,
    data_file: DataOption = None,
    now: NowOption = None,
):
    """
    Submit a booking for an offered slot.

    The in-memory store is not written back to the data file.
    """
    try:
        config = _load_config(config_file)
        _setup_logging(config)
        _, booking, _ = _build_services(config, data_file)

        request = BookingRequest(
            staff_id=staff,
            service_id=service,
            day=_parse_day(day, config.timezone),
            slot=slot,
            client_name=name,
            client_phone=phone,
            client_email=email,
        )
        appointment = asyncio.run(
            booking.submit_booking(request, now=_parse_now(now, config.timezone))
        )

        console.print(
            f"\n[bold green]✓ Booked {appointment.start.format('DD.MM.YYYY HH:mm')}"
            f"–{appointment.end.format('HH:mm')}[/bold green]"
        )
        console.print(f"   Confirmation goes to {format_phone_display(appointment.client_phone)}\n")

    except ThrottledError as e:
        console.print(f"[bold red]Error:[/bold red] {throttle_wait_message(e.remaining_seconds, config.locale)}")
        raise typer.Exit(1)

    except (FileNotFoundError, ValueError, SlotkeeperError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def list_staff(
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    List all staff members.
    """
    try:
        config = _load_config(config_file)
        availability, _, _ = _build_services(config, data_file)
        members = asyncio.run(availability.list_staff())

        if not members:
            console.print("[yellow]No staff members defined.[/yellow]")
            return

        table = Table(title="Staff", show_header=True, header_style="bold cyan")
        table.add_column("Id", style="bold yellow")
        table.add_column("Name")
        table.add_column("Role", style="dim")

        for member in members:
            table.add_row(member.id, member.display_name(), member.role.value)

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError, SlotkeeperError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def list_services(
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    List the services on offer.
    """
    try:
        config = _load_config(config_file)
        availability, _, _ = _build_services(config, data_file)
        services = asyncio.run(availability.list_services())

        if not services:
            console.print("[yellow]No services defined.[/yellow]")
            return

        table = Table(title="Services", show_header=True, header_style="bold cyan")
        table.add_column("Id", style="bold yellow")
        table.add_column("Name")
        table.add_column("Minutes", justify="right")
        table.add_column("Price", justify="right", style="dim")

        for item in services:
            table.add_row(item.id, item.name, str(item.duration_minutes), item.format_price())

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError, SlotkeeperError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def schedule(
    staff: Annotated[str, typer.Argument(help="Staff member id")],
    config_file: ConfigOption = None,
    data_file: DataOption = None,
):
    """
    List the working windows configured for a staff member.
    """
    try:
        config = _load_config(config_file)
        _, _, catalogue = _build_services(config, data_file)
        windows = asyncio.run(catalogue.list_working_windows(staff))

        if not windows:
            console.print("[yellow]No working windows defined.[/yellow]")
            return

        table = Table(title=f"Schedule of {staff}", show_header=True, header_style="bold cyan")
        table.add_column("Date", style="bold yellow")
        table.add_column("Weekday", style="dim")
        table.add_column("Hours")

        for window in windows:
            hours = (
                f"{window.start_time.strftime('%H:%M')}–{window.end_time.strftime('%H:%M')}"
                if window.is_working else "[dim]day off[/dim]"
            )
            table.add_row(window.date.isoformat(), window.date.strftime("%A"), hours)

        console.print()
        console.print(table)
        console.print()

    except (FileNotFoundError, ValueError, SlotkeeperError) as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


@app.command()
def version():
    """
    Show version information.
    """
    from .. import __version__
    console.print(f"\n[bold cyan]slotkeeper[/bold cyan] version [bold]{__version__}[/bold]\n")


if __name__ == "__main__":
    app()
