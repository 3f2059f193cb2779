"""
SheShape - CLI Entry Point.

Usage:
    sheshape onboard         Fill in your profile interactively
    sheshape fields          List profile fields and their rules
    sheshape --help          Show help
"""

import asyncio
import logging
import sys

import typer
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.spinner import Spinner
from rich.table import Table

from onboarding.images import ImageFile
from onboarding.schema import PROFILE_SCHEMA, TOGGLE_FIELDS, fields_in_section, get_form_options
from onboarding.sections import SectionStatus
from onboarding.wizard import ProfileWizard

app = typer.Typer(
    name="sheshape",
    help="SheShape - set up your fitness profile.",
    add_completion=False,
)
console = Console()

HELP_TEXT = (
    "[bold]Commands[/bold]\n"
    "  set <field> <value>      Fill a field (blank value clears it)\n"
    "  toggle <field> <value>   Add/remove an option on a multi-select field\n"
    "  image <path>             Stage a profile picture\n"
    "  next | back | goto <section>\n"
    "  submit                   Send the profile (last section only)\n"
    "  show | options | help | quit"
)

_STATUS_MARKERS = {
    SectionStatus.COMPLETED: "[green]✓[/green]",
    SectionStatus.ACTIVE: "[bold magenta]●[/bold magenta]",
    SectionStatus.UPCOMING: "[dim]○[/dim]",
}


def setup_logging(verbose: bool = False) -> None:
    """Setup logging on stderr so it doesn't mix with the wizard output."""
    from sheshape.config import settings

    level = logging.DEBUG if verbose else getattr(logging, settings.log_level)
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stderr)],
    )

    # Quiet down noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def render_section(wizard: ProfileWizard) -> None:
    """Print the tab bar, progress and the active section's fields."""
    tabs = "  ".join(
        f"{_STATUS_MARKERS[status]} {section.label}"
        for section, status in wizard.section_states()
    )
    console.print(f"\n{tabs}")
    console.print(f"[dim]{wizard.completeness}% Complete[/dim]")

    table = Table(show_header=True, header_style="bold")
    table.add_column("Field")
    table.add_column("Value")
    table.add_column("Error", style="red")
    for name in fields_in_section(wizard.current_section.id, wizard.schema):
        rule = wizard.schema[name]
        value = wizard.draft.get(name)
        shown = ", ".join(value) if isinstance(value, tuple) else ("" if value is None else str(value))
        label = f"{name}{' *' if rule.required else ''}"
        table.add_row(label, shown, wizard.errors.get(name, ""))
    console.print(table)

    if wizard.current_section.id == "personal" and wizard.staged_image:
        image = wizard.staged_image
        console.print(f"[dim]Profile image: {image.source.filename} ({image.size} bytes)[/dim]")

    console.print(f"[dim]Primary action: {wizard.primary_action}[/dim]")


def render_errors(errors: dict) -> None:
    for name, message in errors.items():
        console.print(f"  [red]{name}: {message}[/red]")


def handle_command(wizard: ProfileWizard, line: str) -> bool:
    """
    Apply one command line to the wizard.

    Returns False when the session should end.
    """
    command, _, rest = line.partition(" ")
    command = command.lower()

    if command in ("quit", "exit", "q"):
        return False

    if command == "help":
        console.print(HELP_TEXT)
    elif command == "show":
        render_section(wizard)
    elif command == "options":
        for key, values in get_form_options().items():
            items = [v["id"] if isinstance(v, dict) else v for v in values]
            console.print(f"[bold]{key}[/bold]: {', '.join(items)}")
    elif command in ("set", "toggle"):
        name, _, value = rest.partition(" ")
        if name not in PROFILE_SCHEMA:
            console.print(f"[red]Unknown field: {name}[/red]")
        elif command == "toggle":
            if name not in TOGGLE_FIELDS:
                console.print(f"[red]{name} is not a multi-select field[/red]")
            elif not value.strip():
                console.print(f"[red]Usage: toggle {name} <value>[/red]")
            else:
                wizard.toggle(name, value.strip())
                render_section(wizard)
        else:
            wizard.set_from_input(name, value)
            render_section(wizard)
    elif command == "image":
        try:
            file = ImageFile.from_path(rest.strip())
        except OSError as e:
            console.print(f"[red]Could not read image: {e}[/red]")
        else:
            result = wizard.stage_image(file)
            if result.ok:
                console.print(f"[green]Staged {file.filename}[/green]")
            else:
                console.print(f"[red]{result.message}[/red]")
    elif command == "next":
        result = wizard.next()
        if result.errors:
            console.print(f"[yellow]{result.reason}[/yellow]")
            render_errors(result.errors)
        render_section(wizard)
    elif command == "back":
        wizard.previous()
        render_section(wizard)
    elif command == "goto":
        try:
            result = wizard.jump_to(rest.strip())
        except KeyError as e:
            console.print(f"[red]{e}[/red]")
        else:
            if result.errors:
                render_errors(result.errors)
            render_section(wizard)
    elif command == "submit":
        return submit(wizard)
    else:
        console.print(f"[red]Unknown command: {command}[/red] (type 'help')")

    return True


def submit(wizard: ProfileWizard) -> bool:
    if not wizard.navigator.is_last:
        console.print("[yellow]Finish the remaining sections first ('next').[/yellow]")
        return True

    with Live(Spinner("dots", text="Setting up your profile..."), console=console, transient=True):
        result = asyncio.run(wizard.submit())

    if result.success:
        console.print(f"\n[bold green]{result.message}[/bold green]")
        return False

    console.print(f"[red]{result.message}[/red]")
    if result.error is None:
        render_errors(dict(wizard.errors))
    return True


@app.command()
def onboard(
    image: str = typer.Option(None, "--image", "-i", help="Profile picture to stage"),
    token: str = typer.Option(None, "--token", "-t", help="Bearer token for the API"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Fill in your profile section by section."""
    from sheshape.http import ApiClient, get_session
    from onboarding.services import ProfileService

    setup_logging(verbose)

    session = get_session()
    if token:
        session.set_token(token)

    expired: list[str] = []

    def on_session_expired(path: str) -> None:
        expired.append(path)

    client = ApiClient(
        session=session,
        notify=lambda message: console.print(f"[yellow]{message}[/yellow]"),
        on_session_expired=on_session_expired,
    )
    wizard = ProfileWizard.from_settings(ProfileService(client))

    console.print(
        Panel.fit(
            "[bold magenta]Complete Your Profile[/bold magenta]\n"
            "Help us personalize your fitness journey.\n\n"
            "[dim]Type 'help' for commands, 'quit' to leave.[/dim]",
            title="SheShape",
            border_style="magenta",
        )
    )

    if image:
        handle_command(wizard, f"image {image}")
    render_section(wizard)

    while True:
        try:
            line = console.input("\n[bold blue]>[/bold blue] ").strip()
            if not line:
                continue
            if not handle_command(wizard, line):
                break
            if expired:
                console.print(f"[red]Please log in again ({expired[0]}) and rerun onboarding.[/red]")
                raise typer.Exit(code=1)
        except KeyboardInterrupt:
            console.print("\n\n[dim]Onboarding interrupted. Nothing was saved.[/dim]")
            break


@app.command()
def fields() -> None:
    """List profile fields with their section and rules."""
    table = Table(title="Profile fields")
    table.add_column("Section")
    table.add_column("Field")
    table.add_column("Type")
    table.add_column("Required")
    table.add_column("Rules")

    for name, rule in PROFILE_SCHEMA.items():
        rules = []
        if rule.min is not None or rule.max is not None:
            rules.append(f"{rule.min if rule.min is not None else ''}..{rule.max if rule.max is not None else ''}")
        if rule.pattern:
            rules.append(rule.pattern)
        if rule.allowed:
            rules.append(" | ".join(rule.allowed))
        table.add_row(
            rule.section,
            name,
            rule.type.value,
            "yes" if rule.required else "",
            " ".join(rules),
        )

    console.print(table)


if __name__ == "__main__":
    app()
