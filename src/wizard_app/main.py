"""
Wizard - CLI Entry Point.

Usage:
    wizard serve             Start the web server
    wizard run               Walk through onboarding in the terminal
    wizard run --preset all_page_2
    wizard presets           Show component presets
    wizard health            Check configuration
    wizard --help            Show help
"""

import asyncio
import logging

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

app = typer.Typer(
    name="wizard",
    help="Onboarding wizard - registration, profile steps, and admin configuration.",
    add_completion=False,
)
console = Console()


@app.command()
def serve(
    port: int = typer.Option(8000, "--port", "-p", help="Port to run on"),
    reload: bool = typer.Option(False, "--reload", "-r", help="Enable auto-reload for development"),
) -> None:
    """Start the web server."""
    import os

    import uvicorn

    from wizard_app.config import settings

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    actual_port = int(os.environ.get("PORT", port))

    console.print("\n[bold green]Onboarding Wizard[/bold green]")
    console.print(f"Starting server on http://localhost:{actual_port}")
    console.print("[dim]Press Ctrl+C to stop[/dim]\n")

    uvicorn.run(
        "wizard_app.web.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=actual_port,
        reload=reload,
    )


@app.command()
def presets() -> None:
    """Show the component presets an admin can apply."""
    from onboarding.components import ComponentType, get_preset_options

    table = Table(title="Component Presets")
    table.add_column("Preset", style="bold")
    table.add_column("Title")
    for component_type in ComponentType:
        table.add_column(component_type.value, justify="center")

    for option in get_preset_options():
        pages = option["pages"]
        table.add_row(
            option["name"],
            option["title"],
            *[str(pages[t.value]) for t in ComponentType],
        )

    console.print(table)


def _prompt_step(session) -> None:
    """Ask for every field the current step needs."""
    from onboarding.components import ComponentType

    for component in session.components_for_step(session.current_step):
        if component.component_type == ComponentType.ABOUT_ME:
            session.set_fields(about_me=console.input("[bold]About me:[/bold] "))
        elif component.component_type == ComponentType.ADDRESS:
            session.set_fields(
                street_address=console.input("[bold]Street address:[/bold] "),
                city=console.input("[bold]City:[/bold] "),
                state=console.input("[bold]State:[/bold] "),
                zip=console.input("[bold]ZIP code:[/bold] "),
            )
        elif component.component_type == ComponentType.BIRTHDATE:
            raw = console.input("[bold]Birthdate (YYYY-MM-DD):[/bold] ").strip()
            try:
                session.set_fields(birthdate=raw or None)
            except ValueError:
                console.print("[red]Not a valid date, leaving it empty.[/red]")


@app.command()
def run(
    preset: str = typer.Option("default", "--preset", help="Component preset to use"),
) -> None:
    """Walk through the onboarding flow interactively."""
    from onboarding.assignments import StepAssignmentStore
    from onboarding.errors import IncompleteStepError, OnboardingError
    from onboarding.session import OnboardingSession
    from onboarding.state import SessionState

    store = StepAssignmentStore()
    try:
        store.apply_preset(preset)
    except OnboardingError as e:
        console.print(f"[red]{e.message}[/red]")
        raise typer.Exit(1)

    session = OnboardingSession(store)

    console.print(
        Panel.fit(
            "[bold green]Onboarding Wizard[/bold green]\n"
            f"[dim]Preset: [bold]{preset}[/bold][/dim]\n"
            "[dim]Press Ctrl+C to quit.[/dim]",
            title="Welcome",
            border_style="green",
        )
    )

    try:
        while session.state == SessionState.REGISTERING:
            email = console.input("[bold]Email:[/bold] ")
            password = console.input("[bold]Password:[/bold] ", password=True)
            confirm = console.input("[bold]Confirm password:[/bold] ", password=True)
            try:
                asyncio.run(session.register_user(email, password, confirm))
                console.print("[green]Account created successfully![/green]")
            except OnboardingError as e:
                console.print(f"[red]{e.message}[/red]")

        while session.state == SessionState.COLLECTING:
            progress = session.progress()
            console.print(f"\n[dim]{progress['label']} ({progress['percent']}%)[/dim]")
            console.print(f"[bold blue]{session.step_title()}[/bold blue]")
            _prompt_step(session)
            try:
                asyncio.run(session.advance())
            except IncompleteStepError as e:
                console.print(f"[red]Please fill in: {', '.join(e.missing)}[/red]")
            except OnboardingError as e:
                console.print(f"[red]{e.message}[/red]")

    except KeyboardInterrupt:
        console.print("\n\n[dim]Onboarding interrupted. Goodbye![/dim]")
        raise typer.Exit(1)

    summary = session.summary()
    lines = [f"[bold]Email:[/bold] {summary['email']}"]
    if "about" in summary:
        lines.append(f"[bold]About:[/bold] {summary['about']}")
    if "location" in summary:
        lines.append(f"[bold]Location:[/bold] {summary['location']}")
    if "birthdate" in summary:
        lines.append(f"[bold]Birthdate:[/bold] {summary['birthdate']}")
    console.print(Panel.fit("\n".join(lines), title="Congratulations!", border_style="green"))


@app.command()
def health() -> None:
    """Check configuration."""
    from wizard_app.config import get_settings

    console.print("\n[bold]Onboarding Wizard Health Check[/bold]\n")

    try:
        settings = get_settings()
        console.print("[green]OK[/green] Configuration loaded")
        console.print(f"   Environment: {settings.wizard_env}")
        console.print(f"   Log level: {settings.log_level}")
        console.print(f"   Default preset: {settings.default_preset}")

        from onboarding.components import PRESETS
        if settings.default_preset not in PRESETS:
            console.print(f"[red]FAIL[/red] Unknown default preset: {settings.default_preset}")
            raise typer.Exit(1)

        if settings.record_store_url:
            if settings.record_store_url.startswith(("http://", "https://")):
                console.print(f"[green]OK[/green] Record store: {settings.record_store_url}")
            else:
                console.print("[red]FAIL[/red] Record store URL must start with http:// or https://")
                raise typer.Exit(1)
        else:
            console.print("INFO Record store not configured, records kept in memory")

        console.print("\n[green]All checks passed![/green]")

    except typer.Exit:
        raise
    except Exception as e:
        console.print(f"\n[red]FAIL Configuration error: {e}[/red]")
        console.print("[dim]Check your .env file.[/dim]")
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    from wizard_app import __version__

    console.print(f"Onboarding Wizard version {__version__}")


if __name__ == "__main__":
    app()
