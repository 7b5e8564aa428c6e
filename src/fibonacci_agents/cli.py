"""Command-line interface for the Fibonacci multi-agent assistant."""

import asyncio

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from fibonacci_agents.application.agents.roster import create_agent_roster
from fibonacci_agents.application.services import FibonacciApp
from fibonacci_agents.config import settings
from fibonacci_agents.domain.exceptions import FibonacciAgentsError, SequenceParseError
from fibonacci_agents.domain.models import Message
from fibonacci_agents.domain.tools import (
    MAX_REQUESTED_COUNT,
    is_fibonacci_number,
    parse_sequence,
    render_sequence,
    validate_sequence,
)
from fibonacci_agents.infrastructure.di.container import build_container
from fibonacci_agents.observability import setup_logging

# Initialize Typer app
app = typer.Typer(
    name="fibonacci-agents",
    help="Fibonacci multi-agent assistant - generator, validator and general assistant in a group chat",
    add_completion=False,
)

# Rich console for pretty output
console = Console()

EXIT_COMMAND = "exit"
GOODBYE = "Goodbye! Thanks for exploring Fibonacci numbers with me! 🔢"

BANNER = """
=== Fibonacci Multi-Agent Assistant ===
Ask me anything about Fibonacci numbers! I can:
• Generate Fibonacci sequences (e.g., 'What are the first 8 Fibonacci numbers?')
• Validate sequences (e.g., 'Is this sequence correct: 0, 1, 1, 2, 3, 5?')
• Check individual numbers (e.g., 'Is 89 a Fibonacci number?')
• Explain the Fibonacci sequence
• Answer general questions (I'll use my knowledge to help with any topic!)

Type 'exit' to quit.
"""


def agent_emoji(agent_name: str | None) -> str:
    """Display marker for an agent's replies."""
    name = agent_name or ""
    if "Generator" in name:
        return "🔢"
    if "Validator" in name:
        return "✅"
    if "GeneralAssistant" in name:
        return "🤖"
    return "💬"


def print_reply(reply: Message) -> None:
    if reply.metadata.get("error"):
        console.print(f"[red]{escape(reply.content)}[/red]", emoji=False)
        return
    name = reply.author_name or "Assistant"
    console.print(
        f"[bold]{escape(name)}[/bold] {agent_emoji(name)}: {escape(reply.content)}",
        emoji=False,
    )


async def run_session(fibonacci_app: FibonacciApp) -> None:
    """Read questions until the user types exit or input ends."""
    await fibonacci_app.start()
    console.print(BANNER)

    try:
        while True:
            try:
                question = console.input("[bold cyan]You:[/bold cyan] ")
            except EOFError:
                console.print(f"\n{GOODBYE}")
                break

            question = question.strip()
            if not question:
                continue
            if question.lower() == EXIT_COMMAND:
                console.print(f"\n{GOODBYE}")
                break

            console.print()
            async for reply in fibonacci_app.ask(question):
                print_reply(reply)
            console.print()
    finally:
        await fibonacci_app.shutdown()


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context):
    """Start an interactive session when no command is given."""
    try:
        settings.load()
        setup_logging(settings.app.log_level, settings.app.log_file)

        if ctx.invoked_subcommand is not None:
            return

        settings.validate()
        container = build_container(settings)
        fibonacci_app = container.get(FibonacciApp)
        asyncio.run(run_session(fibonacci_app))
    except FibonacciAgentsError as e:
        console.print(f"[red]Error:[/red] {escape(e.message)}")
        raise typer.Exit(1) from e


@app.command()
def info():
    """Display application information."""
    table = Table(title="Fibonacci Agents Info")

    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Environment", settings.app.environment.value)
    table.add_row("Debug Mode", str(settings.app.debug))
    table.add_row("Log Level", settings.app.log_level)
    table.add_row("Completion Backend", "mock" if settings.app.use_mock_completion else "azure-openai")
    table.add_row("Azure Endpoint", settings.azure.endpoint or "not set")
    table.add_row("Azure Deployment", settings.azure.deployment_name or "not set")
    table.add_row("Azure API Version", settings.azure.api_version)
    table.add_row("Maximum Iterations", str(settings.group_chat.maximum_iterations))
    table.add_row("Automatic Reset", str(settings.group_chat.automatic_reset))
    table.add_row("Retries Enabled", str(settings.resilience.enable_retries))

    console.print(table)


@app.command()
def config(
    show_sensitive: bool = typer.Option(False, help="Show sensitive configuration values"),
):
    """Display current configuration."""
    table = Table(title="Configuration")
    table.add_column("Section", style="cyan")
    table.add_column("Key", style="yellow")
    table.add_column("Value", style="green")

    for key, value in settings.app.model_dump().items():
        table.add_row("app", key, str(value))

    # Azure config (hide sensitive values unless requested)
    azure_config = settings.azure.model_dump()
    if not show_sensitive and azure_config.get("api_key"):
        azure_config["api_key"] = "***HIDDEN***"

    for key, value in azure_config.items():
        table.add_row("azure", key, str(value))

    for key, value in settings.group_chat.model_dump().items():
        table.add_row("group_chat", key, str(value))

    for key, value in settings.resilience.model_dump().items():
        table.add_row("resilience", key, str(value))

    console.print(table)


@app.command()
def validate():
    """Validate configuration."""
    console.print("[cyan]Validating configuration...[/cyan]")

    errors = []
    warnings = []

    if settings.app.use_mock_completion:
        warnings.append("Mock completion is enabled - agent replies are simulated")
    else:
        for key in settings.azure.missing_settings():
            errors.append(f"{key} is not set")

    # Display results
    if errors:
        console.print("[red]Validation Errors:[/red]")
        for error in errors:
            console.print(f"  ❌ {error}")

    if warnings:
        console.print("[yellow]Warnings:[/yellow]")
        for warning in warnings:
            console.print(f"  ⚠️  {warning}")

    if not errors and not warnings:
        console.print("[green]✅ Configuration is valid![/green]")
    elif not errors:
        console.print("[yellow]Configuration is valid with warnings[/yellow]")
    else:
        console.print("[red]Configuration has errors that need to be fixed[/red]")
        raise typer.Exit(1)


@app.command()
def list_agents():
    """List the agents taking part in the group chat."""
    table = Table(title="Agents")
    table.add_column("Agent", style="cyan")
    table.add_column("Description", style="green")
    table.add_column("Tools", style="yellow")

    for agent in create_agent_roster():
        table.add_row(f"{agent.name} {agent_emoji(agent.name)}", agent.description, ", ".join(agent.tools))

    console.print(table)


@app.command()
def generate(
    count: int = typer.Argument(..., min=0, max=MAX_REQUESTED_COUNT, help="How many Fibonacci numbers to generate"),
):
    """Print the first COUNT Fibonacci numbers."""
    console.print(render_sequence(count) or "(empty)")


@app.command()
def check(number: int = typer.Argument(..., help="Number to test")):
    """Check whether NUMBER is a Fibonacci number."""
    if is_fibonacci_number(number):
        console.print(f"[green]{number} is a Fibonacci number.[/green]")
    else:
        console.print(f"[yellow]{number} is not a Fibonacci number.[/yellow]")


@app.command()
def verify(sequence: str = typer.Argument(..., help='Comma separated sequence, e.g. "0, 1, 1, 2"')):
    """Validate a comma separated sequence; exits with 1 when it is not Fibonacci."""
    try:
        numbers = parse_sequence(sequence)
    except SequenceParseError as e:
        console.print(f"❌ ERROR: Failed to validate sequence. {escape(e.message)}", emoji=False)
        raise typer.Exit(1) from e

    result = validate_sequence(numbers)
    console.print(escape(result.summary()), emoji=False)
    if not result.valid:
        raise typer.Exit(1)


if __name__ == "__main__":
    app()
