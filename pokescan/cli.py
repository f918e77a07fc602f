"""Command-line interface for the Pokemon card scanner."""

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.progress import BarColumn, Progress, SpinnerColumn, TextColumn
from rich.table import Table

from .authenticity import authenticity_label
from .capture import load_image
from .core.constants import CARD_CONDITIONS
from .core.types import CardInfo, ScanProgress, ScanResult
from .ocr import parse_card_info
from .pipeline import build_pipeline
from .pricing import summarize_prices
from .store import ScanHistoryWriter
from .utils.config import ensure_output_dir, settings
from .utils.error_handler import CardScannerError, ScanError
from .utils.helpers import estimate_value_by_condition, format_currency
from .utils.log import configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)

console = Console()

app = typer.Typer(
    name="pokescan",
    help="Pokemon Card Scanner - read, verify and price a card from a photo",
    add_completion=False
)


def _card_info_table(card_info: CardInfo, title: str) -> Table:
    table = Table(title=title)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("Card Name", card_info.name or "[red]Not detected[/red]")
    table.add_row("Set Number", card_info.set_number or "[red]Not found[/red]")
    table.add_row("HP", card_info.hp or "-")
    table.add_row("Type", card_info.type or "-")
    table.add_row("Rarity", card_info.rarity or "-")
    if card_info.attacks:
        table.add_row("Attacks", ", ".join(card_info.attacks))
    if card_info.weaknesses:
        table.add_row("Weakness", ", ".join(card_info.weaknesses))
    if card_info.retreat_cost is not None:
        table.add_row("Retreat Cost", str(card_info.retreat_cost))
    if card_info.artist:
        table.add_row("Artist", card_info.artist)
    return table


def _result_table(result: ScanResult) -> Table:
    table = _card_info_table(result.card_info, "Scan Results")

    validated = result.validated_card
    if validated:
        table.add_row("Resolved Name", validated.name)
        table.add_row("Set", validated.set_name)
        table.add_row("Card ID", validated.card_id)
    else:
        table.add_row("Database", "[yellow]Not found[/yellow]")

    auth = result.authenticity
    style = "green" if auth.is_authentic else "red"
    table.add_row(
        "Authenticity",
        f"[{style}]{authenticity_label(auth)}[/{style}] ({auth.confidence:.0%})",
    )
    for issue in auth.issues:
        table.add_row("Issue", f"[yellow]{issue}[/yellow]")

    if result.prices is not None:
        summary = summarize_prices(result.prices)
        table.add_row("Market Price", format_currency(summary.market))
        table.add_row("Range", f"{format_currency(summary.low)} - {format_currency(summary.high)}")
        table.add_row("TCGPlayer", format_currency(summary.tcgplayer))
        if summary.alternate_source:
            table.add_row(summary.alternate_source, format_currency(summary.alternate))
        for grade, price in (result.prices.graded_prices or {}).items():
            table.add_row(grade.upper(), format_currency(price))
        if summary.market is not None:
            for code, condition in CARD_CONDITIONS.items():
                if code != "NM":
                    value = estimate_value_by_condition(summary.market, code)
                    table.add_row(f"Est. {condition}", format_currency(value))
    else:
        table.add_row("Market Price", "[dim]Not priced[/dim]")
    return table


async def _run_scan(image_path: Path, save: bool) -> ScanResult:
    image = load_image(image_path)
    pipeline = build_pipeline(settings)

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task("Starting scan...", total=1.0)

        def on_progress(event: ScanProgress) -> None:
            progress.update(task, completed=event.fraction, description=event.label)

        try:
            result = await pipeline.run_scan(image, on_progress=on_progress)
        finally:
            await pipeline.close()

    if save:
        writer = ScanHistoryWriter(ensure_output_dir(settings))
        csv_path = writer.record(result, source_image_uri=image.uri)
        console.print(f"[dim]Saved to {csv_path}[/dim]")
    return result


@app.command()
def scan(
    image_path: Path = typer.Argument(..., help="Photo of the card to scan"),
    save: bool = typer.Option(True, "--save/--no-save", help="Append the result to the scan history CSV"),
):
    """Scan a card photo: OCR, validate, check authenticity and price it."""

    console.print(Panel.fit(
        "[bold blue]Pokemon Card Scanner[/bold blue]\n"
        f"[dim]{image_path}[/dim]",
        border_style="blue"
    ))

    try:
        result = asyncio.run(_run_scan(image_path, save))
    except ScanError as e:
        console.print(f"[red]❌ Scan failed: {e.message}[/red]")
        raise typer.Exit(1)
    except CardScannerError as e:
        console.print(f"[red]❌ {e.message}[/red]")
        logger.error("Scan setup error", error=str(e))
        raise typer.Exit(1)

    console.print(_result_table(result))


@app.command()
def parse(
    text_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="File holding raw OCR text"),
):
    """Parse raw OCR text into card fields without calling any service."""
    card_info = parse_card_info(text_file.read_text(encoding="utf-8"))
    console.print(_card_info_table(card_info, "Parsed Card"))


@app.command()
def config():
    """Show which collaborators the current settings select."""
    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")

    table.add_row("OCR backend", settings.OCR_BACKEND)
    table.add_row("Google Vision", "configured" if settings.vision_configured else "not configured")
    table.add_row("Pokemon TCG API key", "set" if settings.POKEMON_TCG_API_KEY else "not set")
    table.add_row("TCGPlayer", "configured" if settings.tcgplayer_configured else "not configured")
    table.add_row(
        "Price Tracker",
        "configured" if settings.price_tracker_configured else "not configured",
    )
    table.add_row("Mock prices", "yes" if settings.mock_prices_enabled else "no")
    table.add_row("API timeout", f"{settings.API_TIMEOUT_SECONDS:g}s")
    table.add_row("Output directory", settings.OUTPUT_DIR)
    table.add_row("Log level", settings.LOG_LEVEL)
    console.print(table)


if __name__ == "__main__":
    app()
