"""Command-line interface for the draft assistant."""

import asyncio
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .bot.commands import DraftCommandHandler
from .catalog.catalog import CardCatalog
from .catalog.loader import load_card_ratings, load_catalog
from .draft.sequencer import position_of
from .draft.session import DraftSession, Observation
from .resolve.name_resolver import NameResolver
from .store.context import RuntimeContext
from .store.draft_store import DraftStore
from .upload.imgur import ImgurUploader
from .utils.config import ensure_data_dirs, resolve_card_data_path, settings
from .utils.error_handler import DraftClawError, ErrorContext, handle_error, safe_execute
from .utils.log import configure_logging, get_logger
from .utils.validation import validate_file_path, validate_numeric_range

# Configure logging
configure_logging()
logger = get_logger(__name__)

# Rich console
console = Console()

MIN_POLL_INTERVAL_S = 0.1

app = typer.Typer(
    name="draft-claw",
    help="Eternal draft assistant - resolve OCR card text and track picks and votes",
    add_completion=False
)


def _load_catalog() -> CardCatalog:
    try:
        path = resolve_card_data_path()
    except FileNotFoundError as e:
        console.print(f"[red]❌ {escape(str(e))}[/red]")
        raise typer.Exit(1)
    return load_catalog(path)


def _load_ratings() -> dict:
    """Ratings are optional; a missing or broken file just means no ratings."""
    path = Path(settings.CARD_RATING_PATH)
    if not path.exists():
        return {}
    return safe_execute(
        load_card_ratings,
        path,
        context=ErrorContext(operation="load ratings", module=__name__, function="_load_ratings"),
        logger=logger,
        default_return={},
    )


def _build_session(with_uploader: bool = False) -> DraftSession:
    ensure_data_dirs()
    uploader = ImgurUploader() if with_uploader else None
    return DraftSession(
        catalog=_load_catalog(),
        store=DraftStore(),
        context=RuntimeContext(),
        ratings=_load_ratings(),
        uploader=uploader,
    )


def _fail(error: DraftClawError):
    console.print(f"[red]❌ {escape(error.message)}[/red]")
    raise typer.Exit(1)


@app.command()
def resolve(fragments: List[str] = typer.Argument(..., help="Recognized text fragments")):
    """Resolve noisy card text to catalog names."""
    catalog = _load_catalog()
    resolver = NameResolver(catalog)

    table = Table(title="Resolution")
    table.add_column("Fragment", style="cyan")
    table.add_column("Card", style="white")
    for fragment in fragments:
        name = resolver.resolve(fragment)
        table.add_row(fragment, name or "[red]Not resolved[/red]")
    console.print(table)


@app.command()
def label(pick_id: int = typer.Argument(..., help="Flat pick id (1-48)")):
    """Show pack/pick position for a pick id."""
    try:
        position = position_of(pick_id)
    except DraftClawError as e:
        _fail(e)

    table = Table(title=f"Pick {pick_id}")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Label", position.label)
    table.add_row("Pack", str(position.pack_number))
    table.add_row("Pick in pack", str(position.pick_in_pack))
    table.add_row("Cards offered", str(position.expected_option_count))
    console.print(table)


@app.command()
def observe(
    observation_file: Path = typer.Argument(..., help="Observation JSON file"),
    game_id: Optional[str] = typer.Option(None, "--game", "-g", help="Game id (defaults to the current game)"),
    upload: bool = typer.Option(True, "--upload/--no-upload", help="Upload the screenshot when needed"),
):
    """Resolve one observation and store it if anything changed."""
    session = _build_session(with_uploader=upload)
    try:
        observation = Observation.load(validate_file_path(observation_file, must_exist=True))
        result = asyncio.run(session.observe(observation, game_id=game_id))
    except DraftClawError as e:
        _fail(e)

    status = "[green]✓ Stored[/green]" if result.written else "[yellow]Unchanged[/yellow]"
    console.print(Panel(
        Text(result.record.selection_text.rstrip() or "(empty)"),
        title=f"{result.record.position.label} - {result.record.game_id}",
        subtitle=status,
        border_style="blue",
    ))


async def _watch(session: DraftSession, observation_file: Path, interval: float, max_polls: Optional[int]):
    context = ErrorContext(operation="poll observation", module=__name__, function="watch")
    polls = 0
    last_label = None
    while max_polls is None or polls < max_polls:
        polls += 1
        if observation_file.exists():
            try:
                observation = Observation.load(observation_file)
                result = await session.observe(observation)
                if result.written or result.record.position.label != last_label:
                    last_label = result.record.position.label
                    console.print(f"[green]✓ {last_label}[/green] {len(result.record.offered_cards)} cards")
            except DraftClawError as e:
                # One bad poll never stops the loop
                handle_error(e, context, logger, reraise=False)
        await asyncio.sleep(interval)


@app.command()
def watch(
    observation_file: Path = typer.Argument(..., help="Observation JSON file rewritten by the capture side"),
    interval: Optional[float] = typer.Option(None, "--interval", "-i", help="Seconds between polls"),
    max_polls: Optional[int] = typer.Option(None, "--max-polls", help="Stop after this many polls"),
):
    """Poll an observation file and keep the current game up to date."""
    try:
        interval = validate_numeric_range(
            settings.POLL_INTERVAL_S if interval is None else interval,
            min_value=MIN_POLL_INTERVAL_S,
            field_name="interval",
        )
    except DraftClawError as e:
        _fail(e)
    session = _build_session(with_uploader=True)

    console.print(Panel.fit(
        "[bold blue]Draft Claw - WATCH Mode[/bold blue]\n"
        f"[dim]Polling {observation_file} every {interval}s, Ctrl+C to stop[/dim]",
        border_style="blue"
    ))
    try:
        asyncio.run(_watch(session, observation_file, interval, max_polls))
    except KeyboardInterrupt:
        console.print("\n[yellow]Stopped[/yellow]")


@app.command()
def show(game_id: Optional[str] = typer.Option(None, "--game", "-g", help="Game id")):
    """Show the latest selection of a game."""
    session = _build_session()
    try:
        record = session.last_record(game_id or session.current_game_id())
    except DraftClawError as e:
        _fail(e)

    committed = f" - picked {record.selected_card}" if record.is_committed else ""
    console.print(Panel(
        Text(record.selection_text.rstrip() or "(empty)"),
        title=f"{record.position.label}{committed}",
        border_style="blue",
    ))


@app.command()
def deck(game_id: Optional[str] = typer.Option(None, "--game", "-g", help="Game id")):
    """Show the latest decklist of a game."""
    session = _build_session()
    try:
        record = session.last_record(game_id or session.current_game_id())
    except DraftClawError as e:
        _fail(e)
    console.print(Panel(Text("\n".join(record.decklist_text) or "No data"), title="Deck", border_style="blue"))


@app.command()
def vote(
    user: str = typer.Argument(..., help="Voting user"),
    target: str = typer.Argument(..., help="1-based card number or partial card name"),
    game_id: Optional[str] = typer.Option(None, "--game", "-g", help="Game id (defaults to the user's game)"),
):
    """Vote for a card on the latest pick."""
    session = _build_session()
    try:
        record, index = session.vote(user, target, game_id=game_id)
    except DraftClawError as e:
        _fail(e)
    console.print(f"[green]✓ {user} voted for {record.offered_cards[index]} ({record.position.label})[/green]")


@app.command()
def commit(
    user: str = typer.Argument(..., help="Game owner"),
    game_id: Optional[str] = typer.Option(None, "--game", "-g", help="Game id (defaults to the user's game)"),
):
    """Commit the winning vote for the latest pick."""
    session = _build_session()
    try:
        result = session.commit(user, game_id=game_id)
    except DraftClawError as e:
        _fail(e)

    note = "" if result.changed else " (already committed)"
    console.print(f"[green]✓ {result.record.position.label}: {result.card_name}{note}[/green]")


@app.command("new-game")
def new_game(owner: Optional[str] = typer.Option(None, "--owner", "-o", help="Owner user id")):
    """Start a new game and make it current."""
    session = _build_session()
    game = session.new_game(owner=owner)
    console.print(f"[green]✓ New game [bold]{game.game_id}[/bold][/green]")


@app.command()
def own(
    user: str = typer.Argument(..., help="User id"),
    game_id: str = typer.Argument(..., help="Game id"),
):
    """Register a user to a game and claim ownership."""
    session = _build_session()
    try:
        game = session.own_game(user, game_id)
    except DraftClawError as e:
        _fail(e)
    console.print(escape(f"✓ Game [{game.game_id}] is now owned by [{user}]"), style="green")


@app.command()
def card(name: str = typer.Argument(..., help="Card name or part of it")):
    """Look up one card."""
    catalog = _load_catalog()
    resolver = NameResolver(catalog)
    try:
        found = catalog.get(resolver.resolve_strict(name))
    except DraftClawError as e:
        _fail(e)

    table = Table(title=found.name)
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="white")
    table.add_row("Cost", f"{found.cost}{found.influence_symbols}")
    table.add_row("Type", str(found.card_type))
    table.add_row("Rarity", found.rarity.label)
    if found.has_stats:
        table.add_row("Stats", f"{found.attack}/{found.health}")
    table.add_row("Text", found.card_text)
    table.add_row("Image", found.image_url or "-")
    console.print(table)


@app.command()
def ratings(limit: int = typer.Option(20, "--limit", "-n", help="Rows to show")):
    """List loaded card ratings."""
    loaded = _load_ratings()
    if not loaded:
        console.print(f"[yellow]⚠ No ratings loaded from {settings.CARD_RATING_PATH}[/yellow]")
        raise typer.Exit(1)

    table = Table(title=f"Card ratings ({settings.CARD_RATING_FORMAT})")
    table.add_column("Card", style="cyan")
    table.add_column("Rating", style="white")
    for name in sorted(loaded)[:limit]:
        table.add_row(name, loaded[name])
    console.print(table)
    console.print(f"[dim]{len(loaded)} cards rated[/dim]")


@app.command()
def chat(user: str = typer.Argument(..., help="User id the messages are sent as")):
    """Interactive prompt that answers !draft / !card / !ping messages."""
    handler = DraftCommandHandler(_build_session())
    console.print(Panel.fit(
        "[bold blue]Draft Claw - CHAT Mode[/bold blue]\n"
        "[dim]Type !draft help, empty line or Ctrl+D to exit[/dim]",
        border_style="blue"
    ))
    while True:
        try:
            line = console.input("[bold]> [/bold]")
        except (EOFError, KeyboardInterrupt):
            break
        if not line.strip():
            break
        reply = handler.safe_handle(user, line)
        if reply is not None:
            console.print(reply, markup=False, highlight=False)


if __name__ == "__main__":
    app()
