"""Command-line front end: mark files and jump between them from a shell or editor hook."""

import json
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Annotated, Any

import click
import typer
from loguru import logger

from harpoon_marks.core.config.store import ConfigStore
from harpoon_marks.core.marks.engine import MarkEngine
from harpoon_marks.core.navigation import Navigator
from harpoon_marks.errors import HarpoonError
from harpoon_marks.logging_config import configure_logging
from harpoon_marks.menu import MenuSession

app = typer.Typer(help="Harpoon: mark a few files per project and jump between them.")

RowOption = Annotated[int, typer.Option("--row", "-r", help="Cursor row (1-based)")]
ColOption = Annotated[int, typer.Option("--col", "-c", help="Cursor column (0-based)")]
FiletypeOption = Annotated[
    str | None,
    typer.Option("--filetype", "-t", help="Filetype of the file (default: its extension)"),
]
CurrentOption = Annotated[
    str | None,
    typer.Option("--current", help="File currently open in the editor"),
]


@dataclass
class CliEditor:
    """Editor stand-in for shell use: the current file and cursor come from options."""

    current: str | None = None
    row: int = 1
    col: int = 0
    filetype: str | None = None

    def current_filename(self) -> str | None:
        return self.current

    def current_filetype(self) -> str:
        if self.filetype is not None:
            return self.filetype
        if not self.current:
            return ""
        return Path(self.current).suffix.lstrip(".")

    def cursor(self) -> tuple[int, int]:
        return self.row, self.col

    def open_file(self, filename: str, *, row: int, col: int) -> None:
        typer.echo(f"{filename}:{row}:{col}")

    def notify(self, message: str) -> None:
        typer.echo(message)


@dataclass
class CliState:
    cwd: Path | None
    user_config: Path | None
    cache_config: Path | None
    mark_branch: bool | None
    zero_index: bool


@app.callback()
def main(
    ctx: typer.Context,
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable debug logging"),
    cwd: Annotated[
        Path | None,
        typer.Option("--cwd", help="Project directory (default: current directory)"),
    ] = None,
    user_config: Annotated[
        Path | None,
        typer.Option("--user-config", envvar="HARPOON_USER_CONFIG", help="User config file"),
    ] = None,
    cache_config: Annotated[
        Path | None,
        typer.Option("--cache-config", envvar="HARPOON_CACHE_CONFIG", help="Cache file"),
    ] = None,
    branch: Annotated[
        bool | None,
        typer.Option("--branch/--no-branch", help="Key marks by git branch (overrides config)"),
    ] = None,
    zero_index: bool = typer.Option(
        False, "--zero-index", envvar="HARPOON_ZERO_INDEX", help="Count mark indices from 0"
    ),
) -> None:
    configure_logging(verbose=verbose)
    ctx.obj = CliState(
        cwd=cwd,
        user_config=user_config,
        cache_config=cache_config,
        mark_branch=branch,
        zero_index=zero_index,
    )


def _open_engine(ctx: typer.Context, editor: CliEditor) -> MarkEngine:
    state: CliState = ctx.obj
    store = ConfigStore(state.user_config, state.cache_config, cwd=state.cwd)
    overrides: dict[str, Any] = {}
    if state.mark_branch is not None:
        overrides = {"global_settings": {"mark_branch": state.mark_branch}}
    store.load(overrides)
    return MarkEngine(store, editor, zero_index=state.zero_index)


def _finish(engine: MarkEngine) -> None:
    """Persist at the end of the invocation unless every change already saved."""
    if not engine.store.global_settings.save_on_change:
        engine.store.save()


@contextmanager
def _user_errors() -> Iterator[None]:
    try:
        yield
    except HarpoonError as e:
        logger.debug("Command failed: {!r}", e)
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e


def _parse_target(target: str) -> str | int:
    return int(target) if target.isdigit() else target


@app.command()
def add(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="File to mark"),
    row: RowOption = 1,
    col: ColOption = 0,
    filetype: FiletypeOption = None,
) -> None:
    """Mark a file."""
    engine = _open_engine(ctx, CliEditor(current=file, row=row, col=col, filetype=filetype))
    with _user_errors():
        engine.add(file)
    _finish(engine)


@app.command(name="rm")
def rm_cmd(
    ctx: typer.Context,
    target: str = typer.Argument(..., help="Marked file or mark index"),
) -> None:
    """Remove a mark, leaving its slot empty."""
    engine = _open_engine(ctx, CliEditor())
    with _user_errors():
        engine.remove(_parse_target(target))
    _finish(engine)


@app.command()
def toggle(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="File to mark or unmark"),
    row: RowOption = 1,
    col: ColOption = 0,
    filetype: FiletypeOption = None,
) -> None:
    """Mark a file, or remove its mark if it has one."""
    engine = _open_engine(ctx, CliEditor(current=file, row=row, col=col, filetype=filetype))
    with _user_errors():
        engine.toggle(file)
    _finish(engine)


@app.command()
def clear(ctx: typer.Context) -> None:
    """Remove every mark of the project."""
    engine = _open_engine(ctx, CliEditor())
    engine.clear_all()
    _finish(engine)


@app.command(name="list")
def list_cmd(
    ctx: typer.Context,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """List marks by their stable index, empty slots included."""
    engine = _open_engine(ctx, CliEditor())
    marks = engine.store.get_mark_config().marks
    # Show indices the way goto and rm read them.
    first = 0 if engine.zero_index else 1
    if output_json:
        data = {
            "project": engine.store.mark_config_key(),
            "count": engine.length(),
            "marks": [
                {"index": idx, **mark.to_payload()} for idx, mark in enumerate(marks, start=first)
            ],
        }
        typer.echo(json.dumps(data, indent=2))
        return

    if not marks:
        typer.echo("No marks.")
        return
    for idx, mark in enumerate(marks, start=first):
        if mark.is_tombstone:
            typer.echo(f"{idx}: (empty)")
        else:
            typer.echo(f"{idx}: {mark.filename}  [{mark.row}:{mark.col}]")


@app.command()
def goto(
    ctx: typer.Context,
    index: int = typer.Argument(..., help="Mark index"),
) -> None:
    """Print the location of mark INDEX as file:row:col."""
    engine = _open_engine(ctx, CliEditor())
    if not Navigator(engine).nav_file(index):
        typer.echo(f"No mark at index {index}.", err=True)
        raise typer.Exit(1)


@app.command(name="next")
def next_cmd(ctx: typer.Context, current: CurrentOption = None) -> None:
    """Print the location of the mark after the current file, wrapping around."""
    engine = _open_engine(ctx, CliEditor(current=current))
    if not Navigator(engine).nav_next():
        typer.echo("No marks.", err=True)
        raise typer.Exit(1)


@app.command(name="prev")
def prev_cmd(ctx: typer.Context, current: CurrentOption = None) -> None:
    """Print the location of the mark before the current file, wrapping around."""
    engine = _open_engine(ctx, CliEditor(current=current))
    if not Navigator(engine).nav_prev():
        typer.echo("No marks.", err=True)
        raise typer.Exit(1)


@app.command()
def menu(ctx: typer.Context) -> None:
    """Edit the mark list in $EDITOR. Reorder, delete or add lines, then save."""
    engine = _open_engine(ctx, CliEditor())
    session = MenuSession(engine)
    contents = session.open()
    edited = click.edit("\n".join(contents) + "\n", extension=".harpoon")
    if edited is None:
        typer.echo("Mark list unchanged.")
        return
    with _user_errors():
        session.close(edited.splitlines(), force_save=True)
    _finish(engine)
    typer.echo(f"Saved {len(engine.to_ordered_export())} mark(s).")


@app.command()
def export(
    ctx: typer.Context,
    output_json: bool = typer.Option(False, "--json", "-j", help="Output as JSON"),
) -> None:
    """Print marks as quickfix lines (file:row:col: N: file), numbered densely."""
    engine = _open_engine(ctx, CliEditor())
    entries = engine.to_ordered_export()
    if output_json:
        typer.echo(json.dumps([asdict(e) for e in entries], indent=2))
        return
    for entry in entries:
        typer.echo(f"{entry.filename}:{entry.row}:{entry.col}: {entry.label}")


@app.command()
def status(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="File to check"),
) -> None:
    """Print M<index> if FILE is marked, nothing otherwise."""
    engine = _open_engine(ctx, CliEditor(current=file))
    result = engine.status(file)
    if result:
        typer.echo(result)


@app.command(name="store-offset")
def store_offset(
    ctx: typer.Context,
    file: str = typer.Argument(..., help="File being left"),
    row: RowOption = 1,
    col: ColOption = 0,
) -> None:
    """Remember the cursor position of a marked file (for buffer-leave hooks)."""
    engine = _open_engine(ctx, CliEditor(current=file, row=row, col=col))
    engine.store_cursor_offset(file)
    _finish(engine)


@app.command(name="set-at")
def set_at(
    ctx: typer.Context,
    index: int = typer.Argument(..., help="Slot to put the file in"),
    file: str = typer.Argument(..., help="File to mark"),
    row: RowOption = 1,
    col: ColOption = 0,
    filetype: FiletypeOption = None,
) -> None:
    """Mark FILE at slot INDEX, moving it if it is already marked."""
    engine = _open_engine(ctx, CliEditor(current=file, row=row, col=col, filetype=filetype))
    with _user_errors():
        engine.set_current_at(index)
    _finish(engine)


@app.command()
def squash(ctx: typer.Context) -> None:
    """Close the gaps left by removed marks. Later marks move to lower indices."""
    engine = _open_engine(ctx, CliEditor())
    engine.squash()
    _finish(engine)
