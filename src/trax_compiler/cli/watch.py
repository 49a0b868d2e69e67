import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from trax_compiler.core.compile import compile_file
from trax_compiler.core.config import get_output_suffix
from trax_compiler.errors import TraxError
from trax_compiler.watcher.watchfiles_adapter import SourceWatcher, _is_compilable

console = Console()
err_console = Console(stderr=True)


async def _compile_paths(paths: set[Path]) -> None:
    loop = asyncio.get_running_loop()
    for path in sorted(paths):
        try:
            result, _ = await loop.run_in_executor(None, compile_file, str(path))
        except (TraxError, ValueError, OSError) as err:
            err_console.print(f"[red]{escape(str(err))}[/red]")
            continue
        console.print(f"[green]Compiled[/green] {escape(str(path))} -> {escape(str(result.output_path))}")


def watch(
    directory: Annotated[str, typer.Argument(help="Directory to watch.")] = ".",
    initial: Annotated[bool, typer.Option(help="Compile every unit once before watching.")] = True,
) -> None:
    """Recompile TypeScript units whenever they change."""
    root = Path(directory)
    if not root.is_dir():
        err_console.print(f"[red]Not a directory: {escape(directory)}[/red]")
        raise typer.Exit(code=1)

    try:
        get_output_suffix()
    except ValueError as err:
        err_console.print(f"[red]{escape(str(err))}[/red]")
        raise typer.Exit(code=1) from None

    async def _run() -> None:
        if initial:
            await _compile_paths({p for p in root.rglob("*") if p.is_file() and _is_compilable(p)})
        watcher = SourceWatcher(root, _compile_paths)
        await watcher.start()
        try:
            await watcher.wait()
        finally:
            await watcher.stop()

    try:
        asyncio.run(_run())
    except KeyboardInterrupt:
        console.print("Stopped.")
