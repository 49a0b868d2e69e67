from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from trax_compiler.core.compile import compile_file, compile_source
from trax_compiler.errors import TraxError

console = Console()
err_console = Console(stderr=True)


def compile_unit(
    path: Annotated[str | None, typer.Argument(help="Path to a TypeScript file.")] = None,
    code: Annotated[str | None, typer.Option(help="Source code string to compile instead of a file path.")] = None,
    output: Annotated[
        str | None, typer.Option("--output", "-o", help="Output file (default: <name>.trax.ts next to the source).")
    ] = None,
    language: Annotated[str | None, typer.Option(help="Language name (ts, typescript or tsx).")] = None,
    stdout: Annotated[bool, typer.Option("--stdout", help="Print the generated code instead of writing it.")] = False,
) -> None:
    """Compile the @Data classes of a TypeScript unit."""
    if path is None and code is None:
        err_console.print("[red]Either a path or --code must be provided.[/red]")
        raise typer.Exit(code=2)

    try:
        if code is not None:
            typer.echo(compile_source(code, language=language), nl=False)
            return

        assert path is not None
        result, generated = compile_file(path, output=output, language=language, write=not stdout)
    except (TraxError, ValueError, FileNotFoundError) as err:
        err_console.print(f"[red]{escape(str(err))}[/red]")
        raise typer.Exit(code=1) from None

    if stdout:
        typer.echo(generated, nl=False)
        return
    status = "Compiled" if result.changed else "Unchanged"
    console.print(f"[green]{status}[/green] {escape(result.source_path)} -> {escape(str(result.output_path))}")
