import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from trax_compiler.cli.compile import compile_unit
from trax_compiler.cli.watch import watch
from trax_compiler.core.config import get_log_level

app = typer.Typer(
    name="trax-compiler",
    help="Trax compiler: expand @Data classes into framework-ready TypeScript.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("compile")(compile_unit)
app.command("watch")(watch)


@app.callback()
def configure_logging() -> None:
    logging.basicConfig(
        level=get_log_level(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
    )


def main() -> None:
    app()
