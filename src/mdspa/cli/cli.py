"""CLI entrypoint: Typer app definition and command registration"""

import typer

from mdspa.cli.commands import build_cmd, render_cmd


app = typer.Typer(name="mdspa", no_args_is_help=True, help="Markdown tree -> single-page-app static site")

app.command(name="build")(build_cmd)
app.command(name="render")(render_cmd)
