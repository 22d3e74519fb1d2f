"""CLI entrypoint: Typer app definition and command registration"""

import typer

from sitepipe.cli.commands import build_cmd, init_cmd, source_cmd, sources_cmd


app = typer.Typer(name="sitepipe", no_args_is_help=True, help="Blog build pipeline and source snapshot tools")

app.command(name="build")(build_cmd)
app.command(name="sources")(sources_cmd)
app.command(name="source")(source_cmd)
app.command(name="init")(init_cmd)
