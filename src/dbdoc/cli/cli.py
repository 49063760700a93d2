"""CLI application for database documentation."""

import typer

from dbdoc.cli.commands.diagram import generate, inspect

app = typer.Typer(
    help="dbdoc - PlantUML ER diagrams from database catalogs",
    no_args_is_help=True,
)

app.command("generate")(generate)
app.command("inspect")(inspect)


if __name__ == "__main__":
    app()
