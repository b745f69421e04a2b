from __future__ import annotations

from typing import Any

import click
import typer
from typer.core import TyperGroup

from ecsdeploy import __version__
from ecsdeploy.cli.commands.deploy_cmd import build, deploy, push, update_service
from ecsdeploy.cli.commands.rollback_cmd import list_versions, rollback
from ecsdeploy.core.errors import ErrorCode


class DeployGroup(TyperGroup):
    """Root command group; bad arguments exit with ErrorCode.USER_ERROR."""

    def make_context(
        self,
        info_name: str | None,
        args: list[str],
        parent: click.Context | None = None,
        **extra: Any,
    ) -> click.Context:
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as e:
            e.exit_code = int(ErrorCode.USER_ERROR)
            raise

    def invoke(self, ctx: click.Context) -> Any:
        # Subcommand option parsing happens here
        try:
            return super().invoke(ctx)
        except click.UsageError as e:
            e.exit_code = int(ErrorCode.USER_ERROR)
            raise


app = typer.Typer(
    cls=DeployGroup,
    add_completion=False,
    no_args_is_help=True,
    rich_markup_mode="rich",
    help=(
        "Build, push and deploy container images to ECS, versioned by commit hash.\n\n"
        "Flow: resolve the commit hash, build the image, push it to ECR, register a "
        "new task definition, update the service and wait for it to stabilize."
    ),
)


# Commands
app.command()(deploy)
app.command()(build)
app.command()(push)
app.command("update-service")(update_service)
app.command()(rollback)
app.command("list-versions")(list_versions)


@app.command("help")
def help_cmd(ctx: typer.Context) -> None:
    """Show this help."""
    root = ctx.parent if ctx.parent is not None else ctx
    typer.echo(root.get_help())


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit(code=0)


@app.callback()
def _main(  # pyright: ignore[reportUnusedFunction]
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    pass


def main() -> None:
    app()
