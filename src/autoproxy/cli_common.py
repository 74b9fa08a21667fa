from __future__ import annotations

import shlex

import typer

from .configmanager import ConfigManager
from .docker.gateway import DockerGateway, RuntimeGateway


def load_config_callback(value: str | None) -> str | None:
    """Eager callback to load env file before other options are processed."""
    ConfigManager.load_dotenv(value)
    return value


def format_cli_invocation_for_log(ctx: typer.Context) -> str:
    info_name = (ctx.info_name or ctx.command_path or "autoproxy").strip()
    args = [a for a in (ctx.args or []) if a]
    return shlex.join([info_name, *args])


def build_gateway(*, role_label: str, hostname_label: str, api_version: str | None = None) -> RuntimeGateway:
    try:
        return DockerGateway(role_label=role_label, hostname_label=hostname_label, api_version=api_version)
    except RuntimeError as e:
        typer.echo(f"Docker unavailable: {e}", err=True)
        raise typer.Exit(code=1) from None
