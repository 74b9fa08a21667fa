from __future__ import annotations

import signal
from pathlib import Path
from typing import Any

import typer

from . import cli_common, utils
from .configmanager import ConfigManager
from .engine import ReconciliationEngine
from .errors import AutoproxyError, ConfigStoreError, EventStreamError, MissingAliasError
from .filemanager import ConfigStore
from .models import Role

logger = ConfigManager.get_logger(__name__)

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    pretty_exceptions_enable=True,
    pretty_exceptions_show_locals=False,
    pretty_exceptions_short=True,
)


@app.callback()
def _main(
    env_file: str | None = typer.Option(
        None,
        "--env-file",
        envvar="AUTOPROXY_ENV_FILE",
        is_eager=True,
        callback=cli_common.load_config_callback,
        help="Dotenv file to load before reading configuration",
    ),
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        envvar="AUTOPROXY_LOG_LEVEL",
        help="Logging level (DEBUG, INFO, WARNING, ERROR)",
        show_default=True,
    ),
    log_file: str | None = typer.Option(
        None,
        "--log-file",
        envvar="AUTOPROXY_LOG_FILE",
        help="Also log to this file (or directory)",
    ),
) -> None:
    try:
        ConfigManager.configure_logging(log_level, log_file=log_file)
    except ValueError as e:
        raise typer.BadParameter(str(e), param_hint="--log-level") from None


def _domain_option() -> Any:
    return typer.Option(
        None,
        "--domain",
        envvar="AUTOPROXY_DOMAIN",
        help="Domain-name appended to container names and aliases [default: localhost]",
    )


def _conf_dir_option() -> Any:
    return typer.Option(None, "--conf-dir", envvar="AUTOPROXY_CONF_DIR", help="Managed nginx config directory")


def _ssl_dir_option() -> Any:
    return typer.Option(None, "--ssl-dir", envvar="AUTOPROXY_SSL_DIR", help="Root of <hostname>/fullchain.pem bundles")


def _build_engine(domain: str | None, conf_dir: Path | None, ssl_dir: Path | None) -> ReconciliationEngine:
    gateway = cli_common.build_gateway(
        role_label=ConfigManager.role_label(),
        hostname_label=ConfigManager.hostname_label(),
    )
    return ReconciliationEngine(
        gateway,
        base_domain=(domain or ConfigManager.base_domain()).strip("."),
        conf_dir=conf_dir or ConfigManager.conf_dir(),
        ssl_root=ssl_dir or ConfigManager.ssl_dir(),
        signal_name=ConfigManager.reload_signal(),
    )


@app.command("run")
def run(
    ctx: typer.Context,
    domain: str | None = _domain_option(),
    conf_dir: Path | None = _conf_dir_option(),
    ssl_dir: Path | None = _ssl_dir_option(),
) -> None:
    """Reconcile config files with running containers, then follow docker events."""
    logger.info("Invocation: %s", cli_common.format_cli_invocation_for_log(ctx))
    engine = _build_engine(domain, conf_dir, ssl_dir)
    logger.info("My hostname: %s", engine.base_domain)

    def _shutdown(signum: int, _frame: object) -> None:
        logger.info("Received %s, shutting down", signal.Signals(signum).name)
        engine.stop()

    previous = {signum: signal.getsignal(signum) for signum in (signal.SIGTERM, signal.SIGINT)}
    for signum in previous:
        signal.signal(signum, _shutdown)

    try:
        engine.run()
    except ConfigStoreError as e:
        logger.critical("Startup reconciliation failed: %s", e)
        raise typer.Exit(code=2) from None
    except EventStreamError as e:
        logger.critical("%s", e)
        raise typer.Exit(code=1) from None
    except AutoproxyError as e:
        logger.critical("Unable to reconcile containers: %s", e)
        raise typer.Exit(code=1) from None
    finally:
        for signum, handler in previous.items():
            # None means the handler was not installed from Python
            signal.signal(signum, handler if handler is not None else signal.SIG_DFL)


@app.command("scan")
def scan(
    domain: str | None = _domain_option(),
    ssl_dir: Path | None = _ssl_dir_option(),
) -> None:
    """Print the routing records for running labeled containers as YAML (dry run)."""
    import yaml

    engine = _build_engine(domain, Path("."), ssl_dir)
    try:
        summaries = engine.gateway.list_labeled_containers()
    except AutoproxyError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1) from None

    out: list[dict[str, object]] = []
    for summary in summaries:
        if not summary.running:
            continue
        try:
            record = engine.gateway.inspect(summary.id)
        except AutoproxyError as e:
            logger.warning("Skipping %s: %s", utils.short_id(summary.id), e)
            continue
        entry: dict[str, object] = {
            "id": record.short_id,
            "name": record.name,
            "role": record.role.raw,
        }
        if record.role.kind is Role.WEB:
            try:
                entry["routing"] = engine.routing_for(record).to_json()
            except MissingAliasError as e:
                entry["error"] = str(e)
        out.append(entry)

    print(yaml.safe_dump(out, allow_unicode=True, sort_keys=False, default_flow_style=False), end="")


@app.command("render")
def render(
    container: str = typer.Argument(..., help="Container id or name"),
    domain: str | None = _domain_option(),
    ssl_dir: Path | None = _ssl_dir_option(),
) -> None:
    """Print the config that would be written for one web container."""
    engine = _build_engine(domain, Path("."), ssl_dir)
    try:
        record = engine.gateway.inspect(container)
    except AutoproxyError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1) from None
    if record.role.kind is not Role.WEB:
        raise typer.BadParameter(f"Container {container} is not a web container (role={record.role.raw})")
    try:
        typer.echo(engine.render(record), nl=False)
    except MissingAliasError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=1) from None


@app.command("clean")
def clean(conf_dir: Path | None = _conf_dir_option()) -> None:
    """Delete every managed config file from the config directory."""
    store = ConfigStore(conf_dir or ConfigManager.conf_dir())
    try:
        removed = store.clean()
    except ConfigStoreError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=2) from None
    typer.echo(f"Removed {removed} managed config file(s) from {store.conf_dir}")


def main() -> None:
    app()
