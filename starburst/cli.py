"""Typer CLI entrypoint."""

from __future__ import annotations

import json
import logging
import sys

import typer
import uvicorn
from argon2.exceptions import HashingError

from starburst.api import Gateway
from starburst.core.config_loader import load_config
from starburst.core.credentials import generate_salt, hash_password
from starburst.core.errors import StarburstError
from starburst.core.model import (
    DEFAULT_ITERATIONS,
    DEFAULT_MEMORY_COST_KIB,
    DEFAULT_PARALLELISM,
    GatewayConfig,
)
from starburst.web import create_app

app = typer.Typer(help="See the status of devices and send Wake-on-LAN packets")

CONFIG_OPTION = typer.Option(
    "config.json",
    "--config",
    "-c",
    envvar="STARBURST_CONFIG",
    help="Path to the config file",
)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _config_summary(config: GatewayConfig) -> list[str]:
    lines = [f"Name: {config.name or '(unset)'}"]
    if config.credential is None:
        lines.append("Password: (unset, wake requests are disabled)")
    else:
        lines.append("Password: (set)")
        lines.append(f"    Memory: {config.credential.memory_cost_kib}")
        lines.append(f"    Iterations: {config.credential.iterations}")
        lines.append(f"    Parallelism: {config.credential.parallelism}")
    lines.append("Servers:")
    for index, device in enumerate(config.devices):
        lines.append(f"    {index}:")
        lines.append(f"        Name: {device.name}")
        lines.append(f"        Hostname: {device.hostname}")
        lines.append(f"        MAC: {device.mac or '(unset)'}")
    return lines


@app.command("serve")
def serve(
    config: str = CONFIG_OPTION,
    port: int = typer.Option(
        8080, "--port", "-p", envvar="STARBURST_PORT", min=0, max=65535, help="Port to listen on"
    ),
    host: str = typer.Option("0.0.0.0", "--host", envvar="STARBURST_HOST", help="Address to bind"),
    verbose: bool = typer.Option(False, "--verbose", "-v", envvar="STARBURST_VERBOSE", help="Verbose logging"),
) -> None:
    """Serve the status page and wake routes over HTTP."""
    _configure_logging(verbose)
    try:
        gateway_config = load_config(config)
    except StarburstError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    if verbose:
        typer.echo(f"Port: {port}")
        for line in _config_summary(gateway_config):
            typer.echo(line)

    web_app = create_app(gateway_config, verbose=verbose)
    typer.echo(f"Listening on port {port}")
    uvicorn.run(
        web_app,
        host=host,
        port=port,
        log_level="info" if verbose else "warning",
        access_log=False,
    )


@app.command("status")
def status(config: str = CONFIG_OPTION) -> None:
    """Probe every configured server and print whether it is up."""
    try:
        gateway = Gateway.from_file(config)
        view = gateway.status()
        if not view.devices:
            typer.echo("No servers configured")
            return

        for device in view.devices:
            state = "up" if device.reachable else "down"
            wol = " [wol]" if device.controllable else ""
            typer.echo(f"{device.index}: {device.name} {state}{wol}")
    except StarburstError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None


@app.command("check-config")
def check_config(config: str = CONFIG_OPTION) -> None:
    """Validate the config file and print a summary."""
    try:
        gateway_config = load_config(config)
    except StarburstError as exc:
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from None

    for line in _config_summary(gateway_config):
        typer.echo(line)


def _read_password(password: str | None) -> str:
    if password == "-":
        return sys.stdin.read().strip()
    if password is not None:
        return password.strip()
    return typer.prompt("Enter password", hide_input=True).strip()


@app.command("hash-password")
def hash_password_command(
    password: str | None = typer.Argument(
        None,
        envvar="STARBURST_PASSWORD",
        show_envvar=False,
        help="Password to hash, '-' to read stdin. Prompted for when omitted.",
    ),
    salt: str | None = typer.Option(
        None, "--salt", "-s", envvar="STARBURST_SALT", help="Salt to use. Random when omitted."
    ),
    memory: int = typer.Option(
        DEFAULT_MEMORY_COST_KIB, "--memory", envvar="STARBURST_MEMORY", help="Memory cost in KiB"
    ),
    iterations: int = typer.Option(
        DEFAULT_ITERATIONS, "--iterations", envvar="STARBURST_ITERATIONS", help="Number of iterations"
    ),
    parallelism: int = typer.Option(
        DEFAULT_PARALLELISM, "--parallelism", envvar="STARBURST_PARALLELISM", help="Number of lanes"
    ),
    as_json: bool = typer.Option(False, "--json", "-j", envvar="STARBURST_JSON", help="Print JSON"),
) -> None:
    """Hash a password for the "password" section of the config file.

    Leading and trailing whitespace is removed from the password.
    """
    secret = _read_password(password)
    salt = salt or generate_salt()
    try:
        digest = hash_password(
            secret,
            salt,
            memory_cost_kib=memory,
            iterations=iterations,
            parallelism=parallelism,
        )
    except (HashingError, OverflowError) as exc:
        typer.echo(f"Error: could not hash password: {exc}", err=True)
        raise typer.Exit(code=1) from None

    if as_json:
        typer.echo(
            json.dumps(
                {
                    "hash": digest,
                    "salt": salt,
                    "advanced": {
                        "memory": memory,
                        "iterations": iterations,
                        "parallelism": parallelism,
                    },
                }
            )
        )
        return

    typer.echo(f"Hash: {digest}")
    typer.echo(f"Salt: {salt}")
    typer.echo("")
    typer.echo(f"Memory: {memory}")
    typer.echo(f"Iterations: {iterations}")
    typer.echo(f"Parallelism: {parallelism}")


def run() -> None:
    app()


if __name__ == "__main__":
    run()
