from __future__ import annotations

import logging
import os
import shlex
import shutil
from pathlib import Path
import typer

from behat_exposer import __version__
from behat_exposer.core import (
    config as config_core,
    envelope,
    listing,
    paths,
)
from behat_exposer.core.errors import BehatError
from behat_exposer.core.feature import FeatureFile, FeatureTemplate
from behat_exposer.core.interface import TemplateInterfaceGenerator
from behat_exposer.core.jsonio import dumps
from behat_exposer.core.parameters import extract_parameters
from behat_exposer.core.process import ToolMissingError
from behat_exposer.core.runner import DEFAULT_COMMAND, BehatCliRunner
from behat_exposer.core.service import FeatureExecutionService

app = typer.Typer(add_completion=False, help="behat-exposer - run parameterised Behat feature templates")


def _emit(out: dict) -> None:
    typer.echo(dumps(out))
    if out.get("ok") is True:
        raise typer.Exit(code=0)
    raise typer.Exit(code=1)


def _error(command: str, exc: Exception, details: dict) -> dict:
    error_type = getattr(exc, "error_type", "INVALID_ARGUMENT")
    if isinstance(exc, ToolMissingError):
        details = {"tool": exc.tool, **details}
    return envelope.err(command=command, error_type=error_type, message=str(exc), details=details)


def _parse_params(raw: list[str] | None) -> dict[str, str]:
    parsed: dict[str, str] = {}
    for item in raw or []:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise ValueError(f"Invalid --param {item!r} (expected key=value)")
        parsed[key] = value
    return parsed


@app.callback()
def main(
    log_level: str = typer.Option(
        os.environ.get("BEHAT_EXPOSER_LOG_LEVEL", "WARNING"),
        "--log-level",
        help="DEBUG|INFO|WARNING|ERROR (logs go to stderr)",
    ),
):
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ---- Global commands ----
@app.command()
def version(json_output: bool = typer.Option(False, "--json", help="Output JSON envelope")):
    if json_output:
        _emit(envelope.ok(command="version", data={"version": __version__}))
    typer.echo(f"behat-exposer {__version__}")


@app.command()
def doctor(json_output: bool = typer.Option(True, "--json")):
    try:
        cfg = config_core.build_config()
    except ValueError as exc:
        _emit(
            envelope.err(
                command="doctor",
                error_type="INVALID_ARGUMENT",
                message=str(exc),
                details={"config_path": str(config_core.config_path())},
            )
        )

    checks: list[dict] = []

    command = cfg.get_option("command") or DEFAULT_COMMAND
    argv = shlex.split(command)
    tool_path = shutil.which(argv[0]) if argv else None
    checks.append({"name": "tool.behat", "ok": tool_path is not None, "details": {"command": command, "path": tool_path}})

    workspace = cfg.get_option("workspace")
    checks.append(
        {
            "name": "workspace.path",
            "ok": paths.is_usable_workspace(workspace),
            "details": {
                "path": workspace,
                "override": os.environ.get("BEHAT_EXPOSER_WORKSPACE_DIR"),
            },
        }
    )

    runner_config = cfg.get_option("config")
    checks.append(
        {
            "name": "behat.config",
            "ok": not runner_config or Path(str(runner_config)).expanduser().is_file(),
            "details": {"path": runner_config},
        }
    )

    config_file = config_core.config_path()
    checks.append(
        {
            "name": "config.path",
            "ok": True,
            "details": {"path": str(config_file), "exists": config_file.exists()},
        }
    )

    _emit(envelope.ok(command="doctor", data={"checks": checks}))


@app.command("list")
def list_templates(
    path: str = typer.Option(..., "--path", help="Directory holding *.feature templates"),
    json_output: bool = typer.Option(True, "--json"),
):
    try:
        features = listing.list_feature_templates(path)
        out = envelope.ok(
            command="list",
            data={"path": path, "features": [{"file": k, "feature": v} for k, v in features.items()]},
        )
    except FileNotFoundError as exc:
        out = envelope.err(command="list", error_type="NOT_FOUND", message=str(exc), details={"path": path})
    except OSError as exc:
        out = envelope.err(command="list", error_type="INVALID_ARGUMENT", message=str(exc), details={"path": path})
    _emit(out)


@app.command()
def params(
    feature: str = typer.Option(..., "--feature"),
    json_output: bool = typer.Option(True, "--json"),
):
    try:
        feature_file = FeatureFile(feature)
        parsed = extract_parameters(feature_file.test_scenarios)
        out = envelope.ok(
            command="params",
            data={
                "feature": feature_file.name,
                "parameters": [
                    {
                        "key": p.key,
                        "name": p.name,
                        "type": p.type,
                        "default": p.default,
                        "description": p.description,
                        "source": p.source,
                    }
                    for p in parsed.values()
                ],
            },
        )
    except BehatError as exc:
        out = _error("params", exc, {"feature": feature})
    _emit(out)


@app.command()
def form(
    feature: str = typer.Option(..., "--feature"),
    html_output: bool = typer.Option(False, "--html", help="Print the bare HTML fragment"),
):
    try:
        feature_file = FeatureFile(feature)
        fragment = TemplateInterfaceGenerator().execute(feature_file)
    except BehatError as exc:
        _emit(_error("form", exc, {"feature": feature}))
    if html_output:
        typer.echo(fragment)
        raise typer.Exit(code=0)
    _emit(envelope.ok(command="form", data={"feature": feature_file.name, "html": fragment}))


@app.command()
def run(
    feature: str = typer.Option(..., "--feature"),
    param: list[str] | None = typer.Option(None, "--param", help="key=value, repeatable"),
    workspace: str | None = typer.Option(None, "--workspace", help="Directory for staged feature files"),
    runner_config: str | None = typer.Option(None, "--runner-config", help="Behat config file (--config)"),
    command: str | None = typer.Option(None, "--command", help="Behat command line, e.g. 'vendor/bin/behat'"),
    keep_staged: bool = typer.Option(False, "--keep-staged", help="Leave the staged feature file in the workspace"),
    json_output: bool = typer.Option(True, "--json"),
):
    details = {"feature": feature, "workspace": workspace}
    try:
        parameters = _parse_params(param)
        cfg = config_core.build_config(
            workspace=workspace,
            config=runner_config,
            command=command,
            keep_staged=keep_staged or None,
        )
        details["workspace"] = cfg.get_option("workspace")
        template = FeatureTemplate(FeatureFile(feature))
        service = FeatureExecutionService(BehatCliRunner(cfg), cfg)
        result = service.execute(template, parameters)
        artifacts = []
        if service.last_staged is not None:
            staged = service.last_staged
            artifacts.append(
                envelope.Artifact(
                    path=str(staged),
                    mime="text/x-gherkin",
                    purpose="staged_feature",
                    bytes=staged.stat().st_size,
                )
            )
        out = envelope.ok(
            command="run",
            data={"feature": template.name, "parameters": parameters, "result": result.to_dict()},
            artifacts=artifacts,
        )
    except (BehatError, ToolMissingError, ValueError) as exc:
        out = _error("run", exc, details)
    _emit(out)


if __name__ == "__main__":
    app()
