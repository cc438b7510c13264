"""Typer CLI for running single decisions against manifest files."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional, Tuple, Union

import typer
import yaml
from pydantic import ValidationError

from ..config import ControllerConfig, load_config
from ..controller import InMemoryResourceStore, Reconciler
from ..core.exceptions import AutoscalerError
from ..core.logging import configure_logging
from ..engine import ReplicaDecisionEngine, StaticDemandEvaluator
from ..resources import Autoscaler, TargetWorkload, ensure_utc, load_manifest

LOGGER = logging.getLogger(__name__)

app = typer.Typer(help="Replica autoscaler decision engine")


def _parse_now(value: Optional[str]) -> datetime:
    if not value:
        return datetime.now(timezone.utc)
    try:
        return ensure_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError as exc:
        raise typer.BadParameter(f"Invalid timestamp '{value}'") from exc


def _load(path: Path) -> Union[Autoscaler, TargetWorkload]:
    try:
        return load_manifest(path)
    except ValidationError as exc:
        raise typer.BadParameter(f"{path} is not a valid manifest:\n{exc}") from exc
    except (FileNotFoundError, ValueError, yaml.YAMLError) as exc:
        raise typer.BadParameter(f"Could not load {path}: {exc}") from exc


def _load_pair(autoscaler_path: Path, target_path: Path) -> Tuple[Autoscaler, TargetWorkload]:
    autoscaler = _load(autoscaler_path)
    target = _load(target_path)
    if not isinstance(autoscaler, Autoscaler):
        raise typer.BadParameter(f"{autoscaler_path} is not an autoscaler manifest")
    if not isinstance(target, TargetWorkload):
        raise typer.BadParameter(f"{target_path} is not a workload manifest")
    return autoscaler, target


def _setup(config_path: Optional[Path], overrides: List[str]) -> ControllerConfig:
    config = load_config(config_path, overrides)
    configure_logging(
        config.logging.level,
        Path(config.logging.log_dir) if config.logging.log_dir else None,
        json_logs=config.logging.json_logs,
        stream=sys.stderr,
    )
    return config


def _fail(exc: AutoscalerError) -> None:
    typer.echo(json.dumps(exc.to_dict()), err=True)
    raise typer.Exit(code=1)


@app.command()
def decide(
    autoscaler_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Autoscaler manifest"),
    target_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Target workload manifest"),
    candidate: int = typer.Option(..., "--candidate", "-c", help="Replica suggestion to feed the engine"),
    now: Optional[str] = typer.Option(None, "--now", help="ISO-8601 clock reading (default: current time)"),
    config_path: Optional[Path] = typer.Option(None, "--config", exists=True, dir_okay=False),
    overrides: List[str] = typer.Option([], "--set", help="Config override key.sub=value"),
) -> None:
    """Print the patch intents produced for AUTOSCALER_PATH and TARGET_PATH."""
    config = _setup(config_path, overrides)
    autoscaler, target = _load_pair(autoscaler_path, target_path)
    engine = ReplicaDecisionEngine(StaticDemandEvaluator(candidate), config.engine)
    try:
        decision = engine.decide(autoscaler, target, _parse_now(now))
    except AutoscalerError as exc:
        _fail(exc)
        return
    typer.echo(json.dumps(decision.to_dict(), indent=2))


@app.command()
def reconcile(
    autoscaler_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Autoscaler manifest"),
    target_path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Target workload manifest"),
    candidate: int = typer.Option(..., "--candidate", "-c", help="Replica suggestion to feed the engine"),
    now: Optional[str] = typer.Option(None, "--now", help="ISO-8601 clock reading (default: current time)"),
    config_path: Optional[Path] = typer.Option(None, "--config", exists=True, dir_okay=False),
    overrides: List[str] = typer.Option([], "--set", help="Config override key.sub=value"),
) -> None:
    """Reconcile once in memory and print the resulting resources as YAML."""
    config = _setup(config_path, overrides)
    autoscaler, target = _load_pair(autoscaler_path, target_path)

    store = InMemoryResourceStore()
    target = store.put_target(target)
    autoscaler = store.put_autoscaler(autoscaler)
    reconciler = Reconciler(store, StaticDemandEvaluator(candidate), config)
    namespace, name = autoscaler.metadata.namespace, autoscaler.metadata.name
    try:
        result = reconciler.reconcile(namespace, name, now=_parse_now(now))
    except AutoscalerError as exc:
        _fail(exc)
        return
    if result.skipped:
        LOGGER.warning("Reconcile skipped: %s", result.skipped_reason)

    output = {
        "autoscaler": store.get_autoscaler(namespace, name).to_dict(),
        "target": store.get_target(target.metadata.namespace, target.metadata.name).to_dict(),
    }
    typer.echo(yaml.safe_dump(output, sort_keys=False))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
