"""Command line interface for running pressflow workflows."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Optional

import typer

from pressflow.config import PressflowConfig, load_config
from pressflow.definitions import load_workflow
from pressflow.execute import WorkflowExecutor
from pressflow.nodes import build_default_registry
from pressflow.persistence import get_repository
from pressflow.services import InMemoryServiceClient, get_service_client

app = typer.Typer(help="CLI for pressflow workflows")

executions_app = typer.Typer(help="Commands for inspecting workflow executions")
app.add_typer(executions_app, name="executions")


def _setup(config_path: Optional[Path]) -> PressflowConfig:
    config = load_config(str(config_path) if config_path else None)
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return config


@app.callback()
def main() -> None:
    """pressflow CLI entry point."""
    pass


@app.command("run")
def run_workflow(
    workflow_file: Path = typer.Argument(..., exists=True, dir_okay=False),
    trigger: Optional[str] = typer.Option(
        None, help="JSON object used as the trigger payload"
    ),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file"),
) -> None:
    """
    Execute a workflow definition once.

    Loads the node graph from WORKFLOW_FILE (YAML or JSON), runs it against
    the configured services and execution store, and prints the resulting
    execution record.

    Example:
        pressflow run workflows/daily_news.yaml
        pressflow run workflows/daily_news.yaml --trigger '{"keywords": ["AI"]}'
    """
    config = _setup(config_path)
    definition = load_workflow(workflow_file)
    try:
        trigger_data = json.loads(trigger) if trigger else None
    except json.JSONDecodeError as e:
        raise typer.BadParameter(f"--trigger is not valid JSON: {e}") from e

    async def _run():
        async with get_service_client(config=config) as services:
            executor = WorkflowExecutor(
                build_default_registry(services),
                repository=get_repository(config=config),
                max_concurrency=config.engine.max_concurrency,
            )
            return await executor.run(definition.id, definition.nodes, trigger_data)

    execution = asyncio.run(_run())
    typer.echo(execution.model_dump_json(indent=2))


@app.command("nodes")
def list_node_types() -> None:
    """List the node types the engine can execute."""
    registry = build_default_registry(InMemoryServiceClient())
    for node_type in registry.node_types:
        typer.echo(node_type)


@executions_app.command("list")
def list_executions(
    workflow: Optional[str] = typer.Option(None, help="Only show this workflow rule"),
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file"),
) -> None:
    """List persisted workflow executions."""
    config = _setup(config_path)
    repository = get_repository(config=config)
    executions = asyncio.run(repository.list_executions(workflow))
    if not executions:
        typer.echo("No executions found")
        return
    for execution in executions:
        typer.echo(
            f"{execution.id}  {execution.workflow_rule_id}  {execution.status.value}  "
            f"{execution.started_at.isoformat()}"
        )


@executions_app.command("show")
def show_execution(
    execution_id: str,
    config_path: Optional[Path] = typer.Option(None, "--config", help="Config file"),
) -> None:
    """Print one execution record as JSON."""
    config = _setup(config_path)
    repository = get_repository(config=config)
    execution = asyncio.run(repository.get_execution(execution_id))
    if execution is None:
        typer.echo(f"Execution {execution_id} not found", err=True)
        raise typer.Exit(code=1)
    typer.echo(execution.model_dump_json(indent=2))


if __name__ == "__main__":
    app()
