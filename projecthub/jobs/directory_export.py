"""Static export of the reconciled directory."""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

import click

from projecthub.errors import DirectoryLoadError
from projecthub.orchestrator import ProjectHubOrchestrator

logger = logging.getLogger(__name__)

DEFAULT_OUTPUT_PATH = "projects.json"


async def run_directory_export(
    *,
    orchestrator: ProjectHubOrchestrator | None = None,
    output_path: str | Path = DEFAULT_OUTPUT_PATH,
) -> dict[str, Any]:
    """Load the directory and write it as JSON to `output_path`."""
    job_orchestrator = orchestrator or ProjectHubOrchestrator()
    directory = await job_orchestrator.load_directory()

    payload = directory.to_dict()
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")

    logger.info(f"Wrote {len(directory.projects)} projects ({directory.source}) to {path}")
    return {"output_path": str(path), "projects": len(directory.projects), "source": directory.source}


@click.command()
@click.argument("output_path", default=DEFAULT_OUTPUT_PATH, type=click.Path(dir_okay=False))
def main(output_path: str) -> None:
    """Write the reconciled project directory to OUTPUT_PATH as JSON."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    try:
        result = asyncio.run(run_directory_export(output_path=output_path))
    except DirectoryLoadError as e:
        raise click.ClickException(str(e)) from e
    click.echo(f"Wrote {result['projects']} projects ({result['source']}) to {result['output_path']}")


if __name__ == "__main__":
    main()
