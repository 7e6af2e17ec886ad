#!/usr/bin/env python3
"""
Resume Store CLI

Lists, imports, removes and tailors résumés saved in the JSON résumé store
(RESUMEFORGE_STORE_PATH).

Commands:
    list    - Show saved résumés
    show    - Print one résumé as JSON
    import  - Save a résumé file (YAML or JSON) into the store
    delete  - Remove a résumé
    tailor  - Save a copy tailored to a job description

Examples:\n

    manage_resumes.py list

    manage_resumes.py import data/jane.yaml

    manage_resumes.py tailor l9x2k3abcd data/job.yaml
"""

import json
import os
from pathlib import Path

import typer
from dotenv import load_dotenv
from omegaconf import OmegaConf
from typing_extensions import Annotated

from resumeforge.contexts.targeting import JobDescription, tailor_resume
from resumeforge.contexts.targeting.logger import setup_targeting_logger
from resumeforge.contexts.templating.resume_data_structure import ResumeDocument
from resumeforge.utils.resume_repository import JsonFileResumeRepository, generate_resume_id
from resumeforge.utils.text_processing import truncate_display
from resumeforge.utils.timestamp import format_timestamp, now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))

app = typer.Typer(
    help="Manage the saved résumé store",
    add_completion=False,
    invoke_without_command=True,
)

StoreOption = Annotated[
    Path,
    typer.Option("--store", "-s", help="Résumé store file (default: RESUMEFORGE_STORE_PATH)"),
]


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _repository(store: Path) -> JsonFileResumeRepository:
    return JsonFileResumeRepository(path=store) if store else JsonFileResumeRepository()


def _require(repo: JsonFileResumeRepository, resume_id: str) -> ResumeDocument:
    doc = repo.get(resume_id)
    if doc is None:
        typer.secho(f"Error: no résumé with id '{resume_id}'\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return doc


@app.command("list")
def list_command(store: StoreOption = None):
    """Show saved résumés, most recently updated first."""
    docs = _repository(store).list()
    if not docs:
        typer.echo("No saved résumés.")
        return

    docs.sort(key=lambda d: d.updated_at or d.created_at, reverse=True)
    typer.secho(f"{'ID':<24} {'NAME':<32} {'TEMPLATE':<10} UPDATED", bold=True)
    for doc in docs:
        updated = format_timestamp(doc.updated_at or doc.created_at, relative=True) or "-"
        typer.echo(
            f"{doc.id:<24} {truncate_display(doc.name or doc.personal_info.full_name, 32):<32} "
            f"{doc.template.value:<10} {updated}"
        )


@app.command("show")
def show_command(
    resume_id: Annotated[str, typer.Argument(help="Résumé id")],
    store: StoreOption = None,
):
    """Print a saved résumé in the persisted JSON layout."""
    doc = _require(_repository(store), resume_id)
    typer.echo(json.dumps(doc.to_dict(), indent=2, ensure_ascii=False))


@app.command("import")
def import_command(
    resume_file: Annotated[
        Path,
        typer.Argument(help="Résumé file (.yaml, .yml or .json)", exists=True, dir_okay=False),
    ],
    store: StoreOption = None,
):
    """Save a résumé file into the store, assigning an id when it has none."""
    try:
        doc = ResumeDocument.from_file(resume_file)
    except (OSError, ValueError) as e:
        typer.secho(f"Error: could not load {resume_file}: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    if not doc.id:
        doc = doc.evolve(id=generate_resume_id())
    if not doc.name:
        doc = doc.evolve(name=doc.personal_info.full_name)

    stored = _repository(store).put(doc)
    typer.secho(f"✓ Saved '{stored.name}'", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  ID: {stored.id}")


@app.command("delete")
def delete_command(
    resume_id: Annotated[str, typer.Argument(help="Résumé id")],
    store: StoreOption = None,
):
    """Remove a saved résumé."""
    if not _repository(store).delete(resume_id):
        typer.secho(f"Error: no résumé with id '{resume_id}'\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    typer.secho(f"✓ Deleted {resume_id}", fg=typer.colors.GREEN, bold=True)


@app.command("tailor")
def tailor_command(
    resume_id: Annotated[str, typer.Argument(help="Id of the résumé to tailor")],
    job_file: Annotated[
        Path,
        typer.Argument(
            help="Job description YAML/JSON (title, company, description, requirements, preferredSkills)",
            exists=True,
            dir_okay=False,
        ),
    ],
    store: StoreOption = None,
):
    """
    Save a copy of a résumé tailored to a job description.

    Skills matching the job's keywords move first and position descriptions
    mention the top keywords. The original résumé is left unchanged.
    """
    repo = _repository(store)
    doc = _require(repo, resume_id)
    job = JobDescription.from_dict(OmegaConf.to_container(OmegaConf.load(job_file), resolve=True))

    setup_targeting_logger(LOGS_PATH / f"target_{now()}", company=job.company)
    tailored = repo.put(tailor_resume(doc, job))

    typer.secho(f"✓ Saved '{tailored.name}'", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  ID: {tailored.id}")


if __name__ == "__main__":
    app()
