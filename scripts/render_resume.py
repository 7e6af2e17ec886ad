#!/usr/bin/env python3
"""
Resume Rendering CLI

Renders a résumé file (YAML or JSON) to LaTeX, PDF or an HTML preview, and
compiles LaTeX exports locally or through remote compilation services.

Commands:
    latex     - Export LaTeX source for a LaTeX template
    pdf       - Export a PDF for a visual template
    preview   - Export the HTML preview for a visual template
    compile   - Compile a LaTeX template to PDF (local compiler or remote services)
    templates - List the templates each output format accepts

Examples:\n

    render_resume.py latex data/jane.yaml --template classic

    render_resume.py pdf data/jane.yaml -t executive -o outs/results

    render_resume.py compile data/jane.yaml -t modern --remote

    render_resume.py templates
"""

import os
import tempfile
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from typing_extensions import Annotated

from resumeforge.contexts.rendering.compile_service import (
    CompilationServiceError,
    compile_document,
    fallback_page,
)
from resumeforge.contexts.rendering.compiler import compile_resume
from resumeforge.contexts.rendering.exporter import (
    HTML_MIME,
    ExportArtifact,
    clipboard_text,
    export_filename,
    export_latex,
    export_pdf,
    export_preview,
    write_artifact,
)
from resumeforge.contexts.rendering.logger import setup_rendering_logger
from resumeforge.contexts.templating.dispatch import OutputFormat, available_templates
from resumeforge.contexts.templating.exceptions import (
    InvalidResumeStructureError,
    UnknownTemplateError,
)
from resumeforge.contexts.templating.logger import setup_templating_logger
from resumeforge.contexts.templating.resume_data_structure import ResumeDocument
from resumeforge.contexts.templating.template_ids import LatexTemplate
from resumeforge.utils.timestamp import now

load_dotenv()
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))
RESULTS_PATH = Path(os.getenv("RESULTS_PATH", "outs/results"))


app = typer.Typer(
    help="Render résumé files to LaTeX, PDF and HTML previews",
    add_completion=False,
    invoke_without_command=True,
)


@app.callback()
def main(ctx: typer.Context):
    """Show help by default when no command is provided."""
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


def _load(resume_file: Path) -> ResumeDocument:
    try:
        return ResumeDocument.from_file(resume_file)
    except (OSError, ValueError) as e:
        typer.secho(f"Error: could not load {resume_file}: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)


def _export(label: str, build, output_dir: Path) -> None:
    """Run an export function and write its artifact, reporting errors."""
    try:
        artifact: ExportArtifact = build()
    except (UnknownTemplateError, InvalidResumeStructureError) as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    path = write_artifact(artifact, output_dir)
    typer.secho(f"✓ {label} written", fg=typer.colors.GREEN, bold=True)
    typer.echo(f"  File: {path}")
    typer.echo(f"  Size: {artifact.size} bytes\n")


ResumeFileArg = Annotated[
    Path,
    typer.Argument(help="Résumé file (.yaml, .yml or .json)", exists=True, dir_okay=False),
]
OutputDirOption = Annotated[
    Path,
    typer.Option("--output-dir", "-o", help="Directory for the exported file"),
]


@app.command("latex")
def latex_command(
    resume_file: ResumeFileArg,
    template: Annotated[
        str, typer.Option("--template", "-t", help="LaTeX template (modern, classic, minimal)")
    ] = "modern",
    output_dir: OutputDirOption = RESULTS_PATH,
    stdout: Annotated[
        bool, typer.Option("--stdout", help="Print the source instead of writing a file")
    ] = False,
):
    """
    Export LaTeX source.

    Examples:\n

        $ render_resume.py latex jane.yaml -t classic

        $ render_resume.py latex jane.yaml --stdout | pbcopy
    """
    doc = _load(resume_file)
    if stdout:
        try:
            typer.echo(clipboard_text(doc, template), nl=False)
        except UnknownTemplateError as e:
            typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
            raise typer.Exit(code=1)
        return

    setup_templating_logger(LOGS_PATH / f"template_{now()}", output_format="latex")
    _export("LaTeX source", lambda: export_latex(doc, template), output_dir)


@app.command("pdf")
def pdf_command(
    resume_file: ResumeFileArg,
    template: Annotated[
        str,
        typer.Option("--template", "-t", help="Visual template (modern, executive, creative, tech, elegant)"),
    ] = "modern",
    output_dir: OutputDirOption = RESULTS_PATH,
):
    """Export a PDF rendered from a visual template."""
    doc = _load(resume_file)
    setup_rendering_logger(LOGS_PATH / f"render_{now()}", template=template)
    _export("PDF", lambda: export_pdf(doc, template), output_dir)


@app.command("preview")
def preview_command(
    resume_file: ResumeFileArg,
    template: Annotated[
        str,
        typer.Option("--template", "-t", help="Visual template (modern, executive, creative, tech, elegant)"),
    ] = "modern",
    output_dir: OutputDirOption = RESULTS_PATH,
):
    """Export the HTML preview page for a visual template."""
    doc = _load(resume_file)
    setup_rendering_logger(LOGS_PATH / f"render_{now()}", template=template)
    _export("Preview", lambda: export_preview(doc, template), output_dir)


@app.command("compile")
def compile_command(
    resume_file: ResumeFileArg,
    template: Annotated[
        str, typer.Option("--template", "-t", help="LaTeX template (modern, classic, minimal)")
    ] = "modern",
    output_dir: OutputDirOption = RESULTS_PATH,
    remote: Annotated[
        bool,
        typer.Option("--remote/--local", help="Use remote compilation services instead of the local compiler"),
    ] = False,
    num_passes: Annotated[
        int,
        typer.Option("--passes", "-p", help="Number of local compiler passes", min=1, max=5),
    ] = 2,
    verbose: Annotated[
        bool, typer.Option("--verbose", "-v", help="Show detailed compilation output")
    ] = False,
):
    """
    Compile a LaTeX template to PDF.

    Remote compilation tries each configured provider in order. When all of
    them fail, an HTML page with the LaTeX source and the provider errors is
    written instead so the résumé can be compiled by hand.

    Examples:\n

        $ render_resume.py compile jane.yaml -t classic             # Local pdflatex

        $ render_resume.py compile jane.yaml -t classic --remote    # Remote services
    """
    doc = _load(resume_file)
    try:
        template_id = LatexTemplate.parse(template)
    except UnknownTemplateError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)

    typer.secho(f"\nCompiling: {doc.personal_info.full_name} ({template_id.value})", fg=typer.colors.BLUE, bold=True)

    if remote:
        setup_rendering_logger(LOGS_PATH / f"render_{now()}", template=template_id.value)
        try:
            _export("PDF", lambda: compile_document(doc, template_id), output_dir)
        except CompilationServiceError as e:
            tex_name = export_filename(doc.personal_info.full_name, template_id, "tex")
            page = ExportArtifact(
                filename=export_filename(doc.personal_info.full_name, template_id, "html"),
                mime=HTML_MIME,
                content=fallback_page(e, filename=tex_name),
            )
            path = write_artifact(page, output_dir)
            typer.secho("✗ All compilation services failed", fg=typer.colors.RED, bold=True)
            for error in e.errors:
                typer.secho(f"  - {error}", fg=typer.colors.RED)
            typer.echo(f"  Manual compilation page: {path}\n")
            raise typer.Exit(code=1)
        return

    artifact = export_latex(doc, template_id)
    with tempfile.TemporaryDirectory() as tmp:
        tex_file = write_artifact(artifact, Path(tmp))
        result = compile_resume(tex_file, output_dir=None, num_passes=num_passes, verbose=verbose)

    if result.success:
        typer.secho("✓ Compilation succeeded", fg=typer.colors.GREEN, bold=True)
        typer.echo(f"  Warnings: {len(result.warnings)}")
        typer.echo(f"  Pages: {result.page_count}")
        typer.echo(f"  PDF: {result.pdf_path}\n")
    else:
        typer.secho(f"✗ Compilation failed with {len(result.errors)} errors", fg=typer.colors.RED, bold=True)
        for error in result.errors[:10]:
            typer.secho(f"  - {error}", fg=typer.colors.RED)
        if len(result.errors) > 10:
            typer.echo(f"  ... and {len(result.errors) - 10} more")
        typer.echo("")

    raise typer.Exit(code=0 if result.success else 1)


@app.command("templates")
def templates_command(
    output_format: Annotated[
        Optional[str],
        typer.Argument(help="Output format (latex, tree, pdf, preview); all when omitted"),
    ] = None,
):
    """List the templates accepted by each output format."""
    try:
        formats = [OutputFormat.parse(output_format)] if output_format else list(OutputFormat)
    except ValueError as e:
        typer.secho(f"Error: {e}\n", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    for fmt in formats:
        names = ", ".join(template.value for template in available_templates(fmt))
        typer.echo(f"{fmt.value:<8} {names}")


if __name__ == "__main__":
    app()
