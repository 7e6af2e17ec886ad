"""
Export Artifacts

Packages rendered output for delivery: file names, MIME types, clipboard
text and writing artifacts to disk.
"""

import os
import re
import shutil
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Union

from resumeforge.contexts.rendering.logger import log_artifact_written
from resumeforge.contexts.templating.dispatch import OutputFormat, render
from resumeforge.contexts.templating.resume_data_structure import ResumeDocument
from resumeforge.contexts.templating.template_ids import LatexTemplate, VisualTemplate
from resumeforge.utils.text_processing import collapse_whitespace

LATEX_MIME = "text/plain"
PDF_MIME = "application/pdf"
HTML_MIME = "text/html"

# Characters that would split or break a file name on common filesystems
UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')


@dataclass(frozen=True)
class ExportArtifact:
    """A named, typed export payload."""

    filename: str
    mime: str
    content: Union[str, bytes]

    @property
    def size(self) -> int:
        return len(self.content)


def export_filename(full_name: str, template: Union[LatexTemplate, VisualTemplate], extension: str) -> str:
    """
    Export file name for a résumé.

    Args:
        full_name: Candidate name; whitespace runs and path separators
            (or other characters unsafe in file names) become "_"
        template: Template id the artifact was rendered with
        extension: File extension without the dot

    Returns:
        "{name}_Resume_{TemplateDisplayName}.{ext}"

    Example:
        >>> export_filename("Jane  Q Doe", LatexTemplate.CLASSIC, "tex")
        'Jane_Q_Doe_Resume_Classic.tex'
    """
    name = collapse_whitespace(UNSAFE_FILENAME_CHARS.sub(" ", full_name), "_")
    return f"{name}_Resume_{template.display_name}.{extension.lstrip('.')}"


def export_latex(doc: ResumeDocument, template: Union[LatexTemplate, str]) -> ExportArtifact:
    """LaTeX source as a downloadable text/plain artifact."""
    template = LatexTemplate.parse(template)
    content = render(doc, template, OutputFormat.LATEX)
    return ExportArtifact(
        filename=export_filename(doc.personal_info.full_name, template, "tex"),
        mime=LATEX_MIME,
        content=content,
    )


def clipboard_text(doc: ResumeDocument, template: Union[LatexTemplate, str]) -> str:
    """The exact text export_latex would write, for copying to a clipboard."""
    return render(doc, LatexTemplate.parse(template), OutputFormat.LATEX)


def export_pdf(doc: ResumeDocument, template: Union[VisualTemplate, str]) -> ExportArtifact:
    """PDF bytes rendered from the visual template's document tree."""
    template = VisualTemplate.parse(template)
    content = render(doc, template, OutputFormat.PDF)
    return ExportArtifact(
        filename=export_filename(doc.personal_info.full_name, template, "pdf"),
        mime=PDF_MIME,
        content=content,
    )


def export_preview(doc: ResumeDocument, template: Union[VisualTemplate, str]) -> ExportArtifact:
    """Standalone HTML preview page."""
    template = VisualTemplate.parse(template)
    content = render(doc, template, OutputFormat.PREVIEW)
    return ExportArtifact(
        filename=export_filename(doc.personal_info.full_name, template, "html"),
        mime=HTML_MIME,
        content=content,
    )


def write_artifact(artifact: ExportArtifact, directory: Path) -> Path:
    """
    Write an artifact into a directory atomically.

    The content goes to a temporary file in the same directory first and is
    then moved into place, so readers never see a partial file.

    Args:
        artifact: Artifact to write
        directory: Target directory (created if missing)

    Returns:
        Path of the written file
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    target = directory / artifact.filename

    binary = isinstance(artifact.content, bytes)
    # Write to temp file first (atomic write pattern)
    temp_fd, temp_path = tempfile.mkstemp(dir=directory, suffix=".tmp")
    try:
        if binary:
            with os.fdopen(temp_fd, "wb") as f:
                f.write(artifact.content)
        else:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                f.write(artifact.content)

        shutil.move(temp_path, target)
    except Exception:
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise

    log_artifact_written(target, artifact.size)
    return target
