"""
Templating Context

Responsibilities:
- Owns the normalized résumé data model (ResumeDocument)
- Groups and sorts content (CompanyGroups, CategoryGroups) and assembles contact lines
- Generates LaTeX source for the LaTeX template variants
- Builds the declarative document tree for the visual template variants
- Selects a renderer by (output format, template id)

Owns: Resume data model, section contract, per-variant styling data
Never: Performs file or network I/O on behalf of a render
"""

from resumeforge.contexts.templating.document_tree import Document
from resumeforge.contexts.templating.exceptions import (
    InvalidResumeStructureError,
    TemplateRenderError,
    UnknownTemplateError,
)
from resumeforge.contexts.templating.latex_generator import ResumeToLaTeXConverter
from resumeforge.contexts.templating.resume_data_structure import ResumeDocument
from resumeforge.contexts.templating.template_ids import LatexTemplate, VisualTemplate
from resumeforge.contexts.templating.tree_builder import DocumentTreeBuilder

__all__ = [
    # Data structure classes
    "ResumeDocument",
    "Document",
    # Template identifiers
    "LatexTemplate",
    "VisualTemplate",
    # Renderers
    "ResumeToLaTeXConverter",
    "DocumentTreeBuilder",
    # Errors
    "InvalidResumeStructureError",
    "TemplateRenderError",
    "UnknownTemplateError",
]
