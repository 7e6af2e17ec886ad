"""
LaTeX Generator

Converts a ResumeDocument to a standalone LaTeX document.

The pipeline is shared by every LaTeX variant: sections are selected,
grouped and escaped here, in the canonical order skills → experience →
education → projects → additional. The per-variant Jinja2 templates under
template/latex/{variant}/ only contribute formatting commands and spacing.
"""

from typing import Any, Dict, List, Optional, Union

from jinja2 import TemplateError

from resumeforge.contexts.templating.contact import build_contact_items
from resumeforge.contexts.templating.exceptions import TemplateRenderError
from resumeforge.contexts.templating.grouping import (
    group_experiences_by_company,
    group_skills,
    non_empty_sections,
)
from resumeforge.contexts.templating.logger import _log_debug
from resumeforge.contexts.templating.registries import TemplateRegistry
from resumeforge.contexts.templating.resume_data_structure import ResumeDocument
from resumeforge.contexts.templating.template_ids import LatexTemplate
from resumeforge.utils.latex_tools import to_latex, to_latex_list
from resumeforge.utils.text_processing import set_max_consecutive_blank_lines

SECTION_ORDER = ("skills", "experience", "education", "projects", "additional")

# Characters that break \href targets
_URL_ESCAPES = str.maketrans({"%": r"\%", "#": r"\#", "\\": "/"})


def to_latex_url(url: Optional[str]) -> str:
    """Escape a URL for use as an \\href target."""
    if not url:
        return ""
    return url.strip().translate(_URL_ESCAPES)


def _date_range(start: str, end: str) -> str:
    """Join escaped start/end dates with an en dash, dropping empty ends."""
    return " -- ".join(part for part in (start, end) if part)


class ResumeToLaTeXConverter:
    """Converts a ResumeDocument to LaTeX for one of the LaTeX variants."""

    def __init__(self, template_registry: TemplateRegistry = None):
        self.template_registry = template_registry or TemplateRegistry()

    # Context building (shared by all variants)

    def build_context(self, doc: ResumeDocument) -> Dict[str, Any]:
        """
        Build the escaped template context for a document.

        All strings in the returned context are already LaTeX-escaped; the
        templates must not escape again.

        Args:
            doc: Resume document

        Returns:
            Dict with header fields and one entry per section (empty lists
            for sections that are omitted)
        """
        info = doc.personal_info

        skill_groups = [
            {"category": to_latex(category), "skills": to_latex_list(names)}
            for category, names in group_skills(doc.skills).items()
        ]

        company_groups = []
        for company, entries in group_experiences_by_company(doc.experience).items():
            company_groups.append(
                {
                    "company": to_latex(company),
                    "location": to_latex(entries[0].location),
                    "positions": [
                        {
                            "position": to_latex(entry.position),
                            "date_range": _date_range(
                                to_latex(entry.start_date), to_latex(entry.display_end_date)
                            ),
                            "description": to_latex(entry.description),
                            "achievements": to_latex_list(entry.achievements),
                        }
                        for entry in entries
                    ],
                }
            )

        education = []
        for entry in doc.education:
            degree = to_latex(entry.degree)
            field = to_latex(entry.field)
            education.append(
                {
                    "degree": degree,
                    "field": field,
                    "degree_line": f"{degree} in {field}" if degree and field else degree or field,
                    "institution": to_latex(entry.institution),
                    "graduation_date": to_latex(entry.graduation_date),
                    "gpa": to_latex(entry.gpa),
                    "honors": to_latex_list(entry.honors),
                }
            )

        projects = [
            {
                "name": to_latex(project.name),
                "description": to_latex(project.description),
                "technologies": to_latex_list(project.technologies),
                "url": to_latex_url(project.url),
                "github": to_latex_url(project.github),
            }
            for project in doc.projects
        ]

        additional_sections = [
            {
                "title": to_latex(section.title),
                "title_upper": to_latex(section.title.upper()),
                "entries": to_latex_list(section.items),
            }
            for section in non_empty_sections(doc.additional_sections)
        ]

        return {
            "name": to_latex(info.full_name),
            "title": to_latex(info.profession_title),
            "contact_items": to_latex_list(build_contact_items(info)),
            "skill_groups": skill_groups,
            "company_groups": company_groups,
            "education": education,
            "projects": projects,
            "additional_sections": additional_sections,
        }

    @staticmethod
    def present_sections(context: Dict[str, Any]) -> List[str]:
        """Names of the sections with content, in canonical order."""
        content_keys = {
            "skills": "skill_groups",
            "experience": "company_groups",
            "education": "education",
            "projects": "projects",
            "additional": "additional_sections",
        }
        return [name for name in SECTION_ORDER if context[content_keys[name]]]

    # Rendering

    def _render_part(self, template: LatexTemplate, part: str, context: Dict[str, Any]) -> str:
        try:
            return self.template_registry.get_template(template, part).render(**context)
        except TemplateError as e:
            raise TemplateRenderError(
                f"Failed to render '{part}' for LaTeX template '{template.value}'",
                type_name=template.value,
                template_path=self.template_registry.get_template_path(template, part),
                original_error=e,
            ) from e

    def generate_section(
        self, doc: ResumeDocument, section: str, template: Union[LatexTemplate, str]
    ) -> str:
        """
        Generate one section of a document, or "" when the section is empty.

        Args:
            doc: Resume document
            section: One of SECTION_ORDER
            template: LaTeX template variant

        Returns:
            LaTeX for the section block
        """
        template = LatexTemplate.parse(template)
        if section not in SECTION_ORDER:
            raise ValueError(f"Unknown section '{section}' (expected one of: {', '.join(SECTION_ORDER)})")
        context = self.build_context(doc)
        if section not in self.present_sections(context):
            return ""
        return self._render_part(template, section, context)

    def generate_document(self, doc: ResumeDocument, template: Union[LatexTemplate, str]) -> str:
        """
        Generate a complete standalone LaTeX document.

        Args:
            doc: Resume document
            template: LaTeX template variant (LatexTemplate or its string id)

        Returns:
            Complete LaTeX document string

        Raises:
            UnknownTemplateError: If template is not a LaTeX template id
            TemplateRenderError: If a variant template fails to render
        """
        template = LatexTemplate.parse(template)
        context = self.build_context(doc)
        sections = self.present_sections(context)

        _log_debug(f"Generating LaTeX ({template.value}) with sections: {', '.join(sections) or 'none'}")

        preamble = self._render_part(template, "preamble", context)
        header = self._render_part(template, "header", context)
        rendered_sections = [self._render_part(template, name, context) for name in sections]

        try:
            document_template = self.template_registry.env.get_template("document.tex.jinja")
            generated_latex = document_template.render(
                preamble=preamble, header=header, sections=rendered_sections
            )
        except TemplateError as e:
            raise TemplateRenderError(
                "Failed to render LaTeX document frame",
                type_name=template.value,
                template_path=self.template_registry.latex_base_path / "document.tex.jinja",
                original_error=e,
            ) from e

        # Ensure generated output follows normalization rules (max 1 blank line)
        return set_max_consecutive_blank_lines(generated_latex, max_consecutive=1)


def generate_latex(doc: ResumeDocument, template: Union[LatexTemplate, str] = LatexTemplate.MODERN) -> str:
    """Convenience wrapper around ResumeToLaTeXConverter.generate_document."""
    return ResumeToLaTeXConverter().generate_document(doc, template)
