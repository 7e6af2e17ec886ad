"""
Render Dispatch

Uniform entry point over every renderer:

    render(doc, template, output_format) -> output

| Output format | Template family | Output            |
|---------------|-----------------|-------------------|
| latex         | LatexTemplate   | str (LaTeX source)|
| tree          | VisualTemplate  | Document          |
| pdf           | VisualTemplate  | bytes             |
| preview       | VisualTemplate  | str (HTML)        |

Renders are pure, so results can be memoized by RenderCache on
(document fingerprint, output format, template).
"""

from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, Union

from resumeforge.contexts.rendering.pdf_writer import write_pdf
from resumeforge.contexts.rendering.preview import render_preview_tree
from resumeforge.contexts.templating.exceptions import UnknownTemplateError
from resumeforge.contexts.templating.latex_generator import ResumeToLaTeXConverter
from resumeforge.contexts.templating.logger import log_render_result, log_render_start
from resumeforge.contexts.templating.resume_data_structure import ResumeDocument
from resumeforge.contexts.templating.template_ids import LatexTemplate, VisualTemplate
from resumeforge.contexts.templating.tree_builder import DocumentTreeBuilder

TemplateId = Union[LatexTemplate, VisualTemplate, str]


class OutputFormat(Enum):
    LATEX = "latex"
    TREE = "tree"
    PDF = "pdf"
    PREVIEW = "preview"

    @classmethod
    def parse(cls, value: Union["OutputFormat", str]) -> "OutputFormat":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            choices = ", ".join(member.value for member in cls)
            raise ValueError(f"Unknown output format '{value}' (expected one of: {choices})") from None


def template_family(output_format: Union[OutputFormat, str]) -> Type[Enum]:
    """Template enumeration accepted by an output format."""
    output_format = OutputFormat.parse(output_format)
    return LatexTemplate if output_format is OutputFormat.LATEX else VisualTemplate


def available_templates(output_format: Union[OutputFormat, str]) -> List[Enum]:
    """Template ids selectable for an output format, in declaration order."""
    return list(template_family(output_format))


class Renderer:
    """
    Renderer table keyed by output format.

    Holds the converter and tree builder so their template and style caches
    are shared across calls.
    """

    def __init__(
        self,
        latex_converter: ResumeToLaTeXConverter = None,
        tree_builder: DocumentTreeBuilder = None,
    ):
        self.latex_converter = latex_converter or ResumeToLaTeXConverter()
        self.tree_builder = tree_builder or DocumentTreeBuilder()
        self._renderers: Dict[OutputFormat, Callable[[ResumeDocument, Enum], Any]] = {
            OutputFormat.LATEX: self.latex_converter.generate_document,
            OutputFormat.TREE: self.tree_builder.build,
            OutputFormat.PDF: lambda doc, template: write_pdf(self.tree_builder.build(doc, template)),
            OutputFormat.PREVIEW: lambda doc, template: render_preview_tree(
                self.tree_builder.build(doc, template)
            ),
        }

    @staticmethod
    def resolve(template: TemplateId, output_format: Union[OutputFormat, str]) -> Tuple[OutputFormat, Enum]:
        """
        Validate a (format, template) pair.

        Raises:
            UnknownTemplateError: If template is unknown or belongs to the
                                  other template family
        """
        output_format = OutputFormat.parse(output_format)
        family = template_family(output_format)
        try:
            return output_format, family.parse(template)
        except UnknownTemplateError as e:
            raise UnknownTemplateError(
                getattr(template, "value", template),
                expected=f"{output_format.value} output",
                choices=family.choices(),
            ) from e

    def render(self, doc: ResumeDocument, template: TemplateId, output_format: Union[OutputFormat, str]) -> Any:
        output_format, template = self.resolve(template, output_format)
        log_render_start(doc.personal_info.full_name, output_format.value, template.value)
        result = self._renderers[output_format](doc, template)
        log_render_result(
            doc.personal_info.full_name, output_format.value, template.value, _size(result), cached=False
        )
        return result


def _size(result: Any) -> int:
    if isinstance(result, (str, bytes)):
        return len(result)
    return sum(1 for _ in result.walk())


_default_renderer: Optional[Renderer] = None


def _get_default_renderer() -> Renderer:
    global _default_renderer
    if _default_renderer is None:
        _default_renderer = Renderer()
    return _default_renderer


def render(
    doc: ResumeDocument,
    template: TemplateId,
    output_format: Union[OutputFormat, str] = OutputFormat.LATEX,
) -> Any:
    """
    Render a document with the renderer selected by (format, template).

    Args:
        doc: Resume document
        template: Template id; string ids are parsed against the family the
                  output format accepts
        output_format: OutputFormat or its string value

    Returns:
        str for latex/preview, Document for tree, bytes for pdf

    Raises:
        UnknownTemplateError: Unknown template id, or a LaTeX id passed for a
                              visual format (and vice versa)

    Example:
        >>> render(doc, "classic", "latex")[:14]
        '\\\\documentclass'
        >>> render(doc, LatexTemplate.CLASSIC, "pdf")
        Traceback (most recent call last):
        UnknownTemplateError: ...
    """
    return _get_default_renderer().render(doc, template, output_format)


class RenderCache:
    """
    Memoizes renders by (document fingerprint, output format, template).

    Documents with equal rendered content share a fingerprint, so they get
    the very same result object back whatever their ids or timestamps.
    """

    def __init__(self, renderer: Renderer = None):
        self.renderer = renderer or _get_default_renderer()
        self._cache: Dict[Tuple[str, OutputFormat, Enum], Any] = {}
        self.hits = 0
        self.misses = 0

    def render(
        self,
        doc: ResumeDocument,
        template: TemplateId,
        output_format: Union[OutputFormat, str] = OutputFormat.LATEX,
    ) -> Any:
        output_format, template = self.renderer.resolve(template, output_format)
        key = (doc.fingerprint(), output_format, template)

        if key in self._cache:
            self.hits += 1
            result = self._cache[key]
            log_render_result(
                doc.personal_info.full_name, output_format.value, template.value, _size(result), cached=True
            )
            return result

        self.misses += 1
        result = self.renderer.render(doc, template, output_format)
        self._cache[key] = result
        return result

    def __len__(self) -> int:
        return len(self._cache)

    def __contains__(self, key) -> bool:
        return key in self._cache

    def clear(self) -> None:
        """Drop every memoized result."""
        self._cache.clear()
        self.hits = 0
        self.misses = 0
