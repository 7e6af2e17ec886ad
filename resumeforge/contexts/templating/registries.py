"""
Templating Registries

Centralized registries for loading and caching LaTeX templates and visual
style descriptors.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from dotenv import load_dotenv
from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, TemplateNotFound
from omegaconf import OmegaConf

from resumeforge.contexts.templating.logger import _log_debug
from resumeforge.contexts.templating.template_ids import LatexTemplate, VisualTemplate

load_dotenv()
_CONTEXT_DIR = Path(__file__).parent
TEMPLATE_PATH = Path(os.getenv("TEMPLATING_CONTEXT_PATH", str(_CONTEXT_DIR / "template")))
VISUAL_STYLES_PATH = Path(
    os.getenv("VISUAL_STYLES_PATH", str(_CONTEXT_DIR / "styles" / "visual_styles.yaml"))
)

LAYOUTS = ("single", "two_column", "sidebar")


class TemplateRegistry:
    """
    Registry for loading and caching Jinja2 templates for LaTeX generation.

    Templates are stored in template/latex/{variant}/{part}.tex.jinja and use
    custom delimiters to avoid conflicts with LaTeX syntax:
    - Variable: <<< var >>>
    - Block: <%% block %%>
    - Comment: <# comment #>
    """

    def __init__(self, template_base_path: Path = None):
        """
        Initialize the template registry.

        Args:
            template_base_path: Base path holding the latex/ directory. Defaults
                                to TEMPLATING_CONTEXT_PATH from environment
        """
        if template_base_path is None:
            template_base_path = TEMPLATE_PATH

        self.template_base_path = Path(template_base_path)
        self.latex_base_path = self.template_base_path / "latex"
        self._cache: Dict[str, Template] = {}

        # Create Jinja2 environment with custom delimiters to avoid LaTeX conflicts
        self.env = Environment(
            loader=FileSystemLoader(str(self.latex_base_path)),
            # Catches silent failures
            undefined=StrictUndefined,
            # Custom delimiters to avoid LaTeX brace conflicts
            variable_start_string="<<<",
            variable_end_string=">>>",
            block_start_string="<%%",
            block_end_string="%%>",
            comment_start_string="<#",
            comment_end_string="#>",
            # Preserve whitespace (important for LaTeX)
            trim_blocks=False,
            lstrip_blocks=False,
            keep_trailing_newline=True,
        )

    @staticmethod
    def _key(variant: Union[LatexTemplate, str], part: str) -> str:
        name = variant.value if isinstance(variant, LatexTemplate) else str(variant)
        return f"{name}/{part}"

    def get_template(self, variant: Union[LatexTemplate, str], part: str) -> Template:
        """
        Get a template part for a variant, loading and caching it if necessary.

        Args:
            variant: LaTeX template variant (e.g., LatexTemplate.CLASSIC)
            part: Template part name (e.g., 'preamble', 'experience')

        Returns:
            Jinja2 Template object

        Raises:
            TemplateNotFound: If template file doesn't exist
            TemplateSyntaxError: If template has Jinja2 syntax errors
        """
        key = self._key(variant, part)

        # Check cache first
        if key in self._cache:
            return self._cache[key]

        template_path = f"{key}.tex.jinja"

        try:
            template = self.env.get_template(template_path)
        except TemplateNotFound as e:
            raise TemplateNotFound(
                f"Template not found for '{key}' at {self.latex_base_path / template_path}"
            ) from e

        _log_debug(f"Loaded template {template_path}")

        # Cache and return
        self._cache[key] = template
        return template

    def get_template_path(self, variant: Union[LatexTemplate, str], part: str) -> Path:
        """
        Get the file path for a variant's template part.

        Args:
            variant: LaTeX template variant
            part: Template part name

        Returns:
            Path to template file
        """
        return self.latex_base_path / f"{self._key(variant, part)}.tex.jinja"

    def clear_cache(self):
        """Clear the template cache."""
        self._cache.clear()

    def is_cached(self, variant: Union[LatexTemplate, str], part: str) -> bool:
        """
        Check if a template part is in the cache.

        Returns:
            True if cached, False otherwise
        """
        return self._key(variant, part) in self._cache


@dataclass(frozen=True)
class StyleDescriptor:
    """
    Presentation parameters of one visual template.

    Everything that differs between visual variants lives here; the tree
    builder itself is shared by all of them.
    """

    template: VisualTemplate
    layout: str
    column_widths: Tuple[float, ...]
    margin_mm: float
    contact_delimiter: str
    bullet: str
    date_separator: str
    company_separator: str
    link_separator: str
    section_icon: str
    section_rule: bool
    qr_size: float
    photo_size: float
    section_titles: Dict[str, str] = field(default_factory=dict)
    colors: Dict[str, str] = field(default_factory=dict)
    roles: Dict[str, Dict[str, Any]] = field(default_factory=dict)

    def role_style(self, role: str) -> Dict[str, Any]:
        """Copy of the text style for a node role (empty when unstyled)."""
        return dict(self.roles.get(role, {}))

    def color(self, name: str) -> Optional[str]:
        """Named palette color, or None when unset."""
        return self.colors.get(name) or None

    def section_title(self, section: str) -> str:
        return f"{self.section_icon}{self.section_titles.get(section, section.upper())}"


class StyleRegistry:
    """
    Registry for visual style descriptors.

    Loads visual_styles.yaml once with OmegaConf and merges each variant over
    the shared defaults.
    """

    def __init__(self, styles_path: Path = None):
        if styles_path is None:
            styles_path = VISUAL_STYLES_PATH

        self.styles_path = Path(styles_path)
        self._config = None
        self._cache: Dict[VisualTemplate, StyleDescriptor] = {}

    def _load_config(self):
        if self._config is None:
            self._config = OmegaConf.load(self.styles_path)
            _log_debug(f"Loaded visual styles from {self.styles_path}")
        return self._config

    def get_style(self, template: Union[VisualTemplate, str]) -> StyleDescriptor:
        """
        Get the merged style descriptor for a visual template.

        Args:
            template: Visual template id

        Returns:
            StyleDescriptor

        Raises:
            UnknownTemplateError: If template is not a visual template id
            ValueError: If the descriptor declares an unknown layout
        """
        template = VisualTemplate.parse(template)
        if template in self._cache:
            return self._cache[template]

        config = self._load_config()
        variant = config.variants.get(template.value, OmegaConf.create({}))
        merged = OmegaConf.to_container(OmegaConf.merge(config.defaults, variant), resolve=True)

        if merged["layout"] not in LAYOUTS:
            raise ValueError(
                f"Unknown layout '{merged['layout']}' for template '{template.value}' "
                f"(expected one of: {', '.join(LAYOUTS)})"
            )

        descriptor = StyleDescriptor(
            template=template,
            layout=merged["layout"],
            column_widths=tuple(float(w) for w in merged["column_widths"]),
            margin_mm=float(merged["margin_mm"]),
            contact_delimiter=merged["contact_delimiter"],
            bullet=merged["bullet"],
            date_separator=merged["date_separator"],
            company_separator=merged["company_separator"],
            link_separator=merged["link_separator"],
            section_icon=merged["section_icon"],
            section_rule=bool(merged["section_rule"]),
            qr_size=float(merged["qr_size"]),
            photo_size=float(merged["photo_size"]),
            section_titles=dict(merged["section_titles"]),
            colors=dict(merged["colors"]),
            roles={role: dict(style) for role, style in merged["roles"].items()},
        )

        self._cache[template] = descriptor
        return descriptor

    def clear_cache(self):
        """Clear loaded descriptors and force a reload of the YAML file."""
        self._cache.clear()
        self._config = None
