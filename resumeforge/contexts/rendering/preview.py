"""
HTML Preview

Renders a document tree as a standalone HTML page: an A4 sheet (210mm x
297mm) styled from the same node style mappings the PDF writer reads, so
the preview and the exported PDF come from one tree.

Text is escaped by Jinja2 autoescaping; QR codes are inlined as SVG.
"""

import os
from pathlib import Path
from typing import Any, Dict, Union

from dotenv import load_dotenv
from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape
from markupsafe import Markup

from resumeforge.contexts.rendering.logger import _log_debug
from resumeforge.contexts.rendering.qr import qr_svg
from resumeforge.contexts.templating.document_tree import (
    Block,
    Document,
    ImageNode,
    QRCodeNode,
    TextNode,
)
from resumeforge.contexts.templating.resume_data_structure import ResumeDocument
from resumeforge.contexts.templating.template_ids import VisualTemplate
from resumeforge.contexts.templating.tree_builder import DocumentTreeBuilder

load_dotenv()
PREVIEW_TEMPLATE_PATH = Path(
    os.getenv("PREVIEW_TEMPLATE_PATH", str(Path(__file__).parent / "template" / "preview"))
)

FONT_FAMILIES = {
    "Helvetica": "Helvetica, Arial, sans-serif",
    "Times": "'Times New Roman', Times, serif",
    "Courier": "'Courier New', Courier, monospace",
}


def font_css(font: str) -> Dict[str, str]:
    """
    CSS font properties for a reportlab standard font name.

    Args:
        font: e.g. "Helvetica-Bold", "Times-Italic", "Times-Roman"

    Returns:
        Mapping of CSS property to value
    """
    family, _, variant = font.partition("-")
    css = {"font-family": FONT_FAMILIES.get(family, f"{family}, sans-serif")}
    if "Bold" in variant:
        css["font-weight"] = "bold"
    if "Italic" in variant or "Oblique" in variant:
        css["font-style"] = "italic"
    return css


def style_to_css(style: Dict[str, Any]) -> str:
    """
    Inline CSS declaration for a node style mapping.

    Unknown keys are ignored; missing keys produce no declaration.
    """
    css: Dict[str, str] = {}
    if style.get("font"):
        css.update(font_css(style["font"]))
    if style.get("size"):
        css["font-size"] = f"{style['size']}pt"
    if style.get("color"):
        css["color"] = style["color"]
    if style.get("background"):
        css["background-color"] = style["background"]
    if style.get("align"):
        css["text-align"] = style["align"]
    if style.get("space_before"):
        css["margin-top"] = f"{style['space_before']}pt"
    if style.get("space_after"):
        css["margin-bottom"] = f"{style['space_after']}pt"
    if style.get("direction") == "row":
        css["display"] = "flex"
        css["justify-content"] = "space-between"
        css["gap"] = "6pt"
    if style.get("wrap"):
        css["flex-wrap"] = "wrap"
        css["justify-content"] = "flex-start"
    if style.get("width"):
        css["flex"] = f"0 0 {float(style['width']) * 100:.1f}%"
    if style.get("border_color"):
        css["border-right"] = f"2px solid {style['border_color']}"
    if style.get("rule"):
        css["border-bottom"] = f"1px solid {style['rule']}"
    if style.get("margin_mm"):
        css["padding"] = f"{style['margin_mm']}mm"
    return "; ".join(f"{key}: {value}" for key, value in css.items())


def _qr_markup(node: QRCodeNode) -> Markup:
    # Generated by reportlab from the node payload, not user markup
    return Markup(qr_svg(node.data, node.size))


class PreviewRenderer:
    """Jinja2 environment for the preview page template."""

    def __init__(self, template_path: Path = None):
        template_path = Path(template_path or PREVIEW_TEMPLATE_PATH)
        self.env = Environment(
            loader=FileSystemLoader(str(template_path)),
            autoescape=select_autoescape(["html", "jinja"]),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["css"] = style_to_css
        self.env.filters["qr_svg"] = _qr_markup
        self.env.tests["block"] = lambda node: isinstance(node, Block)
        self.env.tests["text"] = lambda node: isinstance(node, TextNode)
        self.env.tests["image"] = lambda node: isinstance(node, ImageNode)
        self.env.tests["qr_code"] = lambda node: isinstance(node, QRCodeNode)

    def render(self, tree: Document) -> str:
        html = self.env.get_template("page.html.jinja").render(tree=tree)
        _log_debug(f"Preview rendered ({tree.template}): {len(html)} chars")
        return html


_default_renderer = None


def render_preview_tree(tree: Document) -> str:
    """
    HTML page for a document tree.

    Args:
        tree: Document built by DocumentTreeBuilder

    Returns:
        Complete HTML document
    """
    global _default_renderer
    if _default_renderer is None:
        _default_renderer = PreviewRenderer()
    return _default_renderer.render(tree)


def render_preview(doc: ResumeDocument, template: Union[VisualTemplate, str]) -> str:
    """Build the tree for a visual template and render it as HTML."""
    return render_preview_tree(DocumentTreeBuilder().build(doc, template))
