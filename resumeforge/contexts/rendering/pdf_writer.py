"""
PDF Writer

Serializes a document tree to PDF bytes with reportlab platypus.

Blocks become flowables: vertical blocks stack their children, row blocks
become borderless tables, and blocks with a background are boxed. Text
leaves become Paragraphs whose ParagraphStyle is derived from the node's
style mapping (font, size, color, align, spacing).

Images that fail to load are omitted with a warning; the rest of the
document still renders.
"""

import base64
from io import BytesIO
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import unquote_to_bytes

from reportlab.lib.colors import HexColor
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_RIGHT
from reportlab.lib.pagesizes import A4, LETTER
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, open_for_read
from reportlab.platypus import (
    BaseDocTemplate,
    Flowable,
    Frame,
    Image,
    KeepTogether,
    PageBreak,
    PageTemplate,
    Paragraph,
    Spacer,
    Table,
    TableStyle,
)
from reportlab.platypus.flowables import HRFlowable

from resumeforge.contexts.rendering.logger import _log_debug, _log_warning
from resumeforge.contexts.rendering.qr import qr_drawing
from resumeforge.contexts.templating.document_tree import (
    Block,
    Document,
    ImageNode,
    Node,
    QRCodeNode,
    TextNode,
)

PAGE_SIZES = {"A4": A4, "LETTER": LETTER}
ALIGNMENTS = {"left": TA_LEFT, "right": TA_RIGHT, "center": TA_CENTER}

DEFAULT_FONT = "Helvetica"
DEFAULT_SIZE = 10
LEADING_RATIO = 1.25
BULLET_INDENT = 10
BOX_PADDING = 8
COLUMN_PADDING = 6
CELL_GAP = 4
RULE_THICKNESS = 0.8

# Blocks kept on one page when they fit
KEEP_TOGETHER_ROLES = {"position", "education_item", "project", "skill_category"}

# Blocks whose text children are set as one run ("Label: a, b, c")
INLINE_ROLES = {"skill_category", "additional_section"}


def _esc(text: str) -> str:
    """Escape text for reportlab Paragraph XML."""
    if not text:
        return ""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _color(value: Optional[str]):
    return HexColor(value) if value else None


def paragraph_style(role: str, style: Dict[str, Any]) -> ParagraphStyle:
    """
    ParagraphStyle for a text node.

    Args:
        role: Node role, used as the style name
        style: Node style mapping

    Returns:
        ParagraphStyle with leading derived from the font size
    """
    size = float(style.get("size") or DEFAULT_SIZE)
    font = style.get("font") or DEFAULT_FONT
    kwargs = dict(
        name=role,
        fontName=font,
        fontSize=size,
        leading=size * LEADING_RATIO,
        alignment=ALIGNMENTS.get(style.get("align") or "left", TA_LEFT),
        spaceBefore=float(style.get("space_before") or 0),
        spaceAfter=float(style.get("space_after") or 0),
    )
    text_color = _color(style.get("color"))
    if text_color is not None:
        kwargs["textColor"] = text_color
    if style.get("bullet"):
        kwargs.update(
            leftIndent=BULLET_INDENT,
            bulletIndent=2,
            bulletFontName=font,
            bulletFontSize=size,
        )
    return ParagraphStyle(**kwargs)


def _span(node: TextNode, text: str = None) -> str:
    """Inline markup for a text node inside another paragraph."""
    attrs = []
    if node.style.get("font"):
        attrs.append(f'name="{node.style["font"]}"')
    if node.style.get("size"):
        attrs.append(f'size="{node.style["size"]}"')
    if node.style.get("color"):
        attrs.append(f'color="{node.style["color"]}"')
    if node.style.get("background"):
        attrs.append(f'backcolor="{node.style["background"]}"')
    body = _esc(node.text if text is None else text)
    if not attrs:
        return body
    return f"<font {' '.join(attrs)}>{body}</font>"


class PDFTreeWriter:
    """Converts a Document tree into platypus flowables and builds the PDF."""

    def __init__(self, tree: Document):
        self.tree = tree
        # Nesting depth inside table cells; KeepTogether only works at frame level
        self._cell_depth = 0

    # Leaves

    def _text(self, node: TextNode, width: float) -> List[Flowable]:
        flowables: List[Flowable] = [
            Paragraph(
                _esc(node.text),
                paragraph_style(node.role, node.style),
                bulletText=node.style.get("bullet") or None,
            )
        ]
        if node.style.get("rule"):
            flowables.append(
                HRFlowable(
                    width="100%",
                    thickness=RULE_THICKNESS,
                    color=HexColor(node.style["rule"]),
                    spaceBefore=1,
                    spaceAfter=3,
                )
            )
        return flowables

    def _qr_code(self, node: QRCodeNode) -> List[Flowable]:
        return [qr_drawing(node.data, node.size)]

    def _image(self, node: ImageNode) -> List[Flowable]:
        try:
            raw = _read_image_source(node.source)
            # Opening through ImageReader surfaces undecodable data here
            # rather than during the build
            ImageReader(BytesIO(raw)).getSize()
        except (ValueError, OSError) as e:
            _log_warning(f"Omitting {node.role} image: {e}")
            return []
        return [Image(BytesIO(raw), width=node.width, height=node.height)]

    # Blocks

    def _inline(self, block: Block) -> List[Flowable]:
        texts = [child for child in block.children if isinstance(child, TextNode)]
        if not texts:
            return []
        base = texts[-1]
        markup = " ".join(_span(node) for node in texts[:-1])
        markup = f"{markup} {_esc(base.text)}" if markup else _esc(base.text)
        return [Paragraph(markup, paragraph_style(block.role, base.style))]

    def _tags(self, block: Block) -> List[Flowable]:
        tags = [child for child in block.children if isinstance(child, TextNode)]
        if not tags:
            return []
        markup = "&nbsp; ".join(_span(tag, f" {tag.text} ") for tag in tags)
        style = paragraph_style(block.role, {**tags[0].style, "background": None})
        style.spaceBefore = 1
        style.spaceAfter = 2
        return [Paragraph(markup, style)]

    def _block(self, block: Block, width: float, boxed: bool = True) -> List[Flowable]:
        if block.style.get("wrap"):
            return self._tags(block)
        if block.role in INLINE_ROLES and all(isinstance(c, TextNode) for c in block.children):
            flowables = self._inline(block)
        else:
            background = block.style.get("background") if boxed else None
            inner = width - 2 * BOX_PADDING if background else width

            if background:
                self._cell_depth += 1
            try:
                if block.style.get("direction") == "row":
                    flowables = [self._row(block, inner)]
                else:
                    flowables = []
                    for child in block.children:
                        flowables.extend(self.flowables(child, inner))
            finally:
                if background:
                    self._cell_depth -= 1

            if background:
                flowables = [self._box(flowables, width, background)]

        if block.role == "header" and block.style.get("rule"):
            flowables.append(
                HRFlowable(
                    width="100%",
                    thickness=RULE_THICKNESS,
                    color=HexColor(block.style["rule"]),
                    spaceBefore=2,
                    spaceAfter=4,
                )
            )
        elif block.role == "header":
            flowables.append(Spacer(1, 6))

        if block.role in KEEP_TOGETHER_ROLES and flowables and not self._cell_depth:
            return [KeepTogether(flowables)]
        return flowables

    @staticmethod
    def _box(flowables: List[Flowable], width: float, background: str) -> Table:
        table = Table([[flowables]], colWidths=[width])
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, -1), HexColor(background)),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("LEFTPADDING", (0, 0), (-1, -1), BOX_PADDING),
                    ("RIGHTPADDING", (0, 0), (-1, -1), BOX_PADDING),
                    ("TOPPADDING", (0, 0), (-1, -1), BOX_PADDING),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), BOX_PADDING),
                ]
            )
        )
        return table

    def _row(self, block: Block, width: float) -> Table:
        """Lay a row block out as a one-row borderless table."""
        self._cell_depth += 1
        try:
            return self._row_table(block, width)
        finally:
            self._cell_depth -= 1

    def _row_table(self, block: Block, width: float) -> Table:
        children = list(block.children)
        widths = _column_widths(children, width)
        is_columns = block.role == "columns"

        cells = []
        commands = [("VALIGN", (0, 0), (-1, -1), "TOP" if is_columns else "BOTTOM")]
        last = len(children) - 1
        for i, (child, cell_width) in enumerate(zip(children, widths)):
            if is_columns:
                left = right = COLUMN_PADDING
            else:
                left, right = 0, (CELL_GAP if i < last else 0)
            inner = max(cell_width - left - right, 1)

            if isinstance(child, Block):
                content = self._block(child, inner, boxed=False)
                if child.style.get("background"):
                    commands.append(("BACKGROUND", (i, 0), (i, 0), HexColor(child.style["background"])))
                if child.style.get("border_color"):
                    commands.append(("LINEAFTER", (i, 0), (i, 0), 2, HexColor(child.style["border_color"])))
            else:
                content = self.flowables(child, inner)
            if not is_columns and isinstance(child, (QRCodeNode, ImageNode)):
                commands.append(("ALIGN", (i, 0), (i, 0), "RIGHT"))

            cells.append(content or "")
            commands.extend(
                [
                    ("LEFTPADDING", (i, 0), (i, 0), left),
                    ("RIGHTPADDING", (i, 0), (i, 0), right),
                    ("TOPPADDING", (i, 0), (i, 0), COLUMN_PADDING if is_columns else 0),
                    ("BOTTOMPADDING", (i, 0), (i, 0), COLUMN_PADDING if is_columns else 1),
                ]
            )

        # Column bodies may run past one page
        table = Table([cells], colWidths=widths, splitInRow=1 if is_columns else 0)
        table.setStyle(TableStyle(commands))
        return table

    # Dispatch

    def flowables(self, node: Node, width: float) -> List[Flowable]:
        """Flowables for any node laid out in `width` points."""
        if isinstance(node, TextNode):
            return self._text(node, width)
        if isinstance(node, QRCodeNode):
            return self._qr_code(node)
        if isinstance(node, ImageNode):
            return self._image(node)
        return self._block(node, width)

    def write(self) -> bytes:
        """
        Build the PDF.

        Returns:
            PDF file contents
        """
        first = self.tree.pages[0] if self.tree.pages else None
        page_style = first.style if first else {}
        page_size = PAGE_SIZES.get((first.size if first else "A4").upper(), A4)
        margin = float(page_style.get("margin_mm") or 12) * mm
        page_width, page_height = page_size
        content_width = page_width - 2 * margin

        story: List[Flowable] = []
        for i, page in enumerate(self.tree.pages):
            if i:
                story.append(PageBreak())
            for child in page.children:
                story.extend(self.flowables(child, content_width))

        background = _color(page_style.get("background"))

        def paint_background(canvas, doc):
            if background is None:
                return
            canvas.saveState()
            canvas.setFillColor(background)
            canvas.rect(0, 0, page_width, page_height, stroke=0, fill=1)
            canvas.restoreState()

        buffer = BytesIO()
        frame = Frame(
            margin,
            margin,
            content_width,
            page_height - 2 * margin,
            leftPadding=0,
            rightPadding=0,
            topPadding=0,
            bottomPadding=0,
        )
        doc = BaseDocTemplate(
            buffer,
            pagesize=page_size,
            leftMargin=margin,
            rightMargin=margin,
            topMargin=margin,
            bottomMargin=margin,
            title=self.tree.title,
            author=self.tree.author,
            subject="Resume",
            creator="resumeforge",
            invariant=1,
        )
        doc.addPageTemplates([PageTemplate(id="resume", frames=[frame], onPage=paint_background)])
        doc.build(story)

        content = buffer.getvalue()
        _log_debug(f"PDF built ({self.tree.template}): {len(content)} bytes")
        return content


def _column_widths(children: Sequence[Node], width: float) -> List[float]:
    """
    Widths for the cells of a row.

    Children with a fractional `width` style get that share; media leaves get
    their natural size; the rest split what remains (70/30 for two cells).
    """
    fractions = [
        child.style.get("width") if isinstance(child, Block) else None for child in children
    ]
    if children and all(fraction for fraction in fractions):
        return [width * float(fraction) for fraction in fractions]

    fixed = [_natural_width(child) for child in children]
    flexible = [i for i, value in enumerate(fixed) if value is None]
    remaining = max(width - sum(value for value in fixed if value is not None), 0)
    if len(flexible) == 2:
        shares = [0.7, 0.3]
    else:
        shares = [1 / len(flexible)] * len(flexible) if flexible else []

    widths = []
    for value in fixed:
        if value is None:
            widths.append(remaining * shares.pop(0))
        else:
            widths.append(value)
    return widths


def _natural_width(node: Node) -> Optional[float]:
    if isinstance(node, QRCodeNode):
        return node.size + CELL_GAP
    if isinstance(node, ImageNode):
        return node.width + CELL_GAP
    if isinstance(node, Block) and node.children:
        widths = [_natural_width(child) for child in node.children]
        if all(value is not None for value in widths):
            return sum(widths)
    return None


def _read_image_source(source: str) -> bytes:
    """
    Raw bytes of a data: URL, or of an http(s) URL fetched by reportlab.

    Raises:
        ValueError: Malformed data URL or base64 payload
        OSError: Unreachable URL
    """
    if source.startswith("data:"):
        header, _, payload = source.partition(",")
        if not payload:
            raise ValueError("empty data URL")
        if header.endswith(";base64"):
            return base64.b64decode(payload, validate=True)
        return unquote_to_bytes(payload)

    return open_for_read(source, "b").read()


def write_pdf(tree: Document) -> bytes:
    """
    Serialize a document tree to PDF bytes.

    Args:
        tree: Document built by DocumentTreeBuilder

    Returns:
        PDF file contents (starts with b"%PDF")

    Example:
        >>> tree = DocumentTreeBuilder().build(doc, "executive")
        >>> write_pdf(tree)[:4]
        b'%PDF'
    """
    return PDFTreeWriter(tree).write()
