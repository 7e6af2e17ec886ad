"""
Declarative Document Tree

Format-independent description of a paginated résumé: a Document holds Pages,
a Page holds Blocks, and Blocks hold text, image and QR code leaves. Every
node carries a `role` (what it is) and a `style` mapping (how it looks).

Leaves hold raw, unescaped strings. Output adapters (PDF writer, HTML preview)
escape for their own markup.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union


@dataclass(frozen=True)
class TextNode:
    text: str
    role: str
    style: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ImageNode:
    """Raster image from a data: URL or http(s) URL."""

    source: str
    role: str = "profile_picture"
    width: float = 60.0
    height: float = 60.0
    style: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class QRCodeNode:
    """QR code encoding `data`, drawn `size` points square."""

    data: str
    role: str = "qr_code"
    size: float = 55.0
    style: Dict[str, Any] = field(default_factory=dict)


Leaf = Union[TextNode, ImageNode, QRCodeNode]


@dataclass(frozen=True)
class Block:
    """
    Container node.

    Attributes:
        role: Structural role (e.g. "header", "section", "company_group")
        children: Child blocks and leaves, in reading order
        name: Optional identifier within the role (e.g. "projects" for a section)
        style: Presentation hints (direction, width, background, rule, ...)
    """

    role: str
    children: Tuple[Union["Block", Leaf], ...] = ()
    name: str = ""
    style: Dict[str, Any] = field(default_factory=dict)


Node = Union[Block, TextNode, ImageNode, QRCodeNode]


@dataclass(frozen=True)
class Page:
    children: Tuple[Block, ...] = ()
    size: str = "A4"
    style: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Document:
    """
    Root of the tree.

    Attributes:
        pages: Pages of the document (a résumé renders onto one page)
        template: Visual template id the tree was built with
        title: Document title metadata
        author: Document author metadata
    """

    pages: Tuple[Page, ...]
    template: str
    title: str = ""
    author: str = ""

    def walk(self) -> Iterator[Node]:
        """Depth-first iteration over every block and leaf, in reading order."""
        for page in self.pages:
            for child in page.children:
                yield from walk_node(child)

    def find_all(self, role: str) -> List[Node]:
        """All nodes with the given role, in reading order."""
        return [node for node in self.walk() if node.role == role]

    def find_section(self, name: str) -> Optional[Block]:
        """The section block with the given name, or None when omitted."""
        for node in self.walk():
            if isinstance(node, Block) and node.role == "section" and node.name == name:
                return node
        return None

    def section_names(self) -> List[str]:
        """Names of the rendered sections, in reading order."""
        return [
            node.name
            for node in self.walk()
            if isinstance(node, Block) and node.role == "section"
        ]

    def text_content(self) -> List[str]:
        """Text of every text leaf, in reading order."""
        return [node.text for node in self.walk() if isinstance(node, TextNode)]


def walk_node(node: Node) -> Iterator[Node]:
    yield node
    if isinstance(node, Block):
        for child in node.children:
            yield from walk_node(child)


def count_nodes(document: Document) -> int:
    return sum(1 for _ in document.walk())
