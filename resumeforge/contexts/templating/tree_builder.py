"""
Document Tree Builder

Builds the declarative document tree for any visual template.

One shared pipeline decides what is rendered: the canonical section order,
omission of empty sections, CompanyGroups, CategoryGroups and the contact
items. The per-variant StyleDescriptor (visual_styles.yaml) decides only how
it looks: colors, fonts, delimiters, glyphs, section titles and column layout.
"""

from typing import Dict, List, Optional, Union

from resumeforge.contexts.templating.contact import (
    build_contact_items,
    resolve_qr_target,
    validate_image_source,
)
from resumeforge.contexts.templating.document_tree import (
    Block,
    Document,
    ImageNode,
    Page,
    QRCodeNode,
    TextNode,
)
from resumeforge.contexts.templating.grouping import (
    group_experiences_by_company,
    group_skills,
    non_empty_sections,
)
from resumeforge.contexts.templating.logger import _log_debug
from resumeforge.contexts.templating.registries import StyleDescriptor, StyleRegistry
from resumeforge.contexts.templating.resume_data_structure import ResumeDocument
from resumeforge.contexts.templating.template_ids import VisualTemplate

SECTION_ORDER = ("skills", "experience", "education", "projects", "additional")

# Sections placed in the side column of two_column and sidebar layouts
SIDE_SECTIONS = ("skills", "additional")


class DocumentTreeBuilder:
    """Builds a Document tree from a ResumeDocument for a visual template."""

    def __init__(self, style_registry: StyleRegistry = None):
        self.style_registry = style_registry or StyleRegistry()

    def build(self, doc: ResumeDocument, template: Union[VisualTemplate, str]) -> Document:
        """
        Build the document tree.

        Args:
            doc: Resume document
            template: Visual template id (VisualTemplate or its string id)

        Returns:
            Document with a single A4 page

        Raises:
            UnknownTemplateError: If template is not a visual template id
        """
        style = self.style_registry.get_style(template)

        sections = self._build_sections(doc, style)
        _log_debug(
            f"Building tree ({style.template.value}, {style.layout}) with sections: "
            f"{', '.join(sections) or 'none'}"
        )

        page = Page(
            children=(self._build_header(doc, style), self._layout_body(sections, style)),
            size="A4",
            style={
                "background": style.color("page_background"),
                "margin_mm": style.margin_mm,
            },
        )
        return Document(
            pages=(page,),
            template=style.template.value,
            title=f"{doc.personal_info.full_name} - Resume",
            author=doc.personal_info.full_name,
        )

    # Node helpers

    @staticmethod
    def _text(text: str, role: str, style: StyleDescriptor, **extra) -> TextNode:
        node_style = style.role_style(role)
        node_style.update(extra)
        return TextNode(text=text, role=role, style=node_style)

    # Header

    def _build_header(self, doc: ResumeDocument, style: StyleDescriptor) -> Block:
        info = doc.personal_info

        identity: List = [self._text(info.full_name, "name", style)]
        if info.profession_title:
            identity.append(self._text(info.profession_title, "title", style))
        contact_items = build_contact_items(info)
        if contact_items:
            identity.append(
                self._text(
                    style.contact_delimiter.join(contact_items),
                    "contact",
                    style,
                    items=tuple(contact_items),
                    delimiter=style.contact_delimiter,
                )
            )

        children: List = [Block(role="identity", children=tuple(identity))]

        # Decorative media are omitted entirely when their source does not resolve
        media: List = []
        qr_target = resolve_qr_target(info)
        if qr_target:
            media.append(QRCodeNode(data=qr_target, size=style.qr_size))
        picture = validate_image_source(info.profile_picture)
        if picture:
            media.append(ImageNode(source=picture, width=style.photo_size, height=style.photo_size))
        if media:
            children.append(Block(role="media", children=tuple(media), style={"direction": "row"}))

        return Block(
            role="header",
            children=tuple(children),
            style={
                "direction": "row",
                "background": style.color("header_background"),
                "color": style.color("header_text"),
                "rule": style.color("rule") if style.section_rule else None,
            },
        )

    # Sections

    def _build_sections(self, doc: ResumeDocument, style: StyleDescriptor) -> Dict[str, Block]:
        """Non-empty section blocks keyed by name, in canonical order."""
        builders = {
            "skills": self._skills_section,
            "experience": self._experience_section,
            "education": self._education_section,
            "projects": self._projects_section,
            "additional": self._additional_section,
        }
        sections: Dict[str, Block] = {}
        for name in SECTION_ORDER:
            content = builders[name](doc, style)
            if content:
                sections[name] = self._section(name, content, style)
        return sections

    def _section(self, name: str, content: List, style: StyleDescriptor) -> Block:
        title = self._text(
            style.section_title(name),
            "section_title",
            style,
            rule=style.color("rule") if style.section_rule else None,
        )
        return Block(
            role="section",
            name=name,
            children=(title, *content),
            style={"accent": style.color("accent")},
        )

    def _skills_section(self, doc: ResumeDocument, style: StyleDescriptor) -> List[Block]:
        blocks = []
        for category, names in group_skills(doc.skills).items():
            children = []
            if category:
                children.append(self._text(f"{category}:", "skill_category_label", style))
            children.append(self._text(", ".join(names), "skill_list", style))
            blocks.append(Block(role="skill_category", children=tuple(children), name=category))
        return blocks

    def _experience_section(self, doc: ResumeDocument, style: StyleDescriptor) -> List[Block]:
        blocks = []
        for company, entries in group_experiences_by_company(doc.experience).items():
            location = entries[0].location
            heading = style.company_separator.join(part for part in (company, location) if part)
            children: List = [self._text(heading, "company", style)]

            for entry in entries:
                dates = style.date_separator.join(
                    part for part in (entry.start_date, entry.display_end_date) if part
                )
                row: List = [self._text(entry.position, "position_title", style)]
                if dates:
                    row.append(self._text(dates, "date_range", style))
                position: List = [
                    Block(role="position_header", children=tuple(row), style={"direction": "row"})
                ]
                if entry.description:
                    position.append(self._text(entry.description, "description", style))
                if entry.achievements:
                    position.append(self._bullets(entry.achievements, "achievements", style))
                children.append(Block(role="position", children=tuple(position)))

            blocks.append(Block(role="company_group", children=tuple(children), name=company))
        return blocks

    def _education_section(self, doc: ResumeDocument, style: StyleDescriptor) -> List[Block]:
        blocks = []
        for entry in doc.education:
            degree = " in ".join(part for part in (entry.degree, entry.field) if part)
            main: List = [self._text(degree, "degree", style)]
            if entry.institution:
                main.append(self._text(entry.institution, "institution", style))
            meta: List = []
            if entry.graduation_date:
                meta.append(self._text(entry.graduation_date, "graduation_date", style))
            if entry.gpa:
                meta.append(self._text(f"GPA: {entry.gpa}", "gpa", style))

            row: List = [Block(role="education_main", children=tuple(main))]
            if meta:
                row.append(Block(role="education_meta", children=tuple(meta)))
            children: List = [
                Block(role="education_header", children=tuple(row), style={"direction": "row"})
            ]
            if entry.honors:
                children.append(self._bullets(entry.honors, "honors", style))
            blocks.append(Block(role="education_item", children=tuple(children)))
        return blocks

    def _projects_section(self, doc: ResumeDocument, style: StyleDescriptor) -> List[Block]:
        blocks = []
        for project in doc.projects:
            children: List = [self._text(project.name, "project_name", style)]
            if project.description:
                children.append(self._text(project.description, "project_description", style))
            if project.technologies:
                tags = tuple(
                    self._text(tech, "technology_tag", style) for tech in project.technologies
                )
                children.append(
                    Block(role="technologies", children=tags, style={"direction": "row", "wrap": True})
                )
            links = []
            if project.url:
                links.append(f"Live: {project.url}")
            if project.github:
                links.append(f"GitHub: {project.github}")
            if links:
                children.append(self._text(style.link_separator.join(links), "project_links", style))
            blocks.append(Block(role="project", children=tuple(children), name=project.name))
        return blocks

    def _additional_section(self, doc: ResumeDocument, style: StyleDescriptor) -> List[Block]:
        blocks = []
        for section in non_empty_sections(doc.additional_sections):
            children = (
                self._text(f"{section.title}:", "additional_label", style),
                self._text(", ".join(section.items), "additional_items", style),
            )
            blocks.append(Block(role="additional_section", children=children, name=section.title))
        return blocks

    def _bullets(self, items, role: str, style: StyleDescriptor) -> Block:
        return Block(
            role=role,
            children=tuple(
                self._text(item, "bullet_item", style, bullet=style.bullet) for item in items
            ),
        )

    # Layout

    def _layout_body(self, sections: Dict[str, Block], style: StyleDescriptor) -> Block:
        """
        Arrange section blocks according to the descriptor's layout.

        single: one column in canonical order.
        two_column / sidebar: skills and additional in the side column, the
        rest in the main column; each column keeps the canonical order. With
        nothing for the side column the body falls back to a single column.
        """
        side = tuple(block for name, block in sections.items() if name in SIDE_SECTIONS)
        if style.layout == "single" or not side:
            return Block(role="body", children=tuple(sections.values()))

        main = tuple(block for name, block in sections.items() if name not in SIDE_SECTIONS)
        side_width, main_width = self._column_widths(style)

        side_style = {"width": side_width, "background": style.color("side_background")}
        if style.layout == "sidebar":
            side_style["border_color"] = style.color("accent")

        return Block(
            role="columns",
            children=(
                Block(role="side_column", children=side, style=side_style),
                Block(role="main_column", children=main, style={"width": main_width}),
            ),
            style={"direction": "row", "layout": style.layout},
        )

    @staticmethod
    def _column_widths(style: StyleDescriptor) -> tuple:
        widths = style.column_widths
        if len(widths) >= 2:
            return widths[0], widths[1]
        side: Optional[float] = widths[0] if widths else None
        if side is None or side >= 1:
            side = 0.3
        return side, 1 - side
