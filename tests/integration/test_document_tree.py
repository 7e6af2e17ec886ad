"""Integration tests for the document tree built for every visual template."""

import pytest

from resumeforge.contexts.templating.document_tree import (
    Block,
    Document,
    ImageNode,
    QRCodeNode,
    TextNode,
    count_nodes,
    walk_node,
)
from resumeforge.contexts.templating.exceptions import UnknownTemplateError
from resumeforge.contexts.templating.resume_data_structure import (
    EducationEntry,
    PersonalInfo,
    ResumeDocument,
)
from resumeforge.contexts.templating.template_ids import LatexTemplate, VisualTemplate
from resumeforge.contexts.templating.tree_builder import DocumentTreeBuilder

ALL_VISUAL = pytest.mark.parametrize("template", list(VisualTemplate), ids=lambda t: t.value)


@pytest.fixture(scope="module")
def builder():
    return DocumentTreeBuilder()


@pytest.mark.integration
@ALL_VISUAL
def test_single_a4_page(builder, sample_resume, template):
    tree = builder.build(sample_resume, template)

    assert isinstance(tree, Document)
    assert len(tree.pages) == 1
    assert tree.pages[0].size == "A4"
    assert tree.template == template.value
    assert tree.title == "Jane Doe - Resume"
    assert tree.author == "Jane Doe"


@pytest.mark.integration
@ALL_VISUAL
def test_deterministic(builder, sample_resume, template):
    """Test equal inputs build equal trees."""
    assert builder.build(sample_resume, template) == builder.build(sample_resume, template)


@pytest.mark.integration
@ALL_VISUAL
def test_all_sections_present(builder, sample_resume, template):
    names = builder.build(sample_resume, template).section_names()
    assert sorted(names) == sorted(["skills", "experience", "education", "projects", "additional"])


@pytest.mark.integration
@ALL_VISUAL
def test_empty_sections_omitted(builder, minimal_resume, template):
    """Test no section block (and so no heading) for empty content."""
    tree = builder.build(minimal_resume, template)
    assert tree.section_names() == []
    assert tree.find_all("section_title") == []
    assert "Solo Person" in tree.text_content()


@pytest.mark.integration
@ALL_VISUAL
def test_company_groups(builder, sample_resume, template):
    tree = builder.build(sample_resume, template)
    groups = tree.find_all("company_group")

    assert [g.name for g in groups] == ["Acme", "Beta"]
    acme_titles = [n.text for n in walk_node(groups[0]) if n.role == "position_title"]
    assert acme_titles == ["Staff Engineer", "Software Engineer"]


@pytest.mark.integration
@ALL_VISUAL
def test_current_position_present(builder, sample_resume, template):
    dates = [n.text for n in builder.build(sample_resume, template).find_all("date_range")]
    assert any(d.startswith("2021") and d.endswith("Present") for d in dates)
    assert not any(d.endswith("2022") for d in dates)


@pytest.mark.integration
@ALL_VISUAL
def test_skill_categories(builder, sample_resume, template):
    tree = builder.build(sample_resume, template)
    assert [b.name for b in tree.find_all("skill_category")] == ["Languages", "Cloud"]
    assert "Go, Rust" in [n.text for n in tree.find_all("skill_list")]


@pytest.mark.integration
@ALL_VISUAL
def test_empty_additional_section_omitted(builder, sample_resume, template):
    names = [b.name for b in builder.build(sample_resume, template).find_all("additional_section")]
    assert names == ["Languages"]


@pytest.mark.integration
@ALL_VISUAL
def test_text_is_raw(builder, make_resume, template):
    """Test tree leaves hold unescaped text."""
    doc = make_resume(personalInfo={"fullName": "R&D <Lab> 100%"})
    tree = builder.build(doc, template)
    assert "R&D <Lab> 100%" in tree.text_content()


@pytest.mark.integration
@ALL_VISUAL
def test_no_media_without_sources(builder, sample_resume, template):
    tree = builder.build(sample_resume, template)
    assert tree.find_all("qr_code") == []
    assert tree.find_all("profile_picture") == []


class TestLayouts:
    """Test column placement of sections."""

    @pytest.mark.integration
    @pytest.mark.parametrize("template", ["modern", "creative", "tech"])
    def test_single_column(self, builder, sample_resume, template):
        tree = builder.build(sample_resume, template)
        assert tree.find_all("columns") == []
        assert tree.section_names() == ["skills", "experience", "education", "projects", "additional"]

    @pytest.mark.integration
    @pytest.mark.parametrize("template", ["executive", "elegant"])
    def test_side_column(self, builder, sample_resume, template):
        tree = builder.build(sample_resume, template)
        (columns,) = tree.find_all("columns")
        side, main = columns.children

        assert side.role == "side_column"
        assert [b.name for b in side.children] == ["skills", "additional"]
        assert [b.name for b in main.children] == ["experience", "education", "projects"]
        assert side.style["width"] + main.style["width"] == pytest.approx(1.0)

    @pytest.mark.integration
    def test_sidebar_border(self, builder, sample_resume):
        (columns,) = builder.build(sample_resume, "elegant").find_all("columns")
        assert columns.children[0].style["border_color"] == "#D97706"

    @pytest.mark.integration
    @pytest.mark.parametrize("template", ["executive", "elegant"])
    def test_no_side_content_uses_single_column(self, builder, make_resume, template):
        tree = builder.build(make_resume(skills=[], additionalSections=[]), template)
        assert tree.find_all("columns") == []
        assert tree.find_all("side_column") == []
        assert tree.section_names() == ["experience", "education", "projects"]


class TestStyling:
    """Test per-variant presentation data."""

    @pytest.mark.integration
    def test_section_titles(self, builder, sample_resume):
        titles = [n.text for n in builder.build(sample_resume, "tech").find_all("section_title")]
        assert "> KEY PROJECTS" in titles
        modern = [n.text for n in builder.build(sample_resume, "modern").find_all("section_title")]
        assert modern[0] == "SKILLS"

    @pytest.mark.integration
    def test_contact_delimiter(self, builder, sample_resume):
        (contact,) = builder.build(sample_resume, "modern").find_all("contact")
        assert contact.text == "Austin, TX | jane@example.com | (123) 456-7890 | janedoe.dev | janedoe"
        assert contact.style["delimiter"] == " | "
        (executive,) = builder.build(sample_resume, "executive").find_all("contact")
        assert " • " in executive.text

    @pytest.mark.integration
    def test_bullets(self, builder, sample_resume):
        items = builder.build(sample_resume, "creative").find_all("bullet_item")
        assert items and all(item.style["bullet"] == "»" for item in items)

    @pytest.mark.integration
    def test_header_background(self, builder, sample_resume):
        (header,) = builder.build(sample_resume, "tech").find_all("header")
        assert header.style["background"] == "#1E293B"


class TestMedia:
    """Test QR code and profile picture nodes."""

    @pytest.mark.integration
    def test_qr_code_node(self, builder, make_resume):
        doc = make_resume(
            personalInfo={
                "fullName": "Jane Doe",
                "linkedIn": "janedoe",
                "qrCode": {"enabled": True, "type": "linkedin"},
            }
        )
        (qr,) = builder.build(doc, "modern").find_all("qr_code")
        assert isinstance(qr, QRCodeNode)
        assert qr.data == "https://linkedin.com/in/janedoe"

    @pytest.mark.integration
    def test_profile_picture_node(self, builder, make_resume, tiny_png):
        doc = make_resume(personalInfo={"fullName": "Jane Doe", "profilePicture": tiny_png})
        (picture,) = builder.build(doc, "elegant").find_all("profile_picture")
        assert isinstance(picture, ImageNode)
        assert picture.source.startswith("data:image/png;base64,")

    @pytest.mark.integration
    def test_invalid_picture_omitted(self, builder, make_resume):
        doc = make_resume(personalInfo={"fullName": "Jane Doe", "profilePicture": "not-an-image"})
        assert builder.build(doc, "modern").find_all("profile_picture") == []


@pytest.mark.integration
def test_latex_id_rejected(builder, sample_resume):
    with pytest.raises(UnknownTemplateError):
        builder.build(sample_resume, LatexTemplate.CLASSIC)
    with pytest.raises(UnknownTemplateError):
        builder.build(sample_resume, "minimal")


@pytest.mark.integration
def test_walk_order_and_count(builder, sample_resume):
    tree = builder.build(sample_resume, "modern")
    nodes = list(tree.walk())
    assert nodes[0].role == "header"
    assert count_nodes(tree) == len(nodes)
    assert all(isinstance(n, (Block, TextNode, ImageNode, QRCodeNode)) for n in nodes)
    assert tree.find_section("projects").children[0].role == "section_title"
    assert tree.find_section("hobbies") is None


@pytest.mark.integration
def test_directly_built_honors(builder):
    """Test a bare-string honors on a record built in code renders as one bullet."""
    doc = ResumeDocument(
        personal_info=PersonalInfo(full_name="Ann Lee"),
        education=(EducationEntry(institution="MIT", degree="BS", honors="Magna Cum Laude"),),
    )
    bullets = builder.build(doc, "modern").find_all("bullet_item")
    assert [node.text for node in bullets] == ["Magna Cum Laude"]
