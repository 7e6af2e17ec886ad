"""Integration tests for the HTML preview."""

import pytest

from resumeforge.contexts.rendering.preview import (
    PreviewRenderer,
    font_css,
    render_preview,
    style_to_css,
)
from resumeforge.contexts.templating.template_ids import VisualTemplate
from resumeforge.contexts.templating.tree_builder import DocumentTreeBuilder

ALL_VISUAL = pytest.mark.parametrize("template", list(VisualTemplate), ids=lambda t: t.value)


@pytest.mark.integration
@ALL_VISUAL
def test_a4_sheet(sample_resume, template):
    html = render_preview(sample_resume, template)

    assert html.lstrip().startswith("<!DOCTYPE html>")
    assert "width: 210mm" in html
    assert "min-height: 297mm" in html
    assert f'data-template="{template.value}"' in html
    assert "Jane Doe" in html


@pytest.mark.integration
@ALL_VISUAL
def test_same_tree_as_pdf(sample_resume, template):
    """Test the preview shows every text leaf of the tree the PDF is built from."""
    tree = DocumentTreeBuilder().build(sample_resume, template)
    html = PreviewRenderer().render(tree)
    for text in ("Staff Engineer", "Go, Rust", "Double-entry bookkeeping library."):
        assert text in tree.text_content()
        assert text in html


@pytest.mark.integration
def test_user_text_escaped(make_resume):
    doc = make_resume(personalInfo={"fullName": "<script>alert('x')</script>"})
    html = render_preview(doc, "modern")

    assert "<script>" not in html
    assert "&lt;script&gt;" in html


@pytest.mark.integration
def test_empty_sections_omitted(minimal_resume):
    html = render_preview(minimal_resume, "creative")
    assert 'class="section"' not in html
    assert "Solo Person" in html


@pytest.mark.integration
def test_qr_code_inlined_as_svg(make_resume):
    doc = make_resume(
        personalInfo={
            "fullName": "Jane Doe",
            "linkedIn": "janedoe",
            "qrCode": {"enabled": True, "type": "linkedin"},
        }
    )
    html = render_preview(doc, "executive")
    assert '<div class="qr_code"' in html
    assert "<svg" in html


@pytest.mark.integration
def test_profile_picture_removed_on_error(make_resume, tiny_png):
    doc = make_resume(personalInfo={"fullName": "Jane Doe", "profilePicture": tiny_png})
    html = render_preview(doc, "elegant")
    assert 'src="data:image/png;base64,' in html
    assert 'onerror="this.remove()"' in html


class TestStyleToCss:
    """Test node style translation to inline CSS."""

    @pytest.mark.unit
    def test_text_style(self):
        css = style_to_css({"font": "Times-Bold", "size": 12, "color": "#111827", "align": "right"})
        assert "font-family: 'Times New Roman', Times, serif" in css
        assert "font-weight: bold" in css
        assert "font-size: 12pt" in css
        assert "color: #111827" in css
        assert "text-align: right" in css

    @pytest.mark.unit
    def test_block_style(self):
        css = style_to_css({"direction": "row", "width": 0.3, "border_color": "#D97706"})
        assert "display: flex" in css
        assert "flex: 0 0 30.0%" in css
        assert "border-right: 2px solid #D97706" in css

    @pytest.mark.unit
    def test_empty_and_none_values(self):
        assert style_to_css({}) == ""
        assert style_to_css({"background": None, "rule": None}) == ""

    @pytest.mark.unit
    def test_font_css(self):
        assert font_css("Helvetica-Oblique") == {
            "font-family": "Helvetica, Arial, sans-serif",
            "font-style": "italic",
        }
