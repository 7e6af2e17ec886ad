"""Integration tests for render dispatch and memoization."""

import pytest

from resumeforge.contexts.templating.dispatch import (
    OutputFormat,
    RenderCache,
    Renderer,
    available_templates,
    render,
    template_family,
)
from resumeforge.contexts.templating.document_tree import Document
from resumeforge.contexts.templating.exceptions import UnknownTemplateError
from resumeforge.contexts.templating.resume_data_structure import ResumeDocument
from resumeforge.contexts.templating.template_ids import LatexTemplate, VisualTemplate


class TestOutputFormat:
    """Test output format parsing and template families."""

    @pytest.mark.unit
    def test_parse(self):
        assert OutputFormat.parse("PDF") is OutputFormat.PDF
        assert OutputFormat.parse(OutputFormat.TREE) is OutputFormat.TREE

    @pytest.mark.unit
    def test_unknown_format(self):
        with pytest.raises(ValueError, match="docx"):
            OutputFormat.parse("docx")

    @pytest.mark.unit
    def test_families(self):
        assert template_family("latex") is LatexTemplate
        for fmt in ("tree", "pdf", "preview"):
            assert template_family(fmt) is VisualTemplate
        assert available_templates("latex") == list(LatexTemplate)


class TestRender:
    """Test the uniform render entry point."""

    @pytest.mark.integration
    def test_output_types(self, sample_resume):
        assert render(sample_resume, "classic", "latex").startswith(r"\documentclass")
        assert isinstance(render(sample_resume, "tech", OutputFormat.TREE), Document)
        assert render(sample_resume, VisualTemplate.ELEGANT, "pdf")[:4] == b"%PDF"
        assert render(sample_resume, "creative", "preview").lstrip().startswith("<!DOCTYPE html>")

    @pytest.mark.integration
    def test_default_format_is_latex(self, sample_resume):
        assert render(sample_resume, LatexTemplate.MINIMAL).startswith(r"\documentclass")

    @pytest.mark.integration
    @pytest.mark.parametrize(
        "template,output_format",
        [
            (LatexTemplate.CLASSIC, "pdf"),
            (LatexTemplate.MODERN, "tree"),
            (VisualTemplate.MODERN, "latex"),
            ("executive", "latex"),
            ("minimal", "preview"),
            ("fancy", "pdf"),
        ],
    )
    def test_family_mismatch_rejected(self, sample_resume, template, output_format):
        """Test a template id from the wrong family never selects a renderer."""
        with pytest.raises(UnknownTemplateError) as exc_info:
            render(sample_resume, template, output_format)
        assert f"for {output_format} output" in str(exc_info.value)

    @pytest.mark.integration
    def test_shared_name_resolves_per_format(self, sample_resume):
        """Test 'modern' means the LaTeX variant for latex and the visual one for tree."""
        assert render(sample_resume, "modern", "latex").startswith(r"\documentclass")
        assert render(sample_resume, "modern", "tree").template == "modern"


class TestRenderCache:
    """Test memoization keyed by content."""

    @pytest.mark.integration
    def test_hit_returns_same_object(self, sample_resume):
        cache = RenderCache(Renderer())
        first = cache.render(sample_resume, "classic", "latex")
        second = cache.render(sample_resume, LatexTemplate.CLASSIC, OutputFormat.LATEX)

        assert second is first
        assert (cache.hits, cache.misses) == (1, 1)
        assert len(cache) == 1

    @pytest.mark.integration
    def test_equal_documents_share_entries(self, sample_data):
        cache = RenderCache(Renderer())
        first = cache.render(ResumeDocument.from_dict(sample_data), "modern", "tree")
        second = cache.render(ResumeDocument.from_dict(sample_data), "modern", "tree")
        assert second is first

    @pytest.mark.integration
    def test_misses_on_any_key_change(self, sample_resume):
        cache = RenderCache(Renderer())
        cache.render(sample_resume, "modern", "latex")
        cache.render(sample_resume, "modern", "tree")
        cache.render(sample_resume, "classic", "latex")
        cache.render(sample_resume.evolve(projects=()), "modern", "latex")

        assert cache.misses == 4
        assert cache.hits == 0
        assert (sample_resume.fingerprint(), OutputFormat.LATEX, LatexTemplate.MODERN) in cache

    @pytest.mark.integration
    def test_hits_after_timestamp_refresh(self, sample_resume):
        cache = RenderCache(Renderer())
        first = cache.render(sample_resume, "modern", "latex")
        refreshed = sample_resume.evolve(updated_at="2026-10-18T12:00:00.000", name="Copy")
        assert cache.render(refreshed, "modern", "latex") is first
        assert cache.hits == 1

    @pytest.mark.integration
    def test_invalid_template_not_cached(self, sample_resume):
        cache = RenderCache(Renderer())
        with pytest.raises(UnknownTemplateError):
            cache.render(sample_resume, "classic", "pdf")
        assert len(cache) == 0

    @pytest.mark.integration
    def test_clear(self, sample_resume):
        cache = RenderCache(Renderer())
        cache.render(sample_resume, "modern", "latex")
        cache.clear()
        assert len(cache) == 0
        assert cache.misses == 0
