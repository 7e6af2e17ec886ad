"""Integration tests compiling generated LaTeX with the local compiler."""

import pytest

from resumeforge.contexts.rendering.compiler import compile_latex, latex_available
from resumeforge.contexts.rendering.exporter import export_latex, write_artifact
from resumeforge.contexts.templating.template_ids import LatexTemplate

pytestmark = [
    pytest.mark.latex,
    pytest.mark.skipif(not latex_available(), reason="LaTeX compiler not installed"),
]


@pytest.mark.integration
@pytest.mark.parametrize("template", list(LatexTemplate), ids=lambda t: t.value)
def test_generated_latex_compiles(tmp_path, sample_resume, template):
    """Test every LaTeX variant compiles to a one-page PDF."""
    tex_file = write_artifact(export_latex(sample_resume, template), tmp_path)

    result = compile_latex(tex_file, num_passes=1, keep_artifacts=False)

    assert result.success, result.errors
    assert result.pdf_path.exists()
    assert result.page_count == 1
    assert not (tmp_path / f"{tex_file.stem}.aux").exists()


@pytest.mark.integration
def test_special_characters_compile(tmp_path, make_resume):
    doc = make_resume(
        personalInfo={"fullName": "Jane Doe", "email": "jane_doe@example.com"},
        skills=[{"name": "C# & F#", "category": "R&D ~100%"}],
    )
    tex_file = write_artifact(export_latex(doc, LatexTemplate.CLASSIC), tmp_path)

    result = compile_latex(tex_file, num_passes=1)

    assert result.success, result.errors
