"""
LaTeX Compilation Module

Handles local compilation of .tex files to PDF with the configured LaTeX
compiler (pdflatex by default).
"""

import os
import re
import shutil
import subprocess
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

from resumeforge.contexts.rendering.logger import (
    _log_debug,
    _log_info,
    log_compilation_result,
    log_compilation_start,
    setup_rendering_logger,
)
from resumeforge.utils.pdf_processing import page_count
from resumeforge.utils.timestamp import now, today

load_dotenv()

LATEX_COMPILER = os.getenv("LATEX_COMPILER", "pdflatex")
LOGS_PATH = Path(os.getenv("LOGS_PATH", "outs/logs"))
RESULTS_PATH = Path(os.getenv("RESULTS_PATH", "outs/results"))
KEEP_LATEX_ARTIFACTS = os.getenv("KEEP_LATEX_ARTIFACTS", "false").lower() == "true"

# LaTeX intermediate files created during compilation
LATEX_ARTIFACTS = [".aux", ".log", ".out", ".toc"]


@dataclass
class CompilationResult:
    """
    Result of LaTeX compilation.

    Attributes:
        success: Whether compilation succeeded
        pdf_path: Path to generated PDF (None if failed)
        stdout: Standard output from the compiler
        stderr: Standard error from the compiler
        errors: List of parsed LaTeX errors
        warnings: List of parsed LaTeX warnings
        page_count: Number of pages in generated PDF (None if not available)
    """

    success: bool
    pdf_path: Optional[Path] = None
    stdout: str = ""
    stderr: str = ""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    page_count: Optional[int] = None


def latex_available(compiler: str = None) -> bool:
    """Whether the LaTeX compiler executable is on PATH."""
    return shutil.which(compiler or LATEX_COMPILER) is not None


def _parse_latex_log(log_content: str) -> tuple[List[str], List[str]]:
    """
    Parse LaTeX log file for errors and warnings.

    Args:
        log_content: Content of the .log file

    Returns:
        Tuple of (errors, warnings)
    """
    errors = []
    warnings = []

    # "! Error message"
    for match in re.finditer(r"^! (.+)$", log_content, re.MULTILINE):
        errors.append(match.group(1).strip())

    # Errors reported without the "!" marker
    for pattern in (r"File ended while scanning use of", r"Emergency stop"):
        match = re.search(rf"({pattern}.*?)$", log_content, re.MULTILINE)
        if match and match.group(1) not in errors:
            errors.append(match.group(1))

    warning_patterns = [
        r"LaTeX Warning: (.+)",
        r"Package \w+ Warning: (.+)",
        r"Overfull \\hbox \((.+)\)",
        r"Underfull \\hbox \((.+)\)",
    ]
    for pattern in warning_patterns:
        for match in re.finditer(pattern, log_content, re.MULTILINE):
            warnings.append(match.group(1).strip())

    return errors, warnings


def _remove_artifacts(tex_path: Path) -> None:
    base_path = tex_path.parent / tex_path.stem
    for ext in LATEX_ARTIFACTS:
        artifact_path = base_path.with_suffix(ext)
        if artifact_path.exists():
            artifact_path.unlink()


def compile_latex(
    tex_file: Path,
    compile_dir: Optional[Path] = None,
    num_passes: int = 2,
    keep_artifacts: bool = KEEP_LATEX_ARTIFACTS,
) -> CompilationResult:
    """
    Compile a LaTeX file to PDF.

    Pure compilation function - assumes paths are resolved and directories exist.

    Args:
        tex_file: Path to the .tex file to compile
        compile_dir: Output directory (must exist). Defaults to the directory
                     holding tex_file
        num_passes: Number of compiler passes (default: 2 for cross-references)
        keep_artifacts: Keep intermediate files (default: from KEEP_LATEX_ARTIFACTS env)

    Returns:
        CompilationResult with success status and diagnostic information
    """
    tex_file = Path(tex_file)
    if not tex_file.exists():
        return CompilationResult(success=False, errors=[f"TeX file not found: {tex_file}"])
    if not latex_available():
        return CompilationResult(success=False, errors=[f"LaTeX compiler not found: {LATEX_COMPILER}"])

    original_tex_file = tex_file
    if compile_dir is None:
        compile_dir = tex_file.parent.resolve()
    else:
        compile_dir = Path(compile_dir)
        tex_file = compile_dir / tex_file.name
        if tex_file.resolve() != original_tex_file.resolve():
            shutil.copy2(original_tex_file, tex_file)

    # Missing log file means failure; existing PDF means success
    stem = tex_file.stem
    for ext in [".pdf"] + LATEX_ARTIFACTS:
        old_file = compile_dir / f"{stem}{ext}"
        if old_file.exists():
            old_file.unlink()

    all_stdout = []
    all_stderr = []
    success = True

    for _ in range(num_passes):
        cmd = [
            LATEX_COMPILER,
            "-interaction=nonstopmode",
            "-file-line-error",
            tex_file.name,
        ]

        result = subprocess.run(
            cmd,
            cwd=compile_dir,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
        )

        all_stdout.append(result.stdout)
        all_stderr.append(result.stderr)

        if result.returncode != 0:
            success = False
            break

    log_file = compile_dir / f"{stem}.log"
    errors: List[str] = []
    warnings: List[str] = []
    if log_file.exists():
        # Log files are latin-1 (font metadata is not UTF-8)
        errors, warnings = _parse_latex_log(log_file.read_text(encoding="latin-1"))

    pdf_path = compile_dir / f"{stem}.pdf"
    if not pdf_path.exists():
        success = False
        if not errors:
            errors.append("PDF file was not generated")
    elif not errors:
        # A non-zero exit with a PDF and no parsed errors is still a success
        success = True

    if not keep_artifacts:
        _remove_artifacts(tex_file)

    if original_tex_file.resolve() != tex_file.resolve() and tex_file.exists():
        tex_file.unlink()

    return CompilationResult(
        success=success,
        pdf_path=pdf_path if pdf_path.exists() else None,
        stdout="\n".join(all_stdout),
        stderr="\n".join(all_stderr),
        errors=errors,
        warnings=warnings,
        page_count=page_count(pdf_path) if pdf_path.exists() else None,
    )


def compile_resume(
    tex_file: Path,
    output_dir: Optional[Path] = None,
    num_passes: int = 2,
    verbose: bool = False,
    keep_artifacts_on_success: bool = False,
) -> CompilationResult:
    """
    Compile a résumé .tex file with logging and organized output management.

    On success the PDF is moved to RESULTS_PATH/YYYY-MM-DD/ and artifacts are
    deleted (unless keep_artifacts_on_success). On failure all artifacts stay
    in the log directory for debugging.

    Args:
        tex_file: Path to the résumé .tex file
        output_dir: Directory for compilation (default: timestamped log directory)
        num_passes: Number of compiler passes
        verbose: Show detailed warnings/errors in logs
        keep_artifacts_on_success: Keep LaTeX artifacts on success

    Returns:
        CompilationResult with success status and diagnostic information
    """
    tex_file = Path(tex_file).resolve()
    if not tex_file.exists():
        return CompilationResult(success=False, errors=[f"TeX file not found: {tex_file}"])

    resume_name = tex_file.stem

    log_dir = LOGS_PATH / f"render_{now()}"
    log_dir.mkdir(parents=True, exist_ok=True)
    if output_dir is None:
        output_dir = log_dir
    else:
        output_dir = Path(output_dir).resolve()
        output_dir.mkdir(parents=True, exist_ok=True)

    setup_rendering_logger(log_dir)
    log_compilation_start(resume_name, tex_file, num_passes, log_dir)

    start_time = time.time()
    result = compile_latex(
        tex_file=tex_file,
        compile_dir=output_dir,
        num_passes=num_passes,
        keep_artifacts=True,
    )
    elapsed = time.time() - start_time

    log_compilation_result(resume_name=resume_name, result=result, elapsed_time=elapsed, verbose=verbose)

    if result.success:
        results_dir = RESULTS_PATH / today()
        results_dir.mkdir(parents=True, exist_ok=True)

        final_pdf = results_dir / f"{resume_name}.pdf"
        shutil.move(result.pdf_path, final_pdf)
        _log_info(f"PDF saved to: {final_pdf}")

        if not keep_artifacts_on_success:
            for ext in LATEX_ARTIFACTS:
                artifact = output_dir / f"{resume_name}{ext}"
                if artifact.exists():
                    artifact.unlink()
            _log_debug("Cleaned up LaTeX artifacts.")
        else:
            _log_debug("Keeping LaTeX artifacts (keep_artifacts_on_success=True).")

        result.pdf_path = final_pdf
    else:
        _log_debug("Keeping artifacts: compilation failed")

    return result
