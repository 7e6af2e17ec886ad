"""
Rendering context logger.

Provides logging interface for rendering context with automatic [render] prefix.
All rendering modules should import from this module, not from utils.logger directly.
"""

import os
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from resumeforge.utils.logger import setup_logger as _setup_logger

load_dotenv()

CONTEXT_PREFIX = "[render]"


def setup_rendering_logger(log_dir: Path, template: str = None) -> Path:
    """
    Setup logger for rendering context.

    Configures loguru with provenance tracking and rendering-specific context.

    Args:
        log_dir: Directory for this rendering session
        template: Template id being rendered, recorded in the provenance header

    Returns:
        Path to log file

    Example:
        from resumeforge.contexts.rendering.logger import setup_rendering_logger, _log_info

        log_file = setup_rendering_logger(log_dir, template="executive")
        _log_info("Writing PDF...")
    """
    provenance = {"LaTeX compiler": os.getenv("LATEX_COMPILER", "pdflatex")}
    if template:
        provenance["Template"] = template
    return _setup_logger(
        context_name="render",
        log_dir=log_dir,
        extra_provenance=provenance,
    )


# Wrapper functions with automatic [render] prefix


def _log_info(message: str) -> None:
    """Log info message with [render] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [render] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [render] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [render] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [render] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level rendering-specific logging helpers


def log_compilation_start(
    resume_name: str, tex_file: Path, num_passes: int, working_dir: Path
) -> None:
    """Log start of a local compilation with context."""
    _log_info(f"Starting compilation: {resume_name}")
    _log_info(f"Compiling in {working_dir}")
    _log_debug(f"  Source: {tex_file}")
    _log_debug(f"  Passes: {num_passes}")


def log_compilation_result(
    resume_name: str,
    result,  # CompilationResult
    elapsed_time: float,
    verbose: bool = False,
) -> None:
    """
    Log local compilation result with diagnostics.

    Args:
        resume_name: Resume identifier
        result: CompilationResult from compile_latex()
        elapsed_time: Time taken to compile
        verbose: Show detailed warnings/errors (default: False)
    """
    if result.success:
        _log_success(f"{resume_name}: compiled with {len(result.warnings)} warnings ({elapsed_time:.2f}s)")
        if result.pdf_path:
            _log_debug(f"  PDF: {result.pdf_path}")
    else:
        _log_error(f"{resume_name}: compilation failed with {len(result.errors)} errors ({elapsed_time:.2f}s)")
        error_limit = 10 if verbose else 5
        for i, err in enumerate(result.errors[:error_limit], 1):
            _log_error(f"  Error {i}: {err}")
        if len(result.errors) > error_limit:
            _log_error(f"  ... and {len(result.errors) - error_limit} more errors")

    if result.warnings:
        warning_limit = 10 if verbose else 3
        for i, warn in enumerate(result.warnings[:warning_limit], 1):
            _log_debug(f"  Warning {i}: {warn}")
        if len(result.warnings) > warning_limit:
            _log_debug(f"  ... and {len(result.warnings) - warning_limit} more warnings")

    # Raw output bypasses the format template so multi-line output stays readable
    if verbose or not result.success:
        if result.stdout:
            logger.opt(raw=True).debug(
                f"\n{'=' * 80}\nCOMPILER STDOUT:\n{'=' * 80}\n{result.stdout}\n"
            )
        if result.stderr:
            logger.opt(raw=True).debug(
                f"\n{'=' * 80}\nCOMPILER STDERR:\n{'=' * 80}\n{result.stderr}\n"
            )


def log_provider_attempt(provider: str, url: str) -> None:
    """Log a remote compilation attempt."""
    _log_info(f"Trying compilation provider {provider}")
    _log_debug(f"  Endpoint: {url}")


def log_provider_result(provider: str, success: bool, detail: str = "") -> None:
    """Log the outcome of one remote compilation attempt."""
    if success:
        _log_success(f"{provider}: PDF received {detail}".rstrip())
    else:
        _log_warning(f"{provider} failed: {detail}")


def log_artifact_written(path: Path, size: int) -> None:
    _log_info(f"Wrote {path} ({size} bytes)")
