"""
Templating context logger.

Provides logging interface for templating context with automatic [template] prefix.
All templating modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path

from loguru import logger

from resumeforge.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[template]"


def setup_templating_logger(log_dir: Path, output_format: str = "latex") -> Path:
    """
    Setup logger for templating context.

    Configures loguru with provenance tracking and templating-specific context.

    Args:
        log_dir: Directory for this templating session
        output_format: Output format for provenance ("latex", "tree", "pdf", "preview")

    Returns:
        Path to log file

    Example:
        from resumeforge.contexts.templating.logger import setup_templating_logger, _log_info

        log_file = setup_templating_logger(log_dir, output_format="latex")
        _log_info("Generating LaTeX...")
    """
    return _setup_logger(
        context_name="template",
        log_dir=log_dir,
        extra_provenance={"Output format": output_format},
    )


# Wrapper functions with automatic [template] prefix


def _log_info(message: str) -> None:
    """Log info message with [template] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [template] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_error(message: str) -> None:
    """Log error message with [template] prefix."""
    logger.error(f"{CONTEXT_PREFIX} {message}")


def _log_warning(message: str) -> None:
    """Log warning message with [template] prefix."""
    logger.warning(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [template] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level templating-specific logging helpers


def log_render_start(resume_name: str, output_format: str, template: str) -> None:
    """Log start of a render with its selection."""
    _log_debug(f"Rendering {resume_name} as {output_format} ({template})")


def log_render_result(resume_name: str, output_format: str, template: str, size: int, cached: bool) -> None:
    """
    Log a finished render.

    Args:
        resume_name: Resume identifier (full name or document label)
        output_format: Output format value
        template: Template id value
        size: Length of the output (characters, bytes or node count)
        cached: Whether the result came from the render cache
    """
    source = "cache" if cached else "renderer"
    _log_debug(f"{resume_name}: {output_format}/{template} from {source} (size {size})")
