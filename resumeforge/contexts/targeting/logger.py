"""
Targeting context logger.

Provides logging interface for targeting context with automatic [target] prefix.
All targeting modules should import from this module, not from utils.logger directly.
"""

from pathlib import Path
from typing import List

from loguru import logger

from resumeforge.utils.logger import setup_logger as _setup_logger

CONTEXT_PREFIX = "[target]"


def setup_targeting_logger(log_dir: Path, company: str = None) -> Path:
    """
    Setup logger for targeting context.

    Args:
        log_dir: Directory for this targeting session
        company: Target company, recorded in the provenance header

    Returns:
        Path to log file
    """
    return _setup_logger(
        context_name="target",
        log_dir=log_dir,
        extra_provenance={"Company": company} if company else None,
    )


# Wrapper functions with automatic [target] prefix


def _log_info(message: str) -> None:
    """Log info message with [target] prefix."""
    logger.info(f"{CONTEXT_PREFIX} {message}")


def _log_success(message: str) -> None:
    """Log success message with [target] prefix."""
    logger.success(f"{CONTEXT_PREFIX} {message}")


def _log_debug(message: str) -> None:
    """Log debug message with [target] prefix."""
    logger.debug(f"{CONTEXT_PREFIX} {message}")


# High-level targeting-specific logging helpers


def log_keywords(company: str, keywords: List[str]) -> None:
    _log_debug(f"Keywords for {company or 'job'}: {', '.join(keywords) or 'none'}")


def log_tailoring_result(source_name: str, tailored_name: str, relevant_skills: int, total_skills: int) -> None:
    """Log the outcome of tailoring one résumé."""
    _log_success(f"Tailored '{source_name}' -> '{tailored_name}'")
    _log_info(f"  {relevant_skills}/{total_skills} skills match job keywords")
