"""
Shared utilities for ResumeForge.

Common functionality used across contexts:
- LaTeX escaping
- Text processing
- Timestamps and injectable clocks
- PDF inspection
- Résumé persistence
"""

from resumeforge.utils.timestamp import now, now_exact, today

__all__ = ["now", "now_exact", "today"]
