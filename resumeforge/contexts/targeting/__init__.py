"""
Targeting Context

Responsibilities:
- Extracts keywords from job descriptions (frequency heuristics, no NLP models)
- Prioritizes skills relevant to a job
- Produces tailored copies of a résumé for a specific job

Owns: Keyword extraction, relevance ordering, tailoring rules
Never: Renders output or touches the résumé store
"""

from resumeforge.contexts.targeting.tailor import (
    JobDescription,
    extract_keywords,
    prioritize_skills,
    tailor_resume,
)

__all__ = [
    "JobDescription",
    "extract_keywords",
    "prioritize_skills",
    "tailor_resume",
]
