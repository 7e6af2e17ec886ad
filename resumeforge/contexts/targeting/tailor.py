"""
Résumé Tailoring

Keyword-frequency heuristics that adapt a résumé to a job description:
relevant skills move to the front and position descriptions mention the
job's top keywords. No language models are involved.
"""

import re
from collections import Counter
from dataclasses import dataclass, replace
from typing import Any, Callable, List, Mapping, Optional, Sequence, Tuple

from resumeforge.contexts.targeting.logger import log_keywords, log_tailoring_result
from resumeforge.contexts.templating.resume_data_structure import ResumeDocument, Skill
from resumeforge.utils.resume_repository import generate_resume_id
from resumeforge.utils.timestamp import Clock, now_exact

STOP_WORDS = frozenset(
    "the and or but in on at to for of with by a an is are was were be been "
    "have has had do does did will would could should".split()
)

MIN_KEYWORD_LENGTH = 3
KEYWORD_LIMIT = 20
INJECTED_KEYWORDS = 3


@dataclass(frozen=True)
class JobDescription:
    """
    Job posting to tailor against.

    Attributes:
        title: Job title
        company: Hiring company (used in the tailored résumé name)
        description: Free-text description
        requirements: One requirement per entry
        preferred_skills: One skill per entry
    """

    title: str = ""
    company: str = ""
    description: str = ""
    requirements: Tuple[str, ...] = ()
    preferred_skills: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "JobDescription":
        """Build from a mapping with camelCase or snake_case keys."""

        def lines(value) -> Tuple[str, ...]:
            if isinstance(value, str):
                value = value.splitlines()
            return tuple(str(item).strip() for item in value or () if str(item).strip())

        return cls(
            title=str(data.get("title") or ""),
            company=str(data.get("company") or ""),
            description=str(data.get("description") or ""),
            requirements=lines(data.get("requirements")),
            preferred_skills=lines(data.get("preferredSkills", data.get("preferred_skills"))),
        )

    @property
    def text(self) -> str:
        return " ".join([self.description, *self.requirements, *self.preferred_skills])


def extract_keywords(job: JobDescription, limit: int = KEYWORD_LIMIT) -> List[str]:
    """
    Most frequent meaningful words of a job description.

    Lower-cases the description, requirements and preferred skills, strips
    everything but letters and whitespace, drops stop words and words shorter
    than three letters, then ranks by frequency. Ties keep first-appearance
    order.

    Args:
        job: Job description
        limit: Maximum number of keywords

    Returns:
        Up to `limit` distinct keywords, most frequent first

    Example:
        >>> extract_keywords(JobDescription(description="Python and AWS. Python APIs."))
        ['python', 'aws', 'apis']
    """
    words = re.sub(r"[^a-z\s]", "", job.text.lower()).split()
    words = [w for w in words if len(w) >= MIN_KEYWORD_LENGTH and w not in STOP_WORDS]
    # Counter preserves insertion order, and sorted() is stable
    counts = Counter(words)
    ranked = sorted(counts, key=lambda word: -counts[word])
    return ranked[:limit]


def is_relevant(skill: Skill, keywords: Sequence[str]) -> bool:
    name = skill.name.lower()
    return any(keyword.lower() in name for keyword in keywords)


def prioritize_skills(skills: Sequence[Skill], keywords: Sequence[str]) -> Tuple[Skill, ...]:
    """
    Stable partition: skills whose name contains a keyword come first.

    Relative order within the relevant and the remaining skills is preserved.
    """
    relevant = [skill for skill in skills if is_relevant(skill, keywords)]
    others = [skill for skill in skills if not is_relevant(skill, keywords)]
    return tuple(relevant + others)


def enhance_description(description: str, keywords: Sequence[str]) -> str:
    """Append the top keywords to a non-empty description."""
    if not description or not keywords:
        return description
    top = ", ".join(keywords[:INJECTED_KEYWORDS])
    return f"{description} Utilized {top} to achieve project goals."


def tailor_resume(
    doc: ResumeDocument,
    job: JobDescription,
    clock: Optional[Clock] = None,
    id_factory: Optional[Callable[[], str]] = None,
) -> ResumeDocument:
    """
    Tailored copy of a résumé for one job.

    Args:
        doc: Source résumé (left unchanged)
        job: Target job
        clock: Clock for the new updatedAt (default: system clock)
        id_factory: Produces the new document id (default: generate_resume_id)

    Returns:
        New ResumeDocument with prioritized skills, keyword-enhanced position
        descriptions, a new id, name "{name} - {company}" and a fresh updatedAt
    """
    keywords = extract_keywords(job)
    log_keywords(job.company, keywords)

    skills = prioritize_skills(doc.skills, keywords)
    experience = tuple(
        replace(entry, description=enhance_description(entry.description, keywords))
        for entry in doc.experience
    )
    new_id = id_factory() if id_factory else generate_resume_id(clock)

    tailored = doc.evolve(
        experience=experience,
        skills=skills,
        id=new_id,
        name=f"{doc.name} - {job.company}",
        updated_at=now_exact(clock),
    )
    log_tailoring_result(
        doc.name, tailored.name, sum(1 for s in skills if is_relevant(s, keywords)), len(skills)
    )
    return tailored
