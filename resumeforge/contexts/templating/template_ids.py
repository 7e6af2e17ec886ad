"""
Template Identifiers

Two independent template families that happen to share some names:

- LatexTemplate: variants of the LaTeX source export (modern, classic, minimal)
- VisualTemplate: variants of the paginated document tree / PDF / preview
  (modern, executive, creative, tech, elegant)

They are separate enum types so a LaTeX id can never silently select a
visual renderer and vice versa.
"""

from enum import Enum
from typing import List, Type, TypeVar, Union

from resumeforge.contexts.templating.exceptions import UnknownTemplateError

T = TypeVar("T", bound="_TemplateId")


class _TemplateId(Enum):
    """Shared behaviour for both template families."""

    @property
    def display_name(self) -> str:
        """Capitalized label used in filenames and listings (e.g. 'Modern')."""
        return self.value.capitalize()

    @classmethod
    def choices(cls) -> List[str]:
        return [member.value for member in cls]

    @classmethod
    def parse(cls: Type[T], value: Union[str, "_TemplateId"]) -> T:
        """
        Resolve a template id from a member or a string.

        Args:
            value: Enum member of this family, or its string value
                   (case-insensitive, surrounding whitespace ignored)

        Returns:
            Member of this enum

        Raises:
            UnknownTemplateError: If value is unknown, or is a member of the
                                  other template family
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, _TemplateId):
            # Member of the other family, even if the names match
            raise UnknownTemplateError(value.value, expected=cls.__name__, choices=cls.choices())
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if member.value == key:
                    return member
        raise UnknownTemplateError(value, expected=cls.__name__, choices=cls.choices())

    def __str__(self) -> str:
        return self.value


class LatexTemplate(_TemplateId):
    """Variants of the LaTeX source export."""

    MODERN = "modern"
    CLASSIC = "classic"
    MINIMAL = "minimal"


class VisualTemplate(_TemplateId):
    """Variants of the paginated document tree, PDF and preview."""

    MODERN = "modern"
    EXECUTIVE = "executive"
    CREATIVE = "creative"
    TECH = "tech"
    ELEGANT = "elegant"
