"""
Contact line assembly.

Builds the ordered contact items shown under the name, formats phone numbers
and resolves the optional QR code target and profile picture source. The join
delimiter is a per-template presentation choice and is not applied here.
"""

import re
from typing import List, Optional

from resumeforge.contexts.templating.resume_data_structure import PersonalInfo
from resumeforge.utils.text_processing import prepend_without_overlap

NANP_PATTERN = re.compile(r"^1?(\d{3})(\d{3})(\d{4})$")

LINKEDIN_PROFILE_PREFIX = "https://linkedin.com/in/"

# Leading characters of base64-encoded image payloads
_BASE64_SIGNATURES = (("/9j/", "jpeg"), ("iVBORw0KGgo", "png"))


def format_phone_number(phone: Optional[str]) -> str:
    """
    Format a North-American phone number as (AAA) BBB-CCCC.

    Non-digits are stripped first; a leading country code 1 is dropped. Numbers
    that do not reduce to 10 digits (or 1 + 10 digits) are returned unchanged.

    Example:
        >>> format_phone_number("1234567890")
        '(123) 456-7890'
        >>> format_phone_number("+1 (555) 010-9999")
        '(555) 010-9999'
        >>> format_phone_number("555-12")
        '555-12'
    """
    if not phone:
        return ""
    digits = re.sub(r"\D", "", phone)
    match = NANP_PATTERN.match(digits)
    if not match:
        return phone
    area, exchange, line = match.groups()
    return f"({area}) {exchange}-{line}"


def build_contact_items(personal_info: PersonalInfo) -> List[str]:
    """
    Ordered, non-empty contact items: location, email, phone, website, LinkedIn.

    Args:
        personal_info: Personal info record

    Returns:
        Contact strings with the phone formatted and empty fields removed
    """
    items = [
        personal_info.location,
        personal_info.email,
        format_phone_number(personal_info.phone),
        personal_info.website,
        personal_info.linkedin,
    ]
    return [item for item in items if item and item.strip()]


def resolve_qr_target(personal_info: PersonalInfo) -> Optional[str]:
    """
    URL the QR code should encode, or None when no QR code is shown.

    LinkedIn handles are expanded to a profile URL and bare website hosts get
    an https:// scheme. Returns None when the directive is disabled, its type
    is "none", or the selected link is empty.
    """
    directive = personal_info.qr_code
    if not directive.enabled or directive.type == "none":
        return None

    if directive.type == "linkedin" and personal_info.linkedin:
        link = personal_info.linkedin.strip()
        return link if link.startswith("http") else prepend_without_overlap(LINKEDIN_PROFILE_PREFIX, link)

    if directive.type == "website" and personal_info.website:
        link = personal_info.website.strip()
        return link if link.startswith("http") else f"https://{link}"

    return None


def validate_image_source(source: Optional[str]) -> Optional[str]:
    """
    Normalize a profile picture source.

    Accepts data:image/... URLs as-is, wraps bare base64 JPEG/PNG payloads into
    a data URL, and passes http(s) URLs through. Anything else gives None.
    """
    if not source:
        return None
    if source.startswith("data:image/"):
        return source
    for signature, mime_type in _BASE64_SIGNATURES:
        if source.startswith(signature):
            return f"data:image/{mime_type};base64,{source}"
    if source.startswith("http"):
        return source
    return None
