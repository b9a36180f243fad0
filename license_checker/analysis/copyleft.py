"""Copyleft license classification for license-checker.

Classification is a case-insensitive substring match against a fixed set of
copyleft license family keywords. Anything that does not match, including the
"Unknown" sentinel, is not copyleft.
"""
from enum import Enum
from typing import Optional

from license_checker.constants import UNKNOWN_LICENSE


class LicenseClass(Enum):
    """Binary copyleft classification of a license string."""

    COPYLEFT = "copyleft"
    OTHER = "other"


class LicenseCategory(Enum):
    """Risk taxonomy used for reporting."""

    COPYLEFT = "copyleft"
    PERMISSIVE = "permissive"
    UNKNOWN = "unknown"


# Short identifiers and spelled-out names of copyleft license families
COPYLEFT_KEYWORDS: tuple[str, ...] = (
    "GPL",
    "GNU GENERAL PUBLIC LICENSE",
    "LGPL",
    "GNU LESSER GENERAL PUBLIC LICENSE",
    "AGPL",
    "GNU AFFERO GENERAL PUBLIC LICENSE",
    "MPL",
    "MOZILLA PUBLIC LICENSE",
    "CC-BY-SA",
    "CREATIVE COMMONS ATTRIBUTION-SHAREALIKE",
    "EPL",
    "ECLIPSE PUBLIC LICENSE",
    "OFL",
    "OPEN FONT LICENSE",
    "CPL",
    "COMMON PUBLIC LICENSE",
    "OSL",
    "OPEN SOFTWARE LICENSE",
)


def classify(license_text: Optional[str]) -> LicenseClass:
    """Classify a free-text license string.

    Args:
        license_text: License string as reported by a registry or page scrape.

    Returns:
        LicenseClass.COPYLEFT if any copyleft keyword occurs in the text,
        LicenseClass.OTHER otherwise.
    """
    if not license_text:
        return LicenseClass.OTHER

    upper = license_text.upper()
    if any(keyword in upper for keyword in COPYLEFT_KEYWORDS):
        return LicenseClass.COPYLEFT
    return LicenseClass.OTHER


def is_copyleft(license_text: Optional[str]) -> bool:
    """Check if a license string belongs to a copyleft family."""
    return classify(license_text) == LicenseClass.COPYLEFT


def get_license_category(license_text: Optional[str]) -> LicenseCategory:
    """Categorize a license for reporting.

    Args:
        license_text: License string or None.

    Returns:
        UNKNOWN for missing text or the sentinel, COPYLEFT for copyleft
        families, PERMISSIVE for everything else.
    """
    if not license_text or not license_text.strip():
        return LicenseCategory.UNKNOWN
    if license_text.strip() == UNKNOWN_LICENSE:
        return LicenseCategory.UNKNOWN
    if is_copyleft(license_text):
        return LicenseCategory.COPYLEFT
    return LicenseCategory.PERMISSIVE
