"""License classification and dependency graph projection."""

from license_checker.analysis.copyleft import (
    COPYLEFT_KEYWORDS,
    LicenseCategory,
    LicenseClass,
    classify,
    get_license_category,
    is_copyleft,
)
from license_checker.analysis.flatten import (
    flatten,
    flatten_all,
    to_tree_document,
)

__all__ = [
    "COPYLEFT_KEYWORDS",
    "LicenseCategory",
    "LicenseClass",
    "classify",
    "flatten",
    "flatten_all",
    "get_license_category",
    "is_copyleft",
    "to_tree_document",
]
