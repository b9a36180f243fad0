"""Pydantic data models for license-checker."""

from license_checker.models.config import CheckerConfig
from license_checker.models.dependency import (
    DependencyForest,
    DependencyNode,
    Ecosystem,
    FlatDependencyRecord,
    RequirementSpec,
    ResolutionError,
)
from license_checker.models.report import LicenseReport
from license_checker.models.scan import ReportOptions, Verbosity

__all__ = [
    "CheckerConfig",
    "DependencyForest",
    "DependencyNode",
    "Ecosystem",
    "FlatDependencyRecord",
    "LicenseReport",
    "RequirementSpec",
    "ReportOptions",
    "ResolutionError",
    "Verbosity",
]
