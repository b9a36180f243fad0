"""Report run options."""

from __future__ import annotations

from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field


class Verbosity(Enum):
    """Output verbosity levels."""

    QUIET = "quiet"
    NORMAL = "normal"
    VERBOSE = "verbose"


class ReportOptions(BaseModel):
    """Options for one report run."""

    model_config = {"extra": "forbid"}

    format: Literal["html", "json", "terminal"] = Field(
        default="html",
        description="Output format of the report",
    )
    verbosity: Verbosity = Field(
        default=Verbosity.NORMAL,
        description="Output verbosity level (quiet, normal, verbose)",
    )
    fail_on_copyleft: bool = Field(
        default=False,
        description="Exit with EXIT_ISSUES when copyleft licenses are found",
    )
