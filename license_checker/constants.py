"""Constants for license-checker."""

# Exit codes
EXIT_SUCCESS = 0  # Report generated
EXIT_ISSUES = 1  # Copyleft licenses found (with --fail-on-copyleft)
EXIT_ERROR = 2  # Report could not be generated

# Sentinel license when every inference strategy failed
UNKNOWN_LICENSE = "Unknown"

# Parent label for top-level dependencies in flat records
DIRECT_PARENT = "Direct"

DEFAULT_REPORT_NAME = "dependency-license-report.html"

LEGAL_DISCLAIMER = (
    "This report provides license information for informational purposes only. "
    "It does not constitute legal advice. Licenses marked as inferred from "
    "package pages should be verified manually."
)
