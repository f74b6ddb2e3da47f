"""
Shared constants for osv-triage.
"""

# File names
CONFIG_FILE = "osv-scanner.toml"
REPORT_FILE = "osv-scanner-report.md"
PACKAGE_JSON = "package.json"
USAGE_LOG_FILE = ".azure_ai_usage.log"

# Dependency chain sentinels
NO_TRANSCRIPT_SENTINEL = "Unable to determine dependency chain"
UNPARSEABLE_OUTPUT_SENTINEL = "Unable to parse yarn output"

# Chain formatting
CHAIN_SEPARATOR = " | "
TREE_SEPARATOR = " → "
MAX_CHAINS = 5

# Process output limit, matches the 10 MiB buffer of the package manager calls
MAX_OUTPUT_BYTES = 10 * 1024 * 1024

# Triage choices: key -> (label shown to the user, reason written to the config, needs review)
TRIAGE_CHOICES = {
    "1": ("🚨 No fixed version available", "🚨 No fix available", False),
    "2": ("⚠️  Dev dependency only", "⚠️ Dev dependency only - not in production", False),
    "3": ("⚠️  Code not executed in production", "⚠️ Not accessible in production", False),
    "4": ("⚠️  Requires manual action", "⚠️ Requires manual review", True),
}

ALTERNATIVE_REASONS = [
    TRIAGE_CHOICES["1"][1],
    TRIAGE_CHOICES["2"][1],
    TRIAGE_CHOICES["3"][1],
]

SEVERITY_HIGHLIGHT = {"CRITICAL", "HIGH"}
