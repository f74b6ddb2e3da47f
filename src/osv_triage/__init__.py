"""osv-triage package.

Triage osv-scanner findings in Node.js projects and generate an osv-scanner.toml.
"""

__version__ = "0.1.0"
