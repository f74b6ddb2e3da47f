"""
Environment configuration for osv-triage.

Settings are read from the process environment, optionally populated from a
.env file in the working directory.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv

from .constants import USAGE_LOG_FILE
from .models import OsvTriageError

REQUIRED_AZURE_VARIABLES = ("AZUREAI_API_KEY", "AZUREAI_BASE_URL", "AZUREAI_API_VERSION")

DEFAULT_DEPLOYMENTS: Dict[str, str] = {
    "gpt-3.5-turbo": "CommuniCity",
    "gpt-35-turbo": "CommuniCity",
    "gpt-4": "Communicity-gpt-4",
    "gpt-4-turbo": "Communicity-gpt-4",
    "gpt-4o": "Communicity-gpt-4",
}


class AzureAIConfigurationError(OsvTriageError):
    """Raised when the Azure OpenAI settings are incomplete."""

    pass


def _resolve_log_file(value: Optional[str]) -> Path:
    if not value:
        return Path.home() / USAGE_LOG_FILE
    return Path(os.path.expanduser(value)).resolve()


@dataclass
class AzureAISettings:
    """
    Azure OpenAI connection settings.

    Attributes:
        api_key: AZUREAI_API_KEY
        base_url: AZUREAI_BASE_URL without trailing slash
        api_version: AZUREAI_API_VERSION
        deployment: AZUREAI_DEPLOYMENT, overrides the model mapping when set
        log_file: AZUREAI_LOGFILE, usage log path
        deployments: Model name to deployment name mapping
    """
    api_key: str
    base_url: str
    api_version: str
    deployment: Optional[str] = None
    log_file: Path = field(default_factory=lambda: Path.home() / USAGE_LOG_FILE)
    deployments: Dict[str, str] = field(default_factory=lambda: dict(DEFAULT_DEPLOYMENTS))


def load_azure_settings(env: Optional[Dict[str, str]] = None) -> AzureAISettings:
    """
    Load Azure OpenAI settings.

    Args:
        env: Mapping to read instead of os.environ (after loading .env).

    Raises:
        AzureAIConfigurationError: If a required variable is missing.
    """
    if env is None:
        load_dotenv()
        env = dict(os.environ)

    missing = [name for name in REQUIRED_AZURE_VARIABLES if not env.get(name)]
    if missing:
        raise AzureAIConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )

    return AzureAISettings(
        api_key=env["AZUREAI_API_KEY"],
        base_url=env["AZUREAI_BASE_URL"].rstrip("/"),
        api_version=env["AZUREAI_API_VERSION"],
        deployment=env.get("AZUREAI_DEPLOYMENT") or None,
        log_file=_resolve_log_file(env.get("AZUREAI_LOGFILE")),
    )
