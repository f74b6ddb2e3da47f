"""
Remote language model clients.
"""

from .azure_ai import AzureAIClient

__all__ = ["AzureAIClient"]
