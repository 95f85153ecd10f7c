"""Language-model backed services."""

from .azure_classifier import AzureOpenAIClassifier

__all__ = ["AzureOpenAIClassifier"]
