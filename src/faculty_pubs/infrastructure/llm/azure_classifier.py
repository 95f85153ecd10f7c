"""
Azure OpenAI abstract classifier.

Asks a chat deployment to label an abstract as primary research or review.
Falls back to the keyword heuristic when the deployment is not configured,
the abstract is empty, or the call fails for any reason.
"""

from __future__ import annotations

import json
import logging
from json import JSONDecodeError
from typing import TYPE_CHECKING, Any

from openai import AsyncAzureOpenAI

from faculty_pubs.application.classification.classifier import classify_by_keywords
from faculty_pubs.domain.entities.publication import PublicationType

if TYPE_CHECKING:
    from faculty_pubs.shared.settings import ClassifierSettings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """You classify scholarly publications from their abstract.
Respond ONLY with valid JSON, no prose, no markdown:
{"publication_type": "Primary Research" | "Review"}
Use "Review" for systematic reviews, meta-analyses, scoping reviews,
narrative reviews and other literature syntheses. Use "Primary Research"
for everything else."""

_LABELS = {label.value.lower(): label for label in PublicationType}


def parse_label(content: str | None) -> PublicationType | None:
    """Read the label out of the model's JSON reply (or bare label text)."""
    if not content:
        return None
    try:
        parsed = json.loads(content)
    except JSONDecodeError:
        return _LABELS.get(content.strip().strip('"').lower())
    if isinstance(parsed, dict):
        value = parsed.get("publication_type")
        if isinstance(value, str):
            return _LABELS.get(value.strip().lower())
    return None


class AzureOpenAIClassifier:
    """
    Publication type classifier backed by an Azure OpenAI chat deployment.

    Never raises: every failure path returns the keyword classification.
    """

    def __init__(self, settings: ClassifierSettings, client: Any | None = None) -> None:
        self._settings = settings
        self._client = client
        if self._client is None and settings.is_configured:
            self._client = AsyncAzureOpenAI(
                azure_endpoint=settings.endpoint,
                api_key=settings.api_key,
                api_version=settings.api_version,
                timeout=settings.timeout,
                max_retries=1,
            )

    @property
    def is_enabled(self) -> bool:
        return self._client is not None

    async def classify(self, abstract: str) -> PublicationType:
        if self._client is None or not abstract or not abstract.strip():
            return classify_by_keywords(abstract)

        try:
            response = await self._client.chat.completions.create(
                model=self._settings.deployment,
                temperature=0,
                max_tokens=20,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": f"Abstract: {abstract}"},
                ],
            )
            label = parse_label(response.choices[0].message.content)
        except Exception as exc:
            logger.warning(f"Azure OpenAI classification failed, using keyword fallback: {exc}")
            return classify_by_keywords(abstract)

        if label is None:
            logger.warning("Azure OpenAI returned an unrecognized label, using keyword fallback")
            return classify_by_keywords(abstract)
        return label

    async def close(self) -> None:
        if self._client is not None and hasattr(self._client, "close"):
            await self._client.close()
