"""
Application DI Container (dependency-injector).

Wires settings -> classifier -> provider adapters -> iCite client -> engine.

Usage::

    from faculty_pubs.container import ApplicationContainer
    from faculty_pubs.shared.settings import AppSettings

    container = ApplicationContainer()
    container.config.from_dict(AppSettings.from_env(os.environ).to_dict())

    engine = container.engine()

    # In tests, override any provider:
    container.scopus_adapter.override(providers.Object(fake_adapter))
"""

from __future__ import annotations

import logging
from typing import Any

from dependency_injector import containers, providers

from faculty_pubs.shared.settings import (
    ClassifierSettings,
    PubMedSettings,
    ScopusSettings,
    WebOfScienceSettings,
)

logger = logging.getLogger(__name__)


def _create_classifier(settings: dict[str, Any] | None) -> object:
    """Azure OpenAI classifier when configured, keyword heuristic otherwise."""
    classifier_settings = ClassifierSettings(**(settings or {}))
    if not classifier_settings.is_configured:
        logger.info("Azure OpenAI not configured, using keyword classifier")
        from faculty_pubs.application.classification.classifier import KeywordClassifier

        return KeywordClassifier()

    from faculty_pubs.infrastructure.llm.azure_classifier import AzureOpenAIClassifier

    return AzureOpenAIClassifier(classifier_settings)


def _create_pubmed_adapter(settings: dict[str, Any] | None, classifier: object) -> object:
    from faculty_pubs.infrastructure.sources.pubmed import PubMedAdapter

    return PubMedAdapter(PubMedSettings(**(settings or {})), classifier=classifier)


def _create_scopus_adapter(settings: dict[str, Any] | None, classifier: object) -> object:
    from faculty_pubs.infrastructure.sources.scopus import ScopusAdapter

    return ScopusAdapter(ScopusSettings(**(settings or {})), classifier=classifier)


def _create_wos_adapter(settings: dict[str, Any] | None, classifier: object) -> object:
    from faculty_pubs.infrastructure.sources.web_of_science import WebOfScienceAdapter

    return WebOfScienceAdapter(WebOfScienceSettings(**(settings or {})), classifier=classifier)


def _create_icite_client() -> object:
    from faculty_pubs.infrastructure.ncbi.icite import ICiteClient

    return ICiteClient()


def _create_orchestrator(*adapters: object) -> object:
    from faculty_pubs.application.search.orchestrator import FanOutOrchestrator

    return FanOutOrchestrator(list(adapters))


def _create_resolver(include_year_in_title_key: bool | None) -> object:
    from faculty_pubs.application.resolution.identity_resolver import IdentityResolver

    return IdentityResolver(include_year_in_title_key=bool(include_year_in_title_key))


def _create_engine(orchestrator: object, resolver: object, enrichment: object) -> object:
    from faculty_pubs.application.search.engine import PublicationEngine

    return PublicationEngine(orchestrator, resolver=resolver, enrichment=enrichment)


class ApplicationContainer(containers.DeclarativeContainer):
    """Central DI container for the Faculty Publications engine.

    Manages creation and lifecycle of:
    - ``classifier``: Abstract classifier (Azure OpenAI or keyword)
    - ``pubmed_adapter`` / ``scopus_adapter`` / ``wos_adapter``: Provider adapters
    - ``icite_client``: Relative citation ratio lookup
    - ``engine``: PublicationEngine entry point
    """

    config = providers.Configuration()

    classifier = providers.Singleton(
        _create_classifier,
        settings=config.classifier,
    )

    pubmed_adapter = providers.Singleton(
        _create_pubmed_adapter,
        settings=config.pubmed,
        classifier=classifier,
    )

    scopus_adapter = providers.Singleton(
        _create_scopus_adapter,
        settings=config.scopus,
        classifier=classifier,
    )

    wos_adapter = providers.Singleton(
        _create_wos_adapter,
        settings=config.web_of_science,
        classifier=classifier,
    )

    icite_client = providers.Singleton(_create_icite_client)

    orchestrator = providers.Singleton(
        _create_orchestrator,
        pubmed_adapter,
        scopus_adapter,
        wos_adapter,
    )

    resolver = providers.Singleton(
        _create_resolver,
        include_year_in_title_key=config.resolver.include_year_in_title_key,
    )

    engine = providers.Singleton(
        _create_engine,
        orchestrator=orchestrator,
        resolver=resolver,
        enrichment=icite_client,
    )


__all__ = ["ApplicationContainer"]
