"""Tests for DI container wiring."""

from __future__ import annotations

from unittest.mock import MagicMock

from dependency_injector import providers

from faculty_pubs.application.classification.classifier import KeywordClassifier
from faculty_pubs.application.search.engine import PublicationEngine
from faculty_pubs.container import ApplicationContainer
from faculty_pubs.domain.entities.publication import ProviderId
from faculty_pubs.infrastructure.llm.azure_classifier import AzureOpenAIClassifier
from faculty_pubs.shared.settings import AppSettings, ClassifierSettings, ScopusSettings

# ============================================================================
# DI Container Tests
# ============================================================================


def _container(settings: AppSettings | None = None) -> ApplicationContainer:
    container = ApplicationContainer()
    container.config.from_dict((settings or AppSettings()).to_dict())
    return container


class TestApplicationContainer:
    """Test the DI container manages services correctly."""

    def test_config_sections(self) -> None:
        container = _container(AppSettings(scopus=ScopusSettings(api_key="k", base_url="https://x")))
        assert container.config.scopus.api_key() == "k"
        assert container.config.pubmed.max_results() == 25

    def test_engine_singleton(self) -> None:
        container = _container()
        engine = container.engine()
        assert isinstance(engine, PublicationEngine)
        assert container.engine() is engine

    def test_adapters_in_fold_order(self) -> None:
        container = _container()
        providers_in_order = [adapter.provider for adapter in container.orchestrator().adapters]
        assert providers_in_order == [ProviderId.PUBMED, ProviderId.SCOPUS, ProviderId.WEB_OF_SCIENCE]

    def test_keyword_classifier_when_unconfigured(self) -> None:
        assert isinstance(_container().classifier(), KeywordClassifier)

    def test_azure_classifier_when_configured(self) -> None:
        settings = AppSettings(
            classifier=ClassifierSettings(endpoint="https://example.openai.azure.com", api_key="k", deployment="d")
        )
        assert isinstance(_container(settings).classifier(), AzureOpenAIClassifier)

    def test_adapters_share_classifier(self) -> None:
        container = _container()
        classifier = container.classifier()
        assert container.pubmed_adapter()._classifier is classifier
        assert container.scopus_adapter()._classifier is classifier
        assert container.wos_adapter()._classifier is classifier

    def test_title_year_key_default_off(self) -> None:
        assert _container().resolver()._include_year is False

    def test_title_year_key_from_config(self) -> None:
        container = _container()
        container.config.from_dict({"resolver": {"include_year_in_title_key": True}})
        assert container.resolver()._include_year is True

    def test_override_provider(self) -> None:
        """Container supports provider overriding for tests."""
        container = _container()

        fake = MagicMock()
        container.scopus_adapter.override(providers.Object(fake))
        assert fake in container.orchestrator().adapters

        container.scopus_adapter.reset_override()
        container.orchestrator.reset()
        assert fake not in container.orchestrator().adapters
