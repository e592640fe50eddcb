import threading

import pytest

from allersafe.core.allergens import get_knowledge_base
from allersafe.core.engine_config import EngineConfig
from allersafe.core.errors import EnrichmentUnavailable
from allersafe.services.enrichment import EnrichmentProvider, EnrichmentService, enrichment_service


class StaticProvider(EnrichmentProvider):
    def __init__(self, text, name="static"):
        self.text = text
        self.name = name
        self.prompts = []

    def generate(self, prompt):
        self.prompts.append(prompt)
        return self.text


class FailingProvider(EnrichmentProvider):
    name = "failing"

    def __init__(self, exc=None):
        self.exc = exc or EnrichmentUnavailable("failing", "HTTP 503")

    def generate(self, prompt):
        raise self.exc


class BlockingProvider(EnrichmentProvider):
    """Holds the worker thread until the test releases it."""
    name = "blocking"

    def __init__(self):
        self.release = threading.Event()

    def generate(self, prompt):
        self.release.wait(5)
        return "too late"


@pytest.fixture(autouse=True)
def no_live_enrichment(monkeypatch):
    """Keep the shared enrichment service away from real AI backends."""
    monkeypatch.setattr(enrichment_service, "providers", [])


@pytest.fixture
def knowledge_base():
    return get_knowledge_base()


@pytest.fixture
def make_enrichment():
    """Factory for an EnrichmentService with the given providers and a short timeout."""
    def _make(*providers, timeout=0.5, enabled=True):
        config = EngineConfig(enrichment_enabled=enabled, enrichment_timeout_seconds=timeout)
        return EnrichmentService(providers=list(providers), config=config)
    return _make
