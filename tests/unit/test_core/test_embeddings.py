"""
Unit tests for the embedding service wiring.
Backends are mocked; no network or ChromaDB access happens here.
"""

import pytest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock

import sys
sys.path.insert(0, str(Path(__file__).parent.parent.parent.parent))

from synapse.core.config import Config
from synapse.core import embeddings
from synapse.core.embeddings import EmbeddingProvider, EmbeddingService, build_embedding_service
from synapse.core.errors import ConfigurationError, DegradedDependencyError
from synapse.core.models import SimilarTask


@pytest.fixture
def service():
    provider = MagicMock()
    provider.embed.return_value = [0.1, 0.2]
    store = MagicMock()
    store.query.return_value = [SimilarTask("plan the sprint", 0.9)]
    return EmbeddingService(provider, store, default_limit=4)


class TestEmbeddingService:
    """Tests for the facade's delegation and error mapping."""

    def test_embed(self, service):
        assert service.embed("hi") == [0.1, 0.2]

    def test_search_uses_default_limit(self, service):
        results = service.similarity_search([0.1], "u-1")

        service.store_backend.query.assert_called_once_with([0.1], "u-1", 4)
        assert results[0].content == "plan the sprint"

    def test_store(self, service):
        service.store("u-1", "text", [0.1])
        service.store_backend.add.assert_called_once_with("u-1", "text", [0.1])

    def test_embed_failure_is_degraded(self, service):
        service.provider.embed.side_effect = ConnectionError("no route")
        with pytest.raises(DegradedDependencyError):
            service.embed("hi")

    def test_search_failure_is_degraded(self, service):
        service.store_backend.query.side_effect = RuntimeError("corrupt index")
        with pytest.raises(DegradedDependencyError):
            service.similarity_search([0.1], "u-1")

    def test_store_failure_is_degraded(self, service):
        service.store_backend.add.side_effect = RuntimeError("disk full")
        with pytest.raises(DegradedDependencyError):
            service.store("u-1", "text", [0.1])


class TestBuildEmbeddingService:
    """Tests for startup wiring."""

    def test_disabled(self, tmp_path):
        assert build_embedding_service(Config(tmp_path)) is None

    def test_unknown_backend(self, tmp_path):
        config = Config(tmp_path)
        config.set("embedding_backend", "pinecone")
        with pytest.raises(ConfigurationError):
            build_embedding_service(config)

    def test_missing_api_key(self, tmp_path, monkeypatch):
        pytest.importorskip("openai")
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        config = Config(tmp_path)
        config.set("embedding_backend", "openai")

        with pytest.raises(ConfigurationError) as exc:
            build_embedding_service(config)
        assert "OPENAI_API_KEY" in str(exc.value)


class TestEmbeddingProvider:
    """Tests for the OpenAI-backed provider with the SDK mocked."""

    def test_openai_embed(self, monkeypatch):
        client = MagicMock()
        client.embeddings.create.return_value = SimpleNamespace(data=[SimpleNamespace(embedding=[0.5, 0.25])])
        openai_cls = MagicMock(return_value=client)
        monkeypatch.setattr(embeddings, "_get_openai", lambda: openai_cls)
        monkeypatch.setenv("OPENAI_API_KEY", "sk-test")

        provider = EmbeddingProvider("openai")

        assert provider.model == "text-embedding-3-small"
        assert provider.embed("plan the sprint") == [0.5, 0.25]
        openai_cls.assert_called_once_with(api_key="sk-test")
        client.embeddings.create.assert_called_once_with(model="text-embedding-3-small", input=["plan the sprint"])

    def test_missing_key(self, monkeypatch):
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        with pytest.raises(ConfigurationError):
            EmbeddingProvider("openai")
