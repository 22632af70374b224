"""
Embedding and similarity-search collaborators for the brain-dump pipeline.

The SemanticAgent and the factory's fire-and-forget write only talk to an
EmbeddingService with three operations:

    embed(text) -> vector
    similarity_search(vector, user_id, limit) -> [SimilarTask, ...]
    store(user_id, text, vector) -> None

The concrete service pairs an EmbeddingProvider (OpenAI or local
sentence-transformers) with a ChromaDB-backed VectorStore. Both backends are
imported lazily so the pipeline can run with embeddings disabled.

Architecture Pattern: **Repository Pattern** - the vector backend sits behind
a narrow interface so tests can pass an in-memory fake and a different store
only touches this module.
"""

import logging
import os
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from .errors import ConfigurationError, DegradedDependencyError
from .models import SimilarTask

logger = logging.getLogger(__name__)

# Lazy imports to avoid startup cost when embeddings are disabled
_chromadb = None
_openai = None


def _get_chromadb():
    """Lazy import ChromaDB."""
    global _chromadb
    if _chromadb is None:
        try:
            import chromadb
            _chromadb = chromadb
        except ImportError:
            raise ImportError("ChromaDB not installed. Run: pip install chromadb")
    return _chromadb


def _get_openai():
    """Lazy import OpenAI."""
    global _openai
    if _openai is None:
        try:
            from openai import OpenAI
            _openai = OpenAI
        except ImportError:
            raise ImportError("OpenAI not installed. Run: pip install openai")
    return _openai


class EmbeddingProvider:
    """
    Turns one brain dump into a vector.

    Args:
        backend: "openai" (needs OPENAI_API_KEY) or "local" (sentence-transformers)
        model: Model name; defaults to text-embedding-3-small / all-MiniLM-L6-v2
    """

    DEFAULT_MODELS = {"openai": "text-embedding-3-small", "local": "all-MiniLM-L6-v2"}

    def __init__(self, backend: str = "openai", model: Optional[str] = None):
        self.backend = backend
        self.model = model or self.DEFAULT_MODELS[backend]

        if backend == "local":
            try:
                from sentence_transformers import SentenceTransformer
            except ImportError:
                raise ImportError(
                    "sentence-transformers not installed. Run: pip install 'synapse-brain-dump[local]'"
                )
            self.client = SentenceTransformer(self.model)
        else:
            api_key = os.environ.get("OPENAI_API_KEY")
            if not api_key:
                raise ConfigurationError(
                    "OPENAI_API_KEY environment variable not set. "
                    "Set it, or choose the 'local' or 'disabled' embedding backend."
                )
            self.client = _get_openai()(api_key=api_key)

        logger.info("Embedding brain dumps with %s model %s", backend, self.model)

    def embed(self, text: str) -> List[float]:
        if self.backend == "local":
            return self.client.encode(text).tolist()
        response = self.client.embeddings.create(model=self.model, input=[text])
        return response.data[0].embedding


class VectorStore:
    """
    ChromaDB collection of brain-dump embeddings, scoped per user.

    Args:
        persist_directory: Where to store ChromaDB data
        collection_name: Name of the ChromaDB collection
    """

    def __init__(self, persist_directory: str, collection_name: str = "task_embeddings"):
        self.persist_directory = persist_directory
        self.collection_name = collection_name

        Path(persist_directory).mkdir(parents=True, exist_ok=True)

        chromadb = _get_chromadb()
        self.client = chromadb.PersistentClient(path=persist_directory)
        self.collection = self.client.get_or_create_collection(
            name=collection_name,
            metadata={"hnsw:space": "cosine"},
        )

        logger.info(
            f"Initialized VectorStore: {persist_directory}/{collection_name} "
            f"({self.collection.count()} embeddings stored)"
        )

    def add(self, user_id: str, text: str, vector: List[float]) -> str:
        """Store one embedding; returns the generated document id."""
        doc_id = f"te-{uuid.uuid4().hex}"
        self.collection.add(
            ids=[doc_id],
            embeddings=[vector],
            documents=[text],
            metadatas=[{
                "user_id": user_id,
                "created_at": datetime.now(timezone.utc).isoformat(),
            }],
        )
        return doc_id

    def query(self, vector: List[float], user_id: str, limit: int = 5) -> List[SimilarTask]:
        """
        Nearest neighbours of a vector among one user's embeddings.

        Cosine distance is in [0, 2]; similarity is reported as 1 - distance,
        so results range from 1 (identical) to -1 (opposite), best first.
        """
        results = self.collection.query(
            query_embeddings=[vector],
            n_results=limit,
            where={"user_id": user_id},
        )

        tasks = []
        ids = results.get("ids", [[]])[0]
        documents = results.get("documents", [[]])[0]
        metadatas = results.get("metadatas", [[]])[0]
        distances = results.get("distances", [[]])[0]

        for doc_id, document, metadata, distance in zip(ids, documents, metadatas, distances):
            created_at = None
            if metadata and metadata.get("created_at"):
                try:
                    created_at = datetime.fromisoformat(metadata["created_at"])
                except (ValueError, TypeError):
                    created_at = None
            tasks.append(SimilarTask(
                id=doc_id,
                content=document,
                similarity_score=round(1 - distance, 4),
                created_at=created_at,
            ))

        return tasks


class EmbeddingService:
    """
    Facade over an EmbeddingProvider and a VectorStore.

    Any backend failure surfaces as DegradedDependencyError so callers can
    fall back without knowing which library raised.
    """

    def __init__(self, provider: EmbeddingProvider, store: VectorStore, default_limit: int = 5):
        self.provider = provider
        self.store_backend = store
        self.default_limit = default_limit

    def embed(self, text: str) -> List[float]:
        try:
            return self.provider.embed(text)
        except Exception as e:
            raise DegradedDependencyError(f"Embedding backend unavailable: {e}") from e

    def similarity_search(self, vector: List[float], user_id: str,
                          limit: Optional[int] = None) -> List[SimilarTask]:
        try:
            return self.store_backend.query(vector, user_id, limit or self.default_limit)
        except Exception as e:
            raise DegradedDependencyError(f"Similarity search unavailable: {e}") from e

    def store(self, user_id: str, text: str, vector: List[float]) -> None:
        try:
            self.store_backend.add(user_id, text, vector)
        except Exception as e:
            raise DegradedDependencyError(f"Vector store unavailable: {e}") from e


def build_embedding_service(config) -> Optional[EmbeddingService]:
    """
    Construct the embedding service described by config, once, at startup.

    Returns None when the backend is 'disabled'. Missing credentials or
    libraries raise ConfigurationError so the process fails before serving.
    """
    backend = config.get("embedding_backend", default="disabled")
    if backend == "disabled":
        logger.info("Embedding backend disabled; semantic recommendations will use defaults")
        return None

    if backend not in ("openai", "local"):
        raise ConfigurationError(f"Unknown embedding_backend: {backend!r}")

    try:
        provider = EmbeddingProvider(
            backend,
            model=config.get("embedding_model") if backend == "openai" else None,
        )
        store = VectorStore(str(config.get_vector_store_path()))
    except ImportError as e:
        raise ConfigurationError(str(e)) from e

    return EmbeddingService(provider, store, default_limit=config.get("similarity_limit", default=5))
