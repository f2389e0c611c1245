"""Embedding providers for converting text to fixed-length vectors."""

import hashlib
from abc import ABC, abstractmethod
from typing import Dict, Optional

import numpy as np
import openai
from openai import OpenAI

from .client import create_openai_client, translate_openai_error
from .config import Config
from .errors import EmptyInputError, ProviderUnavailableError
from .log import base_logger

logger = base_logger.getChild('embeddings')


def token_hash(token: str) -> int:
    """Rolling polynomial hash (base 31) wrapped to a signed 32-bit integer."""
    h = 0
    for ch in token:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return h


class EmbeddingCache:
    """
    Remote embeddings of recently seen texts, keyed by model and content digest.

    Repeated submissions and re-indexed sources skip the API call. The oldest
    entry is evicted first; ``max_size=0`` disables caching.
    """

    def __init__(self, model: str, max_size: int = 256):
        self.model = model
        self.max_size = max_size
        self.entries: Dict[str, np.ndarray] = {}
        self.hits = 0
        self.misses = 0

    def key(self, text: str) -> str:
        digest = hashlib.sha256(text.encode('utf-8')).hexdigest()[:16]
        return f"{self.model}:{digest}"

    def get(self, text: str) -> Optional[np.ndarray]:
        vector = self.entries.get(self.key(text))
        if vector is None:
            self.misses += 1
        else:
            self.hits += 1
        return vector

    def put(self, text: str, vector: np.ndarray):
        if self.max_size == 0:
            return
        if len(self.entries) >= self.max_size:
            del self.entries[next(iter(self.entries))]
        self.entries[self.key(text)] = vector

    def get_stats(self) -> Dict[str, float]:
        total = self.hits + self.misses
        return {
            "size": len(self.entries),
            "max_size": self.max_size,
            "hits": self.hits,
            "misses": self.misses,
            "hit_rate": self.hits / total if total > 0 else 0
        }


class EmbeddingProvider(ABC):
    """Anything that turns text into a fixed-length vector."""

    name: str = "base"

    def __init__(self, dimension: Optional[int], max_chars: int):
        self.dimension = dimension
        self.max_chars = max_chars

    def prepare(self, text: str) -> str:
        """Validate and truncate text before embedding."""
        if not text or not text.strip():
            raise EmptyInputError("Text cannot be empty for embedding generation")
        return text[:self.max_chars]

    def embed(self, text: str) -> np.ndarray:
        """
        Generate an embedding for a text.

        Args:
            text: Text to embed

        Returns:
            1-D numpy array of floats

        Raises:
            EmptyInputError: text is empty or whitespace-only
        """
        return self._embed(self.prepare(text))

    @abstractmethod
    def _embed(self, text: str) -> np.ndarray:
        """Embed text that has already been validated and truncated."""


class HashEmbeddingProvider(EmbeddingProvider):
    """
    Deterministic placeholder embedding.

    Each of the first ``dimension`` lower-cased tokens is hashed and reduced
    to a value in [0, 1). This is a syntactic fingerprint: equal word
    sequences give equal vectors, but related wording gives no semantic
    closeness.
    """

    name = "hash"

    def __init__(self, dimension: int = 100, max_chars: int = 4000):
        super().__init__(dimension, max_chars)

    def _embed(self, text: str) -> np.ndarray:
        vector = np.zeros(self.dimension, dtype=np.float64)
        tokens = text.lower().split()[:self.dimension]
        for index, token in enumerate(tokens):
            vector[index] = (token_hash(token) % 100) / 100
        return vector


class OpenAIEmbeddingProvider(EmbeddingProvider):
    """Embeddings from an OpenAI-compatible API."""

    name = "openai"

    def __init__(self, config: Config, client: Optional[OpenAI] = None):
        """
        Initialize the provider.

        Args:
            config: Configuration object with API settings
            client: Preconfigured OpenAI client (built from config if omitted)
        """
        super().__init__(None, config.remote_max_chars)
        self.config = config
        self.model = config.embedding_model
        # Retries belong to the HTTP client
        self.client = client or create_openai_client(config, max_retries=config.llm_max_retries)
        self.cache = EmbeddingCache(self.model, max_size=config.embedding_cache_size)

        logger.info(f"Remote embeddings: {config.openai_base_url} (model={self.model})")

    def _embed(self, text: str) -> np.ndarray:
        cached = self.cache.get(text)
        if cached is not None:
            return cached

        try:
            response = self.client.embeddings.create(
                model=self.model,
                input=text.strip()
            )
        except openai.OpenAIError as e:
            error = translate_openai_error(e)
            logger.error(f"Embedding generation failed ({error.reason}): {e}")
            raise error from e

        if not response.data:
            raise ProviderUnavailableError("api_error", "No embedding data received from provider")

        embedding = np.array(response.data[0].embedding, dtype=np.float64)
        if self.dimension is None:
            self.dimension = len(embedding)

        self.cache.put(text, embedding)
        return embedding

    def get_cache_stats(self) -> Dict[str, float]:
        """Get cache statistics."""
        return self.cache.get_stats()


def create_embedding_provider(config: Config) -> EmbeddingProvider:
    """Pick the embedding provider named in the configuration."""
    if config.embedding_provider == "openai":
        if not config.validate_api_key():
            raise ProviderUnavailableError("auth", "OPENAI_API_KEY is required for remote embeddings")
        return OpenAIEmbeddingProvider(config)
    return HashEmbeddingProvider(dimension=config.embedding_dim, max_chars=config.hash_max_chars)
