"""Configuration module for integrity-tool."""

import os
from typing import Literal
from pydantic import BaseModel, Field, ConfigDict
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()


class Config(BaseModel):
    """Configuration for the academic integrity analysis engine."""

    # OpenAI-compatible API settings
    openai_api_key: str = Field(
        default_factory=lambda: os.getenv("OPENAI_API_KEY", ""),
        description="API key for OpenAI or compatible service"
    )
    openai_base_url: str = Field(
        default_factory=lambda: os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1"),
        description="Base URL for OpenAI-compatible API"
    )
    embedding_model: str = Field(
        default_factory=lambda: os.getenv("OPENAI_EMBEDDING_MODEL", "text-embedding-ada-002"),
        description="Model name for remote embeddings"
    )
    chat_model: str = Field(
        default_factory=lambda: os.getenv("OPENAI_CHAT_MODEL", "gpt-4"),
        description="Chat model used for analysis synthesis"
    )

    # Embedding settings
    embedding_provider: Literal["hash", "openai"] = Field(
        default_factory=lambda: os.getenv("EMBEDDING_PROVIDER", "hash"),
        description="'hash' for the local placeholder, 'openai' for the remote API"
    )
    embedding_dim: int = Field(
        default=100,
        gt=0,
        description="Dimension of placeholder embeddings"
    )
    hash_max_chars: int = Field(
        default=4000,
        gt=0,
        description="Character budget before hashing text into an embedding"
    )
    remote_max_chars: int = Field(
        default=8000,
        gt=0,
        description="Character budget sent to the remote embedding API"
    )
    embedding_cache_size: int = Field(
        default=256,
        ge=0,
        description="Remote embeddings kept in memory; 0 disables the cache"
    )

    # Ranking settings
    similarity_threshold: float = Field(
        default=0.75,
        ge=-1.0,
        le=1.0,
        description="Sources must score strictly above this similarity"
    )
    top_k: int = Field(
        default=5,
        gt=0,
        description="Number of top sources returned"
    )
    ranker_workers: int = Field(
        default=1,
        ge=1,
        description="Threads used to score corpus entries"
    )

    # Heuristic scoring settings
    min_significant_words: int = Field(
        default=50,
        ge=0,
        description="Minimum words longer than 3 characters before scoring"
    )
    max_plagiarism_score: float = Field(
        default=95.0,
        ge=0.0,
        le=100.0,
        description="Upper bound of the heuristic plagiarism score"
    )

    # Synthesis settings
    min_analysis_chars: int = Field(
        default=50,
        ge=1,
        description="Minimum text length for analysis synthesis"
    )
    analysis_max_chars: int = Field(
        default=3000,
        gt=0,
        description="Character budget for text embedded in the model prompt"
    )
    prompt_sources: int = Field(
        default=3,
        ge=0,
        description="Number of ranked sources quoted in the model prompt"
    )
    temperature: float = Field(
        default=0.3,
        ge=0.0,
        le=2.0,
        description="Sampling temperature for the chat model"
    )
    max_tokens: int = Field(
        default=1500,
        gt=0,
        description="Completion token limit for the chat model"
    )
    json_mode: bool = Field(
        default=True,
        description="Request a JSON object response format"
    )

    # Network settings
    llm_timeout: float = Field(
        default=30.0,
        gt=0.0,
        description="Timeout in seconds for one model request"
    )
    llm_max_retries: int = Field(
        default=2,
        ge=0,
        description="Retries for transient model API failures"
    )
    retry_delay: float = Field(
        default=1.0,
        ge=0.0,
        description="Base delay for exponential retry backoff in seconds"
    )

    def validate_api_key(self) -> bool:
        """Check if API key is configured."""
        return bool(self.openai_api_key)

    model_config = ConfigDict(
        validate_assignment=True,
        extra="forbid"
    )
