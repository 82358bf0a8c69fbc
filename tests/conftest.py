"""Pytest configuration and fixtures."""

from collections.abc import Sequence
from typing import Any

import pytest
from fastapi.testclient import TestClient

from petfeed_recommender.api.deps import (
    get_candidate_loader,
    get_preference_store,
    get_query_embedder,
    get_token_verifier,
)
from petfeed_recommender.config import Settings, get_settings
from petfeed_recommender.exceptions import (
    AuthenticationError,
    EmbeddingError,
    UpstreamLoadError,
)
from petfeed_recommender.main import create_app
from petfeed_recommender.models import EmbeddingRecord

VALID_TOKEN = "test-token"


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeCandidateLoader:
    """Serves fixed pools and records every fetch."""

    def __init__(self, pools: dict[str, Sequence[EmbeddingRecord]] | None = None):
        self.pools = pools or {}
        self.calls: list[str] = []
        self.error: Exception | None = None

    async def fetch(self, key: str) -> list[EmbeddingRecord]:
        self.calls.append(key)
        if self.error is not None:
            raise self.error
        return list(self.pools.get(key, []))


class FakeQueryEmbedder:
    def __init__(self, vector: Sequence[float] = (1.0, 0.0)):
        self.vector = list(vector)
        self.prompts: list[str] = []
        self.error: Exception | None = None

    async def embed(self, prompt: str) -> list[float]:
        self.prompts.append(prompt)
        if self.error is not None:
            raise self.error
        return self.vector


class FakePreferenceStore:
    def __init__(self, preferences: dict[str, Any] | None = None):
        self.preferences = preferences or {}
        self.error: Exception | None = None

    async def get_preferences(self, user_id: str) -> dict[str, Any]:
        if self.error is not None:
            raise self.error
        return self.preferences


class FakeTokenVerifier:
    async def verify(self, token: str) -> str:
        if token != VALID_TOKEN:
            raise AuthenticationError("Invalid or expired token")
        return "test-user-123"


def make_records(*embeddings: Sequence[float], prefix: str = "item") -> list[EmbeddingRecord]:
    """Records named item-0, item-1, ... in the given order."""
    return [
        EmbeddingRecord(id=f"{prefix}-{i}", embedding=list(e))
        for i, e in enumerate(embeddings)
    ]


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def pet_records() -> list[EmbeddingRecord]:
    """Pool from the pets scenario: [1,0], [0,1], [0.7,0.7]."""
    return make_records([1.0, 0.0], [0.0, 1.0], [0.7, 0.7], prefix="pet")


@pytest.fixture
def loader(pet_records: list[EmbeddingRecord]) -> FakeCandidateLoader:
    return FakeCandidateLoader(
        {
            "adoptions": pet_records,
            "articles": make_records([0.0, 1.0], [1.0, 1.0], prefix="article"),
        }
    )


@pytest.fixture
def embedder() -> FakeQueryEmbedder:
    return FakeQueryEmbedder([1.0, 0.0])


@pytest.fixture
def preference_store() -> FakePreferenceStore:
    return FakePreferenceStore({"pets": ["dog", "cat"]})


@pytest.fixture
def test_settings() -> Settings:
    """Get test settings with overrides."""
    return Settings(
        app_env="test",
        debug=True,
        postgres_host="localhost",
        postgres_user="test",
        postgres_password="test",
        postgres_db="test_db",
        preload_embedding_model=False,
    )


@pytest.fixture
def app(
    test_settings: Settings,
    loader: FakeCandidateLoader,
    embedder: FakeQueryEmbedder,
    preference_store: FakePreferenceStore,
) -> Any:
    """Create test application with fake collaborators."""
    app = create_app()
    app.dependency_overrides[get_settings] = lambda: test_settings
    app.dependency_overrides[get_candidate_loader] = lambda: loader
    app.dependency_overrides[get_query_embedder] = lambda: embedder
    app.dependency_overrides[get_preference_store] = lambda: preference_store
    app.dependency_overrides[get_token_verifier] = FakeTokenVerifier
    return app


@pytest.fixture
def client(app: Any) -> TestClient:
    """Create synchronous test client."""
    return TestClient(app)


@pytest.fixture
def auth_headers() -> dict[str, str]:
    return {"Authorization": f"Bearer {VALID_TOKEN}"}


@pytest.fixture
def upstream_error() -> UpstreamLoadError:
    return UpstreamLoadError("store unreachable")


@pytest.fixture
def embedding_error() -> EmbeddingError:
    return EmbeddingError("model unavailable")
