from collections.abc import Iterator
from pathlib import Path

import pytest
from aioresponses import aioresponses


@pytest.fixture(autouse=True)
def config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep every test away from the real config file and API key."""
    home = tmp_path / "config-home"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home))
    monkeypatch.delenv("EXA_API_KEY", raising=False)
    return home


@pytest.fixture
def mock_api() -> Iterator[aioresponses]:
    with aioresponses() as m:
        yield m


@pytest.fixture
def search_payload() -> dict:
    return {
        "requestId": "req-1",
        "resolvedSearchType": "neural",
        "results": [
            {
                "id": "https://a.example.com/post",
                "url": "https://a.example.com/post",
                "title": "First result",
                "publishedDate": "2025-01-02T00:00:00.000Z",
                "author": "Ada",
                "score": 0.91,
            },
            {
                "id": "https://b.example.com/",
                "url": "https://b.example.com/",
                "title": "Second result",
            },
        ],
    }


@pytest.fixture
def contents_payload() -> dict:
    return {
        "requestId": "req-2",
        "results": [
            {
                "id": "https://a.example.com/post",
                "url": "https://a.example.com/post",
                "title": "First result",
                "text": "Body of the first page.",
                "summary": "A short summary.",
                "highlights": ["first highlight", "second highlight"],
            },
        ],
        "statuses": [{"id": "https://a.example.com/post", "status": "success"}],
    }
