import pytest
from aiohttp import ClientConnectionError
from aioresponses import aioresponses
from yarl import URL

from exa_cli.clients.exa import BASE_URL, ExaClient, resolve_api_key
from exa_cli.config import Config, save_config
from exa_cli.errors import ExaAPIError, MalformedResponseError, MissingAPIKeyError, TransportError
from exa_cli.models.requests import ContentsRequest, SearchRequest

SEARCH_URL = f"{BASE_URL}/search"
CONTENTS_URL = f"{BASE_URL}/contents"


class TestResolveAPIKey:
    def test_missing_everywhere(self):
        with pytest.raises(MissingAPIKeyError, match="EXA_API_KEY"):
            resolve_api_key()

    def test_config_file(self):
        save_config(Config(api_key="from-config"))

        assert resolve_api_key() == "from-config"

    def test_environment_beats_config(self, monkeypatch: pytest.MonkeyPatch):
        save_config(Config(api_key="from-config"))
        monkeypatch.setenv("EXA_API_KEY", "from-env")

        assert resolve_api_key() == "from-env"

    def test_explicit_beats_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("EXA_API_KEY", "from-env")

        assert resolve_api_key("from-flag") == "from-flag"


def test_client_requires_api_key():
    with pytest.raises(MissingAPIKeyError):
        ExaClient(api_key="")


@pytest.fixture
async def exa_client():
    async with ExaClient(api_key="test-key") as client:
        yield client


async def test_search(exa_client: ExaClient, mock_api: aioresponses, search_payload: dict):
    mock_api.post(SEARCH_URL, payload=search_payload)

    response = await exa_client.search(SearchRequest(query="latest AI news", max_age_hours=0))

    assert [result.url for result in response.results] == ["https://a.example.com/post", "https://b.example.com/"]

    calls = mock_api.requests[("POST", URL(SEARCH_URL))]
    assert len(calls) == 1
    assert calls[0].kwargs["json"] == {"query": "latest AI news", "type": "auto", "numResults": 10, "maxAgeHours": 0}
    assert calls[0].kwargs["headers"] == {
        "Content-Type": "application/json",
        "Accept": "application/json",
        "x-api-key": "test-key",
    }


async def test_get_contents(exa_client: ExaClient, mock_api: aioresponses, contents_payload: dict):
    mock_api.post(CONTENTS_URL, payload=contents_payload)

    response = await exa_client.get_contents(ContentsRequest(ids=["https://a.example.com/post"], text=True))

    assert response.results[0].text == "Body of the first page."
    calls = mock_api.requests[("POST", URL(CONTENTS_URL))]
    assert calls[0].kwargs["json"] == {"ids": ["https://a.example.com/post"], "text": True}


async def test_get_contents_with_failed_status(exa_client: ExaClient, mock_api: aioresponses):
    payload = {
        "results": [],
        "statuses": [{"id": "https://gone.example.com", "status": "error", "error": {"tag": "CRAWL_NOT_FOUND", "httpStatusCode": 404}}],
    }
    mock_api.post(CONTENTS_URL, payload=payload)

    response = await exa_client.get_contents(ContentsRequest(ids=["https://gone.example.com"]))

    assert response.statuses is not None
    assert response.statuses[0].failed
    assert response.statuses[0].error is not None
    assert response.statuses[0].error.http_status_code == 404


async def test_api_error_with_message(exa_client: ExaClient, mock_api: aioresponses):
    mock_api.post(SEARCH_URL, status=404, payload={"error": "not found"})

    with pytest.raises(ExaAPIError) as exc_info:
        await exa_client.search(SearchRequest(query="q"))

    assert exc_info.value.status == 404
    assert "404" in str(exc_info.value)
    assert "not found" in str(exc_info.value)


async def test_api_error_with_raw_body(exa_client: ExaClient, mock_api: aioresponses):
    mock_api.post(SEARCH_URL, status=502, body="<html>Bad Gateway</html>")

    with pytest.raises(ExaAPIError, match=r"API error \(502\): <html>Bad Gateway</html>"):
        await exa_client.search(SearchRequest(query="q"))


async def test_malformed_response(exa_client: ExaClient, mock_api: aioresponses):
    mock_api.post(SEARCH_URL, body="this is not json")

    with pytest.raises(MalformedResponseError, match="failed to parse response from /search"):
        await exa_client.search(SearchRequest(query="q"))


async def test_response_with_wrong_shape(exa_client: ExaClient, mock_api: aioresponses):
    mock_api.post(SEARCH_URL, payload={"results": [{"title": "no url"}]})

    with pytest.raises(MalformedResponseError):
        await exa_client.search(SearchRequest(query="q"))


async def test_transport_error(exa_client: ExaClient, mock_api: aioresponses):
    mock_api.post(SEARCH_URL, exception=ClientConnectionError("connection refused"))

    with pytest.raises(TransportError, match="connection refused"):
        await exa_client.search(SearchRequest(query="q"))


async def test_api_error_with_undecodable_body(exa_client: ExaClient, mock_api: aioresponses):
    mock_api.post(SEARCH_URL, status=502, body=b"\xff\xfe bad gateway")

    with pytest.raises(ExaAPIError, match=r"API error \(502\): .* bad gateway") as exc_info:
        await exa_client.search(SearchRequest(query="q"))

    assert exc_info.value.status == 502


async def test_undecodable_success_body_is_malformed(exa_client: ExaClient, mock_api: aioresponses):
    mock_api.post(SEARCH_URL, body=b'{"results": [\xff]}')

    with pytest.raises(MalformedResponseError):
        await exa_client.search(SearchRequest(query="q"))


async def test_result_without_id(exa_client: ExaClient, mock_api: aioresponses):
    mock_api.post(SEARCH_URL, payload={"results": [{"url": "https://a.example.com/"}]})

    response = await exa_client.search(SearchRequest(query="q"))

    assert response.results[0].id is None
    assert response.results[0].url == "https://a.example.com/"
