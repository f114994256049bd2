import json
from typing import Any
from unittest.mock import patch

import pytest
from pydantic import BaseModel

from exa_cli.errors import RenderError
from exa_cli.models.responses import ContentsResponse, SearchResponse, SearchResult
from exa_cli.output import TOON_OPTIONS, OutputFormat, RenderOptions, render


@pytest.fixture
def search_response() -> SearchResponse:
    return SearchResponse(
        results=[SearchResult(id="a", url="a", title="A"), SearchResult(id="b", url="b", title="B")],
        resolved_search_type="neural",
    )


@pytest.mark.parametrize("output_format", list(OutputFormat))
def test_quiet_overrides_format(search_response: SearchResponse, output_format: OutputFormat):
    assert render(search_response, RenderOptions(format=output_format, quiet=True)) == "a\nb\n"


def test_quiet_contents():
    response = ContentsResponse(results=[SearchResult(id="1", url="https://1", text="hello")])

    assert render(response, RenderOptions(format=OutputFormat.JSON, quiet=True)) == "hello\n"


def test_table_is_default(search_response: SearchResponse):
    output = render(search_response, RenderOptions())

    assert output.splitlines()[0].split() == ["#", "Title", "URL", "Published"]


def test_table_contents_is_a_document():
    response = ContentsResponse(results=[SearchResult(id="1", url="https://1", title="One")])

    assert render(response, RenderOptions()).startswith('---\ntitle: "One"\n')


def test_json(search_response: SearchResponse):
    output = render(search_response, RenderOptions(format=OutputFormat.JSON))

    assert output.startswith('{\n  "results": [')
    assert json.loads(output) == {
        "results": [{"id": "a", "url": "a", "title": "A"}, {"id": "b", "url": "b", "title": "B"}],
        "resolvedSearchType": "neural",
    }


def test_json_ignores_quiet_for_unknown_shapes():
    response = SearchResult(id="a", url="a")

    assert json.loads(render(response, RenderOptions(quiet=True))) == {"id": "a", "url": "a"}


def test_toon(search_response: SearchResponse):
    with patch("exa_cli.output.toon_encode", return_value="results[#2]{id,url,title}:\n  a,a,A\n  b,b,B") as encode:
        output = render(search_response, RenderOptions(format=OutputFormat.TOON))

    encode.assert_called_once_with(search_response.model_dump(mode="json", by_alias=True, exclude_none=True), TOON_OPTIONS)
    assert output == "results[#2]{id,url,title}:\n  a,a,A\n  b,b,B\n"


def test_toon_failure(search_response: SearchResponse):
    with (
        patch("exa_cli.output.toon_encode", side_effect=ValueError("cannot encode")),
        pytest.raises(RenderError, match="failed to render toon output: cannot encode"),
    ):
        render(search_response, RenderOptions(format=OutputFormat.TOON))


def test_toon_encodes_with_length_markers(search_response: SearchResponse):
    output = render(search_response, RenderOptions(format=OutputFormat.TOON))

    assert "results[#2" in output
    assert "resolvedSearchType: neural" in output
    assert output.endswith("\n")


class Opaque(BaseModel):
    value: Any


@pytest.mark.parametrize("output_format", [OutputFormat.JSON, OutputFormat.TOON])
def test_unserializable_response(output_format: OutputFormat):
    with pytest.raises(RenderError, match=f"failed to render {output_format} output"):
        render(Opaque(value=object()), RenderOptions(format=output_format))
