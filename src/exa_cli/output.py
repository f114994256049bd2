from enum import StrEnum
from typing import Any

from pydantic import BaseModel
from pydantic_core import PydanticSerializationError
from toon_format import encode as toon_encode

from exa_cli.errors import RenderError
from exa_cli.models.responses import RenderableResponse


class OutputFormat(StrEnum):
    TABLE = "table"
    JSON = "json"
    TOON = "toon"


class RenderOptions(BaseModel):
    format: OutputFormat = OutputFormat.TABLE
    quiet: bool = False
    color: bool = False
    show_text: bool = False
    show_summary: bool = False


# `#` markers annotate every array with its length, e.g. `results[#3]`
TOON_OPTIONS: dict[str, Any] = {"lengthMarker": "#"}


def to_json(response: BaseModel) -> str:
    try:
        return response.model_dump_json(indent=2, by_alias=True, exclude_none=True) + "\n"
    except PydanticSerializationError as e:
        raise RenderError(OutputFormat.JSON, str(e)) from e


def to_toon(response: BaseModel) -> str:
    try:
        data = response.model_dump(mode="json", by_alias=True, exclude_none=True)
        encoded = toon_encode(data, TOON_OPTIONS)
    except (PydanticSerializationError, TypeError, ValueError) as e:
        raise RenderError(OutputFormat.TOON, str(e)) from e

    return encoded if encoded.endswith("\n") else encoded + "\n"


def render(response: BaseModel, options: RenderOptions) -> str:
    """Render a response for the terminal.

    Quiet mode wins over the output format for responses that support it. Otherwise the format
    decides, and responses without a table form fall back to JSON.
    """
    if options.quiet and isinstance(response, RenderableResponse):
        return response.render_quiet()

    match options.format:
        case OutputFormat.JSON:
            return to_json(response)
        case OutputFormat.TOON:
            return to_toon(response)
        case OutputFormat.TABLE if isinstance(response, RenderableResponse):
            return response.render_table(show_text=options.show_text, show_summary=options.show_summary, color=options.color)
        case _:
            return to_json(response)
