import logging
import os
from types import TracebackType
from typing import Self

from aiohttp import ClientError, ClientSession
from pydantic import BaseModel, ValidationError

from exa_cli.config import config_path, get_api_key
from exa_cli.errors import ExaAPIError, MalformedResponseError, MissingAPIKeyError, TransportError
from exa_cli.models.base import ExaModel
from exa_cli.models.requests import APIErrorBody, ContentsRequest, SearchRequest
from exa_cli.models.responses import ContentsResponse, SearchResponse

logger = logging.getLogger(__name__)

BASE_URL = "https://api.exa.ai"
API_KEY_ENV_VAR = "EXA_API_KEY"
API_KEY_HEADER = "x-api-key"

SEARCH_PATH = "/search"
CONTENTS_PATH = "/contents"


def resolve_api_key(api_key: str | None = None) -> str:
    """Find the API key: the explicit value, then `EXA_API_KEY`, then the config file.

    Raises:
        MissingAPIKeyError: If none of the sources holds a key.
    """
    if resolved := api_key or os.getenv(API_KEY_ENV_VAR) or get_api_key():
        return resolved

    raise MissingAPIKeyError(API_KEY_ENV_VAR, config_path())


class ExaClient:
    session: ClientSession | None

    def __init__(self, api_key: str, session: ClientSession | None = None, base_url: str = BASE_URL):
        if not api_key:
            raise MissingAPIKeyError(API_KEY_ENV_VAR)

        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.session = session
        self._owns_session = session is None

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self, exc_type: type[BaseException] | None, exc_value: BaseException | None, traceback: TracebackType | None
    ) -> None:
        await self.close()

    async def close(self) -> None:
        if self._owns_session and self.session is not None and not self.session.closed:
            await self.session.close()

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            API_KEY_HEADER: self.api_key,
        }

    async def post[ResponseT: BaseModel](self, path: str, request: ExaModel, response_model: type[ResponseT]) -> ResponseT:
        """POST a request to the API and parse the response.

        Raises:
            TransportError: If no HTTP response was received.
            ExaAPIError: If the API answered with a status of 400 or above.
            MalformedResponseError: If a successful response does not match `response_model`.
        """
        if self.session is None:
            self.session = ClientSession()

        logger.debug("POST %s%s", self.base_url, path)

        try:
            async with self.session.post(url=f"{self.base_url}{path}", headers=self.headers, json=request.to_payload()) as response:
                status = response.status
                body = await response.text(errors="replace")
        except ClientError as e:
            raise TransportError(path, e) from e

        if status >= 400:  # noqa: PLR2004
            logger.warning("POST %s returned HTTP %d", path, status)
            raise ExaAPIError(status, self._error_message(body))

        try:
            return response_model.model_validate_json(body)
        except ValidationError as e:
            raise MalformedResponseError(path, str(e)) from e

    @staticmethod
    def _error_message(body: str) -> str:
        try:
            error_body = APIErrorBody.model_validate_json(body)
        except ValidationError:
            return body

        return error_body.error or body

    async def search(self, request: SearchRequest) -> SearchResponse:
        return await self.post(SEARCH_PATH, request, SearchResponse)

    async def get_contents(self, request: ContentsRequest) -> ContentsResponse:
        response = await self.post(CONTENTS_PATH, request, ContentsResponse)

        for status in response.statuses or []:
            if status.failed:
                detail = status.error.tag if status.error and status.error.tag else status.status
                logger.warning("Failed to fetch %s: %s", status.id, detail)

        return response
