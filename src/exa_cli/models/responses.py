import json
from abc import ABC, abstractmethod

from pydantic import Field

from exa_cli.models.base import ExaModel
from exa_cli.utils.text import format_table, preview, truncate

TITLE_WIDTH = 55
TITLE_WIDTH_WITH_CONTENT = 40
URL_WIDTH = 45
CONTENT_PREVIEW_WIDTH = 60


def _quote(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


class SearchResult(ExaModel):
    id: str | None = None
    url: str
    title: str | None = None
    published_date: str | None = None
    author: str | None = None
    score: float | None = None
    text: str | None = None
    highlights: list[str] | None = None
    summary: str | None = None


class RenderableResponse(ExaModel, ABC):
    """A response that knows how to present itself beyond plain serialization."""

    @abstractmethod
    def render_quiet(self) -> str:
        """The minimal output used for scripting."""

    @abstractmethod
    def render_table(self, show_text: bool = False, show_summary: bool = False, color: bool = False) -> str:
        """The human-readable output."""


class SearchResponse(RenderableResponse):
    results: list[SearchResult] = Field(default_factory=list)
    autoprompt_string: str | None = None
    resolved_search_type: str | None = None
    request_id: str | None = None
    context: str | None = None

    def render_quiet(self) -> str:
        return "".join(f"{result.url}\n" for result in self.results)

    def render_table(self, show_text: bool = False, show_summary: bool = False, color: bool = False) -> str:
        headers = ["#", "Title", "URL"]
        if show_text:
            headers.append("Text")
        if show_summary:
            headers.append("Summary")
        if not show_text and not show_summary:
            headers.append("Published")

        title_width = TITLE_WIDTH_WITH_CONTENT if show_text or show_summary else TITLE_WIDTH

        rows: list[list[str]] = []
        for number, result in enumerate(self.results, start=1):
            row = [str(number), truncate(result.title, title_width), truncate(result.url, URL_WIDTH)]
            if show_text:
                row.append(preview(result.text, CONTENT_PREVIEW_WIDTH))
            if show_summary:
                row.append(preview(result.summary, CONTENT_PREVIEW_WIDTH))
            if not show_text and not show_summary:
                row.append(result.published_date or "-")
            rows.append(row)

        return format_table(headers, rows, color=color)


class ContentStatusError(ExaModel):
    tag: str | None = None
    http_status_code: int | None = None


class ContentStatus(ExaModel):
    id: str
    status: str
    error: ContentStatusError | None = None

    @property
    def failed(self) -> bool:
        return self.status != "success"


class ContentsResponse(RenderableResponse):
    results: list[SearchResult] = Field(default_factory=list)
    statuses: list[ContentStatus] | None = None
    request_id: str | None = None
    context: str | None = None

    def render_quiet(self) -> str:
        texts = [result.text for result in self.results if result.text]
        if not texts:
            return ""

        return "\n\n".join(texts) + "\n"

    def render_table(self, show_text: bool = False, show_summary: bool = False, color: bool = False) -> str:  # noqa: ARG002
        """Render each result as a small document: a `---` delimited header followed by its content sections."""
        documents = [self._render_document(result) for result in self.results]

        if self.context:
            documents.append(f"## Context\n\n{self.context}\n")

        return "\n".join(documents)

    @staticmethod
    def _render_document(result: SearchResult) -> str:
        lines = ["---", f"title: {_quote(result.title or '')}", f"url: {result.url}"]
        if result.published_date:
            lines.append(f"date: {_quote(result.published_date)}")
        if result.author:
            lines.append(f"author: {_quote(result.author)}")
        lines.append("---")

        if result.text:
            lines.extend(["", result.text])

        if result.summary:
            lines.extend(["", "## Summary", "", result.summary])

        if result.highlights:
            lines.extend(["", "## Highlights", ""])
            lines.extend(f"- {highlight}" for highlight in result.highlights)

        return "\n".join(lines) + "\n"
