"""Translate flat command-line option values into the nested request shapes the Exa API expects.

Every content field (text, highlights, summary, context) follows the same policy:

- no related flag given: the field is left unset and omitted from the payload
- only the boolean flag given: the field is `True`
- any refining flag given: the field is an options object, whether or not the boolean flag was passed
"""

import json
from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, Field

from exa_cli.errors import InvalidSummarySchemaError, MissingArgumentError
from exa_cli.models.requests import (
    ContentsOptions,
    ContentsRequest,
    ContextField,
    ContextOptions,
    HighlightsField,
    HighlightsOptions,
    SearchRequest,
    SearchType,
    SummaryField,
    SummaryOptions,
    TextField,
    TextOptions,
    TextVerbosity,
)


class ContentFlags(BaseModel):
    text: bool = False
    text_max_chars: int | None = None
    text_include_html: bool = False
    text_verbosity: TextVerbosity | None = None

    highlights: bool = False
    highlights_query: str | None = None
    highlights_sentences: int | None = None
    highlights_per_url: int | None = None

    summary: bool = False
    summary_query: str | None = None
    summary_schema: str | None = None

    @property
    def has_text_refinements(self) -> bool:
        return _positive(self.text_max_chars) or self.text_include_html or bool(self.text_verbosity)

    @property
    def has_highlights_refinements(self) -> bool:
        return bool(self.highlights_query) or _positive(self.highlights_sentences) or _positive(self.highlights_per_url)

    @property
    def has_summary_refinements(self) -> bool:
        return bool(self.summary_query) or bool(self.summary_schema)

    @property
    def wants_text(self) -> bool:
        return self.text or self.has_text_refinements

    @property
    def wants_summary(self) -> bool:
        return self.summary or self.has_summary_refinements


class SearchFlags(ContentFlags):
    type: SearchType = SearchType.AUTO
    num_results: int = 10
    include_domains: Sequence[str] = Field(default_factory=tuple)
    exclude_domains: Sequence[str] = Field(default_factory=tuple)
    start_published_date: str | None = None
    end_published_date: str | None = None
    category: str | None = None
    max_age_hours: int | None = None


class ContentsFlags(ContentFlags):
    text: bool = True

    subpages: int | None = None
    subpage_target: Sequence[str] = Field(default_factory=tuple)
    max_age_hours: int | None = None
    livecrawl_timeout: int | None = None

    context: bool = False
    context_max_chars: int | None = None


def _positive(value: int | None) -> bool:
    return value is not None and value > 0


def _non_empty(values: Sequence[str]) -> list[str] | None:
    return list(values) if values else None


def parse_summary_schema(schema: str) -> Any:
    try:
        return json.loads(schema)
    except json.JSONDecodeError as e:
        raise InvalidSummarySchemaError(str(e)) from e


def build_text_option(flags: ContentFlags) -> TextField:
    if flags.has_text_refinements:
        return TextOptions(
            max_characters=flags.text_max_chars if _positive(flags.text_max_chars) else None,
            include_html_tags=flags.text_include_html or None,
            verbosity=flags.text_verbosity,
        )

    return True if flags.text else None


def build_highlights_option(flags: ContentFlags) -> HighlightsField:
    if flags.has_highlights_refinements:
        return HighlightsOptions(
            query=flags.highlights_query or None,
            num_sentences=flags.highlights_sentences if _positive(flags.highlights_sentences) else None,
            highlights_per_url=flags.highlights_per_url if _positive(flags.highlights_per_url) else None,
        )

    return True if flags.highlights else None


def build_summary_option(flags: ContentFlags) -> SummaryField:
    """Build the summary field.

    Raises:
        InvalidSummarySchemaError: If the summary schema is not valid JSON.
    """
    if flags.has_summary_refinements:
        schema = parse_summary_schema(flags.summary_schema) if flags.summary_schema else None
        return SummaryOptions(query=flags.summary_query or None, schema=schema)

    return True if flags.summary else None


def build_context_option(flags: ContentsFlags) -> ContextField:
    if _positive(flags.context_max_chars):
        return ContextOptions(max_characters=flags.context_max_chars)

    return True if flags.context else None


def build_search_request(query: str | None, flags: SearchFlags) -> SearchRequest:
    """Build a search request from the search command's flags.

    The `contents` object is omitted entirely when no text, highlights, or summary was requested.
    """
    if not query:
        msg = "query"
        raise MissingArgumentError(msg)

    contents = ContentsOptions(
        text=build_text_option(flags),
        highlights=build_highlights_option(flags),
        summary=build_summary_option(flags),
    )

    return SearchRequest(
        query=query,
        type=flags.type,
        num_results=flags.num_results,
        contents=None if contents.is_empty() else contents,
        include_domains=_non_empty(flags.include_domains),
        exclude_domains=_non_empty(flags.exclude_domains),
        start_published_date=flags.start_published_date or None,
        end_published_date=flags.end_published_date or None,
        category=flags.category or None,
        max_age_hours=flags.max_age_hours,
    )


def build_contents_request(urls: Sequence[str], flags: ContentsFlags) -> ContentsRequest:
    """Build a contents request from the contents command's flags."""
    if not urls:
        msg = "at least one URL"
        raise MissingArgumentError(msg)

    return ContentsRequest(
        ids=list(urls),
        text=build_text_option(flags),
        highlights=build_highlights_option(flags),
        summary=build_summary_option(flags),
        context=build_context_option(flags),
        subpages=flags.subpages if _positive(flags.subpages) else None,
        subpage_target=_non_empty(flags.subpage_target),
        max_age_hours=flags.max_age_hours,
        livecrawl_timeout=flags.livecrawl_timeout if _positive(flags.livecrawl_timeout) else None,
    )
