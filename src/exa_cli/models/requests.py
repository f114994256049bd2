from enum import StrEnum
from typing import Any, Literal

from pydantic import Field

from exa_cli.models.base import ExaModel


class SearchType(StrEnum):
    AUTO = "auto"
    FAST = "fast"
    NEURAL = "neural"
    KEYWORD = "keyword"
    DEEP = "deep"


class Category(StrEnum):
    """Categories listed in the help text. The API accepts others as well."""

    COMPANY = "company"
    PEOPLE = "people"
    TWEET = "tweet"
    NEWS = "news"
    RESEARCH_PAPER = "research paper"
    PERSONAL_SITE = "personal site"
    FINANCIAL_REPORT = "financial report"


class TextVerbosity(StrEnum):
    COMPACT = "compact"
    STANDARD = "standard"
    FULL = "full"


class TextOptions(ExaModel):
    max_characters: int | None = None
    include_html_tags: bool | None = None
    verbosity: TextVerbosity | None = None


class HighlightsOptions(ExaModel):
    query: str | None = None
    num_sentences: int | None = None
    highlights_per_url: int | None = None


class SummaryOptions(ExaModel):
    query: str | None = None
    schema_: Any | None = Field(default=None, alias="schema")


class ContextOptions(ExaModel):
    max_characters: int | None = None


# Each content field is three-way: None (omitted), True (enabled), or an options object (enabled with details).
type TextField = Literal[True] | TextOptions | None
type HighlightsField = Literal[True] | HighlightsOptions | None
type SummaryField = Literal[True] | SummaryOptions | None
type ContextField = Literal[True] | ContextOptions | None


class ContentsOptions(ExaModel):
    text: TextField = None
    highlights: HighlightsField = None
    summary: SummaryField = None

    def is_empty(self) -> bool:
        return self.text is None and self.highlights is None and self.summary is None


class SearchRequest(ExaModel):
    query: str
    type: SearchType = SearchType.AUTO
    num_results: int = 10
    contents: ContentsOptions | None = None
    include_domains: list[str] | None = None
    exclude_domains: list[str] | None = None
    start_published_date: str | None = None
    end_published_date: str | None = None
    category: str | None = None
    max_age_hours: int | None = None


class ContentsRequest(ExaModel):
    ids: list[str]
    text: TextField = None
    highlights: HighlightsField = None
    summary: SummaryField = None
    context: ContextField = None
    subpages: int | None = None
    subpage_target: list[str] | None = None
    max_age_hours: int | None = None
    livecrawl_timeout: int | None = None


class APIErrorBody(ExaModel):
    error: str
