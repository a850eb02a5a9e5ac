"""Paper data models for Hugging Face daily papers and their AI analysis."""

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


class Paper(BaseModel):
    """One entry of the Hugging Face daily listing, normalized.

    Built fresh on every fetch and never modified afterwards. Dumped with
    camelCase aliases (publishedDate, paperUrl, pdfUrl) by the HTTP API.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str = Field(..., description="Hugging Face paper ID, e.g., 2501.12345")
    title: str = Field(default="", description="Paper title")
    authors: list[str] = Field(default_factory=list, description="Author names, in order")
    organization: str = Field(default="Unknown", description="Submitting organization")
    abstract: str = Field(default="", description="Paper abstract")
    published_date: str = Field(..., description="Listing date, YYYY-MM-DD")
    paper_url: str = Field(..., description="Paper page URL")
    pdf_url: str = Field(..., description="PDF/page URL")
    upvotes: int = Field(default=0, ge=0, description="Community upvotes")


class AnalyzedPaper(BaseModel):
    """User-facing form of a paper after the analysis stage.

    `authors` is an already truncated display string, not the raw list.
    Serialized with camelCase aliases (titleKo, keyPoints, eliFor5, paperUrl).
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: str
    title_ko: str | None = Field(default=None, alias="titleKo")
    authors: str = Field(..., min_length=1)
    organization: str | None = None
    summary: str = Field(..., min_length=1)
    key_points: list[str] = Field(default_factory=list, alias="keyPoints")
    significance: str = ""
    eli5: str | None = Field(default=None, alias="eliFor5")
    paper_url: str = Field(..., alias="paperUrl")
    upvotes: int = 0


class AnalysisBatchResult(BaseModel):
    """Output of one analysis run."""

    model_config = ConfigDict(frozen=True)

    date: str = Field(..., description="Processed date, YYYY-MM-DD")
    count: int = Field(..., ge=0, description="Total papers found for the date")
    papers: list[AnalyzedPaper] = Field(default_factory=list)
    trend: str | None = Field(default=None, description="Optional overall trend note")

    @model_validator(mode="after")
    def _papers_within_count(self) -> "AnalysisBatchResult":
        if len(self.papers) > self.count:
            raise ValueError("More analyzed papers than papers found")
        return self

    def to_json_dict(self) -> dict:
        """Dump with camelCase paper fields, as returned by the HTTP API."""
        return self.model_dump(by_alias=True, exclude_none=True)
