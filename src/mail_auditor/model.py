import logging
from pathlib import Path
from typing import Optional, List, Any, Callable, Literal, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

LinkType = Literal["external", "email", "phone", "sms", "anchor", "other"]
SpellingStrategy = Literal["dictionary", "heuristic"]

BROKEN_LINK_STATUS = "Not responding or error"


class ReportModel(BaseModel):
    """
    Base for every record that ends up in a report.
    Records are frozen and serialise with camelCase keys (e.g. 'sizeBytes').
    """
    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class ImageRecord(ReportModel):
    src: str = ""
    name: str = ""
    alt: Optional[str] = None  # None means the attribute is absent
    size_bytes: Optional[int] = None
    size_kb: Optional[float] = Field(default=None, alias="sizeKB")

    @property
    def is_alt_missing(self) -> bool:
        return self.alt is None or not self.alt.strip()


class LinkRecord(ReportModel):
    href: str
    text: str
    target: Optional[str] = None
    type: LinkType = "other"


class BrokenLinkRecord(LinkRecord):
    status: str = BROKEN_LINK_STATUS

    @classmethod
    def from_link(cls, link: LinkRecord) -> "BrokenLinkRecord":
        return cls(**link.model_dump(), status=BROKEN_LINK_STATUS)


class SpellingError(ReportModel):
    word: str
    context: Optional[str] = None


class TemplateToken(ReportModel):
    """A single {{ ... }} merge tag found in the raw source."""
    text: str
    raw: str
    offset: int
    phrases: Optional[List[str]] = None
    bucket: Optional[Literal["general", "preheader"]] = None


class AnalysisReport(ReportModel):
    """
    The aggregate result of one analysis call.
    Every field defaults to empty so that a failed pass leaves a gap
    instead of breaking the report.
    Fields are tuples, so the report cannot be changed in place either.
    """
    images: Tuple[ImageRecord, ...] = Field(default_factory=tuple)
    images_without_alt: Tuple[ImageRecord, ...] = Field(default_factory=tuple)
    links: Tuple[LinkRecord, ...] = Field(default_factory=tuple)
    broken_links: Tuple[BrokenLinkRecord, ...] = Field(default_factory=tuple)
    bold_texts: Tuple[str, ...] = Field(default_factory=tuple)
    italic_texts: Tuple[str, ...] = Field(default_factory=tuple)
    font_families: Tuple[str, ...] = Field(default_factory=tuple)
    font_sizes: Tuple[str, ...] = Field(default_factory=tuple)
    tds_without_period: Tuple[str, ...] = Field(default_factory=tuple)
    spelling_errors: Tuple[str, ...] = Field(default_factory=tuple)
    spelling_errors_with_context: Tuple[SpellingError, ...] = Field(default_factory=tuple)
    repeated_words: Tuple[str, ...] = Field(default_factory=tuple)
    double_spaces: Tuple[str, ...] = Field(default_factory=tuple)
    invisible_chars: Tuple[str, ...] = Field(default_factory=tuple)
    veeva_tokens: Tuple[str, ...] = Field(default_factory=tuple)
    custom_text_blocks: Tuple[Tuple[str, ...], ...] = Field(default_factory=tuple)
    custom_text_preheaders: Tuple[Tuple[str, ...], ...] = Field(default_factory=tuple)

    def to_payload(self) -> dict:
        """JSON-ready dictionary with the public camelCase field names."""
        return self.model_dump(mode="json", by_alias=True)


class AnalysisOptions(BaseModel):
    """
    Knobs of a single analysis call.
    Collaborators (logger, spell checker, http service) can be injected;
    when left empty the engine builds its own for the duration of the call.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    spelling_strategy: SpellingStrategy = "dictionary"
    dictionary_path: Optional[str] = None
    dictionary_language: str = "en_US"

    probe_links: bool = True
    probe_concurrency: int = Field(default=10, ge=1)
    probe_timeout: float = Field(default=5.0, gt=0)
    max_probes: Optional[int] = Field(default=50, ge=0)
    probe_deadline: Optional[float] = Field(default=30.0, gt=0)
    resolve_image_sizes: bool = True
    user_agent: Optional[str] = None

    base_path: Optional[Path] = None

    logger: Optional[logging.Logger] = None
    progress_callback: Optional[Callable[[int, int], None]] = None
    spell_checker: Optional[Any] = None
    http_service: Optional[Any] = None

    @field_validator("base_path", mode="before")
    @classmethod
    def _normalize_base_path(cls, v: Any) -> Optional[Path]:
        if v is None or v == "":
            return None
        return Path(v)

    @classmethod
    def from_config(cls, config: Any, **overrides: Any) -> "AnalysisOptions":
        """
        Builds options from a ConfigManager-like object exposing get_nested().
        Keyword overrides win over the configured values.
        """
        values = {
            "spelling_strategy": config.get_nested("spelling.strategy", "dictionary"),
            "dictionary_path": config.get_nested("spelling.dictionary_path"),
            "dictionary_language": config.get_nested("spelling.language", "en_US"),
            "probe_links": config.get_nested("link_checker.enabled", True),
            "probe_concurrency": config.get_nested("link_checker.concurrency", 10),
            "probe_timeout": config.get_nested("link_checker.timeout", 5.0),
            "max_probes": config.get_nested("link_checker.max_probes", 50),
            "probe_deadline": config.get_nested("link_checker.deadline", 30.0),
            "resolve_image_sizes": config.get_nested("images.resolve_sizes", True),
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)
