"""Configuration model for merge runs."""

import re

from pydantic import BaseModel, Field, field_validator, model_validator

# Structural identities of the exporter's page layout mapped to component names.
DEFAULT_IDENTITY_MAP: dict[str, str] = {
    "title section": "Titlesection",
    "Account Overview": "AccountOverview",
    "Quick actions": "Quickactions",
    "Activity Section": "ActivitySection",
    "header": "Header",
    "Footer": "Footer",
}

MEDIA_FEATURES = ("min-width", "max-width")


class MergerConfig(BaseModel):
    """Merge configuration with validation."""

    # Breakpoint prefixes
    medium_prefix: str = Field(default="md")
    wide_prefix: str = Field(default="lg")
    prefix_separator: str = Field(default=":")

    # Pipeline behaviour
    position_similarity_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    continue_on_error: bool = Field(default=True)
    disabled_passes: list[str] = Field(default_factory=list)

    # Per-component worker pool (1 = sequential)
    max_workers: int = Field(default=1, ge=1, le=32)

    # Utility compiler
    utility_media_feature: str = Field(default="min-width")
    utility_css_per_component: bool = Field(default=False)

    # Page assembly
    identity_map: dict[str, str] = Field(
        default_factory=lambda: dict(DEFAULT_IDENTITY_MAP)
    )
    page_name: str = Field(default="Page")
    asset_import_prefix: str = Field(default="./img/")
    asset_import_replacement: str = Field(default="../img/")

    # Stylesheet section markers
    utility_section_pattern: str = Field(
        default=r"/\*\s*[^*]*utility classes\s*\*/"
    )
    custom_section_pattern: str = Field(default=r"/\*\s*=====\s*[3-9]\..*?\*/")

    # Export layout
    components_dir: str = Field(default="components")
    images_dir: str = Field(default="img")
    clean_source_name: str = Field(default="Component-clean.tsx")
    clean_style_name: str = Field(default="Component-clean.css")
    layout_file: str = Field(default="metadata.xml")
    metadata_file: str = Field(default="metadata.json")
    output_prefix: str = Field(default="responsive-merger")
    report_file: str = Field(default="responsive-metadata.json")

    @field_validator("medium_prefix", "wide_prefix")
    @classmethod
    def validate_prefix(cls, v: str) -> str:
        if not v or not re.fullmatch(r"[a-z0-9-]+", v):
            raise ValueError(f"Invalid breakpoint prefix: {v!r}")
        return v

    @field_validator("utility_media_feature")
    @classmethod
    def validate_media_feature(cls, v: str) -> str:
        if v not in MEDIA_FEATURES:
            raise ValueError(f"Media feature must be one of {MEDIA_FEATURES}, got {v!r}")
        return v

    @field_validator("utility_section_pattern", "custom_section_pattern")
    @classmethod
    def validate_pattern(cls, v: str) -> str:
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid section pattern {v!r}: {e}") from e
        return v

    @model_validator(mode="after")
    def validate_distinct_prefixes(self) -> "MergerConfig":
        if self.medium_prefix == self.wide_prefix:
            raise ValueError("medium_prefix and wide_prefix must differ")
        return self
