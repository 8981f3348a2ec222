from pydantic import BaseModel, Field, field_validator
from typing import Literal


class ContentConfig(BaseModel):
    roots: list[str] = ["content/docs", "content/guides", "content/_snippets"]
    extension: str = ".mdx"
    exclude_dirs: list[str] = ["node_modules"]
    guide_marker: str = "/guides/"

    @field_validator("extension")
    @classmethod
    def _dotted(cls, v: str) -> str:
        return v if v.startswith(".") else f".{v}"


class VersionConfig(BaseModel):
    file: str = ".repos/bun/LATEST"
    value: str | None = None
    placeholder: str = "$BUN_LATEST_VERSION"


class LinksConfig(BaseModel):
    image_base_url: str = "https://bun.com/docs/images"

    @field_validator("image_base_url")
    @classmethod
    def _strip_slash(cls, v: str) -> str:
        return v.rstrip("/")


class PipelineConfig(BaseModel):
    extra_passes: list[str] = []
    disabled_passes: list[str] = []


class ReportConfig(BaseModel):
    max_warnings: int = Field(default=10, ge=0)
    progress_every: int = Field(default=50, ge=1)


class MigrateConfig(BaseModel):
    content: ContentConfig = Field(default_factory=ContentConfig)
    version: VersionConfig = Field(default_factory=VersionConfig)
    links: LinksConfig = Field(default_factory=LinksConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    log_level: Literal["debug", "info", "warn", "error"] = "info"
    log_format: Literal["text", "json"] = "text"
