"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, field_validator

from sitepipe.core.render import DIAGRAM_LANGUAGES
from sitepipe.snapshot import SOURCE_EXCLUDES, SOURCE_EXTENSIONS


CONFIG_FILE = "config.yaml"
SKIP_ENV = "SKIP_BLOG_BUILD"


class Settings(BaseModel):
    app_name:     str = "sitepipe"
    project_root: str = Field(default=".",                   description="Root walked by the source snapshot")
    content_dir:  str = Field(default="content",             description="Directory of markdown articles")
    image_dir:    str = Field(default="frontend/static/img", description="Image tree mirrored to <output>/img")
    output_dir:   str = Field(default="dist",                description="Directory for generated pages, indexes and feed")
    parser_config: str = Field(default="gfm-like",           description="MarkdownIt parser preset name")
    site_url:     str = Field(default="https://stovoy.dev",  description="RSS channel link and item link base")
    feed_title:   str = Field(default="stovoy.dev Blog",     description="RSS channel title")
    feed_description: str = Field(default="Articles from stovoy.dev", description="RSS channel description")
    diagram_languages: list[str] = Field(default=list(DIAGRAM_LANGUAGES), description="Fence tags rendered as diagrams")
    source_extensions: list[str] = Field(default=list(SOURCE_EXTENSIONS), description="File suffixes kept in the snapshot")
    source_excludes:   list[str] = Field(default=list(SOURCE_EXCLUDES),   description="Directory names pruned from the snapshot")
    skip_build:   bool = Field(default=False, description="Make the build command a no-op")

    @field_validator("diagram_languages", "source_extensions", "source_excludes", mode="before")
    @classmethod
    def _split_csv(cls, value: Any) -> Any:
        """Accept comma-separated strings (env vars) as lists."""
        if isinstance(value, str):
            return [v.strip() for v in value.split(",") if v.strip()]
        return value


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then SITEPIPE_<FIELD> env vars, then non-None CLI overrides.

    SKIP_BLOG_BUILD, when set to any value, forces skip_build on.
    """
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Invalid {CONFIG_FILE}: expected a mapping, got {type(data).__name__}")

    for name in Settings.model_fields:
        if val := os.getenv(f"SITEPIPE_{name.upper()}"):
            data[name] = val
    if os.getenv(SKIP_ENV) is not None:
        data["skip_build"] = True

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
