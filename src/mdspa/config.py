"""Application configuration: settings schema and config.yaml loader"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, field_validator

from mdspa.core.links import LinkLocality


CONFIG_FILE = "config.yaml"
ENV_PREFIX = "MDSPA_"


class Settings(BaseModel):
    source_dir:    str = Field(default="site",  description="Source tree to build")
    output_dir:    str = Field(default="out",   description="Output tree")
    root_address:  str = Field(default="",      description="Absolute site URL used for feed links")
    title:         str = Field(default="",      description="Feed channel title")
    description:   str = Field(default="",      description="Feed channel description")
    language:      str = Field(default="en-GB", description="Feed channel language tag")
    log_level:     str = Field(default="info",  pattern="^(critical|error|warning|info|debug)$")
    log_file:      Optional[str] = Field(default=None, description="Also append log records to this file")
    copy_older_files:         bool = Field(default=False, description="Copy assets even when the output is up to date")
    minify_html:              bool = Field(default=False, description="Minify generated and copied HTML")
    minifier_copy_on_failure: bool = Field(default=False, description="Copy CSS unmodified when minifying fails")
    link_locality: LinkLocality = Field(default=LinkLocality.stem, description="Rule deciding which links are local")
    parser_config: str = Field(default="gfm-like", description="MarkdownIt parser preset name")

    @field_validator("log_level", mode="before")
    @classmethod
    def lower_log_level(cls, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value


def load_config(overrides: dict[str, Any] = None) -> Settings:
    """Load Settings from config.yaml, then MDSPA_<FIELD> env vars, then non-None CLI overrides."""
    data: dict[str, Any] = {}
    if Path(CONFIG_FILE).exists():
        try:
            data = yaml.safe_load(Path(CONFIG_FILE).read_text()) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid {CONFIG_FILE}: {e}") from e

    for name in Settings.model_fields:
        if val := os.getenv(f"{ENV_PREFIX}{name.upper()}"):
            data[name] = val

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})
    return Settings(**data)
