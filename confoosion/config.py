from typing import Any, Optional

from pydantic import Field, FilePath
from pydantic_settings import BaseSettings

from confoosion.template import MAX_RECURSION_DEPTH, MAX_RECURSION_DEPTH_LIMIT


class ParserConfig(BaseSettings):
    max_recursion_depth: int = Field(
        default=MAX_RECURSION_DEPTH, ge=1, le=MAX_RECURSION_DEPTH_LIMIT
    )
    templates: list[str] = Field(default_factory=lambda: ["double", "parent"])


class OutputConfig(BaseSettings):
    standalone: bool = False
    template_file: Optional[FilePath] = None


class Config(BaseSettings):
    parser_config: ParserConfig = Field(default_factory=ParserConfig)
    output_config: OutputConfig = Field(default_factory=OutputConfig)


def load_config(config_dict: dict[str, Any]) -> Config:
    return Config(**config_dict)
