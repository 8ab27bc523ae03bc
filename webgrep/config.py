"""
Loading and validation of the WebGrep crawl configuration.
The schema is described with Pydantic; files may be YAML or JSON.
"""
from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from webgrep.errors import ConfigurationError
from webgrep.utils import normalize_url


class OutputOptions(BaseModel):
    """grep-like rendering switches, fixed before the crawl starts."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    count: bool = Field(False, description="Print the number of matching blocks per page.")
    emphasize: bool = Field(False, description="Highlight matched spans in color.")
    no_filename: bool = Field(False, description="Do not prefix records with the page URL.")
    files_with_matches: bool = Field(False, description="Print only the header of matching pages.")
    only_matching: bool = Field(False, description="Print only the matched spans, one per line.")
    quiet: bool = Field(False, description="Write nothing to standard output.")
    initial_tab: bool = Field(False, description="Prefix each matched line with a tab.")


class CrawlConfig(BaseModel):
    """Configuration of a single crawl."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    pattern: str = Field(..., description="Regular expression searched in page blocks.")
    seeds: List[str] = Field(default_factory=list, description="URLs the crawl starts from.")
    threads: int = Field(1, ge=1, description="Number of concurrent workers.")
    output: OutputOptions = Field(default_factory=OutputOptions)
    offline: bool = Field(False, description="Crawl a synthetic web instead of the network.")
    offline_delay: float = Field(0.0, ge=0, description="Simulated latency of offline pages (seconds).")
    follow_all: bool = Field(False, description="Follow links of non-matching pages too.")
    max_pages: Optional[int] = Field(None, ge=1, description="Hard limit on the number of visited URLs.")
    timeout: float = Field(10.0, gt=0, description="Timeout of one request (seconds).")
    user_agent: str = Field("WebGrep/1.0", min_length=1, description="User-Agent header.")
    referrer: str = Field("https://example.org", description="Referer header.")
    retry_times: int = Field(0, ge=0, description="Retries on connection errors, 429 and 5xx.")
    retry_backoff: float = Field(0.5, ge=0, description="Base of the exponential retry backoff (seconds).")

    @field_validator("pattern")
    def _check_pattern(cls, v: str) -> str:
        try:
            re.compile(v, re.DOTALL)
        except re.error as exc:
            raise ValueError(f"invalid regular expression {v!r}: {exc}") from exc
        return v

    @field_validator("seeds")
    def _normalize_seeds(cls, v: List[str]) -> List[str]:
        seeds = [normalize_url(s) for s in v]
        if any(not s for s in seeds):
            raise ValueError("seed URLs must not be empty")
        return seeds

    @property
    def regex(self) -> re.Pattern[str]:
        return re.compile(self.pattern, re.DOTALL)


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Top level of YAML must be a mapping, got {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Invalid JSON in {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Top level of JSON must be a mapping, got {type(data).__name__}")
    return data


def read_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Read a YAML or JSON config file into a plain mapping."""
    path_obj = Path(path).expanduser().resolve()
    if not path_obj.is_file():
        raise ConfigurationError(f"Config file not found: {path_obj}")

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ConfigurationError(f"Unsupported config format: {suffix}")


def load_config(path: Union[str, Path, None] = None, **overrides: Any) -> CrawlConfig:
    """
    Build a validated CrawlConfig from an optional YAML/JSON file and keyword overrides.
    Overrides win over file values; the nested ``output`` mapping is merged key by key.
    Any problem is reported as ConfigurationError.
    """
    data: Dict[str, Any] = read_config_file(path) if path is not None else {}

    output_overrides = overrides.pop("output", None) or {}
    data.update(overrides)
    if output_overrides:
        output = data.get("output") or {}
        if not isinstance(output, dict):
            raise ConfigurationError("'output' must be a mapping")
        data["output"] = {**output, **output_overrides}

    try:
        return CrawlConfig(**data)
    except ValidationError as exc:
        raise ConfigurationError(str(exc)) from exc
