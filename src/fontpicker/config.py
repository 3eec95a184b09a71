"""Configuration surface consumed by the catalog store and selections.

FontpickerConfig

`weights` (`list[int] | None`)
: Default weight allowlist applied to every selection. Values are coerced to
  positive integers; an empty allowlist disables filtering.

`include_italic` (`bool`)
: Whether italic variants are requested when a family provides them.
  Italic-only families always request italics.

`disable_remote_catalog` (`bool`)
: Skip both the cached and the remote catalog and read the bundled fallback.

`cache_ttl` (`int`)
: Lifetime of the cached remote catalog in minutes. `0` bypasses the cache
  entirely.

`remote_url` (`str`)
: Endpoint returning the provider's font list as JSON.

`timeout` (`float`)
: Timeout in seconds for the remote catalog request.

`cache_dir` (`Path | None`)
: Directory of the file cache. Defaults to the user cache directory.

`fallback_path` (`Path | None`)
: JSON snapshot of the provider list used instead of the bundled copy when
  neither the cache nor the remote endpoint delivers a catalog.

`preconnect` (`bool`)
: Emit the preconnect hint before stylesheet links by default.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
import yaml

from fontpicker.constants import CACHE_DEFAULT_TTL, DEFAULT_TIMEOUT, REMOTE_URL
from fontpicker.exceptions import ConfigError
from fontpicker.utils import normalize_weights


CONFIG_SECTION = "fontpicker"


class FontpickerConfig(BaseModel):
    """Options controlling catalog acquisition and selection defaults."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    weights: list[int] | None = None
    include_italic: bool = Field(default=True, alias="includeItalic")
    disable_remote_catalog: bool = Field(default=False, alias="disableRemoteCatalog")
    cache_ttl: int = Field(default=CACHE_DEFAULT_TTL, alias="cacheTtl")
    remote_url: str = Field(default=REMOTE_URL, alias="remoteUrl")
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    cache_dir: Path | None = Field(default=None, alias="cacheDir")
    fallback_path: Path | None = Field(default=None, alias="fallbackPath")
    preconnect: bool = True

    @field_validator("weights", mode="before")
    @classmethod
    def _coerce_weights(cls, value: Any) -> list[int] | None:
        if value is None:
            return None
        normalized = normalize_weights(value)
        return normalized or None

    @field_validator("cache_dir", "fallback_path")
    @classmethod
    def _expand_user(cls, value: Path | None) -> Path | None:
        return value.expanduser() if value is not None else None

    @field_validator("cache_ttl", mode="before")
    @classmethod
    def _clamp_ttl(cls, value: Any) -> int:
        if value is None:
            return 0
        try:
            minutes = int(value)
        except (TypeError, ValueError) as exc:
            raise ValueError(f"cache_ttl must be an integer number of minutes, got {value!r}") from exc
        return max(0, minutes)


def _read_config_file(path: Path) -> dict[str, Any]:
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ConfigError(f"Unable to read configuration file '{path}'.") from exc
    except yaml.YAMLError as exc:
        raise ConfigError(f"Configuration file '{path}' is not valid YAML.") from exc
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ConfigError(f"Configuration file '{path}' must contain a mapping.")
    section = raw.get(CONFIG_SECTION, raw)
    if section is None:
        return {}
    if not isinstance(section, Mapping):
        raise ConfigError(f"The '{CONFIG_SECTION}' section of '{path}' must be a mapping.")
    return dict(section)


def _canonical_keys(payload: Mapping[str, Any]) -> dict[str, Any]:
    aliases = {
        info.alias: name for name, info in FontpickerConfig.model_fields.items() if info.alias
    }
    return {aliases.get(key, key): value for key, value in payload.items()}


def load_config(path: str | Path | None = None, **overrides: Any) -> FontpickerConfig:
    """Build a configuration from an optional YAML file plus keyword overrides.

    Overrides set to ``None`` are ignored so CLI flags left unset do not mask
    file values.
    """
    payload: dict[str, Any] = {}
    if path is not None:
        payload.update(_canonical_keys(_read_config_file(Path(path))))
    payload.update(
        _canonical_keys({key: value for key, value in overrides.items() if value is not None})
    )
    try:
        return FontpickerConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid fontpicker configuration: {exc}") from exc


__all__ = ["CONFIG_SECTION", "FontpickerConfig", "load_config"]
