"""Pydantic models describing a sync run."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator

DEFAULT_API_URL = "https://api.aerodb.net"
DEFAULT_SORT: list[dict[str, str]] = [{"name": "asc"}, {"id": "asc"}]


class SyncConfig(BaseModel):
    """Static configuration for one fetch-and-reconcile run."""

    api_url: str = DEFAULT_API_URL
    api_key: SecretStr | None = None
    resource: str = "airports"
    page_size: int = Field(default=100, gt=0)
    max_concurrency: int = Field(default=5, ge=1)
    # At least one tie-breaking key keeps paging stable between requests.
    sort: list[dict[str, Literal["asc", "desc"]]] = Field(
        default_factory=lambda: [dict(item) for item in DEFAULT_SORT]
    )
    timeout: float = Field(default=30.0, gt=0)
    max_retries: int = Field(default=0, ge=0)
    retry_backoff: float = Field(default=1.0, ge=0)
    json_path: Path = Field(default=Path("airports.json"))
    csv_path: Path = Field(default=Path("airports.csv"))
    version_path: Path = Field(default=Path("package.json"))

    @field_validator("api_url", mode="before")
    @classmethod
    def _strip_trailing_slash(cls, value: Any) -> str:
        text = str(value or "").strip()
        if not text:
            return DEFAULT_API_URL
        return text.rstrip("/")

    @field_validator("api_key", mode="before")
    @classmethod
    def _blank_key_is_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("json_path", "csv_path", "version_path", mode="before")
    @classmethod
    def _coerce_path(cls, value: Any) -> Path:
        if value is None or not str(value).strip():
            raise ValueError("output path cannot be empty")
        return Path(value)

    @model_validator(mode="after")
    def _validate_sort(self) -> "SyncConfig":
        if not self.sort:
            raise ValueError("sort requires at least one key")
        for item in self.sort:
            if len(item) != 1:
                raise ValueError("each sort entry must map exactly one field to asc/desc")
        if not self.resource.strip("/"):
            raise ValueError("resource cannot be empty")
        return self

    def resolve_paths(self, base_dir: Path) -> "SyncConfig":
        """Return a copy with relative output paths anchored at ``base_dir``."""

        def _anchor(path: Path) -> Path:
            return path if path.is_absolute() else (base_dir / path).resolve()

        return self.model_copy(
            update={
                "json_path": _anchor(self.json_path),
                "csv_path": _anchor(self.csv_path),
                "version_path": _anchor(self.version_path),
            }
        )

    def masked(self) -> dict[str, Any]:
        payload = self.model_dump(mode="json")
        payload["api_key"] = "********" if self.api_key else None
        return payload


__all__ = ["DEFAULT_API_URL", "DEFAULT_SORT", "SyncConfig"]
