"""Engine configuration.

Defaults mirror the admin dashboard: images up to 10 MB, at most five
additional images per entity and five collection items per page. Deployments
override them through ``CATALOG_FORMS_*`` environment variables.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_DEFAULT_IMAGE_TYPES = ("image/jpeg", "image/png", "image/webp")


@dataclass(slots=True)
class ResourceLimits:
    allowed_content_types: Sequence[str]
    max_file_size_bytes: int
    max_additional: int


class EngineConfig(BaseSettings):
    """Pydantic settings container for the form session engine."""

    model_config = SettingsConfigDict(env_prefix="CATALOG_FORMS_", extra="ignore")

    allowed_content_types: tuple[str, ...] = Field(
        default=_DEFAULT_IMAGE_TYPES,
        description="MIME types accepted for pending image resources.",
    )
    max_file_size_mb: int = Field(
        default=10,
        ge=1,
        description="Upper bound for a single attached image in megabytes.",
    )
    max_additional_images: int = Field(
        default=5,
        ge=0,
        description="Maximum number of additional (gallery) images per entity.",
    )
    collection_page_size: int = Field(
        default=5,
        ge=1,
        description="Number of sub-entities shown per page in editable collections.",
    )
    storage_base_url: str = Field(
        default="http://localhost:3000/api",
        description="Base URL of the upload endpoint used by the storage uploader.",
    )
    api_base_url: str = Field(
        default="http://localhost:3000/api",
        description="Base URL of the REST API used for create/update calls.",
    )
    request_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Timeout applied to storage and persistence requests in seconds.",
    )

    log_level: str = Field(
        default="INFO",
        description="Level applied to the catalog_forms logger by configure_logging.",
    )
    log_json: bool = Field(
        default=True,
        description="Render log records as JSON; console rendering otherwise.",
    )

    def resource_limits(self) -> ResourceLimits:
        return ResourceLimits(
            allowed_content_types=tuple(self.allowed_content_types),
            max_file_size_bytes=self.max_file_size_mb * 1024 * 1024,
            max_additional=self.max_additional_images,
        )

    @classmethod
    def build_default(cls) -> "EngineConfig":
        """Construct configuration from the environment with built-in defaults."""

        return cls()


__all__ = ["EngineConfig", "ResourceLimits"]
