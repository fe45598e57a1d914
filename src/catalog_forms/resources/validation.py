"""Local file validation utilities."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..core.config import ResourceLimits
from .resource_errors import InvalidResourceType, ResourceTooLarge
from .resource_models import LocalFile

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ResourceValidator:
    """Validate selected files against configured limits.

    Only metadata reported by the picker is inspected; the file content is
    never read.
    """

    limits: ResourceLimits

    def validate(self, file: LocalFile) -> None:
        content_type = (file.content_type or "").lower()
        if not content_type.startswith("image/") or content_type not in self._allowed():
            logger.warning(
                "resources.validate.invalid_type",
                extra={"file_name": file.name, "content_type": file.content_type},
            )
            raise InvalidResourceType(file, f"{file.name} is not a valid image")

        if file.size > self.limits.max_file_size_bytes:
            logger.warning(
                "resources.validate.too_large",
                extra={
                    "file_name": file.name,
                    "size_bytes": file.size,
                    "limit_bytes": self.limits.max_file_size_bytes,
                },
            )
            raise ResourceTooLarge(
                file,
                f"{file.name} exceeds {self.limits.max_file_size_bytes // (1024 * 1024)}MB limit",
            )

    def _allowed(self) -> set[str]:
        return {value.lower() for value in self.limits.allowed_content_types}


__all__ = ["ResourceValidator"]
