"""Upload request and response data models."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ._fields import text


@dataclass(frozen=True)
class UploadMetadata:
    """Optional fields sent alongside an uploaded image.

    Fields left as None or "" are not sent. ``is_public`` is always sent
    once metadata is given, defaulting to private.
    """

    is_public: bool | None = None
    created_at: int | None = None
    referer_url: str = ""
    title: str = ""
    desc: str = ""
    collection_id: str = ""
    app: str = ""


@dataclass(frozen=True)
class UploadResponse:
    """Result of an upload.

    ``device_id`` is only filled in by device ID uploads, which return the
    permalink and nothing else.
    """

    image_id: str = ""
    permalink_url: str = ""
    thumb_url: str = ""
    url: str = ""
    type: str = ""
    created_at: str = ""
    device_id: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> UploadResponse:
        return cls(
            image_id=text(data, "image_id"),
            permalink_url=text(data, "permalink_url"),
            thumb_url=text(data, "thumb_url"),
            url=text(data, "url"),
            type=text(data, "type"),
            created_at=text(data, "created_at"),
        )
