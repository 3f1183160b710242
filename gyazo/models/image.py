"""Image records returned by the list and delete APIs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from ._fields import nested, text


@dataclass(frozen=True)
class OCR:
    """Text the service extracted from an image."""

    locale: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> OCR:
        return cls(locale=text(data, "locale"), description=text(data, "description"))


@dataclass(frozen=True)
class ImageMetadata:
    """Capture context recorded by the uploading application."""

    app: str = ""
    title: str = ""
    url: str = ""
    desc: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ImageMetadata:
        return cls(
            app=text(data, "app"),
            title=text(data, "title"),
            url=text(data, "url"),
            desc=text(data, "desc"),
        )


@dataclass(frozen=True)
class Image:
    """A stored image as reported by the service."""

    image_id: str = ""
    permalink_url: str = ""
    thumb_url: str = ""
    url: str = ""
    type: str = ""
    created_at: str = ""
    ocr: OCR | None = None
    metadata: ImageMetadata | None = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Image:
        """Build an Image from one element of the list API's JSON array.

        Args:
            data: Decoded JSON object

        Returns:
            Image with ``ocr``/``metadata`` set only when present and non-empty
        """
        ocr = nested(data, "ocr")
        metadata = nested(data, "metadata")
        return cls(
            image_id=text(data, "image_id"),
            permalink_url=text(data, "permalink_url"),
            thumb_url=text(data, "thumb_url"),
            url=text(data, "url"),
            type=text(data, "type"),
            created_at=text(data, "created_at"),
            ocr=OCR.from_dict(ocr) if ocr else None,
            metadata=ImageMetadata.from_dict(metadata) if metadata else None,
        )


@dataclass(frozen=True)
class ListResponse:
    """One page of a user's images.

    Pagination values come from response headers, not the body.
    """

    total_count: int = 0
    current_page: int = 0
    per_page: int = 0
    user_type: str = ""
    images: tuple[Image, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class DeleteResponse:
    """Identifier and type of a deleted image."""

    image_id: str = ""
    type: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DeleteResponse:
        return cls(image_id=text(data, "image_id"), type=text(data, "type"))
