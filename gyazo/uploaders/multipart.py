"""Multipart body construction for image uploads."""

from __future__ import annotations

from typing import Any

from requests_toolbelt.multipart.encoder import MultipartEncoder, MultipartEncoderMonitor

from gyazo.models.upload import UploadMetadata
from gyazo.uploaders.base import ImageSource, ProgressCallback

IMAGE_FIELD = "imagedata"
IMAGE_FILENAME = "image"
IMAGE_CONTENT_TYPE = "application/octet-stream"


def metadata_fields(metadata: UploadMetadata) -> list[tuple[str, str]]:
    """Convert upload metadata into form fields.

    ``metadata_is_public`` is always present; every other field is only
    included when it has a value.

    Args:
        metadata: Metadata to serialize

    Returns:
        List of (field name, value) pairs in request order
    """
    fields = [("metadata_is_public", "true" if metadata.is_public else "false")]
    if metadata.referer_url:
        fields.append(("referer_url", metadata.referer_url))
    if metadata.app:
        fields.append(("app", metadata.app))
    if metadata.title:
        fields.append(("title", metadata.title))
    if metadata.desc:
        fields.append(("desc", metadata.desc))
    if metadata.created_at is not None:
        fields.append(("created_at", str(metadata.created_at)))
    if metadata.collection_id:
        fields.append(("collection_id", metadata.collection_id))
    return fields


def build_upload_body(
    image: ImageSource,
    metadata: UploadMetadata | None = None,
    extra_fields: list[tuple[str, str]] | None = None,
    progress_callback: ProgressCallback | None = None,
) -> tuple[str, MultipartEncoder | MultipartEncoderMonitor]:
    """Encode an image and its metadata as multipart/form-data.

    Args:
        image: Image bytes or a binary file object
        metadata: Optional upload metadata
        extra_fields: Additional form fields appended after the metadata
        progress_callback: Callback(bytes_read, total_bytes) invoked while
            the body is streamed

    Returns:
        Tuple of (content type including boundary, body to send)
    """
    fields: list[tuple[str, Any]] = [
        (IMAGE_FIELD, (IMAGE_FILENAME, image, IMAGE_CONTENT_TYPE)),
    ]
    if metadata is not None:
        fields.extend(metadata_fields(metadata))
    if extra_fields:
        fields.extend(extra_fields)

    encoder = MultipartEncoder(fields=fields)
    if progress_callback is None:
        return encoder.content_type, encoder

    total = encoder.len
    monitor = MultipartEncoderMonitor(
        encoder,
        lambda monitor: progress_callback(monitor.bytes_read, total),
    )
    return monitor.content_type, monitor
