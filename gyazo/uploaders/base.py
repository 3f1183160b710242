"""Upload capability shared by the OAuth2 and device ID clients."""

from __future__ import annotations

from typing import BinaryIO, Callable, Protocol, Union

from gyazo.models.upload import UploadMetadata, UploadResponse

ImageSource = Union[bytes, BinaryIO]
ProgressCallback = Callable[[int, int], None]


class Uploader(Protocol):
    """Anything that can push an image to Gyazo."""

    def upload(
        self,
        image: ImageSource,
        metadata: UploadMetadata | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> UploadResponse:
        ...
