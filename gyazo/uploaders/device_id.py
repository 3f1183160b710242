"""Account-less uploads identified by a device ID."""

from __future__ import annotations

import logging
from typing import final

import requests

from gyazo.config import GyazoConfig
from gyazo.errors import GyazoAPIError
from gyazo.models.upload import UploadMetadata, UploadResponse
from gyazo.uploaders.base import ImageSource, ProgressCallback
from gyazo.uploaders.multipart import build_upload_body

logger = logging.getLogger(__name__)

DEVICE_ID_FIELD = "id"
DEVICE_ID_HEADER = "X-Gyazo-ID"


@final
class DeviceIDUploader:
    """Uploads to Gyazo with a device ID instead of an access token.

    This goes through the older ``upload.cgi`` protocol: the response body
    is the permalink as plain text and the (possibly newly issued) device ID
    comes back in the ``X-Gyazo-ID`` header.
    """

    def __init__(self, device_id: str, config: GyazoConfig | None = None) -> None:
        self._device_id = device_id
        self.config = config or GyazoConfig()

    @property
    def device_id(self) -> str:
        return self._device_id

    def upload(
        self,
        image: ImageSource,
        metadata: UploadMetadata | None = None,
        progress_callback: ProgressCallback | None = None,
    ) -> UploadResponse:
        """Upload an image.

        Args:
            image: Image bytes or a binary file object
            metadata: Optional metadata sent with the image
            progress_callback: Callback(bytes_sent, total_bytes)

        Returns:
            UploadResponse with permalink_url and device_id set

        Raises:
            GyazoAPIError: If the service rejects the upload; the message is
                the response body
            requests.exceptions.RequestException: On transport failure
        """
        extra_fields = [(DEVICE_ID_FIELD, self._device_id)] if self._device_id else None
        content_type, body = build_upload_body(
            image,
            metadata,
            extra_fields=extra_fields,
            progress_callback=progress_callback,
        )

        url = self.config.device_upload_endpoint
        logger.debug("POST %s", url)
        response = requests.post(
            url,
            data=body,
            headers={"Content-Type": content_type},
            timeout=self.config.timeout,
        )
        logger.debug("POST %s -> HTTP %s", url, response.status_code)

        if not response.ok:
            raise GyazoAPIError(response.text, status_code=response.status_code)

        return UploadResponse(
            permalink_url=response.text.strip(),
            device_id=response.headers.get(DEVICE_ID_HEADER, ""),
        )
