"""Gyazo API client authenticated with an OAuth2 access token."""

from __future__ import annotations

import logging
from typing import Any, final
from urllib.parse import quote

import requests
from requests.auth import AuthBase

from gyazo.config import GyazoConfig
from gyazo.errors import GyazoAPIError, MalformedResponseError
from gyazo.models.image import DeleteResponse, Image, ListResponse
from gyazo.models.upload import UploadMetadata, UploadResponse
from gyazo.models.user import User
from gyazo.uploaders.base import ImageSource, ProgressCallback
from gyazo.uploaders.multipart import build_upload_body

logger = logging.getLogger(__name__)

MAX_PER_PAGE = 100


class BearerAuth(AuthBase):
    """Attaches an OAuth2 bearer token to each outgoing request."""

    def __init__(self, token: str) -> None:
        self.token = token

    def __call__(self, r: requests.PreparedRequest) -> requests.PreparedRequest:
        r.headers["Authorization"] = f"Bearer {self.token}"
        return r


def decode_json(response: requests.Response) -> Any:
    """Decode a response body as JSON.

    Raises:
        MalformedResponseError: If the body is not valid JSON
    """
    try:
        return response.json()
    except ValueError as e:
        raise MalformedResponseError(
            f"invalid JSON in response: {e}",
            status_code=response.status_code,
            body=response.text,
        ) from e


def raise_for_message(response: requests.Response) -> None:
    """Turn a non-success response into an exception.

    The service reports failures as ``{"message": "..."}``.

    Raises:
        GyazoAPIError: If the response is not 2xx and carries a message
        MalformedResponseError: If the response is not 2xx and has no message
    """
    if response.ok:
        return

    data = decode_json(response)
    if isinstance(data, dict) and data.get("message"):
        raise GyazoAPIError(str(data["message"]), status_code=response.status_code)
    raise MalformedResponseError(
        f"unexpected error response (HTTP {response.status_code})",
        status_code=response.status_code,
        body=response.text,
    )


def _int_header(response: requests.Response, name: str) -> int:
    try:
        return int(response.headers.get(name, ""))
    except ValueError:
        return 0


@final
class Oauth2Client:
    """Gyazo client which uses an OAuth2 access token.

    Creating a client performs no network I/O; the token is only attached
    when a request is sent.
    """

    def __init__(self, access_token: str, config: GyazoConfig | None = None) -> None:
        """Initialize the client.

        Args:
            access_token: OAuth2 access token
            config: Endpoint configuration. Defaults to the public service.

        Raises:
            ValueError: If access_token is empty
        """
        if not access_token:
            raise ValueError("access_token must not be empty")

        self._access_token = access_token
        self.config = config or GyazoConfig()
        self.session = requests.Session()
        self.session.auth = BearerAuth(access_token)

    @property
    def access_token(self) -> str:
        return self._access_token

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

    def __enter__(self) -> Oauth2Client:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def _make_request(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        logger.debug("%s %s", method, url)
        response = self.session.request(method, url, timeout=self.config.timeout, **kwargs)
        logger.debug("%s %s -> HTTP %s", method, url, response.status_code)
        return response

    def get_caller_identity(self) -> User:
        """Get the user that owns the access token.

        Returns:
            User record

        Raises:
            GyazoAPIError: If the service returns an error message
            MalformedResponseError: If the response has no user object
            requests.exceptions.RequestException: On transport failure
        """
        response = self._make_request("GET", self.config.user_endpoint)
        data = decode_json(response)
        if not isinstance(data, dict):
            raise MalformedResponseError(
                "user response is not a JSON object",
                status_code=response.status_code,
                body=response.text,
            )
        if data.get("message"):
            raise GyazoAPIError(str(data["message"]), status_code=response.status_code)

        user = data.get("user")
        if not isinstance(user, dict):
            raise MalformedResponseError(
                "user response has no user object",
                status_code=response.status_code,
                body=response.text,
            )
        return User.from_dict(user)

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
            UploadResponse describing the stored image

        Raises:
            GyazoAPIError: If the upload is rejected with a message
            MalformedResponseError: If the response cannot be parsed
            requests.exceptions.RequestException: On transport failure
        """
        content_type, body = build_upload_body(image, metadata, progress_callback=progress_callback)
        response = self._make_request(
            "POST",
            self.config.upload_endpoint,
            data=body,
            headers={"Content-Type": content_type},
        )
        raise_for_message(response)

        data = decode_json(response)
        if not isinstance(data, dict):
            raise MalformedResponseError(
                "upload response is not a JSON object",
                status_code=response.status_code,
                body=response.text,
            )
        return UploadResponse.from_dict(data)

    def list(self, page: int = 1, per_page: int = 20) -> ListResponse:
        """Get one page of the user's images.

        Args:
            page: Page number, starting at 1
            per_page: Images per page, 1 to 100

        Returns:
            ListResponse with pagination taken from the response headers

        Raises:
            ValueError: If page or per_page is out of range
            GyazoAPIError: If the service returns an error message
            MalformedResponseError: If the body is not a JSON array
            requests.exceptions.RequestException: On transport failure
        """
        if page < 1:
            raise ValueError(f"page must be 1 or greater, got {page}")
        if per_page < 1 or per_page > MAX_PER_PAGE:
            raise ValueError(f"per_page must be 1 to {MAX_PER_PAGE}, got {per_page}")

        response = self._make_request(
            "GET",
            self.config.images_endpoint,
            params={"page": page, "per_page": per_page},
        )
        raise_for_message(response)

        data = decode_json(response)
        if not isinstance(data, list):
            raise MalformedResponseError(
                "image list is not a JSON array",
                status_code=response.status_code,
                body=response.text,
            )

        return ListResponse(
            total_count=_int_header(response, "X-Total-Count"),
            current_page=_int_header(response, "X-Current-Page"),
            per_page=_int_header(response, "X-Per-Page"),
            user_type=response.headers.get("X-User-Type", ""),
            images=tuple(Image.from_dict(item) for item in data if isinstance(item, dict)),
        )

    def delete(self, image_id: str) -> DeleteResponse:
        """Delete an image.

        Args:
            image_id: Identifier of the image to delete

        Returns:
            DeleteResponse for the removed image

        Raises:
            ValueError: If image_id is empty
            GyazoAPIError: If the response carries a message
            MalformedResponseError: If the response cannot be parsed
            requests.exceptions.RequestException: On transport failure
        """
        if not image_id:
            raise ValueError("image_id must not be empty")

        url = f"{self.config.images_endpoint}/{quote(image_id, safe='')}"
        response = self._make_request("DELETE", url)
        raise_for_message(response)

        data = decode_json(response)
        if not isinstance(data, dict):
            raise MalformedResponseError(
                "delete response is not a JSON object",
                status_code=response.status_code,
                body=response.text,
            )
        if data.get("message"):
            raise GyazoAPIError(str(data["message"]), status_code=response.status_code)
        return DeleteResponse.from_dict(data)
