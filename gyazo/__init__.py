"""Client library for the Gyazo screenshot hosting API."""

from .auth import HTTPAuthorizeConf, OAuth2Config, authorize_by_http
from .config import GyazoConfig
from .errors import GyazoAPIError, GyazoError, MalformedResponseError, OAuth2Error
from .models import (
    OCR,
    DeleteResponse,
    Image,
    ImageMetadata,
    ListResponse,
    Token,
    UploadMetadata,
    UploadResponse,
    User,
)
from .uploaders import DeviceIDUploader, Oauth2Client, Uploader

__all__ = [
    "DeleteResponse",
    "DeviceIDUploader",
    "GyazoAPIError",
    "GyazoConfig",
    "GyazoError",
    "HTTPAuthorizeConf",
    "Image",
    "ImageMetadata",
    "ListResponse",
    "MalformedResponseError",
    "OAuth2Config",
    "OAuth2Error",
    "OCR",
    "Oauth2Client",
    "Token",
    "UploadMetadata",
    "UploadResponse",
    "Uploader",
    "User",
    "authorize_by_http",
]
