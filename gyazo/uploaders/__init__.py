"""Gyazo upload clients."""

from .base import Uploader
from .device_id import DeviceIDUploader
from .multipart import build_upload_body
from .oauth2 import BearerAuth, Oauth2Client

__all__ = ["BearerAuth", "DeviceIDUploader", "Oauth2Client", "Uploader", "build_upload_body"]
