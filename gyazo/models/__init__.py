"""Data models for Gyazo API requests and responses."""

from .image import OCR, DeleteResponse, Image, ImageMetadata, ListResponse
from .token import Token
from .upload import UploadMetadata, UploadResponse
from .user import User

__all__ = [
    "DeleteResponse",
    "Image",
    "ImageMetadata",
    "ListResponse",
    "OCR",
    "Token",
    "UploadMetadata",
    "UploadResponse",
    "User",
]
