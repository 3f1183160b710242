"""Gyazo user data model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ._fields import text


@dataclass(frozen=True)
class User:
    """The account that owns an access token."""

    email: str = ""
    name: str = ""
    profile_image: str = ""
    uid: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> User:
        return cls(
            email=text(data, "email"),
            name=text(data, "name"),
            profile_image=text(data, "profile_image"),
            uid=text(data, "uid"),
        )
