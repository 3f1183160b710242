"""OAuth2 token data model."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ._fields import text


@dataclass(frozen=True)
class Token:
    """Access token issued by the authorization server."""

    access_token: str
    token_type: str = "bearer"
    refresh_token: str = ""
    expires_in: int | None = None
    scope: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Token:
        """Build a Token from a token endpoint response.

        Args:
            data: Decoded JSON body of the token response

        Returns:
            Token instance

        Raises:
            ValueError: If the response has no access_token
        """
        access_token = text(data, "access_token")
        if not access_token:
            raise ValueError("token response has no access_token")

        expires_in = data.get("expires_in")
        return cls(
            access_token=access_token,
            token_type=text(data, "token_type") or "bearer",
            refresh_token=text(data, "refresh_token"),
            expires_in=int(expires_in) if expires_in is not None else None,
            scope=text(data, "scope"),
        )
