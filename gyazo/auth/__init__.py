"""OAuth2 authorization for the Gyazo API."""

from .flow import (
    STATE_TOKEN,
    CallbackListener,
    HTTPAuthorizeConf,
    OAuth2Config,
    auth_code_url,
    authorize_by_http,
    exchange_code,
)

__all__ = [
    "STATE_TOKEN",
    "CallbackListener",
    "HTTPAuthorizeConf",
    "OAuth2Config",
    "auth_code_url",
    "authorize_by_http",
    "exchange_code",
]
