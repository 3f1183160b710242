"""OAuth2 authorization code flow completed through a local redirect listener."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, Callable
from urllib.parse import parse_qs, urlencode, urlparse

import requests
from rich.console import Console

from gyazo.config import DEFAULT_AUTH_URL, DEFAULT_TIMEOUT, DEFAULT_TOKEN_URL, GyazoConfig
from gyazo.errors import OAuth2Error
from gyazo.models.token import Token

logger = logging.getLogger(__name__)

console = Console()

STATE_TOKEN = "state"
CONFIRMATION_BODY = b"ok! back to cli\n"
REQUEST_TIMEOUT = 5.0


@dataclass(frozen=True)
class OAuth2Config:
    """OAuth2 application credentials and provider endpoints."""

    client_id: str
    client_secret: str
    redirect_url: str = ""
    scopes: tuple[str, ...] = ()
    auth_url: str = DEFAULT_AUTH_URL
    token_url: str = DEFAULT_TOKEN_URL
    timeout: float = DEFAULT_TIMEOUT

    @classmethod
    def for_gyazo(
        cls,
        client_id: str,
        client_secret: str,
        redirect_url: str = "",
        config: GyazoConfig | None = None,
    ) -> OAuth2Config:
        """Create an OAuth2Config using the endpoints from a GyazoConfig."""
        config = config or GyazoConfig()
        return cls(
            client_id=client_id,
            client_secret=client_secret,
            redirect_url=redirect_url,
            auth_url=config.auth_url,
            token_url=config.token_url,
            timeout=config.timeout,
        )


@dataclass(frozen=True)
class HTTPAuthorizeConf:
    """Where the local listener waits for the redirect."""

    path: str = "/"
    port: int = 3000
    host: str = ""


def auth_code_url(conf: OAuth2Config, state: str = STATE_TOKEN) -> str:
    """Build the URL the user opens to grant access.

    Args:
        conf: OAuth2 configuration
        state: Anti-forgery token echoed back on the redirect

    Returns:
        Authorization URL
    """
    params = {
        "access_type": "online",
        "client_id": conf.client_id,
        "response_type": "code",
    }
    if conf.redirect_url:
        params["redirect_uri"] = conf.redirect_url
    if conf.scopes:
        params["scope"] = " ".join(conf.scopes)
    params["state"] = state

    separator = "&" if "?" in conf.auth_url else "?"
    return f"{conf.auth_url}{separator}{urlencode(params)}"


def exchange_code(conf: OAuth2Config, code: str) -> Token:
    """Exchange an authorization code for an access token.

    Args:
        conf: OAuth2 configuration
        code: Authorization code received on the redirect

    Returns:
        Token issued by the provider

    Raises:
        OAuth2Error: If the provider rejects the code or the response is unusable
        requests.exceptions.RequestException: On transport failure
    """
    data = {
        "grant_type": "authorization_code",
        "code": code,
        "client_id": conf.client_id,
        "client_secret": conf.client_secret,
    }
    if conf.redirect_url:
        data["redirect_uri"] = conf.redirect_url

    logger.debug("POST %s", conf.token_url)
    response = requests.post(
        conf.token_url,
        data=data,
        headers={"Accept": "application/json"},
        timeout=conf.timeout,
    )
    logger.debug("POST %s -> HTTP %s", conf.token_url, response.status_code)

    try:
        body = response.json()
    except ValueError as e:
        raise OAuth2Error(
            f"token endpoint returned invalid JSON (HTTP {response.status_code}): {response.text}"
        ) from e

    if not isinstance(body, dict):
        raise OAuth2Error(f"token endpoint returned unexpected body: {response.text}")
    if not response.ok or body.get("error"):
        error = body.get("error") or f"HTTP {response.status_code}"
        description = body.get("error_description")
        raise OAuth2Error(f"{error}: {description}" if description else str(error))

    try:
        return Token.from_dict(body)
    except ValueError as e:
        raise OAuth2Error(str(e)) from e


class _CallbackServer(ThreadingHTTPServer):
    daemon_threads = True

    def __init__(self, address: tuple[str, int], listener: CallbackListener) -> None:
        self.listener = listener
        super().__init__(address, _CallbackHandler)


class _CallbackHandler(BaseHTTPRequestHandler):
    server: _CallbackServer
    # Drop connections that never send a request (e.g. browser preconnects).
    timeout = REQUEST_TIMEOUT

    def do_GET(self) -> None:
        listener = self.server.listener
        parsed = urlparse(self.path)
        if parsed.path != listener.hconf.path:
            self._respond(404, b"not found\n")
            return

        params = parse_qs(parsed.query)
        state = params.get("state", [None])[0]
        if state is not None and state != listener.expected_state:
            self._respond(400, b"state mismatch\n")
            return

        code = params.get("code", [""])[0]
        if not code:
            self._respond(400, b"missing code\n")
            return

        self._respond(200, CONFIRMATION_BODY)
        listener.resolve_code(code)

    def _respond(self, status: int, body: bytes) -> None:
        self.send_response(status)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        _ = self.wfile.write(body)

    def log_message(self, format: str, *args: Any) -> None:
        logger.debug("callback: " + format, *args)


class CallbackListener:
    """One-shot HTTP listener that waits for the authorization redirect.

    The server is bound and run on a background thread and handles each
    connection on its own thread, so an idle connection cannot block the
    redirect. Whichever happens first, a request carrying a code or a
    listener failure (including a failure to bind), resolves the result;
    anything after that is ignored.
    """

    def __init__(self, hconf: HTTPAuthorizeConf, expected_state: str = STATE_TOKEN) -> None:
        self.hconf = hconf
        self.expected_state = expected_state
        self._result: Future[str] = Future()
        self._lock = threading.Lock()
        self._bound = threading.Event()
        self._server: _CallbackServer | None = None
        self._thread: threading.Thread | None = None

    @property
    def port(self) -> int | None:
        """Port the listener is bound to, or None if it is not listening."""
        if self._server is None:
            return None
        return self._server.server_address[1]

    def start(self) -> None:
        """Start the listener thread and wait until binding has been attempted."""
        self._thread = threading.Thread(target=self._run, name="gyazo-oauth-callback", daemon=True)
        self._thread.start()
        _ = self._bound.wait()

    def _run(self) -> None:
        try:
            server = _CallbackServer((self.hconf.host, self.hconf.port), self)
        except OSError as e:
            logger.debug("callback listener failed to bind: %s", e)
            self.resolve_error(e)
            self._bound.set()
            return

        self._server = server
        self._bound.set()
        try:
            server.serve_forever()
        except Exception as e:
            self.resolve_error(e)
        finally:
            server.server_close()

    def resolve_code(self, code: str) -> bool:
        """Deliver the authorization code. Returns False if already resolved."""
        with self._lock:
            if self._result.done():
                return False
            self._result.set_result(code)
            return True

    def resolve_error(self, error: BaseException) -> bool:
        """Deliver a listener failure. Returns False if already resolved."""
        with self._lock:
            if self._result.done():
                return False
            self._result.set_exception(error)
            return True

    def wait(self, timeout: float | None = None) -> str:
        """Block until a code arrives or the listener fails.

        Args:
            timeout: Seconds to wait, or None to wait forever

        Returns:
            The authorization code

        Raises:
            TimeoutError: If nothing arrived within timeout
            OSError: If the listener could not bind or failed while serving
        """
        try:
            return self._result.result(timeout)
        except FutureTimeoutError as e:
            raise TimeoutError(f"no authorization code received within {timeout} seconds") from e

    def stop(self) -> None:
        """Shut the listener down and wait for its thread to exit."""
        server = self._server
        if server is not None:
            server.shutdown()
        if self._thread is not None:
            self._thread.join()
        self._server = None


def _announce(url: str) -> None:
    console.print(f"open {url}", soft_wrap=True)
    console.print("waiting callback...")


def authorize_by_http(
    conf: OAuth2Config,
    hconf: HTTPAuthorizeConf | None = None,
    announce: Callable[[str], None] | None = None,
    timeout: float | None = None,
) -> Token:
    """Run the authorization code flow and return an access token.

    The authorization URL is handed to ``announce`` (printed by default) and
    a local listener waits for the provider to redirect back with a code.

    Args:
        conf: OAuth2 configuration; redirect_url must point at the listener
        hconf: Listener path and port. Defaults to "/" on port 3000.
        announce: Called with the authorization URL
        timeout: Seconds to wait for the redirect, or None to wait forever

    Returns:
        Token obtained by exchanging the code

    Raises:
        OSError: If the listener fails; no exchange is attempted
        TimeoutError: If timeout expires before the redirect arrives
        OAuth2Error: If the code exchange fails
    """
    hconf = hconf or HTTPAuthorizeConf()
    (announce or _announce)(auth_code_url(conf, STATE_TOKEN))

    listener = CallbackListener(hconf, expected_state=STATE_TOKEN)
    listener.start()
    try:
        code = listener.wait(timeout)
    finally:
        listener.stop()

    return exchange_code(conf, code)
