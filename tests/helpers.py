import json
import re
from typing import Any

import requests
from requests_toolbelt.multipart.decoder import MultipartDecoder


def make_response(
    status_code: int = 200,
    body: Any = None,
    text: str | None = None,
    headers: dict[str, str] | None = None,
) -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    if text is None:
        text = json.dumps(body) if body is not None else ""
    response._content = text.encode("utf-8")
    response.encoding = "utf-8"
    if headers:
        response.headers.update(headers)
    return response


def decode_form(content_type: str, content: bytes) -> dict[str, bytes]:
    fields: dict[str, bytes] = {}
    for part in MultipartDecoder(content, content_type).parts:
        disposition = part.headers[b"Content-Disposition"].decode()
        match = re.search(r'name="([^"]+)"', disposition)
        assert match is not None
        fields[match.group(1)] = part.content
    return fields
