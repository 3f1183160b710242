from unittest.mock import patch

import pytest
import requests

from gyazo.config import GyazoConfig
from gyazo.errors import GyazoAPIError, MalformedResponseError
from gyazo.models import DeleteResponse, UploadMetadata, User
from gyazo.uploaders.oauth2 import BearerAuth, Oauth2Client

from tests.helpers import decode_form, make_response

IMAGE = {
    "image_id": "8980c52421e452ac3355ca3e5cfe7a0c",
    "permalink_url": "https://gyazo.com/8980c52421e452ac3355ca3e5cfe7a0c",
    "thumb_url": "https://i.gyazo.com/thumb/180/afaiefnaf.png",
    "url": "https://i.gyazo.com/8980c52421e452ac3355ca3e5cfe7a0c.png",
    "type": "png",
    "created_at": "2014-05-21 14:23:10+0900",
    "metadata": {"app": None, "title": None, "url": None, "desc": ""},
    "ocr": {"locale": "en", "description": "gyazo"},
}


@pytest.fixture
def client(config: GyazoConfig) -> Oauth2Client:
    return Oauth2Client("test-token", config)


class TestConstruction:
    def test_empty_token_rejected(self) -> None:
        with pytest.raises(ValueError):
            Oauth2Client("")

    def test_default_config(self) -> None:
        assert Oauth2Client("tok").config == GyazoConfig()

    def test_bearer_auth_applied_at_request_time(self, client: Oauth2Client) -> None:
        assert isinstance(client.session.auth, BearerAuth)
        assert "Authorization" not in client.session.headers
        prepared = requests.Request("GET", "https://api.example.test/").prepare()
        prepared = client.session.auth(prepared)
        assert prepared.headers["Authorization"] == "Bearer test-token"

    def test_context_manager_closes_session(self, config: GyazoConfig) -> None:
        with patch.object(requests.Session, "close") as mock_close:
            with Oauth2Client("tok", config) as client:
                assert client.access_token == "tok"
        mock_close.assert_called_once_with()


class TestGetCallerIdentity:
    def test_success(self, client: Oauth2Client) -> None:
        body = {"user": {"email": "a@example.com", "name": "alice", "profile_image": "", "uid": "42"}}
        with patch.object(client.session, "request", return_value=make_response(200, body)) as mock_request:
            user = client.get_caller_identity()

        assert user == User(email="a@example.com", name="alice", uid="42")
        args, kwargs = mock_request.call_args
        assert args == ("GET", "https://api.example.test/api/users/me")
        assert kwargs["timeout"] == 5.0

    def test_message_raises(self, client: Oauth2Client) -> None:
        response = make_response(401, {"message": "You are not authorized."})
        with patch.object(client.session, "request", return_value=response):
            with pytest.raises(GyazoAPIError) as exc_info:
                client.get_caller_identity()
        assert exc_info.value.message == "You are not authorized."
        assert exc_info.value.status_code == 401

    def test_malformed_body(self, client: Oauth2Client) -> None:
        with patch.object(client.session, "request", return_value=make_response(200, text="<html>")):
            with pytest.raises(MalformedResponseError):
                client.get_caller_identity()

    def test_missing_user_object(self, client: Oauth2Client) -> None:
        with patch.object(client.session, "request", return_value=make_response(200, {"users": []})):
            with pytest.raises(MalformedResponseError):
                client.get_caller_identity()

    def test_transport_error_propagates(self, client: Oauth2Client) -> None:
        error = requests.exceptions.ConnectionError("connection refused")
        with patch.object(client.session, "request", side_effect=error):
            with pytest.raises(requests.exceptions.ConnectionError):
                client.get_caller_identity()


class TestUpload:
    def test_success(self, client: Oauth2Client) -> None:
        response = make_response(200, {"image_id": "abc", "url": "http://x"})
        with patch.object(client.session, "request", return_value=response) as mock_request:
            result = client.upload(b"image-bytes", UploadMetadata(is_public=True, referer_url="http://ref"))

        assert result.image_id == "abc"
        assert result.url == "http://x"
        assert result.permalink_url == ""

        args, kwargs = mock_request.call_args
        assert args == ("POST", "https://upload.example.test/api/upload")
        content_type = kwargs["headers"]["Content-Type"]
        fields = decode_form(content_type, kwargs["data"].read())
        assert fields == {
            "imagedata": b"image-bytes",
            "metadata_is_public": b"true",
            "referer_url": b"http://ref",
        }

    def test_error_message(self, client: Oauth2Client) -> None:
        response = make_response(400, {"message": "image is too large"})
        with patch.object(client.session, "request", return_value=response):
            with pytest.raises(GyazoAPIError, match="image is too large"):
                client.upload(b"image-bytes")

    def test_error_without_json(self, client: Oauth2Client) -> None:
        response = make_response(502, text="<html>Bad Gateway</html>")
        with patch.object(client.session, "request", return_value=response):
            with pytest.raises(MalformedResponseError) as exc_info:
                client.upload(b"image-bytes")
        assert exc_info.value.status_code == 502
        assert "Bad Gateway" in exc_info.value.body

    def test_success_with_unexpected_shape(self, client: Oauth2Client) -> None:
        with patch.object(client.session, "request", return_value=make_response(200, ["abc"])):
            with pytest.raises(MalformedResponseError):
                client.upload(b"image-bytes")


class TestList:
    @pytest.mark.parametrize("page,per_page", [(0, 20), (-1, 20), (1, 0), (1, 101), (0, 0)])
    def test_invalid_pagination_makes_no_request(self, client: Oauth2Client, page: int, per_page: int) -> None:
        with patch.object(client.session, "request") as mock_request:
            with pytest.raises(ValueError):
                client.list(page, per_page)
        mock_request.assert_not_called()

    @pytest.mark.parametrize("per_page", [1, 100])
    def test_per_page_bounds_accepted(self, client: Oauth2Client, per_page: int) -> None:
        with patch.object(client.session, "request", return_value=make_response(200, [])):
            assert client.list(1, per_page).images == ()

    def test_pagination_from_headers(self, client: Oauth2Client) -> None:
        headers = {
            "X-Total-Count": "42",
            "X-Current-Page": "1",
            "X-Per-Page": "20",
            "X-User-Type": "lite",
        }
        response = make_response(200, [IMAGE, {"image_id": "second", "type": "jpg"}], headers=headers)
        with patch.object(client.session, "request", return_value=response) as mock_request:
            result = client.list(1, 20)

        assert result.total_count == 42
        assert result.current_page == 1
        assert result.per_page == 20
        assert result.user_type == "lite"
        assert len(result.images) == 2
        assert result.images[0].image_id == IMAGE["image_id"]
        assert result.images[0].ocr is not None
        assert result.images[0].ocr.description == "gyazo"
        assert result.images[1].image_id == "second"

        args, kwargs = mock_request.call_args
        assert args == ("GET", "https://api.example.test/api/images")
        assert kwargs["params"] == {"page": 1, "per_page": 20}

    def test_missing_headers_default_to_zero(self, client: Oauth2Client) -> None:
        response = make_response(200, [], headers={"X-Total-Count": "many"})
        with patch.object(client.session, "request", return_value=response):
            result = client.list()
        assert result.total_count == 0
        assert result.current_page == 0
        assert result.user_type == ""

    def test_error_message(self, client: Oauth2Client) -> None:
        response = make_response(401, {"message": "You are not authorized."})
        with patch.object(client.session, "request", return_value=response):
            with pytest.raises(GyazoAPIError, match="You are not authorized."):
                client.list()

    def test_body_not_an_array(self, client: Oauth2Client) -> None:
        with patch.object(client.session, "request", return_value=make_response(200, {"images": []})):
            with pytest.raises(MalformedResponseError):
                client.list()


class TestDelete:
    def test_success(self, client: Oauth2Client) -> None:
        response = make_response(200, {"image_id": "abc", "type": "png"})
        with patch.object(client.session, "request", return_value=response) as mock_request:
            result = client.delete("abc")

        assert result == DeleteResponse(image_id="abc", type="png")
        args, _ = mock_request.call_args
        assert args == ("DELETE", "https://api.example.test/api/images/abc")

    def test_message_is_an_error(self, client: Oauth2Client) -> None:
        response = make_response(404, {"message": "not found"})
        with patch.object(client.session, "request", return_value=response):
            with pytest.raises(GyazoAPIError) as exc_info:
                client.delete("missing")
        assert str(exc_info.value) == "not found"

    def test_message_with_success_status(self, client: Oauth2Client) -> None:
        response = make_response(200, {"message": "not found"})
        with patch.object(client.session, "request", return_value=response):
            with pytest.raises(GyazoAPIError, match="not found"):
                client.delete("missing")

    def test_error_status_without_message(self, client: Oauth2Client) -> None:
        response = make_response(500, {"error": "internal"})
        with patch.object(client.session, "request", return_value=response):
            with pytest.raises(MalformedResponseError) as exc_info:
                client.delete("abc")
        assert exc_info.value.status_code == 500

    def test_id_is_escaped(self, client: Oauth2Client) -> None:
        response = make_response(200, {"image_id": "../users/me", "type": "png"})
        with patch.object(client.session, "request", return_value=response) as mock_request:
            client.delete("../users/me?x=1#y")
        args, _ = mock_request.call_args
        assert args == ("DELETE", "https://api.example.test/api/images/..%2Fusers%2Fme%3Fx%3D1%23y")

    def test_empty_id_makes_no_request(self, client: Oauth2Client) -> None:
        with patch.object(client.session, "request") as mock_request:
            with pytest.raises(ValueError):
                client.delete("")
        mock_request.assert_not_called()
