"""
Remote Service Client Tests

The HTTP session is replaced with a stub so no network is used.

Run with: pytest backend/pos_backend/tests/test_remote.py -v
"""
import pytest
import requests

from pos_backend.exceptions import RemoteServiceError
from pos_backend.remote import RemoteServiceClient


class StubResponse:

    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        self.text = text if text is not None else ("" if body is None else str(body))
        self.content = self.text.encode()

    def json(self):
        if self._body is None:
            raise ValueError("No JSON body")
        return self._body


class StubSession:

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def request(self, **kwargs):
        self.calls.append(kwargs)
        if self.error:
            raise self.error
        return self.response


class TestRemoteServiceClient:

    def test_posts_json_to_endpoint(self):
        session = StubSession(StubResponse(201, {"id": "order-1"}))
        client = RemoteServiceClient("http://orders.local/api/", timeout=5, session=session)

        result = client._make_request("POST", "/orders", {"clientId": "abc12345"})

        assert result == {"id": "order-1"}
        call = session.calls[0]
        assert call["url"] == "http://orders.local/api/orders"
        assert call["json"] == {"clientId": "abc12345"}
        assert call["timeout"] == 5
        assert call["headers"]["Content-Type"] == "application/json"

    def test_default_timeout_from_settings(self, settings):
        settings.POS_REMOTE_TIMEOUT = 12
        client = RemoteServiceClient("http://orders.local", session=StubSession())
        assert client.timeout == 12

    def test_transport_error_becomes_remote_error(self):
        session = StubSession(error=requests.ConnectionError("connection refused"))
        client = RemoteServiceClient("http://orders.local", session=session)
        with pytest.raises(RemoteServiceError) as exc_info:
            client._make_request("POST")
        assert exc_info.value.remote_status is None

    def test_error_status_carries_details(self):
        session = StubSession(StubResponse(422, {"error": {"message": "Invalid catalog item"}}))
        client = RemoteServiceClient("http://orders.local", session=session)
        with pytest.raises(RemoteServiceError) as exc_info:
            client._make_request("POST")
        assert exc_info.value.remote_status == 422
        assert exc_info.value.details == {"error": {"message": "Invalid catalog item"}}

    def test_no_content_is_empty_dict(self):
        session = StubSession(StubResponse(204))
        client = RemoteServiceClient("http://orders.local", session=session)
        assert client._make_request("DELETE", "/po-1") == {}

    def test_non_json_body_rejected(self):
        session = StubSession(StubResponse(200, text="<html>gateway</html>"))
        client = RemoteServiceClient("http://orders.local", session=session)
        with pytest.raises(RemoteServiceError):
            client._make_request("GET")
