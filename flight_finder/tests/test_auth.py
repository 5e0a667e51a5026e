import logging
from unittest.mock import Mock, patch

import pytest
import requests

from flight_finder.auth import (
    PRODUCTION_URL,
    TEST_URL,
    Credentials,
    Token,
    TokenManager,
)
from flight_finder.errors import AuthenticationError


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def token_response(token="abc123", expires_in=1799):
    resp = Mock(status_code=200)
    resp.json.return_value = {
        "type": "amadeusOAuth2Token",
        "access_token": token,
        "expires_in": expires_in,
    }
    return resp


def make_manager(clock=None, base_url=TEST_URL):
    return TokenManager(
        Credentials("hWI62YL2jSXaZyH7", "very-secret"),
        base_url,
        clock=clock or FakeClock(),
    )


@patch("requests.post")
def test_first_call_fetches_token(mock_post):
    mock_post.return_value = token_response()
    clock = FakeClock()
    manager = make_manager(clock)

    assert manager.token is None
    assert manager.ensure_valid_token() == "abc123"
    assert manager.token == Token("abc123", 1_000.0 + 1799)

    mock_post.assert_called_once()
    args, kwargs = mock_post.call_args
    assert args[0] == f"{TEST_URL}/v1/security/oauth2/token"
    assert kwargs["data"] == {
        "grant_type": "client_credentials",
        "client_id": "hWI62YL2jSXaZyH7",
        "client_secret": "very-secret",
    }
    assert kwargs["headers"]["Content-Type"] == "application/x-www-form-urlencoded"


@patch("requests.post")
def test_valid_token_is_reused(mock_post):
    mock_post.return_value = token_response(expires_in=100)
    clock = FakeClock()
    manager = make_manager(clock)

    manager.ensure_valid_token()
    clock.now += 99.9
    assert manager.ensure_valid_token() == "abc123"
    assert mock_post.call_count == 1


@patch("requests.post")
def test_expired_token_is_refreshed_exactly_once(mock_post):
    mock_post.side_effect = [
        token_response("first", expires_in=100),
        token_response("second", expires_in=100),
    ]
    clock = FakeClock()
    manager = make_manager(clock)

    assert manager.ensure_valid_token() == "first"
    clock.now += 100  # now == expiry counts as expired
    assert manager.ensure_valid_token() == "second"
    assert manager.ensure_valid_token() == "second"
    assert mock_post.call_count == 2


@patch("requests.post")
def test_unauthorized_uses_error_description(mock_post):
    resp = Mock(status_code=401)
    resp.json.return_value = {
        "error": "invalid_client",
        "error_description": "Client credentials are invalid",
        "code": 38187,
        "title": "Invalid parameters",
    }
    mock_post.return_value = resp

    manager = make_manager()
    with pytest.raises(AuthenticationError) as err:
        manager.ensure_valid_token()

    assert "Client credentials are invalid" in str(err.value)
    assert err.value.status_code == 401
    assert manager.token is None


@patch("requests.post")
def test_unstructured_error_falls_back_to_transport_message(mock_post):
    resp = Mock(status_code=503, text="Service Unavailable")
    resp.json.side_effect = ValueError("no json")
    mock_post.return_value = resp

    with pytest.raises(AuthenticationError, match="HTTP 503"):
        make_manager().refresh()


@patch("requests.post")
def test_network_error_is_wrapped(mock_post):
    mock_post.side_effect = requests.ConnectionError("connection refused")

    with pytest.raises(AuthenticationError, match="connection refused"):
        make_manager().refresh()


@patch("requests.post")
def test_malformed_body_raises(mock_post):
    resp = Mock(status_code=200)
    resp.json.return_value = {"token": "nope"}
    mock_post.return_value = resp

    with pytest.raises(AuthenticationError, match="malformed"):
        make_manager().refresh()


@patch("requests.post")
def test_refresh_logs_environment_without_secret(mock_post, caplog):
    mock_post.return_value = token_response()
    caplog.set_level(logging.INFO)

    make_manager(base_url=PRODUCTION_URL).refresh()

    text = "\n".join(r.getMessage() for r in caplog.records)
    assert "PRODUCTION" in text
    assert "hWI62YL2..." in text
    assert "very-secret" not in text


def test_credentials_repr_is_masked():
    creds = Credentials("hWI62YL2jSXaZyH7", "very-secret")
    assert "very-secret" not in repr(creds)
    assert creds.masked_id() == "hWI62YL2..."
