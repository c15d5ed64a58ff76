import urllib.parse

import httpx
import pytest

from oauth2.errors import TransportError
from oauth2.flows import ClientCredentialsFlow
from oauth2.grants import ClientCredentialsGrant
from oauth2.models import ProtocolRequest
from tokenclient.constants import APP_VERSION
from tokenclient.http import USER_AGENT, HttpxTransport
from tests.flow_helpers import SERVICE_URI, request_parameters

TOKEN_URL = "https://login.example.com/oauth/token"


def test_post_sends_form_body(httpx_mock) -> None:
    httpx_mock.add_response(
        url=TOKEN_URL,
        method="POST",
        json={"token_type": "Bearer", "access_token": "T1", "expires_in": 3600},
    )

    with HttpxTransport() as transport:
        response = transport.send(
            ProtocolRequest(url=TOKEN_URL, body_parameters={"grant_type": "client_credentials"})
        )

    request = httpx_mock.get_request()
    assert request.headers["content-type"] == "application/x-www-form-urlencoded"
    assert request.headers["user-agent"] == USER_AGENT
    assert urllib.parse.parse_qs(request.content.decode()) == {"grant_type": ["client_credentials"]}
    assert response.ok
    assert response.body_parameters == {
        "token_type": "Bearer",
        "access_token": "T1",
        "expires_in": "3600",
    }


def test_form_encoded_response(httpx_mock) -> None:
    httpx_mock.add_response(
        url=TOKEN_URL,
        method="POST",
        text="access_token=T1&token_type=Bearer&expires_in=60",
        headers={"content-type": "application/x-www-form-urlencoded"},
    )

    with HttpxTransport() as transport:
        response = transport.send(ProtocolRequest(url=TOKEN_URL))

    assert response.body_parameters == {
        "access_token": "T1",
        "token_type": "Bearer",
        "expires_in": "60",
    }


def test_error_status_is_returned(httpx_mock) -> None:
    httpx_mock.add_response(
        url=TOKEN_URL,
        method="POST",
        status_code=400,
        json={"error": "invalid_request"},
    )

    with HttpxTransport() as transport:
        response = transport.send(ProtocolRequest(url=TOKEN_URL))

    assert response.status_code == 400
    assert not response.ok
    assert response.body_parameters["error"] == "invalid_request"


def test_get_sends_query(httpx_mock) -> None:
    httpx_mock.add_response(url="https://login.example.com/oauth/info?a=1", method="GET", json={})

    with HttpxTransport() as transport:
        response = transport.send(
            ProtocolRequest(
                url="https://login.example.com/oauth/info",
                method="GET",
                query_parameters={"a": "1"},
            )
        )

    assert response.body_parameters == {}


def test_network_error_raises_transport_error(httpx_mock) -> None:
    httpx_mock.add_exception(httpx.ConnectError("connection refused"))

    with HttpxTransport() as transport:
        with pytest.raises(TransportError, match="connection refused"):
            transport.send(ProtocolRequest(url=TOKEN_URL))


def test_malformed_json_raises_transport_error(httpx_mock) -> None:
    httpx_mock.add_response(
        url=TOKEN_URL,
        method="POST",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )

    with HttpxTransport() as transport:
        with pytest.raises(TransportError, match="malformed JSON"):
            transport.send(ProtocolRequest(url=TOKEN_URL))


def test_supplied_client_is_not_closed(httpx_mock) -> None:
    httpx_mock.add_response(url=TOKEN_URL, method="POST", json={})
    client = httpx.Client()

    transport = HttpxTransport(client)
    transport.send(ProtocolRequest(url=TOKEN_URL))
    transport.close()

    assert not client.is_closed
    client.close()


def test_flow_over_httpx(httpx_mock) -> None:
    httpx_mock.add_response(
        url=TOKEN_URL,
        method="POST",
        json={"token_type": "Bearer", "access_token": "T1", "expires_in": 3600},
    )
    grant = ClientCredentialsGrant(SERVICE_URI, request_parameters())

    with HttpxTransport() as transport:
        flow = ClientCredentialsFlow(grant, transport=transport)
        assert flow.get_access_token_string() == "T1"
        assert flow.get_access_token_string() == "T1"

    assert len(httpx_mock.get_requests()) == 1


def test_user_agent_carries_version() -> None:
    assert USER_AGENT == f"tokenclient/{APP_VERSION}"
