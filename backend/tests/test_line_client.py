"""Tests for the LINE Messaging API push client."""

from unittest.mock import MagicMock, patch

import httpx
import pytest

from acctbill.services.line_client import LineMessagingClient, LinePushResult


@pytest.fixture
def mock_http():
    with patch("acctbill.services.line_client.httpx.Client") as client_cls:
        http = MagicMock()
        client_cls.return_value.__enter__.return_value = http
        http.client_cls = client_cls
        yield http


class TestPushText:
    def test_success(self, mock_http):
        mock_http.post.return_value = httpx.Response(200, json={})

        result = LineMessagingClient().push_text("token-1", "C123", "哈囉")

        assert result == LinePushResult(success=True, status_code=200)
        mock_http.post.assert_called_once_with(
            "https://api.line.me/v2/bot/message/push",
            json={"to": "C123", "messages": [{"type": "text", "text": "哈囉"}]},
            headers={
                "Content-Type": "application/json",
                "Authorization": "Bearer token-1",
            },
        )

    def test_uses_configured_timeout(self, mock_http):
        mock_http.post.return_value = httpx.Response(200, json={})

        LineMessagingClient(timeout=3.0).push_text("token-1", "U1", "hi")

        mock_http.client_cls.assert_called_once_with(timeout=3.0)

    def test_default_timeout_is_ten_seconds(self):
        assert LineMessagingClient().timeout == 10.0

    def test_custom_base_url_trailing_slash(self, mock_http):
        mock_http.post.return_value = httpx.Response(200, json={})

        LineMessagingClient(base_url="http://line.test/v2/bot/").push_text("t", "U1", "hi")

        assert mock_http.post.call_args.args[0] == "http://line.test/v2/bot/message/push"

    def test_error_status_uses_line_message(self, mock_http):
        mock_http.post.return_value = httpx.Response(
            400, json={"message": "The request body has 1 error(s)"}
        )

        result = LineMessagingClient().push_text("token-1", "C123", "hi")

        assert result.success is False
        assert result.status_code == 400
        assert result.error == "The request body has 1 error(s)"

    def test_error_status_without_json_uses_text(self, mock_http):
        mock_http.post.return_value = httpx.Response(500, text="upstream down")

        result = LineMessagingClient().push_text("token-1", "C123", "hi")

        assert result.success is False
        assert result.error == "upstream down"

    def test_error_status_with_empty_body(self, mock_http):
        mock_http.post.return_value = httpx.Response(503)

        result = LineMessagingClient().push_text("token-1", "C123", "hi")

        assert result.error == "HTTP 503"

    def test_timeout_is_transport_failure(self, mock_http):
        mock_http.post.side_effect = httpx.ReadTimeout("timed out")

        result = LineMessagingClient().push_text("token-1", "C123", "hi")

        assert result.success is False
        assert result.status_code is None
        assert result.error == "timed out"

    def test_connection_error_is_transport_failure(self, mock_http):
        mock_http.post.side_effect = httpx.ConnectError("Connection refused")

        result = LineMessagingClient().push_text("token-1", "C123", "hi")

        assert result.success is False
        assert "Connection refused" in result.error

    def test_missing_token_does_not_call_line(self, mock_http):
        result = LineMessagingClient().push_text("", "C123", "hi")

        assert result.success is False
        mock_http.post.assert_not_called()

    def test_missing_recipient_does_not_call_line(self, mock_http):
        result = LineMessagingClient().push_text("token-1", "", "hi")

        assert result.success is False
        mock_http.post.assert_not_called()
