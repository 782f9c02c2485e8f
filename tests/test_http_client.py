"""Tests for the shared HTTP helper."""

from unittest.mock import MagicMock, patch

import pytest
import requests

from common.http_client import safe_get
from constants import Constants
from errors import NetworkError


def _response(status_code, reason="OK"):
    res = MagicMock()
    res.status_code = status_code
    res.reason = reason
    return res


class TestSafeGet:
    """Test error mapping in safe_get."""

    @patch("common.http_client.requests.get")
    def test_returns_response_on_success(self, mock_get):
        mock_get.return_value = _response(200)

        res = safe_get("https://heroku-nodebin.s3.amazonaws.com", context="s3", params={"prefix": "node"})

        assert res.status_code == 200
        mock_get.assert_called_once_with(
            "https://heroku-nodebin.s3.amazonaws.com",
            timeout=Constants.REQUEST_TIMEOUT,
            params={"prefix": "node"},
        )

    @patch("common.http_client.requests.get")
    def test_non_2xx_raises(self, mock_get):
        mock_get.return_value = _response(403, "Forbidden")

        with pytest.raises(NetworkError) as exc_info:
            safe_get("https://heroku-nodebin.s3.amazonaws.com", context="s3")

        assert exc_info.value.status == 403
        assert exc_info.value.kind == "networkError"
        assert str(exc_info.value) == "HTTP 403: Forbidden (https://heroku-nodebin.s3.amazonaws.com)"

    @patch("common.http_client.requests.get")
    def test_timeout_raises(self, mock_get):
        mock_get.side_effect = requests.Timeout("slow")

        with pytest.raises(NetworkError, match="timed out"):
            safe_get("https://heroku-nodebin.s3.amazonaws.com", context="s3")

    @patch("common.http_client.requests.get")
    def test_connection_error_raises(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("refused")

        with pytest.raises(NetworkError, match="s3 connection error: refused"):
            safe_get("https://heroku-nodebin.s3.amazonaws.com", context="s3")
