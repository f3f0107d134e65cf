"""
Tests for BaseRepository

Tests the foundation repository class with:
- URL building and request arguments
- JSON decoding and empty bodies
- Non-2xx responses translated to ApiError with status code
- Transport failures translated to ApiError
- Invalid JSON bodies
"""
import pytest
import requests
from unittest.mock import Mock

from config import ApiConfig
from repositories.base import ApiError, BaseRepository


def _response(status=200, payload=None, content=b"{}"):
    response = Mock()
    response.status_code = status
    response.content = content
    response.json.return_value = payload
    return response


class TestBaseRepository:
    """Test cases for BaseRepository._request()"""

    def _make_repo(self, response=None, error=None):
        session = Mock()
        if error is not None:
            session.request.side_effect = error
        else:
            session.request.return_value = response
        api = ApiConfig(base_url="https://api.test/api/", timeout=3.0, verify_ssl=False)
        return BaseRepository(api, session=session), session

    def test_get_returns_json(self):
        repo, session = self._make_repo(_response(payload={"ok": True}))

        assert repo._get("Market", params={"pageNumber": 1}) == {"ok": True}
        session.request.assert_called_once_with(
            "GET",
            "https://api.test/api/Market",
            params={"pageNumber": 1},
            json=None,
            timeout=3.0,
            verify=False,
        )

    def test_post_sends_json_body(self):
        repo, session = self._make_repo(_response(status=201, payload=7))

        assert repo._post("/Market", {"name": "N"}) == 7
        args, kwargs = session.request.call_args
        assert args == ("POST", "https://api.test/api/Market")
        assert kwargs["json"] == {"name": "N"}

    def test_empty_body_returns_none(self):
        repo, _ = self._make_repo(_response(status=204, content=b""))
        assert repo._delete("Market/4") is None

    @pytest.mark.parametrize("status", [400, 404, 500])
    def test_error_status_raises(self, status):
        repo, _ = self._make_repo(_response(status=status))

        with pytest.raises(ApiError) as exc_info:
            repo._put("Market/4", {})
        assert exc_info.value.status_code == status
        assert exc_info.value.is_not_found is (status == 404)

    def test_transport_failure_raises(self):
        repo, _ = self._make_repo(error=requests.ConnectionError("refused"))

        with pytest.raises(ApiError) as exc_info:
            repo._get("Region/all-regions")
        assert exc_info.value.status_code is None
        assert "refused" in str(exc_info.value)

    def test_timeout_raises(self):
        repo, _ = self._make_repo(error=requests.Timeout("slow"))
        with pytest.raises(ApiError):
            repo._get("Market")

    def test_invalid_json_raises(self):
        response = _response(content=b"<html>")
        response.json.side_effect = ValueError("not json")
        repo, _ = self._make_repo(response)

        with pytest.raises(ApiError, match="invalid JSON"):
            repo._get("Market")

    def test_default_session_is_requests_session(self, api_config):
        assert isinstance(BaseRepository(api_config).session, requests.Session)


class TestApiConfig:
    def test_url_joins_paths(self):
        assert ApiConfig("https://h/api/").url("/Market/4") == "https://h/api/Market/4"

    def test_env_var_overrides_base_url(self, monkeypatch):
        from config import API_URL_ENV_VAR, get_api_config

        monkeypatch.setenv(API_URL_ENV_VAR, "http://override:5000/api/")
        assert get_api_config().base_url == "http://override:5000/api"
