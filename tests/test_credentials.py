"""Tests for service account credential loading."""

import asyncio
import base64
import json
from unittest.mock import MagicMock, patch

import pytest
from google.auth.exceptions import RefreshError

from config import Settings
from services.credentials import (
    CredentialsError,
    build_credentials,
    credentials_source,
    get_access_token,
    load_service_account_info,
)


def _encode(info: dict) -> str:
    return base64.b64encode(json.dumps(info).encode("utf-8")).decode("ascii")


@pytest.fixture
def key_file(tmp_path):
    path = tmp_path / "sa.json"
    path.write_text(json.dumps({"type": "service_account", "client_email": "file@example.com"}))
    return path


class TestLoadServiceAccountInfo:
    def test_base64(self):
        settings = Settings(google_credentials_base64=_encode({"client_email": "b64@example.com"}))
        assert load_service_account_info(settings)["client_email"] == "b64@example.com"

    def test_file(self, key_file):
        settings = Settings(google_application_credentials=str(key_file))
        assert load_service_account_info(settings)["client_email"] == "file@example.com"

    def test_base64_wins_over_file(self, key_file):
        settings = Settings(
            google_credentials_base64=_encode({"client_email": "b64@example.com"}),
            google_application_credentials=str(key_file),
        )
        assert load_service_account_info(settings)["client_email"] == "b64@example.com"
        assert credentials_source(settings) == "GOOGLE_CREDENTIALS_BASE64"

    def test_nothing_configured(self):
        settings = Settings()
        assert credentials_source(settings) is None
        with pytest.raises(CredentialsError, match="No Google credentials"):
            load_service_account_info(settings)

    def test_bad_base64(self):
        settings = Settings(google_credentials_base64="not base64 json!!")
        with pytest.raises(CredentialsError, match="GOOGLE_CREDENTIALS_BASE64"):
            load_service_account_info(settings)

    def test_missing_file(self, tmp_path):
        settings = Settings(google_application_credentials=str(tmp_path / "nope.json"))
        with pytest.raises(CredentialsError, match="Cannot read credentials file"):
            load_service_account_info(settings)

    def test_base64_json_must_be_object(self):
        settings = Settings(google_credentials_base64=base64.b64encode(b"[]").decode("ascii"))
        with pytest.raises(CredentialsError, match="must hold a JSON object, got list"):
            load_service_account_info(settings)

    def test_file_json_must_be_object(self, tmp_path):
        path = tmp_path / "sa.json"
        path.write_text('"just a string"')
        settings = Settings(google_application_credentials=str(path))
        with pytest.raises(CredentialsError, match="must hold a JSON object, got str"):
            load_service_account_info(settings)


class TestLogLevel:
    def test_unknown_level_falls_back_to_info(self):
        assert Settings(log_level="verbose").log_level == "INFO"

    def test_level_is_normalized(self):
        assert Settings(log_level=" debug ").log_level == "DEBUG"


class TestBuildCredentials:
    def test_incomplete_key(self):
        settings = Settings(google_credentials_base64=_encode({"type": "service_account"}))
        with pytest.raises(CredentialsError, match="Invalid service account"):
            build_credentials(settings)

    def test_refresh_failure(self):
        creds = MagicMock()
        creds.refresh.side_effect = RefreshError("invalid_grant")
        with patch("services.credentials.build_credentials", return_value=creds):
            with pytest.raises(CredentialsError, match="invalid_grant"):
                asyncio.run(get_access_token(Settings()))

    def test_returns_token(self):
        creds = MagicMock()
        creds.token = "ya29.token"
        with patch("services.credentials.build_credentials", return_value=creds):
            assert asyncio.run(get_access_token(Settings())) == "ya29.token"
        creds.refresh.assert_called_once()
