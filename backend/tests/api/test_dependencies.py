"""Tests for the service container."""

import pytest
from unittest.mock import patch

from api.dependencies import ServiceContainer, get_container, reset_container
from modules.auth.interfaces import IAuthService
from modules.auth.service import AuthService
from modules.auth.sms import LoggingSmsSender, TwilioSmsSender
from modules.users.repository import InMemoryCredentialStore, SupabaseCredentialStore
from shared.config import Settings


def make_settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)


class TestServiceContainer:
    def test_in_memory_store_without_supabase(self):
        container = ServiceContainer(make_settings())
        assert isinstance(container.store, InMemoryCredentialStore)

    @patch("shared.database.create_client")
    def test_supabase_store_when_configured(self, mock_create):
        from shared.database import reset_client_cache

        reset_client_cache()
        container = ServiceContainer(make_settings(
            supabase_url="https://test.supabase.co",
            supabase_service_role_key="service-key",
            users_table="citizens",
        ))
        try:
            assert isinstance(container.store, SupabaseCredentialStore)
            assert container.store.table_name == "citizens"
            assert mock_create.call_args[0][0] == "https://test.supabase.co"
        finally:
            reset_client_cache()

    def test_tokens_require_secret_outside_debug(self):
        container = ServiceContainer(make_settings(jwt_secret=""))
        with pytest.raises(RuntimeError, match="JWT_SECRET"):
            container.tokens

    def test_tokens_use_temporary_secret_in_debug(self):
        container = ServiceContainer(make_settings(jwt_secret="", debug=True))
        assert container.tokens is container.tokens

    def test_logging_sms_without_twilio(self):
        container = ServiceContainer(make_settings())
        assert isinstance(container.sms, LoggingSmsSender)

    @patch("modules.auth.sms.Client")
    def test_twilio_sms_when_configured(self, mock_client):
        container = ServiceContainer(make_settings(
            twilio_account_sid="AC123",
            twilio_auth_token="token",
            twilio_from_number="+15550000000",
        ))
        assert isinstance(container.sms, TwilioSmsSender)
        mock_client.assert_called_once_with("AC123", "token")

    def test_auth_service_is_cached(self):
        container = ServiceContainer(make_settings(jwt_secret="secret"))
        service = container.auth
        assert isinstance(service, AuthService)
        assert isinstance(service, IAuthService)
        assert container.auth is service

    def test_reset_clears_services(self):
        container = ServiceContainer(make_settings(jwt_secret="secret"))
        service = container.auth
        container.reset()
        assert container.auth is not service


class TestContainerSingleton:
    def test_get_container_is_singleton(self):
        assert get_container() is get_container()

    def test_reset_container(self):
        first = get_container()
        reset_container()
        assert get_container() is not first
