"""
Tests for the Client context.
"""

import logging

import pytest
import yaml

from higa import Client, ChannelManager
from higa.config import Config, HTTPConfig
from higa.exceptions import ConfigurationError

from tests.conftest import TEST_CHANNEL, TEST_CHANNEL_ID, TEST_TOKEN


class TestClientConstruction:
    """Test cases for building a client."""
    
    def test_token_keyword(self):
        client = Client(token=TEST_TOKEN)
        
        assert client.config.http.token == TEST_TOKEN
        assert client.version == 9
        assert client.http.base_url == "https://discord.com/api/v9"
        assert isinstance(client.channels, ChannelManager)
    
    def test_overrides(self):
        client = Client(token=TEST_TOKEN, token_type="Bearer", api_version=8)
        
        assert client.version == 8
        assert client.http.build_headers("GET")["Authorization"] == f"Bearer {TEST_TOKEN}"
    
    def test_missing_token_is_rejected(self):
        with pytest.raises(ConfigurationError):
            Client()
    
    def test_unsupported_version_is_rejected(self):
        with pytest.raises(ConfigurationError):
            Client(token=TEST_TOKEN, api_version=3)
    
    def test_clients_do_not_share_state(self):
        first = Client(Config(http=HTTPConfig(token=TEST_TOKEN)))
        second = Client(Config(http=HTTPConfig(token=TEST_TOKEN)))
        
        first.cache.channels.set("1", {"id": "1"})
        
        assert not second.cache.channels.has("1")
        assert first.http is not second.http
    
    def test_overrides_leave_caller_config_untouched(self):
        shared = Config(http=HTTPConfig(token=TEST_TOKEN))

        bearer = Client(shared, token="other-token", token_type="Bearer", api_version=8)
        plain = Client(shared)

        assert shared.http.token == TEST_TOKEN
        assert shared.http.token_type == "Bot"
        assert shared.http.api_version == 9
        assert bearer.config.http.token == "other-token"
        assert plain.config.http.token == TEST_TOKEN
        assert plain.version == 9
        assert plain.config.http is not shared.http

    def test_managers_share_the_client_cache(self, test_config):
        client = Client(test_config)
        
        assert client.channels.cache is client.cache.channels
        assert client.channels.messages is client.cache.messages


class TestFromConfig:
    
    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ("HIGA_TOKEN", "HIGA_TOKEN_TYPE", "HIGA_API_HOST",
                     "HIGA_API_VERSION", "HIGA_MAX_RETRIES", "HIGA_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        yield
        logger = logging.getLogger("higa")
        for handler in logger.handlers[:]:
            logger.removeHandler(handler)
            handler.close()
        logger.setLevel(logging.NOTSET)
    
    def test_from_yaml_file(self, tmp_path):
        path = tmp_path / "higa.yaml"
        path.write_text(yaml.dump({
            "http": {"token": "file-token", "host": "canary.discord.com"},
            "log_level": "WARNING"
        }))
        
        client = Client.from_config(str(path))
        
        assert client.http.base_url == "https://canary.discord.com/api/v9"
        assert logging.getLogger("higa").level == logging.WARNING
    
    def test_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        monkeypatch.setenv("HIGA_TOKEN", "env-token")
        monkeypatch.setenv("HIGA_MAX_RETRIES", "2")
        
        client = Client.from_config()
        
        assert client.config.http.token == "env-token"
        assert client.error_handler.retry_config.max_retries == 2
    
    def test_missing_configuration(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("HOME", str(tmp_path))
        
        with pytest.raises(ConfigurationError):
            Client.from_config()


class TestClientLifecycle:
    
    @pytest.mark.asyncio
    async def test_context_manager_closes_session(self, test_config, fake_api):
        fake_api.respond('GET', f'/channels/{TEST_CHANNEL_ID}', body=TEST_CHANNEL)
        
        async with Client(test_config, base_url=fake_api.base_url) as client:
            channel = await client.channels.get_channel(TEST_CHANNEL_ID)
            session = client.http.session
        
        assert channel == TEST_CHANNEL
        assert session.closed
    
    @pytest.mark.asyncio
    async def test_close_without_requests(self, test_config):
        client = Client(test_config)
        
        await client.close()
        
        assert client.http._session is None
