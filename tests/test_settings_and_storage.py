import json
import os
import stat

import pytest

from career_compass.application.container import build_services
from career_compass.application.session_manager import STORAGE_TOKEN_KEY
from career_compass.domain.models.session import LoginCredentials
from career_compass.infrastructure.config.settings import AppSettings, ApiSettings, SessionSettings, reload_settings
from career_compass.infrastructure.environment.signals import CollectingNotifier
from career_compass.infrastructure.storage.file_store import JsonFileKeyValueStore
from career_compass.infrastructure.storage.memory_store import InMemoryKeyValueStore

from fakes import BASE_URL, FakeScheduler, auth_payload


@pytest.fixture
def clean_env(monkeypatch):
    for key in list(os.environ):
        if key.startswith('CAREER_COMPASS_'):
            monkeypatch.delenv(key)
    return monkeypatch


def test_defaults(clean_env):
    settings = AppSettings()
    assert settings.api.url == 'http://localhost:8000/api'
    assert settings.api.timeout_ms == 30000
    assert settings.api.health_timeout_ms == 5000
    assert settings.session.max_inactive_minutes == 30.0
    assert settings.retry.max_attempts == 3
    assert settings.retry.base_delay_ms == 1000
    assert settings.log_level == 'INFO'


def test_environment_overrides(clean_env):
    clean_env.setenv('CAREER_COMPASS_API_URL', 'https://api.example.test/v1/')
    clean_env.setenv('CAREER_COMPASS_API_TIMEOUT_MS', '1500')
    clean_env.setenv('CAREER_COMPASS_SESSION_MAX_INACTIVE_MINUTES', '5')
    clean_env.setenv('CAREER_COMPASS_RETRY_MAX_ATTEMPTS', '5')
    clean_env.setenv('CAREER_COMPASS_LOG_LEVEL', 'debug')

    settings = reload_settings()

    assert settings.api.url == 'https://api.example.test/v1'
    assert settings.api.timeout_ms == 1500
    assert settings.session.max_inactive_minutes == 5.0
    assert settings.retry.max_attempts == 5
    assert settings.log_level == 'DEBUG'
    assert settings.to_dict()['api']['url'] == 'https://api.example.test/v1'


def test_invalid_values_fall_back(clean_env):
    clean_env.setenv('CAREER_COMPASS_LOG_LEVEL', 'chatty')
    assert AppSettings().log_level == 'INFO'
    assert ApiSettings(timeout_ms=0).timeout_ms == 30000
    assert SessionSettings(max_inactive_minutes=-1).max_inactive_minutes == 30.0


def test_file_store_round_trip(tmp_path):
    path = tmp_path / 'nested' / 'session.json'
    store = JsonFileKeyValueStore(str(path))

    store.set('career_compass_token', 'T1')
    store.set('career_compass_user', '{"id": "u1"}')
    assert JsonFileKeyValueStore(str(path)).get('career_compass_token') == 'T1'

    store.remove('career_compass_token')
    store.remove('never_set')
    assert store.get('career_compass_token') is None
    assert json.loads(path.read_text()) == {'career_compass_user': '{"id": "u1"}'}


@pytest.mark.skipif(os.name != 'posix', reason='POSIX permission bits')
def test_file_store_writes_owner_only_files(tmp_path, monkeypatch):
    path = tmp_path / 'session.json'
    modes = []
    real_replace = os.replace

    def _replace(src, dst):
        modes.append(stat.S_IMODE(os.stat(src).st_mode))
        real_replace(src, dst)

    monkeypatch.setattr(os, 'replace', _replace)
    old_umask = os.umask(0o022)
    try:
        store = JsonFileKeyValueStore(str(path))
        store.set('career_compass_token', 'T1')
        store.set('career_compass_token', 'T2')
    finally:
        os.umask(old_umask)

    assert modes == [0o600, 0o600]
    assert stat.S_IMODE(os.stat(path).st_mode) == 0o600
    assert not os.path.exists(f'{path}.tmp')


def test_file_store_ignores_corrupt_file(tmp_path):
    path = tmp_path / 'session.json'
    path.write_text('{not json')
    store = JsonFileKeyValueStore(str(path))
    assert store.get('career_compass_token') is None
    store.set('career_compass_token', 'T2')
    assert store.get('career_compass_token') == 'T2'


def test_memory_store():
    store = InMemoryKeyValueStore({'a': '1'})
    store.set('b', '2')
    store.remove('a')
    store.remove('missing')
    assert store.keys() == ['b']
    assert store.get('a') is None


@pytest.mark.asyncio
async def test_container_wires_token_provider(clean_env, backend):
    clean_env.setenv('CAREER_COMPASS_API_URL', BASE_URL)
    backend.route('POST', '/auth/login', json_body=auth_payload('T7'))
    backend.route('GET', '/user/profile', json_body={'success': True, 'data': {'id': 'u1'}})
    store = InMemoryKeyValueStore()
    notifier = CollectingNotifier()

    services = build_services(
        settings=AppSettings(),
        transport=backend.transport(),
        store=store,
        notifier=notifier,
        scheduler=FakeScheduler(),
    )
    result = await services.session.login(LoginCredentials('a@b.com', 'secret1'))
    await services.user_service.get_profile()
    await services.aclose()

    assert result.success
    assert store.get(STORAGE_TOKEN_KEY) == 'T7'
    assert backend.calls('GET', '/user/profile')[0].headers['authorization'] == 'Bearer T7'
    assert services.retry_policy.max_attempts == 3
    assert 'Welcome back!' in notifier.titles()
