from types import SimpleNamespace

import pytest

from career_compass.application.api_client import ApiClient
from career_compass.application.auth_api import AuthApi
from career_compass.application.session_manager import SessionManager
from career_compass.application.user_service import UserService
from career_compass.infrastructure.environment.signals import CollectingNotifier, SignalHub
from career_compass.infrastructure.storage.memory_store import InMemoryKeyValueStore

from fakes import BASE_URL, FakeBackend, FakeClock, FakeScheduler


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def client(backend):
    return ApiClient(BASE_URL, transport=backend.transport())


@pytest.fixture
def session_env(backend, client, clock, scheduler):
    store = InMemoryKeyValueStore()
    hub = SignalHub()
    notifier = CollectingNotifier()
    users = UserService(client)
    manager = SessionManager(
        auth_api=AuthApi(client),
        user_service=users,
        store=store,
        environment=hub,
        notifier=notifier,
        clock=clock,
        scheduler=scheduler,
    )
    client.set_token_provider(manager.get_token)
    return SimpleNamespace(
        manager=manager,
        client=client,
        users=users,
        store=store,
        hub=hub,
        notifier=notifier,
        backend=backend,
        clock=clock,
        scheduler=scheduler,
    )
