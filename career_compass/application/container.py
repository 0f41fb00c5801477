"""
Service container - builds one instance of every component and wires them explicitly.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Optional

from ..domain.interfaces.environment import EnvironmentSignals, Notifier
from ..domain.interfaces.key_value_store import KeyValueStore
from ..domain.interfaces.transport import Transport
from ..infrastructure.config.settings import AppSettings, get_settings
from ..infrastructure.environment.signals import LoggingNotifier, SignalHub
from ..infrastructure.http.retry import RetryPolicy
from ..infrastructure.storage.memory_store import InMemoryKeyValueStore
from .analysis_service import AnalysisService
from .api_client import ApiClient
from .auth_api import AuthApi
from .session_manager import SessionManager, Scheduler
from .user_service import UserService


@dataclass
class Services:
    """The wired component graph."""
    settings: AppSettings
    api_client: ApiClient
    auth_api: AuthApi
    user_service: UserService
    analysis_service: AnalysisService
    session: SessionManager
    retry_policy: RetryPolicy

    async def aclose(self) -> None:
        self.session.close()
        await self.api_client.aclose()


def build_services(
    settings: Optional[AppSettings] = None,
    transport: Optional[Transport] = None,
    store: Optional[KeyValueStore] = None,
    environment: Optional[EnvironmentSignals] = None,
    notifier: Optional[Notifier] = None,
    scheduler: Optional[Scheduler] = None,
    logger: Optional[logging.Logger] = None
) -> Services:
    """Create the client, endpoint services and session manager from settings."""
    settings = settings or get_settings()
    logger = logger or logging.getLogger('career_compass')

    api_client = ApiClient.from_settings(settings.api, transport=transport, logger=logger)
    auth_api = AuthApi(api_client)
    user_service = UserService(api_client, logger=logger)
    analysis_service = AnalysisService(api_client, logger=logger)

    session = SessionManager(
        auth_api=auth_api,
        user_service=user_service,
        store=store if store is not None else InMemoryKeyValueStore(),
        environment=environment or SignalHub(),
        notifier=notifier or LoggingNotifier(logger),
        max_inactive_minutes=settings.session.max_inactive_minutes,
        scheduler=scheduler,
        logger=logger,
    )
    # The client only reads the token; the session manager stays its sole writer
    api_client.set_token_provider(session.get_token)

    logger.info(f"Career Compass services initialized - API: {api_client.base_url}")
    return Services(
        settings=settings,
        api_client=api_client,
        auth_api=auth_api,
        user_service=user_service,
        analysis_service=analysis_service,
        session=session,
        retry_policy=RetryPolicy.from_settings(settings.retry),
    )
