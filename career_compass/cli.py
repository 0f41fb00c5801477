#!/usr/bin/env python3
"""
Command line front end for the Career Compass client.
"""

import argparse
import asyncio
import getpass
import logging
import sys
from typing import Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Import after loading env vars to ensure proper configuration
from .application.container import Services, build_services
from .domain.models.analysis import AnalysisHistoryQuery
from .domain.models.errors import ApiError
from .domain.models.session import LoginCredentials, SignupCredentials
from .infrastructure.config.settings import AppSettings, get_settings
from .infrastructure.storage.file_store import JsonFileKeyValueStore
from .utils import setup_logging, truncate_text, validate_email


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='career-compass',
        description="Career Compass API client",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s health
  %(prog)s login --email me@example.com
  %(prog)s history --page 2 --limit 5
        """
    )
    parser.add_argument('--api-url', help='Backend base URL (or set CAREER_COMPASS_API_URL)')
    parser.add_argument('--store', help='Session file (or set CAREER_COMPASS_SESSION_STORE_PATH)')
    parser.add_argument('--log-level',
                        default=None,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Set logging level')
    parser.add_argument('--version', action='version', version='%(prog)s 1.0.0')

    sub = parser.add_subparsers(dest='command', required=True)
    sub.add_parser('health', help='Check backend liveness')

    login = sub.add_parser('login', help='Log in and persist the session')
    login.add_argument('--email', required=True)
    login.add_argument('--password', help='Prompted when omitted')

    signup = sub.add_parser('signup', help='Create an account')
    signup.add_argument('--email', required=True)
    signup.add_argument('--first-name', required=True)
    signup.add_argument('--last-name', required=True)

    sub.add_parser('logout', help='End the persisted session')
    sub.add_parser('status', help='Show the restored session')

    history = sub.add_parser('history', help='List past analyses')
    history.add_argument('--page', type=int, default=1)
    history.add_argument('--limit', type=int, default=10)
    return parser


async def _health(services: Services, args) -> int:
    envelope = await services.retry_policy.run(services.api_client.health_check)
    status = (envelope.data or {}).get('status', 'ok') if isinstance(envelope.data, dict) else 'ok'
    print(f"✅ API healthy ({status}) at {services.api_client.base_url}")
    return 0


async def _login(services: Services, args) -> int:
    if not validate_email(args.email):
        print("❌ Error: Invalid email address")
        return 1
    password = args.password or getpass.getpass('Password: ')
    result = await services.session.login(LoginCredentials(email=args.email, password=password))
    if not result.success:
        print(f"❌ {result.message}")
        for field, messages in (result.errors or {}).items():
            print(f"   {field}: {'; '.join(messages)}")
        return 1
    print(f"✅ Logged in as {result.user.full_name or result.user.email}")
    return 0


async def _signup(services: Services, args) -> int:
    if not validate_email(args.email):
        print("❌ Error: Invalid email address")
        return 1
    password = getpass.getpass('Password: ')
    confirm = getpass.getpass('Confirm password: ')
    result = await services.session.signup(SignupCredentials(
        email=args.email,
        password=password,
        first_name=args.first_name,
        last_name=args.last_name,
        confirm_password=confirm,
    ))
    if not result.success:
        print(f"❌ {result.message}")
        for field, messages in (result.errors or {}).items():
            print(f"   {field}: {'; '.join(messages)}")
        return 1
    print(f"✅ Account created for {result.user.email}")
    return 0


async def _logout(services: Services, args) -> int:
    await services.session.logout()
    print("👋 Logged out")
    return 0


async def _status(services: Services, args) -> int:
    init = await services.session.initialize()
    state = services.session.get_state()
    if state.is_authenticated and state.current_user:
        print(f"👤 {state.current_user.full_name or state.current_user.email} <{state.current_user.email}>")
    else:
        print("🔒 Not logged in")
    print(f"🎨 Theme: {state.theme.value}")
    for error in init.errors:
        print(f"⚠️ {error}")
    return 0


async def _history(services: Services, args) -> int:
    await services.session.initialize()
    if not services.session.is_authenticated:
        print("❌ Authentication required. Run 'career-compass login' first.")
        return 1
    query = AnalysisHistoryQuery(page=args.page, limit=args.limit)
    envelope = await services.session.with_token_refresh(
        lambda: services.analysis_service.get_history(query)
    )
    items = envelope.data if isinstance(envelope.data, list) else []
    if not items:
        print("No analyses yet")
    for item in items:
        if not isinstance(item, dict):
            continue
        score = item.get('overallScore')
        if score is None:
            score = '-'
        title = truncate_text(str(item.get('jobTitle', 'Untitled')), 50)
        print(f"  {item.get('id', '?')}  {score!s:>5}  {title}  ({item.get('status', 'unknown')})")
    if envelope.meta and envelope.meta.total_pages:
        print(f"  page {envelope.meta.page or args.page} of {envelope.meta.total_pages}")
    return 0


COMMANDS = {
    'health': _health,
    'login': _login,
    'signup': _signup,
    'logout': _logout,
    'status': _status,
    'history': _history,
}


def _configure(args) -> AppSettings:
    settings = get_settings()
    if args.api_url:
        settings.api.url = args.api_url.rstrip('/')
    if args.store:
        settings.session.store_path = args.store
    if args.log_level:
        settings.log_level = args.log_level
    return settings


async def _run(args, settings: AppSettings) -> int:
    services = build_services(
        settings=settings,
        store=JsonFileKeyValueStore(settings.session.store_path),
    )
    try:
        return await COMMANDS[args.command](services, args)
    finally:
        await services.aclose()


def main(argv: Optional[list] = None) -> int:
    """Main entry point for the Career Compass CLI."""
    args = build_parser().parse_args(argv)
    settings = _configure(args)

    # Setup logging
    setup_logging(settings.log_level, settings.log_format)
    logger = logging.getLogger(__name__)

    try:
        return asyncio.run(_run(args, settings))
    except KeyboardInterrupt:
        print("\n👋 Goodbye!")
        return 130
    except ApiError as e:
        logger.debug(f"Command {args.command} failed: {e!r}")
        print(f"❌ {e.message} (status {e.status_code})")
        return 1


if __name__ == "__main__":
    sys.exit(main())
