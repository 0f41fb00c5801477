"""Environment signal adapters."""

from .signals import SignalHub, LoggingNotifier, CollectingNotifier

__all__ = ['SignalHub', 'LoggingNotifier', 'CollectingNotifier']
