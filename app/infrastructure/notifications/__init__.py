"""Realtime delivery helpers for the infrastructure layer."""

from .manager import ConnectionManager, connection_manager
from .realtime import RealtimeEventPublisher, get_realtime_channel, realtime_publisher

__all__ = [
    "ConnectionManager",
    "connection_manager",
    "RealtimeEventPublisher",
    "get_realtime_channel",
    "realtime_publisher",
]
