"""Remote connectors for the centralized server."""

from gitcentral.remote.base import RemoteConnector
from gitcentral.remote.memory import CheckinRecord, InMemoryRemote
from gitcentral.remote.registry import create_connector, load_connector

__all__ = [
    "RemoteConnector",
    "InMemoryRemote",
    "CheckinRecord",
    "load_connector",
    "create_connector",
]
