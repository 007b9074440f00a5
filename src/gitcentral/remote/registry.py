"""Lookup of remote connector implementations.

A connector is named either by a built-in name, by the name of an entry point
in the ``gitcentral.connectors`` group, or by a ``module:attribute`` path. The
resolved object is a factory called as ``factory(cursor, repository)``.
"""

import importlib
from importlib.metadata import entry_points
from typing import Callable

import structlog

from gitcentral.exceptions import ConnectorError
from gitcentral.models import SyncCursor
from gitcentral.remote.base import RemoteConnector
from gitcentral.repository.base import LocalRepository

logger = structlog.get_logger(__name__)

ENTRY_POINT_GROUP = "gitcentral.connectors"

BUILTIN_CONNECTORS = {
    "memory": "gitcentral.remote.memory:InMemoryRemote",
}

ConnectorFactory = Callable[[SyncCursor, LocalRepository], RemoteConnector]


def load_connector(name: str) -> ConnectorFactory:
    """Resolve a connector name to its factory.

    Args:
        name: Built-in name, entry point name, or ``module:attribute``

    Returns:
        Connector factory

    Raises:
        ConnectorError: If the connector cannot be found or imported
    """
    target = BUILTIN_CONNECTORS.get(name)
    if target is None:
        for entry_point in entry_points(group=ENTRY_POINT_GROUP):
            if entry_point.name == name:
                logger.debug("connector_entry_point", name=name, value=entry_point.value)
                return entry_point.load()
        target = name

    module_name, _, attribute = target.partition(":")
    if not module_name or not attribute:
        raise ConnectorError(f"Unknown connector: {name}").with_recommendation(
            f"Use one of {', '.join(sorted(BUILTIN_CONNECTORS))}, an installed "
            f"'{ENTRY_POINT_GROUP}' entry point, or module:attribute"
        )

    try:
        module = importlib.import_module(module_name)
    except ImportError as e:
        raise ConnectorError(f"Could not import connector module {module_name}: {e}") from e

    factory = getattr(module, attribute, None)
    if factory is None or not callable(factory):
        raise ConnectorError(f"Connector {target} is not callable")
    return factory


def create_connector(name: str, cursor: SyncCursor, repository: LocalRepository) -> RemoteConnector:
    """Load a connector and instantiate it for a cursor.

    Raises:
        ConnectorError: If the factory does not produce a RemoteConnector
    """
    connector = load_connector(name)(cursor, repository)
    if not isinstance(connector, RemoteConnector):
        raise ConnectorError(f"Connector {name} returned {type(connector).__name__}, not a RemoteConnector")
    return connector
