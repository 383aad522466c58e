"""
Ditto Client: a thin async client for a Ditto Edge server's HTTP execute API.

Builds DQL statements for common CRUD operations, posts them to
``{base_url}/{app_id}/execute`` and optionally manages the server container
through the ``docker`` or ``docker compose`` CLI.
"""

from ditto_client.client import DittoService
from ditto_client.docker import ComposeRunner, ContainerRunner, DockerRunner
from ditto_client.errors import (
    CommandError,
    ContainerError,
    DittoError,
    DittoHTTPError,
    DittoResponseError,
    QueryValidationError,
)
from ditto_client.models import (
    ContainerState,
    DittoSettings,
    DockerOptions,
    RunnerKind,
    ServiceStatus,
)

__version__ = "0.1.0"

__all__ = [
    "DittoService",
    "ContainerRunner",
    "DockerRunner",
    "ComposeRunner",
    "DockerOptions",
    "DittoSettings",
    "RunnerKind",
    "ContainerState",
    "ServiceStatus",
    "DittoError",
    "QueryValidationError",
    "DittoHTTPError",
    "DittoResponseError",
    "CommandError",
    "ContainerError",
]
