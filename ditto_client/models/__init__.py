"""Data models for the Ditto client."""

from ditto_client.models.docker import *
from ditto_client.models.settings import *
from ditto_client.models.status import *

__all__ = [
    "ContainerState",
    "DockerOptions",
    "DittoSettings",
    "RunnerKind",
    "ServiceStatus",
]
