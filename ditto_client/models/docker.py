"""Container lifecycle models."""

from enum import Enum

from pydantic import BaseModel, Field, field_validator

DEFAULT_COMPOSE_SERVICE = "ditto-edge-server"
DEFAULT_PORT_BINDING = "127.0.0.1:8090:8090"


class ContainerState(str, Enum):
    """Coarse container states reported by a runner."""

    RUNNING = "running"
    EXITED = "exited"
    NOT_FOUND = "not-found"


class DockerOptions(BaseModel):
    """Parameters for starting a Ditto Edge container."""

    container_name: str = "ditto-edge"
    image_name: str = "dittoedge/server:latest"
    image_tar_path: str | None = None
    config_path: str = ""
    data_path: str = ""
    port_binding: str = DEFAULT_PORT_BINDING

    # Docker Compose settings; compose_file None means default discovery
    compose_file: str | None = None
    compose_service: str = Field(default=DEFAULT_COMPOSE_SERVICE)

    @field_validator("container_name", "image_name")
    @classmethod
    def validate_not_empty(cls, v):
        """Validate container and image names are not empty."""
        if not v or not v.strip():
            raise ValueError("Container and image names cannot be empty")
        return v.strip()

    @field_validator("compose_service")
    @classmethod
    def default_compose_service(cls, v):
        """Fall back to the default service name when blank."""
        return v.strip() if v and v.strip() else DEFAULT_COMPOSE_SERVICE


__all__ = [
    "ContainerState",
    "DockerOptions",
    "DEFAULT_COMPOSE_SERVICE",
    "DEFAULT_PORT_BINDING",
]
