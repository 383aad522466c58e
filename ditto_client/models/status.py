"""Service diagnostics models."""

from pydantic import BaseModel, ConfigDict, Field

DOCKER_DISABLED = "disabled"
HTTP_UNREACHABLE = "unreachable"


class ServiceStatus(BaseModel):
    """Diagnostic snapshot returned by ``DittoService.status``.

    Dumped with ``by_alias=True`` the keys match the server tooling's
    ``baseURL`` / ``appID`` / ``dockerError`` / ``httpError`` names.
    """

    model_config = ConfigDict(populate_by_name=True)

    base_url: str = Field(alias="baseURL")
    app_id: str = Field(alias="appID")
    docker: str | None = None
    docker_error: str | None = Field(default=None, alias="dockerError")
    http: str | None = None
    http_error: str | None = Field(default=None, alias="httpError")

    @property
    def reachable(self) -> bool:
        """Whether the HTTP probe got any response at all."""
        return self.http is not None and self.http != HTTP_UNREACHABLE

    def as_dict(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


__all__ = ["ServiceStatus", "DOCKER_DISABLED", "HTTP_UNREACHABLE"]
