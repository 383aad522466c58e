"""HTTP client for the Ditto Edge execute endpoint."""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

import httpx

from ditto_client.config import get_execute_url
from ditto_client.docker import ContainerRunner, get_runner
from ditto_client.errors import (
    ContainerError,
    DittoError,
    DittoHTTPError,
    DittoResponseError,
)
from ditto_client.models.docker import ContainerState, DockerOptions
from ditto_client.models.settings import DittoSettings
from ditto_client.models.status import DOCKER_DISABLED, HTTP_UNREACHABLE, ServiceStatus
from ditto_client.query import (
    build_delete,
    build_delete_all,
    build_get,
    build_insert,
    build_select,
    build_update,
)

# Decoded JSON: dict, list, str, int, float, bool or None
Record = Any

DEFAULT_TIMEOUT = 30.0
DEFAULT_PROBE_COLLECTION = "chat"

logger = logging.getLogger(__name__)


class DittoService:
    """Client for a Ditto Edge server with optional container management.

    Every CRUD method builds a DQL statement and posts it to
    ``{base_url}/{app_id}/execute``. Attach a runner with ``with_docker`` to
    have ``init_db`` / ``close`` manage the server container.
    """

    def __init__(
        self,
        base_url: str,
        app_id: str,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.AsyncClient | None = None,
        probe_collection: str = DEFAULT_PROBE_COLLECTION,
    ):
        self.base_url = base_url
        self.app_id = app_id
        self.timeout = timeout
        self.http_client = http_client
        self.probe_collection = probe_collection

        self.runner: ContainerRunner | None = None
        self.docker_options: DockerOptions | None = None
        self.started_container = False

    @classmethod
    def from_settings(
        cls, settings: DittoSettings, http_client: httpx.AsyncClient | None = None
    ) -> "DittoService":
        """Build a service from settings, attaching the configured runner."""
        service = cls(
            settings.base_url,
            settings.app_id,
            timeout=settings.request_timeout,
            http_client=http_client,
            probe_collection=settings.probe_collection,
        )
        runner = get_runner(settings.runner)
        if runner is not None:
            service.with_docker(runner, settings.docker)
        return service

    def with_docker(
        self, runner: ContainerRunner | None, options: DockerOptions
    ) -> "DittoService":
        """Attach a container runner; passing None disables container management."""
        self.runner = runner
        self.docker_options = options
        return self

    @property
    def execute_url(self) -> str:
        return get_execute_url(self.base_url, self.app_id)

    def __repr__(self) -> str:
        return f"DittoService(base_url='{self.base_url}', app_id='{self.app_id}')"

    # Lifecycle -----------------------------------------------------------------

    async def init_db(self) -> None:
        """Ensure the Ditto Edge container is running.

        A no-op without a runner. Otherwise the image is made available, and
        an exited or missing container is (re)created with ``run_container``
        so mount and config changes are picked up.

        Raises:
            ContainerError: A lifecycle step failed.
        """
        if self.runner is None:
            return

        runner, options = self.runner, self.docker_options

        try:
            await asyncio.to_thread(
                runner.ensure_image_loaded, options.image_name, options.image_tar_path
            )
        except DittoError as e:
            raise ContainerError(f"ensure image: {e}") from e

        try:
            status = await asyncio.to_thread(
                runner.container_status, options.container_name
            )
        except DittoError as e:
            raise ContainerError(f"container status: {e}") from e

        if status == ContainerState.RUNNING.value:
            logger.info(f"Container {options.container_name} already running")
            return

        logger.info(
            f"Container {options.container_name} is {status}, running a new one"
        )
        try:
            await asyncio.to_thread(runner.run_container, options)
        except DittoError as e:
            raise ContainerError(f"run container: {e}") from e

        self.started_container = True

    async def close(self) -> None:
        """Best-effort stop of the managed container. Never raises."""
        if self.runner is None:
            return
        try:
            await asyncio.to_thread(
                self.runner.stop_container, self.docker_options.container_name
            )
        except Exception as e:
            logger.debug(f"Ignoring error while stopping container: {e}")

    async def __aenter__(self) -> "DittoService":
        await self.init_db()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()

    async def status(self) -> ServiceStatus:
        """Report connection info, container status and an HTTP probe result.

        HTTP and container failures are recorded on the result, not raised.
        """
        result = ServiceStatus(base_url=self.base_url, app_id=self.app_id)

        if self.runner is not None:
            try:
                result.docker = await asyncio.to_thread(
                    self.runner.container_status, self.docker_options.container_name
                )
            except DittoError as e:
                result.docker_error = str(e)
        else:
            result.docker = DOCKER_DISABLED

        payload = {"query": f"SELECT * FROM {self.probe_collection} LIMIT 1"}
        try:
            async with self._client() as client:
                response = await client.post(self.execute_url, json=payload)
            result.http = f"{response.status_code} {response.reason_phrase}".strip()
        except httpx.HTTPError as e:
            result.http = HTTP_UNREACHABLE
            result.http_error = str(e) or type(e).__name__

        return result

    # CRUD ----------------------------------------------------------------------

    async def create_document(self, collection: str, doc: dict[str, Any]) -> Record:
        """Insert one document into a collection."""
        query, args = build_insert(collection, doc)
        return await self.execute(query, args)

    async def get_record(self, collection: str, record_id: str) -> Record:
        """Fetch a single record by ``_id``."""
        query, args = build_get(collection, record_id)
        return await self.execute(query, args)

    async def get_records(
        self,
        collection: str,
        limit: int = 0,
        sort_by: str = "",
        sort_order: str = "",
    ) -> Record:
        """List documents with optional LIMIT and ORDER BY."""
        return await self.execute(
            build_select(collection, None, limit, sort_by, sort_order)
        )

    async def update_record(
        self, collection: str, record_id: str, patch: dict[str, Any]
    ) -> Record:
        """Apply a field patch to the record with the given ``_id``."""
        query, args = build_update(collection, record_id, patch)
        return await self.execute(query, args)

    async def delete_record(self, collection: str, record_id: str) -> Record:
        """Remove a single record by ``_id``."""
        query, args = build_delete(collection, record_id)
        return await self.execute(query, args)

    async def delete_all_records(self, collection: str) -> Record:
        """Remove every document in a collection."""
        query, args = build_delete_all(collection)
        return await self.execute(query, args)

    async def latest_record(self, collection: str, sort_by: str) -> Record:
        """Most recent record by ``sort_by``, descending, limited to one."""
        return await self.get_records(collection, 1, sort_by, "DESC")

    async def search(
        self,
        collection: str,
        filters: dict[str, Any] | None,
        limit: int = 0,
        sort_by: str = "",
        sort_order: str = "",
    ) -> Record:
        """Exact-match search over string fields."""
        return await self.execute(
            build_select(collection, filters, limit, sort_by, sort_order)
        )

    # Transport -----------------------------------------------------------------

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self.http_client is not None:
            yield self.http_client
            return
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            yield client

    async def execute(self, query: str, args: dict[str, Any] | None = None) -> Record:
        """Post a DQL statement and decode the JSON response.

        Args:
            query: DQL statement
            args: Bound parameters sent as ``query_args``; omitted when None

        Raises:
            DittoHTTPError: The server answered with a non-2xx status.
            DittoResponseError: A 2xx response body was not JSON.
            httpx.TransportError: The request could not be sent.
        """
        payload: dict[str, Any] = {"query": query}
        if args is not None:
            payload["query_args"] = args

        logger.debug(f"POST {self.execute_url}: {query}")

        async with self._client() as client:
            response = await client.post(
                self.execute_url,
                json=payload,
                headers={"Content-Type": "application/json"},
            )

        if not response.is_success:
            raise DittoHTTPError(response.status_code, response.text, query)

        try:
            return response.json()
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError
            raise DittoResponseError(
                f"Invalid JSON in response: {e}",
                details={"status_code": response.status_code},
            ) from e


__all__ = ["DittoService", "Record"]
