"""Container lifecycle management for a Ditto Edge server.

Two runners share one contract: ``DockerRunner`` drives the plain ``docker``
CLI, ``ComposeRunner`` drives ``docker compose``. Both are synchronous; the
async service dispatches them to a worker thread.
"""

import subprocess
from abc import ABC, abstractmethod
from pathlib import Path

from ditto_client.errors import CommandError, ContainerError
from ditto_client.logging import get_logger
from ditto_client.models.docker import ContainerState, DockerOptions

log = get_logger(__name__)

DOCKER_BIN = "docker"


def run_command(
    command: list[str],
    cwd: Path | None = None,
    env: dict[str, str] | None = None,
    timeout: float | None = None,
) -> str:
    """Run a command, returning its combined stdout/stderr text.

    Raises:
        CommandError: The command exited non-zero, timed out, or could not be
            started. The error carries the command, its arguments and output.
    """
    name, args = command[0], command[1:]
    log.debug("Running command", command=" ".join(command))
    try:
        result = subprocess.run(
            command,
            cwd=cwd,
            env=env,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            text=True,
            timeout=timeout,
            check=False,
        )
    except FileNotFoundError as e:
        raise CommandError(name, args, f"executable not found: {e}") from e
    except OSError as e:
        raise CommandError(name, args, f"could not start: {e}") from e
    except subprocess.TimeoutExpired as e:
        output = e.output if isinstance(e.output, str) else ""
        raise CommandError(name, args, f"timed out after {timeout}s", output) from e

    output = result.stdout or ""
    if result.returncode != 0:
        raise CommandError(
            name,
            args,
            f"exit status {result.returncode}",
            output,
            returncode=result.returncode,
        )
    return output


def parse_container_status(raw: str) -> str:
    """Classify ``docker ps --format {{.Status}}`` output.

    Returns ``running``, ``exited``, ``not-found`` or the raw lower-cased
    status for anything else (``created``, ``restarting ...``).
    """
    status = raw.strip().lower()
    if status:
        # A name filter can match more than one line; the first wins
        status = status.splitlines()[0].strip()
    if not status:
        return ContainerState.NOT_FOUND.value
    if status.startswith("up "):
        return ContainerState.RUNNING.value
    if status.startswith("exited "):
        return ContainerState.EXITED.value
    return status


class ContainerRunner(ABC):
    """Lifecycle operations the service needs from a container backend."""

    def __init__(self, docker_bin: str = DOCKER_BIN, timeout: float | None = None):
        self.docker_bin = docker_bin
        self.timeout = timeout

    def _docker(self, *args: str) -> str:
        return run_command([self.docker_bin, *args], timeout=self.timeout)

    def _image_present(self, image_name: str) -> bool:
        try:
            self._docker("image", "inspect", image_name)
            return True
        except CommandError:
            return False

    def _load_image(self, tar_path: str) -> None:
        log.info("Loading image from tarball", tar_path=tar_path)
        try:
            self._docker("load", "-i", tar_path)
        except CommandError as e:
            raise ContainerError(f"docker load: {e}") from e

    @abstractmethod
    def ensure_image_loaded(self, image_name: str, tar_path: str | None) -> None:
        """Make sure the image exists locally, loading it from a tarball if needed."""

    def container_status(self, name: str) -> str:
        """Coarse status of a container looked up by exact name."""
        try:
            output = self._docker(
                "ps", "-a", "--filter", f"name=^/{name}$", "--format", "{{.Status}}"
            )
        except CommandError as e:
            raise ContainerError(f"docker ps: {e}") from e
        return parse_container_status(output)

    @abstractmethod
    def run_container(self, options: DockerOptions) -> None:
        """Create and start a container from the options."""

    @abstractmethod
    def start_container(self, name: str) -> None:
        """Start a previously created container."""

    @abstractmethod
    def stop_container(self, name: str) -> None:
        """Stop a running container."""


class DockerRunner(ContainerRunner):
    """Runner backed by plain ``docker`` commands."""

    def ensure_image_loaded(self, image_name: str, tar_path: str | None) -> None:
        if self._image_present(image_name):
            return
        if not tar_path:
            raise ContainerError(
                f"image {image_name} not found locally and no tarball configured"
            )
        self._load_image(tar_path)

    def run_container(self, options: DockerOptions) -> None:
        args = [
            "run", "-d", "--name", options.container_name,
            "-p", options.port_binding,
            "-v", f"{options.config_path}:/config.yaml",
            "-v", f"{options.data_path}:/data",
            options.image_name, "run", "-c", "/config.yaml",
        ]  # fmt: skip
        try:
            self._docker(*args)
        except CommandError as e:
            raise ContainerError(f"docker run: {e}") from e
        log.info("Container created", name=options.container_name)

    def start_container(self, name: str) -> None:
        self._docker("start", name)

    def stop_container(self, name: str) -> None:
        self._docker("stop", name)


class ComposeRunner(ContainerRunner):
    """Runner backed by ``docker compose``.

    Status checks still go through ``docker ps`` by container name, which
    should match ``container_name`` in the compose file.
    """

    def ensure_image_loaded(self, image_name: str, tar_path: str | None) -> None:
        if self._image_present(image_name):
            return
        if tar_path:
            self._load_image(tar_path)
            return
        # compose pulls or builds the image on "up"
        log.debug("Image not present, deferring to compose", image=image_name)

    def run_container(self, options: DockerOptions) -> None:
        args = ["compose"]
        if options.compose_file:
            args.extend(["-f", options.compose_file])
        args.extend(["up", "-d", options.compose_service])
        try:
            self._docker(*args)
        except CommandError as e:
            raise ContainerError(f"docker compose up: {e}") from e
        log.info("Compose service up", service=options.compose_service)

    def start_container(self, name: str) -> None:
        self._docker("compose", "start", name)

    def stop_container(self, name: str) -> None:
        """Stop via compose, then make sure no container by that name lingers."""
        for args in (
            ("compose", "stop", name),
            ("stop", name),
            ("rm", "-f", name),
        ):
            try:
                self._docker(*args)
            except CommandError as e:
                log.debug("Ignoring shutdown error", error=str(e))


def get_runner(kind: str) -> ContainerRunner | None:
    """Get a runner by name: ``docker``, ``compose`` or ``none``."""
    runners = {"docker": DockerRunner, "compose": ComposeRunner}
    kind = getattr(kind, "value", kind)
    if kind in (None, "", "none"):
        return None
    if kind not in runners:
        raise ValueError(f"Unknown runner: {kind}")
    return runners[kind]()


__all__ = [
    "run_command",
    "parse_container_status",
    "ContainerRunner",
    "DockerRunner",
    "ComposeRunner",
    "get_runner",
]
