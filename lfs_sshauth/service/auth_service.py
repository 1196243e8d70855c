"""SSH-delegated authentication with a local credential cache."""

import logging
from typing import Optional

from pydantic import ValidationError

from lfs_sshauth.repository.base_repository import CacheRepository
from lfs_sshauth.repository.ssh_repository import CommandRunner, SSHCommandSelector
from lfs_sshauth.schema.auth import Endpoint, SSHAuthResponse

logger = logging.getLogger(__name__)

AUTHENTICATE_COMMAND = "git-lfs-authenticate"


class SSHAuthError(Exception):
    """Delegated authentication failed.

    ``response`` holds whatever could be recovered; for a failed command its
    ``message`` is the remote stderr.
    """

    def __init__(self, message: str, response: SSHAuthResponse) -> None:
        super().__init__(message)
        self.response = response


class SSHCommandError(SSHAuthError):
    """The ssh process could not be started or exited non-zero."""

    def __init__(
        self, message: str, response: SSHAuthResponse, returncode: Optional[int] = None
    ) -> None:
        super().__init__(message, response)
        self.returncode = returncode


class MalformedResponseError(SSHAuthError):
    """Cached or remote output is not a valid authentication response."""


class SSHAuthService:
    """Obtains transfer credentials over SSH, reusing cached results.

    A cached entry is trusted until ``invalidate_cache`` is called for the
    same endpoint and operation; ``expires_at`` is not checked here.
    """

    def __init__(
        self,
        cache_repo: CacheRepository,
        selector: SSHCommandSelector,
        runner: CommandRunner,
    ) -> None:
        self.cache_repo = cache_repo
        self.selector = selector
        self.runner = runner

    def authenticate(self, endpoint: Endpoint, operation: str, oid: str) -> SSHAuthResponse:
        """
        Get credentials for ``operation`` on ``oid``.

        Returns an empty response if the endpoint is not reachable over SSH.
        Raises SSHCommandError or MalformedResponseError, both carrying the
        best-effort response.
        """
        if not endpoint.is_ssh:
            return SSHAuthResponse()

        cached = self.cache_repo.get(endpoint.host_identity, operation)
        if cached is not None:
            logger.info(f"Cache HIT: ssh credentials for {endpoint.host_identity} {operation}")
            return self._parse(cached, source="cache")

        logger.info(f"Cache MISS: ssh credentials for {endpoint.host_identity} {operation}")
        logger.debug(
            f"ssh: {endpoint.ssh_user_and_host} {AUTHENTICATE_COMMAND} "
            f"{endpoint.ssh_path} {operation} {oid}"
        )

        exe, args = self.selector.get_exe_and_args(endpoint)
        args = [*args, AUTHENTICATE_COMMAND, endpoint.ssh_path, operation, oid]

        try:
            result = self.runner.run(exe, args)
        except OSError as e:
            # Nothing was captured, cache the empty output like any failure
            self.cache_repo.set(endpoint.host_identity, operation, b"")
            raise SSHCommandError(f"failed to run {exe}: {e}", SSHAuthResponse()) from e

        self.cache_repo.set(endpoint.host_identity, operation, result.stdout)

        if result.returncode != 0:
            stderr = result.stderr.decode("utf-8", errors="replace")
            raise SSHCommandError(
                f"{exe} exited with status {result.returncode}",
                SSHAuthResponse(message=stderr),
                returncode=result.returncode,
            )

        return self._parse(result.stdout, source=exe)

    def invalidate_cache(self, endpoint: Endpoint, operation: str) -> None:
        """Forget cached credentials once they are known to be rejected."""
        if not endpoint.is_ssh:
            return
        self.cache_repo.delete(endpoint.host_identity, operation)
        logger.info(f"Invalidated ssh credentials for {endpoint.host_identity} {operation}")

    def _parse(self, data: bytes, source: str) -> SSHAuthResponse:
        try:
            return SSHAuthResponse.from_json(data)
        except ValidationError as e:
            raise MalformedResponseError(
                f"invalid git-lfs-authenticate response from {source}: {e}",
                SSHAuthResponse.from_json_partial(data),
            ) from e
