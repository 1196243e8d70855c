"""SSH client selection and command execution.

The system SSH client is used as-is (OpenSSH, PuTTY's plink or
TortoisePlink), so the user's keys, agent and ssh config apply unchanged.
"""

import enum
import logging
import subprocess
from dataclasses import dataclass
from pathlib import PureWindowsPath
from typing import List, Protocol, Tuple

from lfs_sshauth.config.settings import Settings
from lfs_sshauth.schema.auth import Endpoint

logger = logging.getLogger(__name__)

DEFAULT_SSH = "ssh"


class SSHVariant(enum.Enum):
    OPENSSH = "openssh"
    PLINK = "plink"
    TORTOISE_PLINK = "tortoiseplink"


def classify_ssh_client(executable: str) -> SSHVariant:
    """Classify an SSH executable by its base name.

    Both ``/`` and ``\\`` count as separators and the extension is dropped,
    so ``C:\\Program Files\\TortoiseGit\\bin\\TortoisePlink.exe`` is
    TortoisePlink.
    """
    name = PureWindowsPath(executable).stem.lower()
    if name == "plink":
        return SSHVariant.PLINK
    if name == "tortoiseplink":
        return SSHVariant.TORTOISE_PLINK
    return SSHVariant.OPENSSH


class SSHCommandSelector:
    """Builds the executable and base arguments for reaching an endpoint."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings

    def get_exe_and_args(self, endpoint: Endpoint) -> Tuple[str, List[str]]:
        """Return the SSH executable and everything before the remote command.

        An endpoint without user@host yields ``("", [])``.
        """
        if not endpoint.ssh_user_and_host:
            return "", []

        ssh = self.settings.git_ssh or DEFAULT_SSH
        variant = classify_ssh_client(ssh) if self.settings.git_ssh else SSHVariant.OPENSSH

        args: List[str] = []
        if variant is SSHVariant.TORTOISE_PLINK:
            # TortoisePlink pops up dialogs unless told otherwise
            args.append("-batch")

        if endpoint.ssh_port:
            if variant is SSHVariant.OPENSSH:
                args.append("-p")
            else:
                args.append("-P")
            args.append(endpoint.ssh_port)

        args.append(endpoint.ssh_user_and_host)
        return ssh, args


@dataclass(frozen=True)
class CommandResult:
    stdout: bytes
    stderr: bytes
    returncode: int


class CommandRunner(Protocol):
    """Runs a command to completion. Raises ``OSError`` if it cannot start."""

    def run(self, executable: str, args: List[str]) -> CommandResult: ...


class SubprocessRunner:
    """Blocking runner with stdout and stderr buffered separately.

    No timeout is applied; a hung ssh blocks the caller.
    """

    def run(self, executable: str, args: List[str]) -> CommandResult:
        proc = subprocess.run(
            [executable, *args],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            check=False,
        )
        logger.debug(f"{executable} exited with {proc.returncode}")
        return CommandResult(proc.stdout, proc.stderr, proc.returncode)
