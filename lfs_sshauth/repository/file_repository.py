"""Filesystem repository for cached git-lfs-authenticate output."""

import logging
import os
from pathlib import Path
from typing import Optional

from lfs_sshauth.config.settings import Settings
from lfs_sshauth.repository.base_repository import CacheRepository, make_cache_name

logger = logging.getLogger(__name__)


class FileRepository(CacheRepository):
    """One file per (host, operation) under ``<git_dir>/lfs``."""

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.base_dir = settings.cache_dir

    def _make_path(self, host_identity: str, operation: str) -> Path:
        return self.base_dir / make_cache_name(host_identity, operation)

    def get(self, host_identity: str, operation: str) -> Optional[bytes]:
        path = self._make_path(host_identity, operation)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.error(f"Error reading credential cache {path}: {e}")
            return None

    def set(self, host_identity: str, operation: str, content: bytes) -> None:
        path = self._make_path(host_identity, operation)
        try:
            self.base_dir.mkdir(mode=0o777, parents=True, exist_ok=True)
            # Bearer tokens end up in here, keep them owner-only
            fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            with os.fdopen(fd, "wb") as f:
                f.write(content)
        except OSError as e:
            logger.error(f"Error writing credential cache {path}: {e}")

    def delete(self, host_identity: str, operation: str) -> None:
        path = self._make_path(host_identity, operation)
        path.unlink(missing_ok=True)
        logger.debug(f"Removed credential cache {path}")
