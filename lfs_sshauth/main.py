"""Wiring and command line entrypoint."""

import argparse
import logging
import sys
from typing import List, Optional

from lfs_sshauth import __version__
from lfs_sshauth.config.settings import Settings, get_settings
from lfs_sshauth.repository.base_repository import CacheRepository
from lfs_sshauth.repository.file_repository import FileRepository
from lfs_sshauth.repository.redis_repository import RedisRepository
from lfs_sshauth.repository.ssh_repository import SSHCommandSelector, SubprocessRunner
from lfs_sshauth.schema.auth import Endpoint
from lfs_sshauth.service.auth_service import SSHAuthError, SSHAuthService

logger = logging.getLogger("lfs_sshauth.main")


def create_cache_repository(settings: Settings) -> CacheRepository:
    """Pick the cache backend from settings."""
    if settings.use_redis:
        logger.info(f"Using Redis credential cache at {settings.redis_url}")
        return RedisRepository(settings)
    logger.info(f"Using file credential cache at {settings.cache_dir}")
    return FileRepository(settings)


def create_auth_service(settings: Optional[Settings] = None) -> SSHAuthService:
    """Build an SSHAuthService with production collaborators."""
    settings = settings or get_settings()
    return SSHAuthService(
        create_cache_repository(settings),
        SSHCommandSelector(settings),
        SubprocessRunner(),
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lfs-sshauth",
        description="Fetch LFS transfer credentials through git-lfs-authenticate over SSH.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    auth = sub.add_parser("authenticate", help="Print credentials as JSON")
    auth.add_argument("--user-host", required=True, help="SSH user@host")
    auth.add_argument("--path", default="", help="Remote repository path")
    auth.add_argument("--port", default="", help="SSH port")
    auth.add_argument("operation", help="upload or download")
    auth.add_argument("oid", help="Object id")

    inval = sub.add_parser("invalidate", help="Drop cached credentials")
    inval.add_argument("--user-host", required=True, help="SSH user@host")
    inval.add_argument("operation", help="upload or download")
    return parser


def main(argv: Optional[List[str]] = None, service: Optional[SSHAuthService] = None) -> int:
    args = _build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(message)s",
        stream=sys.stderr,
    )

    service = service or create_auth_service()

    if args.command == "invalidate":
        service.invalidate_cache(Endpoint(ssh_user_and_host=args.user_host), args.operation)
        return 0

    endpoint = Endpoint(
        ssh_user_and_host=args.user_host, ssh_path=args.path, ssh_port=args.port
    )
    try:
        response = service.authenticate(endpoint, args.operation, args.oid)
    except SSHAuthError as e:
        print(f"Error: {e}", file=sys.stderr)
        if e.response.message:
            print(e.response.message.rstrip(), file=sys.stderr)
        return 1

    print(response.model_dump_json())
    return 0


if __name__ == "__main__":
    sys.exit(main())
