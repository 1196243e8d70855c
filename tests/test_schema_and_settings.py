import json
import os
import unittest
from pathlib import Path
from unittest import mock

from pydantic import ValidationError

from lfs_sshauth.config.settings import Settings
from lfs_sshauth.schema.auth import Endpoint, SSHAuthResponse


class TestSSHAuthResponse(unittest.TestCase):
    def test_parses_remote_output(self):
        res = SSHAuthResponse.from_json(
            b'{"href":"https://lfs/obj","header":{"Authorization":"Bearer X","X-Id":"1"},'
            b'"expires_at":"2024-01-01T00:00:00Z"}'
        )
        self.assertEqual(res.href, "https://lfs/obj")
        self.assertEqual(res.header, {"Authorization": "Bearer X", "X-Id": "1"})
        self.assertEqual(res.expires_at, "2024-01-01T00:00:00Z")

    def test_missing_null_and_unknown_keys(self):
        res = SSHAuthResponse.from_json(b'{"header":null,"expires_at":null,"expires_in":60}')
        self.assertEqual(res.href, "")
        self.assertEqual(res.header, {})
        self.assertEqual(res.expires_at, "")

    def test_null_document(self):
        self.assertEqual(SSHAuthResponse.from_json(b"null"), SSHAuthResponse())
        self.assertEqual(SSHAuthResponse.from_json(b" null\n"), SSHAuthResponse())

    def test_partial_keeps_valid_fields(self):
        res = SSHAuthResponse.from_json_partial(
            b'{"href":7,"header":{"Authorization":"Bearer X"},"expires_at":"t","message":"m"}'
        )
        self.assertEqual(res.href, "")
        self.assertEqual(res.header, {"Authorization": "Bearer X"})
        self.assertEqual(res.expires_at, "t")
        self.assertEqual(res.message, "")

    def test_partial_of_non_object(self):
        for raw in (b"", b"not json", b"[1]", b'"x"', b"\xff"):
            with self.subTest(raw=raw):
                self.assertEqual(SSHAuthResponse.from_json_partial(raw), SSHAuthResponse())

    def test_message_is_not_read_from_json(self):
        res = SSHAuthResponse.from_json(b'{"href":"x","message":"injected"}')
        self.assertEqual(res.message, "")

    def test_message_is_not_dumped(self):
        res = SSHAuthResponse(message="permission denied", href="x")
        self.assertNotIn("message", json.loads(res.model_dump_json()))

    def test_header_case_preserved(self):
        res = SSHAuthResponse.from_json(b'{"header":{"authorization":"a","Authorization":"b"}}')
        self.assertEqual(res.header, {"authorization": "a", "Authorization": "b"})

    def test_invalid_documents(self):
        for raw in (b"", b"not json", b"[]", b'"href"', b'{"href":1}', b'{"header":{"a":1}}'):
            with self.subTest(raw=raw):
                with self.assertRaises(ValidationError):
                    SSHAuthResponse.from_json(raw)

    def test_immutable(self):
        res = SSHAuthResponse(href="x")
        with self.assertRaises(ValidationError):
            res.href = "y"


class TestEndpoint(unittest.TestCase):
    def test_defaults_not_ssh(self):
        endpoint = Endpoint()
        self.assertFalse(endpoint.is_ssh)
        self.assertEqual(endpoint.host_identity, "")

    def test_host_identity(self):
        endpoint = Endpoint(ssh_user_and_host="git@host", ssh_port=None)
        self.assertTrue(endpoint.is_ssh)
        self.assertEqual(endpoint.host_identity, "git@host")
        self.assertEqual(endpoint.ssh_port, "")


class TestSettings(unittest.TestCase):
    def test_environment_mapping(self):
        env = {
            "GIT_SSH": "C:\\bin\\plink.exe",
            "GIT_DIR": "/work/repo/.git",
            "LFS_SSHAUTH_CACHE_BACKEND": "Redis",
            "LFS_SSHAUTH_REDIS_URL": "redis://cache:6379/1",
        }
        with mock.patch.dict(os.environ, env):
            settings = Settings(_env_file=None)

        self.assertEqual(settings.git_ssh, "C:\\bin\\plink.exe")
        self.assertEqual(settings.cache_dir, Path("/work/repo/.git/lfs"))
        self.assertTrue(settings.use_redis)
        self.assertEqual(settings.redis_url, "redis://cache:6379/1")

    def test_defaults(self):
        with mock.patch.dict(os.environ, {}, clear=True):
            settings = Settings(_env_file=None)

        self.assertEqual(settings.git_ssh, "")
        self.assertEqual(settings.cache_dir, Path(".git") / "lfs")
        self.assertFalse(settings.use_redis)
        self.assertEqual(settings.redis_key_prefix, "lfs:")

    def test_unknown_backend_rejected(self):
        with mock.patch.dict(os.environ, {"LFS_SSHAUTH_CACHE_BACKEND": "memcached"}):
            with self.assertRaises(ValidationError):
                Settings(_env_file=None)


if __name__ == "__main__":
    unittest.main()
