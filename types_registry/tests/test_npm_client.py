#!/usr/bin/env python3
import sys
import json
import shutil
import tempfile
import unittest
import subprocess
from pathlib import Path
from unittest import mock

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from types_registry.npm_client import NpmClient, PublishError
from types_registry.registry_settings import RegistrySettings


class NpmClientTests(unittest.TestCase):
    """Tests for publishing staged directories through npm."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.package_dir = Path(self.temp_dir) / "types-registry"
        self.package_dir.mkdir()
        self.manifest = {"name": "types-registry", "version": "0.1.6"}
        with open(self.package_dir / "package.json", 'w') as f:
            json.dump(self.manifest, f)
        self.client = NpmClient("https://registry.npmjs.org", token="secret")

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_create_from_settings(self):
        settings = RegistrySettings(Path("out"), Path("data"), Path("logs"),
                                    registry_url="https://npm.example.com/", npm_token="tok")
        client = NpmClient.create(settings)
        self.assertEqual(client.registry_url, "https://npm.example.com")
        self.assertEqual(client.token, "tok")

    @mock.patch("types_registry.npm_client.subprocess.run")
    def test_dry_run_does_not_spawn_npm(self, run):
        """Test that a dry publish validates but never runs npm."""
        NpmClient("https://registry.npmjs.org").publish(self.package_dir, self.manifest, dry=True)
        run.assert_not_called()

    @mock.patch("types_registry.npm_client.subprocess.run")
    def test_dry_run_still_validates(self, run):
        """Test that a mismatched staged manifest fails even in a dry run."""
        with self.assertRaises(PublishError):
            self.client.publish(self.package_dir, {"name": "types-registry", "version": "0.1.7"}, dry=True)
        run.assert_not_called()

    def test_missing_package_json(self):
        (self.package_dir / "package.json").unlink()
        with self.assertRaises(PublishError):
            self.client.publish(self.package_dir, self.manifest, dry=True)

    @mock.patch("types_registry.npm_client.subprocess.run")
    def test_publish_runs_npm(self, run):
        run.return_value = subprocess.CompletedProcess([], 0, stdout="+ types-registry@0.1.6", stderr="")

        self.client.publish(self.package_dir, self.manifest)

        cmd = run.call_args[0][0]
        self.assertEqual(cmd, ["npm", "publish", str(self.package_dir), "--registry", "https://registry.npmjs.org"])
        self.assertEqual(run.call_args[1]["env"]["NPM_TOKEN"], "secret")

    @mock.patch("types_registry.npm_client.subprocess.run")
    def test_publish_failure_raises(self, run):
        run.return_value = subprocess.CompletedProcess([], 1, stdout="", stderr="E403 Forbidden")

        with self.assertRaises(PublishError) as ctx:
            self.client.publish(self.package_dir, self.manifest)
        self.assertEqual(ctx.exception.stderr, "E403 Forbidden")

    @mock.patch("types_registry.npm_client.subprocess.run")
    def test_publish_without_token(self, run):
        client = NpmClient("https://registry.npmjs.org")
        with self.assertRaises(PublishError):
            client.publish(self.package_dir, self.manifest)
        run.assert_not_called()


if __name__ == '__main__':
    unittest.main()
