#!/usr/bin/env python3
import sys
import json
import stat
import shutil
import tempfile
import unittest
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from types_registry.registry_data import AdditionsReader, PackageReader, RegistryDataError, TypingsPackage
from types_registry.registry_io import RegistryIOError, clear_output_path, write_json
from types_registry.registry_logging import RunLog, write_log
from types_registry.registry_settings import RegistrySettings


class DataReaderTests(unittest.TestCase):
    """Tests for reading typings packages and additions from the data directory."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.data_dir = Path(self.temp_dir)

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def _write(self, name, content):
        with open(self.data_dir / name, 'w') as f:
            json.dump(content, f)

    def test_read_typings_one_per_version(self):
        """Test that every version entry becomes a typings package."""
        self._write("typesData.json", {
            "jquery": {
                "1": {"typingsPackageName": "jquery", "libraryMajorVersion": 1, "libraryMinorVersion": 12},
                "3": {"typingsPackageName": "jquery", "libraryMajorVersion": 3, "libraryMinorVersion": 3},
            },
            "node": {"10": {"libraryMajorVersion": 10}},
        })

        typings = PackageReader(self.data_dir).read_typings()

        self.assertEqual([t.name for t in typings], ["jquery", "jquery", "node"])
        self.assertEqual(typings[0], TypingsPackage("jquery", 1, 12))

    def test_read_typings_missing_file(self):
        with self.assertRaises(RegistryDataError):
            PackageReader(self.data_dir).read_typings()

    def test_read_typings_invalid_json(self):
        (self.data_dir / "typesData.json").write_text("{not json")
        with self.assertRaises(RegistryDataError):
            PackageReader(self.data_dir).read_typings()

    def test_read_typings_version_entry_not_an_object(self):
        """Test that a malformed version entry fails with a data error."""
        self._write("typesData.json", {"jquery": {"1": "oops"}})
        with self.assertRaises(RegistryDataError):
            PackageReader(self.data_dir).read_typings()

    def test_read_typings_non_integer_version(self):
        self._write("typesData.json", {"jquery": {"1": {"libraryMajorVersion": "one"}}})
        with self.assertRaises(RegistryDataError) as ctx:
            PackageReader(self.data_dir).read_typings()
        self.assertIn("jquery@1", str(ctx.exception))

    def test_read_additions(self):
        self._write("additions.json", ["left-pad", "react"])
        self.assertEqual(AdditionsReader(self.data_dir).read_additions(), ["left-pad", "react"])

    def test_missing_additions_is_empty(self):
        self.assertEqual(AdditionsReader(self.data_dir).read_additions(), [])

    def test_invalid_additions(self):
        self._write("additions.json", {"left-pad": 1})
        with self.assertRaises(RegistryDataError):
            AdditionsReader(self.data_dir).read_additions()


class OutputTests(unittest.TestCase):
    """Tests for output writing, directory clearing and run logs."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.root = Path(self.temp_dir)

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def test_write_json_creates_parents_and_overwrites(self):
        path = self.root / "a" / "b" / "out.json"
        write_json(path, {"x": 1})
        write_json(path, {"x": 2})

        with open(path) as f:
            self.assertEqual(json.load(f), {"x": 2})
        self.assertEqual([p.name for p in path.parent.iterdir()], ["out.json"], "No temp files should remain")

    def test_written_files_are_world_readable(self):
        path = self.root / "package.json"
        write_json(path, {"name": "types-registry"})
        self.assertEqual(stat.S_IMODE(path.stat().st_mode), 0o644)

    def test_write_json_unserializable(self):
        with self.assertRaises(RegistryIOError):
            write_json(self.root / "bad.json", {"x": object()})

    def test_clear_output_path_absent_directory(self):
        target = self.root / "missing"
        clear_output_path(target)
        clear_output_path(target)
        self.assertTrue(target.is_dir())
        self.assertEqual(list(target.iterdir()), [])

    def test_run_log_transcript(self):
        log = RunLog()
        log("first")
        log.log("second")

        self.assertEqual(log.result(), "first\nsecond\n")
        path = write_log(self.root / "logs", "run.md", log.result())
        self.assertEqual(path.read_text(), "first\nsecond\n")

    def test_empty_run_log(self):
        self.assertEqual(RunLog().result(), "")


class SettingsTests(unittest.TestCase):
    """Tests for settings resolution."""

    def test_from_env_defaults(self):
        settings = RegistrySettings.from_env({})
        self.assertEqual(settings.output_path, Path("./output"))
        self.assertEqual(settings.registry_url, "https://registry.npmjs.org")
        self.assertIsNone(settings.npm_token)
        self.assertEqual(settings.package_output_path, Path("./output") / "types-registry")

    def test_overrides_take_precedence(self):
        settings = RegistrySettings.from_env(
            {"TYPES_REGISTRY_OUTPUT_PATH": "/env/out", "NPM_TOKEN": "tok"},
            output_path=Path("/cli/out"),
            data_dir=None,
        )
        self.assertEqual(settings.output_path, Path("/cli/out"))
        self.assertEqual(settings.data_dir, Path("./data"))
        self.assertEqual(settings.npm_token, "tok")


if __name__ == '__main__':
    unittest.main()
