"""Tests for centralized path constants.

Verifies all path constants are importable, have correct types, and
point to expected locations relative to the project root.
"""

from pathlib import Path

from src import paths


class TestProjectRoot:

    def test_root_contains_src(self):
        assert (paths.PROJECT_ROOT / "src" / "paths.py").exists()

    def test_root_is_absolute(self):
        assert paths.PROJECT_ROOT.is_absolute()


class TestConfigPaths:

    def test_reference_data_under_config(self):
        assert paths.REFERENCE_DATA_PATH.parent == paths.CONFIG_DIR
        assert paths.REFERENCE_DATA_PATH.name == "reference_data.json"

    def test_reference_data_shipped(self):
        assert paths.REFERENCE_DATA_PATH.exists()


class TestDataAndOutputPaths:

    def test_export_under_data(self):
        assert paths.COLLEGES_EXPORT_PATH.parent == paths.DATA_DIR
        assert paths.COLLEGES_EXPORT_PATH.exists()

    def test_reports_under_outputs(self):
        assert paths.VALIDATION_RESULTS_PATH.parent == paths.OUTPUTS_DIR
        assert paths.VALIDATION_MARKDOWN_PATH.parent == paths.OUTPUTS_DIR
        assert paths.VALIDATION_RESULTS_PATH.suffix == ".json"

    def test_all_constants_are_paths(self):
        for name in ("PROJECT_ROOT", "CONFIG_DIR", "REFERENCE_DATA_PATH", "DATA_DIR",
                     "COLLEGES_EXPORT_PATH", "OUTPUTS_DIR", "VALIDATION_RESULTS_PATH",
                     "VALIDATION_MARKDOWN_PATH", "SCRIPTS_DIR"):
            assert isinstance(getattr(paths, name), Path), name
