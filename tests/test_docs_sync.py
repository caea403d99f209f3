"""
Keeps docs/test_scenarios_business_summary.md in step with the integration
scenarios.

Fails when a scenario is added without documentation, or when the document
still describes a scenario that was removed.
"""

import pytest

from scripts.validate_test_docs_sync import (
    DOC_FILE,
    TEST_FILE,
    collect_sync_issues,
    extract_documented_tests,
    extract_test_classes_and_methods,
)


class TestDocumentationSync:
    """Scenario tests and their business summary must match."""

    def test_doc_files_exist(self):
        assert TEST_FILE.exists(), f"Test file not found: {TEST_FILE}"
        assert DOC_FILE.exists(), f"Documentation file not found: {DOC_FILE}"

    def test_every_scenario_documented(self):
        errors, _ = collect_sync_issues(TEST_FILE, DOC_FILE)
        assert not errors, (
            "\n".join(errors) + "\nPlease update docs/test_scenarios_business_summary.md"
        )

    def test_no_stale_documentation(self):
        _, warnings = collect_sync_issues(TEST_FILE, DOC_FILE)
        assert not warnings, (
            "\n".join(warnings) + "\nPlease update docs/test_scenarios_business_summary.md"
        )

    def test_every_class_has_scenarios(self):
        classes = extract_test_classes_and_methods(TEST_FILE)
        empty = [name for name, methods in classes.items() if not methods]
        assert not empty, f"Scenario classes without tests: {empty}"


class TestSyncParsing:
    """The extractors on small synthetic inputs."""

    @pytest.fixture
    def files(self, tmp_path):
        test_file = tmp_path / "test_scenarios.py"
        test_file.write_text(
            "class TestAlpha:\n"
            "    def test_one(self):\n"
            "        pass\n"
            "\n"
            "class TestBeta:\n"
            "    def test_two(self):\n"
            "        pass\n",
            encoding="utf-8",
        )
        doc_file = tmp_path / "summary.md"
        doc_file.write_text(
            "**Test Class**: `TestAlpha`\n"
            "**Test Method**: `test_one`\n"
            "**Test Class**: `TestGone`\n",
            encoding="utf-8",
        )
        return test_file, doc_file

    def test_extracts_classes_and_methods(self, files):
        test_file, doc_file = files

        assert extract_test_classes_and_methods(test_file) == {"TestAlpha": ["test_one"], "TestBeta": ["test_two"]}
        assert extract_documented_tests(doc_file) == ({"TestAlpha", "TestGone"}, {"test_one"})

    def test_reports_missing_and_stale(self, files):
        errors, warnings = collect_sync_issues(*files)

        assert errors == ["Missing class documentation: TestBeta", "Missing method documentation: test_two"]
        assert warnings == ["Documented class no longer exists: TestGone"]
