#!/usr/bin/env python3
"""
Check that docs/test_scenarios_business_summary.md documents every scenario
in tests/test_integration_scenarios.py, and nothing else.

Missing documentation is an error; documentation for tests that no longer
exist is a warning.

Run: python scripts/validate_test_docs_sync.py
"""

import re
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parent.parent
TEST_FILE = PROJECT_ROOT / 'tests' / 'test_integration_scenarios.py'
DOC_FILE = PROJECT_ROOT / 'docs' / 'test_scenarios_business_summary.md'

CLASS_RE = re.compile(r'^class (Test\w+)')
METHOD_RE = re.compile(r'^\s+def (test_\w+)')
DOC_CLASS_RE = re.compile(r'\*\*Test Class\*\*:\s*`(Test\w+)`')
DOC_METHOD_RE = re.compile(r'\*\*Test Method\*\*:\s*`(test_\w+)`')


def extract_test_classes_and_methods(test_file: Path) -> dict[str, list[str]]:
    """Map each scenario class to its test methods, in file order."""
    classes = {}
    current_class = None

    for line in test_file.read_text(encoding='utf-8').splitlines():
        class_match = CLASS_RE.match(line)
        if class_match:
            current_class = class_match.group(1)
            classes[current_class] = []
            continue

        method_match = METHOD_RE.match(line)
        if current_class and method_match:
            classes[current_class].append(method_match.group(1))

    return classes


def extract_documented_tests(doc_file: Path) -> tuple[set[str], set[str]]:
    """Class and method names referenced by the summary document."""
    content = doc_file.read_text(encoding='utf-8')
    return set(DOC_CLASS_RE.findall(content)), set(DOC_METHOD_RE.findall(content))


def collect_sync_issues(test_file: Path, doc_file: Path) -> tuple[list[str], list[str]]:
    """Return (errors, warnings) comparing the test file with the document."""
    test_classes = extract_test_classes_and_methods(test_file)
    doc_classes, doc_methods = extract_documented_tests(doc_file)
    test_methods = {m for methods in test_classes.values() for m in methods}

    errors = [f"Missing class documentation: {c}" for c in sorted(set(test_classes) - doc_classes)]
    errors += [f"Missing method documentation: {m}" for m in sorted(test_methods - doc_methods)]

    warnings = [f"Documented class no longer exists: {c}" for c in sorted(doc_classes - set(test_classes))]
    warnings += [f"Documented method no longer exists: {m}" for m in sorted(doc_methods - test_methods)]

    return errors, warnings


def main():
    for path in (TEST_FILE, DOC_FILE):
        if not path.exists():
            print(f"❌ File not found: {path}")
            sys.exit(1)

    test_classes = extract_test_classes_and_methods(TEST_FILE)
    _, doc_methods = extract_documented_tests(DOC_FILE)
    errors, warnings = collect_sync_issues(TEST_FILE, DOC_FILE)

    print("=" * 60)
    print("Scenario Documentation Sync")
    print("=" * 60)
    print(f"\nScenario classes: {len(test_classes)}")
    print(f"Scenario methods: {sum(len(m) for m in test_classes.values())}")

    if errors:
        print(f"\n❌ ERRORS ({len(errors)}):")
        for error in errors:
            print(f"   - {error}")

    if warnings:
        print(f"\n⚠️  WARNINGS ({len(warnings)}):")
        for warning in warnings:
            print(f"   - {warning}")

    if not errors and not warnings:
        print("\n✅ Every scenario is documented.")

    print("\nCoverage by class:")
    for cls, methods in test_classes.items():
        print(f"\n  {cls}")
        for method in methods:
            status = "✅" if method in doc_methods else "❌"
            print(f"      {status} {method}")

    sys.exit(1 if errors else 0)


if __name__ == '__main__':
    main()
