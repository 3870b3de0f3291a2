#!/usr/bin/env python3
"""
Comprehensive test runner for the Terminal Trivia Game.
Runs all unit and integration tests and prints a summary report.
"""
import unittest
import sys
import time
from pathlib import Path

# Make the project root importable
sys.path.insert(0, str(Path(__file__).parent.parent))

TEST_MODULES = [
    'tests.test_models',
    'tests.test_record_parser',
    'tests.test_question_store',
    'tests.test_timer',
    'tests.test_engine',
    'tests.test_console',
    'tests.test_data_manager',
    'tests.test_config_manager',
    'tests.test_app',
    'tests.test_main',
    'tests.test_integration_comprehensive',
]

CATEGORIES = {
    'unit': [m for m in TEST_MODULES if m != 'tests.test_integration_comprehensive'],
    'integration': ['tests.test_integration_comprehensive'],
    'parser': ['tests.test_record_parser', 'tests.test_question_store'],
    'timer': ['tests.test_timer'],
    'engine': ['tests.test_engine'],
    'app': ['tests.test_app', 'tests.test_main', 'tests.test_console'],
}


def _load_suite(module_names):
    loader = unittest.TestLoader()
    suite = unittest.TestSuite()
    for module_name in module_names:
        try:
            suite.addTest(loader.loadTestsFromName(module_name))
            print(f"✓ Loaded tests from {module_name}")
        except (ImportError, AttributeError) as e:
            print(f"✗ Failed to load {module_name}: {e}")
            return None
    return suite


def run_test_suite(module_names=TEST_MODULES):
    """Run the test suite and print a summary report."""
    print("=" * 70)
    print("Terminal Trivia Game - Test Suite")
    print("=" * 70)

    suite = _load_suite(module_names)
    if suite is None:
        return False

    print("\n" + "=" * 70)
    print("Running Tests...")
    print("=" * 70)

    runner = unittest.TextTestRunner(verbosity=2, stream=sys.stdout, buffer=True)

    start_time = time.time()
    result = runner.run(suite)
    end_time = time.time()

    print("\n" + "=" * 70)
    print("Test Summary Report")
    print("=" * 70)

    total_tests = result.testsRun
    failures = len(result.failures)
    errors = len(result.errors)
    skipped = len(result.skipped)
    passed = total_tests - failures - errors - skipped

    print(f"Total Tests Run: {total_tests}")
    print(f"Passed: {passed}")
    print(f"Failed: {failures}")
    print(f"Errors: {errors}")
    print(f"Skipped: {skipped}")
    print(f"Success Rate: {(passed/total_tests)*100:.1f}%" if total_tests > 0 else "N/A")
    print(f"Execution Time: {end_time - start_time:.2f} seconds")

    for label, entries in (("FAILURES", result.failures), ("ERRORS", result.errors)):
        if entries:
            print("\n" + "-" * 50)
            print(f"{label}:")
            print("-" * 50)
            for test, traceback in entries:
                print(f"\n{test}:")
                print(traceback)

    return failures == 0 and errors == 0


def run_specific_test_category(category):
    """Run tests for a specific category."""
    if category not in CATEGORIES:
        print(f"Unknown category: {category}")
        print(f"Available categories: {', '.join(CATEGORIES.keys())}")
        return False

    print(f"Running {category} tests...")
    return run_test_suite(CATEGORIES[category])


if __name__ == '__main__':
    if len(sys.argv) > 1:
        success = run_specific_test_category(sys.argv[1])
    else:
        success = run_test_suite()

    sys.exit(0 if success else 1)
