#!/usr/bin/env python3
"""
Run all unit tests for the virtual AMM engine.
"""

import sys
import unittest
import os

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))


def check_dependencies():
    """Check if required dependencies are installed."""
    missing_deps = []

    try:
        import click
    except ImportError:
        missing_deps.append('click')

    try:
        import yaml
    except ImportError:
        missing_deps.append('pyyaml')

    try:
        import dotenv
    except ImportError:
        missing_deps.append('python-dotenv')

    if missing_deps:
        print("\n" + "="*60)
        print("WARNING: Missing dependencies detected!")
        print("="*60)
        print(f"Missing packages: {', '.join(missing_deps)}")
        print("\nTo install all dependencies, run:")
        print("  pip install -r requirements.txt")
        print("\nTests cannot run until they are installed.")
        print("="*60 + "\n")
        return False
    return True


if __name__ == '__main__':
    # Check dependencies
    deps_ok = check_dependencies()

    # The package imports yaml at import time, so nothing runs without it
    if not deps_ok:
        sys.exit(1)

    # Discover and run all tests
    loader = unittest.TestLoader()
    suite = loader.discover('tests', pattern='test_*.py')
    print("Running all tests...\n")

    # Run tests with verbosity
    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    # Print summary
    print("\n" + "="*60)
    print("TEST SUMMARY")
    print("="*60)
    print(f"Tests run: {result.testsRun}")
    print(f"Failures: {len(result.failures)}")
    print(f"Errors: {len(result.errors)}")

    if result.wasSuccessful():
        print("\n✅ All tests passed!")
    else:
        print("\n❌ Some tests failed.")

    print("="*60)

    # Exit with error code if tests failed
    sys.exit(0 if result.wasSuccessful() else 1)
