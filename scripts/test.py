#!/usr/bin/env python3
"""Script for running tests locally."""

import subprocess
import sys


def run_tests(target: str | None = None) -> int:
    """Run tests locally.

    Args:
        target: Optional test path or node id. If None, runs the whole suite.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    print(f"\nRunning tests for {target or 'consumer_console'} locally...")

    pytest_result = subprocess.run(
        ["poetry", "run", "pytest", target or "tests", "-v"],
        capture_output=True,
        text=True,
    )
    if pytest_result.returncode != 0:
        print("Tests failed:")
        print(pytest_result.stdout)
    return pytest_result.returncode


def main() -> int:
    """Main entry point."""
    target = sys.argv[1] if len(sys.argv) > 1 else None
    return run_tests(target)


if __name__ == "__main__":
    sys.exit(main())
