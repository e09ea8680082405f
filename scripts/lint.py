#!/usr/bin/env python3
"""Script for running code linters and format checks locally."""

import subprocess
import sys

PATHS = ["src", "tests", "scripts"]

CHECKS = [
    ("black", ["black", "--check", *PATHS], "black found formatting issues:"),
    ("isort", ["isort", "--check-only", *PATHS], "isort found import sorting issues:"),
    ("flake8", ["flake8", "--max-line-length=88", *PATHS], "flake8 found issues:"),
]


def run_linters() -> int:
    """Run every check in order, stopping at the first failure.

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    for name, command, failure_header in CHECKS:
        print(f"\nRunning {name}...")
        result = subprocess.run(
            ["poetry", "run", *command],
            capture_output=True,
            text=True,
        )
        if result.returncode != 0:
            print(failure_header)
            print(result.stdout)
            return result.returncode
    return 0


def main() -> int:
    """Main entry point."""
    return run_linters()


if __name__ == "__main__":
    sys.exit(main())
