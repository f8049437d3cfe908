#!/usr/bin/env python3
"""Run every formatter check, linter and the test suite in one go.

Steps, in order:
1. Black format check
2. isort import-order check
3. Ruff static checks
4. Pylint analysis of app, core and infrastructure
5. pytest

All output is collected and summarised at the end.
"""

from pathlib import Path
import subprocess
import sys

COMMANDS: list[tuple[list[str], str]] = [
    (["python", "-m", "black", ".", "--check"], "Black format check"),
    (["python", "-m", "isort", ".", "--check-only"], "isort import order"),
    (["python", "-m", "ruff", "check", "."], "Ruff"),
    (["python", "-m", "pylint", "app", "core", "infrastructure", "main.py"], "Pylint"),
    (["python", "-m", "pytest", "-q"], "pytest"),
]


def run_command(cmd: list[str], description: str) -> tuple[bool, str]:
    """Run `cmd` and return (succeeded, combined output)."""
    print(f"\n{'=' * 60}")
    print(f"Running: {description}")
    print(f"Command: {' '.join(cmd)}")
    print("=" * 60)

    try:
        result = subprocess.run(
            cmd, capture_output=True, text=True, check=False, cwd=Path(__file__).parent
        )
    except OSError as e:
        print(f"FAILED to start: {e}")
        return False, str(e)

    success = result.returncode == 0
    output = result.stdout + result.stderr
    print("OK" if success else "FAILED")
    print(output if output.strip() else "(no output)")
    return success, output


def main() -> None:
    results = [(desc, *run_command(cmd, desc)) for cmd, desc in COMMANDS]

    print(f"\n{'=' * 60}")
    print("Summary")
    print("=" * 60)
    for description, success, _ in results:
        print(f"{description}: {'passed' if success else 'FAILED'}")

    all_passed = all(success for _, success, _ in results)
    print(f"\nOverall: {'all passed' if all_passed else 'failures'}")
    sys.exit(0 if all_passed else 1)


if __name__ == "__main__":
    main()
