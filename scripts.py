#!/usr/bin/env python3
"""
Development checks for objfill, run through uv.

Usage: python scripts.py <test|lint|typecheck|demos|readme|check>
"""

import subprocess
import sys
from collections.abc import Callable
from pathlib import Path


def run_command(cmd: list[str], description: str) -> bool:
    """Run a command and return True if it succeeded."""
    print(f"\n🔄 {description}: {' '.join(cmd)}")
    try:
        subprocess.run(cmd, check=True)
    except subprocess.CalledProcessError as e:
        print(f"❌ {description} failed with exit code {e.returncode}")
        return False
    except FileNotFoundError:
        print(f"❌ Command not found: {cmd[0]}")
        return False
    print(f"✅ {description} passed")
    return True


def run_all(commands: list[tuple[list[str], str]]) -> int:
    results = [run_command(cmd, description) for cmd, description in commands]
    return 0 if all(results) else 1


def run_tests() -> int:
    return run_all([(["uv", "run", "pytest", "-v"], "Tests")])


def run_lint() -> int:
    return run_all(
        [
            (["uv", "run", "ruff", "check", "."], "Ruff linting"),
            (["uv", "run", "ruff", "format", "--check", "."], "Ruff formatting"),
        ]
    )


def run_typecheck() -> int:
    return run_all(
        [
            (["uv", "run", "mypy", "src/objfill/"], "MyPy type checking"),
            (["uv", "run", "pyright", "src/objfill/"], "Pyright type checking"),
        ]
    )


def run_demos() -> int:
    demos = sorted(path for path in Path("demo").glob("*.py") if not path.name.startswith("_"))
    return run_all([(["uv", "run", "python", str(path)], f"Demo: {path.name}") for path in demos])


def run_readme_validation() -> int:
    """Turn the README code blocks into tests with phmdoctest and run them."""
    test_file = Path("test_readme.py")
    test_file.unlink(missing_ok=True)
    try:
        return run_all(
            [
                (["uv", "run", "phmdoctest", "README.md", "--outfile", str(test_file)], "Generating README tests"),
                (["uv", "run", "pytest", str(test_file), "-v"], "README code examples"),
            ]
        )
    finally:
        test_file.unlink(missing_ok=True)


COMMANDS: dict[str, Callable[[], int]] = {
    "test": run_tests,
    "lint": run_lint,
    "typecheck": run_typecheck,
    "demos": run_demos,
    "readme": run_readme_validation,
}


def check_all() -> int:
    results = {name: command() == 0 for name, command in COMMANDS.items()}
    print(f"\n{'=' * 20} SUMMARY {'=' * 20}")
    for name, passed in results.items():
        print(f"{name:<15} {'✅ PASS' if passed else '❌ FAIL'}")
    return 0 if all(results.values()) else 1


if __name__ == "__main__":
    commands = {**COMMANDS, "check": check_all}
    if len(sys.argv) != 2 or sys.argv[1] not in commands:
        print(f"Available commands: {', '.join(commands)}")
        sys.exit(1)
    sys.exit(commands[sys.argv[1]]())
