#!/usr/bin/env python3
"""Dependency doctor for the portfolio admin tools.

Run as ``portfolio-admin-check-deps`` (add ``--test`` to include the test
extra). Exit code 1 lists every missing distribution with its install command.
"""

from __future__ import annotations

import importlib
import sys
from importlib import metadata

# import name -> distribution name on the index
PACKAGES: dict[str, str] = {
    "click": "click",
    "dotenv": "python-dotenv",
    "fastapi": "fastapi",
    "pydantic": "pydantic",
    "requests": "requests",
    "rich": "rich",
    "uvicorn": "uvicorn",
    "yaml": "pyyaml",
}

TEST_PACKAGES: dict[str, str] = {
    "httpx": "httpx",
    "pytest": "pytest",
}


def _installed_version(module: str, dist: str) -> str | None:
    try:
        importlib.import_module(module)
    except ImportError:
        return None
    try:
        return metadata.version(dist)
    except metadata.PackageNotFoundError:
        return "?"


def check(packages: dict[str, str]) -> list[str]:
    """Print one line per package and return the missing distribution names."""
    missing = []
    for module, dist in packages.items():
        version = _installed_version(module, dist)
        if version is None:
            print(f"  \033[31m✗\033[0m {dist:20s} MISSING  →  pip install {dist}")
            missing.append(dist)
        else:
            print(f"  \033[32m✓\033[0m {dist:20s} {version}")
    return missing


def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    missing = check(PACKAGES)
    if "--test" in args:
        print("\n  test extra:")
        missing += check(TEST_PACKAGES)

    print()
    if missing:
        extra = "[test]" if "--test" in args else ""
        print(f"\033[33mFix: pip install -e .{extra}  ({len(missing)} missing)\033[0m")
        return 1

    print("\033[32mAll dependencies present ✓\033[0m")
    return 0


if __name__ == "__main__":
    sys.exit(main())
