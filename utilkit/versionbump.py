"""Bump a semantic version string assigned to a variable in a source file."""

from __future__ import annotations

import argparse
import re
import sys
from pathlib import Path

from utilkit.versions import parse_version

_LITERAL = r'("(?:[^"\\\n]|\\.)*"|`[^`]*`)'


def _unquote(literal: str) -> str:
    body = literal[1:-1]
    if literal.startswith("`") or "\\" not in body:
        return body
    return body.encode("latin-1", "backslashreplace").decode("unicode_escape")


def bump_version(file_name: str, var_name: str, part: str) -> tuple[str, str]:
    """Increment the version held by ``var_name`` in ``file_name`` and rewrite the file.

    ``part`` is ``major``, ``minor`` or ``patch`` (empty means patch). Returns
    the old and new version; raises ValueError when nothing could be bumped.
    """
    path = Path(file_name).resolve()
    source = path.read_text(encoding="utf-8")
    pattern = re.compile(
        r"(?m)^[ \t]*(?:(?:var|const)[ \t]+)?"
        + re.escape(var_name)
        + r"\b[ \t]*(?:[A-Za-z_][\w.]*[ \t]*)?=[ \t]*"
        + _LITERAL
    )
    match = pattern.search(source)
    if match is None:
        raise ValueError("failed to update the version")
    old_version = _unquote(match.group(1))
    try:
        version = parse_version(old_version)
    except ValueError as error:
        raise ValueError("failed to update the version") from error
    bumpers = {
        "major": version.inc_major,
        "minor": version.inc_minor,
        "patch": version.inc_patch,
        "": version.inc_patch,
    }
    if part not in bumpers:
        raise ValueError("failed to update the version")
    new_version = f"v{bumpers[part]()}"
    start, end = match.span(1)
    path.write_text(source[:start] + f"`{new_version}`" + source[end:], encoding="utf-8")
    return old_version, new_version


def main(argv: list[str] | None = None) -> int:
    """Command-line entry point; returns the exit status."""
    parser = argparse.ArgumentParser(description="Bump a version variable in a source file.")
    parser.add_argument("-file", "--file", dest="file", default="", help="source file to parse")
    parser.add_argument("-var", "--var", dest="var", default="", help="variable to update")
    parser.add_argument(
        "-part", "--part", dest="part", default="patch",
        help="version part to increment (major, minor, patch)",
    )
    args = parser.parse_args(argv)
    if not args.file or not args.var:
        print("Error: Both -file and -var are required")
        return 1
    try:
        old_version, new_version = bump_version(args.file, args.var, args.part)
    except (ValueError, OSError) as error:
        print(f"Error bumping version: {error}")
        return 1
    print(f"Bump from {old_version} to {new_version}")
    return 0


if __name__ == "__main__":
    sys.exit(main())