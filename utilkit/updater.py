"""Self-update and version-check callbacks for command-line tools."""

from __future__ import annotations

import logging
import os
import platform
import sys
from collections.abc import Callable
from pathlib import Path
from typing import NoReturn
from urllib.parse import urlencode

import requests
from rich.console import Console
from rich.markdown import Markdown

from utilkit.ghrelease import GHReleaseDownloader, UpdateError, _goarch, _goos
from utilkit.versions import Tool, is_outdated, parse_version

logger = logging.getLogger(__name__)

UPDATE_CHECK_ENDPOINT = "https://api.pdtm.sh/api/v1/tools/{}"
VERSION_CHECK_TIMEOUT = 5.0

# Do not print the release notes after a successful update.
hide_release_notes = False

# Used by the version check; verifies no certificates and honours proxy settings.
default_session = requests.Session()
default_session.verify = False


class _RollbackError(Exception):
    """Raised when a failed replacement could not be undone."""


def _fatal(message: str) -> NoReturn:
    logger.critical("[updater] %s", message)
    raise SystemExit(1)


def _executable_path() -> Path:
    return Path(sys.argv[0]).resolve()


def _check_permissions(target: Path) -> None:
    if not os.access(target.parent, os.W_OK):
        raise PermissionError(f"cannot write to directory {target.parent}")


def _replace_executable(target: Path | str, data: bytes) -> None:
    """Atomically replace ``target`` with ``data``, restoring the old file on failure."""
    target = Path(target)
    new_path = target.with_name(f".{target.name}.new")
    old_path = target.with_name(f".{target.name}.old")
    new_path.write_bytes(data)
    os.chmod(new_path, 0o755)
    old_path.unlink(missing_ok=True)
    had_target = target.exists()
    if had_target:
        os.replace(target, old_path)
    try:
        os.replace(new_path, target)
    except OSError:
        if had_target:
            try:
                os.replace(old_path, target)
            except OSError as rollback_error:
                raise _RollbackError(str(rollback_error)) from rollback_error
        raise
    try:
        old_path.unlink(missing_ok=True)
    except OSError:
        pass


def get_update_tool_callback(tool_name: str, version: str) -> Callable[[], None]:
    """Return a callback that updates the tool to its latest release and exits."""
    return get_update_tool_from_repo_callback(tool_name, version, "")


def get_update_tool_from_repo_callback(
    tool_name: str, version: str, repo_name: str = ""
) -> Callable[[], None]:
    """Like :func:`get_update_tool_callback`, with the repository (``repo`` or ``org/repo``) given."""

    def update_tool() -> None:
        repo = repo_name or tool_name
        try:
            gh = GHReleaseDownloader(repo)
        except UpdateError as error:
            _fatal(f"failed to download latest release got {error}")
        gh.set_tool_name(tool_name)
        tag = str(gh.latest.get("tag_name") or "")
        try:
            latest_version = parse_version(tag)
        except ValueError as error:
            _fatal(f"failed to parse semversion from tagname `{tag}` got {error}")
        try:
            current_version = parse_version(version)
        except ValueError as error:
            _fatal(f"failed to parse semversion from current version {version} got {error}")
        current, latest = str(current_version), str(latest_version)

        if not is_outdated(current, latest):
            logger.info("%s is already updated to latest version", tool_name)
            raise SystemExit(0)

        target = _executable_path()
        try:
            _check_permissions(target)
        except OSError as error:
            _fatal(
                f"update of {tool_name} {current} -> {latest} failed , "
                f"insufficient permission detected got: {error}"
            )
        try:
            binary = gh.get_executable_from_asset()
        except UpdateError as error:
            _fatal(f"executable {tool_name} not found in release asset `{gh.asset_id}` got: {error}")

        try:
            _replace_executable(target, binary)
        except _RollbackError as error:
            _fatal(f"rollback of update of {tool_name} failed got {error},pls reinstall {tool_name}")
        except OSError:
            logger.error("update of %s %s -> %s failed, rolling back update", tool_name, current, latest)
            raise SystemExit(1)

        logger.info("%s successfully updated %s -> %s (latest)", tool_name, current, latest)
        if not hide_release_notes:
            Console().print(Markdown(str(gh.latest.get("body") or "")))
            print()
        raise SystemExit(0)

    return update_tool


def _check_params(version: str) -> str:
    return urlencode(
        {
            "os": _goos(),
            "arch": _goarch(),
            "go_version": platform.python_version(),
            "v": version,
        }
    )


def get_tool_version_callback(tool_name: str, version: str) -> Callable[[], str]:
    """Return a callback that asks the update-check service for the tool's latest version."""

    def check_version() -> str:
        url = UPDATE_CHECK_ENDPOINT.format(tool_name) + "?" + _check_params(version)
        try:
            response = default_session.get(url, timeout=VERSION_CHECK_TIMEOUT)
        except requests.RequestException as error:
            raise UpdateError(f"updater: http Get {url} failed: {error}") from error
        with response:
            if response.status_code != 200:
                raise UpdateError(
                    f"updater: version check failed expected status 200 but got "
                    f"{response.status_code} for GET {url}"
                )
            body = response.text
            try:
                details = response.json()
            except ValueError as error:
                raise UpdateError(f"updater: failed to unmarshal {body}") from error
        if not isinstance(details, dict):
            raise UpdateError(f"updater: failed to unmarshal {body}")
        tool = Tool(
            name=str(details.get("name") or ""),
            repo=str(details.get("repo") or ""),
            version=str(details.get("version") or ""),
            assets=dict(details.get("assets") or {}),
        )
        if not tool.version:
            raise UpdateError(
                "something went wrong, expected version string but got empty string "
                f"for GET `{url}` response `{body}`"
            )
        return tool.version

    return check_version


def get_version_check_callback(tool_name: str) -> Callable[[], str]:
    """Return a version-check callback that reports no current version."""
    return get_tool_version_callback(tool_name, "")