"""Downloading and unpacking the latest release assets of a GitHub repository."""

from __future__ import annotations

import hashlib
import io
import logging
import os
import platform
import sys
import tarfile
import zipfile
from collections.abc import Callable
from typing import Any, BinaryIO

import requests
from tqdm import tqdm

from utilkit.versions import AssetFormat

logger = logging.getLogger(__name__)

ORGANIZATION = "projectdiscovery"
GITHUB_API = "https://api.github.com"
DOWNLOAD_UPDATE_TIMEOUT = 30.0

# Hide the download progress bar of download_tool().
hide_progress_bar = False
# Skip verifying assets against the checksums file of the release.
skip_checksum_validation = False

_EXECUTABLE_SUFFIX = ".exe"
_REDIRECTS = frozenset({301, 302, 303, 307, 308})

AssetFileCallback = Callable[[str, Any, BinaryIO], Any]


class UpdateError(Exception):
    """Raised when a release cannot be fetched, verified or unpacked."""


def _goos() -> str:
    name = sys.platform
    if name.startswith("linux"):
        return "linux"
    if name.startswith("darwin"):
        return "darwin"
    if name.startswith(("win32", "cygwin", "msys")):
        return "windows"
    for prefix in ("freebsd", "openbsd", "netbsd"):
        if name.startswith(prefix):
            return prefix
    return name


def _goarch() -> str:
    machine = platform.machine().lower()
    if machine in ("x86_64", "amd64"):
        return "amd64"
    if machine in ("aarch64", "arm64", "armv8l"):
        return "arm64"
    if machine in ("i386", "i486", "i586", "i686", "x86"):
        return "386"
    if machine.startswith("arm"):
        return "arm"
    return machine


def _read_body(response: requests.Response, show_progress: bool) -> bytes:
    total = int(response.headers.get("Content-Length") or 0) or None
    chunks = []
    try:
        with tqdm(
            total=total, unit="B", unit_scale=True, ncols=100, disable=not show_progress
        ) as bar:
            for chunk in response.iter_content(chunk_size=64 * 1024):
                chunks.append(chunk)
                bar.update(len(chunk))
    except requests.RequestException as error:
        raise UpdateError(f"failed to read response body: {error}") from error
    return b"".join(chunks)


class GHReleaseDownloader:
    """Fetches the latest release of a repository and downloads its assets."""

    def __init__(
        self,
        repo_name: str,
        *,
        session: requests.Session | None = None,
        api_base: str = GITHUB_API,
    ) -> None:
        if "/" in repo_name:
            parts = repo_name.split("/")
            if len(parts) != 2:
                raise UpdateError(f"update: invalid repo name {repo_name}")
            organization, repo = parts
        else:
            organization, repo = ORGANIZATION, repo_name
        if not organization:
            raise UpdateError("update: organization name cannot be empty")

        self.organization = organization
        self.repo_name = repo
        self.asset_format = AssetFormat.UNKNOWN
        self.asset_id = 0
        self.goos = _goos()
        self.goarch = _goarch()
        self._asset_name = repo
        self._full_asset_name = ""
        self._api_base = api_base.rstrip("/")
        self._session = session if session is not None else requests.Session()
        token = os.environ.get("GITHUB_TOKEN")
        if token:
            self._session.headers["Authorization"] = f"Bearer {token}"
        self.latest: dict[str, Any] = self._get_latest_release()

    @property
    def _repo_url(self) -> str:
        return f"{self._api_base}/repos/{self.organization}/{self.repo_name}"

    @property
    def _version_tag(self) -> str:
        return str(self.latest.get("tag_name") or "").removeprefix("v")

    def _assets(self) -> list[dict[str, Any]]:
        return list(self.latest.get("assets") or [])

    def _find_asset_id(self, name: str) -> int:
        asset_id = 0
        for asset in self._assets():
            if asset.get("name") == name:
                asset_id = int(asset.get("id") or 0)
        return asset_id

    def set_tool_name(self, tool_name: str) -> None:
        """Use ``tool_name`` instead of the repository name to find assets and executables."""
        if tool_name:
            self._asset_name = tool_name

    def download_tool(self) -> bytes:
        """Download the archive holding the tool for this platform."""
        self._find_tool_asset()
        with self._download_asset_with_id(self.asset_id) as response:
            return _read_body(response, not hide_progress_bar)

    def get_release_checksums(self) -> dict[str, str]:
        """Download the release's checksums file as a mapping of asset name to checksum."""
        file_name = f"{self._asset_name}_{self._version_tag}_checksums.txt"
        asset_id = self._find_asset_id(file_name)
        if asset_id == 0:
            raise UpdateError("update: checksum file not in release assets")
        try:
            with self._download_asset_with_id(asset_id) as response:
                raw = _read_body(response, False)
        except UpdateError as error:
            raise UpdateError(f"failed to download checksum file: {error}") from error
        data = raw.decode("utf-8", "replace").strip()
        if not data:
            raise UpdateError("checksum: something went wrong checksum file is empty")
        checksums = {}
        for line in data.split("\n"):
            fields = line.split()
            if len(fields) == 2:
                checksums[fields[1]] = fields[0]
        return checksums

    def get_executable_from_asset(self) -> bytes:
        """Download the tool archive, verify its checksum and return the executable inside."""
        archive = self.download_tool()

        try:
            checksums = self.get_release_checksums()
        except UpdateError:
            checksums = {}
        expected = checksums.get(self._full_asset_name, "")
        if expected and not skip_checksum_validation:
            got = hashlib.sha256(archive).hexdigest()
            if expected != got:
                raise UpdateError(
                    f"checksum: asset file corrupted: checksum mismatch expected {expected} but got {got}"
                )
            logger.info("Verified Integrity of %s", self._full_asset_name)

        found: list[bytes] = []

        def collect(path: str, info: Any, data: BinaryIO) -> None:
            name = os.path.basename(path.rstrip("/"))
            if name.removesuffix(_EXECUTABLE_SUFFIX).casefold() == self._asset_name.casefold():
                found.append(data.read())

        try:
            unpack_asset_with_callback(self.asset_format, archive, collect)
        except (UpdateError, zipfile.BadZipFile, tarfile.TarError, OSError, EOFError):
            pass
        if not found:
            raise UpdateError("executable not found in archive")
        return found[-1]

    def download_asset_with_name(self, asset_name: str, show_progress_bar: bool) -> bytes:
        """Download the release asset called ``asset_name``."""
        asset_id = self._find_asset_id(asset_name)
        if asset_id == 0:
            raise UpdateError(f"release asset {asset_name} not found")
        try:
            with self._download_asset_with_id(asset_id) as response:
                return _read_body(response, show_progress_bar)
        except UpdateError as error:
            raise UpdateError(f"failed to download asset {asset_name}: {error}") from error

    def download_source_with_callback(
        self, show_progress_bar: bool, callback: AssetFileCallback
    ) -> None:
        """Download the source archive of the release and call ``callback`` for each file."""
        url = str(self.latest.get("zipball_url") or "")
        try:
            response = self._session.get(url, stream=True, timeout=DOWNLOAD_UPDATE_TIMEOUT)
        except requests.RequestException as error:
            raise UpdateError(f"failed to download source of {self.repo_name}: {error}") from error
        with response:
            if response.status_code != 200:
                raise UpdateError(
                    f"failed to download source of {self.repo_name}: got status {response.status_code}"
                )
            data = _read_body(response, show_progress_bar)
        unpack_asset_with_callback(AssetFormat.ZIP, data, callback)

    def _get_latest_release(self) -> dict[str, Any]:
        url = f"{self._repo_url}/releases/latest"
        try:
            response = self._session.get(
                url,
                headers={"Accept": "application/vnd.github+json"},
                timeout=DOWNLOAD_UPDATE_TIMEOUT,
            )
        except requests.RequestException as error:
            raise UpdateError(f"failed to fetch latest release: {error}") from error
        status = response.status_code
        if status == 404:
            raise UpdateError(f"repo {self.organization}/{self.repo_name} not found got {status}")
        if status == 403 and response.headers.get("X-RateLimit-Remaining") == "0":
            raise UpdateError("hit github ratelimit while downloading latest release")
        if status in (401, 403):
            raise UpdateError("gh auth failed try unsetting GITHUB_TOKEN env variable")
        if status != 200:
            raise UpdateError(f"failed to fetch latest release: got status {status}")
        try:
            release = response.json()
        except ValueError as error:
            raise UpdateError(f"invalid release data: {error}") from error
        if not isinstance(release, dict):
            raise UpdateError("invalid release data: expected an object")
        return release

    def _find_tool_asset(self) -> None:
        os_name = "macOS" if self.goos.casefold() == "darwin" else self.goos
        prefix = f"{self._asset_name}_{self._version_tag}_{os_name}_{self.goarch}"
        zip_ext = AssetFormat.ZIP.file_extension()
        tar_ext = AssetFormat.TAR.file_extension()
        for asset in self._assets():
            name = str(asset.get("name") or "")
            if zip_ext in name:
                if name.casefold() == (prefix + zip_ext).casefold():
                    self._select_asset(asset, AssetFormat.ZIP)
                    break
            elif tar_ext in name:
                if name.casefold() == (prefix + tar_ext).casefold():
                    self._select_asset(asset, AssetFormat.TAR)
                    break
        if self.asset_id == 0:
            raise UpdateError(
                f"update: could not find release asset for your platform ({self.goos}/{self.goarch})"
            )

    def _select_asset(self, asset: dict[str, Any], fmt: AssetFormat) -> None:
        self.asset_id = int(asset.get("id") or 0)
        self.asset_format = fmt
        self._full_asset_name = str(asset.get("name") or "")

    def _download_asset_with_id(self, asset_id: int) -> requests.Response:
        url = f"{self._repo_url}/releases/assets/{asset_id}"
        try:
            response = self._session.get(
                url,
                headers={"Accept": "application/octet-stream"},
                allow_redirects=False,
                stream=True,
                timeout=DOWNLOAD_UPDATE_TIMEOUT,
            )
            if response.status_code in _REDIRECTS and response.headers.get("Location"):
                location = response.headers["Location"]
                response.close()
                response = self._session.get(
                    location, stream=True, timeout=DOWNLOAD_UPDATE_TIMEOUT
                )
        except requests.RequestException as error:
            raise UpdateError(f"failed to download release asset: {error}") from error
        if response.status_code != 200:
            response.close()
            raise UpdateError(
                f"something went wrong got {response.status_code} while downloading asset, "
                "expected status 200"
            )
        return response


def unpack_asset_with_callback(
    fmt: AssetFormat, data: bytes | BinaryIO, callback: AssetFileCallback
) -> None:
    """Call ``callback(path, info, stream)`` for every entry of a zip or tar.gz archive."""
    if fmt not in (AssetFormat.ZIP, AssetFormat.TAR):
        raise UpdateError(
            "unpack: github asset format not supported. only zip and tar are supported"
        )
    stream = io.BytesIO(data) if isinstance(data, (bytes, bytearray)) else data
    if fmt is AssetFormat.ZIP:
        with zipfile.ZipFile(stream) as archive:
            for info in archive.infolist():
                with archive.open(info) as entry:
                    callback(info.filename, info, entry)
        return
    with tarfile.open(fileobj=stream, mode="r:gz") as archive:
        for member in archive:
            entry = archive.extractfile(member) or io.BytesIO(b"")
            with entry:
                callback(member.name, member, entry)