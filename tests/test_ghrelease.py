import hashlib
import io
import tarfile
import zipfile

import pytest
import responses

from utilkit import ghrelease
from utilkit.ghrelease import GHReleaseDownloader, UpdateError, unpack_asset_with_callback
from utilkit.versions import AssetFormat

API = "https://api.github.com/repos/projectdiscovery/tool"
DOWNLOADS = "https://downloads.example.com"


def _zip(files):
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as archive:
        for name, content in files.items():
            archive.writestr(name, content)
    return buffer.getvalue()


def _targz(files):
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode="w:gz") as archive:
        for name, content in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            archive.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


@pytest.fixture
def mock():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def _register(mock, assets, tag="v1.2.3"):
    listing = [{"name": name, "id": asset_id} for asset_id, (name, _) in assets.items()]
    mock.add(
        responses.GET,
        f"{API}/releases/latest",
        json={
            "tag_name": tag,
            "assets": listing,
            "zipball_url": f"{DOWNLOADS}/source.zip",
            "body": "notes",
        },
    )
    for asset_id, (_, content) in assets.items():
        location = f"{DOWNLOADS}/assets/{asset_id}"
        mock.add(
            responses.GET,
            f"{API}/releases/assets/{asset_id}",
            status=302,
            headers={"Location": location},
        )
        mock.add(responses.GET, location, body=content)


def _downloader(name="tool", goos="linux", goarch="amd64"):
    gh = GHReleaseDownloader(name)
    gh.goos = goos
    gh.goarch = goarch
    return gh


def test_unpack_zip_round_trip():
    files = {"tool": b"binary", "README.md": b"readme"}
    seen = {}

    def callback(path, info, stream):
        seen[path] = stream.read()

    unpack_asset_with_callback(AssetFormat.ZIP, _zip(files), callback)
    assert seen == files


def test_unpack_tar_round_trip():
    files = {"tool": b"binary", "LICENSE": b"text"}
    seen = {}

    def callback(path, info, stream):
        seen[path] = stream.read()

    unpack_asset_with_callback(AssetFormat.TAR, _targz(files), callback)
    assert seen == files


def test_unpack_unknown_format_raises():
    with pytest.raises(UpdateError):
        unpack_asset_with_callback(AssetFormat.UNKNOWN, b"", lambda *a: None)


def test_callback_error_stops_unpacking():
    def callback(path, info, stream):
        raise RuntimeError(path)

    with pytest.raises(RuntimeError):
        unpack_asset_with_callback(AssetFormat.ZIP, _zip({"a": b"1", "b": b"2"}), callback)


def test_invalid_repo_name():
    with pytest.raises(UpdateError, match="invalid repo name"):
        GHReleaseDownloader("a/b/c")


def test_empty_organization():
    with pytest.raises(UpdateError, match="organization name cannot be empty"):
        GHReleaseDownloader("/tool")


def test_repo_not_found(mock):
    mock.add(responses.GET, f"{API}/releases/latest", status=404)
    with pytest.raises(UpdateError, match="not found"):
        GHReleaseDownloader("tool")


def test_rate_limit(mock):
    mock.add(
        responses.GET,
        f"{API}/releases/latest",
        status=403,
        headers={"X-RateLimit-Remaining": "0"},
    )
    with pytest.raises(UpdateError, match="ratelimit"):
        GHReleaseDownloader("tool")


def test_auth_failure(mock):
    mock.add(responses.GET, f"{API}/releases/latest", status=401)
    with pytest.raises(UpdateError, match="GITHUB_TOKEN"):
        GHReleaseDownloader("tool")


def test_token_is_sent(mock, monkeypatch):
    monkeypatch.setenv("GITHUB_TOKEN", "token")
    _register(mock, {})
    gh = GHReleaseDownloader("tool")
    assert gh.latest["tag_name"] == "v1.2.3"
    assert mock.calls[0].request.headers["Authorization"] == "Bearer token"


def test_full_repo_name(mock):
    mock.add(
        responses.GET,
        "https://api.github.com/repos/someorg/tool/releases/latest",
        json={"tag_name": "v2.0.0", "assets": []},
    )
    gh = GHReleaseDownloader("someorg/tool")
    assert gh.organization == "someorg"
    assert gh.latest["tag_name"] == "v2.0.0"


def test_executable_with_valid_checksum(mock):
    archive = _zip({"tool": b"the-binary", "README.md": b"readme"})
    digest = hashlib.sha256(archive).hexdigest()
    checksums = f"{digest}  tool_1.2.3_linux_amd64.zip\n".encode()
    _register(
        mock,
        {11: ("tool_1.2.3_linux_amd64.zip", archive), 12: ("tool_1.2.3_checksums.txt", checksums)},
    )
    gh = _downloader()
    assert gh.get_executable_from_asset() == b"the-binary"
    assert gh.asset_id == 11
    assert gh.asset_format is AssetFormat.ZIP


def test_executable_checksum_mismatch(mock):
    archive = _zip({"tool": b"the-binary"})
    checksums = b"deadbeef tool_1.2.3_linux_amd64.zip\n"
    _register(
        mock,
        {11: ("tool_1.2.3_linux_amd64.zip", archive), 12: ("tool_1.2.3_checksums.txt", checksums)},
    )
    with pytest.raises(UpdateError, match="checksum mismatch"):
        _downloader().get_executable_from_asset()


def test_checksum_validation_can_be_skipped(mock, monkeypatch):
    monkeypatch.setattr(ghrelease, "skip_checksum_validation", True)
    archive = _zip({"tool": b"the-binary"})
    checksums = b"deadbeef tool_1.2.3_linux_amd64.zip\n"
    _register(
        mock,
        {11: ("tool_1.2.3_linux_amd64.zip", archive), 12: ("tool_1.2.3_checksums.txt", checksums)},
    )
    assert _downloader().get_executable_from_asset() == b"the-binary"


def test_executable_without_checksum_file_from_tar(mock):
    archive = _targz({"dir/tool.exe": b"win-binary"})
    _register(mock, {21: ("tool_1.2.3_linux_amd64.tar.gz", archive)})
    gh = _downloader()
    assert gh.get_executable_from_asset() == b"win-binary"
    assert gh.asset_format is AssetFormat.TAR


def test_executable_missing_in_archive(mock):
    _register(mock, {11: ("tool_1.2.3_linux_amd64.zip", _zip({"other": b"x"}))})
    with pytest.raises(UpdateError, match="executable not found"):
        _downloader().get_executable_from_asset()


def test_macos_asset_name(mock):
    _register(mock, {31: ("tool_1.2.3_macOS_arm64.zip", _zip({"tool": b"mac"}))})
    gh = _downloader(goos="darwin", goarch="arm64")
    assert gh.get_executable_from_asset() == b"mac"


def test_no_asset_for_platform(mock):
    _register(mock, {11: ("tool_1.2.3_linux_amd64.zip", _zip({"tool": b"x"}))})
    gh = _downloader(goos="windows", goarch="386")
    with pytest.raises(UpdateError, match="could not find release asset"):
        gh.download_tool()


def test_set_tool_name(mock):
    _register(mock, {41: ("tool-client_1.2.3_linux_amd64.zip", _zip({"tool-client": b"client"}))})
    gh = _downloader()
    gh.set_tool_name("")
    with pytest.raises(UpdateError):
        gh.download_tool()
    gh.set_tool_name("tool-client")
    assert gh.get_executable_from_asset() == b"client"


def test_get_release_checksums(mock):
    content = b"abc123  tool_1.2.3_linux_amd64.zip\nbadline\n\ndef456 other.tar.gz\n"
    _register(mock, {12: ("tool_1.2.3_checksums.txt", content)})
    assert _downloader().get_release_checksums() == {
        "tool_1.2.3_linux_amd64.zip": "abc123",
        "other.tar.gz": "def456",
    }


def test_get_release_checksums_missing(mock):
    _register(mock, {})
    with pytest.raises(UpdateError, match="checksum file not in release assets"):
        _downloader().get_release_checksums()


def test_get_release_checksums_empty(mock):
    _register(mock, {12: ("tool_1.2.3_checksums.txt", b"  \n ")})
    with pytest.raises(UpdateError):
        _downloader().get_release_checksums()


def test_download_asset_with_name(mock):
    _register(mock, {51: ("notes.txt", b"hello")})
    gh = _downloader()
    assert gh.download_asset_with_name("notes.txt", False) == b"hello"
    with pytest.raises(UpdateError, match="not found"):
        gh.download_asset_with_name("missing.txt", False)


def test_download_asset_bad_status(mock):
    _register(mock, {})
    gh = _downloader()
    gh.latest["assets"] = [{"name": "broken.bin", "id": 61}]
    mock.add(responses.GET, f"{API}/releases/assets/61", status=500)
    with pytest.raises(UpdateError):
        gh.download_asset_with_name("broken.bin", False)


def test_download_source_with_callback(mock):
    files = {"repo/a.yaml": b"a", "repo/b.yaml": b"b", "repo/c.yaml": b"c"}
    _register(mock, {})
    mock.add(responses.GET, f"{DOWNLOADS}/source.zip", body=_zip(files))
    seen = {}
    _downloader().download_source_with_callback(
        False, lambda path, info, stream: seen.setdefault(path, stream.read())
    )
    assert seen == files