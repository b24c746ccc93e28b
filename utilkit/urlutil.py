"""Lenient URL parsing that keeps parameter order and unsafe paths intact."""

from __future__ import annotations

import os
import string
from dataclasses import dataclass, field

from utilkit.orderedparams import OrderedParams
from utilkit.rawparams import RFC_ESCAPE_CHARSET
from utilkit.stringsutil import has_prefix_any

HTTP = "http"
HTTPS = "https"
SCHEME_SEPARATOR = "://"
DEFAULT_HTTP_PORT = "80"
DEFAULT_HTTPS_PORT = "443"

# When true, host-less inputs such as "admin" are not turned into relative paths.
disable_auto_correct = False

_HEX = frozenset(string.hexdigits.encode())
_USERINFO_CHARS = frozenset("-._:~!$&'()*+,;=%@")


class URLParseError(ValueError):
    """Raised when a URL or relative path cannot be parsed."""


@dataclass(frozen=True)
class Userinfo:
    """User name and optional password of a URL."""

    username: str
    password: str | None = None

    def __str__(self) -> str:
        text = _escape(self.username, "user")
        if self.password is not None:
            text += ":" + _escape(self.password, "user")
        return text


@dataclass
class _Parts:
    scheme: str = ""
    opaque: str = ""
    user: Userinfo | None = None
    host: str = ""
    path: str = ""
    raw_path: str = ""
    raw_query: str = ""
    fragment: str = ""
    force_query: bool = False


def _should_escape(char: str, mode: str) -> bool:
    if char.isascii() and char.isalnum():
        return False
    if mode == "host" and char in "!$&'()*+,;=:[]<>\"":
        return False
    if char in "-_.~":
        return False
    if char in "$&+,/:;=?@":
        if mode == "path":
            return char == "?"
        if mode == "user":
            return char in "@/?:"
        if mode == "fragment":
            return False
        return True
    if mode == "fragment" and char in "!()*":
        return False
    return True


def _escape(text: str, mode: str) -> str:
    out = []
    for byte in text.encode("utf-8", "surrogateescape"):
        char = chr(byte)
        if byte < 0x80 and not _should_escape(char, mode):
            out.append(char)
        else:
            out.append(f"%{byte:02X}")
    return "".join(out)


def _unescape(text: str, mode: str) -> str:
    raw = text.encode("utf-8", "surrogateescape")
    out = bytearray()
    i = 0
    while i < len(raw):
        byte = raw[i]
        if byte == 0x25:
            digits = raw[i + 1 : i + 3]
            if len(digits) < 2 or not all(d in _HEX for d in digits):
                bad = raw[i : i + 3].decode("utf-8", "replace")
                raise URLParseError(f'invalid URL escape "{bad}"')
            if mode == "host" and int(chr(digits[0]), 16) < 8 and digits != b"25":
                raise URLParseError(f'invalid URL escape "%{digits.decode()}"')
            out.append(int(digits, 16))
            i += 3
            continue
        if mode == "host" and byte < 0x80 and _should_escape(chr(byte), mode):
            raise URLParseError(f"invalid character {chr(byte)!r} in host name")
        out.append(byte)
        i += 1
    return out.decode("utf-8", "surrogateescape")


def _valid_optional_port(port: str) -> bool:
    if port == "":
        return True
    return port.startswith(":") and all(c in string.digits for c in port[1:])


def _split_scheme(raw: str) -> tuple[str, str]:
    for index, char in enumerate(raw):
        if char.isascii() and char.isalpha():
            continue
        if char.isascii() and (char.isdigit() or char in "+-."):
            if index == 0:
                return "", raw
            continue
        if char == ":":
            if index == 0:
                raise URLParseError("missing protocol scheme")
            return raw[:index], raw[index + 1 :]
        return "", raw
    return "", raw


def _parse_host(host: str) -> str:
    if host.startswith("["):
        end = host.rfind("]")
        if end < 0:
            raise URLParseError("missing ']' in host")
        if not _valid_optional_port(host[end + 1 :]):
            raise URLParseError(f'invalid port "{host[end + 1:]}" after host')
    else:
        colon = host.rfind(":")
        if colon != -1 and not _valid_optional_port(host[colon:]):
            raise URLParseError(f'invalid port "{host[colon:]}" after host')
    return _unescape(host, "host")


def _parse_authority(authority: str) -> tuple[Userinfo | None, str]:
    at = authority.rfind("@")
    host = _parse_host(authority[at + 1 :] if at >= 0 else authority)
    if at < 0:
        return None, host
    userinfo = authority[:at]
    if not all(c.isascii() and c.isalnum() or c in _USERINFO_CHARS for c in userinfo):
        raise URLParseError("net/url: invalid userinfo")
    if ":" not in userinfo:
        return Userinfo(_unescape(userinfo, "user")), host
    name, _, remainder = userinfo.partition(":")
    return Userinfo(_unescape(name, "user"), _unescape(remainder, "user")), host


def _strict_parse(raw: str) -> _Parts:
    """Parse ``raw`` strictly, in the manner of a standard URL parser."""
    if any(ord(c) < 0x20 or ord(c) == 0x7F for c in raw):
        raise URLParseError("invalid control character in URL")
    parts = _Parts()
    rest, hash_mark, fragment = raw.partition("#")
    if hash_mark:
        parts.fragment = _unescape(fragment, "fragment")
    scheme, rest = _split_scheme(rest)
    parts.scheme = scheme.lower()
    if rest.endswith("?") and rest.count("?") == 1:
        parts.force_query = True
        rest = rest[:-1]
    else:
        rest, _, parts.raw_query = rest.partition("?")
    if not rest.startswith("/"):
        if parts.scheme:
            parts.opaque = rest
            return parts
        colon, slash = rest.find(":"), rest.find("/")
        if colon >= 0 and (slash < 0 or colon < slash):
            raise URLParseError("first path segment in URL cannot contain colon")
    if (parts.scheme or not rest.startswith("///")) and rest.startswith("//"):
        authority, rest = rest[2:], ""
        slash = authority.find("/")
        if slash >= 0:
            authority, rest = authority[:slash], authority[slash:]
        parts.user, parts.host = _parse_authority(authority)
    parts.path = _unescape(rest, "path")
    parts.raw_path = "" if _escape(parts.path, "path") == rest else rest
    return parts


def _should_escape_payload(text: str) -> bool:
    reserved = set(RFC_ESCAPE_CHARSET)
    for char in text:
        if char == "/":
            continue
        if ord(char) > 127 or char in reserved:
            return True
    return False


@dataclass
class URL:
    """A parsed URL whose query parameters keep their order and raw form."""

    scheme: str = ""
    opaque: str = ""
    user: Userinfo | None = None
    host: str = ""
    path: str = ""
    raw_path: str = ""
    raw_query: str = ""
    fragment: str = ""
    force_query: bool = False
    original: str = ""
    unsafe: bool = False
    is_relative: bool = False
    params: OrderedParams | None = field(default=None)

    def _copy_from(self, parts: _Parts) -> None:
        self.host = parts.host
        self.opaque = parts.opaque
        self.path = parts.path
        self.raw_path = parts.raw_path
        self.scheme = parts.scheme
        self.user = parts.user

    def merge_path(self, new_rel_path: str, unsafe: bool) -> None:
        """Merge a relative path (with its parameters and fragment) into this URL."""
        if not new_rel_path:
            return
        other = parse_relative_path(new_rel_path, unsafe)
        self.params.merge(other.params.encode())
        self.path = merge_paths(self.path, other.path)
        if other.fragment:
            self.fragment = other.fragment

    def update_rel_path(self, new_rel_path: str, unsafe: bool) -> None:
        """Replace the path with a new relative path, keeping existing parameters."""
        self.path = ""
        self.merge_path(new_rel_path, unsafe)

    def update(self) -> None:
        """Refresh the raw query from the parameters."""
        if self.params is not None:
            self.raw_query = self.params.encode()

    def query(self) -> OrderedParams | None:
        """Return the query parameters."""
        return self.params

    def clone(self) -> URL:
        """Return an independent copy."""
        user = Userinfo(self.user.username, self.user.password) if self.user else None
        return URL(
            scheme=self.scheme,
            opaque=self.opaque,
            user=user,
            host=self.host,
            path=self.path,
            raw_path=self.raw_path,
            raw_query=self.raw_query,
            fragment=self.fragment,
            force_query=self.force_query,
            original=self.original,
            unsafe=self.unsafe,
            is_relative=self.is_relative,
            params=self.params.clone() if self.params is not None else OrderedParams(),
        )

    def __str__(self) -> str:
        text = ""
        if self.scheme:
            text += self.scheme + "://"
        if self.user is not None:
            text += f"{self.user}@"
        return text + self.host + self.get_relative_path()

    def escaped_string(self) -> str:
        """Return a form usable as a file name: host plus path with slashes replaced."""
        host = self.host
        if os.name == "nt":
            host = host.replace(":", "_")
        text = host
        if self.path and self.path != "/":
            text += "_" + self.path.replace("/", "_")
        return text

    def get_relative_path(self) -> str:
        """Return path, query and fragment, e.g. ``/some/path?param=true#fragment``."""
        text = ""
        if self.path:
            if not self.path.startswith("/"):
                text += "/"
            text += self.path
        if self.params is not None and len(self.params) > 0:
            text += "?" + self.params.encode()
        if self.fragment:
            text += "#" + self.fragment
        return text

    def _split_host_port(self) -> tuple[str, str]:
        host, port = self.host, ""
        colon = host.rfind(":")
        if colon != -1 and _valid_optional_port(host[colon:]):
            host, port = host[:colon], host[colon + 1 :]
        if host.startswith("[") and host.endswith("]"):
            host = host[1:-1]
        return host, port

    def hostname(self) -> str:
        """Return the host without port or IPv6 brackets."""
        return self._split_host_port()[0]

    def port(self) -> str:
        """Return the port, or an empty string."""
        return self._split_host_port()[1]

    def update_port(self, new_port: str) -> None:
        """Set or replace the port."""
        if not new_port:
            return
        current = self.port()
        if current:
            self.host = self.host.replace(current, new_port, 1)
            return
        self.host += ":" + new_port

    def trim_port(self) -> None:
        """Remove the port from the host."""
        self.host = self.hostname()

    def _fetch_params(self) -> None:
        if self.params is None:
            self.params = OrderedParams()
        hash_index = self.original.find("#")
        if hash_index != -1:
            self.fragment = self.original[hash_index + 1 :]
            self.original = self.original[:hash_index]
        query_index = self.original.find("?")
        if query_index == -1:
            return
        self.params.decode(self.original[query_index + 1 :])
        self.original = self.original[:query_index]
        self.update()

    def _parse_unsafe_relative_path(self) -> None:
        try:
            if self.original != self.path:
                self.path = self.original
            if self.host == "" or len(self.host) < 4:
                if _should_escape_payload(self.original):
                    self.path = self.original
                return
            pieces = self.original.split(self.host, 1)
            if len(pieces) != 2:
                return
            self.path = pieces[1]
        finally:
            if self.path and not self.path.startswith("/"):
                self.path = "/" + self.path


def parse(input_url: str) -> URL:
    """Parse a URL safely; see :func:`parse_url`."""
    return parse_url(input_url, False)


def parse_url(input_url: str, unsafe: bool) -> URL:
    """Parse a full URL, host or relative path; raises URLParseError."""
    url = URL(original=input_url, unsafe=unsafe, params=OrderedParams())
    url._fetch_params()
    input_url = url.original
    if not input_url:
        raise URLParseError("failed to parse url got empty input")

    if input_url.startswith("/") and not input_url.startswith("//"):
        url.is_relative = True
        url.path = url.original
        return url

    if has_prefix_any(input_url, HTTP + SCHEME_SEPARATOR, HTTPS + SCHEME_SEPARATOR, "//") or (
        "://" in input_url
    ):
        url.is_relative = False
        try:
            parts = _strict_parse(input_url)
        except URLParseError as error:
            parts = _parse_unsafe_full_url(input_url) if unsafe else None
            if parts is None:
                raise URLParseError(f"failed to parse url: {error}") from error
        url._copy_from(parts)
    else:
        try:
            parts = _strict_parse(HTTPS + SCHEME_SEPARATOR + input_url)
        except URLParseError:
            url.is_relative = True
        else:
            parts.scheme = ""
            url._copy_from(parts)

    if not url.is_relative:
        if url.host == "":
            raise URLParseError(f"failed to parse url {input_url} got empty host")
        if "." not in url.host and ":" not in url.host and url.host != "localhost":
            if not disable_auto_correct:
                url.is_relative = True
                url.path = input_url
                url.host = ""
    if not url.is_relative and url.host == "":
        raise URLParseError(
            f"failed to parse url `{input_url}`: got empty host when url is not relative"
        )
    if url.is_relative:
        return parse_relative_path(input_url, unsafe)
    return url


def parse_relative_path(input_url: str, unsafe: bool) -> URL:
    """Parse a relative path with parameters; raises URLParseError unless unsafe."""
    url = URL(original=input_url, unsafe=unsafe, is_relative=True)
    url._fetch_params()
    parts: _Parts | None = None
    try:
        parts = _strict_parse(input_url)
    except URLParseError as error:
        if not unsafe:
            raise URLParseError(f"failed to parse input url: {error}") from error
        url.path = input_url
    if parts is not None:
        parts.host = ""
        url._copy_from(parts)
    url._parse_unsafe_relative_path()
    return url


def _parse_unsafe_full_url(urlx: str) -> _Parts | None:
    temp = urlx.replace("//", "", 1)
    index = temp.find("/")
    if index == -1:
        return None
    url_path = temp[index:]
    url_host = urlx.removesuffix(url_path)
    try:
        parts = _strict_parse(url_host)
    except URLParseError:
        return None
    try:
        relative = parse_relative_path(url_path, True)
    except URLParseError:
        return None
    parts.path = relative.path
    return parts


def auto_merge_rel_paths(path1: str, path2: str) -> str:
    """Merge two relative paths including their parameters."""
    if not path1 or not path2:
        return merge_paths(path1, path2)
    first = parse_relative_path(path1, True)
    second = parse_relative_path(path2, True)
    first.params.merge(second.params.encode())
    first.merge_path(second.path, False)
    return first.get_relative_path()


def merge_paths(elem1: str, elem2: str) -> str:
    """Join two paths without normalising them."""
    if elem1.endswith("/") and elem2.startswith("/"):
        elem2 = elem2.lstrip("/")
    if elem1 == "":
        return elem2
    if elem2 == "":
        return elem1
    if not elem1.endswith("/") and not elem2.startswith("/"):
        elem2 = "/" + elem2
    if elem1 == elem2:
        return elem1
    if len(elem1) > len(elem2) and elem1.endswith(elem2):
        return elem1
    if len(elem1) < len(elem2) and elem2.startswith(elem1):
        return elem2
    return elem1 + elem2