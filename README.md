# utilkit

A set of small helpers for everyday tooling work. It covers:

- **Sequences** (`utilkit.sliceutil`): `dedupe` keeps the first of each item in order, plus `prune_equal`, `diff`, `merge`, `elements_match`, `first_non_zero`, and `visit_sequential`, `visit_random` and `visit_random_zero` to visit items in order or at random. A visitor that returns `False` stops the visit.
- **Strings** (`utilkit.stringsutil`): `before`, `after` and `between` extraction, prefix and suffix checks in case-sensitive and case-insensitive forms, `split_any` to split on several separators, `slide_with_length` for sliding windows, `longest_repeating_sequence`, `truncate` and more.
- **Encoding detection** (`utilkit.encoding`): `detect_encoding_type` takes text or bytes and returns an `EncodingType`.
- **Normalisation** (`utilkit.normalize`): `normalize` trims the text and strips HTML. `normalize_with_options` takes a `NormalizeOptions` and can also change case. `strip_html` removes tags, drops the content of script-like elements and escapes the text that is left.
- **Dataclass walking** (`utilkit.structs`): `walk` calls `callback(owner, field)` for every public leaf field of a dataclass instance and descends into nested dataclass instances.
- **Time values** (`utilkit.timeutil`): `rfc3339_to_time`, `s_to_time`, `ms_to_time`, `parse_unix_timestamp`, and `parse_duration`. `parse_duration` accepts a day unit (`"2d"`) and reads a bare number as seconds.
- **Versions** (`utilkit.versions`): `parse_version` reads loose semantic versions into `Version`, which can be compared and bumped with `inc_major`, `inc_minor` and `inc_patch`. `is_outdated`, `is_dev_release_outdated` and `get_version_description` compare versions and understand `-dev` builds. `AssetFormat` and `identify_asset_format` cover release archive formats.
- **Query parameters** (`utilkit.rawparams`, `utilkit.orderedparams`): `Params` encodes sorted by key and `OrderedParams` keeps insertion order. Both decode loosely and leave payloads as they are. `url_encode_with_escapes`, `param_encode` and `percent_encoding` handle encoding.
- **URLs** (`utilkit.urlutil`): `parse`, `parse_url` and `parse_relative_path` tolerate malformed input, keep parameter order and raise `URLParseError` on failure. `URL` provides path merging, port updates, cloning and string forms. `merge_paths` and `auto_merge_rel_paths` join paths.
- **Release downloads** (`utilkit.ghrelease`): `GHReleaseDownloader` fetches a repository's latest GitHub release, downloads the asset for this platform, checks it against the release's checksums file and pulls the executable out of the zip or tar.gz archive. `unpack_asset_with_callback` visits every file in an archive. Failures raise `UpdateError`.
- **Update callbacks** (`utilkit.updater`): `get_update_tool_callback` and `get_update_tool_from_repo_callback` build a callback that replaces the running executable with the latest release. `get_tool_version_callback` and `get_version_check_callback` build a callback that asks an update-check service for the latest version.

## Installation

```
pip install utilkit
```

To install the test dependencies as well:

```
pip install "utilkit[test]"
```

## Examples

Sequences:

```python
from utilkit.sliceutil import dedupe, diff, merge

dedupe(["a", "a", "b", "b"])         # ["a", "b"]
diff([1, 2, 3], [3, 4, 5])           # ([1, 2], [4, 5])
merge([1, 2, 3], [3, 4, 5])          # [1, 2, 3, 4, 5]
```

Strings:

```python
from utilkit.stringsutil import between, slide_with_length, truncate

between("this is a test", "this", "test")   # " is a "
list(slide_with_length("test123", 4))       # ["test", "est1", "st12", "t123", "123"]
truncate("abcde", 3)                        # "abc"
```

`between`, `before` and `after` raise `ValueError` when the markers they look for are missing.

Durations:

```python
from utilkit.timeutil import parse_duration

parse_duration("2d")   # timedelta(days=2)
parse_duration("2")    # timedelta(seconds=2)
```

Query parameters that keep their insertion order and leave payloads as they are:

```python
from utilkit.orderedparams import OrderedParams

params = OrderedParams()
params.add("xss", "<script>alert('XSS')</script>")
params.add("q", "a b")
params.encode()   # "xss=<script>alert('XSS')</script>&q=a+b"
```

URLs:

```python
from utilkit.urlutil import parse, parse_url

url = parse("https://example.com/admin?debug=true")
url.merge_path("/profile", True)
str(url)          # "https://example.com/admin/profile?debug=true"

url = parse("http://localhost:53/test")
url.update_port("8000")
str(url)          # "http://localhost:8000/test"

# unsafe parsing keeps paths that strict parsing rejects
str(parse_url("https://example.com/%invalid", True))   # "https://example.com/%invalid"
```

Version checks:

```python
from utilkit.versions import get_version_description, is_outdated, parse_version

is_outdated("v2.9.1", "v2.9.2")                                 # True
get_version_description("v2.9.1-dev", "v2.9.0", color=False)    # "(development)"
str(parse_version("v1.0.0").inc_patch())                        # "1.0.1"
```

Checking for and applying updates:

```python
from utilkit.updater import get_tool_version_callback, get_update_tool_callback

latest = get_tool_version_callback("mytool", "v1.0.0")()
update = get_update_tool_callback("mytool", "v1.0.0")
update()   # downloads, verifies and installs the latest release, then raises SystemExit
```

Release repositories without an organisation prefix are looked up under the default organisation (`utilkit.ghrelease.ORGANIZATION`). Give `"org/repo"` to pick another. If `GITHUB_TOKEN` is set in the environment, release requests send it as a bearer token. Progress messages go through the standard `logging` module. After an update, the release notes are printed as Markdown unless `utilkit.updater.hide_release_notes` is set.

## Command line

`utilkit-versionbump` raises the semantic version assigned to a variable in a source file. It bumps the major, minor or patch part (patch by default), writes the new value back as `` `vX.Y.Z` `` and prints the old and new versions:

```
utilkit-versionbump --file version.go --var version --part minor
```

It exits with status 1 if the variable is missing or its value is not a valid version.

## What it does not do

- It has no general command-line tool other than `utilkit-versionbump`. Updating and version checking are functions for your own program to call.
- The update callbacks replace the file named by `sys.argv[0]`. They do not verify code signatures. The only integrity check is the release's checksums file, and only when the release publishes one.

## Running the tests

```
pytest
```