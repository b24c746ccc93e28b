import pytest

from utilkit.versionbump import bump_version, main


def _write(tmp_path, content):
    target = tmp_path / "version.go"
    target.write_text(content, encoding="utf-8")
    return target


@pytest.mark.parametrize(
    "content,expected",
    [
        ('package main\n\nvar version = "v1.0.0"', "Bump from v1.0.0 to v1.0.1\n"),
        ('package main\n\nvar version = "1.0.8"', "Bump from 1.0.8 to v1.0.9\n"),
        ('package main\n\nvar version = "v1.0.9-dev"', "Bump from v1.0.9-dev to v1.0.9\n"),
    ],
)
def test_bump_success(tmp_path, capsys, content, expected):
    target = _write(tmp_path, content)
    code = main(["-file", str(target), "-var", "version", "-part", "patch"])
    assert code == 0
    assert expected in capsys.readouterr().out


@pytest.mark.parametrize(
    "content,var",
    [
        ('package main\n\nvar version = "1.0.85.1"', "version"),
        ('package main\n\nvar version = "x1.0.0"', "version"),
        ('package main\n\nvar version = "1.0.0x"', "version"),
        ('package main\n\nvar version = "\n\n1.0.0"', "version"),
        ('package main\n\nvar version = "  \t1.0.0"', "version"),
        ('package main\n\nvar version = "1.0..0"', "version"),
        ('package main\n\nvar version = "-1.0.0"', "version"),
        ('package main\n\nvar version = "1.0.X"', "version"),
        ('package main\n\nvar version = "1.0.111111111111111111111111111111111111111111111111111111111111111111111111"', "minor"),
    ],
)
def test_bump_failure(tmp_path, content, var):
    target = _write(tmp_path, content)
    assert main(["-file", str(target), "-var", var, "-part", "patch"]) == 1


def test_file_is_rewritten(tmp_path):
    target = _write(tmp_path, 'package main\n\nvar version = "v1.2.3"\n')
    assert bump_version(str(target), "version", "minor") == ("v1.2.3", "v1.3.0")
    assert target.read_text(encoding="utf-8") == "package main\n\nvar version = `v1.3.0`\n"


def test_major_bump_and_bad_part(tmp_path):
    target = _write(tmp_path, 'package main\n\nconst version = "v1.2.3"\n')
    assert bump_version(str(target), "version", "major")[1] == "v2.0.0"
    with pytest.raises(ValueError):
        bump_version(str(target), "version", "huge")


def test_missing_arguments(capsys):
    assert main([]) == 1
    assert "Both -file and -var are required" in capsys.readouterr().out