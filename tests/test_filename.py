import os
from datetime import datetime

import pytest

from vdh2streamlink.core.errors import InvalidDirectory, InvalidPath
from vdh2streamlink.utils.filename import (
    default_output_name,
    expand_tilde,
    sanitize_filename,
    sanitize_output_path,
)

NOW = datetime(2024, 5, 1, 13, 45, 10)


def test_forbidden_characters_are_replaced():
    assert sanitize_output_path("my:file?.mp4") == "my-file-.mp4"
    assert sanitize_filename('a\\b*c"d<e>f|g') == "a-b-c-d-e-f-g"


def test_directory_is_kept(tmp_path):
    result = sanitize_output_path(str(tmp_path / "clip:1"))
    assert result == os.path.join(str(tmp_path), "clip-1")


def test_missing_directory_is_fatal(tmp_path):
    with pytest.raises(InvalidDirectory):
        sanitize_output_path(str(tmp_path / "nope" / "video"))


def test_trailing_spaces_and_dots_are_stripped():
    assert sanitize_filename("video . . ") == "video"
    assert sanitize_filename("name...") == "name"


@pytest.mark.parametrize("name,expected", [
    ("CON", "_CON"),
    ("con", "_con"),
    ("CON.mp4", "_CON.mp4"),
    ("lpt9.ts", "_lpt9.ts"),
    ("COM10", "COM10"),
    ("CONSOLE", "CONSOLE"),
])
def test_reserved_device_names(name, expected):
    assert sanitize_filename(name) == expected


def test_only_dots_and_spaces_gets_generated_name():
    assert sanitize_filename(" . .. ", now=NOW) == "newVideo_2024-05-01_13-45-10"


def test_default_output_name():
    assert default_output_name(now=NOW) == "newVideo_2024-05-01_13-45-10"
    assert default_output_name("clip", now=NOW) == "clip_2024-05-01_13-45-10"


def test_expand_tilde(monkeypatch):
    monkeypatch.setenv("HOME", "/home/tester")
    assert expand_tilde("~") == "/home/tester"
    assert expand_tilde("~/Videos/a") == "/home/tester/Videos/a"
    assert expand_tilde("plain/path") == "plain/path"


def test_expand_tilde_for_other_users_is_refused():
    with pytest.raises(InvalidPath):
        expand_tilde("~root/video")
