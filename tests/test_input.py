import pytest

from vdh2streamlink.core.errors import InputError, ToolNotFound
from vdh2streamlink.services import input as input_module
from vdh2streamlink.services.input import clipboard_command, read_clipboard, read_input_file
from vdh2streamlink.services.streamlink import CompletedProcess


def test_reads_utf8_text(tmp_path):
    path = tmp_path / "data.txt"
    path.write_text("Title\tÉpisode 1\n", encoding="utf-8")
    assert read_input_file(str(path)) == "Title\tÉpisode 1\n"


def test_missing_file(tmp_path):
    with pytest.raises(InputError):
        read_input_file(str(tmp_path / "missing.txt"))


def test_binary_file_is_rejected(tmp_path):
    path = tmp_path / "data.bin"
    path.write_bytes(b"\x89PNG\r\n\x1a\n\x00\x00\xff\xfe")
    with pytest.raises(InputError):
        read_input_file(str(path))


def test_wayland_uses_wl_paste(monkeypatch):
    monkeypatch.setattr(input_module.shutil, "which", lambda name: f"/usr/bin/{name}")
    assert clipboard_command({"WAYLAND_DISPLAY": "wayland-0", "DISPLAY": ":0"}) == ["wl-paste"]


def test_wayland_without_wl_paste(monkeypatch):
    monkeypatch.setattr(input_module.shutil, "which", lambda name: None)
    with pytest.raises(ToolNotFound):
        clipboard_command({"WAYLAND_DISPLAY": "wayland-0"})


def test_x11_prefers_xclip_then_xsel(monkeypatch):
    monkeypatch.setattr(input_module.shutil, "which", lambda name: "/usr/bin/xclip" if name == "xclip" else None)
    assert clipboard_command({"DISPLAY": ":0"}) == ["xclip", "-selection", "clipboard", "-o"]

    monkeypatch.setattr(input_module.shutil, "which", lambda name: "/usr/bin/xsel" if name == "xsel" else None)
    assert clipboard_command({"DISPLAY": ":0"}) == ["xsel", "--clipboard", "--output"]


def test_no_graphical_session():
    with pytest.raises(InputError):
        clipboard_command({})


@pytest.mark.asyncio
async def test_read_clipboard(monkeypatch):
    monkeypatch.setattr(input_module.shutil, "which", lambda name: f"/usr/bin/{name}")

    async def run(cmd, timeout=None, stdin_data=None):
        return CompletedProcess(0, b"curl 'https://cdn.example.com/a.m3u8'", b"")

    monkeypatch.setattr(input_module.SubprocessExecutor, "run", staticmethod(run))
    assert await read_clipboard({"WAYLAND_DISPLAY": "wayland-0"}) == "curl 'https://cdn.example.com/a.m3u8'"


@pytest.mark.asyncio
async def test_read_clipboard_failure(monkeypatch):
    monkeypatch.setattr(input_module.shutil, "which", lambda name: f"/usr/bin/{name}")

    async def run(cmd, timeout=None, stdin_data=None):
        return CompletedProcess(1, b"", b"No selection")

    monkeypatch.setattr(input_module.SubprocessExecutor, "run", staticmethod(run))
    with pytest.raises(InputError):
        await read_clipboard({"DISPLAY": ":0"})
