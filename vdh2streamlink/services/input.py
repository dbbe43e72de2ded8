import asyncio
import logging
import os
import shutil
from typing import List, Mapping, Optional

from vdh2streamlink.core.errors import InputError, ToolNotFound
from vdh2streamlink.services.streamlink import SubprocessExecutor

logger = logging.getLogger(__name__)

CLIPBOARD_TIMEOUT = 10.0


def read_input_file(path: str) -> str:
    """Read a UTF-8 (or ASCII) text file"""
    if not os.path.isfile(path) or not os.access(path, os.R_OK):
        raise InputError(f"the provided input data file '{path}' does not exist, or unreadable")

    with open(path, "rb") as f:
        raw = f.read()

    try:
        text = raw.decode("utf-8")
    except UnicodeDecodeError:
        raise InputError(
            f"the provided input data file '{path}' has incorrect content type (neither ASCII nor UTF-8 text)"
        ) from None
    if "\x00" in text:
        raise InputError(
            f"the provided input data file '{path}' has incorrect content type (neither ASCII nor UTF-8 text)"
        )

    logger.debug("The provided input data file '%s' has the correct content type", path)
    return text


def clipboard_command(env: Mapping[str, str]) -> List[str]:
    """Pick the clipboard reader for the running graphical session"""
    if env.get("WAYLAND_DISPLAY"):
        if shutil.which("wl-paste"):
            return ["wl-paste"]
        raise ToolNotFound("Wayland session was detected, but 'wl-paste' (from the 'wl-clipboard' package) is missing")

    if env.get("DISPLAY"):
        if shutil.which("xclip"):
            return ["xclip", "-selection", "clipboard", "-o"]
        if shutil.which("xsel"):
            return ["xsel", "--clipboard", "--output"]
        raise ToolNotFound("X11 session was detected, but neither 'xclip' nor 'xsel' is installed")

    raise InputError("we could not determine the graphical session, so we cannot determine how to read the Clipboard")


async def read_clipboard(env: Optional[Mapping[str, str]] = None) -> str:
    cmd = clipboard_command(os.environ if env is None else env)
    try:
        result = await SubprocessExecutor.run(cmd, timeout=CLIPBOARD_TIMEOUT)
    except asyncio.TimeoutError:
        raise InputError(f"we could not read the Clipboard using '{cmd[0]}' (timed out)") from None

    if result.returncode != 0:
        raise InputError(f"we could not read the Clipboard using '{cmd[0]}'")
    return result.stdout.decode("utf-8", errors="replace")
