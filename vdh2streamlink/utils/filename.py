import os
import re
from datetime import datetime
from typing import Optional

from vdh2streamlink.core.errors import InvalidDirectory, InvalidPath

FORBIDDEN_CHARS = re.compile(r'[:\\*"?<>|]')
TRAILING_SPACES_DOTS = re.compile(r'[ .]+$')

WINDOWS_RESERVED = {
    'CON', 'PRN', 'AUX', 'NUL',
    'COM1', 'COM2', 'COM3', 'COM4', 'COM5', 'COM6', 'COM7', 'COM8', 'COM9',
    'LPT1', 'LPT2', 'LPT3', 'LPT4', 'LPT5', 'LPT6', 'LPT7', 'LPT8', 'LPT9'
}

TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


def default_output_name(basename: str = "newVideo", now: Optional[datetime] = None) -> str:
    """Generated name such as newVideo_2024-05-01_13-45-10"""
    now = now or datetime.now()
    return f"{basename}_{now.strftime(TIMESTAMP_FORMAT)}"


def expand_tilde(path: str) -> str:
    """Expand '~' and '~/...' only; '~user' forms are refused"""
    if path == "~":
        return os.path.expanduser("~")
    if path.startswith("~/"):
        return os.path.join(os.path.expanduser("~"), path[2:])
    if path.startswith("~"):
        raise InvalidPath(f"tilde expansion for other users is not allowed '{path}'")
    return path


def sanitize_filename(name: str, now: Optional[datetime] = None) -> str:
    """Make a single filename valid on Windows, macOS and Linux"""
    name = FORBIDDEN_CHARS.sub('-', name)
    name = TRAILING_SPACES_DOTS.sub('', name)

    if name.split('.', 1)[0].upper() in WINDOWS_RESERVED:
        name = f"_{name}"

    if not name:
        name = default_output_name(now=now)

    return name


def sanitize_output_path(path: str, now: Optional[datetime] = None) -> str:
    """
    Sanitize the filename component of an output path.
    The directory must already exist; it is returned untouched.
    """
    directory, base = os.path.split(path)
    if directory and not os.path.isdir(directory):
        raise InvalidDirectory(f"the provided directory '{directory}' does not exist")

    base = sanitize_filename(base, now=now)

    if not directory or directory == ".":
        return base
    return os.path.join(directory, base)
