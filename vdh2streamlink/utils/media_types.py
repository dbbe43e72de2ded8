import logging
from typing import FrozenSet

logger = logging.getLogger(__name__)

DEFAULT_GLOBS_PATH = "/usr/share/mime/globs"

# Used when the host has no freedesktop MIME database
BUILTIN_MEDIA_EXTENSIONS: FrozenSet[str] = frozenset({
    "mp4", "m4v", "m4s", "m3u8", "webm", "mkv", "mka", "mov", "mp3", "aac",
    "aiff", "flac", "oga", "ogg", "avi", "ts", "m2t", "m2s", "m4t", "tmf",
    "tp", "trp", "ty",
})

MEDIA_PREFIXES = ("video/", "audio/")


def parse_globs(text: str) -> FrozenSet[str]:
    """
    Extract extensions from a freedesktop globs file.
    Lines look like "video/mp4:*.mp4"; only video/ and audio/ types are kept.
    """
    extensions = set()
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or ":" not in line:
            continue
        mime_type, pattern = line.split(":", 1)
        if not mime_type.lower().startswith(MEDIA_PREFIXES):
            continue
        if "." not in pattern:
            continue
        suffix = pattern.rsplit(".", 1)[1].strip().lower()
        if suffix:
            extensions.add(suffix)
    return frozenset(extensions)


def load_media_extensions(globs_path: str = DEFAULT_GLOBS_PATH) -> FrozenSet[str]:
    """Media extensions from the host MIME registry, else the built-in list"""
    try:
        with open(globs_path, "r", encoding="utf-8", errors="replace") as f:
            extensions = parse_globs(f.read())
    except OSError:
        logger.debug(
            "'%s' not found, so we fall back to the built-in media file-extensions list",
            globs_path
        )
        return BUILTIN_MEDIA_EXTENSIONS

    if not extensions:
        logger.debug("'%s' lists no media types, using the built-in list", globs_path)
        return BUILTIN_MEDIA_EXTENSIONS

    logger.debug("Extracted %d media file-extensions from '%s'", len(extensions), globs_path)
    return extensions


def is_media_extension(token: str, extensions: FrozenSet[str]) -> bool:
    return token.lower() in extensions
