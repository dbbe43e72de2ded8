import errno
import logging
import os
from contextlib import suppress
from typing import FrozenSet, Optional

from vdh2streamlink.config.settings import config
from vdh2streamlink.core.errors import MissingExtension, MissingIncompleteSuffix, OutputExists
from vdh2streamlink.utils.media_types import BUILTIN_MEDIA_EXTENSIONS, is_media_extension

logger = logging.getLogger(__name__)

# link() is refused on these file systems (FAT, some network mounts)
LINK_UNSUPPORTED = {errno.EPERM, errno.EOPNOTSUPP, errno.ENOSYS, errno.EXDEV, errno.EMLINK}


def _move_no_clobber(src: str, dst: str) -> None:
    """
    Rename src to dst, failing with FileExistsError if dst appears meanwhile.
    link() refuses to replace an existing entry, unlike rename() on POSIX.
    """
    try:
        os.link(src, dst)
    except FileExistsError:
        raise
    except OSError as e:
        if e.errno not in LINK_UNSUPPORTED:
            raise
        if os.path.lexists(dst):
            raise FileExistsError(errno.EEXIST, os.strerror(errno.EEXIST), dst) from e
        os.rename(src, dst)
        return
    os.unlink(src)


class OutputPathLifecycle:
    """
    Naming states of the output file:
    sanitized name -> name.ext.incomplete while downloading -> name.ext when done.
    No transition ever replaces an existing file.
    """

    def __init__(
        self,
        media_extensions: Optional[FrozenSet[str]] = None,
        incomplete_suffix: Optional[str] = None
    ):
        self.media_extensions = media_extensions if media_extensions is not None else BUILTIN_MEDIA_EXTENSIONS
        self.incomplete_suffix = incomplete_suffix or config.output.incomplete_suffix

    def attach_extension(self, path: str, extension: str) -> str:
        """
        Append '.ext', or replace the last extension when it is a media one.
        'video' -> 'video.mp4', 'video.mov' -> 'video.mp4', 'video.v2' -> 'video.v2.mp4'.
        """
        directory, name = os.path.split(path)

        if "." in name:
            stem, suspicious = name.rsplit(".", 1)
            if is_media_extension(suspicious, self.media_extensions):
                logger.debug(
                    "The user-provided '.%s' is a media file-extension, and hence we will replace it with our '.%s'",
                    suspicious,
                    extension
                )
                return os.path.join(directory, f"{stem}.{extension}")

        return f"{path}.{extension}"

    def begin(self, working_path: str) -> str:
        """Reserve working_path + suffix; OutputExists if either name is taken"""
        if os.path.lexists(working_path):
            raise OutputExists(f"the output file '{working_path}' already exists")

        reserved_path = f"{working_path}{self.incomplete_suffix}"
        try:
            with open(reserved_path, "x"):
                pass
        except FileExistsError:
            raise OutputExists(f"the output file '{reserved_path}' already exists") from None

        logger.debug("Name of the output media file (stays like this until download is complete):\n  [%s]", reserved_path)
        return reserved_path

    def final_name(self, reserved_path: str) -> str:
        """First free name among name.ext, name_2.ext, name_3.ext, ..."""
        if not reserved_path.endswith(self.incomplete_suffix):
            raise MissingIncompleteSuffix(
                f"the filename '{reserved_path}' is missing the '{self.incomplete_suffix}' suffix"
            )

        suffixless = reserved_path[:-len(self.incomplete_suffix)]
        directory, name = os.path.split(suffixless)
        if "." not in name:
            raise MissingExtension(f"the filename '{suffixless}' is missing a file-extension")

        stem, extension = name.rsplit(".", 1)
        candidate = suffixless
        n = 2
        while os.path.lexists(candidate):
            candidate = os.path.join(directory, f"{stem}_{n}.{extension}")
            n += 1
        return candidate

    def finalize(self, reserved_path: str) -> str:
        """Drop the incomplete suffix without overwriting anything"""
        final_path = self.final_name(reserved_path)
        try:
            _move_no_clobber(reserved_path, final_path)
        except FileExistsError:
            raise OutputExists(
                f"'{final_path}' appeared while renaming '{reserved_path}'; the download was kept as is"
            ) from None

        logger.debug("renamed '%s' -> '%s'", reserved_path, final_path)
        return final_path

    def discard(self, reserved_path: str) -> bool:
        """Remove a reservation nothing was written to; partial downloads are kept"""
        with suppress(FileNotFoundError):
            if os.path.getsize(reserved_path) == 0:
                os.unlink(reserved_path)
                return True
        return False
