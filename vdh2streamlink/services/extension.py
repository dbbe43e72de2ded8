import logging
import re
from typing import Awaitable, Callable, Optional, Sequence, Tuple

from vdh2streamlink.models.request import StreamRequestDescriptor
from vdh2streamlink.services.playlist import PlaylistFetcher
from vdh2streamlink.services.streamlink import StreamlinkService

logger = logging.getLogger(__name__)

FALLBACK_EXTENSION = "ts"

# fMP4 (CMAF) playlists use .m4s segments and usually an EXT-X-MAP .mp4 init segment
FMP4_PATTERN = re.compile(r'\.m4s(\?|$)|#EXT-X-MAP:.*\.mp4', re.IGNORECASE | re.MULTILINE)
# MPEG-2 transport stream segments
TS_PATTERN = re.compile(r'\.ts(\?|$)', re.IGNORECASE | re.MULTILINE)

Strategy = Callable[[StreamRequestDescriptor], Awaitable[Optional[str]]]


def extension_from_url(url: str) -> Optional[str]:
    """Cheap guess: '.mp4' anywhere in the URL wins over '.ts'"""
    if ".mp4" in url:
        return "mp4"
    if ".ts" in url:
        return "ts"
    return None


def extension_from_playlist(text: str) -> Optional[str]:
    """Container of the segments a media playlist references"""
    text = text.replace("\r", "")
    if FMP4_PATTERN.search(text):
        return "mp4"
    if TS_PATTERN.search(text):
        return "ts"
    return None


class ExtensionResolver:
    """
    Pick the output extension: URL heuristic, then the playlist Streamlink
    would download, then the 'ts' fallback. Never raises.
    """

    def __init__(
        self,
        streamlink: Optional[StreamlinkService] = None,
        fetcher: Optional[PlaylistFetcher] = None
    ):
        self.streamlink = streamlink or StreamlinkService()
        self.fetcher = fetcher or PlaylistFetcher()

    async def from_url(self, request: StreamRequestDescriptor) -> Optional[str]:
        return extension_from_url(request.url)

    async def from_playlist(self, request: StreamRequestDescriptor) -> Optional[str]:
        stream_url = await self.streamlink.stream_url(request)
        if not stream_url:
            return None

        playlist = await self.fetcher.fetch(stream_url, request.header_items())
        if playlist is None:
            return None

        return extension_from_playlist(playlist)

    def strategies(self) -> Sequence[Tuple[str, Strategy]]:
        return [
            ("the provided URL", self.from_url),
            ("the m3u8 playlist", self.from_playlist),
        ]

    async def resolve(self, request: StreamRequestDescriptor) -> str:
        for source, strategy in self.strategies():
            extension = await strategy(request)
            if extension:
                logger.debug("The file-extension was determined to be '.%s' using %s", extension, source)
                return extension

        logger.debug(
            "Neither the provided URL nor the m3u8 playlist helped us to determine "
            "the file-extension, so we fall back to the default '.%s'",
            FALLBACK_EXTENSION
        )
        return FALLBACK_EXTENSION

