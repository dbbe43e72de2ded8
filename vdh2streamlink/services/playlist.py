import logging
from typing import List, Optional, Tuple

import httpx

from vdh2streamlink.config.settings import PlaylistConfig, config

logger = logging.getLogger(__name__)


def truncate_for_log(text: str, head: int = 1000, tail: int = 1000) -> str:
    """Keep head and tail of long text, marking how much was left out"""
    if len(text) <= head + tail:
        return text
    omitted = len(text) - head - tail
    tail_text = text[-tail:] if tail else ""
    return (
        f"{text[:head]}\n.\n.\n. *** omitting {omitted} characters for brevity ***\n.\n.\n"
        f"{tail_text}"
    )


class PlaylistFetcher:
    """
    Fetch a media playlist as text with the captured request headers.
    Any transport error or non-2xx status is reported as None.
    """

    def __init__(
        self,
        client: Optional[httpx.AsyncClient] = None,
        settings: Optional[PlaylistConfig] = None
    ):
        self.settings = settings or config.playlist
        self.client = client

    async def fetch(self, url: str, headers: List[Tuple[str, str]]) -> Optional[str]:
        if self.client is not None:
            return await self._fetch(self.client, url, headers)

        async with httpx.AsyncClient(
            follow_redirects=True,
            timeout=self.settings.timeout
        ) as client:
            return await self._fetch(client, url, headers)

    async def _fetch(
        self,
        client: httpx.AsyncClient,
        url: str,
        headers: List[Tuple[str, str]]
    ) -> Optional[str]:
        # captured browsers ask for br/zstd too; limit to what httpx always decodes
        try:
            request_headers = httpx.Headers(headers)
            request_headers["Accept-Encoding"] = "gzip, deflate"
            response = await client.get(url, headers=request_headers)
            response.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL, UnicodeEncodeError) as e:
            logger.debug("Could not fetch the m3u8 playlist: %s", e)
            return None

        text = response.text
        logger.debug(
            "m3u8 playlist (fetched via httpx):\n[%s]",
            truncate_for_log(text, self.settings.log_head_chars, self.settings.log_tail_chars)
        )
        return text
