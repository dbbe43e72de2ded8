import asyncio
import json
import logging
from typing import Any, Dict, Optional

from vdh2streamlink.config.settings import ConverterConfig, config
from vdh2streamlink.core.errors import ConverterError
from vdh2streamlink.models.request import StreamRequestDescriptor
from vdh2streamlink.services.streamlink import SubprocessExecutor

logger = logging.getLogger(__name__)

CONVERTER_TIMEOUT = 30.0


class CurlConverter:
    """Turn a 'copy as cURL' command into JSON via curlconverter (npm)"""

    def __init__(self, settings: Optional[ConverterConfig] = None):
        self.settings = settings or config.converter

    def build_command(self):
        return [self.settings.executable, '--language', 'json', '-']

    async def convert(self, curl_command: str) -> Dict[str, Any]:
        # some browsers and clipboard tools use CRLF line endings
        payload = curl_command.replace("\r", "").encode("utf-8")
        try:
            result = await SubprocessExecutor.run(
                self.build_command(),
                timeout=CONVERTER_TIMEOUT,
                stdin_data=payload
            )
        except asyncio.TimeoutError:
            raise ConverterError(f"'curlconverter' timed out after {CONVERTER_TIMEOUT:g} seconds") from None

        if result.returncode != 0:
            logger.debug("curlconverter stderr: %s", result.stderr.decode(errors="replace").strip())
            raise ConverterError("'curlconverter' rejected the structure of your cURL command")

        try:
            data = json.loads(result.stdout.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            raise ConverterError("'curlconverter' produced output that is not valid JSON") from None
        if not isinstance(data, dict):
            raise ConverterError("'curlconverter' produced an unexpected JSON document")

        logger.debug("The following is the JSON representation of your cURL command:\n%s", json.dumps(data, indent=2))
        return data

    async def to_descriptor(self, curl_command: str) -> StreamRequestDescriptor:
        data = await self.convert(curl_command)
        request = StreamRequestDescriptor.from_json(data)
        if not request.headers:
            logger.debug("By the way, the JSON dataset contains no 'headers' parameter")
        return request
