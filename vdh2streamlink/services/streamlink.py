import asyncio
import logging
from typing import List, NamedTuple, Optional

from vdh2streamlink.config.settings import StreamlinkConfig, config
from vdh2streamlink.core.errors import DownloadFailed, ToolNotFound
from vdh2streamlink.models.request import StreamRequestDescriptor

logger = logging.getLogger(__name__)

class CompletedProcess(NamedTuple):
    """Subprocess result"""
    returncode: int
    stdout: bytes
    stderr: bytes

class SubprocessExecutor:
    """Execute subprocess with consistent error handling"""

    @staticmethod
    async def run(
        cmd: List[str],
        timeout: Optional[float] = None,
        stdin_data: Optional[bytes] = None
    ) -> CompletedProcess:
        """
        Run subprocess with captured output, optional stdin and timeout.
        The process is killed on timeout or any other failure.
        Raises ToolNotFound when the executable is missing.
        """
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                stdin=asyncio.subprocess.PIPE if stdin_data is not None else asyncio.subprocess.DEVNULL
            )
        except FileNotFoundError as e:
            raise ToolNotFound(f"the '{cmd[0]}' program is missing, please install it first") from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(stdin_data),
                timeout=timeout
            )

            return CompletedProcess(
                returncode=process.returncode,
                stdout=stdout,
                stderr=stderr
            )

        except asyncio.TimeoutError:
            process.kill()
            await process.wait()
            raise
        except Exception:
            if process.returncode is None:
                process.kill()
                await process.wait()
            raise

    @staticmethod
    async def run_attached(cmd: List[str]) -> int:
        """Run subprocess sharing our stdout/stderr; returns the exit code"""
        try:
            process = await asyncio.create_subprocess_exec(
                *cmd,
                stdin=asyncio.subprocess.DEVNULL
            )
        except FileNotFoundError as e:
            raise ToolNotFound(f"the '{cmd[0]}' program is missing, please install it first") from e

        try:
            return await process.wait()
        except BaseException:
            if process.returncode is None:
                process.kill()
                await process.wait()
            raise

class StreamlinkCommandBuilder:
    """Build Streamlink commands"""

    def __init__(self, settings: Optional[StreamlinkConfig] = None):
        self.settings = settings or config.streamlink

    def robustness_args(self) -> List[str]:
        return [
            '--retry-open', str(self.settings.retry_open),
            '--retry-streams', str(self.settings.retry_streams),
            '--retry-max', str(self.settings.retry_max),
        ]

    def build_stream_url_command(self, request: StreamRequestDescriptor) -> List[str]:
        """Command printing the URL Streamlink would actually fetch"""
        return [
            self.settings.executable,
            '--stream-url',
            *request.streamlink_args(),
            request.url,
            self.settings.quality,
        ]

    def build_download_command(
        self,
        request: StreamRequestDescriptor,
        output: str,
        log_level: str = "warning",
        log_file: Optional[str] = None
    ) -> List[str]:
        """Command downloading the stream into output"""
        cmd = [self.settings.executable, '--loglevel', log_level]

        if log_file:
            cmd.extend(['--logfile', log_file])

        cmd.extend(self.robustness_args())
        cmd.extend(request.streamlink_args())
        # output is our own reservation, created empty before the download starts
        cmd.extend([request.url, self.settings.quality, '--force', '-o', output])

        return cmd

class StreamlinkService:
    """Resolve and download streams through Streamlink"""

    def __init__(
        self,
        builder: Optional[StreamlinkCommandBuilder] = None,
        executor: Optional[SubprocessExecutor] = None
    ):
        self.builder = builder or StreamlinkCommandBuilder()
        self.executor = executor or SubprocessExecutor()

    async def stream_url(self, request: StreamRequestDescriptor) -> Optional[str]:
        """
        Resolved playback URL, or None when Streamlink cannot provide one.
        Never raises: a missing Streamlink or a timeout count as "no result".
        """
        cmd = self.builder.build_stream_url_command(request)
        try:
            result = await self.executor.run(cmd, timeout=self.builder.settings.resolve_timeout)
        except (ToolNotFound, asyncio.TimeoutError, OSError) as e:
            logger.debug("'streamlink --stream-url' could not run: %s", e)
            return None

        if result.returncode != 0:
            logger.debug(
                "'streamlink --stream-url' failed (%d): %s",
                result.returncode,
                result.stderr.decode(errors="replace").strip()[:200]
            )
            return None

        stream_url = result.stdout.decode(errors="replace").strip()
        if not stream_url:
            return None

        logger.debug("Stream URL (fetched via 'streamlink --stream-url'):\n  [%s]", stream_url)
        return stream_url

    async def download(
        self,
        request: StreamRequestDescriptor,
        output: str,
        log_level: str = "warning",
        log_file: Optional[str] = None
    ) -> None:
        """Download into output; raises DownloadFailed on a non-zero exit"""
        cmd = self.builder.build_download_command(request, output, log_level, log_file)
        logger.debug("Running: %s", cmd)

        returncode = await self.executor.run_attached(cmd)
        if returncode != 0:
            raise DownloadFailed(f"Streamlink failed to download the given media stream (exit code {returncode})")
