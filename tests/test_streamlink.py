import asyncio

import pytest

from vdh2streamlink.config.settings import StreamlinkConfig
from vdh2streamlink.core.errors import DownloadFailed, ToolNotFound
from vdh2streamlink.models.request import StreamRequestDescriptor
from vdh2streamlink.services.streamlink import (
    CompletedProcess,
    StreamlinkCommandBuilder,
    StreamlinkService,
    SubprocessExecutor,
)

REQUEST = StreamRequestDescriptor(
    url="https://cdn.example.com/master.m3u8",
    headers=(("Referer", "https://site.example/"), ("User-Agent", "Mozilla/5.0")),
)


class FakeExecutor:
    def __init__(self, result=None, exc=None, returncode=0):
        self.result = result
        self.exc = exc
        self.returncode = returncode
        self.commands = []

    async def run(self, cmd, timeout=None, stdin_data=None):
        self.commands.append(cmd)
        if self.exc:
            raise self.exc
        return self.result

    async def run_attached(self, cmd):
        self.commands.append(cmd)
        return self.returncode


def test_stream_url_command():
    cmd = StreamlinkCommandBuilder().build_stream_url_command(REQUEST)
    assert cmd == [
        "streamlink", "--stream-url",
        "--http-header", "Referer=https://site.example/",
        "--http-header", "User-Agent=Mozilla/5.0",
        "https://cdn.example.com/master.m3u8", "best",
    ]


def test_download_command_carries_robustness_flags():
    cmd = StreamlinkCommandBuilder().build_download_command(REQUEST, "out.ts.incomplete", "info", "SL_logs/out_1.log")
    assert cmd[:5] == ["streamlink", "--loglevel", "info", "--logfile", "SL_logs/out_1.log"]
    assert cmd[5:11] == ["--retry-open", "3", "--retry-streams", "10", "--retry-max", "5"]
    assert cmd[-5:] == ["https://cdn.example.com/master.m3u8", "best", "--force", "-o", "out.ts.incomplete"]


def test_download_command_without_log_file():
    builder = StreamlinkCommandBuilder(StreamlinkConfig(executable="/opt/streamlink", quality="720p"))
    cmd = builder.build_download_command(REQUEST, "out.ts.incomplete")
    assert "--logfile" not in cmd
    assert cmd[0] == "/opt/streamlink"
    assert "720p" in cmd


@pytest.mark.asyncio
async def test_stream_url_success():
    executor = FakeExecutor(CompletedProcess(0, b"https://cdn.example.com/720p.m3u8\n", b""))
    service = StreamlinkService(executor=executor)
    assert await service.stream_url(REQUEST) == "https://cdn.example.com/720p.m3u8"
    assert executor.commands[0][1] == "--stream-url"


@pytest.mark.asyncio
@pytest.mark.parametrize("executor", [
    FakeExecutor(CompletedProcess(1, b"", b"error: No playable streams found")),
    FakeExecutor(CompletedProcess(0, b"  \n", b"")),
    FakeExecutor(exc=ToolNotFound("missing")),
    FakeExecutor(exc=asyncio.TimeoutError()),
])
async def test_stream_url_failures_give_none(executor):
    assert await StreamlinkService(executor=executor).stream_url(REQUEST) is None


@pytest.mark.asyncio
async def test_download_failure_raises():
    service = StreamlinkService(executor=FakeExecutor(returncode=1))
    with pytest.raises(DownloadFailed):
        await service.download(REQUEST, "out.ts.incomplete")


@pytest.mark.asyncio
async def test_download_success():
    executor = FakeExecutor(returncode=0)
    await StreamlinkService(executor=executor).download(REQUEST, "out.ts.incomplete", log_level="all")
    assert executor.commands[0][1:3] == ["--loglevel", "all"]


@pytest.mark.asyncio
async def test_executor_reports_missing_program():
    with pytest.raises(ToolNotFound):
        await SubprocessExecutor.run(["definitely-not-an-installed-program-vdh2sl"])
