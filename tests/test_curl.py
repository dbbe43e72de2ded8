import asyncio
import json

import pytest

from vdh2streamlink.core.errors import ConverterError, MissingURL
from vdh2streamlink.services import curl as curl_module
from vdh2streamlink.services.curl import CurlConverter
from vdh2streamlink.services.streamlink import CompletedProcess

CURL = (
    "curl 'https://cdn.example.com/master.m3u8' \\\r\n"
    "  -H 'Referer: https://site.example/'\r\n"
)


@pytest.fixture
def fake_run(monkeypatch):
    calls = []

    def install(result):
        async def run(cmd, timeout=None, stdin_data=None):
            calls.append((cmd, stdin_data))
            return result
        monkeypatch.setattr(curl_module.SubprocessExecutor, "run", staticmethod(run))
        return calls

    return install


@pytest.mark.asyncio
async def test_convert_strips_carriage_returns(fake_run):
    payload = {"url": "https://cdn.example.com/master.m3u8", "headers": {"Referer": "https://site.example/"}}
    calls = fake_run(CompletedProcess(0, json.dumps(payload).encode(), b""))

    request = await CurlConverter().to_descriptor(CURL)

    cmd, stdin_data = calls[0]
    assert cmd == ["curlconverter", "--language", "json", "-"]
    assert b"\r" not in stdin_data
    assert request.url == "https://cdn.example.com/master.m3u8"
    assert request.headers == (("Referer", "https://site.example/"),)


@pytest.mark.asyncio
async def test_rejected_command(fake_run):
    fake_run(CompletedProcess(1, b"", b"Error: not a curl command"))
    with pytest.raises(ConverterError):
        await CurlConverter().convert("wget https://example.com")


@pytest.mark.asyncio
async def test_invalid_json(fake_run):
    fake_run(CompletedProcess(0, b"not json", b""))
    with pytest.raises(ConverterError):
        await CurlConverter().convert(CURL)


@pytest.mark.asyncio
async def test_json_without_url(fake_run):
    fake_run(CompletedProcess(0, b'{"method": "get"}', b""))
    with pytest.raises(MissingURL):
        await CurlConverter().to_descriptor(CURL)


@pytest.mark.asyncio
async def test_converter_timeout(monkeypatch):
    async def run(cmd, timeout=None, stdin_data=None):
        raise asyncio.TimeoutError()
    monkeypatch.setattr(curl_module.SubprocessExecutor, "run", staticmethod(run))

    with pytest.raises(ConverterError, match="timed out"):
        await CurlConverter().convert(CURL)
