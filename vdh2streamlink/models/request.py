from typing import Any, List, Mapping, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from vdh2streamlink.core.errors import MissingURL

Header = Tuple[str, str]

class StreamRequestDescriptor(BaseModel):
    """URL and headers of the captured media request (immutable)"""
    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="Media or playlist URL")
    headers: Tuple[Header, ...] = Field(default=(), description="Headers in source order, duplicates kept")

    @field_validator('url')
    @classmethod
    def validate_url(cls, v):
        if not v or not v.strip():
            raise ValueError("url must not be empty")
        return v.strip()

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> "StreamRequestDescriptor":
        """
        Build from curlconverter's JSON output.
        URL priority is 'raw_url', then 'url'; headers come from the 'headers' object.
        """
        url = str(data.get("raw_url") or "").strip() or str(data.get("url") or "").strip()
        if not url:
            raise MissingURL("both 'url' and 'raw_url' parameters are missing from the JSON dataset")

        headers = data.get("headers") or {}
        if isinstance(headers, Mapping):
            pairs = [(str(k), str(v)) for k, v in headers.items()]
        else:
            # list of [name, value] pairs
            pairs = [(str(k), str(v)) for k, v in headers]

        return cls(url=url, headers=tuple(pairs))

    def streamlink_args(self) -> List[str]:
        """--http-header name=value, one pair per header"""
        args: List[str] = []
        for name, value in self.headers:
            args.extend(["--http-header", f"{name}={value}"])
        return args

    def header_items(self) -> List[Header]:
        return list(self.headers)

