import shlex
from typing import List, Optional, Tuple

from pydantic import BaseModel

class DetailsDump(BaseModel):
    """Fields picked out of a Video DownloadHelper "Details" dump"""
    url: str
    headers: List[Tuple[str, str]] = []
    title: Optional[str] = None
    page_url: Optional[str] = None
    thumbnail: Optional[str] = None
    media_type: Optional[str] = None
    duration: Optional[str] = None

    def to_curl_command(self) -> str:
        """Equivalent 'copy as cURL' command, one -H per header"""
        parts = [f"curl {shlex.quote(self.url)}"]
        for name, value in self.headers:
            parts.append(f"  -H {shlex.quote(f'{name}: {value}')}")
        return " \\\n".join(parts)

    def summary_lines(self) -> List[str]:
        lines = []
        if self.title:
            lines.append(f"  [Title]     [{self.title}]")
        if self.page_url:
            lines.append(f"  [Page URL]  [{self.page_url.split(' ', 1)[0]}]")
        if self.thumbnail:
            lines.append(f"  [Thumbnail] [{self.thumbnail}]")
        if self.media_type:
            lines.append(f"  [Type]      [{self.media_type}]")
        if self.duration:
            lines.append(f"  [Duration]  [{format_duration(self.duration)}]")
        return lines

def format_duration(seconds: str) -> str:
    """'3725' -> '01:02:05'; non-numeric values are returned as given"""
    try:
        total = int(float(seconds))
    except ValueError:
        return seconds
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
