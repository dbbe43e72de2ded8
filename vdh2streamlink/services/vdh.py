from typing import List, Optional, Tuple

from vdh2streamlink.core.errors import InputError
from vdh2streamlink.models.internal import DetailsDump

# Request headers worth forwarding from the dump
HEADER_PREFIXES = ("accept", "user-agent", "origin", "sec-", "connection")


def parse_details_dump(text: str) -> DetailsDump:
    """
    Parse the text copied from Video DownloadHelper's "Details" view.
    Relevant lines are "<key>\\t<value>". 'Media URL' is preferred over '#0 main url'.
    """
    fields = {}
    headers: List[Tuple[str, str]] = []
    media_url: Optional[str] = None
    main_url: Optional[str] = None

    for line in text.replace("\r", "").splitlines():
        if "\t" not in line:
            continue
        key, value = line.split("\t", 1)
        lowered = key.lower()

        if lowered.startswith("title"):
            fields["title"] = value
        elif lowered.startswith("page url"):
            fields["page_url"] = value
        elif lowered.startswith("thumbnail"):
            fields["thumbnail"] = value
        elif lowered.startswith("type"):
            fields["media_type"] = value
        elif lowered.startswith("duration"):
            fields["duration"] = value
        elif lowered.startswith("media url"):
            media_url = value
        elif lowered.startswith("#0 main url"):
            main_url = value
        elif lowered.startswith(HEADER_PREFIXES):
            headers.append((key, value))

    url = media_url or main_url
    if not url:
        raise InputError("the VDH details dump is ill-formed or contains neither 'Media URL' nor '#0 main url'")

    return DetailsDump(url=url, headers=headers, **fields)
