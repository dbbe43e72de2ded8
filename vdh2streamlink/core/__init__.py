from .errors import (
    InvalidDirectory,
    MissingExtension,
    MissingIncompleteSuffix,
    MissingURL,
    OutputExists,
    Vdh2StreamlinkError,
)

__all__ = [
    "InvalidDirectory",
    "MissingExtension",
    "MissingIncompleteSuffix",
    "MissingURL",
    "OutputExists",
    "Vdh2StreamlinkError",
]
