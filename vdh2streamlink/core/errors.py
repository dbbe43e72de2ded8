class Vdh2StreamlinkError(Exception):
    """Base class for fatal errors; the CLI exits with status 1 on any of them"""

class MissingURL(Vdh2StreamlinkError):
    """Neither 'raw_url' nor 'url' is present in the request data"""

class OutputExists(Vdh2StreamlinkError):
    """The destination name is already taken"""

class MissingIncompleteSuffix(Vdh2StreamlinkError):
    """finalize() was handed a name without the incomplete suffix"""

class MissingExtension(Vdh2StreamlinkError):
    """finalize() was handed a name with no extension left after the suffix"""

class InvalidDirectory(Vdh2StreamlinkError):
    """The output directory does not exist"""

class InvalidPath(Vdh2StreamlinkError):
    """The output path cannot be interpreted"""

class InputError(Vdh2StreamlinkError):
    """The input data could not be read or is ill-formed"""

class ConverterError(Vdh2StreamlinkError):
    """curlconverter rejected the cURL command"""

class ToolNotFound(Vdh2StreamlinkError):
    """A required external program is not installed"""

class DownloadFailed(Vdh2StreamlinkError):
    """Streamlink exited with a non-zero status"""
