from .filename import default_output_name, expand_tilde, sanitize_filename, sanitize_output_path
from .media_types import BUILTIN_MEDIA_EXTENSIONS, load_media_extensions

__all__ = [
    "BUILTIN_MEDIA_EXTENSIONS",
    "default_output_name",
    "expand_tilde",
    "load_media_extensions",
    "sanitize_filename",
    "sanitize_output_path",
]
