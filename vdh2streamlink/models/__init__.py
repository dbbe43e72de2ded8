from .internal import DetailsDump
from .request import StreamRequestDescriptor

__all__ = ["DetailsDump", "StreamRequestDescriptor"]
