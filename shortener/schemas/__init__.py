# re-export common schemas for simpler imports
from .URLCreateRequest import URLCreateRequest
from .URLInfoResponse import URLInfoResponse

__all__ = [
    "URLCreateRequest",
    "URLInfoResponse",
]
