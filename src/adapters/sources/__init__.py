from adapters.sources.local import LocalCopyTransport
from adapters.sources.naming import cache_path_for
from adapters.sources.remote import HttpsSourceTransport

__all__ = [
    "HttpsSourceTransport",
    "LocalCopyTransport",
    "cache_path_for",
]
