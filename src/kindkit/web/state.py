"""Process-wide web state: the refresh signal and the cluster list cache."""

from ..core.config import load_config
from ..core.logs import NullLog, OutputLog
from ..kind.cache import ClusterListCache, RefreshSignal
from ..kind.client import KindClient

refresh_signal = RefreshSignal()
_cache: ClusterListCache | None = None


def make_client(log: OutputLog | None = None) -> KindClient:
    """A client for the current config (re-read on every call)."""
    return KindClient.from_config(load_config(), log if log is not None else NullLog())


def cluster_cache() -> ClusterListCache:
    global _cache
    if _cache is None:
        _cache = ClusterListCache(make_client(), refresh_signal)
    return _cache


def reset() -> None:
    """Drop the cache so the next request rebuilds it from fresh config."""
    global _cache
    if _cache is not None:
        _cache.close()
    _cache = None
