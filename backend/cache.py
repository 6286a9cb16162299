# backend/cache.py
"""
In-process response cache for public GET endpoints.

One ResponseCache is built per app in create_app() and kept in
app.extensions["response_cache"]. Entries are keyed by the request path plus
the raw query string, exactly as received: `?a=1&b=2` and `?b=2&a=1` are two
different entries.

Write paths call invalidate_cache("/api/listing") (or "/api/products") so the
next read of that resource family recomputes.
"""
from __future__ import annotations

import threading
import time
from functools import wraps
from typing import Callable, Dict, Optional, Tuple

from flask import Response, current_app, g, request

CACHE_HEADER = "X-Cache"


class ResponseCache:
    """TTL map of cache key -> (expires_at, body bytes)."""

    def __init__(self, default_ttl: int = 300, sweep_interval: int = 600,
                 clock: Callable[[], float] = time.monotonic):
        self.default_ttl = default_ttl
        self.sweep_interval = sweep_interval
        self._clock = clock
        self._entries: Dict[str, Tuple[float, bytes]] = {}
        self._generation = 0
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._sweeper: Optional[threading.Thread] = None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def get(self, key: str) -> Optional[bytes]:
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if now >= expires_at:
                del self._entries[key]
                return None
            return value

    @property
    def generation(self) -> int:
        """Bumped by every invalidate/clear."""
        with self._lock:
            return self._generation

    def set(self, key: str, value: bytes, ttl: Optional[int] = None,
            generation: Optional[int] = None) -> bool:
        """
        Store `value` under `key`. When `generation` is given and an
        invalidation happened since it was read, nothing is stored: the body
        may predate the write that caused the invalidation.
        """
        ttl = self.default_ttl if ttl is None else ttl
        with self._lock:
            if generation is not None and generation != self._generation:
                return False
            self._entries[key] = (self._clock() + ttl, value)
        return True

    def invalidate(self, substring: str) -> int:
        """Drop every entry whose key contains `substring`. Returns the count."""
        with self._lock:
            self._generation += 1
            doomed = [k for k in self._entries if substring in k]
            for k in doomed:
                del self._entries[k]
        return len(doomed)

    def clear(self) -> None:
        with self._lock:
            self._generation += 1
            self._entries.clear()

    def sweep(self) -> int:
        """Evict expired entries whether or not anyone asked for them."""
        now = self._clock()
        with self._lock:
            expired = [k for k, (exp, _) in self._entries.items() if exp <= now]
            for k in expired:
                del self._entries[k]
        return len(expired)

    # ------------------------------------------------------------
    # Background sweeper
    # ------------------------------------------------------------
    def start_sweeper(self) -> None:
        if self._sweeper is not None and self._sweeper.is_alive():
            return
        self._stop.clear()
        self._sweeper = threading.Thread(
            target=self._sweep_loop, name="response-cache-sweeper", daemon=True
        )
        self._sweeper.start()

    def stop_sweeper(self) -> None:
        self._stop.set()
        if self._sweeper is not None:
            self._sweeper.join(timeout=1)
        self._sweeper = None

    def _sweep_loop(self) -> None:
        while not self._stop.wait(self.sweep_interval):
            self.sweep()


# ------------------------------------------------------------
# Request pipeline integration
# ------------------------------------------------------------
def no_cache(view):
    """Mark a view whose responses must never be served from the cache."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        return view(*args, **kwargs)

    wrapper.skip_response_cache = True
    return wrapper


def cache_key_for_request() -> str:
    qs = request.query_string.decode("utf-8", "replace")
    return f"{request.path}?{qs}" if qs else request.path


def get_response_cache() -> Optional[ResponseCache]:
    return current_app.extensions.get("response_cache")


def invalidate_cache(substring: str) -> int:
    cache = get_response_cache()
    if cache is None:
        return 0
    return cache.invalidate(substring)


def _is_cacheable_request() -> bool:
    if request.method != "GET":
        return False
    if request.headers.get("Authorization"):
        return False
    prefixes = current_app.config.get("RESPONSE_CACHE_BYPASS_PREFIXES") or ()
    if any(request.path.startswith(p) for p in prefixes):
        return False
    view = current_app.view_functions.get(request.endpoint) if request.endpoint else None
    if view is not None and getattr(view, "skip_response_cache", False):
        return False
    return True


def init_response_cache(app, cache: Optional[ResponseCache] = None) -> Optional[ResponseCache]:
    """Attach the cache to `app` and hook it in front of the GET handlers."""
    if not app.config.get("RESPONSE_CACHE_ENABLED", True):
        return None

    if cache is None:
        cache = ResponseCache(
            default_ttl=app.config.get("RESPONSE_CACHE_TTL", 300),
            sweep_interval=app.config.get("RESPONSE_CACHE_SWEEP_INTERVAL", 600),
        )
    app.extensions["response_cache"] = cache

    @app.before_request
    def _serve_from_cache():
        if not _is_cacheable_request():
            return None
        g.response_cache_generation = cache.generation
        body = cache.get(cache_key_for_request())
        if body is None:
            return None
        resp = Response(body, status=200, mimetype="application/json")
        resp.headers[CACHE_HEADER] = "HIT"
        return resp

    @app.after_request
    def _store_in_cache(response):
        if CACHE_HEADER in response.headers or not _is_cacheable_request():
            return response
        if response.status_code == 200 and response.is_json and not response.direct_passthrough:
            cache.set(
                cache_key_for_request(),
                response.get_data(),
                generation=g.pop("response_cache_generation", None),
            )
        response.headers[CACHE_HEADER] = "MISS"
        return response

    if not app.testing:
        cache.start_sweeper()
    return cache
