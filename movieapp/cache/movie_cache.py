"""Movie caches keyed by title ID.

Both implementations share the same two-call contract used by the movie
service: `get(id) -> (movie, found)` and `put(id, movie)`.
"""

import logging
from typing import Dict, Optional, Protocol, Tuple

import redis.asyncio as redis

from ..config import Settings
from ..schemas.movies_schemas import Movie
from ..utils.rwlock import RWLock


logger = logging.getLogger(__name__)


class MovieCache(Protocol):
    async def get(self, movie_id: str) -> Tuple[Optional[Movie], bool]: ...

    async def put(self, movie_id: str, movie: Movie) -> None: ...


class InMemoryMovieCache:
    """
    Process-local cache. Entries are never evicted and live as long as
    the cache object does.
    """

    def __init__(self) -> None:
        self._movies: Dict[str, Movie] = {}
        self._lock = RWLock()

    async def get(self, movie_id: str) -> Tuple[Optional[Movie], bool]:
        async with self._lock.read():
            movie = self._movies.get(movie_id)
        return movie, movie is not None

    async def put(self, movie_id: str, movie: Movie) -> None:
        async with self._lock.write():
            self._movies[movie_id] = movie

    def __len__(self) -> int:
        return len(self._movies)

    def __contains__(self, movie_id: str) -> bool:
        return movie_id in self._movies


class RedisMovieCache:
    """
    Cache shared between processes through Redis. Movies are stored as
    their JSON representation under `<prefix><id>`.
    """

    def __init__(
        self,
        client: redis.Redis,
        prefix: str = 'movie:',
        ttl: Optional[int] = None
    ) -> None:
        self.client = client
        self.prefix = prefix
        self.ttl = ttl

    async def get(self, movie_id: str) -> Tuple[Optional[Movie], bool]:
        cached = await self.client.get(f"{self.prefix}{movie_id}")
        if not cached:
            return None, False
        return Movie.model_validate_json(cached), True

    async def put(self, movie_id: str, movie: Movie) -> None:
        await self.client.set(
            f"{self.prefix}{movie_id}",
            movie.model_dump_json(by_alias=True, exclude_none=True),
            ex=self.ttl,
        )

    async def close(self) -> None:
        await self.client.aclose()


def build_cache(settings: Settings) -> MovieCache:
    """
    Create the cache configured by `settings`: Redis when REDIS_URL is set,
    otherwise an in-memory map.
    """
    if settings.REDIS_URL:
        logger.info("Using Redis movie cache")
        client = redis.from_url(
            settings.REDIS_URL, encoding="utf-8", decode_responses=True)
        return RedisMovieCache(client, ttl=settings.CACHE_TTL)
    logger.info("Using in-memory movie cache")
    return InMemoryMovieCache()
