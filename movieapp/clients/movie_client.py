import asyncio
import logging
from typing import Dict, List, Tuple
from ..cache.movie_cache import MovieCache
from ..schemas.movies_schemas import Movie
from ..utils.utils_movies_client import merge_movie
from .upstream_clients import MovieDataClient, StreamingClient, UpstreamError


logger = logging.getLogger(__name__)


class MovieService:
    """
    Resolves movie IDs to merged Movie records, serving repeat lookups
    from the cache.
    """

    def __init__(
        self,
        movie_client: MovieDataClient,
        streaming_client: StreamingClient,
        cache: MovieCache,
        *,
        max_concurrency: int = 5,
        cache_partial_results: bool = False,
    ) -> None:
        self.movie_client = movie_client
        self.streaming_client = streaming_client
        self.cache = cache
        self.max_concurrency = max(1, max_concurrency)
        self.cache_partial_results = cache_partial_results

    async def get_movie(self, movie_id: str) -> Movie:
        """
        Return the movie for `movie_id`, fetching and caching it on a miss.

        :param movie_id: Provider title ID.
        :return: The merged Movie.
        :raises MovieNotFound: When the metadata provider does not know the title.
        :raises UpstreamError: When the base record cannot be fetched.
        """
        movie, found = await self.cache.get(movie_id)
        if found:
            logger.debug("Cache hit for %s", movie_id)
            return movie

        movie, complete = await self._assemble(movie_id)
        if complete or self.cache_partial_results:
            await self.cache.put(movie_id, movie)
        else:
            logger.info("Not caching partial result for %s", movie_id)
        return movie

    async def get_movies(self, movie_ids: List[str]) -> List[Movie]:
        """
        Resolve several IDs concurrently, returning the movies in the order
        the IDs were given. Repeated IDs are fetched once.

        :param movie_ids: Provider title IDs.
        :return: List of Movie objects, one per requested ID.
        """
        unique_ids = list(dict.fromkeys(movie_ids))
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def resolve(movie_id: str) -> Movie:
            async with semaphore:
                return await self.get_movie(movie_id)

        results = await asyncio.gather(
            *[resolve(movie_id) for movie_id in unique_ids],
            return_exceptions=True
        )
        by_id: Dict[str, object] = dict(zip(unique_ids, results))
        # the first failing ID in request order decides the error
        for movie_id in movie_ids:
            if isinstance(by_id[movie_id], BaseException):
                raise by_id[movie_id]
        return [by_id[movie_id] for movie_id in movie_ids]

    async def _assemble(self, movie_id: str) -> Tuple[Movie, bool]:
        """
        Run the three upstream lookups for one title and merge them.

        Failures of the base lookup propagate. Actor and streaming lookups
        degrade to empty lists, and the result is then reported incomplete.

        :return: Tuple of the merged Movie and whether every lookup succeeded.
        """
        base, actors, streaming = await asyncio.gather(
            self.movie_client.fetch_movie_data(movie_id),
            self.movie_client.fetch_main_actors(movie_id),
            self.streaming_client.fetch_streaming_options(movie_id),
            return_exceptions=True
        )
        if isinstance(base, BaseException):
            logger.warning("Error fetching movie data for %s: %s", movie_id, base)
            raise base

        complete = True
        if isinstance(actors, UpstreamError):
            logger.warning("Error fetching main actors for %s: %s", movie_id, actors)
            actors, complete = [], False
        elif isinstance(actors, BaseException):
            raise actors
        if isinstance(streaming, UpstreamError):
            logger.warning("Error fetching streaming options for %s: %s", movie_id, streaming)
            streaming, complete = [], False
        elif isinstance(streaming, BaseException):
            raise streaming

        return merge_movie(base, actors, streaming), complete
