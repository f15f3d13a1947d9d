"""HTTP clients for the two RapidAPI providers the movie service aggregates."""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from ..schemas.movies_schemas import Actor, Movie, StreamingOption
from ..utils.utils_movies_client import (
    map_actors,
    map_streaming_options,
    map_to_movie,
)


logger = logging.getLogger(__name__)


class MovieNotFound(Exception):
    """Raised when the metadata provider has no title for the given ID."""

    def __init__(self, movie_id: str):
        super().__init__(f"Movie '{movie_id}' not found")
        self.movie_id = movie_id


class UpstreamError(Exception):
    """Raised on transport failures and unusable responses from a provider."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider


def _path_segment(movie_id: str) -> str:
    """
    Percent-encode a title ID as a single URL path segment, so `/`, `?`
    and `#` in the ID cannot change the upstream path or query.
    Dot segments are never a valid title ID.
    """
    if movie_id in ('', '.', '..'):
        raise MovieNotFound(movie_id)
    return quote(movie_id, safe='')


class RapidAPIClient:
    """Base client carrying one provider's base URL and RapidAPI credentials."""

    provider = 'rapidapi'

    def __init__(
        self,
        http: httpx.AsyncClient,
        *,
        base_url: str,
        api_host: str,
        api_key: str,
    ) -> None:
        self.http = http
        self.base_url = base_url.rstrip('/')
        self.headers = {
            'x-rapidapi-host': api_host,
            'x-rapidapi-key': api_key,
        }

    async def _get_json(
        self,
        path: str,
        movie_id: str,
        params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        GET `path` and decode the JSON body.

        :param path: Path relative to the provider base URL.
        :param movie_id: Title the request is about, used for error reporting.
        :param params: Optional query parameters.
        :return: The decoded JSON body.
        :raises MovieNotFound: When the provider answers 404.
        :raises UpstreamError: On transport errors, other non-2xx statuses or invalid JSON.
        """
        url = f"{self.base_url}{path}"
        logger.info("Fetching %s data from URL: %s", self.provider, url)
        try:
            resp = await self.http.get(url, params=params, headers=self.headers)
        except httpx.HTTPError as e:
            raise UpstreamError(
                self.provider, f"request for {movie_id} failed: {e}") from e

        logger.debug("Received %s response for %s: %s",
                     self.provider, movie_id, resp.text)
        if resp.status_code == 404:
            raise MovieNotFound(movie_id)
        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise UpstreamError(
                self.provider,
                f"request for {movie_id} returned {resp.status_code}") from e

        try:
            return resp.json()
        except ValueError as e:
            raise UpstreamError(
                self.provider, f"invalid JSON for {movie_id}: {e}") from e


class MovieDataClient(RapidAPIClient):
    """Client for the movie-metadata provider (titles and main actors)."""

    provider = 'movie-data'

    async def fetch_movie_data(self, movie_id: str) -> Movie:
        """
        Fetch the base record of a title.

        :param movie_id: Provider title ID, e.g. an IMDb `tt` identifier.
        :return: Movie with base fields populated.
        """
        payload = await self._get_json(
            f"/titles/{_path_segment(movie_id)}", movie_id, params={'info': 'base_info'}
        )
        if not isinstance(payload, dict):
            raise UpstreamError(self.provider, f"unexpected payload for {movie_id}")
        results = payload.get('results')
        if results is None:
            raise MovieNotFound(movie_id)
        try:
            return map_to_movie(results)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise UpstreamError(
                self.provider, f"unexpected title record for {movie_id}: {e}") from e

    async def fetch_main_actors(self, movie_id: str) -> List[Actor]:
        """
        Fetch the main cast of a title. A title the provider does not know
        has no actors.
        """
        try:
            payload = await self._get_json(f"/titles/{_path_segment(movie_id)}/main_actors", movie_id)
        except MovieNotFound:
            return []
        try:
            return map_actors(payload.get('results'))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise UpstreamError(
                self.provider, f"unexpected actor list for {movie_id}: {e}") from e


class StreamingClient(RapidAPIClient):
    """Client for the streaming-availability provider."""

    provider = 'streaming'

    def __init__(self, http: httpx.AsyncClient, *, country: Optional[str] = None, **kwargs) -> None:
        super().__init__(http, **kwargs)
        self.country = country or None

    async def fetch_streaming_options(self, movie_id: str) -> List[StreamingOption]:
        params = {'country': self.country} if self.country else None
        try:
            payload = await self._get_json(f"/shows/{_path_segment(movie_id)}", movie_id, params=params)
        except MovieNotFound:
            return []
        try:
            return map_streaming_options(payload, self.country)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise UpstreamError(
                self.provider, f"unexpected streaming options for {movie_id}: {e}") from e
