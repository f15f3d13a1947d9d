import asyncio

import pytest

from movieapp.cache.movie_cache import InMemoryMovieCache
from movieapp.clients.movie_client import MovieService
from movieapp.clients.upstream_clients import MovieNotFound
from movieapp.schemas.movies_schemas import (
    Actor,
    Movie,
    RatingsSummary,
    StreamingOption,
)


class StubMovieDataClient:
    """Stands in for MovieDataClient, recording every call it receives."""

    def __init__(self, movies, actors=None):
        # values may be exceptions, which are raised instead of returned
        self.movies = movies
        self.actors = actors or {}
        self.movie_calls = []
        self.actor_calls = []

    async def fetch_movie_data(self, movie_id):
        self.movie_calls.append(movie_id)
        await asyncio.sleep(0)
        result = self.movies.get(movie_id)
        if result is None:
            raise MovieNotFound(movie_id)
        if isinstance(result, Exception):
            raise result
        return result

    async def fetch_main_actors(self, movie_id):
        self.actor_calls.append(movie_id)
        await asyncio.sleep(0)
        result = self.actors.get(movie_id, [])
        if isinstance(result, Exception):
            raise result
        return result


class StubStreamingClient:
    def __init__(self, options=None):
        self.options = options or {}
        self.calls = []

    async def fetch_streaming_options(self, movie_id):
        self.calls.append(movie_id)
        await asyncio.sleep(0)
        result = self.options.get(movie_id, [])
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def base_movies():
    return {
        "tt0111161": Movie(
            id="tt0111161",
            title_text="The Shawshank Redemption",
            title_type="Movie",
            release_year=1994,
            release_date="1994-10-14",
            genres=["Drama"],
            ratings_summary=RatingsSummary(aggregate_rating=9.3, vote_count=2800000),
        ),
        "tt0068646": Movie(
            id="tt0068646",
            title_text="The Godfather",
            title_type="Movie",
            release_year=1972,
            genres=["Crime", "Drama"],
        ),
    }


@pytest.fixture
def movie_data_client(base_movies):
    return StubMovieDataClient(
        base_movies,
        actors={
            "tt0111161": [Actor(name="Tim Robbins"), Actor(name="Morgan Freeman")],
            "tt0068646": [Actor(name="Marlon Brando")],
        },
    )


@pytest.fixture
def streaming_client():
    return StubStreamingClient({
        "tt0111161": [
            StreamingOption(service="Netflix", url="https://netflix.example/title/1",
                            quality="hd"),
            StreamingOption(service="Prime Video", url="https://prime.example/1",
                            price="3.99 USD"),
        ],
    })


@pytest.fixture
def cache():
    return InMemoryMovieCache()


@pytest.fixture
def service(movie_data_client, streaming_client, cache):
    return MovieService(movie_data_client, streaming_client, cache, max_concurrency=2)
