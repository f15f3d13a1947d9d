import logging
from contextlib import asynccontextmanager
from typing import List

import httpx
import uvicorn
from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import PlainTextResponse

from .cache.movie_cache import RedisMovieCache, build_cache
from .clients.movie_client import MovieService
from .clients.upstream_clients import (
    MovieDataClient,
    MovieNotFound,
    StreamingClient,
    UpstreamError,
)
from .config import settings
from .schemas.movies_schemas import ErrorResponse, Movie

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

WELCOME_MESSAGE = (
    "Welcome to the Movie API. Use /movies to get a list of movies "
    "or /movies/{id} to get details of a specific movie."
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    http = httpx.AsyncClient(timeout=settings.HTTP_TIMEOUT)
    cache = None
    try:
        cache = build_cache(settings)
        app.state.movie_service = MovieService(
            MovieDataClient(
                http,
                base_url=settings.MOVIE_API_URL,
                api_host=settings.MOVIE_API_HOST,
                api_key=settings.RAPID_API_KEY,
            ),
            StreamingClient(
                http,
                base_url=settings.STREAMING_API_URL,
                api_host=settings.STREAMING_API_HOST,
                api_key=settings.RAPID_API_KEY,
                country=settings.STREAMING_COUNTRY,
            ),
            cache,
            max_concurrency=settings.FETCH_CONCURRENCY,
            cache_partial_results=settings.CACHE_PARTIAL_RESULTS,
        )
        yield
    finally:
        await http.aclose()
        if isinstance(cache, RedisMovieCache):
            await cache.close()


app = FastAPI(lifespan=lifespan)


@app.middleware('http')
async def log_requests(request: Request, call_next):
    logger.info("Received request: %s %s", request.method, request.url.path)
    return await call_next(request)


def get_movie_service(request: Request) -> MovieService:
    return request.app.state.movie_service


_ERROR_RESPONSES = {
    404: {'model': ErrorResponse},
    502: {'model': ErrorResponse},
}


@app.get('/', response_class=PlainTextResponse)
async def index():
    return WELCOME_MESSAGE


@app.get('/movies', response_model=List[Movie], response_model_exclude_none=True,
         responses=_ERROR_RESPONSES)
async def get_movies(
    ids: List[str] = Query(default=[], alias='id'),
    service: MovieService = Depends(get_movie_service)
):
    try:
        return await service.get_movies(ids)
    except MovieNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UpstreamError as e:
        raise HTTPException(
            status_code=502, detail=f"Upstream service error: {str(e)}")


@app.get('/movies/{movie_id}', response_model=Movie, response_model_exclude_none=True,
         responses=_ERROR_RESPONSES)
async def get_movie(
    movie_id: str,
    service: MovieService = Depends(get_movie_service)
):
    try:
        return await service.get_movie(movie_id)
    except MovieNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UpstreamError as e:
        raise HTTPException(
            status_code=502, detail=f"Upstream service error: {str(e)}")


if __name__ == '__main__':
    uvicorn.run(app, host='0.0.0.0', port=settings.PORT)
