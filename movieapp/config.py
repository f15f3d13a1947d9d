from typing import Optional
from pydantic_settings import BaseSettings
from pydantic import ConfigDict


class Settings(BaseSettings):
    MOVIE_API_URL: str = 'https://moviesdatabase.p.rapidapi.com'
    MOVIE_API_HOST: str = 'moviesdatabase.p.rapidapi.com'
    STREAMING_API_URL: str = 'https://streaming-availability.p.rapidapi.com'
    STREAMING_API_HOST: str = 'streaming-availability.p.rapidapi.com'
    RAPID_API_KEY: str = ''
    STREAMING_COUNTRY: str = 'us'

    PORT: int = 8080
    HTTP_TIMEOUT: float = 10.0
    FETCH_CONCURRENCY: int = 5

    REDIS_URL: Optional[str] = None
    CACHE_TTL: Optional[int] = None
    CACHE_PARTIAL_RESULTS: bool = False

    LOG_LEVEL: str = 'INFO'

    model_config = ConfigDict(
        env_file=".env"
    )


settings = Settings()
