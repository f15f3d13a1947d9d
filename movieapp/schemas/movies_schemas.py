from typing import List, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class PrimaryImage(_CamelModel):
    url: str


class RatingsSummary(_CamelModel):
    aggregate_rating: float
    vote_count: int


class Actor(_CamelModel):
    name: str


class StreamingOption(_CamelModel):
    service: str
    url: str
    price: Optional[str] = None
    quality: Optional[str] = None


class Movie(_CamelModel):
    id: str
    title_text: str = ''
    title_type: str = ''
    release_year: Optional[int] = None
    release_date: Optional[str] = None
    genres: List[str] = []
    primary_image: Optional[PrimaryImage] = None
    ratings_summary: Optional[RatingsSummary] = None
    main_actors: List[Actor] = []
    streaming_options: List[StreamingOption] = []


class ErrorResponse(BaseModel):
    detail: str
