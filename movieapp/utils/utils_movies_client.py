from typing import Any, Dict, List, Optional
from ..schemas.movies_schemas import (
    Actor,
    Movie,
    PrimaryImage,
    RatingsSummary,
    StreamingOption,
)


def _text(value: Any, key: str = 'text') -> Any:
    """
    Unwrap a `{key: value}` node as returned by the metadata provider.
    Plain values are returned unchanged.
    """
    if isinstance(value, dict):
        return value.get(key)
    return value


def _release_date(value: Any) -> Optional[str]:
    """
    Normalise a release date to `YYYY-MM-DD`.

    :param value: Either an already formatted string or a `{day, month, year}` node.
    :return: The ISO date, or None when any part of the date is missing.
    """
    if value is None or isinstance(value, str):
        return value or None
    year, month, day = value.get('year'), value.get('month'), value.get('day')
    if not (year and month and day):
        return None
    return f"{int(year):04d}-{int(month):02d}-{int(day):02d}"


def _genres(value: Any) -> List[str]:
    if isinstance(value, dict):
        value = value.get('genres') or []
    if isinstance(value, str):
        value = [value]
    return [g for g in (_text(v) for v in value or []) if g]


def map_to_movie(item: Dict[str, Any]) -> Movie:
    """
    Map the `results` record of a base_info lookup to a Movie.
    Both the flat record shape and the provider's nested node shape are accepted.

    :param item: Dictionary holding the base movie record.
    :return: Movie with base fields populated and empty actor/streaming lists.
    """
    image = item.get('primaryImage')
    image_url = _text(image, 'url')
    ratings = item.get('ratingsSummary')
    if ratings and ratings.get('aggregateRating') is not None:
        ratings_summary = RatingsSummary(
            aggregate_rating=ratings['aggregateRating'],
            vote_count=ratings.get('voteCount') or 0,
        )
    else:
        ratings_summary = None

    return Movie(
        id=item['id'],
        title_text=_text(item.get('titleText')) or '',
        title_type=_text(item.get('titleType')) or '',
        release_year=_text(item.get('releaseYear'), 'year'),
        release_date=_release_date(item.get('releaseDate')),
        genres=_genres(item.get('genres')),
        primary_image=PrimaryImage(url=image_url) if image_url else None,
        ratings_summary=ratings_summary,
    )


def _actor_name(item: Dict[str, Any]) -> Optional[str]:
    name = item.get('name')
    if isinstance(name, str):
        return name
    node = item.get('node') or {}
    return _text((node.get('name') or {}).get('nameText'))


def map_actors(items: Optional[List[Dict[str, Any]]]) -> List[Actor]:
    """
    Map a main_actors result list to Actor values, skipping unnamed entries.

    :param items: List of actor records, flat (`name`) or nested (`node.name.nameText`).
    :return: List of Actor objects in upstream order.
    """
    names = [_actor_name(item) for item in items or []]
    return [Actor(name=n) for n in names if n]


def _flat_option(item: Dict[str, Any]) -> StreamingOption:
    return StreamingOption(
        service=item['service'],
        url=item['url'],
        price=item.get('price') or None,
        quality=item.get('quality') or None,
    )


def _provider_option(item: Dict[str, Any]) -> StreamingOption:
    service = item['service']
    return StreamingOption(
        service=service.get('name') or service['id'],
        url=item['link'],
        price=_text(item.get('price'), 'formatted'),
        quality=item.get('quality') or None,
    )


def map_streaming_options(
    payload: Dict[str, Any],
    country: Optional[str] = None
) -> List[StreamingOption]:
    """
    Map a streaming-availability show payload to StreamingOption values.

    Accepts the flat `{"results": [...]}` envelope as well as the provider's
    `{"streamingOptions": {<country>: [...]}}` layout. When no country is given
    every country's options are returned in response order.

    :param payload: Decoded JSON body of the show lookup.
    :param country: Optional lowercase country code to restrict the options to.
    :return: List of StreamingOption objects in upstream order.
    """
    if 'results' in payload:
        return [_flat_option(item) for item in payload['results'] or []]

    by_country = payload.get('streamingOptions') or {}
    if country:
        groups = [by_country.get(country.lower()) or []]
    else:
        groups = list(by_country.values())
    return [_provider_option(item) for group in groups for item in group]


def merge_movie(
    base: Movie,
    actors: List[Actor],
    streaming_options: List[StreamingOption]
) -> Movie:
    """
    Combine the three upstream lookups for one title into a single Movie.
    Each source owns disjoint fields, so base fields are kept verbatim.
    """
    return base.model_copy(update={
        'main_actors': list(actors),
        'streaming_options': list(streaming_options),
    })
