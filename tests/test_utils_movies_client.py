from movieapp.schemas.movies_schemas import Actor, Movie, StreamingOption
from movieapp.utils.utils_movies_client import (
    map_actors,
    map_streaming_options,
    map_to_movie,
    merge_movie,
)


# --- map_to_movie tests ---


def test_map_to_movie_nested_provider_record():
    item = {
        "id": "tt0111161",
        "titleText": {"text": "The Shawshank Redemption", "__typename": "TitleText"},
        "titleType": {"text": "Movie", "id": "movie"},
        "releaseYear": {"year": 1994, "endYear": None},
        "releaseDate": {"day": 14, "month": 10, "year": 1994},
        "genres": {"genres": [{"text": "Drama", "id": "Drama"}]},
        "primaryImage": {"url": "https://img.example/shawshank.jpg", "width": 1200},
        "ratingsSummary": {"aggregateRating": 9.3, "voteCount": 2800000},
    }
    movie = map_to_movie(item)
    assert movie.id == "tt0111161"
    assert movie.title_text == "The Shawshank Redemption"
    assert movie.title_type == "Movie"
    assert movie.release_year == 1994
    assert movie.release_date == "1994-10-14"
    assert movie.genres == ["Drama"]
    assert movie.primary_image.url == "https://img.example/shawshank.jpg"
    assert movie.ratings_summary.aggregate_rating == 9.3
    assert movie.ratings_summary.vote_count == 2800000
    assert movie.main_actors == []
    assert movie.streaming_options == []


def test_map_to_movie_flat_record():
    item = {
        "id": "tt1",
        "titleText": "Flat",
        "titleType": "movie",
        "releaseYear": 2001,
        "releaseDate": "2001-02-03",
        "genres": ["Comedy", "Drama"],
    }
    movie = map_to_movie(item)
    assert movie.title_text == "Flat"
    assert movie.release_year == 2001
    assert movie.release_date == "2001-02-03"
    assert movie.genres == ["Comedy", "Drama"]
    assert movie.primary_image is None
    assert movie.ratings_summary is None


def test_map_to_movie_partial_release_date_is_omitted():
    item = {
        "id": "tt2",
        "titleText": {"text": "Unreleased"},
        "releaseDate": {"day": None, "month": None, "year": 2030},
        "primaryImage": None,
        "ratingsSummary": {"aggregateRating": None, "voteCount": 0},
    }
    movie = map_to_movie(item)
    assert movie.release_date is None
    assert movie.ratings_summary is None
    dumped = movie.model_dump(by_alias=True, exclude_none=True)
    assert "releaseDate" not in dumped
    assert "ratingsSummary" not in dumped
    assert "primaryImage" not in dumped


# --- map_actors tests ---


def test_map_actors_handles_flat_and_nested_entries():
    items = [
        {"name": "Tim Robbins"},
        {"node": {"name": {"id": "nm0000151", "nameText": {"text": "Morgan Freeman"}}}},
        {"node": {"name": {"id": "nm0", "nameText": None}}},
    ]
    assert map_actors(items) == [Actor(name="Tim Robbins"), Actor(name="Morgan Freeman")]


def test_map_actors_none_results():
    assert map_actors(None) == []


# --- map_streaming_options tests ---


def test_map_streaming_options_flat_envelope():
    payload = {"results": [
        {"service": "netflix", "url": "https://n.example/1", "quality": "uhd"},
        {"service": "hulu", "url": "https://h.example/1", "price": ""},
    ]}
    options = map_streaming_options(payload)
    assert [o.service for o in options] == ["netflix", "hulu"]
    assert options[0].quality == "uhd"
    assert options[1].price is None


def test_map_streaming_options_provider_layout_filters_country():
    payload = {"streamingOptions": {
        "us": [
            {"service": {"id": "netflix", "name": "Netflix"}, "type": "subscription",
             "link": "https://n.example/us", "quality": "hd"},
            {"service": {"id": "apple", "name": "Apple TV"}, "type": "rent",
             "link": "https://a.example/us", "price": {"amount": "3.99", "formatted": "3.99 USD"}},
        ],
        "gb": [
            {"service": {"id": "netflix", "name": "Netflix"}, "link": "https://n.example/gb"},
        ],
    }}
    options = map_streaming_options(payload, "US")
    assert options == [
        StreamingOption(service="Netflix", url="https://n.example/us", quality="hd"),
        StreamingOption(service="Apple TV", url="https://a.example/us", price="3.99 USD"),
    ]


def test_map_streaming_options_without_country_keeps_response_order():
    payload = {"streamingOptions": {
        "us": [{"service": {"id": "netflix"}, "link": "https://n.example/us"}],
        "gb": [{"service": {"id": "now"}, "link": "https://now.example/gb"}],
    }}
    options = map_streaming_options(payload)
    assert [o.url for o in options] == ["https://n.example/us", "https://now.example/gb"]
    assert options[0].service == "netflix"


def test_map_streaming_options_missing_country_is_empty():
    assert map_streaming_options({"streamingOptions": {"gb": []}}, "us") == []


# --- merge_movie tests ---


def test_merge_movie_assigns_disjoint_fields():
    base = Movie(id="tt1", title_text="Base", genres=["Drama"])
    actors = [Actor(name="A")]
    options = [StreamingOption(service="S", url="https://s.example")]
    merged = merge_movie(base, actors, options)
    assert merged.id == "tt1"
    assert merged.title_text == "Base"
    assert merged.genres == ["Drama"]
    assert merged.main_actors == actors
    assert merged.streaming_options == options
    # the base snapshot itself is left untouched
    assert base.main_actors == []


def test_map_to_movie_single_genre_string():
    movie = map_to_movie({"id": "tt1", "genres": "Drama"})
    assert movie.genres == ["Drama"]
