import pytest

from conftest import spot_payload
from fotospots.db.models.spot import BestTime, Category, Region
from fotospots.schemas.spot import validate_spot


def test_valid_payload_is_accepted():
    result = validate_spot(spot_payload())

    assert result.ok
    assert result.field_errors == {}
    assert result.value.region is Region.schleswig_holstein
    assert result.value.best_time is BestTime.evening
    assert not result.value.is_spam


@pytest.mark.parametrize(
    "overrides, field",
    [
        ({"name": ""}, "name"),
        ({"name": "x" * 201}, "name"),
        ({"region": "Bayern"}, "region"),
        ({"latitude": 91}, "latitude"),
        ({"longitude": -180.5}, "longitude"),
        ({"description": ""}, "description"),
        ({"description": "x" * 2001}, "description"),
        ({"best_time": "noon"}, "best_time"),
        ({"equipment": "x" * 501}, "equipment"),
        ({"photo_tips": "x" * 1001}, "photo_tips"),
        ({"categories": ["Berge"]}, "categories.0"),
        ({"photos": ["https://x/a.jpg", "not a url"]}, "photos.1"),
        ({"photos": [f"https://x/{i}.jpg" for i in range(6)]}, "photos"),
    ],
)
def test_violations_are_reported_per_field(overrides, field):
    result = validate_spot(spot_payload(**overrides))

    assert not result.ok
    assert field in result.field_errors


def test_missing_required_fields_each_get_one_message():
    result = validate_spot({})

    assert not result.ok
    assert set(result.field_errors) == {
        "name",
        "region",
        "latitude",
        "longitude",
        "description",
    }
    assert result.field_errors["name"] == "Name ist erforderlich"
    assert result.field_errors["region"] == "Bitte eine Region auswählen"


def test_latitude_message_is_german():
    result = validate_spot(spot_payload(latitude=91))
    assert result.field_errors["latitude"] == "Breitengrad muss zwischen -90 und 90 liegen"


def test_non_object_candidate_does_not_raise():
    result = validate_spot(["not", "an", "object"])

    assert not result.ok
    assert "body" in result.field_errors


def test_blank_optional_fields_become_none():
    result = validate_spot(
        spot_payload(best_time="", equipment="", photo_tips="", cover_photo="")
    )

    assert result.ok
    assert result.value.best_time is None
    assert result.value.equipment is None
    assert result.value.photo_tips is None
    assert result.value.cover_photo is None


def test_duplicate_categories_collapse():
    result = validate_spot(spot_payload(categories=["Wald", "Küste", "Wald"]))
    assert result.value.categories == [Category.wald, Category.kueste]


def test_numeric_strings_from_the_form_are_coerced():
    result = validate_spot(spot_payload(latitude="53.5511", longitude="9.9937"))

    assert result.ok
    assert result.value.latitude == pytest.approx(53.5511)


def test_filled_honeypot_is_flagged_not_rejected():
    result = validate_spot(spot_payload(website="http://spam.example"))

    assert result.ok
    assert result.value.is_spam


def test_cover_photo_defaults_to_first_photo():
    value = validate_spot(
        spot_payload(photos=["https://x/a.jpg", "https://x/b.jpg"])
    ).value
    assert value.resolved_cover_photo() == "https://x/a.jpg"

    explicit = validate_spot(
        spot_payload(
            photos=["https://x/a.jpg", "https://x/b.jpg"], cover_photo="https://x/b.jpg"
        )
    ).value
    assert explicit.resolved_cover_photo() == "https://x/b.jpg"

    none = validate_spot(spot_payload(photos=[])).value
    assert none.resolved_cover_photo() is None


def test_cover_photo_must_be_one_of_the_photos():
    result = validate_spot(
        spot_payload(photos=["https://x/a.jpg"], cover_photo="https://evil/z.jpg")
    )

    assert not result.ok
    assert result.field_errors == {
        "cover_photo": "Titelbild muss eines der Fotos sein"
    }


def test_cover_photo_without_photos_is_rejected():
    result = validate_spot(spot_payload(photos=[], cover_photo="https://x/a.jpg"))
    assert result.field_errors["cover_photo"] == "Titelbild muss eines der Fotos sein"


def test_malformed_cover_url_keeps_the_url_message():
    result = validate_spot(spot_payload(cover_photo="kein-link"))
    assert result.field_errors == {"cover_photo": "Ungültige Titelbild-URL"}


@pytest.mark.parametrize(
    "url",
    [
        "https://x.de",
        "https://cdn.example/Foto.JPG?w=1200&h=800",
        "http://localhost:8000/storage/spot-photos/f/1.jpg",
    ],
)
def test_photo_urls_are_kept_as_submitted(url):
    value = validate_spot(spot_payload(photos=[url], cover_photo=url)).value

    assert value.photo_urls() == [url]
    assert value.resolved_cover_photo() == url


@pytest.mark.parametrize("url", ["ftp://x/a.jpg", "/relative/a.jpg", 42])
def test_non_http_photo_urls_are_rejected(url):
    result = validate_spot(spot_payload(photos=[url]))
    assert result.field_errors == {"photos.0": "Ungültige Foto-URL"}
