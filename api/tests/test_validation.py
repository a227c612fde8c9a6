import pytest
from fastapi import HTTPException
from pydantic import ValidationError

from core import validation
from lyrics.schemas import LyricCreate, LyricUpdate, to_fields
from performers.schemas import PerformerWrite


@pytest.mark.parametrize("raw, expected", [("7", 7), (" 12 ", 12), (3, 3), ("+5", 5)])
def test_parse_id_accepts_positive_integers(raw, expected):
    assert validation.parse_id(raw, label="lyric") == expected


@pytest.mark.parametrize("raw", ["0", "-1", "abc", "1.5", "", None, True])
def test_parse_id_rejects_everything_else(raw):
    with pytest.raises(HTTPException) as exc_info:
        validation.parse_id(raw, label="lyric")
    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Invalid lyric id."


def test_bool_like_is_permissive():
    assert validation.bool_like("TRUE") is True
    assert validation.bool_like(" false ") is False
    assert validation.bool_like(True) is True
    assert validation.bool_like("yes") == "yes"
    assert validation.bool_like(1) == 1


def test_performer_name_is_trimmed():
    payload = PerformerWrite.model_validate({"name": "  Nirvana  ", "genre": "  "})
    assert payload.name == "Nirvana"
    assert payload.genre is None


@pytest.mark.parametrize("name", ["", "   ", "x" * 101, None, 42])
def test_performer_name_rejections(name):
    with pytest.raises(ValidationError):
        PerformerWrite.model_validate({"name": name})


def test_performer_name_at_limit_is_accepted():
    assert PerformerWrite.model_validate({"name": "x" * 100}).name == "x" * 100


def _lyric(**overrides):
    body = {
        "performerId": 1,
        "songTitle": "Smells Like Teen Spirit",
        "words": "Here we are now",
        "language": "en",
    }
    body.update(overrides)
    return body


def test_lyric_create_normalizes_optional_fields():
    payload = LyricCreate.model_validate(
        _lyric(spotLink="  ", classic="True", era=1991, popularity="87", performerId="3")
    )
    fields = to_fields(payload)

    assert fields["performerId"] == 3
    assert fields["spotLink"] is None
    assert fields["classic"] is True
    assert fields["era"] == "1991"
    assert fields["popularity"] == 87
    assert fields["imageUrl"] is None


def test_lyric_create_passes_unknown_classic_values_through():
    payload = LyricCreate.model_validate(_lyric(classic="sometimes"))
    assert payload.classic == "sometimes"


@pytest.mark.parametrize(
    "overrides",
    [
        {"words": "w" * 501},
        {"songTitle": "t" * 101},
        {"songTitle": "   "},
        {"language": ""},
        {"performerId": 0},
        {"performerId": "abc"},
        {"performerId": 2.5},
    ],
)
def test_lyric_create_rejections(overrides):
    with pytest.raises(ValidationError):
        LyricCreate.model_validate(_lyric(**overrides))


def test_lyric_create_requires_all_required_fields():
    with pytest.raises(ValidationError):
        LyricCreate.model_validate({"songTitle": "Only a title"})


def test_lyric_update_tracks_explicit_fields():
    payload = LyricUpdate.model_validate({"words": " new words ", "spotLink": None})

    assert to_fields(payload, only_set=True) == {"words": "new words", "spotLink": None}


def test_lyric_update_cannot_clear_required_fields():
    with pytest.raises(ValidationError) as exc_info:
        LyricUpdate.model_validate({"songTitle": None})
    assert "songTitle cannot be null." in str(exc_info.value)


@pytest.mark.parametrize("raw", ["99999999999999999999", 2**63, str(2**63)])
def test_parse_id_rejects_ids_wider_than_64_bits(raw):
    with pytest.raises(HTTPException):
        validation.parse_id(raw, label="lyric")


def test_parse_id_accepts_largest_64_bit_id():
    assert validation.parse_id(str(validation.MAX_ID), label="lyric") == validation.MAX_ID


@pytest.mark.parametrize(
    "overrides",
    [
        {"performerId": 2**63},
        {"popularity": 2**31},
        {"popularity": -(2**31) - 1},
        {"classic": {}},
        {"classic": ["yes"]},
    ],
)
def test_lyric_values_must_fit_their_columns(overrides):
    with pytest.raises(ValidationError):
        LyricCreate.model_validate(_lyric(**overrides))


def test_lyric_update_rejects_oversized_performer_id():
    with pytest.raises(ValidationError):
        LyricUpdate.model_validate({"performerId": 2**63})


@pytest.mark.parametrize(
    "raw, expected",
    [
        (None, None),
        (True, True),
        (0, False),
        (1, True),
        (" YES ", True),
        ("on", True),
        ("t", True),
        ("Off", False),
        ("n", False),
        ("0", False),
    ],
)
def test_boolean_literal(raw, expected):
    assert validation.boolean_literal(raw) is expected


@pytest.mark.parametrize("raw", ["maybe", "", 2, 0.5])
def test_boolean_literal_rejects_other_values(raw):
    with pytest.raises(ValueError):
        validation.boolean_literal(raw)
