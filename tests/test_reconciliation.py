"""Tests du moteur de réconciliation (lien, stockage, éditions, sérialisation)."""

import json

import pytest

from shuwen.domain.entities import DEFAULT_RECORD, BirthRecord
from shuwen.domain.reconciliation import (
    apply_edit,
    initialize,
    read_link_params,
    read_stored_record,
    serialize,
    share_params,
    share_url,
)

FULL_LINK = {"g": "m", "b": "1990-05-17", "tm": "br", "br": "wu"}
STORED = json.dumps({"gender": "female", "birthSolar": "1980-01-01", "timeMode": "unknown"})


def test_initialize_from_link():
    record = initialize(FULL_LINK, None)
    assert record.gender == "male"
    assert record.birth_solar == "1990-05-17"
    assert record.time_mode == "branch"
    assert record.time_branch == "wu"
    assert record.time_exact is None


def test_link_with_fields_wins_over_storage():
    """Teste que le stockage est ignoré dès qu'un champ du lien est reconnu."""
    record = initialize({"g": "m"}, STORED)
    assert record.gender == "male"
    assert record.birth_solar is None


def test_storage_applies_without_link_fields():
    for link in (None, {}, {"g": ""}, {"utm_source": "line"}):
        record = initialize(link, STORED)
        assert record.gender == "female"
        assert record.birth_solar == "1980-01-01"


def test_rejected_link_values_fall_back_to_storage():
    """Teste qu'une valeur mal formée est écartée champ par champ."""
    result = read_link_params({"g": "x", "b": "1990-02-30", "tm": "ex", "t": "10:30"})
    assert result.rejected == ["g", "b"]
    assert result.fields == {"time_mode": "exact", "time_exact": "10:30"}

    record = initialize({"g": "x"}, STORED)
    assert record.gender == "female"


def test_link_list_values_and_whitespace():
    result = read_link_params({"g": [" f "], "br": []})
    assert result.fields == {"gender": "female"}


def test_corrupted_storage_gives_defaults():
    assert initialize(None, "{not json") == DEFAULT_RECORD
    assert initialize(None, "[1, 2]") == DEFAULT_RECORD
    assert read_stored_record("") == {}


def test_storage_drops_invalid_fields_only():
    raw = json.dumps({"gender": "robot", "birthSolar": "1990-05-17", "tz": "Mars/Base"})
    assert read_stored_record(raw) == {"birth_solar": "1990-05-17"}


def test_initialize_clears_inactive_time_payloads():
    """Teste l'exclusion mutuelle des variantes d'heure à l'initialisation."""
    raw = json.dumps({"timeMode": "exact", "timeExact": "10:30", "timeBranch": "wu"})
    record = initialize(None, raw)
    assert record.time_exact == "10:30"
    assert record.time_branch is None

    record = initialize({"tm": "u", "br": "wu", "t": "10:30"}, None)
    assert record.time_branch is None
    assert record.time_exact is None


def test_time_mode_edits_clear_other_payloads():
    record = BirthRecord(time_mode="branch", time_branch="wu")
    record = apply_edit(record, "time_mode", "exact")
    assert record.time_branch is None
    record = apply_edit(record, "timeExact", "09:15")
    assert record.time_exact == "09:15"
    record = apply_edit(record, "timeMode", "unknown")
    assert (record.time_branch, record.time_exact) == (None, None)


def test_edit_of_payload_keeps_mode():
    record = BirthRecord(time_mode="branch", time_branch="wu")
    edited = apply_edit(record, "time_branch", "zi")
    assert edited.time_mode == "branch"
    assert edited.time_branch == "zi"
    assert record.time_branch == "wu"


def test_edit_validation():
    """Teste le repli sur la valeur par défaut du champ pour une valeur invalide."""
    record = BirthRecord(gender="male", tz="Asia/Tokyo")
    assert apply_edit(record, "gender", "robot").gender is None
    assert apply_edit(record, "gender", "").gender is None
    assert apply_edit(record, "tz", "Mars/Base").tz == "Asia/Taipei"
    assert apply_edit(record, "time_mode", "").time_mode == "unknown"
    with pytest.raises(KeyError):
        apply_edit(record, "favourite_colour", "red")


def test_share_params_omit_birth_unless_opted_in():
    record = initialize(FULL_LINK, None)
    assert share_params(record) == {"g": "m", "tm": "br", "br": "wu"}
    assert share_params(record, include_sensitive=True)["b"] == "1990-05-17"
    assert share_params(DEFAULT_RECORD) == {"tm": "u"}


def test_share_url():
    record = initialize(FULL_LINK, None)
    assert share_url(record) == "/?g=m&tm=br&br=wu"
    assert share_url(record, True, "/form").startswith("/form?g=m&tm=br&br=wu&b=1990-05-17")


def test_storage_form_round_trip():
    """Teste que la forme persistée reconstruit le même enregistrement."""
    record = BirthRecord(
        gender="female",
        birth_solar="1990-05-17",
        time_mode="exact",
        time_exact="10:30",
        tz="Asia/Tokyo",
    )
    stored = serialize(record).storage_form
    assert json.loads(stored)["birthSolar"] == "1990-05-17"
    assert "timeBranch" not in json.loads(stored)
    assert initialize(None, stored) == record


def test_share_form_round_trip_without_birth():
    record = initialize({"g": "f", "tm": "ex", "t": "23:30"}, None)
    assert initialize(serialize(record).share_form, None) == record


def test_birth_mode_alone_does_not_override_storage():
    """Teste que `bm` (réservé) ne rend pas le lien prioritaire."""
    stored = {"gender": "female", "birthSolar": "1980-01-01"}
    record = initialize({"bm": "s"}, stored)
    assert record.gender == "female"
    assert record.birth_solar == "1980-01-01"
    assert not read_link_params({"bm": "l"}).is_authoritative
    assert read_link_params({"bm": "l", "g": "m"}).is_authoritative


def test_link_rejects_non_ascii_digits():
    """Teste que des chiffres pleine chasse ne passent pas dans le lien."""
    result = read_link_params({"b": "１９９０-０６-１５", "t": "１２:３０"})
    assert result.fields == {}
    assert result.rejected == ["b", "t"]
