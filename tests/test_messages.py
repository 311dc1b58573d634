"""Tests des messages de validation et des indications de main."""

from shuwen.domain.entities import BirthRecord
from shuwen.domain.messages import (
    MESSAGES,
    can_submit,
    error_text,
    handprint_hint,
    validate_record,
)


def test_empty_record_requires_gender_and_birth():
    errors = validate_record(BirthRecord())
    assert errors == ["GENDER_REQUIRED", "BIRTH_REQUIRED"]
    assert not can_submit(BirthRecord())


def test_invalid_birth_blocks_submission():
    record = BirthRecord(gender="male", birth_solar="1990-02-30")
    assert validate_record(record) == ["BIRTH_INVALID"]
    assert not can_submit(record)


def test_time_errors_do_not_block_submission():
    """Teste que l'heure reste optionnelle: les erreurs d'heure ne bloquent pas."""
    base = {"gender": "female", "birth_solar": "1990-05-17"}
    assert validate_record(BirthRecord(**base, time_mode="branch")) == ["BRANCH_REQUIRED"]
    assert validate_record(BirthRecord(**base, time_mode="exact")) == ["TIME_REQUIRED"]
    record = BirthRecord(**base, time_mode="exact", time_exact="25:00")
    assert validate_record(record) == ["TIME_INVALID"]
    assert can_submit(record)


def test_error_text_and_hints():
    assert error_text("URL_INVALID") == MESSAGES["errors"]["URL_INVALID"]
    assert error_text("NOPE") == "NOPE"
    assert handprint_hint("male") == "你是男生 → 蓋左手印"
    assert handprint_hint("female") == "你是女生 → 蓋右手印"
    assert handprint_hint(None) == "提醒：男左女右"
