"""Messages de validation et indications affichés par la couche de présentation."""

from __future__ import annotations

from shuwen.domain.entities import BirthRecord, Gender
from shuwen.domain.time_branches import is_branch_code, parse_clock

MESSAGES: dict[str, dict[str, str]] = {
    "errors": {
        "GENDER_REQUIRED": "請先選擇性別（用來提示手印）",
        "BIRTH_REQUIRED": "請先選擇生日",
        "BIRTH_INVALID": "生日格式不正確",
        "BRANCH_REQUIRED": "請選擇出生時辰，或改選「不知道」",
        "TIME_REQUIRED": "請輸入出生時間，或改選其他選項",
        "TIME_INVALID": "時間格式不正確",
        "URL_INVALID": "分享連結內容有誤，已改用預設值",
    },
    "hints": {
        "HANDPRINT_GENERIC": "提醒：男左女右",
        "HANDPRINT_MALE": "你是男生 → 蓋左手印",
        "HANDPRINT_FEMALE": "你是女生 → 蓋右手印",
        "NEED_TIME_FOR_PROFILE": "命宮／本命需出生時間或時辰（可先略過）",
    },
}


def error_text(code: str) -> str:
    """Retourne le texte d'erreur associé à `code` (ou le code lui-même)."""
    return MESSAGES["errors"].get(code, code)


def validate_record(record: BirthRecord) -> list[str]:
    """Liste les codes d'erreur de validation d'un enregistrement.

    Genre et date de naissance sont requis; l'heure est optionnelle mais doit
    être cohérente avec le mode choisi.
    """
    errors: list[str] = []
    if record.gender is None:
        errors.append("GENDER_REQUIRED")
    if not record.birth_solar:
        errors.append("BIRTH_REQUIRED")
    elif record.birth_date is None:
        errors.append("BIRTH_INVALID")

    if record.time_mode == "branch" and not is_branch_code(record.time_branch):
        errors.append("BRANCH_REQUIRED")
    elif record.time_mode == "exact":
        if not record.time_exact:
            errors.append("TIME_REQUIRED")
        elif parse_clock(record.time_exact) is None:
            errors.append("TIME_INVALID")
    return errors


def handprint_hint(gender: Gender | None) -> str:
    hints = MESSAGES["hints"]
    if gender == "male":
        return hints["HANDPRINT_MALE"]
    if gender == "female":
        return hints["HANDPRINT_FEMALE"]
    return hints["HANDPRINT_GENERIC"]


BLOCKING_ERRORS = frozenset({"GENDER_REQUIRED", "BIRTH_REQUIRED", "BIRTH_INVALID"})


def can_submit(record: BirthRecord) -> bool:
    """Un enregistrement est soumissible dès que genre et date valide sont présents."""
    return not BLOCKING_ERRORS.intersection(validate_record(record))
