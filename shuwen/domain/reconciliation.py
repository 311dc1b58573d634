"""
Moteur de réconciliation de l'état du formulaire de naissance.

Objectif du module
------------------
- Fusionner les trois sources d'un enregistrement: paramètres du lien de
  partage, copie persistée, éditions en direct.
- Appliquer l'exclusion mutuelle des variantes d'heure à chaque édition.
- Sérialiser l'enregistrement sous forme persistée (JSON complet) et sous
  forme de lien de partage (clés courtes, date de naissance en opt-in).

Les opérations pures (`initialize`, `apply_edit`, `serialize`) ne détiennent
aucun état; `FormSession` les orchestre autour d'un `RecordStore`.
"""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import date
from typing import Any
from urllib.parse import urlencode

import structlog

from shuwen.domain.derivation import RitualFactsService
from shuwen.domain.effective_day import is_known_timezone, parse_birth_date
from shuwen.domain.entities import DEFAULT_RECORD, BirthRecord, DerivedFacts
from shuwen.domain.messages import can_submit
from shuwen.domain.submission import LoadingIndicator
from shuwen.domain.time_branches import is_branch_code, parse_clock
from shuwen.infra.record_store import RecordStore

log = structlog.get_logger(__name__)

STORAGE_KEY = "lunar-ritual-form"

# Clés courtes du lien de partage, par champ de l'enregistrement
LINK_KEYS: dict[str, str] = {
    "gender": "g",
    "birth_solar": "b",
    "birth_mode": "bm",
    "time_mode": "tm",
    "time_branch": "br",
    "time_exact": "t",
}

GENDER_CODES = {"m": "male", "f": "female"}
BIRTH_MODE_CODES = {"s": "solar", "l": "lunar"}
TIME_MODE_CODES = {"u": "unknown", "br": "branch", "ex": "exact"}
GENDER_TO_CODE = {v: k for k, v in GENDER_CODES.items()}
TIME_MODE_TO_CODE = {v: k for k, v in TIME_MODE_CODES.items()}

# Champ de charge utile propre à chaque variante d'heure
TIME_PAYLOADS: dict[str, tuple[str, ...]] = {
    "unknown": (),
    "branch": ("time_branch",),
    "exact": ("time_exact",),
}
ALL_TIME_PAYLOADS = ("time_branch", "time_exact")

# Champs du lien qui ne suffisent pas à le rendre prioritaire sur le stockage
NON_AUTHORITATIVE_FIELDS = frozenset({"birth_mode"})

_FIELD_BY_KEY: dict[str, str] = {}
for _name, _info in BirthRecord.model_fields.items():
    _FIELD_BY_KEY[_name] = _name
    if _info.alias:
        _FIELD_BY_KEY[_info.alias] = _name


def resolve_field(key: str) -> str:
    """Retourne le nom de champ pour une clé snake_case ou camelCase.

    Raises:
        KeyError: si la clé ne correspond à aucun champ de `BirthRecord`.
    """
    try:
        return _FIELD_BY_KEY[key]
    except KeyError:
        raise KeyError(f"unknown_field:{key}") from None


def cleared_time_payloads(time_mode: str) -> dict[str, None]:
    """Charges utiles à vider pour que seule la variante `time_mode` reste active."""
    kept = TIME_PAYLOADS.get(time_mode, ())
    return {name: None for name in ALL_TIME_PAYLOADS if name not in kept}


# ---------------------------------------------------------------------------
# Validation champ par champ
# ---------------------------------------------------------------------------


def _one_of(*allowed: str) -> Callable[[Any], str]:
    def check(value: Any) -> str:
        if value not in allowed:
            raise ValueError(f"expected one of {allowed}, got {value!r}")
        return value

    return check


def _text(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"expected text, got {type(value).__name__}")
    return value


def _timezone(value: Any) -> str:
    if not isinstance(value, str) or not is_known_timezone(value):
        raise ValueError(f"unknown timezone {value!r}")
    return value


# Règles tolérantes (forme persistée et éditions): type et énumérations
_FIELD_RULES: dict[str, Callable[[Any], Any]] = {
    "gender": _one_of("male", "female"),
    "birth_mode": _one_of("solar", "lunar"),
    "birth_solar": _text,
    "time_mode": _one_of("unknown", "branch", "exact"),
    "time_branch": _text,
    "time_exact": _text,
    "tz": _timezone,
}


_NON_NULLABLE_FIELDS = ("birth_mode", "time_mode", "tz")


def _coerce_field(name: str, value: Any) -> Any:
    """Valide une valeur éditée; valeur vide -> None, invalide -> défaut du champ."""
    if value is None or value == "":
        if name in _NON_NULLABLE_FIELDS:
            return BirthRecord.model_fields[name].default
        return None
    try:
        return _FIELD_RULES[name](value)
    except ValueError as exc:
        log.info("record_field_defaulted", field=name, error=str(exc))
        return BirthRecord.model_fields[name].default


def _link_date(raw: str) -> str:
    if parse_birth_date(raw) is None:
        raise ValueError(f"invalid date {raw!r}")
    return raw


def _link_branch(raw: str) -> str:
    if not is_branch_code(raw):
        raise ValueError(f"unknown branch {raw!r}")
    return raw


def _link_clock(raw: str) -> str:
    if parse_clock(raw) is None:
        raise ValueError(f"invalid clock {raw!r}")
    return raw


def _link_code(codes: dict[str, str]) -> Callable[[str], str]:
    def parse(raw: str) -> str:
        if raw not in codes:
            raise ValueError(f"unknown code {raw!r}")
        return codes[raw]

    return parse


# Règles strictes du lien de partage
_LINK_PARSERS: dict[str, Callable[[str], str]] = {
    "gender": _link_code(GENDER_CODES),
    "birth_solar": _link_date,
    "birth_mode": _link_code(BIRTH_MODE_CODES),
    "time_mode": _link_code(TIME_MODE_CODES),
    "time_branch": _link_branch,
    "time_exact": _link_clock,
}


# ---------------------------------------------------------------------------
# Lecture des sources
# ---------------------------------------------------------------------------


@dataclass
class LinkReadResult:
    """Champs reconnus d'un lien de partage et clés courtes rejetées."""

    fields: dict[str, str] = field(default_factory=dict)
    rejected: list[str] = field(default_factory=list)

    @property
    def is_authoritative(self) -> bool:
        """Vrai si le lien porte un champ décisif (`bm`, réservé, ne compte pas)."""
        return any(name not in NON_AUTHORITATIVE_FIELDS for name in self.fields)


def read_link_params(params: Mapping[str, Any] | None) -> LinkReadResult:
    """Lit les paramètres courts d'un lien (`g`, `b`, `bm`, `tm`, `br`, `t`).

    Les valeurs vides sont ignorées; une valeur mal formée est écartée champ
    par champ (sa clé est listée dans `rejected`), jamais tout le lien.
    """
    result = LinkReadResult()
    if not params:
        return result
    for name, short in LINK_KEYS.items():
        raw = params.get(short)
        if isinstance(raw, list | tuple):
            raw = raw[0] if raw else None
        if raw is None:
            continue
        raw = str(raw).strip()
        if not raw:
            continue
        try:
            result.fields[name] = _LINK_PARSERS[name](raw)
        except ValueError:
            result.rejected.append(short)
    return result


def read_stored_record(raw: str | Mapping[str, Any] | None) -> dict[str, Any]:
    """Décode la forme persistée; JSON illisible -> aucun enregistrement stocké."""
    if raw is None or raw == "":
        return {}
    data: Any = raw
    if isinstance(raw, str):
        try:
            data = json.loads(raw)
        except ValueError as exc:
            log.warning("stored_record_unparseable", error=str(exc))
            return {}
    if not isinstance(data, Mapping):
        log.warning("stored_record_unparseable", error="not a JSON object")
        return {}

    fields: dict[str, Any] = {}
    for key, value in data.items():
        name = _FIELD_BY_KEY.get(key)
        if name is None or value is None:
            continue
        try:
            fields[name] = _FIELD_RULES[name](value)
        except ValueError as exc:
            log.info("stored_field_dropped", field=name, error=str(exc))
    return fields


# ---------------------------------------------------------------------------
# Opérations pures
# ---------------------------------------------------------------------------


def initialize(
    link_params: Mapping[str, Any] | None,
    stored_record: str | Mapping[str, Any] | None,
    defaults: BirthRecord = DEFAULT_RECORD,
) -> BirthRecord:
    """Construit l'enregistrement initial.

    Un lien portant au moins un champ reconnu et non vide (hors `bm`) l'emporte
    (stockage ignoré); sinon la copie persistée est appliquée sur les valeurs par défaut.
    """
    link = read_link_params(link_params)
    if link.is_authoritative:
        overlay: dict[str, Any] = link.fields
    else:
        overlay = read_stored_record(stored_record)
    record = defaults.model_copy(update=overlay)
    return record.model_copy(update=cleared_time_payloads(record.time_mode))


def apply_edit(prev: BirthRecord, key: str, value: Any) -> BirthRecord:
    """Applique une édition de champ et l'exclusion mutuelle des variantes d'heure.

    Changer `time_mode` vide les charges utiles des deux autres variantes
    ("unknown" vide la branche et l'heure exacte). Toute autre édition ne
    touche que le champ visé.
    """
    name = resolve_field(key)
    value = _coerce_field(name, value)
    update: dict[str, Any] = {name: value}
    if name == "time_mode":
        update.update(cleared_time_payloads(value))
    return prev.model_copy(update=update)


@dataclass(frozen=True)
class SerializedRecord:
    storage_form: str
    share_form: dict[str, str]


def share_params(record: BirthRecord, include_sensitive: bool = False) -> dict[str, str]:
    """Paramètres courts du lien de partage (date de naissance en opt-in)."""
    params: dict[str, str] = {}
    if record.gender in GENDER_TO_CODE:
        params[LINK_KEYS["gender"]] = GENDER_TO_CODE[record.gender]
    params[LINK_KEYS["time_mode"]] = TIME_MODE_TO_CODE.get(record.time_mode, "u")
    if record.time_mode == "branch" and record.time_branch:
        params[LINK_KEYS["time_branch"]] = record.time_branch
    if record.time_mode == "exact" and record.time_exact:
        params[LINK_KEYS["time_exact"]] = record.time_exact
    if include_sensitive and record.birth_solar:
        params[LINK_KEYS["birth_solar"]] = record.birth_solar
    return params


def serialize(record: BirthRecord, include_sensitive: bool = False) -> SerializedRecord:
    """Sérialise l'enregistrement en forme persistée et forme de partage."""
    return SerializedRecord(
        storage_form=record.model_dump_json(by_alias=True, exclude_none=True),
        share_form=share_params(record, include_sensitive),
    )


def share_url(record: BirthRecord, include_sensitive: bool = False, path: str = "/") -> str:
    query = urlencode(share_params(record, include_sensitive))
    return f"{path}?{query}" if query else path


# ---------------------------------------------------------------------------
# Session stateful
# ---------------------------------------------------------------------------


class FormSession:
    """Session d'édition: brouillon, enregistrement validé et persistance.

    Responsabilités:
    - Initialiser le brouillon depuis le lien ou le stockage.
    - Persister la forme stockée à chaque édition; un échec d'écriture bascule
      la session en mémoire seule, sans jamais lever.
    - Valider (`submit`) le brouillon et invalider les faits calculés.
    """

    def __init__(
        self,
        store: RecordStore,
        link_params: Mapping[str, Any] | None = None,
        *,
        storage_key: str = STORAGE_KEY,
        defaults: BirthRecord = DEFAULT_RECORD,
        loading: LoadingIndicator | None = None,
    ):
        self.store = store
        self.storage_key = storage_key
        self.defaults = defaults
        self.loading = loading
        self.persistent = True
        self._generation = 0
        self._facts_cache: tuple[int, date, DerivedFacts] | None = None

        link = read_link_params(link_params)
        self.notices: list[str] = ["URL_INVALID"] if link.rejected else []
        stored = None if link.is_authoritative else self._load()
        self.record = initialize(link_params, stored, defaults)
        self.committed = self.record
        self._persist()

    def _load(self) -> str | None:
        try:
            return self.store.get(self.storage_key)
        except Exception as exc:
            log.warning("record_store_read_failed", key=self.storage_key, error=repr(exc))
            return None

    def _persist(self) -> None:
        if not self.persistent:
            return
        try:
            self.store.set(self.storage_key, serialize(self.record).storage_form)
        except Exception as exc:
            log.warning("record_store_write_failed", key=self.storage_key, error=repr(exc))
            self.persistent = False

    def update_field(self, key: str, value: Any) -> BirthRecord:
        """Édite un champ du brouillon puis persiste (voir `apply_edit`)."""
        self.record = apply_edit(self.record, key, value)
        self._persist()
        return self.record

    def submit(self, include_sensitive: bool = False) -> dict[str, str] | None:
        """Valide le brouillon s'il est complet; retourne la forme de partage.

        Retourne None (sans rien changer) si genre ou date valide manquent.
        """
        if not can_submit(self.record):
            return None
        self.committed = self.record
        self._generation += 1
        self._facts_cache = None
        if self.loading is not None:
            self.loading.start()
        return share_params(self.committed, include_sensitive)

    def facts(self, service: RitualFactsService, today: date) -> DerivedFacts:
        """Faits de l'enregistrement validé, recalculés après chaque validation."""
        cached = self._facts_cache
        if cached is not None and cached[0] == self._generation and cached[1] == today:
            return cached[2]
        facts = service.derive(self.committed, today)
        self._facts_cache = (self._generation, today, facts)
        return facts

    def share_url(self, include_birth: bool = False, path: str = "/") -> str:
        return share_url(self.record, include_birth, path)

    def reset(self) -> BirthRecord:
        """Supprime la copie persistée et revient aux valeurs par défaut."""
        if self.loading is not None:
            self.loading.cancel()
        try:
            self.store.delete(self.storage_key)
        except Exception as exc:
            log.warning("record_store_delete_failed", key=self.storage_key, error=repr(exc))
        self.record = self.defaults
        self.committed = self.defaults
        self.notices = []
        self._generation += 1
        self._facts_cache = None
        return self.record
