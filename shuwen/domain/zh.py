"""Normalisation des libellés chinois vers la forme traditionnelle.

Le moteur calendaire renvoie certains caractères en chinois simplifié ainsi que
des alias de mois/jours (腊月, 冬月, 廿, 卅). Tous les libellés affichés passent
par `to_traditional` avant d'être considérés comme définitifs.

Étapes (dans cet ordre, chacune étant un remplacement global):
1. table simplifié -> traditionnel
2. alias de mois lunaires -> mois numériques
3. alias numéraux -> numéraux explicites
"""

from __future__ import annotations

BASE_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    ("鸡", "雞"),
    ("马", "馬"),
    ("龙", "龍"),
    ("猪", "豬"),
    ("阴", "陰"),
    ("阳", "陽"),
    ("闰", "閏"),
)

MONTH_ALIAS_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    ("腊月", "十二月"),
    ("臘月", "十二月"),
    ("冬月", "十一月"),
)

DAY_ALIAS_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    ("廿", "二十"),
    ("卅", "三十"),
)


def _apply_all(text: str, replacements: tuple[tuple[str, str], ...]) -> str:
    result = text
    for source, target in replacements:
        result = result.replace(source, target)
    return result


def to_traditional(
    text: str,
    *,
    normalize_month_alias: bool = True,
    normalize_day_alias: bool = True,
) -> str:
    """Convertit un libellé vers la forme canonique traditionnelle.

    Args:
        text: Libellé brut (éventuellement issu du moteur calendaire).
        normalize_month_alias: Réécrit 腊月/臘月/冬月 en mois numériques.
        normalize_day_alias: Réécrit 廿/卅 en 二十/三十.

    Returns:
        str: Libellé normalisé. L'opération est idempotente.
    """
    result = _apply_all(text, BASE_REPLACEMENTS)
    if normalize_month_alias:
        result = _apply_all(result, MONTH_ALIAS_REPLACEMENTS)
    if normalize_day_alias:
        result = _apply_all(result, DAY_ALIAS_REPLACEMENTS)
    return result


def normalize(text: str) -> str:
    """Applique toutes les étapes de normalisation."""
    return to_traditional(text)
