"""
Calcule en ligne de commande les faits d'un 疏文 pour une date de naissance.

Exemples:
    python -m shuwen.scripts.facts_cli --gender female --birth 1990-05-17 --branch wu
    python -m shuwen.scripts.facts_cli --birth 2000-01-01 --time 23:30 --json
    python -m shuwen.scripts.facts_cli --today
"""

from __future__ import annotations

import argparse
import json

from shuwen.core.container import build_oracle, container
from shuwen.core.logging import setup_logging
from shuwen.domain.derivation import RitualFactsService
from shuwen.domain.messages import error_text, handprint_hint, validate_record
from shuwen.domain.reconciliation import apply_edit

FIELD_LABELS = {
    "lunar_year": "農曆年",
    "lunar_birthday": "農曆生日",
    "zodiac": "生肖",
    "nominal_age_formula": "虛歲",
    "time_branch_label": "時辰",
    "handedness": "手印",
}


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Faits calendaires pour remplir un 疏文")
    parser.add_argument("--gender", choices=["male", "female"], default=None)
    parser.add_argument("--birth", default=None, help="Date solaire YYYY-MM-DD")
    time_group = parser.add_mutually_exclusive_group()
    time_group.add_argument("--branch", default=None, help="Code de 時辰 (zi, chou, ...)")
    time_group.add_argument("--time", default=None, help="Heure exacte HH:MM")
    parser.add_argument("--oracle", choices=["lunar", "fake"], default=None)
    parser.add_argument("--today", action="store_true", help="Affiche les faits du jour")
    parser.add_argument("--json", action="store_true", help="Sortie JSON")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(container.settings.LOG_LEVEL)
    oracle = build_oracle(args.oracle) if args.oracle else container.oracle
    service = RitualFactsService(oracle)
    today = container.effective_today()

    if args.today:
        facts = service.today_facts(today)
        if args.json:
            print(facts.model_dump_json())
        else:
            print(
                f"{facts.effective_date}: {facts.lunar_month_day} "
                f"{facts.ganzhi_year} {facts.zodiac}"
            )
        return 0

    record = container.defaults
    record = apply_edit(record, "gender", args.gender)
    record = apply_edit(record, "birth_solar", args.birth)
    if args.branch:
        record = apply_edit(record, "time_mode", "branch")
        record = apply_edit(record, "time_branch", args.branch)
    elif args.time:
        record = apply_edit(record, "time_mode", "exact")
        record = apply_edit(record, "time_exact", args.time)

    facts = service.derive(record, today)
    errors = validate_record(record)
    if args.json:
        payload = {"facts": facts.model_dump(), "errors": errors}
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        for field, label in FIELD_LABELS.items():
            print(f"{label}: {getattr(facts, field)}")
        print(handprint_hint(record.gender))
        for code in errors:
            print(f"! {error_text(code)}")
    return 1 if errors else 0


if __name__ == "__main__":
    raise SystemExit(main())
