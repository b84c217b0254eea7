"""
BAC tracker CLI. Run from project root: python -m bac_tracker.main
Logs drinks against a profile, prints current BAC and time until zero, and
optionally saves a projected BAC graph.
"""

import argparse
import json
import logging
import sys
from datetime import datetime, timedelta
from pathlib import Path

from bac_tracker.app_logging import configure_logging
from bac_tracker.calculations import calculate_bac, estimate_time_to_zero
from bac_tracker.constants import load_constants
from bac_tracker.graph import save_bac_graph
from bac_tracker.models import sort_newest_first
from bac_tracker.severity import classify_severity, format_bac
from bac_tracker.store import SessionStore
from bac_tracker.validation import InvalidInputError, parse_beverage, parse_profile

DEMO_DRINKS = [
    # (amount, unit, abv, minutes_ago)
    ("12", "oz", "5", "90"),
    ("12", "oz", "5", "60"),
    ("5", "oz", "12", "0"),
]


def _load_state(path):
    if path is None or not Path(path).exists():
        return {}
    with open(path, encoding="utf-8") as fh:
        state = json.load(fh)
    if not isinstance(state, dict):
        raise ValueError(f"{path} does not contain a JSON object")
    return state


def _save_state(path, state):
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(state, fh, indent=2)


def _drink_payload(values, now):
    if len(values) not in (3, 4):
        raise InvalidInputError("--drink takes AMOUNT UNIT ABV [MINUTES_AGO]")
    amount, unit, abv = values[:3]
    try:
        minutes_ago = float(values[3]) if len(values) == 4 else 0.0
        consumed_time = now - timedelta(minutes=minutes_ago)
    except (ValueError, OverflowError):
        raise InvalidInputError("MINUTES_AGO must be a reasonable number of minutes") from None
    return {
        "amount": amount,
        "volume_unit": unit,
        "abv": abv,
        "consumed_time": consumed_time,
    }


def _updated_profile(stored, args):
    """Profile from the flags, keeping stored values for flags not given."""
    if args.female:
        gender = "female"
    elif args.male:
        gender = "male"
    elif stored is not None and stored.gender is not None:
        gender = stored.gender.value
    else:
        gender = "male"
    if args.weight is not None:
        weight = args.weight
    else:
        weight = stored.weight if stored is not None else 160.0
    if args.unit:
        unit = args.unit
    else:
        unit = stored.weight_unit.value if stored is not None else "lb"
    return parse_profile({"gender": gender, "weight": weight, "weight_unit": unit})


def build_parser():
    parser = argparse.ArgumentParser(description="BAC tracker: log drinks and estimate BAC")
    parser.add_argument("--weight", type=float, help="Body weight (default 160 for a new profile)")
    parser.add_argument("--unit", choices=["lb", "kg", "stone"], help="Weight unit (default lb for a new profile)")
    sex = parser.add_mutually_exclusive_group()
    sex.add_argument("--female", action="store_true", help="Female")
    sex.add_argument("--male", action="store_true", help="Male (default for a new profile)")
    parser.add_argument(
        "--drink",
        nargs="+",
        action="append",
        default=[],
        metavar="VALUE",
        help="Log a drink: AMOUNT UNIT(oz|ml) ABV [MINUTES_AGO]; repeatable",
    )
    parser.add_argument("--delete", type=int, metavar="ID", help="Delete the beverage with this id")
    parser.add_argument("--clear", action="store_true", help="Forget profile and beverages first")
    parser.add_argument("--state", type=str, metavar="FILE", help="JSON file to keep profile and drinks between runs")
    parser.add_argument("--graph", type=str, metavar="FILE", help="Save projected BAC graph to FILE (e.g. bac_graph.png)")
    parser.add_argument("--demo", action="store_true", help="Log demo drinks (2 beers and a glass of wine)")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        constants = load_constants()
        state = _load_state(args.state)
    except ValueError as exc:
        parser.error(str(exc))

    store = SessionStore(state)
    if args.clear:
        store.clear()

    now = datetime.now()
    try:
        stored = store.get_profile()
        if stored is None or args.weight is not None or args.unit or args.female or args.male:
            store.save_profile(_updated_profile(stored, args))

        drinks = list(args.drink)
        if args.demo:
            drinks.extend(list(d) for d in DEMO_DRINKS)
        for values in drinks:
            store.add_beverage(parse_beverage(_drink_payload(values, now), now=now))
    except InvalidInputError as exc:
        parser.error(str(exc))

    if args.delete is not None and not store.delete_beverage(args.delete):
        print(f"No beverage with id {args.delete}", file=sys.stderr)

    profile = store.get_profile()
    beverages = store.get_beverages()
    bac = calculate_bac(profile, beverages, now=now, constants=constants)

    gender = profile.gender.value if profile.gender else "unknown"
    print(f"Profile: {gender}, {profile.weight:g} {profile.weight_unit.value}")
    for b in sort_newest_first(beverages):
        when = b.consumed_time.strftime("%Y-%m-%d %H:%M")
        print(f"  [{b.id}] {b.amount:g} {b.volume_unit.value} @ {b.abv:g}% - {when}")
    print(f"BAC now: {format_bac(bac)}% ({classify_severity(bac).value})")
    print(f"Time until zero: {estimate_time_to_zero(bac, constants)}")

    if args.state:
        _save_state(args.state, state)

    if args.graph:
        try:
            path = save_bac_graph(profile, beverages, output_path=args.graph, start=now, constants=constants)
            print(f"Graph saved: {path}")
        except ImportError:
            print("matplotlib not installed. pip install matplotlib", file=sys.stderr)
            return 1

    return 0


if __name__ == "__main__":
    sys.exit(main() or 0)
