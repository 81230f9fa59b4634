from __future__ import annotations

"""
Correlation service: print decay tables for a configured correlation model.

Examples:
  # Every group at the default time offsets
  python -m sensor_correlation.service --config config/params.yaml

  # One group at chosen offsets, plus the correlation between parameters 0 and 2
  python -m sensor_correlation.service --config config/params.yaml \
      --group 0 --dt 0,5,15,30 --pair 0,2
"""

import argparse
import sys
from typing import List, Optional, Sequence, Tuple

from common.errors import CorrelationModelError
from common.logging_setup import get_logger, setup_logging
from sensor_correlation.config import group_names, load_params, model_from_params
from sensor_correlation.linear_decay import LinearDecayCorrelationModel


log = get_logger("sensor_correlation.service")

DEFAULT_DTS = "0,1,5,10,30,60"


def parse_floats(s: str) -> List[float]:
    parts = [p.strip() for p in s.split(",") if p.strip()]
    if not parts:
        raise ValueError("Expected a comma separated list of numbers")
    return [float(p) for p in parts]


def parse_pair(s: Optional[str]) -> Optional[Tuple[int, int]]:
    if not s:
        return None
    parts = s.split(",")
    if len(parts) != 2:
        raise ValueError("Pair must be A,B")
    return (int(parts[0]), int(parts[1]))


def decay_table(
    model: LinearDecayCorrelationModel,
    dts: Sequence[float],
    groups: Optional[Sequence[int]] = None,
) -> List[Tuple[int, float, float]]:
    """Rows of (group, dt, coefficient); groups without a curve are skipped."""
    if groups is None:
        groups = range(model.get_num_correlation_parameter_groups())
    rows: List[Tuple[int, float, float]] = []
    for g in groups:
        if model.get_correlation_group_parameters(g).is_empty:
            log.warning("Group has no curve; skipped", extra={"extra": {"group": g}})
            continue
        coefs = model.get_correlation_coefficients(g, dts)
        rows.extend((g, float(dt), float(c)) for dt, c in zip(dts, coefs))
    return rows


def main(argv: Optional[Sequence[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Linear-decay correlation tables")
    ap.add_argument("--config", default="config/params.yaml")
    ap.add_argument("--dt", default=DEFAULT_DTS, help="Comma separated time offsets (s)")
    ap.add_argument("--group", type=int, default=None, help="Only print this group")
    ap.add_argument("--pair", default=None, help="Also print correlation of parameters A,B at each dt")
    ap.add_argument("--log-level", default=None, help="Override logging level")
    args = ap.parse_args(argv)

    try:
        dts = parse_floats(args.dt)
        pair = parse_pair(args.pair)
        P = load_params(args.config)
    except (ValueError, FileNotFoundError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    setup_logging(args.log_level or (P.get("logging") or {}).get("level"), force=True)

    try:
        model = model_from_params(P)
        names = group_names(P)
        groups = None if args.group is None else [args.group]
        rows = decay_table(model, dts, groups)
        pair_rows = []
        if pair is not None:
            pair_rows = [(dt, model.get_parameter_correlation(pair[0], pair[1], dt)) for dt in dts]
    except CorrelationModelError as exc:
        log.error("Correlation model error", extra={"extra": {"error": str(exc)}})
        print(f"error: {exc}", file=sys.stderr)
        return 1

    print(f"{'group':<16}{'dt':>12}{'corr':>10}")
    for g, dt, c in rows:
        print(f"{names[g]:<16}{dt:>12.3f}{c:>10.4f}")
    if pair is not None:
        print(f"\nparameters {pair[0]},{pair[1]}")
        for dt, c in pair_rows:
            print(f"{'':<16}{dt:>12.3f}{c:>10.4f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
