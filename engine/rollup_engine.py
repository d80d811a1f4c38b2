"""Per-row loss reconciliation and unit/group rollups: the core tracker engine."""

import logging
from collections import OrderedDict
from typing import Dict, List, Optional

from models.tracker_row import TrackerRow
from models.computed_row import ComputedRow
from models.summary import UnitSummary, GroupSummary, TrackerResult
from engine.normalizer import (
    clamp, clamp_day, clamp_rate, to_count, to_number, round_half_up,
    normalize_destroyed_by_day, canonical_unit_id,
)
from engine.decay_model import remaining_after_days
from engine.projector import days_to_reach_fraction
from engine.explainer import explain_row
from config.defaults import (
    DEFAULT_DAY, DEFAULT_USE_ATTRITION, DEFAULT_MANUAL_WINS,
    DEFAULT_THRESHOLD_FRACTION, UNIT_ALIASES,
    PRIMARY_GROUP_NAME, SECONDARY_GROUP_NAME, PRIMARY_GROUP_MEMBERS,
    FORCE_TOTAL_NAME,
)

logger = logging.getLogger(__name__)


def combat_power_pct(remaining: int, on_hand: int) -> float:
    return remaining / on_hand * 100 if on_hand > 0 else 0.0


def compute_row(
    row: TrackerRow,
    day: int,
    use_attrition: bool = DEFAULT_USE_ATTRITION,
    manual_wins: bool = DEFAULT_MANUAL_WINS,
    threshold_fraction: float = DEFAULT_THRESHOLD_FRACTION,
) -> ComputedRow:
    """Reconcile manual and modeled losses for a single row on the selected day."""
    day = clamp_day(day)
    on_hand = to_count(row.on_hand)
    rate = clamp_rate(row.daily_attrition_pct)
    threshold_fraction = to_number(threshold_fraction)

    # Step 1: Manual losses, D1..D(day) applied, or the legacy confirmed total
    if isinstance(row.destroyed_by_day, (list, tuple)):
        by_day = normalize_destroyed_by_day(row.destroyed_by_day)
        manual_total = sum(by_day)
        manual_active = sum(by_day[:day])
    else:
        manual_total = to_count(row.destroyed_manual)
        manual_active = manual_total
        by_day = normalize_destroyed_by_day([manual_total])

    manual = int(clamp(manual_active, 0, on_hand))

    # Step 2: Attrition model estimate
    destroyed_attrition = 0
    if use_attrition:
        rem = remaining_after_days(on_hand, rate, day)
        destroyed_attrition = int(clamp(round_half_up(on_hand - rem), 0, on_hand))

    # Step 3: Reconcile
    if use_attrition:
        destroyed = max(manual, destroyed_attrition) if manual_wins else destroyed_attrition
    else:
        destroyed = manual

    # Step 4: Remaining, combat power, projection
    remaining = max(0, on_hand - destroyed)
    cp_pct = combat_power_pct(remaining, on_hand)
    days_to_threshold = days_to_reach_fraction(rate, threshold_fraction) if on_hand > 0 else None

    explanation = explain_row(
        unit_id=row.unit_id,
        equipment_type=row.equipment_type,
        on_hand=on_hand,
        day=day,
        daily_attrition_pct=rate,
        destroyed_manual_active=manual,
        destroyed_manual_total=int(clamp(manual_total, 0, on_hand)),
        destroyed_attrition=destroyed_attrition,
        destroyed=destroyed,
        remaining=remaining,
        combat_power_pct=cp_pct,
        days_to_threshold=days_to_threshold,
        threshold_fraction=threshold_fraction,
        use_attrition=use_attrition,
        manual_wins=manual_wins,
    )

    return ComputedRow(
        row_id=row.row_id,
        unit_id=row.unit_id,
        equipment_type=row.equipment_type,
        on_hand=on_hand,
        daily_attrition_pct=rate,
        destroyed_by_day=by_day,
        destroyed_attrition=destroyed_attrition,
        destroyed=destroyed,
        remaining=remaining,
        combat_power_pct=cp_pct,
        days_to_threshold=days_to_threshold,
        destroyed_manual_active=manual,
        destroyed_manual_total=int(clamp(manual_total, 0, on_hand)),
        explanation_steps=explanation,
    )


def compute_rows(
    rows: List[TrackerRow],
    day: int = DEFAULT_DAY,
    use_attrition: bool = DEFAULT_USE_ATTRITION,
    manual_wins: bool = DEFAULT_MANUAL_WINS,
    rule_config: Optional[dict] = None,
) -> List[ComputedRow]:
    """Compute every row for the selected day, preserving input order."""
    cfg = rule_config or {}
    threshold = cfg.get("threshold_fraction", DEFAULT_THRESHOLD_FRACTION)
    return [compute_row(r, day, use_attrition, manual_wins, threshold) for r in rows]


def weighted_attrition_pct(rows: List[ComputedRow]) -> float:
    """On-hand weighted average daily attrition % across rows."""
    total_weight = sum(r.on_hand for r in rows)
    if total_weight <= 0:
        return 0.0
    return sum(r.daily_attrition_pct * r.on_hand for r in rows) / total_weight


def summarize_group(
    group_name: str,
    rows: List[ComputedRow],
    threshold_fraction: float = DEFAULT_THRESHOLD_FRACTION,
) -> GroupSummary:
    """Roll a set of computed rows into one summary.

    The day-to-threshold projection uses the on-hand weighted rate of the
    members, which approximates (but does not equal) aggregating each row's
    own projection.
    """
    threshold_fraction = to_number(threshold_fraction)
    on_hand = sum(r.on_hand for r in rows)
    remaining = sum(r.remaining for r in rows)
    destroyed = sum(r.destroyed for r in rows)
    weighted = weighted_attrition_pct(rows)
    days = days_to_reach_fraction(weighted, threshold_fraction) if on_hand > 0 else None

    return GroupSummary(
        group_name=group_name,
        on_hand=on_hand,
        remaining=remaining,
        destroyed=destroyed,
        combat_power_pct=combat_power_pct(remaining, on_hand),
        weighted_attrition_pct=weighted,
        days_to_threshold=days,
        row_count=len(rows),
    )


def summarize_units(
    computed_rows: List[ComputedRow],
    rule_config: Optional[dict] = None,
) -> List[UnitSummary]:
    """Roll rows up by canonical unit identifier, sorted by identifier."""
    cfg = rule_config or {}
    aliases = cfg.get("unit_aliases", UNIT_ALIASES)
    threshold = cfg.get("threshold_fraction", DEFAULT_THRESHOLD_FRACTION)

    by_unit: Dict[str, List[ComputedRow]] = OrderedDict()
    for r in computed_rows:
        unit_id = canonical_unit_id(r.unit_id, aliases)
        if not unit_id:
            continue
        by_unit.setdefault(unit_id, []).append(r)

    summaries = []
    for unit_id in sorted(by_unit):
        g = summarize_group(unit_id, by_unit[unit_id], threshold)
        summaries.append(UnitSummary(
            unit_id=unit_id,
            on_hand=g.on_hand,
            remaining=g.remaining,
            destroyed=g.destroyed,
            combat_power_pct=g.combat_power_pct,
            weighted_attrition_pct=g.weighted_attrition_pct,
            days_to_threshold=g.days_to_threshold,
        ))
    return summaries


def summarize_groups(
    computed_rows: List[ComputedRow],
    rule_config: Optional[dict] = None,
) -> List[GroupSummary]:
    """Split all rows into the primary member set and everyone else."""
    cfg = rule_config or {}
    aliases = cfg.get("unit_aliases", UNIT_ALIASES)
    threshold = cfg.get("threshold_fraction", DEFAULT_THRESHOLD_FRACTION)
    members = {
        canonical_unit_id(m, aliases)
        for m in cfg.get("primary_group_members", PRIMARY_GROUP_MEMBERS)
    }

    primary, secondary = [], []
    for r in computed_rows:
        if canonical_unit_id(r.unit_id, aliases) in members:
            primary.append(r)
        else:
            secondary.append(r)

    return [
        summarize_group(cfg.get("primary_group_name", PRIMARY_GROUP_NAME), primary, threshold),
        summarize_group(cfg.get("secondary_group_name", SECONDARY_GROUP_NAME), secondary, threshold),
    ]


def summarize_force(
    computed_rows: List[ComputedRow],
    rule_config: Optional[dict] = None,
) -> GroupSummary:
    """Total across every row regardless of unit."""
    cfg = rule_config or {}
    threshold = cfg.get("threshold_fraction", DEFAULT_THRESHOLD_FRACTION)
    return summarize_group(FORCE_TOTAL_NAME, computed_rows, threshold)


def run_tracker(
    rows: List[TrackerRow],
    day: int = DEFAULT_DAY,
    use_attrition: bool = DEFAULT_USE_ATTRITION,
    manual_wins: bool = DEFAULT_MANUAL_WINS,
    rule_config: Optional[dict] = None,
) -> TrackerResult:
    """Full pipeline: compute rows, then unit, group, and force rollups."""
    day = clamp_day(day)
    computed = compute_rows(rows, day, use_attrition, manual_wins, rule_config)
    result = TrackerResult(
        day=day,
        computed_rows=computed,
        unit_summaries=summarize_units(computed, rule_config),
        group_summaries=summarize_groups(computed, rule_config),
        force_total=summarize_force(computed, rule_config),
    )
    logger.debug(
        "Computed %d rows for day %d (attrition=%s, manual_wins=%s): %d units",
        len(computed), day, use_attrition, manual_wins, len(result.unit_summaries),
    )
    return result
