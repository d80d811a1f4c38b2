"""Generates human-readable explanations for computed tracker rows."""

from typing import List, Optional


def explain_row(
    unit_id: str,
    equipment_type: str,
    on_hand: int,
    day: int,
    daily_attrition_pct: float,
    destroyed_manual_active: int,
    destroyed_manual_total: int,
    destroyed_attrition: int,
    destroyed: int,
    remaining: int,
    combat_power_pct: float,
    days_to_threshold: Optional[int],
    threshold_fraction: float,
    use_attrition: bool,
    manual_wins: bool,
) -> List[str]:
    """Produce step-by-step explanation for a computed row."""
    label = f"{unit_id} {equipment_type}".strip() or "Row"

    if on_hand == 0:
        return [f"{label} has 0 on hand - nothing to attrit."]

    steps = []

    steps.append(
        f"Step 1 - Manual losses: {destroyed_manual_active} destroyed through Day {day} "
        f"({destroyed_manual_total} reported across all days) out of {on_hand} on hand"
    )

    if use_attrition:
        steps.append(
            f"Step 2 - Attrition model: {daily_attrition_pct:.2f}%/day compounded over "
            f"{day} day{'s' if day != 1 else ''} => {destroyed_attrition} destroyed"
        )
        if manual_wins:
            steps.append(
                f"Step 3 - Reconcile (manual wins): max({destroyed_manual_active}, "
                f"{destroyed_attrition}) = {destroyed} destroyed"
            )
        else:
            steps.append(
                f"Step 3 - Reconcile (model only): attrition model replaces manual => "
                f"{destroyed} destroyed"
            )
    else:
        steps.append("Step 2 - Attrition model: disabled")
        steps.append(f"Step 3 - Reconcile: manual losses only => {destroyed} destroyed")

    steps.append(
        f"Step 4 - Remaining: {on_hand} - {destroyed} = {remaining} "
        f"=> combat power {combat_power_pct:.1f}%"
    )

    if days_to_threshold is None:
        steps.append(
            f"Step 5 - Projection: {threshold_fraction:.0%} combat power is not reached "
            f"at {daily_attrition_pct:.2f}%/day"
        )
    else:
        steps.append(
            f"Step 5 - Projection: {threshold_fraction:.0%} combat power reached on "
            f"Day {days_to_threshold} at {daily_attrition_pct:.2f}%/day"
        )

    return steps
