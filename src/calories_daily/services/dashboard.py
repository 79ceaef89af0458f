"""Dashboard figures derived from the profile and today's log."""

from dataclasses import dataclass

from calories_daily.domain.daylog import DayLog, round_half_up
from calories_daily.domain.profile import GoalType, Profile

MAX_PROGRESS_PCT = 200.0

_GOAL_LABELS = {
    GoalType.CUT: "Lose weight",
    GoalType.BULK: "Gain weight",
    GoalType.MAINTAIN: "Maintain weight",
}


@dataclass(frozen=True)
class DashboardSummary:
    """Progress of today's intake against the goal target."""

    target_kcal: float | None
    eaten_kcal: float
    remaining_kcal: float | None
    progress_pct: float
    progress_bar_pct: float
    goal_label: str
    goal_hint: str | None


def build_dashboard(profile: Profile, log: DayLog) -> DashboardSummary:
    """Compute target, eaten, remaining and progress for presentation."""
    goal = profile.goal
    target = goal.target_kcal
    eaten = log.totals.kcal
    if target:
        pct = min(max(eaten / target * 100, 0.0), MAX_PROGRESS_PCT)
        remaining = round_half_up(target - eaten)
    else:
        pct = 0.0
        remaining = None
    return DashboardSummary(
        target_kcal=target,
        eaten_kcal=eaten,
        remaining_kcal=remaining,
        progress_pct=round_half_up(pct),
        progress_bar_pct=round_half_up(min(pct, 100.0), 1),
        goal_label=_GOAL_LABELS[goal.type],
        goal_hint=goal_hint(goal.type, goal.delta) if target else None,
    )


def goal_hint(goal_type: GoalType, delta: float) -> str:
    """Describe how the target relates to TDEE."""
    if goal_type == GoalType.CUT:
        return f"TDEE - {delta:g} kcal"
    if goal_type == GoalType.BULK:
        return f"TDEE + {delta:g} kcal"
    return "Same as TDEE"
