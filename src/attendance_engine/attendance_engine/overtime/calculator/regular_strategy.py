from __future__ import annotations

from fractions import Fraction

from ...policies.employee_type import EmployeeTypePolicy
from ..model import DayContext
from .base import OvertimeStrategy, TierSplit


class RegularOvertimeStrategy(OvertimeStrategy):
    """Regular rule: up to min(scheduled, 8)h regular, then 2h at 25%, 2h at 50%, rest at 100%.

    Weekends and holidays pay every hour at 100%.
    """

    def split(self, total: Fraction, context: DayContext, policy: EmployeeTypePolicy) -> TierSplit:
        if context.is_special_pay_day:
            return TierSplit(extraordinary=total)

        cap = min(Fraction(context.scheduled_hours), Fraction(policy.overtime.daily_threshold))
        regular = min(total, cap)
        return self.fill_tiers(regular, total - regular, policy)
