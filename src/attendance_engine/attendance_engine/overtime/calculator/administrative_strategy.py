from __future__ import annotations

from fractions import Fraction

from ...policies.employee_type import EmployeeTypePolicy
from ..model import DayContext
from .base import OvertimeStrategy, TierSplit


class AdministrativeOvertimeStrategy(OvertimeStrategy):
    """Effective-hours rule: days under the minimum do not count at all.

    Counted weekdays give up to 8h regular and the remainder at 100%; weekends
    and holidays pay every hour at 100%.
    """

    def split(self, total: Fraction, context: DayContext, policy: EmployeeTypePolicy) -> TierSplit:
        if policy.overtime.effective_hours_only and total < Fraction(context.minimum_hours):
            return TierSplit(counted=False)

        if context.is_special_pay_day:
            return TierSplit(extraordinary=total)

        regular = min(total, Fraction(policy.overtime.daily_threshold))
        return self.fill_tiers(regular, total - regular, policy)
