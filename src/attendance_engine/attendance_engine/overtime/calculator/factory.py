from __future__ import annotations

from dataclasses import dataclass

from ...core.enums import OvertimeMethod
from ...policies.employee_type import EmployeeTypePolicy
from .administrative_strategy import AdministrativeOvertimeStrategy
from .base import OvertimeStrategy
from .regular_strategy import RegularOvertimeStrategy


@dataclass
class OvertimeStrategyFactory:
    """Factory Pattern: choose the tier strategy from the employee policy."""

    def for_policy(self, policy: EmployeeTypePolicy) -> OvertimeStrategy:
        if policy.overtime_method == OvertimeMethod.EFFECTIVE_HOURS:
            return AdministrativeOvertimeStrategy()
        return RegularOvertimeStrategy()
