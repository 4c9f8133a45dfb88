from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from fractions import Fraction

from ...core.constants import SUPPLEMENTARY_TIER_HOURS, SURCHARGE_TIER_HOURS
from ...policies.employee_type import EmployeeTypePolicy
from ..model import DayContext

ZERO = Fraction(0)


@dataclass(frozen=True)
class TierSplit:
    """Exact hour split of one day; converted to floats only at the boundary."""

    regular: Fraction = ZERO
    surcharge: Fraction = ZERO
    supplementary: Fraction = ZERO
    extraordinary: Fraction = ZERO
    counted: bool = True

    @property
    def overtime(self) -> Fraction:
        return self.surcharge + self.supplementary + self.extraordinary

    @property
    def total(self) -> Fraction:
        return self.regular + self.overtime


class OvertimeStrategy(ABC):
    """Strategy Pattern: how an employee category splits a day into tiers."""

    @abstractmethod
    def split(self, total: Fraction, context: DayContext, policy: EmployeeTypePolicy) -> TierSplit:
        raise NotImplementedError

    @staticmethod
    def fill_tiers(regular: Fraction, rest: Fraction, policy: EmployeeTypePolicy) -> TierSplit:
        """Spill hours beyond regular into 25%, then 50%, then 100%.

        Tiers the policy does not apply are skipped, so their hours fall
        through to the next one.
        """
        rules = policy.overtime
        surcharge = min(rest, Fraction(SURCHARGE_TIER_HOURS)) if rules.applies_surcharge else ZERO
        rest -= surcharge
        supplementary = min(rest, Fraction(SUPPLEMENTARY_TIER_HOURS)) if rules.applies_supplementary else ZERO
        rest -= supplementary
        return TierSplit(regular=regular, surcharge=surcharge, supplementary=supplementary, extraordinary=rest)
