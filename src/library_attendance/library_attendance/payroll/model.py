from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from ..core.enums import SalaryStatus


@dataclass(frozen=True)
class SalaryRecord:
    salary_id: int
    staff_id: int
    month: str
    present_days: int
    amount: Decimal
    status: SalaryStatus = SalaryStatus.PENDING
