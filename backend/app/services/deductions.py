"""
Salary deduction policy.

Bonus and provident fund are flat percentages of salary; tax follows a
slab schedule where each slab only taxes the part of the salary above its
lower bound.
"""

from dataclasses import dataclass
from typing import Protocol

BONUS_RATE = 0.10
PROVIDENT_FUND_RATE = 0.12

# (lower bound, base tax at lower bound, marginal rate above it), highest first
TAX_SLABS = (
    (1_000_000, 112_500.0, 0.30),
    (500_000, 12_500.0, 0.20),
    (250_000, 0.0, 0.05),
)


@dataclass(frozen=True)
class Deductions:
    salary: float
    bonus: float
    provident_fund: float
    tax: float

    @property
    def net_pay(self) -> float:
        return self.salary + self.bonus - self.provident_fund - self.tax


class _HasSalary(Protocol):
    salary: float
    bonus: float
    provident_fund: float
    tax: float


def calculate_tax(salary: float) -> float:
    for lower_bound, base_tax, rate in TAX_SLABS:
        if salary > lower_bound:
            return base_tax + (salary - lower_bound) * rate
    return 0.0


def compute_deductions(salary: float) -> Deductions:
    """Compute bonus, provident fund and tax for a non-negative salary."""
    salary = float(salary)
    return Deductions(
        salary=salary,
        bonus=salary * BONUS_RATE,
        provident_fund=salary * PROVIDENT_FUND_RATE,
        tax=calculate_tax(salary),
    )


def apply_deductions(employee: _HasSalary) -> Deductions:
    """Recompute the derived fields of an employee from its current salary."""
    deductions = compute_deductions(employee.salary)
    employee.bonus = deductions.bonus
    employee.provident_fund = deductions.provident_fund
    employee.tax = deductions.tax
    return deductions
