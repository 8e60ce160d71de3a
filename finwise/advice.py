"""Static reference data for the financial analysis.

Holds the risk tiers, the fixed 50/30/20 budget template, the per-tier
investment advice tables and the pro-tip catalog. Nothing here is derived
from user input; :mod:`finwise.analysis` only looks values up.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Tuple


class RiskLevel(str, Enum):
    """Risk tolerance tiers selectable by the user."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def label(self) -> str:
        return RISK_LEVEL_LABELS[self]

    @classmethod
    def parse(cls, value: "RiskLevel | str") -> "RiskLevel":
        """Parse a tier from its value or display name, ignoring case."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for level in cls:
            if text == level.value:
                return level
        raise ValueError(f"Unknown risk level: {value!r}")


RISK_LEVEL_LABELS: Dict[RiskLevel, str] = {
    RiskLevel.LOW: "Conservative (Low Risk)",
    RiskLevel.MEDIUM: "Balanced (Medium Risk)",
    RiskLevel.HIGH: "Aggressive (High Risk)",
}


@dataclass(frozen=True)
class BudgetAllocation:
    """One slice of the recommended budget."""

    label: str
    percentage: int
    color: str

    def amount_for(self, income: float) -> float:
        """Dollar amount of this slice for a given monthly income."""
        return income * self.percentage / 100


@dataclass(frozen=True)
class InvestmentAdvice:
    type: str
    description: str
    risk_tag: str


# Fixed presentation template; intentionally not derived from actual expenses.
BUDGET_TEMPLATE: Tuple[BudgetAllocation, ...] = (
    BudgetAllocation("Essential Expenses", 50, "#ef4444"),
    BudgetAllocation("Discretionary Spending", 30, "#f59e0b"),
    BudgetAllocation("Savings & Investments", 20, "#10b981"),
)

INVESTMENT_ADVICE: Dict[RiskLevel, Tuple[InvestmentAdvice, ...]] = {
    RiskLevel.LOW: (
        InvestmentAdvice(
            "High-Yield Savings Account",
            "Safe option with guaranteed returns around 4-5% APY.",
            "Low",
        ),
        InvestmentAdvice(
            "Treasury Bonds",
            "Government-backed securities with stable, predictable returns.",
            "Low",
        ),
        InvestmentAdvice(
            "CDs (Certificates of Deposit)",
            "Fixed-term deposits with higher interest than regular savings.",
            "Low",
        ),
    ),
    RiskLevel.MEDIUM: (
        InvestmentAdvice(
            "Index Funds",
            "Diversified funds tracking market indices with moderate risk.",
            "Medium",
        ),
        InvestmentAdvice(
            "Target-Date Funds",
            "Automatically adjusted portfolios based on your retirement timeline.",
            "Medium",
        ),
        InvestmentAdvice(
            "Balanced Mutual Funds",
            "Mix of stocks and bonds for steady growth with manageable risk.",
            "Medium",
        ),
    ),
    RiskLevel.HIGH: (
        InvestmentAdvice(
            "Growth Stocks",
            "Individual stocks with high growth potential but higher volatility.",
            "High",
        ),
        InvestmentAdvice(
            "Sector ETFs",
            "Exchange-traded funds focused on specific high-growth sectors.",
            "High",
        ),
        InvestmentAdvice(
            "Cryptocurrency",
            "Digital assets with high potential returns but significant risk.",
            "High",
        ),
    ),
}

PRO_TIPS: Tuple[str, ...] = (
    "Try the 50/30/20 rule: 50% needs, 30% wants, 20% savings and debt repayment.",
    "Automate your savings to make it effortless and consistent.",
    "Review and adjust your budget monthly to stay on track with your goals.",
    "Consider increasing your emergency fund to 6 months of expenses.",
    "Take advantage of employer 401(k) matching - it's free money!",
    "Pay off high-interest debt before investing in lower-return assets.",
    "Diversify your investments across different asset classes and sectors.",
    "Start investing early to take advantage of compound interest over time.",
)


def advice_for(risk_level: RiskLevel | str) -> Tuple[InvestmentAdvice, ...]:
    return INVESTMENT_ADVICE[RiskLevel.parse(risk_level)]
