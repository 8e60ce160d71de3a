"""Financial analysis engine.

Turns a monthly income / expenses / risk tolerance triple into a savings
report, the fixed budget template, risk-tiered investment advice and a
randomly drawn pro tip.

The engine is split in two layers:

* ``validate`` and ``analyze`` are plain synchronous functions.  ``analyze``
  is total over valid input and never touches the clock.
* ``analyze_async`` and :class:`AnalysisRunner` add the simulated processing
  delay as an ``asyncio`` suspension point so a caller can render a pending
  state, and guarantee that only the most recently submitted analysis is
  ever published.
"""

from __future__ import annotations

import asyncio
import logging
import math
import random
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol, Tuple

from . import config
from .advice import (
    BUDGET_TEMPLATE,
    PRO_TIPS,
    BudgetAllocation,
    InvestmentAdvice,
    RiskLevel,
    advice_for,
)

logger = logging.getLogger(__name__)

INCOME_ERROR = "Please enter a valid monthly income"
EXPENSES_ERROR = "Please enter valid monthly expenses"
EXPENSES_EXCEED_INCOME_ERROR = "Expenses should be less than income"

GOOD_SAVINGS_RATE = 20.0
FAIR_SAVINGS_RATE = 10.0

ValidationErrors = Dict[str, str]


class InvalidFinancialInput(ValueError):
    """Raised when ``analyze`` is called with input that fails validation."""

    def __init__(self, errors: ValidationErrors):
        self.errors = dict(errors)
        super().__init__("; ".join(f"{name}: {msg}" for name, msg in self.errors.items()))


class RandomSource(Protocol):
    def draw(self, n: int) -> int:
        """Return an index in ``[0, n)``."""
        ...


class SystemRandomSource:
    """Uniform draws backed by :class:`random.Random`."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def draw(self, n: int) -> int:
        return self._rng.randrange(n)


class FixedRandomSource:
    """Always draws the same index (wrapped into range)."""

    def __init__(self, index: int = 0):
        self.index = index

    def draw(self, n: int) -> int:
        return self.index % n


_default_random = SystemRandomSource()


@dataclass(frozen=True)
class FinancialInput:
    """Monthly figures entered by the user.  ``None`` means the field is empty."""

    income: Optional[float]
    expenses: Optional[float]
    risk_level: RiskLevel = RiskLevel.MEDIUM

    def __post_init__(self) -> None:
        object.__setattr__(self, "risk_level", RiskLevel.parse(self.risk_level))


@dataclass(frozen=True)
class AnalysisResult:
    savings: float
    savings_percentage: float
    budget_breakdown: Tuple[BudgetAllocation, ...]
    investment_advice: Tuple[InvestmentAdvice, ...]
    pro_tip: str


@dataclass(frozen=True)
class AnalysisOutcome:
    """What an asynchronous analysis resolves to: a result or validation errors."""

    result: Optional[AnalysisResult] = None
    errors: ValidationErrors = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.result is not None and not self.errors


@dataclass(frozen=True)
class SavingsHealth:
    tier: str
    color: str

    @property
    def on_track(self) -> bool:
        return self.tier == "good"


def _is_number(value: Optional[float]) -> bool:
    return value is not None and not (isinstance(value, float) and math.isnan(value))


def validate(financial_input: FinancialInput) -> ValidationErrors:
    """Check the input and return a field -> message mapping.

    Every rule is evaluated; an empty mapping means the input is valid.  The
    income comparison runs last and replaces any earlier expenses message.
    """
    errors: ValidationErrors = {}
    income = financial_input.income
    expenses = financial_input.expenses

    if not _is_number(income) or income <= 0:
        errors["income"] = INCOME_ERROR
    if not _is_number(expenses) or expenses < 0:
        errors["expenses"] = EXPENSES_ERROR
    if _is_number(income) and _is_number(expenses) and expenses >= income:
        errors["expenses"] = EXPENSES_EXCEED_INCOME_ERROR

    return errors


def analyze(
    financial_input: FinancialInput,
    random_source: Optional[RandomSource] = None,
) -> AnalysisResult:
    """Compute the analysis for already-valid input.

    Raises:
        InvalidFinancialInput: if ``financial_input`` does not validate.
    """
    errors = validate(financial_input)
    if errors:
        raise InvalidFinancialInput(errors)

    income = float(financial_input.income)
    expenses = float(financial_input.expenses)
    savings = income - expenses
    savings_percentage = savings * 100 / income if income > 0 else 0.0

    source = random_source or _default_random
    pro_tip = PRO_TIPS[source.draw(len(PRO_TIPS))]

    return AnalysisResult(
        savings=savings,
        savings_percentage=savings_percentage,
        budget_breakdown=BUDGET_TEMPLATE,
        investment_advice=advice_for(financial_input.risk_level),
        pro_tip=pro_tip,
    )


def savings_health(percentage: float) -> SavingsHealth:
    """Classify a savings rate for display."""
    if percentage >= GOOD_SAVINGS_RATE:
        return SavingsHealth("good", "#10b981")
    if percentage >= FAIR_SAVINGS_RATE:
        return SavingsHealth("fair", "#f59e0b")
    return SavingsHealth("low", "#ef4444")


async def analyze_async(
    financial_input: FinancialInput,
    delay: Optional[float] = None,
    random_source: Optional[RandomSource] = None,
) -> AnalysisOutcome:
    """Validate, wait for the simulated processing delay, then analyze.

    Invalid input resolves immediately with its errors and never reaches the
    computation step.
    """
    errors = validate(financial_input)
    if errors:
        logger.debug("Analysis rejected: %s", errors)
        return AnalysisOutcome(errors=errors)

    await asyncio.sleep(config.ANALYSIS_DELAY_SECONDS if delay is None else delay)
    result = analyze(financial_input, random_source)
    logger.info(
        "Analysis complete: savings=%.2f rate=%.1f%% risk=%s",
        result.savings,
        result.savings_percentage,
        financial_input.risk_level.value,
    )
    return AnalysisOutcome(result=result)


class AnalysisRunner:
    """Runs at most one analysis at a time, last trigger wins.

    ``submit`` must be called from inside a running event loop.  Submitting
    while an analysis is pending cancels it; an outcome from a superseded run
    is never stored in ``latest``.
    """

    def __init__(
        self,
        delay: Optional[float] = None,
        random_source: Optional[RandomSource] = None,
    ):
        self.delay = delay
        self.random_source = random_source
        self.latest: Optional[AnalysisOutcome] = None
        self._task: Optional[asyncio.Task] = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def submit(self, financial_input: FinancialInput) -> asyncio.Task:
        self.cancel()
        self.latest = None
        generation = self._generation
        self._task = asyncio.get_running_loop().create_task(
            self._run(financial_input, generation)
        )
        return self._task

    async def _run(self, financial_input: FinancialInput, generation: int) -> AnalysisOutcome:
        outcome = await analyze_async(financial_input, self.delay, self.random_source)
        if generation != self._generation:
            logger.debug("Discarding superseded analysis #%d", generation)
            return outcome
        self.latest = outcome
        return outcome

    async def wait(self) -> Optional[AnalysisOutcome]:
        """Wait until no analysis is pending and return the latest outcome."""
        while self.pending:
            await asyncio.wait({self._task})
        return self.latest

    def cancel(self) -> None:
        """Drop the pending analysis, if any."""
        self._generation += 1
        if self.pending:
            logger.debug("Cancelling pending analysis")
            self._task.cancel()

    def reset(self) -> None:
        self.cancel()
        self._task = None
        self.latest = None
