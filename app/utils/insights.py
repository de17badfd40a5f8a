"""
Spending insights.

A fixed battery of independent rules, each looking at the same snapshot of the
reference month and the month before it. Rules run in declaration order and
their output is concatenated; the result is capped to the first
``max_insights`` entries, so that order is also the only ranking.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from app.utils.analyzer import (
    amount_of,
    as_list,
    category_of,
    category_totals,
    daily_totals,
    month_slice,
    spending_only,
    top_category,
    total_amount,
)
from app.utils.formatting import format_currency, format_date, get_month_name, previous_month


@dataclass
class Insight:
    type: str  # danger | warning | positive | info
    title: str
    description: str
    value: str
    details: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class InsightSnapshot:
    """Everything the rules need, aggregated once per evaluation."""

    today: date
    year: int
    month: int
    previous_year: int
    previous_month: int
    current: List[Dict[str, Any]]
    previous: List[Dict[str, Any]]
    current_total: float
    previous_total: float
    current_categories: Dict[str, float]
    previous_categories: Dict[str, float]
    budgets: List[Dict[str, Any]] = field(default_factory=list)


class SpendingInsights:
    """
    Heuristic insight generator.

    Only spending counts: income transactions are left out of every total.
    Budgets are compared against the reference month whatever their period.
    """

    def __init__(
        self,
        trend_threshold: float = 5.0,
        budget_warning: float = 80.0,
        budget_exceeded: float = 100.0,
        spike_growth: float = 50.0,
        spike_floor: float = 100.0,
        concentration_share: float = 40.0,
        high_day_multiplier: float = 2.0,
        high_day_floor: float = 200.0,
        max_insights: int = 6,
        currency: str = "USD",
    ) -> None:
        self.trend_threshold = trend_threshold
        self.budget_warning = budget_warning
        self.budget_exceeded = budget_exceeded
        self.spike_growth = spike_growth
        self.spike_floor = spike_floor
        self.concentration_share = concentration_share
        self.high_day_multiplier = high_day_multiplier
        self.high_day_floor = high_day_floor
        self.max_insights = max_insights
        self.currency = currency

        self.rules: List[Callable[[InsightSnapshot], List[Insight]]] = [
            self.spending_trend,
            self.budget_alerts,
            self.category_spikes,
            self.category_concentration,
            self.high_spending_day,
            self.under_budget,
        ]

    def _money(self, amount: float) -> str:
        return format_currency(amount, self.currency)

    def snapshot(self, transactions: Any, budgets: Any, today: Optional[date] = None) -> InsightSnapshot:
        today = today or date.today()
        spending = spending_only(transactions)
        prev_year, prev_month = previous_month(today.year, today.month)
        current = month_slice(spending, today.year, today.month)
        previous = month_slice(spending, prev_year, prev_month)

        return InsightSnapshot(
            today=today,
            year=today.year,
            month=today.month,
            previous_year=prev_year,
            previous_month=prev_month,
            current=current,
            previous=previous,
            current_total=total_amount(current),
            previous_total=total_amount(previous),
            current_categories=category_totals(current),
            previous_categories=category_totals(previous),
            budgets=as_list(budgets),
        )

    def generate(self, transactions: Any, budgets: Any, today: Optional[date] = None) -> List[Insight]:
        snap = self.snapshot(transactions, budgets, today)
        insights: List[Insight] = []
        for rule in self.rules:
            insights.extend(rule(snap))
        return insights[: self.max_insights]

    def spending_trend(self, snap: InsightSnapshot) -> List[Insight]:
        if snap.previous_total <= 0:
            return []

        change = (snap.current_total - snap.previous_total) / snap.previous_total * 100
        if abs(change) <= self.trend_threshold:
            return []

        direction = "increased" if change > 0 else "decreased"
        return [
            Insight(
                type="warning" if change > 0 else "positive",
                title="Monthly Spending Trend",
                description=f"Your spending {direction} by {abs(change):.1f}% compared to last month",
                value=self._money(abs(snap.current_total - snap.previous_total)),
                details=(
                    f"{get_month_name(snap.previous_month)}: {self._money(snap.previous_total)} → "
                    f"{get_month_name(snap.month)}: {self._money(snap.current_total)}"
                ),
            )
        ]

    def budget_alerts(self, snap: InsightSnapshot) -> List[Insight]:
        insights = []
        for budget in snap.budgets:
            limit = amount_of(budget)
            if limit <= 0:
                continue

            category = category_of(budget)
            spent = snap.current_categories.get(category, 0.0)
            percentage = spent / limit * 100

            if percentage > self.budget_exceeded:
                insights.append(
                    Insight(
                        type="danger",
                        title="Budget Exceeded",
                        description=f"You've exceeded your {category} budget by {percentage - 100:.1f}%",
                        value=self._money(spent - limit),
                        details=f"Budget: {self._money(limit)} | Spent: {self._money(spent)}",
                    )
                )
            elif percentage > self.budget_warning:
                insights.append(
                    Insight(
                        type="warning",
                        title="Budget Warning",
                        description=f"You've used {percentage:.1f}% of your {category} budget",
                        value=self._money(limit - spent),
                        details=f"{self._money(spent)} spent of {self._money(limit)} budget",
                    )
                )
        return insights

    def category_spikes(self, snap: InsightSnapshot) -> List[Insight]:
        insights = []
        for category, current in snap.current_categories.items():
            previous = snap.previous_categories.get(category, 0.0)
            if previous <= 0:
                continue

            change = (current - previous) / previous * 100
            if change > self.spike_growth and current > self.spike_floor:
                insights.append(
                    Insight(
                        type="info",
                        title="Category Spending Spike",
                        description=f"Your {category} spending increased by {change:.1f}% this month",
                        value=self._money(current - previous),
                        details=f"Previous: {self._money(previous)} | Current: {self._money(current)}",
                    )
                )
        return insights

    def category_concentration(self, snap: InsightSnapshot) -> List[Insight]:
        top = top_category(snap.current_categories)
        if top is None or snap.current_total <= 0:
            return []

        share = top["amount"] / snap.current_total * 100
        if share <= self.concentration_share:
            return []

        return [
            Insight(
                type="info",
                title="Top Spending Category",
                description=f"{top['category']} represents {share:.1f}% of your total spending",
                value=self._money(top["amount"]),
                details="Consider if this allocation aligns with your financial goals",
            )
        ]

    def high_spending_day(self, snap: InsightSnapshot) -> List[Insight]:
        average = snap.current_total / snap.today.day
        if average <= 0:
            return []

        high_days = [
            (day, amount)
            for day, amount in daily_totals(snap.current).items()
            if amount > average * self.high_day_multiplier and amount > self.high_day_floor
        ]
        if not high_days:
            return []

        day, amount = max(high_days, key=lambda pair: pair[1])
        return [
            Insight(
                type="info",
                title="High Spending Day",
                description=f"You had a high spending day on {format_date(day)}",
                value=self._money(amount),
                details=f"This was {amount / average:.1f}x your average daily spending",
            )
        ]

    def under_budget(self, snap: InsightSnapshot) -> List[Insight]:
        if not snap.budgets:
            return []

        total_budget = sum(amount_of(b) for b in snap.budgets)
        if snap.current_total >= total_budget:
            return []

        savings = total_budget - snap.current_total
        return [
            Insight(
                type="positive",
                title="Under Budget",
                description=f"You're {self._money(savings)} under your total monthly budget",
                value=self._money(savings),
                details="Great job staying within your spending limits!",
            )
        ]
