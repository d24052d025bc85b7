"""
Core Ledger Models for Spendly

These models define the schemas for everything the ledger engine reads
and produces:
1. Stored entities (Expense, Category, Budget)
2. The read-only snapshot handed to the analytics layer
3. The aggregate value objects handed to the presentation layer

DESIGN DECISION: Amounts are Decimals end to end. The engine never
formats or rounds them; that belongs to the formatting layer.
"""

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
)


def local_naive(moment: datetime) -> datetime:
    """Convert an aware datetime to naive local time; naive values pass through."""
    if moment.tzinfo is None:
        return moment
    return moment.astimezone().replace(tzinfo=None)


# =============================================================================
# ENUMS - Closed sets of valid values
# =============================================================================

class CategoryColor(str, Enum):
    """
    Symbolic color tags a category can carry.

    Unrecognized tags resolve to GRAY instead of failing validation,
    so a stale or hand-edited record still renders.
    """
    ORANGE = "orange"
    BLUE = "blue"
    GREEN = "green"
    PURPLE = "purple"
    RED = "red"
    PINK = "pink"
    YELLOW = "yellow"
    TEAL = "teal"
    CYAN = "cyan"
    INDIGO = "indigo"
    MINT = "mint"
    GRAY = "gray"  # Fallback arm

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> "CategoryColor":
        """Resolve a free-text tag, case-insensitively, with GRAY fallback."""
        if isinstance(tag, cls):
            return tag
        try:
            return cls((tag or "").strip().lower())
        except ValueError:
            return cls.GRAY


class CategoryIcon(str, Enum):
    """Icon symbols for well-known category names."""
    FOOD = "fork.knife"
    TRANSPORT = "car.fill"
    SHOPPING = "bag.fill"
    HOME = "house.fill"
    HEALTH = "heart.fill"
    ENTERTAINMENT = "gamecontroller.fill"
    FITNESS = "dumbbell.fill"
    EDUCATION = "book.fill"
    TRAVEL = "airplane"
    SUBSCRIPTIONS = "repeat.circle.fill"
    TAG = "tag.fill"  # Fallback arm

    @classmethod
    def for_category_name(cls, name: Optional[str]) -> "CategoryIcon":
        """Pick the icon for a category name (English or Spanish)."""
        return _ICONS_BY_NAME.get((name or "").strip().lower(), cls.TAG)


_ICONS_BY_NAME = {
    "food": CategoryIcon.FOOD,
    "comida": CategoryIcon.FOOD,
    "transport": CategoryIcon.TRANSPORT,
    "transporte": CategoryIcon.TRANSPORT,
    "shopping": CategoryIcon.SHOPPING,
    "compras": CategoryIcon.SHOPPING,
    "home": CategoryIcon.HOME,
    "hogar": CategoryIcon.HOME,
    "health": CategoryIcon.HEALTH,
    "salud": CategoryIcon.HEALTH,
    "entertainment": CategoryIcon.ENTERTAINMENT,
    "gym": CategoryIcon.FITNESS,
    "fitness": CategoryIcon.FITNESS,
    "education": CategoryIcon.EDUCATION,
    "educacion": CategoryIcon.EDUCATION,
    "travel": CategoryIcon.TRAVEL,
    "viaje": CategoryIcon.TRAVEL,
    "subscriptions": CategoryIcon.SUBSCRIPTIONS,
}


class Currency(str, Enum):
    """
    Display currencies.

    DESIGN DECISION: There is no conversion. The currency only picks the
    symbol the formatting layer prepends to an amount.
    """
    USD = "USD"
    MXN = "MXN"
    EUR = "EUR"
    GBP = "GBP"
    JPY = "JPY"

    @property
    def symbol(self) -> str:
        return _CURRENCY_SYMBOLS[self]

    @classmethod
    def from_code(cls, code: Optional[str]) -> Optional["Currency"]:
        """Look up a currency code, returning None when unknown."""
        if isinstance(code, cls):
            return code
        try:
            return cls((code or "").strip().upper())
        except ValueError:
            return None


_CURRENCY_SYMBOLS = {
    Currency.USD: "$",
    Currency.MXN: "$",
    Currency.EUR: "€",
    Currency.GBP: "£",
    Currency.JPY: "¥",
}

DEFAULT_CURRENCY_SYMBOL = "$"


class Period(str, Enum):
    """Rolling windows ending at the current instant."""
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


class BudgetStatus(str, Enum):
    """
    Classification of cumulative spend against the balance.

    UNSET is only produced when the unset-budget policy asks for it.
    """
    NORMAL = "normal"
    NEAR_LIMIT = "near_limit"
    OVER_LIMIT = "over_limit"
    UNSET = "unset"


class UnsetBudgetPolicy(str, Enum):
    """How a ledger with no positive balance is classified."""
    TREAT_AS_ZERO = "treat_as_zero"  # Any positive spend is OVER_LIMIT
    REPORT_UNSET = "report_unset"    # Always BudgetStatus.UNSET


# =============================================================================
# STORED ENTITIES
# =============================================================================

class Category(BaseModel):
    """
    A user-defined spending bucket.

    Categories are never edited after creation. Deleting one clears the
    reference on its expenses; see the storage layer for the cascade.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique category ID"
    )
    name: str = Field(
        ...,
        description="Display name"
    )
    color: CategoryColor = Field(
        default=CategoryColor.GRAY,
        description="Symbolic color tag"
    )

    @field_validator("color", mode="before")
    @classmethod
    def resolve_color(cls, v):
        return CategoryColor.from_tag(v)

    @property
    def icon(self) -> CategoryIcon:
        return CategoryIcon.for_category_name(self.name)


class Expense(BaseModel):
    """
    A single spending event.

    The description is required by the entry points but deliberately
    not by this model, so legacy rows with an empty label still load.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique expense ID"
    )
    amount: Decimal = Field(
        ...,
        gt=0,
        description="Amount spent, in the display currency"
    )
    date: datetime = Field(
        default_factory=datetime.now,
        description="When the money was spent (user editable)"
    )
    description: str = Field(
        default="",
        description="Free-text label"
    )
    category: Optional[Category] = Field(
        default=None,
        description="Resolved category; None means uncategorized"
    )

    @field_validator("date")
    @classmethod
    def normalize_date(cls, v: datetime) -> datetime:
        return local_naive(v)

    @property
    def category_id(self) -> Optional[UUID]:
        return self.category.id if self.category else None


class Budget(BaseModel):
    """The single total-balance record."""

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique budget ID"
    )
    total_amount: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="Configured balance ceiling"
    )
    last_updated: datetime = Field(
        default_factory=datetime.now,
        description="Last time the balance was set"
    )

    @field_validator("last_updated")
    @classmethod
    def normalize_last_updated(cls, v: datetime) -> datetime:
        return local_naive(v)


class LedgerSnapshot(BaseModel):
    """
    Read-only view of the store at call time.

    This is the only input the analytics layer accepts.
    """

    expenses: list[Expense] = Field(default_factory=list)
    categories: list[Category] = Field(default_factory=list)
    budget: Optional[Budget] = None

    @property
    def total_balance(self) -> Decimal:
        """Balance with "no budget yet" read as zero."""
        return self.budget.total_amount if self.budget else Decimal("0")


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single problem with user input."""

    field: str = Field(
        ...,
        description="Input field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'missing', 'not_numeric', 'not_positive')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )


# =============================================================================
# AGGREGATE VALUE OBJECTS
# =============================================================================

class ExpenseSummary(BaseModel):
    """Totals over a filtered expense set."""

    total: Decimal = Decimal("0")
    count: int = Field(default=0, ge=0)
    average: Decimal = Decimal("0")
    largest: Optional[Expense] = None


class CategoryTotal(BaseModel):
    """One row of a category breakdown."""

    category_id: Optional[UUID] = Field(
        default=None,
        description="None for the synthetic uncategorized bucket"
    )
    name: str
    color: CategoryColor
    total: Decimal
    share: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        le=1,
        description="Fraction of the set's total spend; 0 when nothing was spent"
    )

    @property
    def icon(self) -> CategoryIcon:
        return CategoryIcon.for_category_name(self.name)


class TimeBucket(BaseModel):
    """One bar of the spending-over-time chart."""

    label: str
    total: Decimal


class BudgetReport(BaseModel):
    """Balance status over the whole, unfiltered ledger."""

    total_balance: Decimal
    total_spent: Decimal
    remaining: Decimal
    spent_percentage: Decimal = Field(
        ...,
        ge=0,
        le=1,
        description="Spend as a fraction of the balance, clamped to [0, 1]"
    )
    status: BudgetStatus

    @property
    def is_near_limit(self) -> bool:
        return self.status == BudgetStatus.NEAR_LIMIT

    @property
    def is_over_limit(self) -> bool:
        return self.status == BudgetStatus.OVER_LIMIT


class DashboardReport(BaseModel):
    """Everything the dashboard shows for one period."""

    period: Period
    period_start: datetime
    generated_at: datetime
    summary: ExpenseSummary
    category_breakdown: list[CategoryTotal] = Field(default_factory=list)
    time_buckets: list[TimeBucket] = Field(default_factory=list)
    recent: list[Expense] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.summary.count == 0


class WalletReport(BaseModel):
    """Balance status plus an optionally category-filtered expense list."""

    budget: BudgetReport
    categories: list[Category] = Field(default_factory=list)
    selected_category: Optional[Category] = None
    summary: ExpenseSummary
    expenses: list[Expense] = Field(default_factory=list)
