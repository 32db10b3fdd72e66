"""
Request and report schemas for the finance API.

Request models validate incoming JSON/form payloads before anything is
written. Report models fix the layout of the stored report document.
Field names are snake_case in Python and camelCase on the wire.
"""
from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Dict, List, Literal, Optional

from pydantic import (AfterValidator, BaseModel, BeforeValidator, ConfigDict,
                      Field, PlainSerializer, ValidationError, model_validator)
from pydantic.alias_generators import to_camel

from errors import ValidationFailed
from models import money

Amount = Annotated[Decimal, Field(gt=0, max_digits=10, decimal_places=2)]
Frequency = Literal['daily', 'weekly', 'monthly', 'yearly']


def _local_naive(value):
    # Columns store naive local time
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def _split_tags(value):
    if isinstance(value, str):
        return [tag.strip() for tag in value.split(',') if tag.strip()]
    return value


LocalDateTime = Annotated[datetime, AfterValidator(_local_naive)]
Tags = Annotated[List[str], BeforeValidator(_split_tags)]


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class ExpenseIn(ApiModel):
    amount: Amount
    category: str = Field(..., min_length=1, max_length=50)
    subcategory: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = Field(None, max_length=1000)
    location: Optional[str] = Field(None, max_length=200)
    merchant_name: Optional[str] = Field(None, max_length=200)
    payment_method: Optional[str] = Field(None, max_length=50)
    tags: Tags = Field(default_factory=list)
    date: Optional[LocalDateTime] = None
    is_recurring: bool = False


class IncomeIn(ApiModel):
    amount: Amount
    source: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = Field(None, max_length=1000)
    date: Optional[LocalDateTime] = None
    is_recurring: bool = False
    frequency: Optional[Frequency] = None
    category: str = Field('primary', min_length=1, max_length=50)

    @model_validator(mode='after')
    def _frequency_for_recurring(self):
        if self.is_recurring and not self.frequency:
            raise ValueError('frequency is required for recurring income')
        return self


class BudgetIn(ApiModel):
    name: str = Field(..., min_length=1, max_length=100)
    category: str = Field(..., min_length=1, max_length=50)
    amount: Amount
    period: Literal['weekly', 'monthly', 'yearly'] = 'monthly'
    alert_threshold: Decimal = Field(Decimal('80'), gt=0, le=100, decimal_places=2)
    is_active: bool = True
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode='after')
    def _date_order(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError('endDate must not be before startDate')
        return self


class GoalIn(ApiModel):
    name: str = Field(..., min_length=1, max_length=100)
    target_amount: Amount
    deadline: Optional[date] = None
    priority: Literal['low', 'medium', 'high'] = 'medium'
    category: str = Field('savings', min_length=1, max_length=50)
    monthly_target: Optional[Amount] = None


class GoalProgressIn(ApiModel):
    current_amount: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)


class ContributionIn(ApiModel):
    amount: Amount


class RecurringIn(ApiModel):
    type: Literal['expense', 'income']
    amount: Amount
    category: str = Field(..., min_length=1, max_length=50)
    description: str = Field(..., min_length=1, max_length=500)
    frequency: Frequency
    next_date: LocalDateTime
    is_active: bool = True
    end_date: Optional[LocalDateTime] = None

    @model_validator(mode='after')
    def _date_order(self):
        if self.end_date and self.end_date < self.next_date:
            raise ValueError('endDate must not be before nextDate')
        return self


class ReportRequest(ApiModel):
    report_type: Literal['monthly', 'quarterly', 'yearly', 'custom'] = Field(..., alias='type')
    start_date: date
    end_date: date

    @model_validator(mode='after')
    def _date_order(self):
        if self.end_date < self.start_date:
            raise ValueError('endDate must not be before startDate')
        return self


MoneyOut = Annotated[Decimal, PlainSerializer(money, return_type=str, when_used='json')]


class ReportSummary(ApiModel):
    total_income: MoneyOut
    total_expenses: MoneyOut
    net_income: MoneyOut
    transaction_count: int


class ExpenseBreakdown(ApiModel):
    total: MoneyOut
    by_category: Dict[str, MoneyOut]
    transactions: int


class IncomeBreakdown(ApiModel):
    total: MoneyOut
    transactions: int


class BudgetSnapshot(ApiModel):
    name: str
    category: str
    budgeted: MoneyOut
    spent: MoneyOut
    remaining: MoneyOut


class ReportPayload(ApiModel):
    summary: ReportSummary
    expenses: ExpenseBreakdown
    income: IncomeBreakdown
    budgets: List[BudgetSnapshot]

    def to_json(self):
        return self.model_dump_json(by_alias=True)


def parse_payload(schema, data, message):
    """Validate ``data`` against ``schema`` or raise ``ValidationFailed``."""
    try:
        return schema.model_validate(data or {})
    except ValidationError as exc:
        raise ValidationFailed.from_pydantic(message, exc) from exc
