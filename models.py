import json
from datetime import datetime
from decimal import Decimal

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

CENT = Decimal('0.01')


def money(value):
    """Render an amount as a two-decimal string, e.g. ``"30.00"``."""
    if value is None:
        return None
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return str(value.quantize(CENT))


def _iso(value):
    return value.isoformat() if value is not None else None


class Expense(db.Model):
    __tablename__ = 'expenses'

    id = db.Column(db.Integer, primary_key=True)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    category = db.Column(db.String(50), nullable=False, index=True)
    subcategory = db.Column(db.String(50))
    description = db.Column(db.Text)
    location = db.Column(db.String(200))
    merchant_name = db.Column(db.String(200))
    payment_method = db.Column(db.String(50))
    tags = db.Column(db.JSON)
    date = db.Column(db.DateTime, nullable=False, default=datetime.now, index=True)
    receipt_url = db.Column(db.String(255))
    is_recurring = db.Column(db.Boolean, nullable=False, default=False)

    def to_dict(self):
        return {
            'id': self.id,
            'amount': money(self.amount),
            'category': self.category,
            'subcategory': self.subcategory,
            'description': self.description,
            'location': self.location,
            'merchantName': self.merchant_name,
            'paymentMethod': self.payment_method,
            'tags': self.tags or [],
            'date': _iso(self.date),
            'receiptUrl': self.receipt_url,
            'isRecurring': self.is_recurring,
        }


class Income(db.Model):
    __tablename__ = 'incomes'

    id = db.Column(db.Integer, primary_key=True)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    source = db.Column(db.String(100), nullable=False)
    description = db.Column(db.Text)
    date = db.Column(db.DateTime, nullable=False, default=datetime.now, index=True)
    is_recurring = db.Column(db.Boolean, nullable=False, default=False)
    frequency = db.Column(db.String(20))
    category = db.Column(db.String(50), nullable=False, default='primary')

    def to_dict(self):
        return {
            'id': self.id,
            'amount': money(self.amount),
            'source': self.source,
            'description': self.description,
            'date': _iso(self.date),
            'isRecurring': self.is_recurring,
            'frequency': self.frequency,
            'category': self.category,
        }


class Budget(db.Model):
    __tablename__ = 'budgets'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    category = db.Column(db.String(50), nullable=False, index=True)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    spent = db.Column(db.Numeric(10, 2), nullable=False, default=Decimal('0'))
    period = db.Column(db.String(20), nullable=False, default='monthly')
    alert_threshold = db.Column(db.Numeric(5, 2), nullable=False, default=Decimal('80'))
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    start_date = db.Column(db.Date)
    end_date = db.Column(db.Date)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)

    alerts = db.relationship('BudgetAlert', backref='budget', lazy=True,
                             cascade='all, delete-orphan')

    @property
    def spent_percentage(self):
        if not self.amount:
            return Decimal('0')
        return Decimal(self.spent) / Decimal(self.amount) * 100

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category,
            'amount': money(self.amount),
            'spent': money(self.spent),
            'remaining': money(Decimal(self.amount) - Decimal(self.spent)),
            'spentPercentage': str(self.spent_percentage.quantize(Decimal('0.1'))),
            'period': self.period,
            'alertThreshold': money(self.alert_threshold),
            'isActive': self.is_active,
            'startDate': _iso(self.start_date),
            'endDate': _iso(self.end_date),
            'createdAt': _iso(self.created_at),
        }


class Goal(db.Model):
    __tablename__ = 'goals'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    target_amount = db.Column(db.Numeric(10, 2), nullable=False)
    current_amount = db.Column(db.Numeric(10, 2), nullable=False, default=Decimal('0'))
    deadline = db.Column(db.Date)
    is_completed = db.Column(db.Boolean, nullable=False, default=False)
    priority = db.Column(db.String(10), nullable=False, default='medium')
    category = db.Column(db.String(50), nullable=False, default='savings')
    monthly_target = db.Column(db.Numeric(10, 2))
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'targetAmount': money(self.target_amount),
            'currentAmount': money(self.current_amount),
            'deadline': _iso(self.deadline),
            'isCompleted': self.is_completed,
            'priority': self.priority,
            'category': self.category,
            'monthlyTarget': money(self.monthly_target),
            'createdAt': _iso(self.created_at),
        }


class RecurringTransaction(db.Model):
    __tablename__ = 'recurring_transactions'

    id = db.Column(db.Integer, primary_key=True)
    type = db.Column(db.String(10), nullable=False)
    amount = db.Column(db.Numeric(10, 2), nullable=False)
    category = db.Column(db.String(50), nullable=False)
    description = db.Column(db.Text, nullable=False)
    frequency = db.Column(db.String(10), nullable=False)
    next_date = db.Column(db.DateTime, nullable=False, index=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    end_date = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)

    def to_dict(self):
        return {
            'id': self.id,
            'type': self.type,
            'amount': money(self.amount),
            'category': self.category,
            'description': self.description,
            'frequency': self.frequency,
            'nextDate': _iso(self.next_date),
            'isActive': self.is_active,
            'endDate': _iso(self.end_date),
            'createdAt': _iso(self.created_at),
        }


class FinancialReport(db.Model):
    __tablename__ = 'financial_reports'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False)
    type = db.Column(db.String(20), nullable=False)
    start_date = db.Column(db.Date, nullable=False)
    end_date = db.Column(db.Date, nullable=False)
    data = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'type': self.type,
            'startDate': _iso(self.start_date),
            'endDate': _iso(self.end_date),
            'data': json.loads(self.data),
            'createdAt': _iso(self.created_at),
        }


class BudgetAlert(db.Model):
    __tablename__ = 'budget_alerts'

    id = db.Column(db.Integer, primary_key=True)
    budget_id = db.Column(db.Integer, db.ForeignKey('budgets.id', ondelete='CASCADE'),
                          nullable=False, index=True)
    alert_type = db.Column(db.String(20), nullable=False)
    message = db.Column(db.Text, nullable=False)
    is_read = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, nullable=False, default=datetime.now)

    def to_dict(self):
        return {
            'id': self.id,
            'budgetId': self.budget_id,
            'alertType': self.alert_type,
            'message': self.message,
            'isRead': self.is_read,
            'createdAt': _iso(self.created_at),
        }
