import uuid
from datetime import datetime, timezone

from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()

ACCOUNT_TYPES = ('cash', 'savings', 'checking', 'credit', 'investment')
CURRENCIES = ('USD', 'PHP', 'EUR', 'GBP', 'JPY')
TRANSACTION_TYPES = ('income', 'expense', 'transfer')
CATEGORIES = (
    'food', 'transport', 'shopping', 'entertainment', 'bills', 'health',
    'education', 'travel', 'groceries', 'gas', 'other', 'salary', 'freelance', 'investment',
)


def new_id():
    return str(uuid.uuid4())


def utcnow():
    """Naive UTC timestamp; DateTime columns are stored without tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _money(value):
    return None if value is None else f"{value:.2f}"


def _iso(value):
    return None if value is None else value.isoformat()


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    email = db.Column(db.String(255), unique=True, nullable=False)
    first_name = db.Column(db.String(100))
    last_name = db.Column(db.String(100))
    password_hash = db.Column(db.String(255), nullable=False)
    is_pro = db.Column(db.Boolean, nullable=False, default=False)
    pro_expires_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "isPro": bool(self.is_pro),
            "proExpiresAt": _iso(self.pro_expires_at),
            "createdAt": _iso(self.created_at),
        }


class Account(db.Model):
    __tablename__ = 'accounts'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    type = db.Column(db.Enum(*ACCOUNT_TYPES, name='account_type'), nullable=False)
    currency = db.Column(db.Enum(*CURRENCIES, name='currency'), nullable=False, default='USD')
    balance = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "type": self.type,
            "currency": self.currency,
            "balance": _money(self.balance),
            "isActive": bool(self.is_active),
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


class Transaction(db.Model):
    __tablename__ = 'transactions'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    account_id = db.Column(db.String(36), db.ForeignKey('accounts.id', ondelete='CASCADE'), nullable=False, index=True)
    type = db.Column(db.Enum(*TRANSACTION_TYPES, name='transaction_type'), nullable=False)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    description = db.Column(db.Text, nullable=False)
    category = db.Column(db.Enum(*CATEGORIES, name='category'), nullable=False)
    date = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "accountId": self.account_id,
            "type": self.type,
            "amount": _money(self.amount),
            "description": self.description,
            "category": self.category,
            "date": _iso(self.date),
            "createdAt": _iso(self.created_at),
        }


class Subscription(db.Model):
    __tablename__ = 'subscriptions'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    name = db.Column(db.String(100), nullable=False)
    amount = db.Column(db.Numeric(12, 2), nullable=False)
    currency = db.Column(db.Enum(*CURRENCIES, name='currency'), nullable=False, default='USD')
    # monthly, yearly, weekly
    frequency = db.Column(db.String(20), nullable=False)
    next_billing = db.Column(db.DateTime, nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "name": self.name,
            "amount": _money(self.amount),
            "currency": self.currency,
            "frequency": self.frequency,
            "nextBilling": _iso(self.next_billing),
            "isActive": bool(self.is_active),
            "createdAt": _iso(self.created_at),
        }


class BudgetGoal(db.Model):
    __tablename__ = 'budget_goals'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    user_id = db.Column(db.String(36), db.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    category = db.Column(db.Enum(*CATEGORIES, name='category'), nullable=False)
    monthly_limit = db.Column(db.Numeric(12, 2), nullable=False)
    # Entered by the user; not synced from transactions.
    current_spent = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    month = db.Column(db.String(7), nullable=False)
    is_active = db.Column(db.Boolean, nullable=False, default=True)
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "userId": self.user_id,
            "category": self.category,
            "monthlyLimit": _money(self.monthly_limit),
            "currentSpent": _money(self.current_spent),
            "month": self.month,
            "isActive": bool(self.is_active),
            "createdAt": _iso(self.created_at),
        }
