"""
Data access for SmartExpense.

Every function takes the authenticated owner id and only ever touches rows
that belong to that owner; anything else reads as NotFound.
"""

import logging

from dateutil.relativedelta import relativedelta
from sqlalchemy import func, select, update

import ledger
from errors import Forbidden, NotFound, ValidationError
from models import (
    ACCOUNT_TYPES, CATEGORIES, CURRENCIES, TRANSACTION_TYPES,
    Account, BudgetGoal, Subscription, Transaction, User, db, utcnow,
)
from validators import (
    MAX_DESCRIPTION_LEN, MAX_FREQUENCY_LEN, parse_amount, parse_bool, parse_datetime,
    parse_month, parse_signed_amount, require_choice, require_text,
)

logger = logging.getLogger(__name__)

FREE_ACCOUNT_LIMIT = 3
DEFAULT_TRANSACTION_LIMIT = 50
RECENT_TRANSACTIONS = 5

ACCOUNT_LIMIT_MESSAGE = "Free users can only have 3 accounts. Upgrade to Pro for unlimited accounts."


# ─────────────────────────────────────────────────────────────
#  Users
# ─────────────────────────────────────────────────────────────

def get_user(user_id):
    return db.session.get(User, user_id)


def get_user_by_email(email):
    return db.session.execute(select(User).where(User.email == email)).scalar_one_or_none()


def create_user(email, password_hash, first_name=None, last_name=None):
    if get_user_by_email(email) is not None:
        raise ValidationError("Email already exists")
    user = User(email=email, password_hash=password_hash, first_name=first_name, last_name=last_name)
    db.session.add(user)
    db.session.commit()
    logger.info("Created user %s", user.id)
    return user


def is_pro(user, now=None):
    if user is None or not user.is_pro:
        return False
    if user.pro_expires_at is None:
        return True
    return user.pro_expires_at > (now or utcnow())


def upgrade_to_pro(user_id):
    user = _require_user(user_id)
    now = utcnow()
    user.is_pro = True
    user.pro_expires_at = now + relativedelta(months=1)
    user.updated_at = now
    db.session.commit()
    logger.info("User %s upgraded to Pro until %s", user.id, user.pro_expires_at.isoformat())
    return user


def _require_user(user_id):
    user = get_user(user_id)
    if user is None:
        raise NotFound("User not found")
    return user


# ─────────────────────────────────────────────────────────────
#  Pro-tier gates
# ─────────────────────────────────────────────────────────────

def can_create_account(user, active_count):
    return is_pro(user) or active_count < FREE_ACCOUNT_LIMIT


def can_create_budget_goal(user):
    return is_pro(user)


# ─────────────────────────────────────────────────────────────
#  Accounts
# ─────────────────────────────────────────────────────────────

def get_user_accounts(owner_id):
    stmt = (
        select(Account)
        .where(Account.user_id == owner_id, Account.is_active.is_(True))
        .order_by(Account.created_at)
    )
    return list(db.session.execute(stmt).scalars())


def count_active_accounts(owner_id):
    stmt = select(func.count(Account.id)).where(Account.user_id == owner_id, Account.is_active.is_(True))
    return db.session.execute(stmt).scalar_one()


def get_account(owner_id, account_id):
    account = db.session.get(Account, account_id)
    if account is None or account.user_id != owner_id:
        raise NotFound("Account not found")
    return account


def create_account(owner_id, data):
    user = _require_user(owner_id)
    if not can_create_account(user, count_active_accounts(owner_id)):
        logger.warning("Account limit reached for free user %s", owner_id)
        raise Forbidden(ACCOUNT_LIMIT_MESSAGE)

    account = Account(
        user_id=owner_id,
        name=require_text(data.get('name'), 'name'),
        type=require_choice(data.get('type'), ACCOUNT_TYPES, 'type'),
        currency=require_choice(data.get('currency', 'USD'), CURRENCIES, 'currency'),
        balance=parse_signed_amount(data.get('balance', '0.00')),
    )
    db.session.add(account)
    db.session.commit()
    logger.info("Created %s account %s for user %s", account.type, account.id, owner_id)
    return account


def update_account(owner_id, account_id, data):
    account = get_account(owner_id, account_id)
    if 'name' in data:
        account.name = require_text(data['name'], 'name')
    if 'type' in data:
        account.type = require_choice(data['type'], ACCOUNT_TYPES, 'type')
    if 'currency' in data:
        account.currency = require_choice(data['currency'], CURRENCIES, 'currency')
    if 'balance' in data:
        account.balance = parse_signed_amount(data['balance'])
    if 'isActive' in data:
        is_active = parse_bool(data['isActive'], 'isActive')
        if is_active and not account.is_active:
            # Reactivating counts against the free-tier limit like a new account.
            if not can_create_account(_require_user(owner_id), count_active_accounts(owner_id)):
                logger.warning("Account limit reached for free user %s", owner_id)
                raise Forbidden(ACCOUNT_LIMIT_MESSAGE)
        account.is_active = is_active
    account.updated_at = utcnow()
    db.session.commit()
    return account


def delete_account(owner_id, account_id):
    account = get_account(owner_id, account_id)
    account.is_active = False
    account.updated_at = utcnow()
    db.session.commit()


# ─────────────────────────────────────────────────────────────
#  Transactions
# ─────────────────────────────────────────────────────────────

def create_transaction(owner_id, account_id, type, amount, description, category, date=None):
    """Record a transaction and move its account balance in one unit.

    The balance is changed with a relative UPDATE issued before the insert,
    so concurrent postings on one account queue on the row (or database)
    lock instead of overwriting each other. Nothing is kept if either
    statement fails.
    """
    txn_type = require_choice(type, TRANSACTION_TYPES, 'type')
    amount = parse_amount(amount)
    description = require_text(description, 'description', MAX_DESCRIPTION_LEN)
    category = require_choice(category, CATEGORIES, 'category')
    when = parse_datetime(date) if date is not None else utcnow()

    now = utcnow()
    values = {Account.updated_at: now}
    delta = ledger.balance_delta(txn_type, amount)
    if delta:
        values[Account.balance] = Account.balance + delta

    try:
        result = db.session.execute(
            update(Account)
            .where(
                Account.id == account_id,
                Account.user_id == owner_id,
                Account.is_active.is_(True),
            )
            .values(values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            raise NotFound("Account not found")

        txn = Transaction(
            user_id=owner_id,
            account_id=account_id,
            type=txn_type,
            amount=amount,
            description=description,
            category=category,
            date=when,
            created_at=now,
        )
        db.session.add(txn)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    logger.info("Posted %s %s to account %s", txn_type, amount, account_id)
    return txn


def get_user_transactions(owner_id, limit=DEFAULT_TRANSACTION_LIMIT):
    stmt = (
        select(Transaction)
        .where(Transaction.user_id == owner_id)
        .order_by(Transaction.date.desc(), Transaction.created_at.desc())
        .limit(limit)
    )
    return list(db.session.execute(stmt).scalars())


def get_transactions_by_account(owner_id, account_id):
    get_account(owner_id, account_id)
    stmt = (
        select(Transaction)
        .where(Transaction.user_id == owner_id, Transaction.account_id == account_id)
        .order_by(Transaction.date.desc())
    )
    return list(db.session.execute(stmt).scalars())


def get_transactions_by_category(owner_id, category):
    require_choice(category, CATEGORIES, 'category')
    stmt = (
        select(Transaction)
        .where(Transaction.user_id == owner_id, Transaction.category == category)
        .order_by(Transaction.date.desc())
    )
    return list(db.session.execute(stmt).scalars())


def get_transactions_by_date_range(owner_id, start, end):
    """Transactions with ``start <= date < end``, newest first."""
    stmt = (
        select(Transaction)
        .where(
            Transaction.user_id == owner_id,
            Transaction.date >= start,
            Transaction.date < end,
        )
        .order_by(Transaction.date.desc())
    )
    return list(db.session.execute(stmt).scalars())


# ─────────────────────────────────────────────────────────────
#  Subscriptions
# ─────────────────────────────────────────────────────────────

def get_user_subscriptions(owner_id):
    stmt = (
        select(Subscription)
        .where(Subscription.user_id == owner_id, Subscription.is_active.is_(True))
        .order_by(Subscription.next_billing)
    )
    return list(db.session.execute(stmt).scalars())


def _get_subscription(owner_id, subscription_id):
    subscription = db.session.get(Subscription, subscription_id)
    if subscription is None or subscription.user_id != owner_id:
        raise NotFound("Subscription not found")
    return subscription


def create_subscription(owner_id, data):
    subscription = Subscription(
        user_id=owner_id,
        name=require_text(data.get('name'), 'name'),
        amount=parse_amount(data.get('amount')),
        currency=require_choice(data.get('currency', 'USD'), CURRENCIES, 'currency'),
        frequency=require_text(data.get('frequency'), 'frequency', MAX_FREQUENCY_LEN),
        next_billing=parse_datetime(data.get('nextBilling'), 'nextBilling'),
    )
    db.session.add(subscription)
    db.session.commit()
    return subscription


def update_subscription(owner_id, subscription_id, data):
    subscription = _get_subscription(owner_id, subscription_id)
    if 'name' in data:
        subscription.name = require_text(data['name'], 'name')
    if 'amount' in data:
        subscription.amount = parse_amount(data['amount'])
    if 'currency' in data:
        subscription.currency = require_choice(data['currency'], CURRENCIES, 'currency')
    if 'frequency' in data:
        subscription.frequency = require_text(data['frequency'], 'frequency', MAX_FREQUENCY_LEN)
    if 'nextBilling' in data:
        subscription.next_billing = parse_datetime(data['nextBilling'], 'nextBilling')
    if 'isActive' in data:
        subscription.is_active = parse_bool(data['isActive'], 'isActive')
    db.session.commit()
    return subscription


def delete_subscription(owner_id, subscription_id):
    subscription = _get_subscription(owner_id, subscription_id)
    subscription.is_active = False
    db.session.commit()


# ─────────────────────────────────────────────────────────────
#  Budget goals
# ─────────────────────────────────────────────────────────────

def get_user_budget_goals(owner_id):
    stmt = (
        select(BudgetGoal)
        .where(BudgetGoal.user_id == owner_id, BudgetGoal.is_active.is_(True))
        .order_by(BudgetGoal.month.desc(), BudgetGoal.category)
    )
    return list(db.session.execute(stmt).scalars())


def _get_budget_goal(owner_id, goal_id):
    goal = db.session.get(BudgetGoal, goal_id)
    if goal is None or goal.user_id != owner_id:
        raise NotFound("Budget goal not found")
    return goal


def _validated_month(value):
    parse_month(value)
    return value


def create_budget_goal(owner_id, data):
    user = _require_user(owner_id)
    if not can_create_budget_goal(user):
        logger.warning("Budget goal refused for free user %s", owner_id)
        raise Forbidden("Budget goals are a Pro feature. Upgrade to Pro to access this feature.")

    goal = BudgetGoal(
        user_id=owner_id,
        category=require_choice(data.get('category'), CATEGORIES, 'category'),
        monthly_limit=parse_amount(data.get('monthlyLimit'), 'monthlyLimit'),
        current_spent=parse_amount(data.get('currentSpent', '0'), 'currentSpent', allow_zero=True),
        month=_validated_month(data.get('month')),
    )
    db.session.add(goal)
    db.session.commit()
    return goal


def update_budget_goal(owner_id, goal_id, data):
    goal = _get_budget_goal(owner_id, goal_id)
    if 'category' in data:
        goal.category = require_choice(data['category'], CATEGORIES, 'category')
    if 'monthlyLimit' in data:
        goal.monthly_limit = parse_amount(data['monthlyLimit'], 'monthlyLimit')
    if 'currentSpent' in data:
        goal.current_spent = parse_amount(data['currentSpent'], 'currentSpent', allow_zero=True)
    if 'month' in data:
        goal.month = _validated_month(data['month'])
    if 'isActive' in data:
        goal.is_active = parse_bool(data['isActive'], 'isActive')
    db.session.commit()
    return goal


def delete_budget_goal(owner_id, goal_id):
    goal = _get_budget_goal(owner_id, goal_id)
    goal.is_active = False
    db.session.commit()


# ─────────────────────────────────────────────────────────────
#  Analytics
# ─────────────────────────────────────────────────────────────

def current_month():
    return utcnow().strftime('%Y-%m')


def _month_transactions(owner_id, month):
    start, end = ledger.month_bounds(month)
    return get_transactions_by_date_range(owner_id, start, end)


def get_total_balance(owner_id):
    return ledger.total_balance(get_user_accounts(owner_id))


def get_monthly_expenses(owner_id, month):
    return ledger.monthly_expenses(_month_transactions(owner_id, month))


def get_category_spending(owner_id, month):
    return ledger.category_spending(_month_transactions(owner_id, month))


def get_dashboard(owner_id, month):
    transactions = _month_transactions(owner_id, month)
    return {
        "month": month,
        "total_balance": get_total_balance(owner_id),
        "monthly_expenses": ledger.monthly_expenses(transactions),
        "category_spending": ledger.category_spending(transactions),
        "recent_transactions": get_user_transactions(owner_id, RECENT_TRANSACTIONS),
        "subscriptions": get_user_subscriptions(owner_id),
    }
