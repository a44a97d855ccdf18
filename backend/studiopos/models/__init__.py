from .catalog import Session, AddOn
from .transactions import Transaction, TransactionSession, TransactionAddOn
from .attendance import AttendanceRecord
from .auth import User, SessionToken

__all__ = [
    'Session', 'AddOn',
    'Transaction', 'TransactionSession', 'TransactionAddOn',
    'AttendanceRecord',
    'User', 'SessionToken',
]
