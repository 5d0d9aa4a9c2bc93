"""ORM models."""

from gold_ledger.models.cycle import Cycle
from gold_ledger.models.lot import Lot
from gold_ledger.models.monthly_data import MonthlyData
from gold_ledger.models.payment import Payment
from gold_ledger.models.program import Program
from gold_ledger.models.user import User
from gold_ledger.models.winner import Winner

__all__ = ["Cycle", "Lot", "MonthlyData", "Payment", "Program", "User", "Winner"]
