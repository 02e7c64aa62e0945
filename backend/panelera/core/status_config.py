"""Status values shared by the models and the analytics reports

Lot states, user roles and supply movement directions are stored as plain
strings; these enums are the single source of their allowed values and of
the order in which reports list them.
"""
from enum import Enum
from typing import List


class LotState(str, Enum):
    """Lifecycle state of a production lot"""
    IN_PRODUCTION = "IN_PRODUCTION"
    AVAILABLE = "AVAILABLE"
    SOLD = "SOLD"
    EXPIRED = "EXPIRED"


class UserRole(str, Enum):
    ADMIN = "ADMIN"
    OPERATOR = "OPERATOR"


class MovementDirection(str, Enum):
    """Direction of a raw-material stock movement"""
    IN = "IN"
    OUT = "OUT"


# Report order for lot-state comparisons
LOT_STATE_ORDER: List[LotState] = [
    LotState.IN_PRODUCTION,
    LotState.AVAILABLE,
    LotState.SOLD,
    LotState.EXPIRED,
]

STAFF_ROLES = {UserRole.ADMIN.value, UserRole.OPERATOR.value}
