"""
Domain enums for ChefOS application.
Contains all enumeration types used across the domain models.
"""

import enum


class UserRole(str, enum.Enum):
    """Account roles"""

    USER = "user"
    ADMIN = "admin"


class Language(str, enum.Enum):
    """Supported content languages"""

    PL = "pl"
    EN = "en"
    RU = "ru"


class Difficulty(str, enum.Enum):
    """Recipe difficulty"""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class CourseLevel(str, enum.Enum):
    """Course target audience"""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    PROFESSIONAL = "professional"


class TransactionType(str, enum.Enum):
    """Chef token ledger entry kinds"""

    PURCHASE = "purchase"  # tokens bought with money
    SPEND = "spend"  # tokens paid for recipes
    TRANSFER_IN = "transfer_in"
    TRANSFER_OUT = "transfer_out"
    BONUS = "bonus"  # granted by the platform or an admin
    REFUND = "refund"


class OrderStatus(str, enum.Enum):
    """Checkout order states"""

    COMPLETED = "completed"
    REFUNDED = "refunded"


class MatchScenario(str, enum.Enum):
    """Assistant classification of a recipe against the fridge"""

    CAN_COOK_NOW = "CAN_COOK_NOW"
    ALMOST_READY = "ALMOST_READY"
    NEED_MORE = "NEED_MORE"


class SelectionOutcome(str, enum.Enum):
    """Result codes for picking the next assistant recipe"""

    OK = "OK"
    NO_RECIPES_FOR_FRIDGE = "NO_RECIPES_FOR_FRIDGE"
    ALL_RECIPES_VIEWED = "ALL_RECIPES_VIEWED"


class Freshness(str, enum.Enum):
    """Fridge item freshness derived from days left"""

    FRESH = "fresh"
    WARNING = "warning"
    DANGER = "danger"


class ConflictPolicy(str, enum.Enum):
    """How the recipe wizard resolves a name collision on save"""

    FAIL = "fail"
    RENAME = "rename"
    OVERWRITE = "overwrite"


class LossReason(str, enum.Enum):
    """Why a fridge batch was thrown away"""

    EXPIRED = "expired"
    DAMAGED = "damaged"
    SPOILED = "spoiled"
    MISTAKE = "mistake"
