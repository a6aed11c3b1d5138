"""Closed value sets shared by the models, schemas and services."""

from enum import Enum


class Role(str, Enum):
    CUSTOMER = "customer"
    ADMIN = "admin"
    SUPER_ADMIN = "super_admin"


# Roles allowed to manage the catalog, moderate testimonials and read
# cross-user statistics.
ADMIN_ROLES = frozenset({Role.ADMIN, Role.SUPER_ADMIN})


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    PAUSED = "paused"
    CANCELLED = "cancelled"


class PlanLifecycle(str, Enum):
    """Catalog entries are retired instead of deleted."""

    ACTIVE = "active"
    RETIRED = "retired"


class MealType(str, Enum):
    BREAKFAST = "Breakfast"
    LUNCH = "Lunch"
    DINNER = "Dinner"


class DeliveryDay(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"
