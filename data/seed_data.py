"""Demo data for a fresh database.

This module provides:
- seed_meal_plans(session): the three catalog plans
- seed_testimonials(session): a few approved reviews
- seed_users(session): one account per role
- seed_all(session): all of the above

Each seeder only writes into an empty table, so running it twice is safe.
"""
from __future__ import annotations

from typing import List, Dict

from sqlalchemy.orm import Session

from core.enums import PlanLifecycle, Role
from core.logger import get_logger
from core.repository import save_all
from core.security import hash_password
from database import models

logger = get_logger("data.seed_data")

MEAL_PLANS: List[Dict] = [
    {
        "name": "Diet Plan",
        "price": 30000,
        "description": "Perfect for weight management and healthy living. Low-calorie, nutrient-dense meals "
                       "designed to help you reach your fitness goals.",
        "features": [
            "Calorie-controlled portions (1200-1500 calories)",
            "High fiber content for better digestion",
            "Fresh vegetables and lean proteins",
            "Nutritionist-approved recipes",
        ],
        "icon": "🥗",
    },
    {
        "name": "Protein Plan",
        "price": 40000,
        "description": "High-protein meals for active individuals. Build muscle, recover faster and fuel "
                       "your workouts.",
        "features": [
            "High protein content (25-35g per meal)",
            "Supports muscle building and recovery",
            "Premium quality lean meats and fish",
            "Plant-based protein options available",
        ],
        "icon": "💪",
    },
    {
        "name": "Royal Plan",
        "price": 60000,
        "description": "Our premium offering with gourmet ingredients and chef-crafted recipes.",
        "features": [
            "Gourmet ingredients and chef-crafted recipes",
            "Premium cuts of meat and fresh seafood",
            "Organic vegetables and superfoods",
            "Personalized nutrition consultation",
        ],
        "icon": "👑",
    },
]

TESTIMONIALS: List[Dict] = [
    {
        "customer_name": "Sarah M.",
        "rating": 5,
        "review_message": "The meals are delicious, healthy and always delivered on time. "
                          "I love that I can customize them for my dietary needs.",
    },
    {
        "customer_name": "David L.",
        "rating": 5,
        "review_message": "As a busy professional this has been a lifesaver. No more worrying about what to eat.",
    },
    {
        "customer_name": "Rina K.",
        "rating": 4,
        "review_message": "Great variety and portion sizes. Delivery was late once but support sorted it out quickly.",
    },
]

# Demo accounts: (name, email, password, role)
USERS = [
    ("Super Admin", "admin@seacatering.id", "Admin@123456", Role.SUPER_ADMIN),
    ("Admin User", "admin.user@seacatering.id", "Admin@123456", Role.ADMIN),
    ("Demo Customer", "customer@seacatering.id", "Customer@123", Role.CUSTOMER),
]


def seed_meal_plans(session: Session) -> int:
    existing = session.query(models.MealPlan).count()
    if existing:
        logger.info("Skipping meal plans seed: %s already present", existing)
        return 0
    plans = [models.MealPlan(lifecycle=PlanLifecycle.ACTIVE, **item) for item in MEAL_PLANS]
    save_all(session, plans)
    logger.info("Seeded %s meal plans", len(plans))
    return len(plans)


def seed_testimonials(session: Session) -> int:
    existing = session.query(models.Testimonial).count()
    if existing:
        logger.info("Skipping testimonials seed: %s already present", existing)
        return 0
    rows = [models.Testimonial(is_approved=True, **item) for item in TESTIMONIALS]
    save_all(session, rows)
    logger.info("Seeded %s testimonials", len(rows))
    return len(rows)


def seed_users(session: Session) -> int:
    existing = session.query(models.User).count()
    if existing:
        logger.info("Skipping users seed: %s already present", existing)
        return 0
    users = [
        models.User(name=name, email=email, password_hash=hash_password(password), role=role)
        for name, email, password, role in USERS
    ]
    save_all(session, users)
    logger.info("Seeded %s users", len(users))
    return len(users)


def seed_all(session: Session) -> Dict[str, int]:
    return {
        "meal_plans": seed_meal_plans(session),
        "testimonials": seed_testimonials(session),
        "users": seed_users(session),
    }


if __name__ == "__main__":
    from database import init_db

    init_db(seed=True)
