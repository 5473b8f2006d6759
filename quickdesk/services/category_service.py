import logging

from sqlalchemy.orm import Session

from quickdesk.models.category import Category

logger = logging.getLogger(__name__)

DEFAULT_CATEGORIES = [
    {"name": "Hardware Support", "specializations": ["printer", "computer", "laptop", "hardware", "repair"]},
    {"name": "Software Support", "specializations": ["software", "application", "program", "installation"]},
    {"name": "Network Support", "specializations": ["network", "internet", "wifi", "connection"]},
    {"name": "Account Support", "specializations": ["account", "login", "password", "access"]},
    {"name": "General Support", "specializations": ["general", "help", "support", "question"]},
]


def seed_default_categories(db: Session) -> int:
    """Insert the default categories when the table is empty. Returns rows added."""
    if db.query(Category).count() > 0:
        return 0

    # Ids come from the table sequence; on an empty table they are 1..5 in list order
    for row in DEFAULT_CATEGORIES:
        db.add(Category(**row))
    db.commit()
    logger.info("Seeded %d default categories", len(DEFAULT_CATEGORIES))
    return len(DEFAULT_CATEGORIES)


def create_category(db: Session, name: str) -> Category:
    # New categories start with no specialization tags
    category = Category(name=name, specializations=[])
    db.add(category)
    db.commit()
    db.refresh(category)
    return category
