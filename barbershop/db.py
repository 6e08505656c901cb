# barbershop/db.py

import logging
from decimal import Decimal

from sqlmodel import SQLModel, create_engine, Session, select

from barbershop import config, data
from barbershop.models import Category, Service, Barber, Product

logger = logging.getLogger(__name__)

connect_args = {}
if config.DATABASE_URL.startswith("sqlite"):
    connect_args["check_same_thread"] = False  # required for SQLite + FastAPI

# Engine = connection to the database
engine = create_engine(
    config.DATABASE_URL,
    echo=False,
    pool_pre_ping=True,
    connect_args=connect_args,
)


# Dependency: one session per request
def get_session():
    with Session(engine) as session:
        yield session


def create_db_and_tables(bind=None):
    SQLModel.metadata.create_all(bind or engine)


def seed_catalog(session: Session) -> bool:
    """Load the sample catalog into an empty database.

    Returns False when categories already exist, so restarts never duplicate rows.
    """
    if session.exec(select(Category)).first() is not None:
        return False

    categories = {}
    for c in data.CATEGORIES:
        category = Category(name=c["name"], type=c["type"])
        session.add(category)
        categories[c["name"]] = category
    session.flush()  # assigns category ids

    for category_name, name, description, price, duration in data.SERVICES:
        session.add(Service(
            name=name,
            description=description,
            price=Decimal(price),
            duration=duration,
            category_id=categories[category_name].id,
        ))

    for b in data.BARBERS:
        session.add(Barber(
            name=b["name"],
            title=b["title"],
            image_url=b["image_url"],
            rating=Decimal(b["rating"]),
        ))

    for category_name, name, description, price, image_url, best_seller, rating in data.PRODUCTS:
        session.add(Product(
            name=name,
            description=description,
            price=Decimal(price),
            image_url=image_url,
            category_id=categories[category_name].id,
            in_stock=True,
            is_best_seller=best_seller,
            rating=Decimal(rating),
        ))

    session.commit()
    logger.info(
        "Seeded catalog: %d categories, %d services, %d barbers, %d products",
        len(data.CATEGORIES), len(data.SERVICES), len(data.BARBERS), len(data.PRODUCTS),
    )
    return True
