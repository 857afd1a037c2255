from typing import Dict, List
from sqlalchemy.orm import Session
from . import models, schemas


def get_products(db: Session, supermarket: str):
    return (
        db.query(models.Product)
        .filter(models.Product.supermarket == supermarket)
        .order_by(models.Product.id)
        .all()
    )


def get_product_by_name(db: Session, supermarket: str, name: str):
    return (
        db.query(models.Product)
        .filter(models.Product.supermarket == supermarket, models.Product.name == name)
        .first()
    )


def get_supermarkets(db: Session) -> List[str]:
    rows = db.query(models.Product.supermarket).distinct().order_by(models.Product.supermarket).all()
    return [r[0] for r in rows]


def count_products(db: Session) -> int:
    return db.query(models.Product).count()


def create_product(db: Session, supermarket: str, product: schemas.CatalogProduct):
    db_product = models.Product(
        supermarket=supermarket.lower(),
        name=product.name,
        price=product.price,
        image=product.image,
    )
    db.add(db_product)
    db.commit()
    db.refresh(db_product)
    return db_product


def seed_products(db: Session, catalogs: Dict[str, List[schemas.CatalogProduct]]) -> int:
    """Insert catalog rows not already stored; return how many were added."""
    added = 0
    for supermarket, products in catalogs.items():
        key = supermarket.lower()
        for product in products:
            if get_product_by_name(db, key, product.name):
                continue
            db.add(models.Product(
                supermarket=key,
                name=product.name,
                price=product.price,
                image=product.image,
            ))
            # flush so duplicates within the same batch are seen by the query above
            db.flush()
            added += 1
    db.commit()
    return added
