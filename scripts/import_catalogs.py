import sys
from pathlib import Path

from oliv.catalog import load_catalog_file
from oliv.config import CATALOG_PATH
from oliv.db import init_db, SessionLocal
from oliv import crud


def main():
    init_db()
    p = Path(sys.argv[1]) if len(sys.argv) > 1 else CATALOG_PATH
    if not p.exists():
        print(f'{p} not found')
        return
    catalogs = load_catalog_file(p)
    db = SessionLocal()
    try:
        added = crud.seed_products(db, catalogs)
    finally:
        db.close()
    print(f'Imported {added} products for {len(catalogs)} supermarket(s)')


if __name__ == '__main__':
    main()
