# scripts/init_db.py
"""
Drop and recreate the key-value table, wiping customers, invoices and
settings. The next start begins from the default settings.
"""

import logging

from billing.db.engine import get_engine
from billing.db.schema import metadata

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)
logger = logging.getLogger(__name__)


def main():
    engine = get_engine()
    metadata.drop_all(engine)
    metadata.create_all(engine)
    logger.info("DB schema created at %s", engine.url)

if __name__ == "__main__":
    main()
