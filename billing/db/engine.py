# billing/db/engine.py

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine

DB_URL = "sqlite:///billing.sqlite"  # file in project root

def get_engine(url: str = DB_URL) -> Engine:
    # echo=True if you want to see SQL printed in the terminal
    return create_engine(url, future=True)
