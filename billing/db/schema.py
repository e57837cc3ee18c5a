# billing/db/schema.py

from sqlalchemy import MetaData, Table, Column, String, Text

metadata = MetaData()

# One JSON document per key: customers, invoices, settings
kv_store = Table(
    "kv_store",
    metadata,
    Column("key", String, primary_key=True),
    Column("value", Text, nullable=False),
)
