# billing/constants.py

APP_NAME = "Retail Billing"

CURRENCY_SYMBOL = "₹"

# Fixed keys of the three persisted documents
STORAGE_KEYS = {
    "customers": "billing_app_customers",
    "invoices": "billing_app_invoices",
    "settings": "billing_app_settings",
}
