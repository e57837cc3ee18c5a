# billing/main.py

from fastapi import FastAPI

from billing.api.customers import router as customers_router
from billing.api.dashboard import router as dashboard_router
from billing.api.invoices import router as invoices_router
from billing.api.settings import router as settings_router
from billing.constants import APP_NAME

app = FastAPI(
    title=f"{APP_NAME} API",
    version="0.1.0",
)

@app.get("/health")
def health_check():
    return {"status": "ok"}

app.include_router(customers_router)
app.include_router(invoices_router)
app.include_router(settings_router)
app.include_router(dashboard_router)
