from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fintools.core.config import settings
from fintools.common.error_handlers import register_error_handlers
from fintools.api.v1 import asset, auth, dashboard, expense, product, revenue, transaction

app = FastAPI(title="Fintools", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Register API routers
prefix = settings.API_PREFIX
app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["authentication"])
app.include_router(expense.router, prefix=f"{prefix}/expenses", tags=["expenses"])
app.include_router(product.router, prefix=f"{prefix}/products", tags=["products"])
app.include_router(revenue.router, prefix=f"{prefix}/revenues", tags=["revenues"])
app.include_router(asset.router, prefix=f"{prefix}/assets", tags=["assets"])
app.include_router(
    transaction.router, prefix=f"{prefix}/transactions", tags=["transactions"])
app.include_router(
    dashboard.router, prefix=f"{prefix}/dashboard", tags=["dashboard"])


@app.get("/")
def read_root():
    return {"message": "Welcome to the Fintools APIs!"}
