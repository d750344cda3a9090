from fastapi import FastAPI

from .config import configure_logging, get_settings
from .routers import feeds, products

settings = get_settings()
configure_logging(settings)
app = FastAPI(title="ShopShout SEO", version="0.1.0")


@app.get("/health")
def healthcheck():
    return {"status": "ok", "env": settings.env}


app.include_router(feeds.router, tags=["feeds"])
app.include_router(products.router, prefix="/products", tags=["products"])
