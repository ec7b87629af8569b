import logging
from contextlib import asynccontextmanager

from apscheduler.schedulers.background import BackgroundScheduler
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from storefront.api.health import router as health_router
from storefront.api.routes_admin import router as admin_router
from storefront.api.routes_cart import router as cart_router
from storefront.api.routes_catalogue import router as catalogue_router
from storefront.api.routes_customer import router as customer_router
from storefront.api.routes_order import router as order_router
from storefront.config import settings
from storefront.db import SessionLocal, init_db
from storefront.services.order_service import OrderService

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("storefront")


def auto_receive_job():
    db = SessionLocal()
    try:
        OrderService(db).receive_stale_pending(settings.AUTO_RECEIVE_AFTER_SECONDS)
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()

    scheduler = None
    if settings.AUTO_RECEIVE_AFTER_SECONDS > 0:
        scheduler = BackgroundScheduler()
        scheduler.add_job(
            auto_receive_job,
            "interval",
            seconds=max(5, settings.AUTO_RECEIVE_AFTER_SECONDS // 2),
            id="auto_receive_orders",
        )
        scheduler.start()
        log.info(
            "auto-receive enabled: PENDING orders accepted after %ss",
            settings.AUTO_RECEIVE_AFTER_SECONDS,
        )

    try:
        yield
    finally:
        if scheduler:
            scheduler.shutdown(wait=False)


app = FastAPI(title="Restaurant Storefront - Backend", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.FRONTEND_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health_router, prefix="/api", tags=["health"])

app.include_router(catalogue_router)

app.include_router(cart_router, tags=["cart"])

app.include_router(customer_router)

app.include_router(order_router, prefix="/api/orders", tags=["orders"])

app.include_router(admin_router, tags=["admin"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("storefront.main:app", host=settings.APP_HOST, port=settings.APP_PORT)
