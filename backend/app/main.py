from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.config import settings
from core.exceptions import register_exception_handlers
from app.startup import configure_logging, run_startup_checks

# ========== Promotions & Marketing ==========
from modules.promotions import promotions_router

configure_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
    run_startup_checks()
    yield


app = FastAPI(
    title="Grandpa Ron's Lawns & Landscaping - Promotions API",
    description="""
    Back-office API behind the marketing site.

    ## Features

    * **Promo Code Validation** - Real-time promo code checks for the quote form
    * **Site Promotions** - Banner, location and new-customer offers
    * **Quote Discounts** - Auto-applied promotions with stacking rules
    """,
    version="1.0.0",
    lifespan=lifespan,
)

# Register exception handlers for consistent error responses
register_exception_handlers(app)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# ========== Include all routers ==========
app.include_router(promotions_router)


@app.get("/", tags=["health"])
def read_root():
    return {"status": "ok", "message": "Promotions API is running"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
