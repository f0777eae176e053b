import logging
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from .api.routes import router as api_router
from .db import Base, engine
from .log import setup_logging
from .settings import settings


logger = logging.getLogger("wgconsole")

app = FastAPI(title="WireGuard Console", debug=settings.debug)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
def _start():
    setup_logging()
    # Ensure tables exist
    Base.metadata.create_all(bind=engine)


app.include_router(api_router)

# Log exceptions to help diagnose 500s
@app.middleware("http")
async def log_errors(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        logger.exception("Unhandled error on %s", request.url)
        raise
