from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.database import Base, engine
from app.config import settings
from app.logging import get_logger
from app.core.user_blocking import BlockError, NotAuthenticated

# Import models so SQLAlchemy registers tables
from app.models import (
    user,
    user_block,
    chat_channel,
    chat_channel_membership,
)

# Routers
from app.routers import (
    auth_router,
    user_blocks_router,
    chat_channels_router,
)


logger = get_logger(__name__)

# -----------------------
# CREATE APP
# -----------------------
app = FastAPI(
    title=settings.PROJECT_NAME,
    description="Backend API for blocking users and their direct chat channels.",
    version="1.0.0",
)
logger.info("Starting API", extra={"env": settings.ENV})

# -----------------------
# CORS (ONLY ONCE)
# -----------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -----------------------
# DATABASE TABLES
# -----------------------
Base.metadata.create_all(bind=engine)


# -----------------------
# ERROR HANDLERS
# -----------------------
@app.exception_handler(BlockError)
async def handle_block_error(request: Request, exc: BlockError):
    if isinstance(exc, NotAuthenticated):
        content = {"result": exc.detail}
    else:
        content = {"error": exc.detail}

    logger.info(
        "Block request rejected",
        extra={"path": request.url.path, "status_code": exc.status_code},
    )
    return JSONResponse(status_code=exc.status_code, content=content)


# -----------------------
# ROUTES
# -----------------------
app.include_router(auth_router.router)
app.include_router(user_blocks_router.router)
app.include_router(chat_channels_router.router)


# -----------------------
# HEALTH CHECK
# -----------------------
@app.get("/")
def root():
    return {"message": "User Blocks API is running!"}
