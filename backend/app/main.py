import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

from app.api.routes import ai_request
from app.core.config import settings as app_settings
from app.core.errors import ChatFunctionError
from app.db.database import connect_db, disconnect_db

logging.basicConfig(
    level=app_settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="AI Request Function API",
    version="1.0.0",
    description="Chat, image, rag and document requests forwarded to Azure OpenAI"
)


@app.exception_handler(ChatFunctionError)
async def chat_function_error_handler(request: Request, exc: ChatFunctionError):
    """Map typed failures onto HTTP status codes."""
    if exc.status_code >= 500:
        logger.error("Request failed: %s", exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=app_settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(ai_request.router, prefix="/api")


@app.get("/")
async def root():
    return {
        "name": "AI Request Function API",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health")
async def health():
    return {"status": "healthy"}


@app.on_event("startup")
async def startup():
    """Validate configuration and connect to database on startup."""
    app_settings.validate_required()
    logger.info("Effective settings: %s", app_settings.get_effective_settings())
    await connect_db()


@app.on_event("shutdown")
async def shutdown():
    """Disconnect from database on shutdown."""
    await disconnect_db()


def run():
    """Console entry point."""
    import uvicorn

    uvicorn.run("app.main:app", host="0.0.0.0", port=app_settings.backend_port)
