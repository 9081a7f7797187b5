import logging

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .api import action, chat, health, portfolio, sign, strategy, transfer, wallet_action
from .api.responses import error_response
from .config import settings
from .core.errors import McpAuraError
from .logging_config import setup_logging
from .middleware import RequestLoggingMiddleware

setup_logging()
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="MCP AURA",
    description="Portfolio, strategy and transaction-preparation backend for AURA wallets",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "*",
}

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    return error_response(
        400,
        "Invalid request parameters",
        details=[{k: v for k, v in err.items() if k in ("type", "loc", "msg")} for err in exc.errors()],
    )


@app.exception_handler(McpAuraError)
async def domain_error_handler(request: Request, exc: McpAuraError):
    logger.error("Unhandled %s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    return error_response(500, "Internal server error", message=exc.message)


@app.exception_handler(Exception)
async def unexpected_error_handler(request: Request, exc: Exception):
    logger.exception("Unexpected error on %s", request.url.path)
    return error_response(500, "Internal server error", message=str(exc))


# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(portfolio.router, tags=["Portfolio"])
app.include_router(strategy.router, tags=["Strategy"])
app.include_router(chat.router, tags=["Chat"])
app.include_router(action.router, tags=["Action"])
app.include_router(transfer.router, tags=["Transfer"])
app.include_router(sign.router, tags=["Signing"])
app.include_router(wallet_action.router, tags=["Wallet"])


# Preflights carrying Origin are answered by CORSMiddleware; this covers bare OPTIONS.
@app.options("/{path:path}", include_in_schema=False)
async def options_any(path: str) -> Response:
    return Response(status_code=200, headers=CORS_HEADERS)


@app.get("/")
async def root():
    """Root endpoint with basic info"""
    return {
        "name": "MCP AURA",
        "version": "1.0.0",
        "description": "Portfolio, strategy and transaction-preparation backend for AURA wallets",
        "docs": "/docs",
        "health": "/healthz",
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "mcp_aura.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
        log_level=settings.log_level.lower(),
    )
