#!/usr/bin/env python3
"""
favfav Server
FastAPI server that turns uploaded images into favicon bundles
"""
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
import uvicorn

from api.routes import router
from config import settings
from logging_setup import configure_logging

# Configure logging
configure_logging(settings.log_level)

# Create FastAPI app
app = FastAPI(
    title="favfav Server",
    description="Favicon bundle generator: PNG sizes, multi-image ICO and platform manifests",
    version="1.0.0",
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routes
app.include_router(router, prefix="/api")


@app.on_event("startup")
async def startup_event():
    logger.info("🚀 Starting favfav Server...")
    logger.info(f"📊 Server: http://{settings.server_host}:{settings.server_port}")
    logger.info(f"🧵 Resample workers: {settings.max_workers}")
    logger.info("✅ favfav Server ready!")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("🛑 Shutting down...")


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.server_host,
        port=settings.server_port,
        reload=False,
        log_level=settings.log_level.lower(),
    )
