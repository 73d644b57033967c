#!/usr/bin/env python3
"""
Config Promotion Advisor - API Server

Exposes the suggestion engine over HTTP:
- POST a file diff result plus the active promotion config
- Receive confidence-ranked transform and stop-rule suggestions,
  either as JSON or as copy-paste ready configuration text

Runs on localhost:3000 by default.
"""

import time
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import uvicorn
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel, Field, field_validator

from promotion_advisor.config import Config
from promotion_advisor.errors import SuggestionEngineError
from promotion_advisor.logging_config import get_logger, setup_logging
from promotion_advisor.models import FileDiffResult, PromotionConfig, SuggestionResult
from promotion_advisor.suggestion_engine import analyze_differences_for_suggestions, format_suggestions_as_yaml

SERVICE_NAME = "Config Promotion Advisor"
SERVICE_VERSION = "1.0.0"

config = Config()
logger = get_logger("api")

# Initialize FastAPI app
app = FastAPI(
    title=SERVICE_NAME,
    description="Transform and stop-rule suggestions for promoting configuration between environments",
    version=SERVICE_VERSION
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


# Request models
class SuggestionRequest(BaseModel):
    """Request for transform and stop-rule suggestions"""
    diff_result: FileDiffResult = Field(
        ...,
        description="Changed files with raw and processed source/destination trees"
    )
    config: PromotionConfig = Field(
        default_factory=PromotionConfig,
        description="Active configuration; adopted rules are not suggested again"
    )
    confidence_threshold: Optional[float] = Field(
        default=None,
        description="Minimum confidence for transform suggestions (default from environment)"
    )

    @field_validator('confidence_threshold')
    @classmethod
    def validate_threshold(cls, v):
        if v is not None and not 0.0 <= v <= 1.0:
            raise ValueError('confidence_threshold must be between 0 and 1')
        return v


class SuggestionResponse(BaseModel):
    """Suggestions plus request bookkeeping"""
    status: str = Field(..., description="success or failure")
    result: Dict[str, Any] = Field(..., description="SuggestionResult in camelCase form")
    execution_time_seconds: float = Field(..., description="Analysis time")
    timestamp: str = Field(..., description="Response timestamp")


# Global state
latest_results: Optional[Dict[str, Any]] = None


def _run_analysis(request: SuggestionRequest) -> SuggestionResult:
    threshold = request.confidence_threshold
    if threshold is None:
        threshold = config.confidence_threshold
    try:
        return analyze_differences_for_suggestions(
            request.diff_result,
            request.config,
            confidence_threshold=threshold,
            glob_pattern=config.glob_pattern
        )
    except SuggestionEngineError as e:
        logger.error(f"Suggestion analysis failed: {e.message}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/api/info")
async def api_info():
    """API information endpoint"""
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "status": "running",
        "defaults": {
            "confidence_threshold": config.confidence_threshold,
            "glob_pattern": config.glob_pattern
        },
        "endpoints": {
            "suggest": "POST /api/suggest",
            "suggest_yaml": "POST /api/suggest/yaml",
            "latest_results": "GET /api/latest-results",
            "health": "GET /health"
        }
    }


@app.post("/api/suggest", response_model=SuggestionResponse)
async def suggest(request: SuggestionRequest):
    """
    Analyze a file diff and return suggestions as JSON.

    Transform suggestions come from raw (pre-transform) value drift; stop-rule
    suggestions come from the processed source trees.
    """
    global latest_results

    start_time = time.time()
    logger.info(f"Suggestion request for {len(request.diff_result.changed_files)} changed file(s)")

    result = _run_analysis(request)

    response = {
        "status": "success",
        "result": result.to_dict(),
        "execution_time_seconds": time.time() - start_time,
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
    latest_results = response
    return response


@app.post("/api/suggest/yaml", response_class=PlainTextResponse)
async def suggest_yaml(request: SuggestionRequest):
    """Analyze a file diff and return copy-paste ready configuration text."""
    result = _run_analysis(request)
    try:
        return format_suggestions_as_yaml(result, tool_name=config.tool_name)
    except SuggestionEngineError as e:
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/api/latest-results")
async def get_latest_results():
    """Get the latest suggestion results"""
    if latest_results:
        return latest_results
    raise HTTPException(status_code=404, detail="No suggestion results available yet")


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "service": SERVICE_NAME,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": SERVICE_VERSION,
        "has_results": latest_results is not None
    }


def main():
    """Start the suggestion API server"""
    config.validate()
    setup_logging(config.log_level)

    logger.info("=" * 60)
    logger.info(f"{SERVICE_NAME} v{SERVICE_VERSION}")
    logger.info(f"   API Docs: http://localhost:{config.api_port}/docs")
    logger.info(f"   Health:   http://localhost:{config.api_port}/health")
    logger.info(f"   Default threshold: {config.confidence_threshold}")
    logger.info("=" * 60)

    uvicorn.run(app, host=config.api_host, port=config.api_port)


if __name__ == "__main__":
    main()
