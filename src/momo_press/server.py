"""HTTP backend that regenerates normalized transactions on request."""

import logging
from typing import Any

import structlog
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from momo_press.config import get_output_path, get_rules, get_source_path
from momo_press.errors import InvalidPeriodError, MalformedRecordError, SourceError
from momo_press.logging_setup import request_id_middleware
from momo_press.normalizer import TransactionNormalizer, validate_period

logger = logging.getLogger(__name__)


def create_app(config: dict[str, Any] | None = None, write_output: bool = True) -> FastAPI:
    """
    Build the backend app.

    Args:
        config: Loaded JSON config (source/output paths, rules)
        write_output: Write the normalized artifact on each update

    Returns:
        FastAPI application
    """
    source_path = get_source_path(config)
    output_path = get_output_path(config) if write_output else None
    normalizer = TransactionNormalizer(rules=get_rules(config))

    app = FastAPI(title="MoMo Press backend", version="0.1.0")
    app.middleware("http")(request_id_middleware)

    @app.get("/healthz")
    def healthz() -> dict[str, str]:
        return {"status": "healthy"}

    @app.get("/api/updateTransactions")
    def update_transactions(year: str | None = None, month: str | None = None) -> JSONResponse:
        """
        Normalize one month of the export and regenerate the artifact.

        Example: /api/updateTransactions?year=2025&month=11
        """
        try:
            filter_year, filter_month = validate_period(year, month)
        except InvalidPeriodError as e:
            return JSONResponse(status_code=400, content={"error": str(e)})

        log = structlog.get_logger(__name__).bind(year=filter_year, month=filter_month)

        try:
            transactions = normalizer.process_file(source_path, filter_year, filter_month)
            if output_path is not None:
                normalizer.write_json(transactions, output_path)
        except (SourceError, MalformedRecordError) as e:
            log.error("transactions.update_failed", error=str(e))
            return JSONResponse(status_code=500, content={"error": str(e)})

        log.info("transactions.updated", count=len(transactions))
        return JSONResponse(content={
            "success": True,
            "transactions": [tx.to_dict() for tx in transactions],
        })

    logger.debug("Serving %s (artifact: %s)", source_path, output_path)
    return app
