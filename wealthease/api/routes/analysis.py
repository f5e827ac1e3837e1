"""AI analysis endpoints - model-backed analysis, local forecast and chart data"""

import logging
import time
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Request

from wealthease.api.dependencies import (
    analysis_rate_limit,
    get_llm_client,
    get_request_id,
    get_settings,
    require_llm,
)
from wealthease.api.routes.schemas import (
    AnalyzeRequest,
    AnalyzeResponse,
    ForecastChartResponse,
    HealthResponse,
    LocalAnalysisResponse,
    MetricsSchema,
    TransactionsRequest,
    TrendSchema,
)
from wealthease.config import Settings
from wealthease.domain.aggregation import build_user_profile, summarize_transactions
from wealthease.domain.exceptions import DomainException, InvalidInputError, ServiceError
from wealthease.domain.forecast import generate_local_analysis
from wealthease.domain.narrative import ANALYSIS_SYSTEM_PROMPT, build_analysis_prompt
from wealthease.domain.parsing import fallback_analysis, try_parse_analysis
from wealthease.domain.trend import build_forecast_chart, calculate_advanced_trend
from wealthease.infrastructure.clients.llm import LLMClient
from wealthease.infrastructure.observability.logging import log_analysis
from wealthease.infrastructure.observability.metrics import record_analysis, record_local_analysis

router = APIRouter()


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.post(
    "/analyze-transactions",
    response_model=AnalyzeResponse,
    dependencies=[Depends(analysis_rate_limit)],
)
async def analyze_transactions(
    request_body: AnalyzeRequest,
    request: Request,
    settings: Settings = Depends(get_settings),
    llm_client: Optional[LLMClient] = Depends(get_llm_client),
):
    """
    Analyze a transaction list with the language model.

    Flow:
    1. Validate input and check the model is configured
    2. Recompute the user profile and metrics from the transactions
    3. Send the analysis prompt to the model
    4. Parse the reply, substituting the fallback analysis on bad output
    5. Attach the locally computed forecast and scores
    """
    start_time = time.time()
    request_id = get_request_id(request)

    transactions = [t.to_domain() for t in request_body.transactions]
    if not transactions:
        raise InvalidInputError("No transactions to analyze")
    client = require_llm(llm_client)

    try:
        today = date.today()
        profile = build_user_profile(transactions, name=request_body.user_name, today=today)
        metrics = summarize_transactions(transactions, today)
        prompt = build_analysis_prompt(transactions, profile, metrics)

        raw_response = await client.complete(
            prompt,
            system=ANALYSIS_SYSTEM_PROMPT,
            model=settings.openai_model,
            max_tokens=settings.openai_max_tokens,
            temperature=settings.openai_temperature,
        )

        parsed = try_parse_analysis(raw_response)
        analysis = parsed if parsed is not None else fallback_analysis()
        local_analysis = generate_local_analysis(transactions, profile, today)

        duration_ms = (time.time() - start_time) * 1000
        record_analysis(parsed is not None)
        log_analysis(request_id, "llm" if parsed is not None else "fallback", len(transactions), duration_ms)

        return AnalyzeResponse(
            analysis=analysis,
            local_analysis=local_analysis.to_dict(),
            raw_response=raw_response,
            timestamp=_now_iso(),
        )

    except DomainException as e:
        logging.error(f"Analysis failed: {e}", extra={"request_id": request_id})
        raise

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise ServiceError("Failed to analyze transactions", details=str(e)) from e


@router.post("/local-analysis", response_model=LocalAnalysisResponse)
def local_analysis(request_body: TransactionsRequest, request: Request):
    """
    Forecast and scores computed without the language model.

    Works without an API key and accepts an empty transaction list.
    """
    start_time = time.time()
    transactions = [t.to_domain() for t in request_body.transactions]

    today = date.today()
    profile = build_user_profile(transactions, name=request_body.user_name, today=today)
    result = generate_local_analysis(transactions, profile, today)

    record_local_analysis()
    log_analysis(get_request_id(request), "local", len(transactions), (time.time() - start_time) * 1000)

    return LocalAnalysisResponse(
        analysis=result.to_dict(),
        metrics=MetricsSchema.from_domain(summarize_transactions(transactions, today)),
        trend=TrendSchema.from_domain(calculate_advanced_trend(transactions)),
        timestamp=_now_iso(),
    )


@router.post("/forecast-chart", response_model=ForecastChartResponse)
def forecast_chart(request_body: TransactionsRequest):
    """30 days of balance history plus a 7 day projection"""
    transactions = [t.to_domain() for t in request_body.transactions]
    return ForecastChartResponse.from_domain(build_forecast_chart(transactions))


@router.get("/health", response_model=HealthResponse)
def ai_health(settings: Settings = Depends(get_settings)):
    return HealthResponse(
        status="healthy",
        timestamp=_now_iso(),
        openai_configured=settings.openai_configured,
    )
