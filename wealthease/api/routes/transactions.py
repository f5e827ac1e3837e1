"""Per-user transaction store endpoints and derived analytics"""

import time
from datetime import date, datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request

from wealthease.api.dependencies import get_request_id, get_transaction_store
from wealthease.api.routes.schemas import (
    AnalyticsResponse,
    DeleteResponse,
    LocalAnalysisResponse,
    MetricsSchema,
    TransactionIn,
    TransactionListResponse,
    TransactionOut,
    TrendSchema,
)
from wealthease.domain.aggregation import build_user_profile, calculate_period_analytics, summarize_transactions
from wealthease.domain.forecast import generate_local_analysis
from wealthease.domain.trend import calculate_advanced_trend
from wealthease.infrastructure.observability.logging import log_analysis
from wealthease.infrastructure.observability.metrics import record_local_analysis
from wealthease.infrastructure.store import TransactionStore

router = APIRouter()


@router.get("/{user_id}/transactions", response_model=TransactionListResponse)
def list_transactions(user_id: str, store: TransactionStore = Depends(get_transaction_store)):
    transactions = store.list_transactions(user_id)
    return TransactionListResponse(
        user_id=user_id,
        transactions=[TransactionOut.from_domain(t) for t in transactions],
    )


@router.post("/{user_id}/transactions", response_model=TransactionOut, status_code=201)
def add_transaction(
    user_id: str,
    request_body: TransactionIn,
    store: TransactionStore = Depends(get_transaction_store),
):
    """Append a transaction; an id is generated when none is supplied"""
    stored = store.add_transaction(user_id, request_body.to_domain())
    return TransactionOut.from_domain(stored)


@router.put("/{user_id}/transactions/{transaction_id}", response_model=TransactionOut)
def update_transaction(
    user_id: str,
    transaction_id: str,
    request_body: TransactionIn,
    store: TransactionStore = Depends(get_transaction_store),
):
    """Overwrite a stored transaction; the path id wins over any id in the body"""
    updated = store.update_transaction(user_id, transaction_id, request_body.to_domain())
    return TransactionOut.from_domain(updated)


@router.delete("/{user_id}/transactions/{transaction_id}", response_model=DeleteResponse)
def delete_transaction(
    user_id: str,
    transaction_id: str,
    store: TransactionStore = Depends(get_transaction_store),
):
    store.delete_transaction(user_id, transaction_id)
    return DeleteResponse()


@router.get("/{user_id}/analytics", response_model=AnalyticsResponse)
def get_analytics(
    user_id: str,
    month: Optional[int] = Query(None, ge=1, le=12, description="Calendar month filter (1-12)"),
    store: TransactionStore = Depends(get_transaction_store),
):
    """
    Income, expense, balance and category totals for the stored history.

    Returns:
        Totals for every stored transaction, or only those in `month`
    """
    analytics = calculate_period_analytics(store.list_transactions(user_id), month)
    return AnalyticsResponse.from_domain(analytics, last_updated=datetime.now(timezone.utc).isoformat())


@router.get("/{user_id}/insights", response_model=LocalAnalysisResponse)
def get_insights(
    user_id: str,
    request: Request,
    name: Optional[str] = Query(None, description="Display name used in the narrative"),
    store: TransactionStore = Depends(get_transaction_store),
):
    """Local forecast and scores over the user's stored transactions"""
    start_time = time.time()
    transactions = store.list_transactions(user_id)
    today = date.today()
    profile = build_user_profile(transactions, name=name or "User", today=today)
    result = generate_local_analysis(transactions, profile, today)

    record_local_analysis()
    log_analysis(get_request_id(request), "local", len(transactions), (time.time() - start_time) * 1000)

    return LocalAnalysisResponse(
        analysis=result.to_dict(),
        metrics=MetricsSchema.from_domain(summarize_transactions(transactions, today)),
        trend=TrendSchema.from_domain(calculate_advanced_trend(transactions)),
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
