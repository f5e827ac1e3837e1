"""POST /api/ai/chatbot - extract a transaction from a chat message"""

import logging
import time
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Request

from wealthease.api.dependencies import (
    chatbot_rate_limit,
    get_llm_client,
    get_request_id,
    get_settings,
    get_transaction_store,
    require_llm,
)
from wealthease.api.routes.schemas import ChatbotRequest, ChatbotResponse, TransactionOut
from wealthease.config import Settings
from wealthease.domain.exceptions import DomainException, InvalidInputError, ServiceError
from wealthease.domain.models import ExtractedTransaction, Transaction
from wealthease.domain.narrative import (
    EXTRACTION_FAILED_MESSAGE,
    build_extraction_system_prompt,
    format_extraction_reply,
)
from wealthease.domain.parsing import parse_extraction_response
from wealthease.infrastructure.clients.llm import LLMClient
from wealthease.infrastructure.observability.logging import log_extraction
from wealthease.infrastructure.observability.metrics import record_extraction
from wealthease.infrastructure.store import TransactionStore
from wealthease.utils.date_utils import parse_date

router = APIRouter()


def _to_transaction(extracted: ExtractedTransaction, today: date) -> Transaction:
    try:
        txn_date = parse_date(extracted.tanggal)
    except ValueError:
        txn_date = today

    return Transaction(
        id="",
        date=txn_date,
        type=extracted.transaction_type,
        amount=abs(extracted.jumlah),
        category=str(extracted.extra.get("category") or extracted.extra.get("kategori") or "other"),
        payment_method=extracted.payment_method,
        description=extracted.deskripsi,
    )


@router.post(
    "/chatbot",
    response_model=ChatbotResponse,
    response_model_exclude_none=True,
    dependencies=[Depends(chatbot_rate_limit)],
)
async def chatbot(
    request_body: ChatbotRequest,
    request: Request,
    settings: Settings = Depends(get_settings),
    llm_client: Optional[LLMClient] = Depends(get_llm_client),
    store: TransactionStore = Depends(get_transaction_store),
):
    """
    Ask the model to turn a free-text message into a transaction.

    When a user id is supplied the extracted transaction is also appended to
    that user's store. An unreadable model reply is not an error: the caller
    gets success=false with a hint on how to phrase the message.
    """
    start_time = time.time()
    request_id = get_request_id(request)

    message = (request_body.message or "").strip()
    if not message:
        raise InvalidInputError("Message is required")
    client = require_llm(llm_client)

    try:
        today = date.today()
        raw_response = await client.complete(
            message,
            system=build_extraction_system_prompt(today),
            model=settings.openai_chat_model,
            max_tokens=settings.openai_chat_max_tokens,
            temperature=settings.openai_chat_temperature,
        )

        extracted = parse_extraction_response(raw_response, today)
        record_extraction(extracted is not None)
        log_extraction(request_id, extracted is not None, (time.time() - start_time) * 1000)

        if extracted is None:
            return ChatbotResponse(success=False, error=EXTRACTION_FAILED_MESSAGE)

        stored = None
        if request_body.user_id:
            stored = store.add_transaction(request_body.user_id, _to_transaction(extracted, today))

        return ChatbotResponse(
            success=True,
            reply=format_extraction_reply(extracted),
            data=extracted.to_dict(),
            transaction=TransactionOut.from_domain(stored) if stored else None,
        )

    except DomainException as e:
        logging.error(f"Chatbot failed: {e}", extra={"request_id": request_id})
        raise

    except Exception as e:
        logging.error(f"Unexpected error: {e}", extra={"request_id": request_id})
        raise ServiceError("An error occurred while processing your message. Please try again.", details=str(e)) from e
