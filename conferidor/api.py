from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from conferidor import __version__
from conferidor.api_ticket_endpoints import ticket_router
from conferidor.caixa_client import create_caixa_client
from conferidor.config import AppConfig, get_app_config
from conferidor.gemini_service import create_gemini_service
from conferidor.ticket_processor import ReceiptProcessor, create_ticket_processor


def build_receipt_processor(config: AppConfig) -> ReceiptProcessor:
    """
    Wire the production collaborators: Gemini for OCR and parsing, Caixa for results.

    Without a Gemini key the processor can still verify manually entered bets.
    """
    gemini_service = None
    if config.gemini_api_key:
        try:
            gemini_service = create_gemini_service(config.gemini_api_key, config.gemini_model)
        except Exception as e:
            logger.warning(f"Gemini AI service unavailable, image processing disabled: {e}")

    result_fetcher = create_caixa_client(
        base_url=config.caixa_api_base_url,
        timeout=config.caixa_timeout,
        verify_ssl=config.caixa_verify_ssl,
    )
    return create_ticket_processor(gemini_service, gemini_service, result_fetcher)


def create_app(config: Optional[AppConfig] = None,
               processor: Optional[ReceiptProcessor] = None) -> FastAPI:
    config = config or get_app_config()

    app = FastAPI(
        title="Conferidor - Lottery Receipt Verification API",
        description="Reads Caixa lottery receipts and checks the bets against official results.",
        version=__version__,
    )
    app.state.config = config
    app.state.receipt_processor = processor or build_receipt_processor(config)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(ticket_router)

    @app.get("/health")
    def health_check():
        return {"status": "ok", "service": "conferidor", "version": __version__}

    logger.info("Conferidor API application created")
    return app


app = create_app()
