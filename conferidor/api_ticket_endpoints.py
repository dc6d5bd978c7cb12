"""
API endpoints for lottery receipt verification.
"""

from typing import Annotated, Any, Dict, List

from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

from conferidor.exceptions import ConferidorError, InvalidImageError
from conferidor.image_utils import load_receipt_image
from conferidor.lotteries import resolve_lottery_key, supported_lotteries
from conferidor.models import ReceiptData
from conferidor.ticket_processor import CheckStatus, ReceiptCheckResult, ReceiptProcessor

GENERIC_FAILURE_MESSAGE = "Ocorreu uma falha inesperada no processamento."

ticket_router = APIRouter(prefix="/api", tags=["ticket"])


class ManualVerificationRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    tipo_jogo: str = Field(alias="tipoJogo", min_length=1)
    concurso: int = Field(gt=0)
    apostas: List[List[Annotated[int, Field(ge=0)]]] = Field(min_length=1)


def get_receipt_processor(request: Request) -> ReceiptProcessor:
    return request.app.state.receipt_processor


def require_image_pipeline(processor: ReceiptProcessor = Depends(get_receipt_processor)) -> ReceiptProcessor:
    if processor.text_extractor is None or processor.data_extractor is None:
        raise HTTPException(
            status_code=503,
            detail="Serviço de leitura de recibos indisponível: GEMINI_API_KEY não configurada.",
        )
    return processor


def _read_upload(request: Request, file: UploadFile) -> bytes:
    """Validate the uploaded receipt and return normalised JPEG bytes."""
    if not file.content_type or not file.content_type.startswith("image/"):
        raise HTTPException(status_code=400, detail="Invalid file type. Please upload an image file.")

    image_data = file.file.read()
    max_bytes = request.app.state.config.max_upload_bytes
    if len(image_data) > max_bytes:
        raise HTTPException(
            status_code=400,
            detail=f"File size too large. Maximum size is {max_bytes // 1024} KB",
        )

    logger.info(f"Processing receipt image: {file.filename}, size: {len(image_data)} bytes")
    try:
        normalised, _ = load_receipt_image(image_data)
    except InvalidImageError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return normalised


def _failure_response(error: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"error": GENERIC_FAILURE_MESSAGE, "details": str(error)},
    )


def build_check_response(result: ReceiptCheckResult) -> JSONResponse:
    """
    Turn a pipeline result into the JSON payload returned to the client.

    Args:
        result: Outcome of ReceiptProcessor

    Returns:
        JSONResponse with the status code matching how far the pipeline got
    """
    if result.status is CheckStatus.NO_TEXT:
        return JSONResponse(status_code=200, content={"message": result.message, "text_bruto": ""})

    if result.status in (CheckStatus.UNIDENTIFIED, CheckStatus.CONTEST_NOT_FOUND):
        return JSONResponse(
            status_code=404 if result.status is CheckStatus.CONTEST_NOT_FOUND else 200,
            content={
                "Mensagem": result.message,
                "Texto Bruto": result.raw_text,
                "Apostas": result.receipt.bets,
            },
        )

    official = result.official_result
    summary = result.summary
    content: Dict[str, Any] = {
        "Mensagem": result.message,
        "Concurso": official.contest_number,
        "TipoJogo": official.variant,
        "DataApuracao": official.draw_date,
        "NumerosSorteados": official.drawn_numbers,
        "FoiPremiado": summary.any_winner,
        "ValorPremioTotal": float(summary.total_payout),
        "ResultadosPorAposta": [outcome.to_dict() for outcome in summary.outcomes],
        "Texto Bruto": result.raw_text,
    }
    return JSONResponse(status_code=200, content=content)


@ticket_router.post("/ocr-upload")
def process_receipt_image(request: Request, file: UploadFile = File(...),
                          processor: ReceiptProcessor = Depends(require_image_pipeline)):
    """
    Read a receipt photo, fetch the official result and check every bet.

    Args:
        request: FastAPI request object
        file: Uploaded receipt image (JPG, PNG, etc.)

    Returns:
        Verification report, or an explanatory message when the receipt
        could not be read or its contest does not exist
    """
    image_data = _read_upload(request, file)
    try:
        result = processor.process_receipt(image_data, "image/jpeg")
    except ConferidorError as e:
        logger.error(f"Receipt processing failed: {e}")
        return _failure_response(e)
    except Exception as e:
        logger.exception(f"Unexpected error processing receipt: {e}")
        return _failure_response(e)

    logger.info(f"Receipt processed with status {result.status.value}")
    return build_check_response(result)


@ticket_router.post("/ocr-preview")
def preview_receipt(request: Request, file: UploadFile = File(...),
                    processor: ReceiptProcessor = Depends(require_image_pipeline)):
    """
    Show what was read from a receipt without looking up the official result.
    """
    image_data = _read_upload(request, file)
    try:
        result = processor.read_receipt(image_data, "image/jpeg")
    except ConferidorError as e:
        logger.error(f"Receipt preview failed: {e}")
        return _failure_response(e)
    except Exception as e:
        logger.exception(f"Unexpected error previewing receipt: {e}")
        return _failure_response(e)

    if result.status is CheckStatus.NO_TEXT:
        return build_check_response(result)

    return {
        "Mensagem": result.message or "Recibo lido com sucesso.",
        "TipoJogo": result.receipt.variant,
        "Concurso": result.receipt.contest,
        "Apostas": result.receipt.bets,
        "Texto Bruto": result.raw_text,
    }


@ticket_router.post("/verificar-manual")
def verify_manual_bets(body: ManualVerificationRequest,
                       processor: ReceiptProcessor = Depends(get_receipt_processor)):
    """
    Verify manually entered bets against the official result.

    Args:
        body: Lottery variant, contest number and bets

    Returns:
        Same verification report as /ocr-upload, without OCR text
    """
    variant = resolve_lottery_key(body.tipo_jogo)
    if variant is None:
        raise HTTPException(
            status_code=400,
            detail=f"Tipo de jogo não suportado: {body.tipo_jogo}. Use um de: {', '.join(supported_lotteries())}",
        )

    receipt = ReceiptData(variant=variant, contest=body.concurso, bets=body.apostas)
    try:
        result = processor.verify_receipt(receipt)
    except ConferidorError as e:
        logger.error(f"Manual verification failed: {e}")
        return _failure_response(e)
    except Exception as e:
        logger.exception(f"Unexpected error in manual verification: {e}")
        return _failure_response(e)

    return build_check_response(result)


@ticket_router.get("/health")
def ticket_service_health(processor: ReceiptProcessor = Depends(get_receipt_processor)):
    """
    Health check endpoint for the receipt verification service.
    """
    return {
        "status": "healthy",
        "service": "receipt_verification",
        "ocr_available": processor.text_extractor is not None,
        "lotteries": supported_lotteries(),
    }
