"""
Lottery Receipt Processing Module
Runs a receipt image through OCR, structured extraction, result lookup and verification.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Protocol

from loguru import logger

from conferidor.exceptions import ContestNotFoundError
from conferidor.models import OfficialResult, ReceiptData, VerificationSummary
from conferidor.ticket_verifier import TicketVerifier, create_ticket_verifier


class TextExtractor(Protocol):
    def extract_text(self, image_data: bytes, mime_type: str = "image/jpeg") -> str: ...


class ReceiptDataExtractor(Protocol):
    def extract_receipt_data(self, text: str) -> ReceiptData: ...


class ResultFetcher(Protocol):
    def fetch_result(self, variant: str, contest: int) -> OfficialResult: ...


class CheckStatus(str, Enum):
    NO_TEXT = "no_text"
    UNIDENTIFIED = "unidentified"
    IDENTIFIED = "identified"
    CONTEST_NOT_FOUND = "contest_not_found"
    VERIFIED = "verified"


@dataclass
class ReceiptCheckResult:
    status: CheckStatus
    raw_text: str = ""
    receipt: ReceiptData = field(default_factory=ReceiptData)
    official_result: Optional[OfficialResult] = None
    summary: Optional[VerificationSummary] = None
    message: str = ""


NO_TEXT_MESSAGE = "Nenhum texto foi detectado na imagem."
UNIDENTIFIED_MESSAGE = "Não foi possível identificar o tipo de jogo ou o número do concurso no recibo."


class ReceiptProcessor:
    """
    Orchestrates the receipt pipeline over injected collaborators.

    Collaborator failures other than a missing contest propagate to the caller.
    The extractors may be None when only verify_receipt is used.
    """

    def __init__(self, text_extractor: Optional[TextExtractor],
                 data_extractor: Optional[ReceiptDataExtractor],
                 result_fetcher: ResultFetcher, verifier: Optional[TicketVerifier] = None):
        self.text_extractor = text_extractor
        self.data_extractor = data_extractor
        self.result_fetcher = result_fetcher
        self.verifier = verifier or create_ticket_verifier()

    def read_receipt(self, image_data: bytes, mime_type: str = "image/jpeg") -> ReceiptCheckResult:
        """
        Run OCR and structured extraction only.

        Returns:
            ReceiptCheckResult with status NO_TEXT, UNIDENTIFIED or IDENTIFIED
        """
        raw_text = self.text_extractor.extract_text(image_data, mime_type)
        if not raw_text.strip():
            logger.info("No text detected on receipt image")
            return ReceiptCheckResult(status=CheckStatus.NO_TEXT, message=NO_TEXT_MESSAGE)

        receipt = self.data_extractor.extract_receipt_data(raw_text)
        if not receipt.is_identified:
            logger.info(f"Receipt not identified (variant={receipt.variant}, contest={receipt.contest})")
            return ReceiptCheckResult(
                status=CheckStatus.UNIDENTIFIED,
                raw_text=raw_text,
                receipt=receipt,
                message=UNIDENTIFIED_MESSAGE,
            )

        return ReceiptCheckResult(status=CheckStatus.IDENTIFIED, raw_text=raw_text, receipt=receipt)

    def verify_receipt(self, receipt: ReceiptData, raw_text: str = "") -> ReceiptCheckResult:
        """
        Fetch the official result for an identified receipt and verify its bets.

        Args:
            receipt: Receipt data with variant and contest set
            raw_text: OCR text to carry along for display

        Returns:
            ReceiptCheckResult with status VERIFIED or CONTEST_NOT_FOUND
        """
        if not receipt.is_identified:
            return ReceiptCheckResult(
                status=CheckStatus.UNIDENTIFIED,
                raw_text=raw_text,
                receipt=receipt,
                message=UNIDENTIFIED_MESSAGE,
            )

        try:
            official_result = self.result_fetcher.fetch_result(receipt.variant, receipt.contest)
        except ContestNotFoundError as e:
            logger.warning(str(e))
            return ReceiptCheckResult(
                status=CheckStatus.CONTEST_NOT_FOUND,
                raw_text=raw_text,
                receipt=receipt,
                message=str(e),
            )

        summary = self.verifier.verify_bets(receipt.bets, official_result)
        return ReceiptCheckResult(
            status=CheckStatus.VERIFIED,
            raw_text=raw_text,
            receipt=receipt,
            official_result=official_result,
            summary=summary,
            message=self.verifier.format_verification_summary(summary),
        )

    def process_receipt(self, image_data: bytes, mime_type: str = "image/jpeg") -> ReceiptCheckResult:
        """
        Process a receipt image end to end.

        Args:
            image_data: Receipt image bytes
            mime_type: MIME type of image_data

        Returns:
            ReceiptCheckResult describing how far the pipeline got
        """
        read = self.read_receipt(image_data, mime_type)
        if read.status is not CheckStatus.IDENTIFIED:
            return read
        return self.verify_receipt(read.receipt, read.raw_text)


def create_ticket_processor(text_extractor: Optional[TextExtractor],
                            data_extractor: Optional[ReceiptDataExtractor],
                            result_fetcher: ResultFetcher) -> ReceiptProcessor:
    return ReceiptProcessor(text_extractor, data_extractor, result_fetcher)
