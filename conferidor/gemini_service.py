"""
Google Gemini AI Service for Lottery Receipt Processing
Reads the text of a receipt image and turns it into structured bet data.
"""

import json
from typing import Any, Optional

import google.generativeai as genai
from loguru import logger

from conferidor.config import DEFAULT_GEMINI_MODEL
from conferidor.exceptions import ReceiptExtractionError, TextExtractionError
from conferidor.lotteries import supported_lotteries
from conferidor.models import ReceiptData
from conferidor.prompts import OCR_PROMPT, RECEIPT_PROMPT_TEMPLATE


def _strip_code_fences(text: str) -> str:
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def _response_text(response: Any) -> str:
    # .text raises ValueError when the candidate was blocked or has no parts
    try:
        return response.text or ""
    except ValueError as e:
        logger.warning(f"Gemini returned no text: {e}")
        return ""


class GeminiService:
    """
    Google Gemini AI service used for both receipt OCR and receipt parsing.
    """

    def __init__(self, api_key: Optional[str], model_name: str = DEFAULT_GEMINI_MODEL,
                 model: Optional[Any] = None):
        """
        Initialize the Gemini service.

        Args:
            api_key: Gemini API key
            model_name: Gemini model to use
            model: Pre-built model object (mainly for tests)
        """
        if model is None:
            if not api_key:
                raise ValueError("GEMINI_API_KEY environment variable is required")
            genai.configure(api_key=api_key)
            model = genai.GenerativeModel(model_name)

        self.model = model
        self.model_name = model_name
        logger.info(f"Gemini service initialized with model {model_name}")

    def extract_text(self, image_data: bytes, mime_type: str = "image/jpeg") -> str:
        """
        Transcribe the text printed on a receipt image.

        Args:
            image_data: Raw image bytes
            mime_type: MIME type of image_data

        Returns:
            Transcribed text, or an empty string if nothing was detected

        Raises:
            TextExtractionError: If the Gemini API call fails
        """
        logger.debug(f"Sending {len(image_data)} byte image to Gemini for OCR")
        try:
            response = self.model.generate_content(
                [OCR_PROMPT, {"mime_type": mime_type, "data": image_data}],
                generation_config={"temperature": 0.0},
            )
        except Exception as e:
            logger.error(f"Gemini OCR request failed: {e}")
            raise TextExtractionError(f"Falha ao extrair texto da imagem: {e}") from e

        text = _response_text(response).strip()
        logger.info(f"Gemini OCR extracted {len(text)} characters")
        return text

    def extract_receipt_data(self, text: str) -> ReceiptData:
        """
        Extract lottery variant, contest number and bets from OCR text.

        Args:
            text: Raw receipt text

        Returns:
            Validated ReceiptData (fields that could not be read are None/empty)

        Raises:
            ReceiptExtractionError: If the API call fails or does not return a JSON object
        """
        prompt = RECEIPT_PROMPT_TEMPLATE.format(
            lotteries=", ".join(f"'{key}'" for key in supported_lotteries()),
            text=text,
        )

        try:
            response = self.model.generate_content(
                prompt,
                generation_config={"temperature": 0.0, "response_mime_type": "application/json"},
            )
        except Exception as e:
            logger.error(f"Gemini receipt parsing request failed: {e}")
            raise ReceiptExtractionError(f"Falha ao chamar a API do Gemini: {e}") from e

        raw = _response_text(response)
        logger.debug(f"Raw Gemini response: {raw}")

        try:
            data = json.loads(_strip_code_fences(raw))
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse Gemini JSON response: {raw!r}")
            raise ReceiptExtractionError(f"Resposta inválida do Gemini: {e}") from e

        if not isinstance(data, dict):
            raise ReceiptExtractionError("Resposta inválida do Gemini: esperado um objeto JSON")

        receipt = ReceiptData.model_validate(data)
        logger.info(
            f"Gemini parsed receipt: variant={receipt.variant}, contest={receipt.contest}, "
            f"bets={len(receipt.bets)}"
        )
        return receipt


def create_gemini_service(api_key: Optional[str], model_name: str = DEFAULT_GEMINI_MODEL) -> GeminiService:
    """
    Create and configure a Gemini service instance.

    Returns:
        Configured GeminiService instance
    """
    try:
        return GeminiService(api_key, model_name)
    except Exception as e:
        logger.error(f"Failed to create Gemini service: {e}")
        raise
