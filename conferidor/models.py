"""
Data models for receipt verification.

Pydantic models validate the two external JSON shapes (language-model output
and the Caixa results payload) once, at the boundary. The verification core
works on the frozen dataclasses defined below them.
"""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator

from conferidor.lotteries import resolve_lottery_key

NO_PRIZE_DESCRIPTION = "Sem premiação"


def _to_int(value: Any) -> Optional[int]:
    """Best-effort conversion of a JSON scalar to a non-negative int."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    if isinstance(value, float) and value.is_integer():
        return int(value) if value >= 0 else None
    if isinstance(value, str) and value.strip().isdecimal():
        return int(value.strip())
    return None


def _to_decimal(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        return Decimal("0")
    try:
        # via str() so floats keep their published decimal digits
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        logger.warning(f"Invalid prize value {value!r}, using 0")
        return Decimal("0")
    if not result.is_finite():
        logger.warning(f"Non-finite prize value {value!r}, using 0")
        return Decimal("0")
    return result


class ReceiptData(BaseModel):
    """Structured data read from a receipt by the language model."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    variant: Optional[str] = Field(default=None, alias="tipoJogo")
    contest: Optional[int] = Field(default=None, alias="concurso")
    bets: List[List[int]] = Field(default_factory=list, alias="apostas")

    @field_validator("variant", mode="before")
    @classmethod
    def _resolve_variant(cls, value: Any) -> Optional[str]:
        if value is None:
            return None
        resolved = resolve_lottery_key(str(value))
        if resolved is None:
            logger.warning(f"Unknown lottery variant on receipt: {value!r}")
        return resolved

    @field_validator("contest", mode="before")
    @classmethod
    def _parse_contest(cls, value: Any) -> Optional[int]:
        if value is None:
            return None
        contest = _to_int(value)
        if not contest:
            logger.warning(f"Invalid contest number on receipt: {value!r}")
            return None
        return contest

    @field_validator("bets", mode="before")
    @classmethod
    def _clean_bets(cls, value: Any) -> List[List[int]]:
        if not isinstance(value, list):
            return []

        bets = []
        for i, raw_bet in enumerate(value):
            if not isinstance(raw_bet, list) or not raw_bet:
                logger.warning(f"Bet {i + 1}: expected a non-empty list, got {raw_bet!r}")
                continue
            numbers = [_to_int(n) for n in raw_bet]
            if any(n is None for n in numbers):
                logger.warning(f"Bet {i + 1}: invalid numbers {raw_bet!r}, skipping")
                continue
            bets.append(numbers)
        return bets

    @property
    def is_identified(self) -> bool:
        return bool(self.variant) and bool(self.contest)


class PrizeTier(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    description: str = Field(default="", alias="descricaoFaixa")
    payout: Decimal = Field(default=Decimal("0"), alias="valorPremio")

    @field_validator("description", mode="before")
    @classmethod
    def _description(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("payout", mode="before")
    @classmethod
    def _payout(cls, value: Any) -> Decimal:
        return _to_decimal(value)


class OfficialResult(BaseModel):
    """Official draw result as published by the Caixa results API."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    contest_number: Optional[int] = Field(default=None, alias="numero")
    variant: Optional[str] = Field(default=None, alias="tipoJogo")
    drawn_numbers: List[str] = Field(default_factory=list, alias="listaDezenas")
    prize_tiers: List[PrizeTier] = Field(default_factory=list, alias="listaRateioPremio")
    draw_date: Optional[str] = Field(default=None, alias="dataApuracao")
    accumulated: Optional[bool] = Field(default=None, alias="acumulado")

    @field_validator("contest_number", mode="before")
    @classmethod
    def _contest_number(cls, value: Any) -> Optional[int]:
        return _to_int(value)

    @field_validator("drawn_numbers", mode="before")
    @classmethod
    def _drawn_numbers(cls, value: Any) -> List[str]:
        if not isinstance(value, list):
            return []
        numbers = []
        for item in value:
            # published strings are kept as-is; only bare ints get the two-digit form
            if isinstance(item, int) and not isinstance(item, bool) and item >= 0:
                numbers.append(f"{item:02d}")
            elif item is not None:
                numbers.append(str(item).strip())
        return numbers

    @field_validator("prize_tiers", mode="before")
    @classmethod
    def _prize_tiers(cls, value: Any) -> List[Any]:
        if not isinstance(value, list):
            return []
        return [tier for tier in value if isinstance(tier, (dict, PrizeTier))]

    @field_validator("draw_date", mode="before")
    @classmethod
    def _draw_date(cls, value: Any) -> Optional[str]:
        return None if value is None else str(value)

    @field_validator("accumulated", mode="before")
    @classmethod
    def _accumulated(cls, value: Any) -> Optional[bool]:
        return value if isinstance(value, bool) else None


@dataclass(frozen=True)
class TierInfo:
    payout: Decimal
    description: str


@dataclass(frozen=True)
class BetOutcome:
    """Result of scoring one bet against the drawn numbers."""

    bet: Tuple[int, ...]
    hit_count: int
    matched_numbers: FrozenSet[str]
    is_winner: bool
    payout: Decimal
    tier_description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "aposta": list(self.bet),
            "acertos": self.hit_count,
            "numerosAcertados": sorted(self.matched_numbers),
            "isPremiada": self.is_winner,
            "valorPremio": float(self.payout),
            "descricaoPremio": self.tier_description,
        }


@dataclass(frozen=True)
class VerificationSummary:
    any_winner: bool
    total_payout: Decimal
    outcomes: Tuple[BetOutcome, ...]

    @property
    def winning_outcomes(self) -> List[BetOutcome]:
        return [o for o in self.outcomes if o.is_winner]
