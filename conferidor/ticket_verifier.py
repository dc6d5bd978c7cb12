"""
Lottery Bet Verification Module
Scores extracted bets against an official Caixa result and totals the prizes.
"""

from decimal import Decimal
from typing import Dict, Iterable, List, Sequence

from loguru import logger

from conferidor.exceptions import InvalidBetError
from conferidor.models import (
    NO_PRIZE_DESCRIPTION,
    BetOutcome,
    OfficialResult,
    TierInfo,
    VerificationSummary,
)
from conferidor.prize_tiers import build_tier_map

WINNER_MESSAGE = "Parabéns! Você tem uma ou mais apostas premiadas."
NO_WINNER_MESSAGE = "Não foi dessa vez. Nenhuma aposta premiada."


def format_bet_numbers(bet: Sequence[int]) -> List[str]:
    """
    Format bet numbers the way the results API lists drawn numbers.

    Each number becomes a zero-padded two-digit string ("6" -> "06");
    numbers of three or more digits are kept whole.

    Raises:
        InvalidBetError: If a number is negative or not an integer
    """
    formatted = []
    for number in bet:
        if isinstance(number, bool) or not isinstance(number, int):
            raise InvalidBetError(f"Bet numbers must be integers, got {number!r} in {list(bet)}")
        if number < 0:
            raise InvalidBetError(f"Bet numbers must be non-negative, got {number} in {list(bet)}")
        formatted.append(f"{number:02d}")
    return formatted


class TicketVerifier:
    """
    Verifies lottery bets against an official result and calculates prizes.

    Holds no state between calls; a single instance can serve concurrent requests.
    """

    def score_bet(self, bet: Sequence[int], drawn_numbers: Iterable[str],
                  tier_map: Dict[int, TierInfo]) -> BetOutcome:
        """
        Score a single bet.

        Args:
            bet: Numbers chosen by the bettor
            drawn_numbers: Official drawn numbers as two-digit strings
            tier_map: Hit count -> prize table from build_tier_map

        Returns:
            BetOutcome for this bet
        """
        matched = frozenset(format_bet_numbers(bet)) & frozenset(drawn_numbers)
        hit_count = len(matched)

        tier = tier_map.get(hit_count) if hit_count > 0 else None
        if tier is None:
            return BetOutcome(
                bet=tuple(bet),
                hit_count=hit_count,
                matched_numbers=matched,
                is_winner=False,
                payout=Decimal("0"),
                tier_description=NO_PRIZE_DESCRIPTION,
            )

        return BetOutcome(
            bet=tuple(bet),
            hit_count=hit_count,
            matched_numbers=matched,
            is_winner=True,
            payout=tier.payout,
            tier_description=tier.description,
        )

    def assemble_summary(self, outcomes: Iterable[BetOutcome]) -> VerificationSummary:
        """
        Combine per-bet outcomes into a receipt summary.

        Args:
            outcomes: Scored bets in receipt order

        Returns:
            VerificationSummary whose total is the sum of the payouts
        """
        outcomes = tuple(outcomes)
        total = sum((o.payout for o in outcomes), Decimal("0"))
        return VerificationSummary(
            any_winner=total > 0,
            total_payout=total,
            outcomes=outcomes,
        )

    def verify_bets(self, bets: Iterable[Sequence[int]], result: OfficialResult) -> VerificationSummary:
        """
        Verify every bet of a receipt against one official result.

        Args:
            bets: Bets in receipt order
            result: Official result for the receipt's contest

        Returns:
            VerificationSummary with one outcome per bet, in input order
        """
        tier_map = build_tier_map(result.prize_tiers)
        outcomes = [self.score_bet(bet, result.drawn_numbers, tier_map) for bet in bets]
        summary = self.assemble_summary(outcomes)

        logger.info(
            f"Contest {result.contest_number}: {len(summary.winning_outcomes)}/{len(outcomes)} "
            f"winning bets, total prize R$ {summary.total_payout}"
        )
        return summary

    def format_verification_summary(self, summary: VerificationSummary) -> str:
        """Headline message shown to the user for a verified receipt."""
        return WINNER_MESSAGE if summary.any_winner else NO_WINNER_MESSAGE


def create_ticket_verifier() -> TicketVerifier:
    """
    Factory function to create a ticket verifier instance.

    Returns:
        TicketVerifier instance
    """
    return TicketVerifier()
