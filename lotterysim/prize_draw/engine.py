"""Draw engine that picks winning tickets and pays them out."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional, Sequence

from ..errors import InvalidArgumentError
from ..models import PrizeTier, Ticket
from .distribution import PrizeDistribution
from .results import LotteryResults
from .rng import RandomSource

logger = logging.getLogger(__name__)


class DrawEngine:
    """Engine that selects winners without replacement across the three tiers."""

    def __init__(self, random_source: RandomSource, ticket_price: Decimal) -> None:
        """Create a draw engine.

        Parameters
        ----------
        random_source : RandomSource
            Source of the uniformly random indices used for every selection.
            Substitute a :class:`~lotterysim.prize_draw.rng.ScriptedRandomSource`
            to replay a draw exactly.
        ticket_price : Decimal
            Price of one ticket, used to compute the realized revenue.
        """

        if random_source is None:
            raise InvalidArgumentError("random_source is required")
        self._random = random_source
        self._ticket_price = ticket_price

    def conduct_draw(
        self,
        tickets: Optional[Sequence[Ticket]],
        distribution: Optional[PrizeDistribution],
    ) -> LotteryResults:
        """Draw the grand, second and third tier winners from ``tickets``.

        Parameters
        ----------
        tickets : Sequence[Ticket]
            The full ticket pool. None of the tickets may have won already.
        distribution : PrizeDistribution
            Amounts and winner counts for this draw.

        Returns
        -------
        LotteryResults
            Winners per tier in draw order, revenue and realized house profit.

        Notes
        -----
        The tiers are drawn strictly in order:

        1. One grand prize winner.
        2. ``min(second_tier_winner_count, remaining)`` second tier winners.
        3. ``min(third_tier_winner_count, remaining)`` third tier winners.

        A pool too small for the configured counts produces fewer winners
        without raising. Every winner is marked on the ticket and credited to
        its owner exactly once. The realized house profit is computed from the
        amounts actually paid.

        Raises
        ------
        InvalidArgumentError
            If ``tickets`` is empty, ``distribution`` is missing, or a ticket in
            the pool already won. Nothing is mutated in that case.
        """
        if not tickets:
            raise InvalidArgumentError("Tickets list cannot be null or empty")
        if distribution is None:
            raise InvalidArgumentError("distribution is required")

        pool = list(tickets)
        if any(ticket.is_winner for ticket in pool):
            raise InvalidArgumentError("Ticket pool contains tickets that already won")

        results = LotteryResults()

        # Index arena: slots [0, active) hold candidates still in play. A drawn
        # slot is swapped to the end of that region and the region shrinks.
        candidates = list(range(len(pool)))
        active = len(candidates)

        tiers = (
            (PrizeTier.GRAND, 1, distribution.grand_prize_amount, results.grand_prize_winners),
            (
                PrizeTier.SECOND_TIER,
                distribution.second_tier_winner_count,
                distribution.second_tier_prize_per_winner,
                results.second_tier_winners,
            ),
            (
                PrizeTier.THIRD_TIER,
                distribution.third_tier_winner_count,
                distribution.third_tier_prize_per_winner,
                results.third_tier_winners,
            ),
        )

        for tier, configured, amount, winners in tiers:
            to_draw = min(configured, active)
            if to_draw < configured:
                logger.info(
                    "Only %d of %d %s winners can be drawn; %d tickets left",
                    to_draw,
                    configured,
                    tier.value,
                    active,
                )
            for _ in range(to_draw):
                slot = self._random.next_index(active)
                if not 0 <= slot < active:
                    raise ValueError(
                        f"random source returned index {slot} outside [0, {active})"
                    )
                active -= 1
                candidates[slot], candidates[active] = candidates[active], candidates[slot]
                winner = pool[candidates[active]]

                winner.mark_as_winner(tier, amount)
                winner.owner.add_winnings(amount)
                winners.append(winner)
            logger.debug("Drew %d %s winners at %s each", len(winners), tier.value, amount)

        results.total_revenue = len(pool) * self._ticket_price
        results.house_profit = results.total_revenue - results.total_paid
        logger.info(
            "Draw complete: %d winners, revenue %s, house profit %s",
            len(results.all_winners),
            results.total_revenue,
            results.house_profit,
        )
        return results


__all__ = ["DrawEngine"]
