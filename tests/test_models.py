import unittest
import warnings
from decimal import Decimal

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SAWarning, StatementError

from lotterysim.db.engine import get_sessionmaker, make_engine
from lotterysim.models import GameState, LotteryGame, Player, PrizeTier, Ticket


class PlayerPurchaseTests(unittest.TestCase):
    def setUp(self):
        self.game = LotteryGame(state=GameState.INITIALIZED)
        self.player = Player(seat=1, is_human=True, game=self.game)

    def test_defaults(self):
        self.assertEqual(self.player.name, "Player 1")
        self.assertEqual(self.player.balance, Decimal("10.00"))
        self.assertTrue(self.player.is_human)
        self.assertEqual(self.player.tickets, [])
        cpu = Player(seat=4, game=self.game)
        self.assertEqual(cpu.name, "Player 4")
        self.assertFalse(cpu.is_human)

    def test_purchase_debits_balance_and_numbers_tickets(self):
        tickets = self.player.purchase_tickets(3, Decimal("1.00"))

        self.assertEqual([t.number for t in tickets], [1, 2, 3])
        self.assertEqual(self.player.balance, Decimal("7.00"))
        self.assertEqual(self.player.tickets, tickets)
        self.assertEqual(self.game.tickets, tickets)
        for ticket in tickets:
            self.assertIs(ticket.owner, self.player)
            self.assertIs(ticket.game, self.game)
            self.assertFalse(ticket.is_winner)
            self.assertEqual(ticket.win_amount, Decimal("0"))

    def test_purchase_limits(self):
        self.assertFalse(self.player.can_purchase_tickets(0))
        self.assertFalse(self.player.can_purchase_tickets(11))
        self.assertTrue(self.player.can_purchase_tickets(10))

        self.player.purchase_tickets(8)
        self.assertFalse(self.player.can_purchase_tickets(3))
        self.assertTrue(self.player.can_purchase_tickets(2))

    def test_purchase_requires_balance(self):
        poor = Player(seat=2, starting_balance=Decimal("2.50"), game=self.game)
        self.assertFalse(poor.can_purchase_tickets(3))
        self.assertEqual(poor.purchase_tickets(3), [])
        self.assertEqual(poor.balance, Decimal("2.50"))
        self.assertEqual(poor.tickets, [])
        self.assertEqual(poor.get_max_purchasable_tickets(), 2)

    def test_custom_price_and_limit(self):
        self.assertEqual(self.player.get_max_purchasable_tickets(Decimal("3.00")), 3)
        self.assertEqual(self.player.get_max_purchasable_tickets(Decimal("1.00"), 5), 5)
        self.player.purchase_tickets(2, Decimal("1.00"), max_tickets=5)
        self.assertFalse(self.player.can_purchase_tickets(4, Decimal("1.00"), max_tickets=5))
        self.assertEqual(self.player.get_max_purchasable_tickets(Decimal("1.00"), 5), 3)

    def test_purchase_without_game_raises(self):
        loner = Player(seat=3)
        with self.assertRaises(ValueError):
            loner.purchase_tickets(1)

    def test_add_winnings_ignores_non_positive_amounts(self):
        self.player.add_winnings(Decimal("0"))
        self.player.add_winnings(Decimal("-5"))
        self.assertEqual(self.player.balance, Decimal("10.00"))
        self.player.add_winnings(Decimal("2.25"))
        self.assertEqual(self.player.balance, Decimal("12.25"))

    def test_str(self):
        self.player.purchase_tickets(2)
        self.assertEqual(str(self.player), "Player 1 - Balance: $8.00, Tickets: 2")


class TicketTests(unittest.TestCase):
    def setUp(self):
        self.game = LotteryGame(state=GameState.INITIALIZED)
        self.player = Player(seat=1, is_human=True, game=self.game)
        self.ticket = self.player.purchase_tickets(1)[0]

    def test_ticket_requires_owner(self):
        with self.assertRaises(ValueError):
            Ticket(owner=None, number=1)  # type: ignore[arg-type]

    def test_mark_as_winner_once(self):
        self.ticket.mark_as_winner(PrizeTier.SECOND_TIER, Decimal("6.00"))
        self.assertTrue(self.ticket.is_winner)
        self.assertEqual(self.ticket.prize_tier, PrizeTier.SECOND_TIER)
        self.assertEqual(self.ticket.win_amount, Decimal("6.00"))

        with self.assertRaises(ValueError):
            self.ticket.mark_as_winner(PrizeTier.GRAND, Decimal("50.00"))
        self.assertEqual(self.ticket.prize_tier, PrizeTier.SECOND_TIER)

    def test_mark_as_winner_rejects_bad_amounts(self):
        with self.assertRaises(ValueError):
            self.ticket.mark_as_winner(PrizeTier.GRAND, Decimal("-1"))
        with self.assertRaises(TypeError):
            self.ticket.mark_as_winner(PrizeTier.GRAND, 1.5)  # type: ignore[arg-type]
        self.assertFalse(self.ticket.is_winner)

    def test_str(self):
        self.assertEqual(str(self.ticket), "Ticket #1 - Owner: Player 1 - Not a winner")
        self.ticket.mark_as_winner(PrizeTier.GRAND, Decimal("50"))
        self.assertEqual(
            str(self.ticket), "Ticket #1 - Owner: Player 1 - WINNER - Grand Prize ($50.00)"
        )


class GameTests(unittest.TestCase):
    def test_ticket_numbers_restart_per_game(self):
        first = LotteryGame()
        second = LotteryGame()
        self.assertEqual([first.allocate_ticket_number() for _ in range(3)], [1, 2, 3])
        self.assertEqual(second.allocate_ticket_number(), 1)

    def test_update_after_ticket_purchases(self):
        game = LotteryGame(state=GameState.INITIALIZED)
        Player(seat=1, is_human=True, game=game).purchase_tickets(3)
        Player(seat=2, game=game).purchase_tickets(4)

        game.update_after_ticket_purchases(Decimal("1.50"))

        self.assertEqual(game.state, GameState.TICKETS_PURCHASED)
        self.assertEqual(game.total_revenue, Decimal("10.50"))
        self.assertEqual([t.number for t in game.tickets], list(range(1, 8)))

    def test_human_player(self):
        game = LotteryGame()
        self.assertIsNone(game.human_player)
        Player(seat=2, game=game)
        human = Player(seat=1, is_human=True, game=game)
        self.assertIs(game.human_player, human)


class PersistenceTests(unittest.TestCase):
    def setUp(self):
        self.engine = make_engine()
        self.Session = get_sessionmaker(self.engine)

    def tearDown(self):
        self.engine.dispose()

    def test_money_round_trips_exactly(self):
        amount = Decimal("10.00") / 3
        with self.Session.begin() as session:
            game = LotteryGame(state=GameState.INITIALIZED)
            player = Player(seat=1, is_human=True, game=game)
            ticket = player.purchase_tickets(1)[0]
            ticket.mark_as_winner(PrizeTier.THIRD_TIER, amount)
            session.add(game)
            session.flush()
            ticket_id = ticket.id

        with self.Session() as session:
            loaded = session.get(Ticket, ticket_id)
            assert loaded is not None
            self.assertEqual(loaded.win_amount, amount)
            self.assertIsInstance(loaded.win_amount, Decimal)
            self.assertEqual(loaded.prize_tier, PrizeTier.THIRD_TIER)
            self.assertEqual(loaded.owner.balance, Decimal("9.00"))
            self.assertEqual(loaded.game.state, GameState.INITIALIZED)

    def test_ticket_numbers_are_unique_per_game(self):
        with self.Session() as session:
            game = LotteryGame(state=GameState.INITIALIZED)
            player = Player(seat=1, is_human=True, game=game)
            Ticket(owner=player, number=1)
            Ticket(owner=player, number=1)
            session.add(game)
            with self.assertRaises(IntegrityError):
                session.flush()

    def test_two_games_each_start_at_ticket_one(self):
        with self.Session.begin() as session:
            for _ in range(2):
                game = LotteryGame(state=GameState.INITIALIZED)
                Player(seat=1, is_human=True, game=game).purchase_tickets(2)
                session.add(game)

        with self.Session() as session:
            rows = session.execute(
                select(Ticket.game_id, Ticket.number).order_by(Ticket.game_id, Ticket.number)
            ).all()
            self.assertEqual([tuple(r) for r in rows], [(1, 1), (1, 2), (2, 1), (2, 2)])

    def test_tickets_bought_after_game_is_flushed_are_saved(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error", SAWarning)
            with self.Session.begin() as session:
                game = LotteryGame(state=GameState.INITIALIZED)
                human = Player(seat=1, is_human=True, game=game)
                cpu = Player(seat=2, game=game)
                session.add(game)
                session.flush()

                human.purchase_tickets(4)
                cpu.purchase_tickets(2)
                session.flush()

                self.assertEqual(len(game.tickets), 6)
                self.assertTrue(all(t in session for t in game.tickets))
                self.assertTrue(all(t.id is not None for t in game.tickets))
                game_id = game.id

        with self.Session() as session:
            stored = session.get(LotteryGame, game_id)
            assert stored is not None
            self.assertEqual([t.number for t in stored.tickets], [1, 2, 3, 4, 5, 6])
            owners = [t.owner.seat for t in stored.tickets]
            self.assertEqual(owners, [1, 1, 1, 1, 2, 2])
            self.assertEqual(stored.players[0].balance, Decimal("6.00"))

    def test_money_column_rejects_floats(self):
        with self.Session() as session:
            game = LotteryGame(state=GameState.INITIALIZED)
            game.total_revenue = 1.5  # type: ignore[assignment]
            session.add(game)
            with self.assertRaises(StatementError):
                session.flush()


if __name__ == "__main__":
    unittest.main()
