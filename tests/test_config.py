import dataclasses
import os
import tempfile
import unittest
from decimal import Decimal
from pathlib import Path
from unittest.mock import patch

from lotterysim.config import (
    GameConfiguration,
    PlayerConfiguration,
    PrizeConfiguration,
    TicketConfiguration,
    load_config,
)
from lotterysim.errors import ConfigurationError


class ValidationTests(unittest.TestCase):
    def test_defaults_are_valid(self):
        config = GameConfiguration().validate()
        self.assertEqual(config.players.minimum_count, 10)
        self.assertEqual(config.players.maximum_count, 15)
        self.assertEqual(config.tickets.price, Decimal("1.00"))
        self.assertEqual(config.prizes.grand_prize_percentage, Decimal("0.50"))

    def test_percentages_must_sum_to_one(self):
        prizes = dataclasses.replace(PrizeConfiguration(), house_profit_percentage=Decimal("0.20"))
        with self.assertRaisesRegex(ConfigurationError, "sum to 100%"):
            prizes.validate()

    def test_small_rounding_error_is_tolerated(self):
        prizes = dataclasses.replace(
            PrizeConfiguration(), house_profit_percentage=Decimal("0.1005")
        )
        prizes.validate()

    def test_winner_percentages_must_be_in_range(self):
        for field_name in ("second_tier_winner_percentage", "third_tier_winner_percentage"):
            for value in (Decimal("0"), Decimal("-0.1"), Decimal("1.01")):
                with self.subTest(field=field_name, value=value):
                    prizes = dataclasses.replace(PrizeConfiguration(), **{field_name: value})
                    with self.assertRaises(ConfigurationError):
                        prizes.validate()
        dataclasses.replace(
            PrizeConfiguration(), third_tier_winner_percentage=Decimal("1")
        ).validate()

    def test_player_configuration(self):
        with self.assertRaises(ConfigurationError):
            PlayerConfiguration(minimum_count=16, maximum_count=15).validate()
        with self.assertRaises(ConfigurationError):
            PlayerConfiguration(minimum_count=0).validate()
        with self.assertRaises(ConfigurationError):
            PlayerConfiguration(starting_balance=Decimal("0")).validate()
        with self.assertRaises(ConfigurationError):
            PlayerConfiguration(min_tickets_per_player=5, max_tickets_per_player=4).validate()

    def test_ticket_price_must_be_positive(self):
        with self.assertRaisesRegex(ConfigurationError, "Ticket price"):
            TicketConfiguration(price=Decimal("0")).validate()


class LoadConfigTests(unittest.TestCase):
    def test_empty_environment_gives_defaults(self):
        self.assertEqual(load_config({}), GameConfiguration())

    def test_values_are_parsed(self):
        config = load_config(
            {
                "LOTTERY_MIN_PLAYERS": "11",
                "LOTTERY_MAX_PLAYERS": " 12 ",
                "LOTTERY_TICKET_PRICE": "2.50",
                "LOTTERY_GRAND_PRIZE_PERCENTAGE": "0.60",
                "LOTTERY_HOUSE_PROFIT_PERCENTAGE": "0.00",
                "LOTTERY_SHOW_PRIZE_BREAKDOWN": "no",
                "LOTTERY_CLEAR_SCREEN": "0",
                "LOTTERY_PAUSE": "Off",
                "LOTTERY_SEED": "42",
                "LOG_LEVEL": "debug",
            }
        )
        self.assertEqual(config.players.minimum_count, 11)
        self.assertEqual(config.players.maximum_count, 12)
        self.assertEqual(config.tickets.price, Decimal("2.50"))
        self.assertEqual(config.prizes.grand_prize_percentage, Decimal("0.60"))
        self.assertFalse(config.display.show_prize_breakdown)
        self.assertFalse(config.display.clear_screen_between_phases)
        self.assertFalse(config.display.pause_between_phases)
        self.assertEqual(config.seed, 42)
        self.assertEqual(config.log_level, "DEBUG")

    def test_malformed_values_name_the_variable(self):
        cases = {
            "LOTTERY_MIN_PLAYERS": "ten",
            "LOTTERY_TICKET_PRICE": "cheap",
            "LOTTERY_PAUSE": "maybe",
            "LOTTERY_STARTING_BALANCE": "Infinity",
        }
        for name, value in cases.items():
            with self.subTest(name=name):
                with self.assertRaisesRegex(ConfigurationError, name):
                    load_config({name: value})

    def test_inconsistent_values_fail_validation(self):
        with self.assertRaisesRegex(ConfigurationError, "sum to 100%"):
            load_config({"LOTTERY_GRAND_PRIZE_PERCENTAGE": "0.90"})

    def test_env_file_is_loaded(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            env_path = Path(tmpdir) / ".env"
            env_path.write_text("LOTTERY_TICKET_PRICE=2.00\nLOTTERY_SEED=99\n")
            with patch.dict(os.environ, {}, clear=True):
                config = load_config(env_file=str(env_path))
        self.assertEqual(config.tickets.price, Decimal("2.00"))
        self.assertEqual(config.seed, 99)

    def test_process_environment_wins_over_env_file(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            env_path = Path(tmpdir) / ".env"
            env_path.write_text("LOTTERY_TICKET_PRICE=2.00\n")
            with patch.dict(os.environ, {"LOTTERY_TICKET_PRICE": "3.00"}, clear=True):
                config = load_config(env_file=str(env_path))
        self.assertEqual(config.tickets.price, Decimal("3.00"))


if __name__ == "__main__":
    unittest.main()
