from decimal import Decimal
from typing import Optional

from sqlalchemy import String
from sqlalchemy.types import TypeDecorator


class Money(TypeDecorator):
    """Store :class:`~decimal.Decimal` amounts as text so they round-trip exactly.

    SQLite has no native decimal type and would otherwise coerce through
    ``float``.
    """

    impl = String
    cache_ok = True

    def process_bind_param(self, value: Optional[Decimal], dialect) -> Optional[str]:
        if value is None:
            return None
        if not isinstance(value, Decimal):
            raise TypeError(f"Money columns require Decimal values, got {type(value).__name__}")
        return str(value)

    def process_result_value(self, value: Optional[str], dialect) -> Optional[Decimal]:
        if value is None:
            return None
        return Decimal(value)
