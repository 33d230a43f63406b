import enum
import secrets
import string

from sqlalchemy import Enum


def generate_custom_id(prefix: str, length: int = 8) -> str:
    random_part = ''.join(secrets.choice(string.ascii_uppercase)
                          for _ in range(length))
    return f"{prefix}-{random_part}"


def enum_column(enum_cls: type[enum.Enum], name: str) -> Enum:
    """Enum type persisted by value ("Office Supplies"), not by member name."""
    return Enum(enum_cls, name=name, values_callable=lambda e: [m.value for m in e],
                validate_strings=True)
