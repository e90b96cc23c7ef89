"""
parsers.py - Command Parsing

Turns an inbound WhatsApp text into a ParsedCommand. Pure: no store
access, no I/O.

Commands (keywords are case-insensitive):
- DAFTAR            -> REGISTER
- VERIFY <code>     -> VERIFY
- SALDO             -> CHECK_BALANCE
- HELP / BANTUAN    -> HELP
- <type> <amount> [description...] -> RECORD_TRANSACTION
    type: keluar/expense (Pengeluaran) or masuk/income (Pemasukan)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from config.constants import Commands, DEFAULT_DESCRIPTION
from config.errors import CommandParseError, ParseFailure
from models import TransactionKind
from utils.amounts import parse_amount


class Intent(Enum):
    """User intent categories."""
    REGISTER = "register"
    VERIFY = "verify"
    CHECK_BALANCE = "check_balance"
    HELP = "help"
    RECORD_TRANSACTION = "record"


@dataclass(frozen=True)
class ParsedCommand:
    """Intent plus the arguments that intent carries."""
    intent: Intent
    # VERIFY
    code: Optional[str] = None
    # RECORD_TRANSACTION
    kind: Optional[TransactionKind] = None
    amount_text: Optional[str] = None
    amount: Optional[int] = None
    description: Optional[str] = None


def _resolve_kind(type_token: str) -> Optional[TransactionKind]:
    if any(kw in type_token for kw in Commands.EXPENSE_KEYWORDS):
        return TransactionKind.EXPENSE
    if any(kw in type_token for kw in Commands.INCOME_KEYWORDS):
        return TransactionKind.INCOME
    return None


def _is_verify(lowered: str) -> bool:
    return lowered == Commands.VERIFY or lowered.startswith(Commands.VERIFY + " ")


def parse_transaction(text: str) -> ParsedCommand:
    """
    Parse "<type> <amount> [description...]".

    Raises:
        CommandParseError: BAD_FORMAT (< 2 tokens), INVALID_AMOUNT
            (no positive number in the amount token), UNKNOWN_TYPE.
    """
    parts = text.strip().lower().split(' ')
    if len(parts) < 2:
        raise CommandParseError(ParseFailure.BAD_FORMAT, text)

    type_token, amount_text = parts[0], parts[1]

    amount = parse_amount(amount_text)
    if amount is None:
        raise CommandParseError(ParseFailure.INVALID_AMOUNT, text)

    kind = _resolve_kind(type_token)
    if kind is None:
        raise CommandParseError(ParseFailure.UNKNOWN_TYPE, text)

    description = ' '.join(parts[2:]) if len(parts) > 2 else DEFAULT_DESCRIPTION

    return ParsedCommand(
        intent=Intent.RECORD_TRANSACTION,
        kind=kind,
        amount_text=amount_text,
        amount=amount,
        description=description,
    )


def parse_command(text: str) -> ParsedCommand:
    """
    Classify a message into a ParsedCommand.

    Args:
        text: Raw message text

    Returns:
        ParsedCommand

    Raises:
        CommandParseError: if the message falls through to the transaction
            shorthand and is not a valid transaction.
    """
    message = (text or "").strip()
    lowered = message.lower()

    if lowered in Commands.REGISTER:
        return ParsedCommand(intent=Intent.REGISTER)

    if _is_verify(lowered):
        tokens = message.split()
        code = tokens[1] if len(tokens) > 1 else ""
        return ParsedCommand(intent=Intent.VERIFY, code=code)

    if lowered in Commands.SALDO:
        return ParsedCommand(intent=Intent.CHECK_BALANCE)

    if lowered in Commands.HELP:
        return ParsedCommand(intent=Intent.HELP)

    return parse_transaction(message)
