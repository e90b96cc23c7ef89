"""
command_handler.py - Command Execution

CommandExecutor takes one inbound message (sender + text), reads the
user directory to decide what the sender may do, and returns the reply
text. It never sends anything itself and keeps no state between
messages; everything persistent lives behind UserDirectory and
TransactionLedger.

Sender states:
- Unregistered: no link for the phone
- Registered, unverified: link exists, code not yet confirmed
- Verified: may record transactions and check the balance
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import Callable, Dict, Optional

from config.constants import MAX_DESCRIPTION_LENGTH
from config.errors import (
    PARSE_FAILURE_MESSAGES,
    AuthFailure,
    AuthorizationError,
    CommandParseError,
    InfrastructureError,
    InternalErrors,
    UserErrors,
    VerificationError,
)
from messages import MSG, fmt
from models import TransactionEntry, TransactionKind, UserLink
from security import mask_phone, sanitize_input, secure_log
from services.categorizer import detect_category
from services.storage import TransactionLedger, UserDirectory
from utils.parsers import Intent, ParsedCommand, parse_command
from utils.phone import normalize_phone

logger = logging.getLogger(__name__)

# Apology per command when the store fails mid-command
FAILURE_REPLIES: Dict[Intent, str] = {
    Intent.REGISTER: UserErrors.REGISTER_FAILED,
    Intent.VERIFY: UserErrors.VERIFY_FAILED,
    Intent.CHECK_BALANCE: UserErrors.BALANCE_FAILED,
    Intent.RECORD_TRANSACTION: UserErrors.SAVE_FAILED,
}


class CommandExecutor:
    """Runs parsed commands against the user directory and ledger."""

    def __init__(self, users: UserDirectory, ledger: TransactionLedger,
                 clock: Callable[[], datetime] = datetime.now):
        self.users = users
        self.ledger = ledger
        self.clock = clock
        self._handlers = {
            Intent.REGISTER: self._handle_register,
            Intent.VERIFY: self._handle_verify,
            Intent.CHECK_BALANCE: self._handle_balance,
            Intent.HELP: self._handle_help,
            Intent.RECORD_TRANSACTION: self._handle_transaction,
        }

    # ===================== ENTRY POINTS =====================

    def handle_text(self, raw_sender: str, text: str) -> str:
        """
        Normalize, parse and execute one inbound message.

        Never raises: store failures become an apology reply.

        Args:
            raw_sender: Sender id as delivered by WhatsApp (digits)
            text: Message body

        Returns:
            Reply text for the sender
        """
        phone_key = normalize_phone(raw_sender)
        command: Optional[ParsedCommand] = None
        # Unparseable text is treated as a failed transaction attempt
        failed_intent = Intent.RECORD_TRANSACTION

        try:
            try:
                command = parse_command(sanitize_input(text))
            except CommandParseError as e:
                return self._reply_parse_error(phone_key, e)

            failed_intent = command.intent
            return self.execute(phone_key, command)

        except InfrastructureError as e:
            secure_log("ERROR", f"[{InternalErrors.STORE}] {failed_intent.value} failed: {type(e).__name__}",
                       phone=mask_phone(phone_key), detail=str(e))
            return FAILURE_REPLIES.get(failed_intent, UserErrors.UNKNOWN_ERROR)
        except Exception as e:
            logger.exception("Unexpected error while handling %s", failed_intent.value)
            secure_log("ERROR", f"[{InternalErrors.COMMAND}] Process message error: {type(e).__name__}",
                       phone=mask_phone(phone_key))
            return UserErrors.UNKNOWN_ERROR

    def execute(self, phone_key: str, command: ParsedCommand) -> str:
        """
        Run a parsed command for a normalized phone key.

        Authorization and code mismatch become replies. Store errors
        propagate to the caller.
        """
        handler = self._handlers[command.intent]
        try:
            return handler(phone_key, command)
        except AuthorizationError as e:
            secure_log("INFO", f"Rejected {command.intent.value}: {e.reason.value}",
                       phone=mask_phone(phone_key))
            return UserErrors.NOT_REGISTERED
        except VerificationError:
            return UserErrors.CODE_MISMATCH

    # ===================== GATES =====================

    def _require_verified(self, phone_key: str) -> UserLink:
        link = self.users.find_verified_by_phone(phone_key)
        if link is not None:
            return link

        if self.users.find_by_phone(phone_key) is None:
            raise AuthorizationError(AuthFailure.NOT_REGISTERED, phone_key)
        raise AuthorizationError(AuthFailure.NOT_VERIFIED, phone_key)

    def _reply_parse_error(self, phone_key: str, error: CommandParseError) -> str:
        # Unverified senders learn how to register before they learn the format
        try:
            self._require_verified(phone_key)
        except AuthorizationError:
            return UserErrors.NOT_REGISTERED
        return PARSE_FAILURE_MESSAGES[error.reason]

    # ===================== HANDLERS =====================

    def _handle_register(self, phone_key: str, command: ParsedCommand) -> str:
        existing = self.users.find_by_phone(phone_key)
        if existing is not None and existing.is_verified:
            return MSG.ALREADY_VERIFIED

        # Account creation happens in the app, not over chat
        return MSG.REGISTER_VIA_APP

    def _handle_verify(self, phone_key: str, command: ParsedCommand) -> str:
        link = self.users.find_by_phone_and_code(phone_key, command.code or "")
        if link is None:
            raise VerificationError()

        self.users.mark_verified(link, self.clock())
        secure_log("INFO", "WhatsApp number verified", phone=mask_phone(phone_key))
        return MSG.VERIFIED

    def _handle_balance(self, phone_key: str, command: ParsedCommand) -> str:
        link = self._require_verified(phone_key)

        entries = self.ledger.list_all(link.account_id)

        total_income = Decimal(0)
        total_expense = Decimal(0)
        for entry in entries:
            if entry.kind is TransactionKind.INCOME:
                total_income += entry.amount
            elif entry.kind is TransactionKind.EXPENSE:
                total_expense += entry.amount

        return fmt.balance(total_income, total_expense, len(entries))

    def _handle_help(self, phone_key: str, command: ParsedCommand) -> str:
        return MSG.HELP

    def _handle_transaction(self, phone_key: str, command: ParsedCommand) -> str:
        link = self._require_verified(phone_key)

        description = command.description[:MAX_DESCRIPTION_LENGTH]
        category = detect_category(description)
        now = self.clock()

        entry = TransactionEntry(
            account_id=link.account_id,
            occurred_at=now,
            description=description,
            category=category,
            kind=command.kind,
            amount=Decimal(command.amount),
            last_modified=now,
        )
        self.ledger.append(link.account_id, entry)

        secure_log("INFO", f"Transaction added: {category.value} - {entry.amount}",
                   phone=mask_phone(phone_key))
        return fmt.transaction_saved(entry)
