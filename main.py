"""
main.py - WhatsApp Finance Bot

Features:
- Record income/expense by chat: `keluar 50000 makan siang`, `masuk 1000000 gaji`
- Balance check: `saldo`
- Number verification: `verify 1234` (code issued by the Finance App)
- Auto category from the description (8 fixed categories)

WORKFLOW:
1. WhatsApp Cloud API POSTs the message to /webhook
2. Sender normalized, text parsed into a command
3. Command runs against the user directory and ledger
4. Reply sent back via the Cloud API
"""

import logging
from datetime import datetime
from typing import Optional, Tuple

from flask import Flask, request, jsonify

from config.constants import (
    DEBUG,
    PORT,
    STORAGE_BACKEND,
    WHATSAPP_OBJECT,
    WHATSAPP_VERIFY_TOKEN,
)
from config.errors import InternalErrors
from handlers.command_handler import CommandExecutor
from security import mask_phone, secure_log
from services.state_manager import forget_message, is_message_duplicate
from services.storage import InMemoryTransactionLedger, InMemoryUserDirectory
from utils.phone import normalize_phone
from whatsapp_helper import WhatsAppSender

logging.basicConfig(
    level=logging.DEBUG if DEBUG else logging.INFO,
    format='[%(asctime)s] [%(levelname)s] %(name)s: %(message)s',
)

# Initialize Flask app
app = Flask(__name__)

# Built lazily so importing this module needs no credentials
_executor: Optional[CommandExecutor] = None
_sender: Optional[WhatsAppSender] = None


def build_executor(backend: str = STORAGE_BACKEND) -> CommandExecutor:
    """Wire the command executor to the configured storage backend."""
    if backend == 'memory':
        secure_log("WARNING", "Using in-memory storage; data is lost on restart")
        return CommandExecutor(InMemoryUserDirectory(), InMemoryTransactionLedger())

    if backend != 'sheets':
        raise ValueError(f"Unknown STORAGE_BACKEND: {backend}")

    from sheets_helper import SheetsTransactionLedger, SheetsUserDirectory
    return CommandExecutor(SheetsUserDirectory(), SheetsTransactionLedger())


def get_executor() -> CommandExecutor:
    global _executor
    if _executor is None:
        _executor = build_executor()
    return _executor


def get_sender() -> WhatsAppSender:
    global _sender
    if _sender is None:
        _sender = WhatsAppSender()
    return _sender


# ===================== HELPERS =====================

def extract_text_message(body: dict) -> Tuple[Optional[dict], bool]:
    """
    Pull the first message out of a Cloud API envelope.

    Returns:
        (message, is_whatsapp). message is None when the envelope carries
        no messages (status updates, read receipts).
    """
    if not isinstance(body, dict) or body.get('object') != WHATSAPP_OBJECT:
        return None, False

    entry = (body.get('entry') or [{}])[0]
    changes = (entry.get('changes') or [{}])[0]
    value = changes.get('value') or {}

    messages = value.get('messages')
    if not messages:
        return None, True

    return messages[0], True


def process_message(phone_number: str, text: str) -> str:
    """Run one message through the executor and send the reply."""
    reply = get_executor().handle_text(phone_number, text)
    get_sender().send(normalize_phone(phone_number), reply)
    return reply


# ===================== WHATSAPP HANDLERS =====================

@app.route('/webhook', methods=['GET'])
def verify_webhook():
    """Cloud API subscription handshake: echo hub.challenge when the token matches."""
    mode = request.args.get('hub.mode')
    token = request.args.get('hub.verify_token')
    challenge = request.args.get('hub.challenge', '')

    if mode == 'subscribe' and WHATSAPP_VERIFY_TOKEN and token == WHATSAPP_VERIFY_TOKEN:
        secure_log("INFO", "Webhook verified")
        return challenge, 200

    return '', 403


@app.route('/webhook', methods=['POST'])
def webhook_whatsapp():
    """Webhook endpoint for WhatsApp Cloud API messages."""
    try:
        body = request.get_json(silent=True)

        message, is_whatsapp = extract_text_message(body)
        if not is_whatsapp:
            return '', 404

        if message is None:
            return '', 200

        phone_number = message.get('from', '')
        text = ((message.get('text') or {}).get('body') or '').strip()

        # Images, audio, reactions... only text commands are supported
        if not phone_number or message.get('type', 'text') != 'text' or not text:
            return '', 200

        # Retried deliveries carry the same message id
        message_id = message.get('id')
        if is_message_duplicate(message_id):
            secure_log("INFO", "Duplicate message skipped", message_id=message_id)
            return '', 200

        secure_log("INFO", "Message received", phone=mask_phone(phone_number))

        try:
            process_message(phone_number, text)
        except Exception:
            # Let the provider's retry through
            forget_message(message_id)
            raise

        return '', 200

    except Exception as e:
        secure_log("ERROR", f"[{InternalErrors.WEBHOOK}] Webhook error: {type(e).__name__}")
        return '', 500


# ===================== OTHER ENDPOINTS =====================

@app.route('/', methods=['GET'])
def home():
    return jsonify({
        'status': 'ok',
        'message': 'WhatsApp Finance Bot Webhook',
        'timestamp': datetime.now().isoformat(),
    }), 200


# ===================== MAIN =====================

if __name__ == '__main__':
    print("=" * 50)
    print("WhatsApp Finance Bot")
    print("=" * 50)
    print(f"\nStorage: {STORAGE_BACKEND}")

    if STORAGE_BACKEND == 'sheets':
        from sheets_helper import test_connection
        print(f"Google Sheets: {'connected' if test_connection() else 'NOT connected'}")

    print(f"\n🚀 Server running on port {PORT}")
    print("📱 WhatsApp webhook ready")

    app.run(host='0.0.0.0', port=PORT, debug=DEBUG)
