"""
config/ - Configuration Module

Contains centralized configuration for:
- WhatsApp and storage settings (env driven)
- Sheet names and headers
- Commands and Timeouts
- Error messages and error types
"""

from .constants import (
    WHATSAPP_PHONE_NUMBER_ID,
    WHATSAPP_ACCESS_TOKEN,
    WHATSAPP_VERIFY_TOKEN,
    WHATSAPP_API_VERSION,
    STORAGE_BACKEND,
    DEFAULT_DESCRIPTION,
    Timeouts,
    Commands,
)

from .errors import (
    UserErrors,
    InternalErrors,
    ParseFailure,
    AuthFailure,
    FinanceBotError,
    CommandParseError,
    AuthorizationError,
    VerificationError,
    InfrastructureError,
    StoreUnavailableError,
    DeliveryFailedError,
)
