"""iaprelay: App Store server notification relay.

Receives App Store Server Notifications V2, decodes the signed payload
and its transaction/renewal sub-tokens, and fans the event out to
Telegram, Discord and Slack:
  - Structural JWS decoding (no signature verification)
  - One display payload, three destination formatters
  - Concurrent settle-all delivery with rate-limit backoff
  - Env-driven immutable configuration
"""

__version__ = "0.1.0"
__description__ = "App Store server notification relay for chat destinations"

from iaprelay.config import RelayConfig, load_config
from iaprelay.core.relay import NotificationRelay
from iaprelay.routing.dispatcher import DispatchCoordinator

__all__ = [
    "DispatchCoordinator",
    "NotificationRelay",
    "RelayConfig",
    "load_config",
    "__version__",
]
