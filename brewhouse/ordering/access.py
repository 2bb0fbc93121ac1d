"""Staff access gate for the admin surface. Not a security boundary."""

import logging

logger = logging.getLogger(__name__)


class AccessGate:
    """
    A single shared secret and an in-memory granted flag.

    The flag lives only as long as the process; it is never persisted.
    """

    def __init__(self, secret: str) -> None:
        self._secret = secret
        self._granted = False

    @property
    def is_granted(self) -> bool:
        return self._granted

    def authenticate(self, secret: str) -> bool:
        if secret == self._secret:
            self._granted = True
            logger.info("Staff access granted")
            return True
        logger.warning("Staff access denied: invalid access key")
        return False

    def revoke(self) -> None:
        self._granted = False
        logger.info("Staff session ended")
