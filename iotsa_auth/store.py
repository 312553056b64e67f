"""
Shared, administrator-editable authorization state.

Both holders are copy-on-write: the current value is an immutable
:class:`.TokenTable` or :class:`.TrustAnchor`, and writers swap in a new
value under a lock. A reader that takes :meth:`TokenStore.snapshot` (or
:meth:`TrustStore.get`) once per check therefore always sees one complete
version, even while an administrative save is in progress.
"""

import logging
import threading
from typing import Iterable, Optional, Union

from .domain import Token, TokenTable, TrustAnchor
from .services.config_store import ConfigStore

logger = logging.getLogger(__name__)

TOKENS_KEY = 'statictokens'
TRUST_KEY = 'jwtkeys'


class TokenStore(object):
    """Holds the static token table."""

    def __init__(self, table: Optional[TokenTable] = None) -> None:
        self._lock = threading.Lock()
        self._table = table if table is not None else TokenTable()

    def snapshot(self) -> TokenTable:
        """Return the current table. It will never change underneath you."""
        return self._table

    @property
    def ntoken(self) -> int:
        return self._table.ntoken

    def lookup(self, credential: str) -> Optional[str]:
        """Rights of the first token equal to ``credential``, or ``None``."""
        return self._table.lookup(credential)

    def replace_all(self, tokens: Union[TokenTable, Iterable[Token]],
                    config: Optional[ConfigStore] = None) -> TokenTable:
        """
        Replace the whole table at once and return the new table.

        If ``config`` is given the new table is persisted first, and the
        current table is kept if that fails.
        """
        if not isinstance(tokens, TokenTable):
            tokens = TokenTable(tuple(Token(*entry) for entry in tokens))
        with self._lock:
            if config is not None:
                config.save(TOKENS_KEY, tokens.to_list())
            self._table = tokens
        logger.info('Static token table replaced, %i tokens', tokens.ntoken)
        return tokens

    def load(self, config: ConfigStore) -> TokenTable:
        """Replace the table with the one persisted in ``config``."""
        return self.replace_all(
            TokenTable.from_list(config.load(TOKENS_KEY, []))
        )

    def save(self, config: ConfigStore) -> None:
        """Persist the current table to ``config``."""
        with self._lock:
            table = self._table
            config.save(TOKENS_KEY, table.to_list())


class TrustStore(object):
    """Holds the trusted issuer and its key."""

    def __init__(self, anchor: Optional[TrustAnchor] = None) -> None:
        self._lock = threading.Lock()
        self._anchor = anchor if anchor is not None else TrustAnchor()

    def get(self) -> TrustAnchor:
        return self._anchor

    def set(self, trusted_issuer: str, issuer_key: str,
            config: Optional[ConfigStore] = None) -> TrustAnchor:
        """
        Replace the issuer and key together.

        As with :meth:`TokenStore.replace_all`, a given ``config`` is saved
        to before the new anchor takes effect.
        """
        anchor = TrustAnchor(trusted_issuer, issuer_key)
        with self._lock:
            if config is not None:
                config.save(TRUST_KEY, anchor.to_dict())
            self._anchor = anchor
        logger.info('Trusted issuer set to %r, signed tokens %s',
                    trusted_issuer,
                    'enabled' if anchor.enabled else 'disabled')
        return anchor

    def load(self, config: ConfigStore) -> TrustAnchor:
        anchor = TrustAnchor.from_dict(config.load(TRUST_KEY, {}))
        return self.set(anchor.trusted_issuer, anchor.issuer_key)

    def save(self, config: ConfigStore) -> None:
        with self._lock:
            anchor = self._anchor
            config.save(TRUST_KEY, anchor.to_dict())
