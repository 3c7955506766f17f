# application/lookup_tracker.py
from __future__ import annotations
import logging
import threading
import uuid
from typing import Any, Dict, Hashable, MutableMapping, Optional

logger = logging.getLogger(__name__)

SESSION_ID_KEY = "sid"


class TokenRegistry:
    """
    Token corrente de cada consulta, compartilhado entre requisições
    (o cookie de sessão é uma cópia por requisição e não serve para isso).
    Fica em app.extensions; vale por processo.
    """

    def __init__(self) -> None:
        self._tokens: Dict[Hashable, str] = {}
        self._lock = threading.Lock()

    def get(self, key: Hashable) -> Optional[str]:
        with self._lock:
            return self._tokens.get(key)

    def set(self, key: Hashable, token: str) -> None:
        with self._lock:
            self._tokens[key] = token

    def discard(self, key: Hashable) -> None:
        with self._lock:
            self._tokens.pop(key, None)


class LookupTracker:
    """
    Guarda o último resultado num mapeamento (na web: a sessão do Flask)
    junto com o token da consulta que o produziu.
    Com um TokenRegistry, o token corrente fica no servidor: um "Limpar"
    ou um novo envio feito durante a consulta invalida a resposta atrasada,
    mesmo que ela regrave o cookie depois.
    Sem registry, o token fica no próprio mapeamento.
    """

    def __init__(self, state: MutableMapping[str, Any], prefix: str = "lookup",
                 registry: Optional[TokenRegistry] = None) -> None:
        self._state = state
        self._prefix = prefix
        self._registry = registry
        self._token_key = f"{prefix}_token"
        self._result_key = f"{prefix}_result"

    def _registry_key(self) -> tuple:
        sid = self._state.get(SESSION_ID_KEY)
        if sid is None:
            sid = uuid.uuid4().hex
            self._state[SESSION_ID_KEY] = sid
        return (sid, self._prefix)

    @property
    def current_token(self) -> Optional[str]:
        if self._registry is not None:
            return self._registry.get(self._registry_key())
        return self._state.get(self._token_key)

    @property
    def result(self) -> Optional[Any]:
        current = self.current_token
        stored = self._state.get(self._result_key)
        if not isinstance(stored, dict) or current is None or stored.get("token") != current:
            return None
        return stored.get("payload")

    def begin(self) -> str:
        token = uuid.uuid4().hex
        if self._registry is not None:
            self._registry.set(self._registry_key(), token)
        else:
            self._state[self._token_key] = token
        return token

    def is_current(self, token: Optional[str]) -> bool:
        return token is not None and token == self.current_token

    def complete(self, token: str, payload: Any) -> bool:
        if not self.is_current(token):
            logger.info("Discarding stale lookup response (token=%s)", token)
            self._state.pop(self._result_key, None)
            return False
        self._state[self._result_key] = {"token": token, "payload": payload}
        return True

    def clear(self) -> None:
        if self._registry is not None:
            self._registry.discard(self._registry_key())
        self._state.pop(self._token_key, None)
        self._state.pop(self._result_key, None)
