# skill_gomoku/services/session_registry.py

import threading
import uuid
from typing import Callable, Dict, Optional


class SessionRegistry:
    """
    Maps opaque credentials to a display name. Account tokens and
    session-less session ids are kept apart so one can never stand in for
    the other. Credentials live for the whole process; nothing is revoked.
    """

    def __init__(self, issue_token_func: Callable[[str], str], log_event_func=None):
        # issue_token_func(username) -> token, e.g. create_access_token
        self.issue_token_func = issue_token_func
        self.tokens: Dict[str, str] = {}
        self.sessions: Dict[str, str] = {}
        self.lock = threading.RLock()
        self.log_event = log_event_func or (lambda *args, **kwargs: None)

    # --- Account tokens ---

    def issue_token(self, username: str) -> str:
        with self.lock:
            token = self.issue_token_func(username)
            if token in self.tokens:
                raise RuntimeError("Token factory returned a token that was already issued.")
            self.tokens[token] = username
        self.log_event("TOKEN_ISSUED", f"Token issued for '{username}'.")
        return token

    def resolve_token(self, token: Optional[str]) -> Optional[str]:
        if not token:
            return None
        with self.lock:
            return self.tokens.get(token)

    # --- Session-less ids ---

    def issue_session_id(self, player_name: str) -> str:
        with self.lock:
            session_id = uuid.uuid4().hex
            while session_id in self.sessions:
                session_id = uuid.uuid4().hex
            self.sessions[session_id] = player_name
        self.log_event("SESSION_ISSUED", f"Session id issued for '{player_name}'.")
        return session_id

    def resolve_session(self, session_id: Optional[str]) -> Optional[str]:
        if not session_id:
            return None
        with self.lock:
            return self.sessions.get(session_id)

    def rename_session(self, session_id: str, player_name: str) -> None:
        """Session-less players may pick a new name on each join."""
        with self.lock:
            if session_id in self.sessions:
                self.sessions[session_id] = player_name
