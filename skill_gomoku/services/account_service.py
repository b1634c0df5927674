# skill_gomoku/services/account_service.py

import json
import logging
import os
import threading
from typing import Dict, Optional

from werkzeug.security import generate_password_hash, check_password_hash

from .errors import ErrorCode

logger = logging.getLogger(__name__)


class AccountStore:
    """
    Flat username -> password hash mapping backed by a pretty-printed JSON
    file. Loaded once, rewritten in full on every mutation.
    """

    def __init__(self, accounts_file: str, log_event_func=None):
        self.accounts_file = accounts_file
        self.accounts: Dict[str, str] = {}
        self.lock = threading.RLock()
        self.log_event = log_event_func or (lambda *args, **kwargs: None)

    # --- Persistence ---

    def load(self) -> None:
        """Reads the accounts file, creating it as `{}` when it does not exist."""
        with self.lock:
            try:
                if not os.path.exists(self.accounts_file):
                    logger.info(f"[Accounts] {self.accounts_file} not found, creating an empty one.")
                    self._write({})

                with open(self.accounts_file, 'r', encoding='utf-8') as f:
                    raw = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"[Accounts] Failed to load {self.accounts_file}: {e}")
                return

            if not isinstance(raw, dict):
                logger.error(f"[Accounts] {self.accounts_file} does not hold a JSON object, ignoring it.")
                return

            self.accounts = {
                username: password
                for username, password in raw.items()
                if username and isinstance(password, str)
            }
            logger.info(f"[Accounts] Loaded {len(self.accounts)} account(s).")

    def _write(self, data: Dict[str, str]) -> None:
        directory = os.path.dirname(self.accounts_file)
        if directory:
            os.makedirs(directory, exist_ok=True)
        with open(self.accounts_file, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
            f.write('\n')

    def save(self) -> None:
        with self.lock:
            try:
                self._write(self.accounts)
            except OSError as e:
                logger.error(f"[Accounts] Failed to save {self.accounts_file}: {e}")

    # --- Contract: lookup / insert ---

    def exists(self, username: str) -> bool:
        with self.lock:
            return username in self.accounts

    def register_user(self, username: str, password: str) -> dict:
        """Registers a new account. Returns a status dict (see `authenticate_user`)."""
        name = (username or '').strip()
        if not name or not (password or '').strip():
            return {"status": "error", "code": ErrorCode.AUTH_FAILED,
                    "message": "Username and password must not be empty."}

        with self.lock:
            if name in self.accounts:
                logger.info(f"[Accounts] Registration refused: {name} already exists")
                return {"status": "error", "code": ErrorCode.USER_EXISTS,
                        "message": "Username already exists."}

            self.accounts[name] = generate_password_hash(password)
            self.save()

        self.log_event("ACCOUNT_REGISTERED", f"New account '{name}'.")
        return {"status": "success", "username": name}

    def authenticate_user(self, username: str, password: str) -> Optional[str]:
        """Returns the canonical username on success, None otherwise."""
        name = (username or '').strip()
        with self.lock:
            saved = self.accounts.get(name)

        if saved and check_password_hash(saved, password or ''):
            return name
        logger.info(f"[Accounts] Failed login for '{name}'")
        return None
