"""
Purpose: Persist the single logged-in user between runs.
What it does:
Keeps exactly one record, under a fixed key, in a small JSON file. Missing or
corrupt data means "no session" and never breaks startup.
"""

from __future__ import annotations

import json
import logging
import os
from typing import Optional

from dotenv import load_dotenv

from .models import User

load_dotenv()
SESSION_FILE = os.getenv("SESSION_FILE", ".ride_session.json")

SESSION_KEY = "rideShareUser"

logger = logging.getLogger(__name__)


class SessionStore:
    def __init__(self, path: Optional[str] = None):
        self.path = path or SESSION_FILE

    def load(self) -> Optional[User]:
        if not os.path.exists(self.path):
            return None

        try:
            with open(self.path, "r", encoding="utf-8") as file:
                data = json.load(file)
            record = data.get(SESSION_KEY)
            if record is None:
                return None
            return User.from_dict(record)
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error(f"Failed to parse user from session storage: {e}")
            return None

    def save(self, user: User) -> None:
        with open(self.path, "w", encoding="utf-8") as file:
            json.dump({SESSION_KEY: user.to_dict()}, file)

    def clear(self) -> None:
        if os.path.exists(self.path):
            os.remove(self.path)

    def login(self, user: User) -> User:
        self.save(user)
        logger.info(f"{user.name} logged in as {user.role.value}")
        return user

    def logout(self) -> None:
        self.clear()
