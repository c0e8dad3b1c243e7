"""
Profile persistence behind a small load/save interface.

The controller receives a store instead of reaching for a global; the JSON
implementation keeps the encoded profile under a named key so several
settings can share one document.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Union

from .models import AllergyProfile


class ProfileStore:
    """
    Base interface for any profile store (file, key-value, memory).
    """

    def load(self) -> AllergyProfile:
        raise NotImplementedError

    def save(self, profile: AllergyProfile) -> None:
        raise NotImplementedError


class InMemoryProfileStore(ProfileStore):
    def __init__(self, profile: Optional[AllergyProfile] = None):
        self._payload = profile.to_dict() if profile else None

    def load(self) -> AllergyProfile:
        if self._payload is None:
            return AllergyProfile()
        return AllergyProfile.from_dict(self._payload)

    def save(self, profile: AllergyProfile) -> None:
        self._payload = profile.to_dict()


class JsonFileProfileStore(ProfileStore):
    """
    Stores the profile as JSON under `key` inside a settings document.
    Missing or unreadable documents load a fresh profile.
    """

    DEFAULT_KEY = "userAllergyProfile"

    def __init__(self, path: Union[str, Path], key: str = DEFAULT_KEY):
        self.path = Path(path)
        self.key = key
        self.log = logging.getLogger(self.__class__.__name__)

    def load(self) -> AllergyProfile:
        if not self.path.exists():
            return AllergyProfile()
        try:
            document = self._read_document()
            payload = document.get(self.key)
            if payload is None:
                return AllergyProfile()
            return AllergyProfile.from_dict(payload)
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            self.log.warning("Could not decode profile from %s: %s", self.path, exc)
            return AllergyProfile()

    def save(self, profile: AllergyProfile) -> None:
        document = {}
        if self.path.exists():
            try:
                document = self._read_document()
            except ValueError:
                self.log.warning("Overwriting unreadable settings file %s", self.path)
                document = {}
        document[self.key] = profile.to_dict()
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("w", encoding="utf-8") as fh:
            json.dump(document, fh, ensure_ascii=False, indent=2)
        self.log.info("Saved allergy profile to %s", self.path)

    def _read_document(self) -> dict:
        with self.path.open("r", encoding="utf-8") as fh:
            document = json.load(fh)
        if not isinstance(document, dict):
            raise ValueError("settings document must be a JSON object")
        return document
