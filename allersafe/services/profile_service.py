import json
import os
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from pydantic import ValidationError

from allersafe.core.engine_config import load_engine_config
from allersafe.core.logging_config import get_logger
from allersafe.models import PatientProfile
from allersafe.utils.ingredient_text import parse_allergy_profile

logger = get_logger(__name__)


class ProfileStore(ABC):
    @abstractmethod
    def get_profile(self, user_id: str) -> Optional[PatientProfile]:
        """Return the stored profile for a user, or None when unknown."""
        pass

    def get_allergies(self, user_id: Optional[str]) -> List[str]:
        """Allergy list for a user; unknown users and missing ids give an empty list."""
        if not user_id:
            return []
        profile = self.get_profile(user_id)
        if profile is None:
            logger.info(f"No profile found for user {user_id}; continuing without allergies")
            return []
        return parse_allergy_profile(profile.symptoms)


class LocalProfileStore(ProfileStore):
    """Profiles read once from a JSON list of patient records."""

    def __init__(self, file_path: str = "data/patients.json"):
        self.profiles: Dict[str, PatientProfile] = self._load_data(file_path)

    def _load_data(self, file_path: str) -> Dict[str, PatientProfile]:
        if not os.path.exists(file_path):
            logger.warning(f"{file_path} not found. Profile lookups will return nothing.")
            return {}
        try:
            with open(file_path, "r", encoding="utf-8") as f:
                records = json.load(f)
        except (json.JSONDecodeError, OSError) as exc:
            logger.error(f"Error reading {file_path}: {exc}")
            return {}

        profiles = {}
        for record in records if isinstance(records, list) else []:
            try:
                profile = PatientProfile(**record)
            except (TypeError, ValidationError) as exc:
                logger.warning(f"Skipping malformed patient record in {file_path}: {exc}")
                continue
            profiles[profile.id] = profile
        return profiles

    def get_profile(self, user_id: str) -> Optional[PatientProfile]:
        return self.profiles.get(str(user_id))


profile_store = LocalProfileStore(load_engine_config().patients_file)
