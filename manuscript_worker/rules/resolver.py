from collections.abc import Iterable

from manuscript_worker.logging.logger import Log
from manuscript_worker.pipeline.exceptions import EmptyRulesError
from manuscript_worker.rules.exceptions import (
    ProfileNotFoundError,
    RuleDocumentNotFoundError,
)
from manuscript_worker.rules.models import RuleDocument, RuleProfile

RULES_SEPARATOR = "\n\n---\n\n"


class RuleResolver:
    """Holds rule documents and profiles and turns a profile into rule text."""

    def __init__(self) -> None:
        self._documents: dict[str, RuleDocument] = {}
        self._profiles: dict[str, RuleProfile] = {}

    def add_document(self, name: str, text: str) -> RuleDocument:
        document = RuleDocument(name=name, text=text)
        self._documents[document.id] = document
        Log.debug(f"Rule document '{name}' registered ({len(text)} chars)")
        return document

    def add_profile(self, name: str, document_ids: Iterable[str]) -> RuleProfile:
        """Raises:
        RuleDocumentNotFoundError: if any document id is unknown.
        """
        ids = tuple(document_ids)
        missing = [doc_id for doc_id in ids if doc_id not in self._documents]
        if missing:
            raise RuleDocumentNotFoundError(f"Unknown rule documents: {missing}")
        profile = RuleProfile(name=name, document_ids=ids)
        self._profiles[profile.id] = profile
        return profile

    def get_profile(self, profile_id: str) -> RuleProfile:
        profile = self._profiles.get(profile_id)
        if profile is None:
            raise ProfileNotFoundError(f"Rule profile {profile_id} not found")
        return profile

    def resolve(self, profile_id: str) -> str:
        """Return the texts of the profile's documents, in profile order.

        Documents removed since the profile was created are skipped.

        Raises:
            ProfileNotFoundError: if the profile is unknown.
            EmptyRulesError: if no document text is left.
        """
        profile = self.get_profile(profile_id)
        texts = [
            self._documents[doc_id].text
            for doc_id in profile.document_ids
            if doc_id in self._documents
        ]
        joined = RULES_SEPARATOR.join(text for text in texts if text.strip())
        if not joined.strip():
            raise EmptyRulesError("No rule documents found or they are empty.")
        return joined

    def remove_document(self, document_id: str) -> None:
        self._documents.pop(document_id, None)
