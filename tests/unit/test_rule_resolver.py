import pytest

from manuscript_worker.pipeline.exceptions import EmptyRulesError
from manuscript_worker.rules.exceptions import ProfileNotFoundError, RuleDocumentNotFoundError
from manuscript_worker.rules.resolver import RULES_SEPARATOR, RuleResolver


class TestRuleResolver:
    def test_joins_documents_in_profile_order(self) -> None:
        resolver = RuleResolver()
        first = resolver.add_document("style.pdf", "Use SI units.")
        second = resolver.add_document("ethics.pdf", "State consent.")
        profile = resolver.add_profile("Journal", [second.id, first.id])
        assert resolver.resolve(profile.id) == f"State consent.{RULES_SEPARATOR}Use SI units."

    def test_unknown_profile(self) -> None:
        with pytest.raises(ProfileNotFoundError):
            RuleResolver().resolve("missing")

    def test_profile_with_unknown_document(self) -> None:
        with pytest.raises(RuleDocumentNotFoundError):
            RuleResolver().add_profile("Journal", ["missing"])

    def test_empty_rules_are_fatal(self) -> None:
        resolver = RuleResolver()
        doc = resolver.add_document("blank.pdf", "  \n")
        profile = resolver.add_profile("Journal", [doc.id])
        with pytest.raises(EmptyRulesError, match="No rule documents found or they are empty."):
            resolver.resolve(profile.id)

    def test_removed_documents_are_skipped(self) -> None:
        resolver = RuleResolver()
        kept = resolver.add_document("a.pdf", "Rule A")
        removed = resolver.add_document("b.pdf", "Rule B")
        profile = resolver.add_profile("Journal", [kept.id, removed.id])
        resolver.remove_document(removed.id)
        assert resolver.resolve(profile.id) == "Rule A"

    def test_profile_without_documents_is_empty(self) -> None:
        resolver = RuleResolver()
        profile = resolver.add_profile("Journal", [])
        with pytest.raises(EmptyRulesError):
            resolver.resolve(profile.id)
