"""Example analysis client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseAnalysisClient and register the provider in AnalysisServiceFactory.
"""

import json
from typing import ClassVar

from manuscript_worker.analysis.client_base import BaseAnalysisClient, ChatCompletion
from manuscript_worker.analysis.exceptions import PermanentServiceError

_EXAMPLE_SCORE = {"score": 50, "reasoning": "Example response."}


class ExampleClientAdapter(BaseAnalysisClient):
    """Example adapter that returns a fixed valid response for every stage.

    No network calls. Useful for local development, tests, and as a template
    for building real provider adapters.
    """

    DEFAULT_RESPONSES: ClassVar[dict[str, dict[str, object]]] = {
        "compliance_result": {
            "compliance_findings": [],
            "journal_recommendations": [],
        },
        "structural_result": {"issues": []},
        "readability_result": {"issues": []},
        "scoring_result": {
            name: _EXAMPLE_SCORE
            for name in (
                "compliance_score",
                "scientific_quality_score",
                "writing_quality_score",
                "citation_maturity_score",
                "novelty_score",
                "data_integrity_risk_score",
                "editor_acceptance_likelihood",
            )
        },
        "metadata_result": {
            "predicted_section_type": "Research Article",
            "generated_keywords": [],
            "corresponding_author": {
                "name": "",
                "email": None,
                "affiliation": None,
                "is_complete": False,
            },
            "orcid_validation": [],
            "funding_metadata": [],
            "suggested_taxonomy": [],
        },
        "peer_review_result": {
            "manuscript_summary": "Example response.",
            "strengths": [],
            "weaknesses": [],
            "reviewer_concerns": [],
            "methodological_gaps": "None identified.",
            "reviewer_questions": [],
            "suitability_for_peer_review": "Example response.",
        },
    }

    def __init__(self) -> None:
        pass

    async def create_chat_completion(
        self,
        *,
        model: str,
        temperature: float,
        system_prompt: str,
        user_prompt: str,
        schema_name: str,
        json_schema: dict[str, object],
    ) -> ChatCompletion:
        _ = model, temperature, system_prompt, user_prompt, json_schema
        response = self.DEFAULT_RESPONSES.get(schema_name)
        if response is None:
            raise PermanentServiceError(f"No example response for '{schema_name}'")
        return ChatCompletion(content=json.dumps(response))
