import json
from pathlib import Path

from manuscript_worker.analysis.exceptions import AnalysisError

_DEFAULT_PROMPT_DIR = Path(__file__).parent / "prompts"


def load_prompt_template(stage: str, prompt_dir: Path | None = None) -> str:
    """Load the prompt template of an analysis stage.

    Args:
        stage: Stage name, e.g. ``"compliance"``. The file read is
               ``<stage>_prompt.txt``.
        prompt_dir: Directory holding the templates.
                    Defaults to the bundled prompts directory.

    Returns:
        The raw template string with ``str.format`` placeholders.

    Raises:
        AnalysisError: if the file cannot be read.
    """
    path = (prompt_dir or _DEFAULT_PROMPT_DIR) / f"{stage}_prompt.txt"
    try:
        return path.read_text(encoding="utf-8")
    except OSError as exc:
        raise AnalysisError(f"Failed to load prompt template: {exc}") from exc


def load_json_schema(stage: str, prompt_dir: Path | None = None) -> dict[str, object]:
    """Load and parse the response JSON schema of an analysis stage.

    Raises:
        AnalysisError: if the file cannot be read or is not a JSON object.
    """
    path = (prompt_dir or _DEFAULT_PROMPT_DIR) / f"{stage}_schema.json"
    try:
        schema = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise AnalysisError(f"Failed to load JSON schema: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise AnalysisError(f"Invalid JSON schema in {path.name}: {exc}") from exc
    if not isinstance(schema, dict):
        raise AnalysisError(f"JSON schema in {path.name} must be an object")
    return schema
