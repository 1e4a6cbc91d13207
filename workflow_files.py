import json
from pathlib import Path
from typing import Any, Dict, List, Union

PathLike = Union[str, Path]

WORKFLOW_EXT = ".json"

# n8n rejects these on POST /workflows; PUT accepts an id but not the rest
IMPORT_STRIP = ("id", "active", "pinData", "meta", "tags", "versionId")
UPDATE_STRIP = ("active", "pinData", "meta", "tags", "versionId")


class WorkflowValidationError(ValueError):
    pass


class InvalidWorkflowFileError(WorkflowValidationError):
    def __init__(self, path: PathLike, reason: str = ""):
        self.path = str(path)
        msg = f"Invalid workflow file: {self.path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


def assert_non_empty_string(value: Any, label: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise WorkflowValidationError(f"{label} must be a non-empty string")


def is_workflow(value: Any) -> bool:
    """
    Minimal shape check: name is a string, nodes a list, connections a mapping.
    id is optional (exports from n8n often come without it).
    Dangling connection targets etc. are the server's problem.
    """
    if not isinstance(value, dict):
        return False
    if "id" in value and not isinstance(value["id"], str):
        return False
    if not isinstance(value.get("name"), str):
        return False
    if not isinstance(value.get("nodes"), list):
        return False
    if not isinstance(value.get("connections"), dict):
        return False
    return True


def default_workflows_dir() -> Path:
    """
    ./workflows beside these modules (source checkout), else under the working
    directory (installed console scripts live in site-packages).
    """
    here = Path(__file__).resolve().parent / "workflows"
    if here.is_dir():
        return here
    return Path.cwd() / "workflows"


def list_workflow_files(directory: PathLike) -> List[str]:
    """File names (not paths) of every *.json in directory, sorted ascending."""
    d = Path(directory)
    return sorted(p.name for p in d.iterdir() if p.is_file() and p.name.endswith(WORKFLOW_EXT))


def read_workflow_file(path: PathLike) -> Dict[str, Any]:
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise InvalidWorkflowFileError(p, f"bad JSON: {e.msg} at line {e.lineno}") from e
    except UnicodeDecodeError as e:
        raise InvalidWorkflowFileError(p, "not UTF-8") from e

    if not is_workflow(data):
        raise InvalidWorkflowFileError(p)
    return data


def sanitize_workflow_for_import(workflow: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in workflow.items() if k not in IMPORT_STRIP}


def sanitize_workflow_for_update(workflow: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in workflow.items() if k not in UPDATE_STRIP}
