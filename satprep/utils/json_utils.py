"""JSON serialization utilities."""
import json
from pathlib import Path


def json_dump(payload: object, pretty: bool = False) -> str:
    """Serialize object to a JSON string (indented when ``pretty``)."""
    return json.dumps(payload, ensure_ascii=False, indent=2 if pretty else None)


def json_load(data: str) -> object:
    """Deserialize JSON string to object."""
    return json.loads(data)


def load_json_column(raw: str | None, default: object) -> object:
    """Parse a JSON text column, falling back to ``default`` when empty or corrupt."""
    if not raw:
        return default
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return default


def read_json_file(path: Path) -> object:
    """Read and parse a UTF-8 JSON file."""
    return json_load(path.read_text(encoding="utf-8"))
