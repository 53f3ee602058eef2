import json
from typing import Any

from pydantic import BaseModel


def to_json(data: Any, indent: int = 2, ensure_ascii: bool = False) -> str:
    """
    Convert a Python object or pydantic model to a JSON string.

    Args:
        data: pydantic model, or plain Python object (dict, list, etc.)
        indent: Indentation level for pretty-printing (default: 2)
        ensure_ascii: If True, escape non-ASCII chars (default: False)

    Returns:
        str: JSON string
    """
    if isinstance(data, BaseModel):
        data = data.model_dump(mode="json")
    return json.dumps(data, ensure_ascii=ensure_ascii, indent=indent)
