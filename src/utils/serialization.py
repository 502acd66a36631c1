"""JSON-safe conversion of service results.

JSON numbers are IEEE-754 doubles on most consumers, so integers outside
±(2**53 - 1) would lose precision. Those are turned into strings; everything else is
left as is. Pydantic models are dumped first.
"""

from typing import Any

from pydantic import BaseModel

MAX_SAFE_INTEGER = 2**53 - 1


def serialize_for_wire(value: Any) -> Any:
    """Recursively convert value into JSON-compatible data without precision loss."""
    if isinstance(value, BaseModel):
        return serialize_for_wire(value.model_dump())
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, int):
        return str(value) if abs(value) > MAX_SAFE_INTEGER else value
    if isinstance(value, dict):
        return {key: serialize_for_wire(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [serialize_for_wire(item) for item in value]
    return value
