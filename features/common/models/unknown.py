from typing import Any, Literal
from pydantic import BaseModel, ConfigDict

class Unknown(BaseModel):
    """Marker for a value that could not be obtained."""
    status: Literal["unknown"] = "unknown"

    model_config = ConfigDict(frozen=True)

UNKNOWN = Unknown()

def is_known(value: Any) -> bool:
    """True unless the value is the Unknown marker."""
    return not isinstance(value, Unknown)
