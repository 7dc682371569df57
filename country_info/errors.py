# country_info/errors.py
from __future__ import annotations

from typing import Any, Dict, List, Optional


class UpstreamError(Exception):
    """The REST Countries API timed out, was unreachable or answered non-2xx."""

    def __init__(self, path: str, status_code: Optional[int] = None, detail: str = "") -> None:
        self.path = path
        self.status_code = status_code
        self.detail = detail
        msg = f"upstream GET {path} failed"
        if status_code is not None:
            msg += f" with status {status_code}"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)


class InputValidationError(Exception):
    """One or more request parameters were rejected before reaching a handler."""

    def __init__(self, errors: List[Dict[str, Any]]) -> None:
        self.errors = errors
        super().__init__("; ".join(str(e.get("msg")) for e in errors))


class CompareCountError(ValueError):
    pass


def field_error(path: str, msg: str, value: Any = None, location: str = "query") -> Dict[str, Any]:
    return {"type": "field", "msg": msg, "path": path, "location": location, "value": value}
