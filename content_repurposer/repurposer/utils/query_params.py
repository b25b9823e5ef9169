"""
Boolean coercion for query and form values.
Multipart forms send smartDetect as the string "false", which is truthy as a plain str.
"""
from typing import Union


def ensure_bool_param(value: Union[bool, str, None]) -> bool:
    """
    True only for True or "true"/"1"/"yes"/"on" (case-insensitive).
    "false", "0", "no", "", None => False.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ("true", "1", "yes", "on")

