"""JSON serialization helpers built on orjson.

Catalog rows are mostly strings, integers and NULLs, which orjson handles
natively. The default handler covers the few driver types that are not:
Decimal (numeric columns) and raw bytes.
"""

import base64
import decimal
from typing import Any

import orjson


def _default_handler(obj: Any) -> Any:
    """
    Serialize types orjson doesn't handle natively.

    Raises:
        TypeError: If object cannot be serialized
    """
    if isinstance(obj, decimal.Decimal):
        # Integral decimals (e.g. numeric_precision) stay numbers
        return int(obj) if obj == obj.to_integral_value() else float(obj)

    if isinstance(obj, (bytes, bytearray, memoryview)):
        data = bytes(obj)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError:
            return base64.b64encode(data).decode("ascii")

    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=str)

    raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


def convert_value_to_json_safe(value: Any) -> Any:
    """
    Convert a value to its JSON-serializable equivalent.

    Values already of a JSON type are returned unchanged; anything orjson
    cannot encode even with the default handler becomes its ``str()``.
    """
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    try:
        return orjson.loads(orjson.dumps(value, default=_default_handler))
    except TypeError:
        return str(value)


def convert_rows_to_json_safe(rows: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Convert every value of every row to a JSON-serializable format."""
    return [
        {key: convert_value_to_json_safe(value) for key, value in row.items()}
        for row in rows
    ]


def dumps(obj: Any, indent: bool = False) -> str:
    """
    Serialize an object to a JSON string.

    Args:
        obj: Object to serialize
        indent: Pretty-print with two-space indentation

    Returns:
        JSON string
    """
    option = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(obj, default=_default_handler, option=option).decode("utf-8")
