import base64
import json
from decimal import Decimal
from typing import Tuple

from boto3.dynamodb.types import Binary


class StoreJSONEncoder(json.JSONEncoder):
    """Serializes the scalar types the DynamoDB resource API hands back."""

    def default(self, obj):
        if isinstance(obj, Decimal):
            return int(obj) if obj == obj.to_integral_value() else float(obj)
        if isinstance(obj, (set, frozenset)):
            try:
                return sorted(obj)
            except TypeError:
                return list(obj)
        if isinstance(obj, Binary):
            return base64.b64encode(obj.value).decode('ascii')
        if isinstance(obj, (bytes, bytearray)):
            return base64.b64encode(bytes(obj)).decode('ascii')
        return json.JSONEncoder.default(self, obj)


def _reject_constant(name):
    # JSON proper has no NaN/Infinity literals
    raise ValueError(f"Invalid JSON constant: {name}")


def to_pretty_json(value) -> str:
    return json.dumps(value, cls=StoreJSONEncoder, indent=2, ensure_ascii=False)


def classify(text: str) -> Tuple[str, bool]:
    """
    Returns (content, is_structured).
    JSON text is re-serialized with 2-space indentation, anything else is returned unchanged.
    """
    try:
        parsed = json.loads(text, parse_constant=_reject_constant)
    except ValueError:
        return text, False
    return to_pretty_json(parsed), True


def classify_structured(value) -> Tuple[str, bool]:
    """Already-structured values skip parsing entirely."""
    return to_pretty_json(value), True
