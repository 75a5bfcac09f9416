"""
JSON encoding and decoding of records at the engine boundary.
"""

from __future__ import annotations

import json
from typing import Union

from .exceptions import MalformedRecordError, ProcessingError
from .types import Record


def decode_record(text: Union[str, bytes]) -> Record:
    """
    Parse record text into a Record.

    Raises:
        MalformedRecordError: If the text is not valid JSON or not an object
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError) as exc:
        raise MalformedRecordError(f"Record is not valid JSON: {exc}") from exc
    except RecursionError as exc:
        raise MalformedRecordError("Record is nested too deeply to decode") from exc

    if not isinstance(data, dict):
        raise MalformedRecordError(
            f"Record must be a JSON object, got {type(data).__name__}"
        )
    return data


def encode_record(
    record: Record, sort_keys: bool = False, ensure_ascii: bool = False
) -> str:
    """
    Serialize a record to compact JSON text.

    Raises:
        ProcessingError: If the record holds values JSON cannot represent
            or is nested too deeply to encode
    """
    try:
        return json.dumps(
            record,
            sort_keys=sort_keys,
            ensure_ascii=ensure_ascii,
            separators=(",", ":"),
        )
    except RecursionError as exc:
        raise ProcessingError("Record is nested too deeply to encode") from exc
    except (TypeError, ValueError) as exc:
        raise ProcessingError(f"Record cannot be encoded as JSON: {exc}") from exc
