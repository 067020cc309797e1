"""
Value Normalizer Module

Decides how a raw request payload is canonicalized before storage:

- well-formed JSON is parsed into a value tree (dict/list/str/number/bool/None)
- anything else is kept as an opaque string
- an empty payload, or JSON that parses syntactically but cannot be
  interpreted, raises MalformedInputError
"""

import json
import logging
import math
from typing import Any

from .errors import MalformedInputError

logger = logging.getLogger(__name__)


class _NotStrictJSON(Exception):
    """NaN and Infinity are Python extensions, not JSON."""


def _reject_constant(name: str) -> Any:
    raise _NotStrictJSON(name)


def _parse_finite_float(literal: str) -> float:
    value = float(literal)
    if not math.isfinite(value):
        raise MalformedInputError(f"number {literal} is out of range")
    return value


class ValueNormalizer:
    """
    Converts raw payload bytes into a canonical value.

    Parsing follows strict JSON: payloads using the NaN/Infinity extensions
    accepted by the json module are not JSON and are kept as strings.

    Examples:
        >>> normalizer = ValueNormalizer()
        >>> normalizer.normalize(b'{"x": 1}')
        {'x': 1}
        >>> normalizer.normalize(b'hello')
        'hello'
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding
        self._decoder = json.JSONDecoder(
            parse_constant=_reject_constant,
            parse_float=_parse_finite_float,
        )

    def normalize(self, raw: bytes) -> Any:
        """
        Normalize a raw payload.

        Args:
            raw: Request body bytes

        Returns:
            The parsed JSON value, or the payload as a string if it is not JSON

        Raises:
            MalformedInputError: payload is empty, or is JSON that cannot
                be interpreted (numbers out of float range, oversized
                integers, excessive nesting)
        """
        if not raw:
            raise MalformedInputError("empty payload")

        try:
            text = raw.decode(self.encoding)
        except UnicodeDecodeError:
            logger.debug("Payload is not valid text, storing as string")
            return raw.decode(self.encoding, errors="replace")

        try:
            return self._decoder.decode(text)
        except (json.JSONDecodeError, _NotStrictJSON):
            return text
        except MalformedInputError:
            raise
        except RecursionError as exc:
            raise MalformedInputError("JSON payload is nested too deeply") from exc
        except ValueError as exc:
            # int() digit limit and similar conversion failures
            raise MalformedInputError(f"JSON payload could not be interpreted: {exc}") from exc
