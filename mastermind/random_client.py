"""
- HTTP call, no fallback
Get 4 random digits (0..7) from random.org. If anything goes wrong (no internet,
timeout, bad response) we raise SecretUnavailable; the caller decides whether
to try again. A made-up secret is never handed out instead.
"""

import logging
from typing import List

import requests

from .config import config
from .errors import SecretUnavailable
from .types import CODE_LENGTH, MAX_DIGIT, MIN_DIGIT

logger = logging.getLogger(__name__)


def fetch_code(length: int = CODE_LENGTH) -> List[int]:
    # Parameters to send to random.org
    params = {
        "num": length,       # how many numbers we want
        "min": MIN_DIGIT,    # smallest allowed number
        "max": MAX_DIGIT,    # largest allowed number
        "col": 1,            # one number per line
        "base": 10,          # normal decimal numbers
        "format": "plain",   # plain text response
        "rnd": "new",        # always generate new numbers
    }

    try:
        response = requests.get(
            config.RANDOM_ORG_BASE_URL,
            params=params,
            timeout=config.RANDOM_ORG_TIMEOUT_SECONDS,
        )
        # If the response was not 200 OK, this will raise an error
        response.raise_for_status()
    except requests.RequestException as exc:
        logger.warning("random.org request failed: %s", exc)
        raise SecretUnavailable("Random number service is unavailable.") from exc

    # The body looks like:
    #   0\n3\n1\n2\n
    digits = []
    for line in response.text.splitlines():
        text = line.strip()
        if text == "":
            continue
        try:
            digits.append(int(text))
        except ValueError as exc:
            logger.warning("random.org returned a non-integer line: %r", text)
            raise SecretUnavailable("Random number service returned garbage.") from exc

    # Check that we got exactly the requested number of digits
    if len(digits) != length:
        logger.warning("random.org returned %d values, expected %d", len(digits), length)
        raise SecretUnavailable(f"Random number service returned {len(digits)} values, expected {length}.")

    # Check each number is between 0 and 7
    for digit in digits:
        if digit < MIN_DIGIT or digit > MAX_DIGIT:
            logger.warning("random.org number out of range: %d", digit)
            raise SecretUnavailable("Random number service returned a number out of range 0..7.")

    return digits
