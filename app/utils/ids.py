"""Record ids: epoch-millis plus a random base36 suffix, e.g. person_1718000000000_k3j9x0a1b."""

import secrets
import string
import time

_ALPHABET = string.digits + string.ascii_lowercase


def generate_id(prefix: str, suffix_len: int = 9) -> str:
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(suffix_len))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"
