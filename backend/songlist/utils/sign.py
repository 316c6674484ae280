"""
Request signing for the QQ Music ``musics.fcg`` endpoint.

The endpoint rejects unsigned bodies. The signature is derived from the SHA-1
of the exact JSON string that is POSTed, so callers must sign the same string
they send.
"""

import base64
import hashlib
import re

PART_1_INDEXES = [23, 14, 6, 36, 16, 40, 7, 19]
PART_2_INDEXES = [16, 1, 32, 12, 19, 27, 8, 5]
SCRAMBLE_VALUES = [
    89, 39, 179, 150, 218, 82, 58, 252, 177, 52,
    186, 123, 120, 64, 242, 133, 143, 161, 121, 179,
]

_STRIP_PATTERN = re.compile(r"[\\/+=]")


def sign(serialized: str) -> str:
    """
    Compute the ``sign`` query parameter for a serialized request body.

    Args:
        serialized: JSON request body exactly as it will be sent

    Returns:
        str: Lowercase signature starting with ``zzc``
    """
    digest = hashlib.sha1(serialized.encode("utf-8")).hexdigest().upper()

    # sha1 hex is 40 chars, index 40 is dropped
    part1 = "".join(digest[i] for i in PART_1_INDEXES if i < len(digest))
    part2 = "".join(digest[i] for i in PART_2_INDEXES)

    scrambled = bytearray(len(SCRAMBLE_VALUES))
    for i, value in enumerate(SCRAMBLE_VALUES):
        scrambled[i] = value ^ int(digest[i * 2:i * 2 + 2], 16)
    part3 = _STRIP_PATTERN.sub("", base64.b64encode(bytes(scrambled)).decode("ascii"))

    return f"zzc{part1}{part3}{part2}".lower()
