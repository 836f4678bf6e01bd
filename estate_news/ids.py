from __future__ import annotations

import struct

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(n: int) -> str:
    if n == 0:
        return "0"
    out = []
    while n:
        n, r = divmod(n, 36)
        out.append(_DIGITS[r])
    return "".join(reversed(out))


def generate_item_id(url: str) -> str:
    """
    Stable, non-cryptographic id for a link.

    A signed 32-bit rolling hash (h * 31 + unit) over the UTF-16 code units of
    the URL, made positive and written in base 36. Ids already handed out to
    the publishing side depend on this exact arithmetic.
    """
    data = (url or "").encode("utf-16-le")
    h = 0
    for (unit,) in struct.iter_unpack("<H", data):
        h = ((h << 5) - h + unit) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return _to_base36(abs(h))
