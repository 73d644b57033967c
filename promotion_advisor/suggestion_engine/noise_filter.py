from __future__ import annotations
import re

MAX_VALUE_LENGTH = 100

UUID_PATTERN = re.compile(r"[\da-f]{8}(?:-[\da-f]{4}){3}-[\da-f]{12}", re.IGNORECASE | re.ASCII)
ISO_TIMESTAMP_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}", re.ASCII)

def levenshtein_distance(s: str, t: str) -> int:
    """Standard Levenshtein distance between two strings."""
    m, n = len(s), len(t)
    if m == 0:
        return n
    if n == 0:
        return m

    prev = list(range(n + 1))
    curr = [0] * (n + 1)
    for i in range(1, m + 1):
        curr[0] = i
        for j in range(1, n + 1):
            cost = 0 if s[i - 1] == t[j - 1] else 1
            curr[j] = min(prev[j] + 1, curr[j - 1] + 1, prev[j - 1] + cost)
        prev, curr = curr, prev
    return prev[n]

def is_uuid(value: str) -> bool:
    return bool(UUID_PATTERN.fullmatch(value))

def is_iso_timestamp(value: str) -> bool:
    return bool(ISO_TIMESTAMP_PATTERN.match(value))

def should_ignore_value(old_value: str, target_value: str) -> bool:
    """
    True when a value pair is unlikely to carry a reusable rename: oversized
    blobs, UUIDs, ISO timestamps, or typo-level edits (length and edit
    distance both within one).
    """
    if len(old_value) > MAX_VALUE_LENGTH or len(target_value) > MAX_VALUE_LENGTH:
        return True
    if is_uuid(old_value) or is_uuid(target_value):
        return True
    if is_iso_timestamp(old_value) or is_iso_timestamp(target_value):
        return True
    if abs(len(old_value) - len(target_value)) <= 1:
        if levenshtein_distance(old_value, target_value) <= 1:
            return True
    return False
