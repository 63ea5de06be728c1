import codecs
import os
from typing import Iterable, Tuple

# longest marks first so utf-32-le is not mistaken for utf-16-le.
_BOM_ENCODINGS: Tuple[Tuple[bytes, str], ...] = (
    (codecs.BOM_UTF32_LE, "utf-32-le"),
    (codecs.BOM_UTF32_BE, "utf-32-be"),
    (codecs.BOM_UTF8, "utf-8"),
    (codecs.BOM_UTF16_LE, "utf-16-le"),
    (codecs.BOM_UTF16_BE, "utf-16-be"),
)

def normalize_separators(path_text: str) -> str:
    # converts any platform separator to '/'. applying it twice changes nothing.
    normalized = path_text.replace("\\", "/")
    if os.sep != "/":
        normalized = normalized.replace(os.sep, "/")
    return normalized

def detect_bom(head: bytes) -> Tuple[str, int]:
    # returns (encoding, bom length) for the leading bytes of a file; utf-8 when no mark is present.
    for bom, encoding in _BOM_ENCODINGS:
        if head.startswith(bom):
            return encoding, len(bom)
    return "utf-8", 0

def longest_backtick_run(lines: Iterable[str]) -> int:
    longest = 0
    for line in lines:
        run = 0
        for ch in line:
            run = run + 1 if ch == "`" else 0
            longest = max(longest, run)
    return longest

def code_fence_for(lines: Iterable[str]) -> str:
    # a fence that cannot be closed early by the content it wraps.
    return "`" * max(3, longest_backtick_run(lines) + 1)
