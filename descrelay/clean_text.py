import re
from typing import Optional

# Non-breaking space and zero-width characters become plain spaces
INVISIBLE_RE = re.compile(r"[\u00a0\u200b-\u200d\ufeff]")
NEWLINE_RE = re.compile(r"\r\n|\r")
# URLs never contain whitespace: drop the whole run starting at the scheme
URL_RE = re.compile(r"https?://\S*", re.I)
WS_RE = re.compile(r"\s+")
MULTI_NL_RE = re.compile(r"\n{2,}")


def clean_line(line: str) -> str:
    line = URL_RE.sub(" ", line)
    return WS_RE.sub(" ", line).strip()


def normalize(raw: Optional[str]) -> Optional[str]:
    """
    Clean a raw description into a deterministic string, or None when
    nothing usable is left.

    Whitespace is collapsed within each line only, so paragraph breaks
    survive; lines holding nothing but links disappear.
    """
    if raw is None:
        return None
    t = INVISIBLE_RE.sub(" ", raw)
    t = NEWLINE_RE.sub("\n", t).strip()
    lines = [clean_line(line) for line in t.split("\n")]
    t = "\n".join(line for line in lines if line)
    t = MULTI_NL_RE.sub("\n", t).strip()
    return t or None
