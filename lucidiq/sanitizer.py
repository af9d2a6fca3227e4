# lucidiq/sanitizer.py
import re

DEFAULT_MAX_LENGTH = 200

# whitespace and line terminators removed by JavaScript's String.prototype.trim
TRIM_CHARS = (
    "\t\n\v\f\r \u00a0\u1680\u2000\u2001\u2002\u2003\u2004\u2005\u2006"
    "\u2007\u2008\u2009\u200a\u2028\u2029\u202f\u205f\u3000\ufeff"
)

# --- filters (applied in this order after truncation) ----------------------
UNSAFE_CHARS = re.compile(r"[<>{}\[\]`]")
INJECTION_WORDS = re.compile(
    r"\b(ignore|forget|disregard|override|instead|pretend|imagine|roleplay|jailbreak)\b",
    re.IGNORECASE | re.ASCII,
)


def sanitize_input(value, max_length: int = DEFAULT_MAX_LENGTH) -> str:
    """
    Clean free text before it is embedded in a prompt.

    Anything that is not a non-empty string becomes "". The text is cut to
    `max_length` first, then unsafe characters and denylisted words are
    removed, then surrounding whitespace is stripped. Inner whitespace left
    behind by a removed word is kept as is.
    """
    if not value or not isinstance(value, str):
        return ""
    text = value[:max(max_length, 0)]
    text = UNSAFE_CHARS.sub("", text)
    text = INJECTION_WORDS.sub("", text)
    return text.strip(TRIM_CHARS)
