import re

_INVISIBLE_CHARS = re.compile(r"[\u200b\u200c\u200d\u00ad\u2060\ufeff]")
_GLYPH_BULLET = re.compile(r"^[●•◦◆■▪★○▸►]\s*")
_ASCII_BULLET = re.compile(r"^[-*+]\s+")
_HEADING = re.compile(r"^(#{1,6})\s*(.*?)(?:\s+#+)?$")
_INLINE_SPACES = re.compile(r"[ \t\u00a0]{2,}")
_BLANK_RUNS = re.compile(r"\n{3,}")


def normalize_markdown(text: str) -> str:
    """Normalize extracted text into markdown-like form.

    Handles:
    - unicode artifacts (BOM, zero-width spaces, soft hyphens)
    - bullet glyphs and ``*``/``+`` bullets, rewritten as ``- ``
    - heading spacing (``##Title`` becomes ``## Title``)
    - repeated spaces and tabs, trailing whitespace
    - blank line runs, at most one blank line between blocks

    Deterministic and idempotent.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _INVISIBLE_CHARS.sub("", text)

    cleaned_lines = []
    for line in text.split("\n"):
        stripped = _INLINE_SPACES.sub(" ", line.replace("\t", " ").strip())
        if not stripped:
            cleaned_lines.append("")
            continue
        heading = _HEADING.match(stripped)
        if heading:
            title = heading.group(2).strip()
            stripped = f"{heading.group(1)} {title}" if title else ""
        elif _GLYPH_BULLET.match(stripped):
            stripped = "- " + _GLYPH_BULLET.sub("", stripped, count=1)
        elif _ASCII_BULLET.match(stripped):
            stripped = "- " + _ASCII_BULLET.sub("", stripped, count=1)
        cleaned_lines.append(stripped)

    text = "\n".join(cleaned_lines)
    text = _BLANK_RUNS.sub("\n\n", text)
    return text.strip()
