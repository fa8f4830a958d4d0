import json
import re
from pathlib import Path
from typing import Any, List

WHITESPACE_RE = re.compile(r"\s+")


def to_lower(text: str) -> str:
    """Purpose: Lowercase user or catalog text for case-insensitive containment checks.
    Inputs/Outputs: Input is a raw string (or None); output is the lowercased string.
    Side Effects / State: None; pure function.
    Dependencies: None beyond str.lower; called by resolver and knowledge matching.
    Failure Modes: Returns an empty string when input is falsy.
    If Removed: Every matching step would need its own None/empty guard.
    Testing Notes: Validate None and mixed-case inputs.
    """
    # Treat missing text as empty so matching never sees None.
    if not text:
        return ""
    return text.lower()


def split_words(text: str) -> List[str]:
    """Purpose: Split text on runs of whitespace, dropping empty pieces.
    Inputs/Outputs: Input is a string; output is the list of words in order.
    Side Effects / State: None; pure function.
    Dependencies: Uses WHITESPACE_RE; called by the knowledge matcher.
    Failure Modes: Returns an empty list for blank input.
    If Removed: Knowledge-base questions cannot be broken into candidate words.
    Testing Notes: Check tabs, newlines, and leading/trailing spaces.
    """
    # Words keep their punctuation; only whitespace separates them.
    return [word for word in WHITESPACE_RE.split(text) if word]


def read_text(path: Path) -> str:
    """Purpose: Read a UTF-8 data file and strip a BOM if present.
    Inputs/Outputs: Input is a Path; output is the decoded string.
    Side Effects / State: Reads the filesystem.
    Dependencies: Uses Path.read_text/read_bytes; used by load_json.
    Failure Modes: UnicodeDecodeError triggers a fallback decode with errors ignored,
        which can drop invalid bytes. Missing files raise OSError.
    If Removed: Data files saved with a BOM by some editors fail to parse.
    Testing Notes: Validate BOM-stripping and fallback decoding on non-UTF8 files.
    """
    # Read as UTF-8 and fall back to a tolerant decode if needed.
    try:
        return path.read_text(encoding="utf-8").lstrip("\ufeff")
    except UnicodeDecodeError:
        raw = path.read_bytes()
        text = raw.decode("utf-8", errors="ignore")
        return text.lstrip("\ufeff")


def load_json(path: Path) -> Any:
    """Parse a JSON data file via read_text; JSONDecodeError propagates."""
    return json.loads(read_text(path))
