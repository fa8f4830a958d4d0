"""Region validation and repair for people-search API requests.

A user may paste a ``screener/person/search`` request carrying a ``region=``
clause. The value must exactly match a catalog label; when it does not, the
response explains the problem, applies a known auto-fix when one exists (or
falls back to "United States"), and echoes a corrected request.
"""

from __future__ import annotations

import logging
import re
from typing import Optional, Sequence

logger = logging.getLogger("crustbot.regions")

SEARCH_ENDPOINT_MARKER = "screener/person/search"
REGION_CLAUSE_MARKER = "region="
REGION_RE = re.compile(r"region\s*=\s*(.*)", re.IGNORECASE)

DEFAULT_REGION = "United States"
SAN_FRANCISCO_REGION = "San Francisco, California, United States"
SAN_FRANCISCO_HINT = "san fran"

REQUEST_TEMPLATE = """curl --location 'https://api.crustdata.com/screener/person/search' \\
--header 'Content-Type: application/json' \\
--header 'Authorization: Token $YOUR_TOKEN' \\
--data '{
  "filters": [
    {
      "filter_type": "CURRENT_COMPANY",
      "type": "in",
      "value": ["openai.com"]
    },
    {
      "filter_type": "CURRENT_TITLE",
      "type": "in",
      "value": ["engineer"]
    },
    {
      "filter_type": "REGION",
      "type": "in",
      "value": ["<<REGION>>"]
    }
  ],
  "page": 1
}'"""


def is_region_request(lower: str) -> bool:
    """Return True when lowercased text targets person search with a region clause."""
    return SEARCH_ENDPOINT_MARKER in lower and REGION_CLAUSE_MARKER in lower


def extract_region(question: str) -> Optional[str]:
    """Purpose: Pull the region value out of a request-style question.
    Inputs/Outputs: Input is the original-case question; output is the trimmed value
        (case preserved) or None when no clause is found.
    Side Effects / State: None; pure function.
    Dependencies: Uses REGION_RE; called by handle_region_request.
    Failure Modes: Returns None on no match; the capture may be an empty string.
    If Removed: Region requests can no longer be validated.
    Testing Notes: Check spacing around "=", mixed case, and trailing whitespace.
    """
    # Capture everything after the first region clause on its line.
    match = REGION_RE.search(question)
    if not match:
        return None
    return match.group(1).strip()


def build_valid_request(region: str) -> str:
    """Render the fixed people-search request with the given REGION value."""
    return REQUEST_TEMPLATE.replace("<<REGION>>", region)


def attempt_fix(region_raw: str, catalog: Sequence[str]) -> Optional[str]:
    """Purpose: Map a known informal region spelling onto a catalog label.
    Inputs/Outputs: Inputs are the raw value and the catalog; output is the fixed
        label or None when no rule applies.
    Side Effects / State: None; pure function.
    Dependencies: Uses SAN_FRANCISCO_HINT/SAN_FRANCISCO_REGION.
    Failure Modes: Returns None if the target label is absent from the catalog.
    If Removed: Every invalid region falls back to DEFAULT_REGION.
    Testing Notes: "san fran", "SAN FRANCISCO" and a catalog without the label.
    """
    # Only San Francisco variants are repaired today.
    if SAN_FRANCISCO_HINT in region_raw.lower() and SAN_FRANCISCO_REGION in catalog:
        return SAN_FRANCISCO_REGION
    return None


def build_region_diagnostic(region_raw: str, catalog: Sequence[str]) -> str:
    """Purpose: Explain an invalid region and echo a corrected request.
    Inputs/Outputs: Inputs are the rejected value and the catalog; output is the
        multi-line diagnostic ending with the corrected request.
    Side Effects / State: Emits an info log naming the chosen correction.
    Dependencies: Uses attempt_fix and build_valid_request.
    Failure Modes: None; an empty catalog yields an empty "Valid:" list.
    If Removed: Invalid regions would surface no explanation to the user.
    Testing Notes: Verify both the auto-fix and the fallback wording.
    """
    # Pick the fix (or the default) and report it ahead of the corrected request.
    fixed = attempt_fix(region_raw, catalog)
    final_region = fixed or DEFAULT_REGION
    logger.info("invalid region=%r fixed=%r", region_raw, fixed)
    error_log = f'Error: Region "{region_raw}" not found. Valid: {", ".join(catalog)}'
    if fixed:
        outcome = f'Auto-fixed => "{fixed}"'
    else:
        outcome = f'Falling back => "{DEFAULT_REGION}"'
    return "\n".join(
        [
            f'Invalid region "{region_raw}".',
            error_log,
            outcome,
            "Corrected request:",
            build_valid_request(final_region),
        ]
    )


def handle_region_request(question: str, catalog: Sequence[str]) -> Optional[str]:
    """Purpose: Answer a people-search request that carries a region clause.
    Inputs/Outputs: Inputs are the original-case question and the catalog; output is
        the request or diagnostic text, or None when the question does not apply.
    Side Effects / State: None beyond logging.
    Dependencies: Uses is_region_request, extract_region, build_region_diagnostic.
    Failure Modes: Returns None when no region value can be captured.
    If Removed: Request validation never runs and such questions hit the KB/static steps.
    Testing Notes: Valid label, invalid label, San Francisco variant, no capture.
    """
    # Containment is checked on lowercased text; the captured value keeps its case.
    if not is_region_request(question.lower()):
        return None
    region_raw = extract_region(question)
    if region_raw is None:
        return None
    if region_raw in catalog:
        return build_valid_request(region_raw)
    return build_region_diagnostic(region_raw, catalog)
