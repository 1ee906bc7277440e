"""
Response Parser - Pulls structure out of free-form LLM text.

The format is a convention the prompts ask for, not a grammar the model is
bound to. Every field is best effort: anything not found comes back empty
(or ``None`` for code changes).
"""

import re
from typing import Optional

from review_assistant.models.schemas import AnalysisResult, CodeChange


SECTION_LABELS = {
    "overview": "OVERVIEW:",
    "analysis": "ANALYSIS:",
    "changes": "CHANGES:",
    "risks": "RISKS:",
}

CODE_START = "CODE_START"
CODE_END = "CODE_END"

# A new segment begins at a line that starts with "word:"
_SECTION_BREAK = re.compile(r"\n(?=\w+:)")
_CODE_BLOCK = re.compile(rf"{CODE_START}\n(.*?)\n{CODE_END}", re.DOTALL)


def parse_analysis(raw_text: str) -> AnalysisResult:
    """
    Split a review response into its four labelled sections.

    Example:
        >>> parse_analysis("OVERVIEW: A\\nRISKS: D").risks
        'D'
    """
    segments = _SECTION_BREAK.split(raw_text or "")
    sections = {}
    for field_name, label in SECTION_LABELS.items():
        sections[field_name] = ""
        for segment in segments:
            if segment.startswith(label):
                sections[field_name] = segment[len(label):].strip()
                break
    return AnalysisResult(**sections)


def extract_code_change(raw_text: str) -> Optional[CodeChange]:
    """
    Find a proposed edit between CODE_START and CODE_END.

    The description is everything before the first CODE_START marker.
    Returns None when the markers are missing.
    """
    if not raw_text:
        return None
    match = _CODE_BLOCK.search(raw_text)
    if match is None:
        return None
    description = raw_text.split(CODE_START, 1)[0].strip()
    return CodeChange(content=match.group(1), description=description)
