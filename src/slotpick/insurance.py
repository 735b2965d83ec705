"""
Insurance tag parsing and loose client matching.
"""

from __future__ import annotations

from typing import List, Optional


def parse_insurances(text: Optional[str]) -> List[str]:
    if not text:
        return []
    return [ins.strip() for ins in text.split(",") if ins.strip()]


def matches_client_insurance(slot_insurance: Optional[str], client_insurance: Optional[str]) -> bool:
    """
    Substring match over the whole slot string, so "Blue Cross" matches
    "Blue Cross Blue Shield PPO". Exact matching would drop those.
    """
    if not client_insurance:
        return False
    return client_insurance.lower() in (slot_insurance or "").lower()
