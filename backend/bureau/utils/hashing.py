"""
Hashing helpers for the audit trail.
Payloads are hashed as canonical JSON so equal dicts always hash equally.
"""
import hashlib
import json


def generate_hash(data: dict) -> str:
    """SHA-256 of ``data`` serialised with sorted keys."""
    canonical = json.dumps(data, sort_keys=True, default=str).encode("utf-8")
    return hashlib.sha256(canonical).hexdigest()


def generate_chain_hash(current_data: dict, previous_hash: str = "") -> str:
    """SHA-256(previous_hash + hash(current_data)).

    Linking each entry to its predecessor makes a removed or edited entry
    visible when the chain is walked.
    """
    link = f"{previous_hash}{generate_hash(current_data)}".encode("utf-8")
    return hashlib.sha256(link).hexdigest()
