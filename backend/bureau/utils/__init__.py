from bureau.utils.hashing import generate_hash, generate_chain_hash
from bureau.utils.validators import normalize_utr, validate_utr, validate_upi_vpa, age_from_dob, sanitize_name

__all__ = [
    "generate_hash", "generate_chain_hash",
    "normalize_utr", "validate_utr", "validate_upi_vpa", "age_from_dob", "sanitize_name",
]
