"""
Protocol-wide constants for the e-cash scheme.

``COIN_RIS_LENGTH`` fixes how many identity positions every coin carries.
A purchaser who spends a coin twice escapes detection only if both
merchants pick the same side at every position, i.e. with probability
``2^-COIN_RIS_LENGTH``.
"""

# ── RIS layout ──────────────────────────────────────────────────────────
COIN_RIS_LENGTH = 20
SHARE_BYTES = 64            # fixed length of every left/right share

# ── identity encoding ───────────────────────────────────────────────────
IDENT_STR = "IDENT"
IDENT_DELIMITER = ":"

# ── canonical coin string ───────────────────────────────────────────────
BANK_STR = "ELECTRONIC_PIGGYBANK"
FIELD_DELIMITER = "-"
HASH_DELIMITER = ","

# ── bank key ────────────────────────────────────────────────────────────
DEFAULT_KEY_BITS = 2048
MIN_KEY_BITS = 1024         # pycryptodome refuses anything smaller
DEFAULT_PUBLIC_EXPONENT = 65537

# ── cheater determination ───────────────────────────────────────────────
MERCHANT_VERDICT = "merchant"
