"""Core constants: audited entity names and shared literal values.

Entity names are the keys of AUDIT_CONFIG and the values stored in
audit_log.entity; repositories and services refer to them from here.
"""

# Audited entity names (registry keys)
AUDIT_ENTITY_BOOK = "Book"
AUDIT_ENTITY_USER = "User"
