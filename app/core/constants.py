"""Core constants: cache key prefixes and shared literal values."""

# Cache key prefixes
CACHE_PREFIX_PERMISSION = "permission"
CACHE_PREFIX_ROLE = "role"
CACHE_PREFIX_TENANT = "tenant"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Stored in place of a tenant lookup that found nothing (short negative cache).
TENANT_CACHE_MISS_MARKER = "__missing__"
TENANT_VALIDATION_CACHE_TTL = 60
