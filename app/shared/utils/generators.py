"""ID generators."""

from cuid2 import cuid_wrapper

_cuid = cuid_wrapper()


def generate_cuid() -> str:
    """Collision-resistant CUID2 used for every primary key and for client session ids."""
    return str(_cuid())
