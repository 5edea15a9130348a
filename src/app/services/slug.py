import re

_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def generate_slug(name: str, fallback: str = "my-channel") -> str:
    """Lowercase, hyphen-separated slug; fallback when nothing survives"""
    slug = _NON_ALNUM.sub("-", name.strip().lower()).strip("-")
    return slug or fallback
