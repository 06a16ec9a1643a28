"""Human-readable participant list stored alongside a project."""

from typing import Iterable, Optional, Protocol

EXTERNAL_SEPARATOR = "--- Externes ---"


class MemberLike(Protocol):
    first_name: Optional[str]
    last_name: Optional[str]
    email: str


def format_member(member: MemberLike) -> str:
    name = " ".join(p for p in (member.first_name, member.last_name) if p)
    return f"{name} ({member.email})" if name else member.email


def format_participants(members: Iterable[MemberLike], external: Optional[str]) -> str:
    """Internal members one per line, then the external text after a separator.

    >>> format_participants([], "Dr. Smith")
    'Dr. Smith'
    """
    text = "".join(f"{format_member(m)}\n" for m in members)

    if external and external.strip():
        if text:
            text += f"\n{EXTERNAL_SEPARATOR}\n"
        text += external

    return text.strip()
