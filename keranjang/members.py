"""
Member login: resolve a name fragment + last four phone digits against the
parsed directory, and keep the logged-in member for the session.
"""
import logging
from typing import Optional, Sequence

from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError
from .models import Member
from .storage import MEMBER_SESSION_KEY, KeyValueStore, delete_key, get_store, load_json, save_json
from .utils import digits_only

logger = logging.getLogger(__name__)

MIN_NAME_QUERY_LENGTH = 3
PHONE_TAIL_LENGTH = 4


def validate_login_query(name_query: str, phone_tail: str) -> tuple[str, str]:
    """
    Check the login form before any network call.
    Returns the cleaned (name, tail) pair.
    """
    name = (name_query or "").strip()
    tail = digits_only(phone_tail)
    if len(name) < MIN_NAME_QUERY_LENGTH:
        raise ValidationError(f"Name must be at least {MIN_NAME_QUERY_LENGTH} characters")
    if len(tail) != PHONE_TAIL_LENGTH:
        raise ValidationError(f"Enter exactly the last {PHONE_TAIL_LENGTH} digits of the phone number")
    return name, tail


class MemberMatcher:
    """
    Two-field matching: the query must be contained in the member name
    (case-insensitive) and the member phone must end with the 4-digit tail.
    """

    def __init__(self, members: Sequence[Member]):
        self.members = list(members)

    def find_by_query(self, name_query: str, phone_tail: str) -> Optional[Member]:
        name, tail = validate_login_query(name_query, phone_tail)
        needle = name.casefold()
        for member in self.members:
            if needle in member.name.casefold() and member.phone.endswith(tail):
                return member
        return None


class MemberSession:
    """Logged-in member persisted under one key until logout."""

    def __init__(self, store: Optional[KeyValueStore] = None):
        self.store = store if store is not None else get_store()

    def load(self) -> Optional[Member]:
        data = load_json(self.store, MEMBER_SESSION_KEY, None)
        if data is None:
            return None
        try:
            return Member.model_validate(data)
        except PydanticValidationError as e:
            logger.warning(f"Stored member session is corrupt, ignoring: {e}")
            return None

    def save(self, member: Member) -> None:
        save_json(self.store, MEMBER_SESSION_KEY, member.model_dump(mode="json"))

    def clear(self) -> None:
        delete_key(self.store, MEMBER_SESSION_KEY)
