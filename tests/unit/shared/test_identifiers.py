from uuid import UUID, uuid4

import pytest

from shared.domain.error import CommonErrors
from shared.domain.exceptions import InvariantViolation
from shared.domain.identifiers import UserId
from tracking.domain.value_objects import EventId

NIL = UUID(int=0)


def test_nil_uuid_is_rejected():
    assert UserId.create(NIL).error == CommonErrors.EMPTY_IDENTIFIER
    with pytest.raises(InvariantViolation):
        UserId(NIL)


def test_from_string():
    raw = uuid4()
    assert UserId.from_string(str(raw)).value == UserId(raw)
    assert UserId.from_string("not-a-uuid").error == CommonErrors.EMPTY_IDENTIFIER


def test_identifiers_of_different_types_never_compare_equal():
    raw = uuid4()
    assert UserId(raw) == UserId(raw)
    assert UserId(raw) != EventId(raw)
    assert str(UserId(raw)) == str(raw)
