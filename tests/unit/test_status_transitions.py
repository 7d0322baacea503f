import pytest

from wewinbid.modules.tenders.db.schema import TenderStatusEnum as S
from wewinbid.modules.tenders.services.status_transitions import allowed_targets, can_transition


@pytest.mark.parametrize("current,target", [
    (S.DRAFT, S.ANALYSIS),
    (S.REVIEW, S.SUBMITTED),
    (S.SUBMITTED, S.WON),
    (S.ABANDONED, S.DRAFT),
    (S.WON, S.WON),
])
def test_allowed(current, target):
    assert can_transition(current, target)


@pytest.mark.parametrize("current,target", [
    (S.DRAFT, S.SUBMITTED),
    (S.SUBMITTED, S.DRAFT),
    (S.WON, S.LOST),
    (S.LOST, S.DRAFT),
])
def test_rejected(current, target):
    assert not can_transition(current, target)


def test_allowed_targets_are_sorted():
    assert allowed_targets(S.SUBMITTED) == ["LOST", "WON"]
    assert allowed_targets(S.WON) == []
