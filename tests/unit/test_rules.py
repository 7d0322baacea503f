from datetime import datetime

import pytest

from wewinbid.core.helpers import days_until, percentage, round_half_up, to_base36
from wewinbid.modules.approvals.db.schema import ApprovalTypeEnum, ApprovalWorkflowStep
from wewinbid.modules.approvals.services.approval_service import required_approvals
from wewinbid.modules.documents.services.generation_service import split_sections
from wewinbid.modules.notifications.db.schema import NotificationTypeEnum
from wewinbid.modules.notifications.services.deadline_service import deadline_threshold
from wewinbid.modules.search.services.search_service import split_list


@pytest.mark.parametrize("approval_type,threshold,eligible,expected", [
    (ApprovalTypeEnum.single, None, 4, 1),
    (ApprovalTypeEnum.all, None, 3, 3),
    (ApprovalTypeEnum.all, None, 0, 1),
    (ApprovalTypeEnum.majority, None, 4, 3),
    (ApprovalTypeEnum.majority, None, 5, 3),
    (ApprovalTypeEnum.threshold, 2, 5, 2),
])
def test_required_approvals(approval_type, threshold, eligible, expected):
    step = ApprovalWorkflowStep(name="Validation", step_order=1, approval_type=approval_type, threshold_count=threshold)
    assert required_approvals(step, eligible) == expected


@pytest.mark.parametrize("days_left,expected", [
    (0, NotificationTypeEnum.DEADLINE_24H),
    (1, NotificationTypeEnum.DEADLINE_24H),
    (2, NotificationTypeEnum.DEADLINE_3D),
    (3, NotificationTypeEnum.DEADLINE_3D),
    (7, NotificationTypeEnum.DEADLINE_7D),
    (8, None),
])
def test_deadline_threshold(days_left, expected):
    assert deadline_threshold(days_left)[0] == expected


def test_split_sections():
    content = "## Introduction\nNous répondons.\n\n## Moyens humains\nDix agents.\n"
    sections = split_sections(content)
    assert [s["id"] for s in sections] == ["introduction", "moyens-humains"]
    assert sections[1]["content"] == "Dix agents."
    assert sections[1]["order"] == 2


def test_split_sections_without_headings():
    assert split_sections("Texte libre") == [
        {"id": "section-1", "title": "Document", "content": "Texte libre", "order": 1}
    ]


def test_split_list():
    assert split_list(" FR, BE ,,") == ["FR", "BE"]
    assert split_list(None) == []


def test_helpers():
    assert to_base36(0) == "0"
    assert to_base36(35) == "Z"
    assert to_base36(36) == "10"
    assert round_half_up(2.5) == 3
    assert round_half_up(1.25, 1) == 1.3
    assert percentage(1, 3) == 33.3
    assert percentage(5, 0) == 0
    assert days_until(datetime(2026, 1, 3, 0, 0, 1), now=datetime(2026, 1, 1)) == 3
