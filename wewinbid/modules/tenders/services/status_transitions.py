from wewinbid.modules.tenders.db.schema import TenderStatusEnum as S

ALLOWED_TRANSITIONS: dict[S, frozenset[S]] = {
    S.DRAFT: frozenset({S.ANALYSIS, S.IN_PROGRESS, S.ABANDONED}),
    S.ANALYSIS: frozenset({S.DRAFT, S.IN_PROGRESS, S.ABANDONED}),
    S.IN_PROGRESS: frozenset({S.ANALYSIS, S.REVIEW, S.ABANDONED}),
    S.REVIEW: frozenset({S.IN_PROGRESS, S.SUBMITTED, S.ABANDONED}),
    S.SUBMITTED: frozenset({S.WON, S.LOST}),
    S.WON: frozenset(),
    S.LOST: frozenset(),
    S.ABANDONED: frozenset({S.DRAFT}),
}


def can_transition(current: S, target: S) -> bool:
    if current == target:
        return True
    return target in ALLOWED_TRANSITIONS[current]


def allowed_targets(current: S) -> list[str]:
    return sorted(status.value for status in ALLOWED_TRANSITIONS[current])
