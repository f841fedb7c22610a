"""
Candidate lookups used by admin operations.

Candidate / timeline CRUD belongs to the record store; only the reads and
the onboarding status flip needed here live in this module.
"""

from typing import Optional

from sqlalchemy.orm import Session

from ..models import Candidates

ONBOARDING = "Onboarding"


def get_candidate(db: Session, candidate_id: int) -> Optional[Candidates]:
    return db.get(Candidates, candidate_id)


def get_candidate_by_code(db: Session, code: str) -> Optional[Candidates]:
    return db.query(Candidates).filter(Candidates.code == code).one_or_none()


def mark_onboarding(db: Session, code: str) -> bool:
    """Set status=Onboarding. False if the code is unknown."""
    candidate = get_candidate_by_code(db, code)
    if candidate is None:
        return False
    candidate.status = ONBOARDING
    db.commit()
    return True
