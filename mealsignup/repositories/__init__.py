# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Repository package: re-exports the three store repositories."""
from mealsignup.repositories.commitment_repository import CommitmentRepository
from mealsignup.repositories.member_repository import MemberRepository
from mealsignup.repositories.team_repository import TeamRepository

__all__ = ["CommitmentRepository", "MemberRepository", "TeamRepository"]
