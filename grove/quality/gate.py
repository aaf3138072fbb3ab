"""
Course Submission Quality Gate
Decides whether a freshly authored course goes to human review or is rejected

Five additive rules, each worth 20 points:
1. Curriculum depth   - at least 2 sections
2. Lecture count      - at least 5 lectures in total
3. Visual assets      - thumbnail AND promo video
4. Originality        - title not copied from another instructor (-50 if it is)
5. Instructor trust   - profile has avatar AND full name

A submission passes with 60 points or more.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from grove.config import QUALITY_PASS_THRESHOLD, DUPLICATE_SIMILARITY_THRESHOLD
from grove.courses.models import CourseSubmission
from grove.quality.similarity import find_best_match

logger = logging.getLogger(__name__)

FLAG_TOO_SHORT = "Course too short (needs 2+ sections)"
FLAG_FEW_LECTURES = "Not enough lectures (needs 5+)"
FLAG_MISSING_ASSETS = "Missing visual assets"
FLAG_PROFILE_INCOMPLETE = "Instructor profile incomplete"


def duplicate_flag(matched_title: str) -> str:
    return f'Potential Duplicate: Similar to "{matched_title}"'


@dataclass
class VerificationResult:
    """Verdict of one quality gate pass"""
    is_valid: bool
    score: int
    flags: List[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"isValid": self.is_valid, "score": self.score, "flags": list(self.flags)}


class QualityGate:
    """
    Scores course submissions against the marketplace quality rules.

    The store is any object exposing two coroutines:
        fetch_prior_courses(instructor_id) -> list of {"title", "description"}
        fetch_instructor_profile(instructor_id) -> {"avatar_url", "full_name"} or None

    Data-access errors raised by the store are not caught here.
    """

    MIN_SECTIONS = 2
    MIN_LECTURES = 5

    RULE_POINTS = 20
    DUPLICATE_PENALTY = 50

    def __init__(
        self,
        store,
        pass_threshold: int = QUALITY_PASS_THRESHOLD,
        similarity_threshold: float = DUPLICATE_SIMILARITY_THRESHOLD
    ):
        self.store = store
        self.pass_threshold = pass_threshold
        self.similarity_threshold = similarity_threshold

    async def evaluate(self, submission: CourseSubmission, instructor_id: str) -> VerificationResult:
        """
        Run every rule against a submission

        Args:
            submission: Course content as authored
            instructor_id: Author of the submission; their own courses are
                never treated as duplicates

        Returns:
            VerificationResult with score, verdict and flags in rule order

        Raises:
            CourseDataError: the corpus or profile could not be read
        """
        # Neither read depends on the other
        prior_courses, profile = await asyncio.gather(
            self.store.fetch_prior_courses(instructor_id),
            self.store.fetch_instructor_profile(instructor_id)
        )

        score = 0
        flags: List[str] = []

        # 1. Curriculum depth
        if len(submission.curriculum) >= self.MIN_SECTIONS:
            score += self.RULE_POINTS
        else:
            flags.append(FLAG_TOO_SHORT)

        # 2. Lecture count
        if submission.lecture_count >= self.MIN_LECTURES:
            score += self.RULE_POINTS
        else:
            flags.append(FLAG_FEW_LECTURES)

        # 3. Visual assets, no partial credit
        if submission.thumbnail_url and submission.promo_video_url:
            score += self.RULE_POINTS
        else:
            flags.append(FLAG_MISSING_ASSETS)

        # 4. Originality
        score += self._score_originality(submission.title, prior_courses, flags)

        # 5. Instructor trust
        if self._profile_complete(profile):
            score += self.RULE_POINTS
        else:
            flags.append(FLAG_PROFILE_INCOMPLETE)

        result = VerificationResult(
            is_valid=score >= self.pass_threshold,
            score=score,
            flags=flags
        )

        logger.info(
            "Quality gate for instructor %s: score=%s valid=%s flags=%d",
            instructor_id, result.score, result.is_valid, len(result.flags)
        )
        return result

    def _score_originality(self, title: str, prior_courses: Optional[List[dict]], flags: List[str]) -> int:
        """Points from the duplicate check; 0 when nobody else has published yet"""
        titles = [
            course.get("title") for course in (prior_courses or [])
            if isinstance(course.get("title"), str)
        ]
        if not titles:
            return 0

        match = find_best_match(title, titles)

        if match.rating > self.similarity_threshold:
            logger.warning(
                "Possible duplicate title %r (rating %.2f against %r)",
                title, match.rating, match.target
            )
            flags.append(duplicate_flag(match.target))
            return -self.DUPLICATE_PENALTY

        return self.RULE_POINTS

    @staticmethod
    def _profile_complete(profile: Optional[dict]) -> bool:
        if not profile:
            return False
        return bool(profile.get("avatar_url")) and bool(profile.get("full_name"))
