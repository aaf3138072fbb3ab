from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError
from datetime import datetime
from typing import List, Optional
import logging
import uuid
from grove.courses.models import CourseStatus, CoursePublishRequest, ReviewOutcome

logger = logging.getLogger(__name__)

# ==================== ERRORS ====================

class CourseDataError(Exception):
    """The data layer could not be read; distinct from a quality failure"""

class CorpusFetchError(CourseDataError):
    pass

class ProfileFetchError(CourseDataError):
    pass

# ==================== HELPERS ====================

def serialize_mongo(doc: dict) -> dict:
    if "_id" in doc:
        doc["_id"] = str(doc["_id"])
    return doc

def serialize_many(docs: list[dict]) -> list[dict]:
    return [serialize_mongo(doc) for doc in docs]

# ==================== QUALITY GATE READS ====================

async def fetch_prior_courses(db: AsyncIOMotorDatabase, instructor_id: str) -> List[dict]:
    """
    Titles and descriptions of every course written by someone else

    Raises:
        CorpusFetchError: the courses collection could not be queried
    """
    try:
        cursor = db.courses.find(
            {"instructor_id": {"$ne": instructor_id}},
            {"_id": 0, "title": 1, "description": 1}
        )
        return await cursor.to_list(length=None)
    except PyMongoError as e:
        raise CorpusFetchError(f"Could not load course corpus: {e}") from e

async def fetch_instructor_profile(db: AsyncIOMotorDatabase, instructor_id: str) -> Optional[dict]:
    """
    Avatar and display name of an instructor, or None if no profile exists

    Raises:
        ProfileFetchError: the profiles collection could not be queried
    """
    try:
        return await db.profiles.find_one(
            {"user_id": instructor_id},
            {"_id": 0, "avatar_url": 1, "full_name": 1}
        )
    except PyMongoError as e:
        raise ProfileFetchError(f"Could not load instructor profile: {e}") from e

class CourseStore:
    """
    Read-only view handed to the quality gate.
    Binds a database so the gate never reaches for a global client.
    """

    def __init__(self, db: AsyncIOMotorDatabase):
        self.db = db

    async def fetch_prior_courses(self, instructor_id: str) -> List[dict]:
        return await fetch_prior_courses(self.db, instructor_id)

    async def fetch_instructor_profile(self, instructor_id: str) -> Optional[dict]:
        return await fetch_instructor_profile(self.db, instructor_id)

# ==================== COURSE CRUD ====================

async def create_course(
    db: AsyncIOMotorDatabase,
    payload: CoursePublishRequest,
    score: int,
    flags: List[str]
) -> dict:
    """
    Store a course that passed the quality gate.
    New courses always start in the admin review queue.
    """
    now = datetime.utcnow()

    course = {
        "course_id": f"COURSE_{uuid.uuid4().hex[:12].upper()}",
        "instructor_id": payload.instructor_id,
        "title": payload.title,
        "description": payload.subtitle + "\n" + payload.description,
        "price": payload.price,
        "category": payload.category,
        "level": payload.level,
        "status": CourseStatus.REVIEW.value,
        "thumbnail_url": payload.thumbnail_url,
        "video_url": payload.promo_video_url,
        "curriculum_data": [section.model_dump() for section in payload.curriculum],
        "objectives_data": payload.objectives,
        "admin_flags": flags,
        "quality_score": score,
        "created_at": now,
        "updated_at": now
    }

    await db.courses.insert_one(course)
    logger.info("Course %s stored for review (score=%s)", course["course_id"], score)
    return serialize_mongo(course)

async def get_course(db: AsyncIOMotorDatabase, course_id: str) -> Optional[dict]:
    """Get course by ID"""
    return await db.courses.find_one({"course_id": course_id})

# ==================== REVIEW QUEUE ====================

async def list_review_queue(db: AsyncIOMotorDatabase, skip: int = 0, limit: int = 20) -> List[dict]:
    """Courses waiting for an admin, newest first, with their instructor attached"""
    cursor = db.courses.find(
        {"status": CourseStatus.REVIEW.value}
    ).sort("created_at", -1).skip(skip).limit(limit)
    courses = await cursor.to_list(length=limit)

    instructor_ids = list({c.get("instructor_id") for c in courses if c.get("instructor_id")})
    profiles = {}
    if instructor_ids:
        cursor = db.profiles.find(
            {"user_id": {"$in": instructor_ids}},
            {"_id": 0, "user_id": 1, "full_name": 1, "email": 1}
        )
        for profile in await cursor.to_list(length=None):
            profiles[profile["user_id"]] = profile

    for course in courses:
        profile = profiles.get(course.get("instructor_id"), {})
        course["instructor"] = {
            "full_name": profile.get("full_name"),
            "email": profile.get("email")
        }

    return serialize_many(courses)

async def decide_review(db: AsyncIOMotorDatabase, course_id: str, decision: ReviewOutcome) -> bool:
    """
    Move a course out of the review queue.
    Returns False if the course is no longer waiting for review.
    """
    result = await db.courses.update_one(
        {"course_id": course_id, "status": CourseStatus.REVIEW.value},
        {"$set": {"status": decision.value, "updated_at": datetime.utcnow()}}
    )
    return result.modified_count > 0

# ==================== INDEXES ====================

async def create_course_indexes(db: AsyncIOMotorDatabase):
    """Create MongoDB indexes for the course collections"""
    await db.courses.create_index("course_id", unique=True)
    await db.courses.create_index("instructor_id")
    await db.courses.create_index([("status", 1), ("created_at", -1)])

    await db.profiles.create_index("user_id", unique=True)

    logger.info("Course indexes created")
