from fastapi import APIRouter, HTTPException, Depends
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorDatabase
import logging
from grove.courses.models import CoursePublishRequest, ReviewDecision
from grove.courses.database import (
    CourseDataError, create_course, get_course, list_review_queue, decide_review
)
from grove.courses.dependencies import get_db, get_quality_gate
from grove.quality.gate import QualityGate

router = APIRouter(tags=["Course Management"])
logger = logging.getLogger(__name__)

# ==================== PUBLISH ====================

@router.post("/courses", status_code=201)
async def publish_course_endpoint(
    payload: CoursePublishRequest,
    db: AsyncIOMotorDatabase = Depends(get_db),
    gate: QualityGate = Depends(get_quality_gate)
):
    """
    Publish a new course

    The submission runs through the automated quality gate first.
    Rejected submissions are not stored; accepted ones land in the
    admin review queue with their score and flags.
    """
    try:
        verdict = await gate.evaluate(payload, payload.instructor_id)
    except CourseDataError as e:
        logger.error("Quality gate unavailable for %s: %s", payload.instructor_id, e)
        return JSONResponse(
            status_code=503,
            content={"error": "Quality check unavailable", "details": str(e)}
        )

    if not verdict.is_valid:
        return JSONResponse(
            status_code=400,
            content={"error": "Automated Quality Check Failed", "details": verdict.flags}
        )

    try:
        course = await create_course(db, payload, verdict.score, verdict.flags)
    except Exception as e:
        logger.exception("Database error while storing course")
        raise HTTPException(status_code=500, detail=str(e))

    return {"message": "Course created successfully", "course": course}

# ==================== ADMIN REVIEW QUEUE ====================

@router.get("/courses/review")
async def review_queue_endpoint(
    skip: int = 0,
    limit: int = 20,
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """Courses waiting for an admin decision"""
    courses = await list_review_queue(db, skip, limit)
    return {
        "courses": courses,
        "count": len(courses),
        "skip": skip,
        "limit": limit
    }

@router.post("/courses/{course_id}/review")
async def review_decision_endpoint(
    course_id: str,
    payload: ReviewDecision,
    db: AsyncIOMotorDatabase = Depends(get_db)
):
    """Approve (Active) or send back (Draft) a course in review"""
    course = await get_course(db, course_id)
    if not course:
        raise HTTPException(status_code=404, detail="Course not found")

    if not await decide_review(db, course_id, payload.decision):
        raise HTTPException(status_code=409, detail="Course is not waiting for review")

    logger.info("Course %s marked as %s", course_id, payload.decision.value)
    return {
        "success": True,
        "course_id": course_id,
        "status": payload.decision.value,
        "message": f"Course marked as {payload.decision.value}"
    }
