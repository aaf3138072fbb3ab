from fastapi import Depends
from motor.motor_asyncio import AsyncIOMotorDatabase, AsyncIOMotorGridFSBucket
from grove.config import UPLOAD_BUCKET
from grove.courses.database import CourseStore
from grove.quality.gate import QualityGate

def get_db_instance():
    """Get database from main module"""
    from grove.main import db
    return db

# ==================== DEPENDENCY FUNCTIONS ====================

async def get_db() -> AsyncIOMotorDatabase:
    """Database dependency"""
    return get_db_instance()

async def get_quality_gate(db: AsyncIOMotorDatabase = Depends(get_db)) -> QualityGate:
    """Quality gate bound to the request's database"""
    return QualityGate(CourseStore(db))

async def get_bucket(db: AsyncIOMotorDatabase = Depends(get_db)) -> AsyncIOMotorGridFSBucket:
    """GridFS bucket holding thumbnails and promo videos"""
    return AsyncIOMotorGridFSBucket(db, bucket_name=UPLOAD_BUCKET)
