from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo.errors import PyMongoError
from datetime import datetime
import logging
from grove.courses.dependencies import get_db

router = APIRouter(tags=["System"])
logger = logging.getLogger(__name__)

@router.get("/health")
async def health(db: AsyncIOMotorDatabase = Depends(get_db)):
    """
    Liveness plus a MongoDB ping.
    The API cannot score or store courses without the database.
    """
    record = {"timestamp": datetime.utcnow().isoformat(), "status": "UP"}
    try:
        await db.command("ping")
        record["database"] = "UP"
    except PyMongoError as e:
        logger.warning("Health check: database unreachable: %s", e)
        record["status"] = "DOWN"
        record["database"] = "DOWN"
        return JSONResponse(status_code=503, content=record)
    return record
