import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from motor.motor_asyncio import AsyncIOMotorClient
from grove.config import MONGO_URL, MONGO_DB_NAME, CORS_ORIGINS, LOG_LEVEL, PORT
from grove.courses.course_router import router as course_router
from grove.courses.upload_router import router as upload_router
from grove.courses.database import create_course_indexes
from grove.system.health_router import router as health_router

logging.basicConfig(
    level=LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s"
)
logger = logging.getLogger("grove")

app = FastAPI(title="Grove Connect API")

# MongoDB Configuration
client = AsyncIOMotorClient(MONGO_URL)
db = client[MONGO_DB_NAME]


@app.on_event("startup")
async def startup_event():
    await create_course_indexes(db)
    logger.info("Grove Connect API ready")


app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"]
)

# ==================== ROUTER REGISTRATION ====================
app.include_router(course_router, prefix="/api")
app.include_router(upload_router, prefix="/api")
app.include_router(health_router)
# ============================================================


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("grove.main:app", host="0.0.0.0", port=PORT)
