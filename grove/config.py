"""
Grove API Configuration
Database, storage and quality gate settings
"""

import os

# MongoDB
MONGO_URL = os.getenv("MONGO_URL", "mongodb://localhost:27017")
MONGO_DB_NAME = os.getenv("MONGO_DB_NAME", "grove_db")

# Server
PORT = int(os.getenv("PORT", "5000"))
CORS_ORIGINS = [o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()]
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Uploads (thumbnails / promo videos)
PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", f"http://localhost:{PORT}").rstrip("/")
UPLOAD_BUCKET = os.getenv("UPLOAD_BUCKET", "course-content")
UPLOAD_MAX_BYTES = int(os.getenv("UPLOAD_MAX_BYTES", str(500 * 1024 * 1024)))
UPLOAD_CHUNK_BYTES = 1024 * 1024

# Quality gate
QUALITY_PASS_THRESHOLD = int(os.getenv("QUALITY_PASS_THRESHOLD", "60"))
DUPLICATE_SIMILARITY_THRESHOLD = float(os.getenv("DUPLICATE_SIMILARITY_THRESHOLD", "0.8"))
