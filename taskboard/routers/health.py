from datetime import datetime, timezone
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.database import check_db_connection, get_db

router = APIRouter()


@router.get("/health")
def health_check(db: Session = Depends(get_db)):
    """Liveness probe"""
    db_healthy = check_db_connection(db)
    return {
        "success": True,
        "message": "Server is running",
        "service": settings.service_name,
        "version": settings.service_version,
        "database": "connected" if db_healthy else "disconnected",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
