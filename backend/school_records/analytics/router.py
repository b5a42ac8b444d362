import logging
from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from school_records.analytics.service import ClassAnalytics, get_class_analytics
from school_records.auth.dependencies import get_current_actor
from school_records.database import get_db
from school_records.models import Teacher

router = APIRouter(prefix="/api/analytics", tags=["analytics"])
logger = logging.getLogger(__name__)


@router.get("/classes/{class_name}", response_model=ClassAnalytics)
def class_analytics(
    class_name: str,
    db: Session = Depends(get_db),
    actor: Optional[Teacher] = Depends(get_current_actor),
):
    """
    Average, highest and lowest percentage plus pass rate for a class.
    """
    analytics = get_class_analytics(db, actor, class_name)
    logger.info(
        f"class_analytics - class: {class_name}, students: {analytics.total_students}, "
        f"records: {analytics.total_records}"
    )
    return analytics
