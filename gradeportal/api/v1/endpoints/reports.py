# gradeportal/api/v1/endpoints/reports.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from gradeportal.db.session import get_db
from gradeportal.schemas.report import ReportOverview
from gradeportal.services import report_service

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/overview", response_model=ReportOverview)
def get_overview(db: Session = Depends(get_db)):
    return report_service.build_overview(db)
