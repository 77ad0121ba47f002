import logging
import time
from functools import lru_cache
from typing import Any, Dict, List

from fastapi import Depends, FastAPI, HTTPException, Query, Request, Response
from pydantic import BaseModel, Field

from childrisk.config import Settings
from childrisk.export.csv_export import (
    CSV_MEDIA_TYPE,
    ExportFormat,
    NoDataToExportError,
    UnsupportedExportFormatError,
    export_filename,
)
from childrisk.models.survey_input import EducationLevel, Region, SurveyInput
from childrisk.orchestrator.dashboard_service import DashboardService
from childrisk.reports.table import SortField, SortOrder, SortState
from childrisk.telemetry import init_telemetry

# --- 1. SETUP AUDIT LOGGING ---
logging.basicConfig(
    filename="audit.log",
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
audit_logger = logging.getLogger("audit")

tags_metadata = [
    {
        "name": "Prediction",
        "description": "Score a household/child survey into a Low / Medium / High risk assessment.",
    },
    {
        "name": "Reports",
        "description": "Stored assessments, chart aggregates and CSV export.",
    },
    {
        "name": "System",
        "description": "Health checks and activity log.",
    },
]

app = FastAPI(
    title="Child Health Risk Engine",
    description="""
    **Child Health Analytics** backend.

    * **Risk Scoring:** weighted heuristic over income, food insecurity, water and sanitation.
    * **Analysis:** category, region, education and timeline aggregates for dashboards.
    * **Export:** CSV download of every stored assessment.
    """,
    version="1.0.0",
    openapi_tags=tags_metadata,
    docs_url="/docs",
    redoc_url="/redoc"
)

init_telemetry()


@lru_cache(maxsize=1)
def get_service() -> DashboardService:
    return DashboardService.from_settings(Settings.from_env())


# --- MIDDLEWARE: AUDIT TRAIL ---
@app.middleware("http")
async def audit_middleware(request: Request, call_next):
    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time

    client_host = request.client.host if request.client else "unknown"
    audit_logger.info(
        f"METHOD={request.method} PATH={request.url.path} "
        f"STATUS={response.status_code} CLIENT={client_host} "
        f"DURATION={process_time:.4f}s"
    )
    return response


# --- DATA MODELS ---
class SurveyRequest(BaseModel):
    """Survey form. Bounds mirror the form inputs; the scorer itself is permissive."""
    childAge: float = Field(..., ge=0, le=60)
    householdIncome: float = Field(..., ge=0, le=100)
    foodInsecurity: float = Field(..., ge=0, le=100)
    waterAccess: float = Field(..., ge=0, le=100)
    sanitationAccess: float = Field(..., ge=0, le=100)
    educationLevel: EducationLevel
    region: Region
    householdSize: int = Field(..., ge=1, le=20)

    def to_survey_input(self) -> SurveyInput:
        return SurveyInput(
            child_age_months=self.childAge,
            household_income_score=self.householdIncome,
            food_insecurity_score=self.foodInsecurity,
            water_access_score=self.waterAccess,
            sanitation_access_score=self.sanitationAccess,
            education_level=self.educationLevel,
            region=self.region,
            household_size=self.householdSize,
        )


# --- ENDPOINTS ---

@app.post("/predictions", status_code=201, tags=["Prediction"])
def create_prediction(
    request: SurveyRequest,
    service: DashboardService = Depends(get_service),
) -> Dict[str, Any]:
    try:
        assessment = service.predict(request.to_survey_input())
    except Exception as e:
        audit_logger.error(f"ENGINE_ERROR: {type(e).__name__}")
        raise HTTPException(status_code=500, detail="Prediction failed")
    return assessment.to_dict()


@app.get("/predictions", tags=["Reports"])
def list_predictions(
    sort: SortField = SortField.DATE,
    order: SortOrder = SortOrder.DESC,
    service: DashboardService = Depends(get_service),
) -> List[Dict[str, Any]]:
    records = service.report(SortState(field=sort, order=order))
    return [r.to_dict() for r in records]


@app.get("/analysis", tags=["Reports"])
def analysis(service: DashboardService = Depends(get_service)) -> Dict[str, Any]:
    return service.analysis().to_dict()


@app.get("/overview", tags=["System"])
def overview(service: DashboardService = Depends(get_service)) -> Dict[str, Any]:
    return service.overview().to_dict()


@app.get("/activity", tags=["System"])
def activity(
    limit: int = Query(10, ge=1, le=100),
    service: DashboardService = Depends(get_service),
) -> List[Dict[str, Any]]:
    return [entry.to_dict() for entry in service.activity(limit)]


@app.get("/export", tags=["Reports"])
def export(
    format: ExportFormat = ExportFormat.CSV,
    service: DashboardService = Depends(get_service),
):
    try:
        document = service.export(format)
    except NoDataToExportError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except UnsupportedExportFormatError as e:
        raise HTTPException(status_code=501, detail=str(e))

    return Response(
        content=document,
        media_type=CSV_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{export_filename()}"'},
    )


@app.get("/health", tags=["System"])
def health():
    return {
        "status": "online",
        "modules": ["Scorer", "Aggregator", "RecordStore", "Export", "AuditLog"]
    }
