from fastapi import APIRouter

from musclelab.models.input_model import SessionInput
from musclelab.models.report_model import SessionReport
from musclelab.pipeline.orchestrator import analyze_session

router = APIRouter()


# Plain def: FastAPI runs it in the threadpool
@router.post("/analyze", response_model=SessionReport)
def analyze(session: SessionInput) -> SessionReport:
    return analyze_session(session)
