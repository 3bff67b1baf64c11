from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel
from sqlalchemy.orm import Session as DbSession

from energysim.api.auth import require_user
from energysim.core.database import get_db
from energysim.core.export import history_csv, history_filename
from energysim.services import feedback, history
from energysim.services.auth import AuthUser

router = APIRouter(tags=["history"])

STATUS_BY_ERROR = {
    "Not authenticated": 401,
    "Simulation not found": 404,
}


def _raise_for(result: history.StoreResult, default_status: int = 400):
    if not result.success:
        raise HTTPException(status_code=STATUS_BY_ERROR.get(result.error, default_status), detail=result.error)


@router.get("/simulations")
def list_simulations(
    simulation_type: str | None = None,
    user: AuthUser = Depends(require_user),
    db: DbSession = Depends(get_db),
):
    """The signed-in user's saved simulations, newest first."""
    result = history.list_simulations(db, user, simulation_type)
    _raise_for(result, 500)
    return [
        {**record.to_dict(include_hourly=False), "summary": history.record_summary(record)}
        for record in result.data
    ]


@router.get("/simulations/{simulation_id}")
def read_simulation(simulation_id: str, user: AuthUser = Depends(require_user), db: DbSession = Depends(get_db)):
    result = history.get_simulation(db, user, simulation_id)
    _raise_for(result, 500)
    return result.data.to_dict()


@router.delete("/simulations/{simulation_id}")
def delete_simulation(simulation_id: str, user: AuthUser = Depends(require_user), db: DbSession = Depends(get_db)):
    result = history.delete_simulation(db, user, simulation_id)
    _raise_for(result, 500)
    return {"status": "deleted", "id": simulation_id}


@router.get("/simulations/{simulation_id}/csv")
def download_simulation(simulation_id: str, user: AuthUser = Depends(require_user), db: DbSession = Depends(get_db)):
    result = history.get_simulation(db, user, simulation_id)
    _raise_for(result, 500)
    record = result.data
    return Response(
        content=history_csv(record),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{history_filename(record)}"'},
    )


class FeedbackRequest(BaseModel):
    rating: int = 0
    message: str | None = None
    page: str | None = None


@router.post("/feedback")
def post_feedback(req: FeedbackRequest, user: AuthUser = Depends(require_user), db: DbSession = Depends(get_db)):
    result = feedback.submit_feedback(db, user, req.rating, req.message, req.page)
    _raise_for(result)
    return {"status": "received", "id": str(result.data.id)}
