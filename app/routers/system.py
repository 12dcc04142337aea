from fastapi import APIRouter, Depends, Request
from app.core.config import Settings
from app.core.deps import get_settings_dep

router = APIRouter(tags=["system"])

@router.get("/health")
def health(request: Request, s: Settings = Depends(get_settings_dep)):
    return {"status": "ok", "version": s.APP_VERSION, "cards": len(request.app.state.cards)}

@router.get("/version")
def version(s: Settings = Depends(get_settings_dep)):
    return {"name": s.APP_NAME, "version": s.APP_VERSION, "env": s.APP_ENV}
