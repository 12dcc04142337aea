import mimetypes
from pathlib import Path

from fastapi import APIRouter, Depends, Request
from fastapi.responses import FileResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_307_TEMPORARY_REDIRECT, HTTP_404_NOT_FOUND

from app.core.config import Settings
from app.core.deps import get_settings_dep
from app.core.errors import NotFound

router = APIRouter(tags=["frontend"])

ENTRY_DOCUMENT = "index.html"
API_PREFIX = "api/"


def resolve_public_file(public_dir: Path, requested: str) -> Path:
    """
    Fichier statique du bundle si le chemin existe dans public/,
    sinon le document d'entrée (routing côté client).
    Le chemin reçu est déjà décodé par Starlette.
    """
    root = public_dir.resolve()
    relative = requested.lstrip("/")
    if relative:
        p = (root / relative).resolve()
        # pas de sortie du dossier public
        if root in p.parents and p.is_file():
            return p
    return root / ENTRY_DOCUMENT


class UploadsStaticFiles(StaticFiles):
    """
    Images uploadées ; une image absente renvoie le document d'entrée (200)
    comme toute autre route inconnue.
    """

    def __init__(self, *, public_dir: Path, **kwargs):
        super().__init__(**kwargs)
        self.public_dir = Path(public_dir)

    async def get_response(self, path: str, scope):
        try:
            return await super().get_response(path, scope)
        except StarletteHTTPException as exc:
            entry = self.public_dir.resolve() / ENTRY_DOCUMENT
            if exc.status_code != HTTP_404_NOT_FOUND or not entry.is_file():
                raise
            return FileResponse(str(entry), media_type="text/html")


@router.api_route("/{full_path:path}", methods=["GET", "HEAD"], include_in_schema=False)
def serve_frontend(full_path: str, request: Request, settings: Settings = Depends(get_settings_dep)):
    # /api/.../ : slash final ignoré, comme pour les routes API sans slash
    if full_path.startswith(API_PREFIX) and full_path.endswith("/"):
        url = request.url.replace(path="/" + full_path.rstrip("/"))
        return RedirectResponse(str(url), status_code=HTTP_307_TEMPORARY_REDIRECT)

    p = resolve_public_file(Path(settings.PUBLIC_PATH), full_path)
    if not p.is_file():
        raise NotFound("Frontend non disponibile")

    mime, _ = mimetypes.guess_type(str(p))
    return FileResponse(str(p), media_type=mime or "application/octet-stream")
