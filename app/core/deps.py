from fastapi import Request
from starlette.datastructures import UploadFile as StarletteUploadFile

from app.core.config import Settings
from app.models.cards import CardUpdateIn
from app.services.card_store import CardStore
from app.services.uploads import UploadService

UPDATABLE_TEXT_FIELDS = ("title", "description", "tags")


def get_settings_dep(request: Request) -> Settings:
    return request.app.state.settings


def get_card_store(request: Request) -> CardStore:
    """
    Le store est créé par create_app et porté par app.state (une instance par process).
    """
    return request.app.state.cards


def get_upload_service(request: Request) -> UploadService:
    return request.app.state.uploads


async def get_card_update_input(request: Request) -> CardUpdateIn:
    """
    Construit CardUpdateIn à partir des clés réellement présentes dans le formulaire :
    une chaîne vide reste "fournie" et écrase le champ.
    """
    form = await request.form()
    supplied = {
        key: form[key]
        for key in UPDATABLE_TEXT_FIELDS
        if key in form and not isinstance(form[key], StarletteUploadFile)
    }
    return CardUpdateIn(**supplied)
