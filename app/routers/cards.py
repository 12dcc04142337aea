import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from starlette.status import HTTP_201_CREATED

from app.core.deps import get_card_store, get_card_update_input, get_upload_service
from app.core.errors import CardError, InternalError, ValidationError
from app.models.cards import Card, CardCreateIn, CardUpdateIn, DeleteResponse, ErrorResponse
from app.services.card_store import CardStore, utcnow_iso
from app.services.uploads import UploadService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/cards", tags=["cards"])

NOT_FOUND = {404: {"model": ErrorResponse}}


def _has_file(image: Optional[UploadFile]) -> bool:
    return image is not None and bool(image.filename)


@router.get("/", response_model=List[Card], include_in_schema=False)
@router.get("", response_model=List[Card])
def list_cards(store: CardStore = Depends(get_card_store)):
    # plus récentes d'abord ; à horodatage égal, la dernière insérée en tête
    return sorted(reversed(store.list()), key=lambda c: c.created_at, reverse=True)


@router.get("/{card_id}", response_model=Card, responses=NOT_FOUND)
def get_card(card_id: str, store: CardStore = Depends(get_card_store)):
    return store.get(card_id)


@router.post("/", response_model=Card, status_code=HTTP_201_CREATED, include_in_schema=False)
@router.post(
    "",
    response_model=Card,
    status_code=HTTP_201_CREATED,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def create_card(
    image: Optional[UploadFile] = File(None),
    title: str = Form(""),
    description: str = Form(""),
    tags: str = Form(""),
    store: CardStore = Depends(get_card_store),
    uploads: UploadService = Depends(get_upload_service),
):
    if not _has_file(image):
        raise ValidationError("Immagine obbligatoria")

    payload = CardCreateIn(title=title, description=description, tags=tags)
    stored = None
    try:
        stored = uploads.save_image(image)
        card = store.insert(
            {
                **payload.model_dump(),
                "image_url": stored.url,
                "created_at": utcnow_iso(),
            }
        )
    except CardError:
        raise
    except Exception as e:
        logger.exception("Card creation failed")
        # pas de fichier orphelin si la carte n'a pas pu être enregistrée
        if stored is not None:
            uploads.discard(stored.url)
        raise InternalError("Errore creazione") from e

    logger.info("Card %s created (%s)", card.id, stored.filename)
    return card


@router.put(
    "/{card_id}",
    response_model=Card,
    responses={**NOT_FOUND, 400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
def update_card(
    card_id: str,
    image: Optional[UploadFile] = File(None),
    payload: CardUpdateIn = Depends(get_card_update_input),
    store: CardStore = Depends(get_card_store),
    uploads: UploadService = Depends(get_upload_service),
):
    # 404 avant toute écriture disque
    store.get(card_id)

    try:
        updates = payload.supplied()
        if _has_file(image):
            updates["image_url"] = uploads.save_image(image).url
        card = store.replace(card_id, updates)
    except CardError:
        raise
    except Exception as e:
        logger.exception("Card update failed: %s", card_id)
        raise InternalError("Errore aggiornamento") from e

    logger.info("Card %s updated (%s)", card_id, ", ".join(sorted(updates)) or "no changes")
    return card


@router.delete("/{card_id}", response_model=DeleteResponse, responses=NOT_FOUND)
def delete_card(card_id: str, store: CardStore = Depends(get_card_store)):
    store.remove(card_id)
    logger.info("Card %s deleted", card_id)
    return DeleteResponse(success=True)
