from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class Card(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., description="Identifiant séquentiel (card_<n>)")
    title: str = ""
    description: str = ""
    tags: str = Field(default="", description="Texte libre, non structuré")
    image_url: str = Field(..., alias="imageUrl", description="Chemin public de l'image (/uploads/...)")
    created_at: str = Field(..., alias="createdAt", description="Horodatage ISO-8601 UTC, fixé à la création")


class CardCreateIn(BaseModel):
    title: str = ""
    description: str = ""
    tags: str = ""


class CardUpdateIn(BaseModel):
    # Un champ présent dans le formulaire (même vide) est "fourni" : voir model_fields_set
    title: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[str] = None

    def supplied(self) -> dict[str, str]:
        return self.model_dump(include=self.model_fields_set)


class DeleteResponse(BaseModel):
    success: bool = True


class ErrorResponse(BaseModel):
    error: str


class StoredImage(BaseModel):
    filename: str
    path: str
    size: int = Field(..., ge=0, description="Taille en octets")
    url: str
