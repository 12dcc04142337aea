import logging
import os
import time
from pathlib import Path

from fastapi import UploadFile

from app.core.errors import PayloadTooLarge, ValidationError
from app.models.cards import StoredImage

logger = logging.getLogger(__name__)

ALLOWED_TYPES = {"jpeg", "jpg", "png", "gif", "webp"}
UPLOADS_URL_PREFIX = "/uploads"
ONLY_IMAGES = "Solo immagini permesse"


def is_allowed_image(filename: str, content_type: str | None) -> bool:
    """
    Extension ET type MIME déclaré doivent appartenir à ALLOWED_TYPES.
    """
    ext = Path(filename).suffix.lower().lstrip(".")
    if ext not in ALLOWED_TYPES:
        return False

    major, _, subtype = (content_type or "").lower().partition("/")
    return major == "image" and subtype.split(";")[0].strip() in ALLOWED_TYPES


class UploadService:
    """
    Stockage local des images uploadées.
    Nom sur disque : "<timestamp ms>-<nom original>" (collision possible dans la même ms).
    """

    def __init__(self, base_path: str = "./uploads", max_upload_mb: int = 10):
        self.base_path = Path(base_path)
        self.max_upload_bytes = max_upload_mb * 1024 * 1024

    def ensure_dir(self) -> None:
        """
        Crée le dossier d'uploads s'il n'existe pas (appelé au démarrage).
        """
        self.base_path.mkdir(parents=True, exist_ok=True)

    def save_image(self, file: UploadFile) -> StoredImage:
        original_name = os.path.basename(file.filename or "")
        if not is_allowed_image(original_name, file.content_type):
            logger.warning("Upload refusé (type): %s [%s]", original_name, file.content_type)
            raise ValidationError(ONLY_IMAGES)

        contents = file.file.read(self.max_upload_bytes + 1)
        if len(contents) > self.max_upload_bytes:
            logger.warning("Upload refusé (taille): %s", original_name)
            raise PayloadTooLarge(
                f"File troppo grande (max {self.max_upload_bytes // (1024 * 1024)} MB)"
            )

        stored_name = f"{int(time.time() * 1000)}-{original_name}"
        dest_path = self.base_path / stored_name
        with open(dest_path, "wb") as f:
            f.write(contents)

        return StoredImage(
            filename=stored_name,
            path=str(dest_path),
            size=len(contents),
            url=f"{UPLOADS_URL_PREFIX}/{stored_name}",
        )

    def discard(self, url: str) -> None:
        """
        Supprime une image à partir de son URL publique (rollback d'une création ratée).
        """
        path = self.base_path / Path(url).name
        path.unlink(missing_ok=True)
