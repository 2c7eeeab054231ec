import os
import re
import base64
import logging

from app.core.config import settings
from app.feed.errors import StorageError

log = logging.getLogger("uvicorn")

_MIME_RE = re.compile(r":(.*?);")


def is_data_url(value: str | None) -> bool:
    """True si la imagen viene inline (base64) y aún no está en el bucket."""
    return bool(value) and value.startswith("data:image")


def decode_data_url(value: str) -> tuple[bytes, str, str]:
    """
    Decodifica 'data:image/png;base64,AAAA...' → (bytes, mime, ext).
    Si el mime no trae subtipo usamos jpeg.
    Lanza ValueError si el payload no es base64 válido.
    """
    header, sep, payload = value.partition(",")
    if not sep or not payload:
        raise ValueError("data URL sin contenido")

    m = _MIME_RE.search(header)
    mime = m.group(1) if m else ""
    subtype = mime.split("/")[1] if "/" in mime else ""
    # 'svg+xml' → 'svgxml': el nombre de archivo no admite símbolos raros
    ext = re.sub(r"[^a-z0-9]", "", subtype.lower()) or "jpeg"
    if not mime.startswith("image/") or not subtype:
        mime = f"image/{ext}"

    data = base64.b64decode(payload, validate=True)
    return data, mime, ext


class PostImageBucket:
    """
    Bucket de imágenes de posts sobre disco local (MEDIA_DIR/<bucket>).
    Se sirve por /media/<bucket>/... con StaticFiles.
    """

    def __init__(
        self,
        media_dir: str = settings.MEDIA_DIR,
        bucket: str = settings.POST_IMAGES_BUCKET,
        public_base_url: str = settings.PUBLIC_BASE_URL,
    ):
        self.bucket = bucket
        self.root = os.path.join(media_dir, bucket)
        self.public_base_url = public_base_url.rstrip("/")
        os.makedirs(self.root, exist_ok=True)

    def _abs(self, filename: str) -> str:
        if not filename or filename in (".", "..") or os.path.basename(filename) != filename:
            raise StorageError(f"nombre de objeto inválido: {filename!r}")
        return os.path.join(self.root, filename)

    def upload(self, filename: str, data: bytes, content_type: str) -> str:
        """
        Guarda el objeto y devuelve su ruta dentro del bucket ('post-images/123.png').
        No pisa objetos existentes.
        """
        if not content_type.startswith("image/"):
            raise StorageError(f"content type no permitido: {content_type}")

        abs_path = self._abs(filename)
        try:
            with open(abs_path, "xb") as out:
                out.write(data)
        except FileExistsError:
            raise StorageError(f"The resource already exists: {filename}")
        except OSError as e:
            raise StorageError(f"no se pudo escribir {filename}: {e}") from e

        return f"{self.bucket}/{filename}"

    def get_public_url(self, filename: str) -> str:
        return f"{self.public_base_url}/media/{self.bucket}/{filename}"

    def is_hosted(self, url: str | None) -> bool:
        """¿La URL apunta a este backend? (las externas no se tocan)."""
        return bool(url) and url.startswith(f"{self.public_base_url}/media/{self.bucket}/")

    @staticmethod
    def object_name(url: str) -> str:
        return url.rstrip("/").rsplit("/", 1)[-1]

    def remove(self, filenames: list[str]) -> list[str]:
        """
        Elimina los objetos indicados. Los que ya no están se ignoran.
        Devuelve los que realmente se borraron.
        """
        removed: list[str] = []
        for name in filenames:
            try:
                os.remove(self._abs(name))
                removed.append(name)
            except FileNotFoundError:
                pass
        return removed
