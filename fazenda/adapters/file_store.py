# fazenda/adapters/file_store.py
"""
Armazenamento de imagens e documentos dos animais.

Os arquivos ficam sob um diretório gerenciado (DATA_DIR por padrão):
- uploads/<uuid>.png             -> imagens (chave relativa gravada em animals.image)
- documents/<nome>_<millis><ext> -> documentos (nome gravado em animal_documents.filename)

O conteúdo nunca é interpretado; só gravado e lido de volta.
"""

from __future__ import annotations

import base64
import mimetypes
import re
import time
import uuid
from pathlib import Path
from typing import Dict, Iterable

from fazenda.config import DATA_DIR
from fazenda.infra.logger import log_file_operation, log_system_event


_DATA_URL_PREFIX = re.compile(r"^data:[^;,]*;base64,")


def _decode(data: str) -> bytes:
    return base64.b64decode(_DATA_URL_PREFIX.sub("", data))


class FileStore:
    def __init__(self, base_dir: str = DATA_DIR):
        self.base_dir = Path(base_dir)
        self.uploads_dir = self.base_dir / "uploads"
        self.documents_dir = self.base_dir / "documents"

    # --------- imagens ---------

    def save_image(self, image_data: str) -> str:
        """Grava uma imagem (data URL ou base64 puro) e devolve `uploads/<arquivo>`."""
        self.uploads_dir.mkdir(parents=True, exist_ok=True)
        file_name = f"{uuid.uuid4()}.png"
        path = self.uploads_dir / file_name
        path.write_bytes(_decode(image_data))
        log_file_operation("save_image", str(path))
        return f"uploads/{file_name}"

    def get_image_data_url(self, relative_path: str) -> str:
        """Imagem como data URL; string vazia se não houver arquivo."""
        if not relative_path:
            return ""
        full_path = self.base_dir / relative_path
        if not full_path.is_file():
            log_system_event("image_not_found", {"path": str(full_path)}, level="warning")
            return ""
        mime = mimetypes.guess_type(full_path.name)[0] or "application/octet-stream"
        encoded = base64.b64encode(full_path.read_bytes()).decode("ascii")
        return f"data:{mime};base64,{encoded}"

    def get_image_data_urls(self, relative_paths: Iterable[str]) -> Dict[str, str]:
        return {p: self.get_image_data_url(p) for p in relative_paths}

    # --------- documentos ---------

    def save_document(self, file_data: str, original_name: str) -> str:
        """Grava o documento com nome único e devolve o nome do arquivo."""
        original = Path(original_name)
        filename = f"{original.stem}_{int(time.time() * 1000)}{original.suffix}"
        path = self.documents_dir / filename
        try:
            self.documents_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(_decode(file_data))
        except (OSError, ValueError) as exc:
            log_system_event("save_document_error", {"name": original_name, "error": str(exc)}, level="error")
            raise OSError("Failed to save document") from exc
        log_file_operation("save_document", str(path), original_name=original_name)
        return filename

    def document_path(self, filename: str) -> Path:
        return self.documents_dir / filename

    def get_document_path(self, filename: str) -> str:
        """URI file:// do documento; FileNotFoundError se não existir."""
        path = self.document_path(filename)
        if not path.is_file():
            raise FileNotFoundError("Document not found")
        return path.resolve().as_uri()
