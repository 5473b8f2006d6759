import logging
import os
import shutil
import time
from pathlib import Path
from typing import Optional

from fastapi import UploadFile

from quickdesk.core.config import settings

logger = logging.getLogger(__name__)


def _safe_name(filename: str) -> str:
    # Drop any client-supplied directory components
    return os.path.basename(filename.replace("\\", "/")) or "attachment"


def save_attachment(upload: Optional[UploadFile]) -> Optional[str]:
    """Store an uploaded ticket attachment as '<epoch-ms>-<original name>'.

    Returns the stored file name, or None when nothing was uploaded.
    """
    if upload is None or not upload.filename:
        return None

    upload_dir = Path(settings.UPLOAD_DIR)
    upload_dir.mkdir(parents=True, exist_ok=True)

    stored_name = f"{int(time.time() * 1000)}-{_safe_name(upload.filename)}"
    with open(upload_dir / stored_name, "wb") as out:
        shutil.copyfileobj(upload.file, out)

    logger.info("Saved attachment %s", stored_name)
    return stored_name
