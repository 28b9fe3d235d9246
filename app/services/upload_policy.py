"""
Upload policy.
Admission rules, storage naming and resource-type classification for uploaded
documents. Pure functions: nothing here talks to the storage provider.
"""
import random
import re
import time
from typing import Optional
from urllib.parse import quote

from app.exceptions import (
    PayloadTooLargeError,
    TooManyFilesError,
    UnsupportedMediaTypeError
)
from app.models.upload import IncomingFile

PDF_MIME_TYPE = "application/pdf"

ALLOWED_MIME_TYPES = frozenset([
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    PDF_MIME_TYPE,
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-excel",
    "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
])

MAX_FILE_SIZE = 10 * 1024 * 1024
MAX_FILES = 10

# Storage provider resource categories
RESOURCE_RAW = "raw"
RESOURCE_AUTO = "auto"

_UNSAFE_RUN = re.compile(r"[^a-zA-Z0-9.-]+")


def validate_file_type(mimetype: Optional[str]) -> bool:
    return mimetype in ALLOWED_MIME_TYPES


def validate_file_size(size: int, max_size: int = MAX_FILE_SIZE) -> bool:
    return size <= max_size


def check_admission(file: IncomingFile, max_size: int = MAX_FILE_SIZE) -> None:
    """
    Reject a file before anything is sent to storage.

    The type is checked first, so a disallowed type is reported as such
    whatever its size.

    Raises:
        UnsupportedMediaTypeError: Declared MIME type not allowed
        PayloadTooLargeError: File larger than max_size bytes
    """
    if not validate_file_type(file.content_type):
        raise UnsupportedMediaTypeError(
            "Tipo de archivo no permitido. Formatos permitidos: JPG, PNG, GIF, PDF, DOC, DOCX, XLS, XLSX",
            mimetype=file.content_type
        )
    if not validate_file_size(file.size, max_size):
        raise PayloadTooLargeError(
            f"Archivo demasiado grande. Tamaño máximo permitido: {max_size // (1024 * 1024)}MB",
            size=file.size,
            limit=max_size
        )


def check_file_count(count: int, max_files: int = MAX_FILES) -> None:
    """
    Raises:
        TooManyFilesError: More than max_files files in one request
    """
    if count > max_files:
        raise TooManyFilesError(
            f"Demasiados archivos. Máximo permitido: {max_files} archivos",
            count=count,
            limit=max_files
        )


def sanitize_filename(filename: str) -> str:
    """Collapse every run of characters outside [a-zA-Z0-9.-] into one '_' and lower-case."""
    return _UNSAFE_RUN.sub("_", filename).lower()


def generate_unique_filename(original_name: str, field_name: str = "file") -> str:
    """
    Storage key for an upload.

    Format: <field>_<sanitized base>_<ms timestamp>_<random 9 digits>.<extension>
    The base is the text before the first dot, the extension the text after
    the last one.

    Example:
        generate_unique_filename("Cédula Juan.pdf", "archivo")
        -> "archivo_c_dula_juan_1718900000000_482913375.pdf"
    """
    timestamp = int(time.time() * 1000)
    suffix = random.randint(100_000_000, 999_999_999)
    extension = original_name.rsplit(".", 1)[-1]
    base = sanitize_filename(original_name.split(".", 1)[0])
    return f"{field_name}_{base}_{timestamp}_{suffix}.{extension}"


def is_pdf_mimetype(mimetype: Optional[str]) -> bool:
    return mimetype == PDF_MIME_TYPE


def is_image_mimetype(mimetype: Optional[str]) -> bool:
    return bool(mimetype) and mimetype.startswith("image/")


def is_pdf_file(filename: Optional[str], mimetype: Optional[str] = "") -> bool:
    """PDF by extension or by declared MIME type."""
    extension = filename.lower().rsplit(".", 1)[-1] if filename else ""
    return extension == "pdf" or is_pdf_mimetype(mimetype)


def resource_type_for(mimetype: Optional[str]) -> str:
    """
    Storage category for a declared MIME type.

    Only exactly application/pdf goes to "raw": the provider's automatic
    handling restricts delivery of PDFs, which breaks direct links. Everything
    else is "auto" and the provider decides.
    """
    return RESOURCE_RAW if is_pdf_mimetype(mimetype) else RESOURCE_AUTO


def append_attachment_name(url: str, filename: Optional[str]) -> str:
    """Add fl_attachment=<name> so browsers save the file under a readable name."""
    if not filename:
        return url
    separator = "&" if "?" in url else "?"
    encoded = quote(filename, safe="-_.!~*'()")
    return f"{url}{separator}fl_attachment={encoded}"
