from pathlib import Path
from zipfile import BadZipFile
import logging
import tempfile
import os

from app.core.errors import ExtractionError

logger = logging.getLogger(__name__)


class DocumentParser:
    """Extract plain text from uploads - plain text directly, PDF/DOCX via unstructured."""

    # All supported extensions
    SUPPORTED_EXTENSIONS = {".pdf", ".docx", ".txt"}

    # Extensions that need unstructured library
    COMPLEX_EXTENSIONS = {".pdf", ".docx"}

    # Plain text extensions (read directly)
    TEXT_EXTENSIONS = {".txt"}

    # Leading bytes every well-formed file of the type carries
    PDF_MARKER = b"%PDF-"
    ZIP_MARKER = b"PK\x03\x04"

    def extract(self, content: bytes, filename: str) -> str:
        """Extract text from document bytes. Unsupported types yield an empty string."""
        ext = Path(filename or "").suffix.lower()

        if ext not in self.SUPPORTED_EXTENSIONS:
            logger.info("Unsupported file type %r for %s", ext, filename)
            return ""

        if ext in self.TEXT_EXTENSIONS:
            return self._decode_text(content)

        self._check_signature(content, filename, ext)
        return self._partition(content, filename, ext)

    def _decode_text(self, content: bytes) -> str:
        try:
            return content.decode("utf-8-sig")
        except UnicodeDecodeError:
            pass
        try:
            return content.decode("cp1252")
        except UnicodeDecodeError:
            # latin-1 maps every byte
            return content.decode("latin-1")

    def _check_signature(self, content: bytes, filename: str, ext: str):
        if ext == ".pdf":
            valid = self.PDF_MARKER in content[:1024]
        else:
            valid = content.startswith(self.ZIP_MARKER)
        if not valid:
            raise ExtractionError(f"{filename} is not a valid {ext[1:].upper()} file")

    def _document_errors(self) -> tuple:
        """Errors the format libraries raise for a malformed document."""
        from docx.opc.exceptions import PackageNotFoundError
        from pdfminer.psparser import PSException

        return (PSException, PackageNotFoundError, BadZipFile, KeyError)

    def _run_partition(self, path: str, ext: str):
        if ext == ".pdf":
            from unstructured.partition.pdf import partition_pdf

            # Text layer only; scanned pages yield no text
            return partition_pdf(filename=path, strategy="fast")

        from unstructured.partition.docx import partition_docx

        return partition_docx(filename=path)

    def _partition(self, content: bytes, filename: str, ext: str) -> str:
        document_errors = self._document_errors()

        # Write to temp file for unstructured to process
        with tempfile.NamedTemporaryFile(suffix=ext, delete=False) as tmp:
            tmp.write(content)
            tmp_path = tmp.name

        try:
            elements = self._run_partition(tmp_path, ext)
            return "\n\n".join(str(el) for el in elements)
        except document_errors as e:
            logger.warning("Failed to parse %s: %s", filename, e)
            raise ExtractionError(f"Failed to parse {filename}: {str(e)}") from e
        finally:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
