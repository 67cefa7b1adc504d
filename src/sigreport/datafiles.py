import base64
import binascii
import logging
from typing import Any, Dict, Union

from sigreport.errors import MalformedDocumentError
from sigreport.models import DataFileData, DataFilesReport
from sigreport.raw import RawDataFile, RawValidationResult, load_raw_result

logger = logging.getLogger(__name__)


def _data_file(data_file: RawDataFile) -> DataFileData:
    content = data_file.content or ""
    size = data_file.size
    if size is None:
        try:
            size = len(base64.b64decode("".join(content.split()), validate=True))
        except (ValueError, binascii.Error):
            logger.debug("Data file %r content is not base64", data_file.name)
            size = 0
    return DataFileData(filename=data_file.name, mime_type=data_file.mime_type or "", base64=content, size=size)


def build_data_files_report(raw_payload: Union[RawValidationResult, bytes, str, Dict[str, Any]]) -> DataFilesReport:
    """Список файлов данных контейнера DIGIDOC-XML."""
    raw = raw_payload if isinstance(raw_payload, RawValidationResult) else load_raw_result(raw_payload)
    if raw.document_format.strip().upper() != "DDOC":
        raise MalformedDocumentError("Data files can only be extracted from DDOC containers")
    return DataFilesReport(data_files=[_data_file(f) for f in raw.data_files])
