import logging
import re
from typing import Iterable, List
from urllib.parse import unquote

from sigreport.models import SignatureScope

logger = logging.getLogger(__name__)

FULL_SIGNATURE_SCOPE = "FullSignatureScope"
FULL_DOCUMENT = "Digest of the document content"

_BROKEN_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def decode_uri_if_possible(uri: str) -> str:
    """Раскодировать %XX в имени файла; при битой кодировке вернуть исходную строку."""
    if _BROKEN_ESCAPE.search(uri):
        logger.warning("Data file reference %r has malformed percent-encoding", uri)
        return uri
    try:
        return unquote(uri, encoding="utf-8", errors="strict")
    except UnicodeDecodeError:
        logger.warning("Data file reference %r has unsupported encoding", uri)
        return uri


def full_scope(filename: str) -> SignatureScope:
    return SignatureScope(name=filename, scope=FULL_SIGNATURE_SCOPE, content=FULL_DOCUMENT)


def resolve_scopes(references: Iterable[str], data_file_names: Iterable[str]) -> List[SignatureScope]:
    names = set(data_file_names)
    decoded = (decode_uri_if_possible(ref) for ref in references)
    # Ссылки на SignedProperties не совпадают ни с одним файлом данных
    return [full_scope(name) for name in decoded if name in names]
