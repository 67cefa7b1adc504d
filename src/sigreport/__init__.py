from sigreport.errors import InvalidPolicyError, MalformedDocumentError, ReportError
from sigreport.models import Reports, ReportType
from sigreport.service import validate_document

__all__ = [
    "InvalidPolicyError",
    "MalformedDocumentError",
    "ReportError",
    "Reports",
    "ReportType",
    "validate_document",
]
