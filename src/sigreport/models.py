from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


class ReportModel(BaseModel):
    """Базовая модель отчёта: camelCase в JSON, неизменяема после сборки."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Indication(str, Enum):
    TOTAL_PASSED = "TOTAL-PASSED"
    TOTAL_FAILED = "TOTAL-FAILED"
    INDETERMINATE = "INDETERMINATE"


class CertificateType(str, Enum):
    SIGNING = "SIGNING"
    REVOCATION = "REVOCATION"
    SIGNATURE_TIMESTAMP = "SIGNATURE_TIMESTAMP"


class ReportType(str, Enum):
    SIMPLE = "SIMPLE"
    DETAILED = "DETAILED"
    DIAGNOSTIC = "DIAGNOSTIC"


class Policy(ReportModel):
    policy_name: str
    policy_description: str
    policy_url: str


class ValidatedDocument(ReportModel):
    filename: str
    file_hash: Optional[str] = None
    hash_algo: Optional[str] = None


class SubjectDistinguishedName(ReportModel):
    common_name: Optional[str] = None
    serial_number: Optional[str] = None
    given_name: Optional[str] = None
    surname: Optional[str] = None


class Certificate(ReportModel):
    content: str
    common_name: str = ""
    type: CertificateType


class SignatureScope(ReportModel):
    name: str
    scope: str = "FullSignatureScope"
    content: str = "Digest of the document content"


class SignatureWarning(ReportModel):
    content: str


class SignatureError(ReportModel):
    content: str


class ValidationWarning(ReportModel):
    content: str


class SignerRole(ReportModel):
    claimed_role: str


class SignatureProductionPlace(ReportModel):
    country_name: str = ""
    state_or_province: str = ""
    city: str = ""
    postal_code: str = ""


class Info(ReportModel):
    best_signature_time: Optional[str] = None
    ocsp_response_creation_time: Optional[str] = None
    timestamp_creation_time: Optional[str] = None
    time_assertion_message_imprint: str = ""
    signer_role: List[SignerRole] = Field(default_factory=list)
    signature_production_place: Optional[SignatureProductionPlace] = None


class SignatureValidationData(ReportModel):
    id: str
    signature_format: str = ""
    signature_method: str = ""
    signature_level: str = ""
    signed_by: str = ""
    subject_distinguished_name: SubjectDistinguishedName = Field(default_factory=SubjectDistinguishedName)
    indication: Indication
    sub_indication: str = ""
    claimed_signing_time: str = ""
    warnings: List[SignatureWarning] = Field(default_factory=list)
    errors: List[SignatureError] = Field(default_factory=list)
    signature_scopes: List[SignatureScope] = Field(default_factory=list)
    certificates: List[Certificate] = Field(default_factory=list)
    info: Info = Field(default_factory=Info)

    def certificates_by_type(self, cert_type: CertificateType) -> List[Certificate]:
        return [c for c in self.certificates if c.type == cert_type]


class ValidationConclusion(ReportModel):
    policy: Policy
    validation_time: str
    validated_document: ValidatedDocument
    signature_form: Optional[str] = None
    signatures: List[SignatureValidationData] = Field(default_factory=list)
    validation_warnings: List[ValidationWarning] = Field(default_factory=list)

    # Счётчики всегда выводятся из списка подписей
    @computed_field(alias="signaturesCount")
    @property
    def signatures_count(self) -> int:
        return len(self.signatures)

    @computed_field(alias="validSignaturesCount")
    @property
    def valid_signatures_count(self) -> int:
        return sum(1 for s in self.signatures if s.indication == Indication.TOTAL_PASSED)


class SimpleReport(ReportModel):
    validation_conclusion: ValidationConclusion


class DetailedReport(ReportModel):
    validation_conclusion: ValidationConclusion
    validation_process: Optional[Dict[str, Any]] = None


class DiagnosticReport(ReportModel):
    validation_conclusion: ValidationConclusion
    diagnostic_data: Optional[Dict[str, Any]] = None


class Reports(ReportModel):
    simple_report: SimpleReport
    detailed_report: DetailedReport
    diagnostic_report: DiagnosticReport


class DataFileData(ReportModel):
    filename: str
    mime_type: str = ""
    base64: str = ""
    size: int = 0


class DataFilesReport(ReportModel):
    data_files: List[DataFileData] = Field(default_factory=list)
