import base64

from sigreport.adapters import (
    DetachedDataAdapter,
    DigidocXmlAdapter,
    GenericContainerAdapter,
    TimemarkContainerAdapter,
)
from sigreport.models import CertificateType
from sigreport.policies import QES_POLICY
from sigreport.raw import RawValidationResult, ValidationDocument


def _adapter(cls, data, document=None):
    raw = RawValidationResult.model_validate(data)
    return cls(raw, document or ValidationDocument(filename="doc"), QES_POLICY), raw


# ---------- Time-mark container ----------

def test_timemark_level_and_sub_indication_from_embedded_report(make_raw, raw_signature):
    data = make_raw(
        document_format="BDOC",
        signatures=[raw_signature(indication="TOTAL_FAILED", sub_indication="FORMAT_FAILURE", profile="LT_TM")],
        simple_reports={"S0": {"indication": "INDETERMINATE", "sub_indication": "TRY_LATER", "qualification": "QESIG"}},
    )
    adapter, raw = _adapter(TimemarkContainerAdapter, data)
    sig = raw.signatures[0]
    assert adapter.raw_indication(sig) == "INDETERMINATE"
    assert adapter.raw_sub_indication(sig) == "TRY_LATER"
    assert adapter.signature_level_label(sig) == "QESIG"
    assert adapter.signature_format(sig) == "XAdES_BASELINE_LT_TM"
    assert adapter.signature_form() == "ASiC-E"


def test_timemark_failed_without_embedded_report(make_raw, raw_signature):
    data = make_raw(document_format="BDOC", signatures=[raw_signature(indication="TOTAL_FAILED", sub_indication="HASH_FAILURE")])
    adapter, raw = _adapter(TimemarkContainerAdapter, data)
    sig = raw.signatures[0]
    assert adapter.raw_indication(sig) == "TOTAL_FAILED"
    assert adapter.raw_sub_indication(sig) == "HASH_FAILURE"
    assert adapter.signature_level_label(sig) == ""


def test_timemark_imprint_from_ocsp_nonce(make_raw, raw_signature, make_ocsp):
    data = make_raw(
        document_format="BDOC",
        signatures=[raw_signature(profile="LT_TM", revocations=[{"response": make_ocsp(b"tm-nonce")}])],
    )
    adapter, raw = _adapter(TimemarkContainerAdapter, data)
    assert adapter.message_imprint(raw.signatures[0]) == base64.b64encode(b"tm-nonce").decode()


def test_timestamp_profile_imprint_from_timestamp(make_raw, raw_signature, make_ocsp, make_cert):
    data = make_raw(
        document_format="ASICE_TM",
        signatures=[raw_signature(
            profile="LT",
            revocations=[{"response": make_ocsp(b"ignored")}],
            timestamps=[{"certificate": make_cert("DEMO SK TIMESTAMPING AUTHORITY"), "message_imprint": "TST-IMPRINT"}],
        )],
    )
    adapter, raw = _adapter(TimemarkContainerAdapter, data)
    sig = raw.signatures[0]
    assert adapter.message_imprint(sig) == "TST-IMPRINT"
    extras = adapter.extra_certificates(sig)
    assert [(c.type, c.common_name) for c in extras] == [
        (CertificateType.SIGNATURE_TIMESTAMP, "DEMO SK TIMESTAMPING AUTHORITY"),
    ]


# ---------- DIGIDOC-XML ----------

def test_digidoc_form_and_format(make_raw):
    adapter, raw = _adapter(DigidocXmlAdapter, make_raw(document_format="DDOC", container_type=None, format_version="1.3"))
    assert adapter.signature_form() == "DIGIDOC_XML_1.3"
    assert adapter.signature_format(raw.signatures[0]) == "DIGIDOC_XML_1.3"
    assert adapter.applies_level_policy is False


def test_digidoc_hashcode_form(make_raw):
    adapter, _ = _adapter(DigidocXmlAdapter, make_raw(document_format="DDOC", format_version="1.3", hashcode=True))
    assert adapter.signature_form() == "DIGIDOC_XML_1.3_hashcode"


def test_digidoc_missing_xmlns_is_warning(make_raw, raw_signature):
    """Error 173 (alternate digest matches) is reported as a warning and does not fail the signature."""
    message = "Bad digest for DataFile: D0 alternate digest matches!"
    data = make_raw(
        document_format="DDOC",
        format_version="1.3",
        signatures=[raw_signature(indication="TOTAL_FAILED", errors=[{"message": message, "code": 173}])],
    )
    adapter, raw = _adapter(DigidocXmlAdapter, data)
    sig = raw.signatures[0]
    assert adapter.signature_errors(sig) == []
    assert adapter.signature_warnings(sig) == [message]
    assert adapter.raw_indication(sig) == "TOTAL_PASSED"
    assert adapter.raw_sub_indication(sig) is None
    assert adapter.signature_level_label(sig) == ""


def test_digidoc_other_error_fails(make_raw, raw_signature):
    data = make_raw(
        document_format="DDOC",
        signatures=[raw_signature(errors=[{"message": "Signature value is invalid", "code": 81}])],
    )
    adapter, raw = _adapter(DigidocXmlAdapter, data)
    assert adapter.raw_indication(raw.signatures[0]) == "TOTAL_FAILED"


def test_digidoc_imprint_from_ocsp(make_raw, raw_signature, make_ocsp):
    data = make_raw(document_format="DDOC", signatures=[raw_signature(revocations=[{"response": make_ocsp(b"dd")}])])
    adapter, raw = _adapter(DigidocXmlAdapter, data)
    assert adapter.message_imprint(raw.signatures[0]) == base64.b64encode(b"dd").decode()


# ---------- Generic and detached ----------

def test_generic_uses_engine_values(make_raw, raw_signature, make_cert):
    data = make_raw(
        document_format="PDF",
        container_type=None,
        signatures=[raw_signature(
            qualification="ADESIG_QC",
            signature_format="PAdES_BASELINE_LT",
            timestamps=[{"certificate": make_cert("TSA 1")}, {"certificate": make_cert("TSA 2")}, {}],
        )],
        container_warnings=[{"message": "The trusted list is not well-signed"}],
    )
    adapter, raw = _adapter(GenericContainerAdapter, data)
    sig = raw.signatures[0]
    assert adapter.signature_form() is None
    assert adapter.signature_level_label(sig) == "ADESIG_QC"
    assert adapter.signature_format(sig) == "PAdES_BASELINE_LT"
    assert [c.common_name for c in adapter.extra_certificates(sig)] == ["TSA 1", "TSA 2"]
    assert [w.content for w in adapter.extra_warnings()] == ["The trusted list is not well-signed"]


def test_generic_imprint_falls_back_to_ocsp(make_raw, raw_signature, make_ocsp):
    data = make_raw(signatures=[raw_signature(revocations=[{"response": make_ocsp(b"fallback")}])])
    adapter, raw = _adapter(GenericContainerAdapter, data)
    assert adapter.message_imprint(raw.signatures[0]) == base64.b64encode(b"fallback").decode()


def test_generic_without_evidence_has_empty_imprint(make_raw):
    adapter, raw = _adapter(GenericContainerAdapter, make_raw())
    assert adapter.message_imprint(raw.signatures[0]) == ""


def test_detached_data_files_from_request(make_raw):
    document = ValidationDocument(filename="signatures0.xml", data_files=["test.txt", "other.pdf"])
    adapter, _ = _adapter(DetachedDataAdapter, make_raw(document_format="HASHCODE", container_type=None, data_files=[]), document)
    assert adapter.data_file_names() == ["test.txt", "other.pdf"]
    assert adapter.signature_form() is None
