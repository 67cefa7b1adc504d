"""Выбор проверки контейнера и адаптера формата по метаданным результата движка."""

import logging

from sigreport.adapters import (
    ContainerFormatAdapter,
    DetachedDataAdapter,
    DigidocXmlAdapter,
    GenericContainerAdapter,
    TimemarkContainerAdapter,
)
from sigreport.container import NO_OP_VALIDATOR, ContainerValidator, DataFileSizeValidator
from sigreport.policies import PolicyDefinition
from sigreport.raw import RawValidationResult, ValidationDocument

logger = logging.getLogger(__name__)

ASIC_CONTAINER_TYPES = {"ASIC-E", "ASIC-S"}

TIMEMARK_FORMATS = {"BDOC", "ASICE_TM"}
DIGIDOC_FORMATS = {"DDOC"}
DETACHED_FORMATS = {"HASHCODE"}


def _upper(value) -> str:
    return (value or "").strip().upper()


def is_asic_container(raw: RawValidationResult) -> bool:
    return _upper(raw.container_type) in ASIC_CONTAINER_TYPES


def container_validator_for(raw: RawValidationResult, document: ValidationDocument) -> ContainerValidator:
    if is_asic_container(raw):
        logger.debug("Archive data file check enabled for %s (%s)", document.filename, raw.container_type)
        return DataFileSizeValidator(raw.data_files)
    return NO_OP_VALIDATOR


def adapter_for(
    raw: RawValidationResult,
    document: ValidationDocument,
    policy: PolicyDefinition,
) -> ContainerFormatAdapter:
    document_format = _upper(raw.document_format)
    if document_format in TIMEMARK_FORMATS:
        adapter_cls = TimemarkContainerAdapter
    elif document_format in DIGIDOC_FORMATS:
        adapter_cls = DigidocXmlAdapter
    elif document_format in DETACHED_FORMATS:
        adapter_cls = DetachedDataAdapter
    else:
        adapter_cls = GenericContainerAdapter
    return adapter_cls(raw, document, policy)
