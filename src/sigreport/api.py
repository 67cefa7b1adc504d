import logging
from io import BytesIO
from typing import Dict, List

from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.responses import JSONResponse, StreamingResponse

from sigreport.datafiles import build_data_files_report
from sigreport.errors import ReportError
from sigreport.models import Reports, ReportType
from sigreport.pdf_report import build_pdf_report
from sigreport.raw import ValidationDocument
from sigreport.service import validate_document
from sigreport.settings import get_settings

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Signature Validation Report API")


@app.exception_handler(ReportError)
async def report_error_handler(request: Request, exc: ReportError) -> JSONResponse:
    logger.info("Request %s rejected: %s %s", request.url.path, exc.error_code, exc.message)
    return JSONResponse(status_code=exc.http_status, content=exc.to_dict())


def _requested_layer(reports: Reports, report_type: ReportType) -> Dict:
    if report_type == ReportType.DETAILED:
        return {"validationReport": reports.detailed_report.model_dump(by_alias=True, mode="json")}
    if report_type == ReportType.DIAGNOSTIC:
        return {"validationReport": reports.diagnostic_report.model_dump(by_alias=True, mode="json")}
    return {"validationReport": reports.simple_report.model_dump(by_alias=True, mode="json")}


async def _validate(document: UploadFile, facts: UploadFile, policy: str, report_type: ReportType,
                    data_files: List[str]) -> Reports:
    doc = ValidationDocument(
        filename=document.filename or "document",
        content=await document.read(),
        content_type=document.content_type,
        data_files=data_files,
    )
    return validate_document(doc, await facts.read(), policy_id=policy, report_type=report_type)


@app.post("/api/validate")
async def api_validate(
    document: UploadFile = File(...),
    facts: UploadFile = File(...),
    policy: str = Form(""),
    report_type: ReportType = Form(ReportType.SIMPLE),
    data_files: List[str] = Form([]),
) -> Dict:
    reports = await _validate(document, facts, policy, report_type, data_files)
    return _requested_layer(reports, report_type)


@app.post("/api/report")
async def api_report(
    document: UploadFile = File(...),
    facts: UploadFile = File(...),
    policy: str = Form(""),
    data_files: List[str] = Form([]),
):
    reports = await _validate(document, facts, policy, ReportType.SIMPLE, data_files)
    content = build_pdf_report(reports.simple_report.validation_conclusion)
    return StreamingResponse(BytesIO(content), media_type="application/pdf", headers={
        "Content-Disposition": "attachment; filename=report.pdf"
    })


@app.post("/api/datafiles")
async def api_datafiles(facts: UploadFile = File(...)) -> Dict:
    report = build_data_files_report(await facts.read())
    return report.model_dump(by_alias=True, mode="json")
