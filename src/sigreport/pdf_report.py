import logging
from io import BytesIO
from typing import List
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from sigreport.models import Indication, SignatureValidationData, ValidationConclusion

logger = logging.getLogger(__name__)

_INDICATION_LABELS = {
    Indication.TOTAL_PASSED: ('green', 'Подпись действительна'),
    Indication.TOTAL_FAILED: ('red', 'Подпись недействительна'),
    Indication.INDETERMINATE: ('orange', 'Результат не определён'),
}


def register_fonts() -> tuple[str, str]:
    try:
        pdfmetrics.registerFont(TTFont('DejaVu', '/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf'))
        pdfmetrics.registerFont(TTFont('DejaVu-Bold', '/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf'))
        return 'DejaVu', 'DejaVu-Bold'
    except Exception as e:
        logger.debug("DejaVu fonts unavailable, falling back to Helvetica: %s", e)
        return 'Helvetica', 'Helvetica-Bold'


def _zwsp_wrap(s: str, step: int = 32) -> str:
    s = s or ""
    if not s:
        return s
    return "\u200b".join([s[i:i + step] for i in range(0, len(s), step)])


def _p(text, style) -> Paragraph:
    return Paragraph(escape(str(text or '')), style)


def _box_style() -> TableStyle:
    return TableStyle([
        ('BOX', (0, 0), (-1, -1), 0.8, colors.black),
        ('INNERGRID', (0, 0), (-1, -1), 0.5, colors.black),
        ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ('SPAN', (0, 0), (-1, 0)),
        ('BACKGROUND', (0, 0), (-1, 0), colors.whitesmoke),
    ])


def _signature_table(index: int, sig: SignatureValidationData, pstyle) -> Table:
    color, label = _INDICATION_LABELS[sig.indication]
    scopes = ', '.join(s.name for s in sig.signature_scopes)
    rows = [
        [Paragraph(f'<b>Подпись №{index}</b>', pstyle), ''],
        [_p('Результат проверки:', pstyle), Paragraph(f'<b><font color={color}>{label}</font></b>', pstyle)],
        [_p('Индикация:', pstyle), _p(f'{sig.indication.value} {sig.sub_indication}'.strip(), pstyle)],
        [_p('Подписант:', pstyle), _p(sig.signed_by, pstyle)],
        [_p('Серийный номер субъекта:', pstyle), _p(sig.subject_distinguished_name.serial_number, pstyle)],
        [_p('Формат подписи:', pstyle), _p(sig.signature_format, pstyle)],
        [_p('Уровень подписи:', pstyle), _p(sig.signature_level, pstyle)],
        [_p('Заявленное время подписи:', pstyle), _p(sig.claimed_signing_time, pstyle)],
        [_p('Лучшее время подписи:', pstyle), _p(sig.info.best_signature_time, pstyle)],
        [_p('Отпечаток метки времени:', pstyle), _p(_zwsp_wrap(sig.info.time_assertion_message_imprint), pstyle)],
        [_p('Подписанные файлы:', pstyle), _p(scopes, pstyle)],
    ]
    for err in sig.errors:
        rows.append([_p('Ошибка:', pstyle), _p(err.content, pstyle)])
    for warn in sig.warnings:
        rows.append([_p('Предупреждение:', pstyle), _p(warn.content, pstyle)])
    tbl = Table(rows, colWidths=[180, 340])
    tbl.setStyle(_box_style())
    return tbl


def build_pdf_report(conclusion: ValidationConclusion) -> bytes:
    """Протокол проверки в PDF по итоговому заключению простого отчёта."""
    base_font, bold_font = register_fonts()

    styles = getSampleStyleSheet()
    styles['Normal'].fontName = base_font
    styles['Normal'].fontSize = 10
    styles['Heading1'].fontName = bold_font
    styles['Heading1'].fontSize = 16
    styles['Heading1'].spaceAfter = 12
    pstyle = ParagraphStyle('P', parent=styles['Normal'], fontName=base_font, fontSize=10, leading=14, wordWrap='CJK')

    buf = BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=A4, leftMargin=24, rightMargin=24, topMargin=24, bottomMargin=24)
    elems: List = [Paragraph("ПРОТОКОЛ ПРОВЕРКИ ЭЛЕКТРОННОЙ ПОДПИСИ", styles['Heading1'])]

    document = conclusion.validated_document
    head_tbl = Table([
        [Paragraph('<b>Документ</b>', pstyle), ''],
        [_p('Файл:', pstyle), _p(document.filename, pstyle)],
        [_p(f'Хэш файла ({document.hash_algo or "-"}):', pstyle), _p(_zwsp_wrap(document.file_hash or ''), pstyle)],
        [_p('Форма подписи:', pstyle), _p(conclusion.signature_form, pstyle)],
        [_p('Политика проверки:', pstyle), _p(conclusion.policy.policy_name, pstyle)],
        [_p('Время проверки:', pstyle), _p(conclusion.validation_time, pstyle)],
        [_p('Действительных подписей:', pstyle),
         _p(f'{conclusion.valid_signatures_count} из {conclusion.signatures_count}', pstyle)],
    ], colWidths=[180, 340])
    head_tbl.setStyle(_box_style())
    elems.append(head_tbl)
    elems.append(Spacer(1, 10))

    for warning in conclusion.validation_warnings:
        elems.append(_p(f'Предупреждение контейнера: {warning.content}', pstyle))
    if conclusion.validation_warnings:
        elems.append(Spacer(1, 10))

    for i, sig in enumerate(conclusion.signatures, start=1):
        elems.append(_signature_table(i, sig, pstyle))
        elems.append(Spacer(1, 10))

    doc.build(elems)
    return buf.getvalue()
