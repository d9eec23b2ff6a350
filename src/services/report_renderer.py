"""
Weekly report — rendering.

Turns the dict from get_weekly_report_data() into an HTML page or an
Excel workbook the owner can hand to the accountant. Amounts are shown
the Brazilian way: R$ 1.234,56.
"""

import io
import logging
from datetime import datetime
from html import escape

from config.settings import BUSINESS_DISPLAY_NAME
from src.services.dates import format_local

log = logging.getLogger(__name__)

PAYMENT_LABELS = {"pix": "Pix", "cash": "Dinheiro"}


def format_brl(value) -> str:
    """12345.6 → 'R$ 12.345,60'; negatives keep their sign: '-R$ 50,00'."""
    value = float(value or 0)
    sign = "-" if value < 0 else ""
    grouped = f"{abs(value):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sign}R$ {grouped}"


def render_report_html(report: dict, business_name: str | None = None, generated_at: datetime | None = None) -> str:
    """Render the weekly report as a standalone HTML page."""
    summary = report["summary"]
    week = report["week"]
    title = escape(business_name or BUSINESS_DISPLAY_NAME)
    profit_color = "#059669" if summary["net_profit"] >= 0 else "#DC2626"

    employee_rows = ""
    for emp in summary["per_employee"]:
        employee_rows += f"""
            <tr style="border-bottom:1px solid #F3F4F6;">
                <td style="padding:6px 8px;font-size:13px;">{escape(emp['employee_name'])}</td>
                <td style="padding:6px 8px;font-size:13px;text-align:right;">{format_brl(emp['total'])}</td>
                <td style="padding:6px 8px;font-size:13px;text-align:right;">{emp['commission_percent']:g}%</td>
                <td style="padding:6px 8px;font-size:13px;text-align:right;font-weight:bold;">{format_brl(emp['commission'])}</td>
            </tr>"""

    day_rows = ""
    for day in summary["per_day"]:
        balance_color = "#059669" if day["balance"] >= 0 else "#DC2626"
        day_rows += f"""
            <tr style="border-bottom:1px solid #F3F4F6;">
                <td style="padding:6px 8px;font-size:13px;font-weight:bold;">{day['day_label']}</td>
                <td style="padding:6px 8px;font-size:13px;text-align:right;">{day['job_count']}</td>
                <td style="padding:6px 8px;font-size:13px;text-align:right;">{format_brl(day['revenue'])}</td>
                <td style="padding:6px 8px;font-size:13px;text-align:right;">{format_brl(day['expenses'])}</td>
                <td style="padding:6px 8px;font-size:13px;text-align:right;color:{balance_color};">{format_brl(day['balance'])}</td>
            </tr>"""

    return f"""<!DOCTYPE html>
<html lang="pt-BR">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1.0">
<title>{title} — Relatório Semanal</title>
</head>
<body style="margin:0;padding:0;background:#F3F4F6;font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',Roboto,sans-serif;">
<div style="max-width:640px;margin:0 auto;padding:24px;">

    <div style="background:#1E293B;color:white;padding:24px;border-radius:8px 8px 0 0;">
        <h1 style="margin:0;font-size:22px;">Relatório Semanal</h1>
        <p style="margin:8px 0 0;opacity:0.85;font-size:14px;">{title} · {week['start_label']} a {week['end_label']}</p>
    </div>

    <div style="background:white;padding:20px 24px;border-bottom:1px solid #E5E7EB;">
        <table width="100%" cellpadding="0" cellspacing="0" style="font-size:14px;">
        <tr>
            <td style="text-align:center;padding:0 8px;">
                <div style="font-size:22px;font-weight:bold;color:#1E293B;">{format_brl(summary['total_revenue'])}</div>
                <div style="color:#6B7280;font-size:12px;">Faturamento</div>
            </td>
            <td style="text-align:center;padding:0 8px;">
                <div style="font-size:22px;font-weight:bold;color:#1E293B;">{format_brl(summary['total_expenses'])}</div>
                <div style="color:#6B7280;font-size:12px;">Despesas</div>
            </td>
            <td style="text-align:center;padding:0 8px;">
                <div style="font-size:22px;font-weight:bold;color:#1E293B;">{format_brl(summary['total_commissions'])}</div>
                <div style="color:#6B7280;font-size:12px;">Comissões</div>
            </td>
            <td style="text-align:center;padding:0 8px;">
                <div style="font-size:22px;font-weight:bold;color:{profit_color};">{format_brl(summary['net_profit'])}</div>
                <div style="color:#6B7280;font-size:12px;">Lucro Líquido</div>
            </td>
        </tr>
        </table>
    </div>

    <div style="background:white;padding:24px;">
        <h2 style="margin:0 0 12px;font-size:16px;color:#1E293B;">Desempenho dos Funcionários</h2>
        <table width="100%" cellpadding="0" cellspacing="0">
            <tr style="border-bottom:2px solid #E5E7EB;">
                <th style="padding:6px 8px;font-size:12px;color:#6B7280;text-align:left;">Funcionário</th>
                <th style="padding:6px 8px;font-size:12px;color:#6B7280;text-align:right;">Total</th>
                <th style="padding:6px 8px;font-size:12px;color:#6B7280;text-align:right;">%</th>
                <th style="padding:6px 8px;font-size:12px;color:#6B7280;text-align:right;">Comissão</th>
            </tr>
            {employee_rows}
        </table>
    </div>

    <div style="background:white;padding:24px;border-radius:0 0 8px 8px;">
        <h2 style="margin:0 0 12px;font-size:16px;color:#1E293B;">Resumo por Dia</h2>
        <table width="100%" cellpadding="0" cellspacing="0">
            <tr style="border-bottom:2px solid #E5E7EB;">
                <th style="padding:6px 8px;font-size:12px;color:#6B7280;text-align:left;">Dia</th>
                <th style="padding:6px 8px;font-size:12px;color:#6B7280;text-align:right;">Lavagens</th>
                <th style="padding:6px 8px;font-size:12px;color:#6B7280;text-align:right;">Entradas</th>
                <th style="padding:6px 8px;font-size:12px;color:#6B7280;text-align:right;">Despesas</th>
                <th style="padding:6px 8px;font-size:12px;color:#6B7280;text-align:right;">Saldo</th>
            </tr>
            {day_rows}
            <tr style="border-top:2px solid #E5E7EB;">
                <td style="padding:6px 8px;font-size:13px;font-weight:bold;">Total</td>
                <td style="padding:6px 8px;font-size:13px;text-align:right;">{summary['job_count']}</td>
                <td style="padding:6px 8px;font-size:13px;text-align:right;font-weight:bold;">{format_brl(summary['week_revenue'])}</td>
                <td style="padding:6px 8px;font-size:13px;text-align:right;font-weight:bold;">{format_brl(summary['week_expenses'])}</td>
                <td style="padding:6px 8px;font-size:13px;text-align:right;font-weight:bold;">{format_brl(summary['week_balance'])}</td>
            </tr>
        </table>
    </div>

    <div style="text-align:center;padding:16px;color:#9CA3AF;font-size:12px;">
        Gerado em {(generated_at or datetime.now()).strftime('%d/%m/%Y às %H:%M')}
    </div>

</div>
</body>
</html>"""


def build_report_workbook(report: dict) -> bytes:
    """Excel (.xlsx) export: one sheet per breakdown plus the raw records."""
    import openpyxl
    from openpyxl.styles import Alignment, Font, PatternFill
    from openpyxl.utils import get_column_letter

    header_font = Font(bold=True, color="FFFFFF")
    header_fill = PatternFill(start_color="1E293B", end_color="1E293B", fill_type="solid")
    money = '"R$" #,##0.00'

    def write_sheet(ws, headers, rows, money_cols=()):
        for col, header in enumerate(headers, 1):
            cell = ws.cell(row=1, column=col, value=header)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = Alignment(horizontal="center")
        for r, values in enumerate(rows, 2):
            for c, value in enumerate(values, 1):
                cell = ws.cell(row=r, column=c, value=value)
                if c in money_cols:
                    cell.number_format = money
        for col in range(1, len(headers) + 1):
            ws.column_dimensions[get_column_letter(col)].width = 18

    summary = report["summary"]
    week = report["week"]

    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Resumo"
    write_sheet(ws, ["Semana", "Faturamento", "Despesas", "Comissões", "Lucro Líquido"], [[
        f"{format_local(week['start_date'])} a {format_local(week['end_date'])}",
        summary["total_revenue"],
        summary["total_expenses"],
        summary["total_commissions"],
        summary["net_profit"],
    ]], money_cols=(2, 3, 4, 5))

    write_sheet(
        wb.create_sheet("Por Dia"),
        ["Dia", "Lavagens", "Entradas", "Despesas", "Saldo"],
        [[d["day_label"], d["job_count"], d["revenue"], d["expenses"], d["balance"]] for d in summary["per_day"]],
        money_cols=(3, 4, 5),
    )
    write_sheet(
        wb.create_sheet("Funcionários"),
        ["Funcionário", "Total", "Comissão %", "Comissão"],
        [[e["employee_name"], e["total"], e["commission_percent"], e["commission"]] for e in summary["per_employee"]],
        money_cols=(2, 4),
    )
    write_sheet(
        wb.create_sheet("Lavagens"),
        ["Data", "Funcionário", "Descrição", "Pagamento", "Preço"],
        [
            [format_local(j["performed_on"]), j["employee_name"], j["description"],
             PAYMENT_LABELS.get(j["payment_method"], ""), j["price"]]
            for j in report["jobs"]
        ],
        money_cols=(5,),
    )
    write_sheet(
        wb.create_sheet("Despesas"),
        ["Data", "Descrição", "Observações", "Valor"],
        [[format_local(e["incurred_on"]), e["description"], e["notes"] or "", e["amount"]] for e in report["expenses"]],
        money_cols=(4,),
    )

    buf = io.BytesIO()
    wb.save(buf)
    log.info("Built weekly workbook for %s..%s", week["start_date"], week["end_date"])
    return buf.getvalue()
