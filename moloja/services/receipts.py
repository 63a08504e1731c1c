"""
Serviço: Recibos e relatório mensal em PDF (ReportLab)
"""
import io
from datetime import datetime
from typing import Dict, List

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..utils.formatting import format_currency, format_date

PRIMARY_COLOR = colors.Color(34 / 255, 197 / 255, 94 / 255)
HEADER_GREY = colors.Color(80 / 255, 80 / 255, 80 / 255)

WEEKDAYS = ["segunda-feira", "terça-feira", "quarta-feira", "quinta-feira", "sexta-feira", "sábado", "domingo"]
MONTHS = [
    "janeiro", "fevereiro", "março", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
]


def _build(title, content) -> io.BytesIO:
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        title=title,
        author="Moloja",
        subject=title,
        creator="Moloja POS",
    )
    doc.build(content)
    buffer.seek(0)
    return buffer


def receipt_filename(sale) -> str:
    """recibo-<id com 8 dígitos>-<AAAA-MM-DD>.pdf"""
    when = sale.date or datetime.now()
    return f"recibo-{str(sale.id).zfill(8)[:8]}-{when.strftime('%Y-%m-%d')}.pdf"


def _company_lines(profile) -> List[str]:
    lines = []
    if profile is None:
        return lines
    if profile.address:
        lines.append(profile.address)
    location = ", ".join(p for p in (profile.company_neighborhood, profile.company_city) if p)
    if location:
        lines.append(location)
    if profile.phone:
        lines.append(f"Tel: {profile.phone}")
    if profile.email:
        lines.append(profile.email)
    if profile.tax_id:
        lines.append(f"NIF: {profile.tax_id}")
    if profile.company_social_media:
        lines.append(profile.company_social_media)
    return lines


def generate_receipt_pdf(sale, profile=None) -> io.BytesIO:
    """Recibo de venda com os dados da empresa do perfil"""
    styles = getSampleStyleSheet()
    currency = (profile.currency if profile and profile.currency else "AOA")

    def money(value):
        return format_currency(value, currency)

    title_style = ParagraphStyle("ReceiptTitle", parent=styles["Heading1"], fontSize=18, alignment=1, spaceAfter=6)
    center_style = ParagraphStyle("ReceiptCenter", parent=styles["Normal"], alignment=1)
    small_style = ParagraphStyle("ReceiptSmall", parent=styles["Normal"], fontSize=8, alignment=1)
    normal = styles["Normal"]

    title = (profile.receipt_title if profile and profile.receipt_title else "RECIBO DE VENDA")
    content = [Paragraph(title, title_style)]

    company_name = profile.name if profile and profile.name else "Moloja"
    content.append(Paragraph(company_name, center_style))
    for line in _company_lines(profile):
        content.append(Paragraph(line, small_style))
    content.append(Spacer(1, 14))

    content.append(Paragraph(f"Venda Nº: {str(sale.id).zfill(8)}", normal))
    content.append(Paragraph(f"Data: {format_date(sale.date)}", normal))

    customer = sale.customer or {}
    content.append(Paragraph(f"Cliente: {sale.customer_name}", normal))
    if customer.get("phone"):
        content.append(Paragraph(f"Telefone: {customer['phone']}", normal))
    if customer.get("email"):
        content.append(Paragraph(f"Email: {customer['email']}", normal))
    if customer.get("nif"):
        content.append(Paragraph(f"NIF do cliente: {customer['nif']}", normal))
    content.append(Paragraph(f"Método de Pagamento: {sale.payment_method or 'Dinheiro'}", normal))
    content.append(Spacer(1, 12))

    table_data = [["Produto", "Quantidade", "Preço Unit.", "Total"]]
    for item in sale.items:
        table_data.append([item.name, str(item.quantity), money(item.unit_price), money(item.subtotal)])

    table = Table(table_data, repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_GREY),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("ALIGN", (1, 1), (-1, -1), "RIGHT"),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.whitesmoke]),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
    ]))
    content.append(table)
    content.append(Spacer(1, 12))

    totals = [["Subtotal", money(sale.total)]]
    if profile and profile.tax_rate:
        # Preços com imposto incluído
        tax = round(sale.total * profile.tax_rate / (100 + profile.tax_rate), 2)
        totals.append([f"IVA ({profile.tax_rate:g}%) incluído", money(tax)])
    totals.append(["Total", money(sale.total)])
    totals.append(["Valor pago", money(sale.amount_paid)])
    totals.append(["Troco", money(sale.change)])

    totals_table = Table(totals, hAlign="RIGHT")
    totals_table.setStyle(TableStyle([
        ("ALIGN", (1, 0), (1, -1), "RIGHT"),
        ("FONTNAME", (0, len(totals) - 3), (-1, len(totals) - 3), "Helvetica-Bold"),
    ]))
    content.append(totals_table)

    if sale.notes:
        content.append(Spacer(1, 10))
        content.append(Paragraph(f"Observações: {sale.notes}", normal))

    if profile and profile.receipt_additional_info:
        content.append(Spacer(1, 10))
        content.append(Paragraph(profile.receipt_additional_info, small_style))

    if profile and profile.receipt_show_signature:
        content.append(Spacer(1, 30))
        content.append(Paragraph("_______________________________", center_style))
        content.append(Paragraph("Assinatura", small_style))

    content.append(Spacer(1, 20))
    message = (profile.receipt_message if profile and profile.receipt_message else "Obrigado pela sua preferência!")
    content.append(Paragraph(message, small_style))
    if profile and profile.receipt_footer_text:
        content.append(Paragraph(profile.receipt_footer_text, small_style))

    return _build(title, content)


def monthly_insights(data: Dict) -> List[str]:
    """Frases de análise para o relatório mensal"""
    daily = data["daily_sales"]
    insights = []

    working_days = sum(1 for d in daily if d["transaction_count"] > 0)
    frequency = working_days / len(daily) * 100 if daily else 0
    if frequency >= 80:
        insights.append("Excelente consistência: vendas registadas em mais de 80% dos dias do mês.")
    elif frequency >= 50:
        insights.append("Boa frequência: vendas registadas em mais de 50% dos dias do mês.")
    else:
        insights.append("Oportunidade de melhoria: vendas registadas em menos de 50% dos dias.")

    best, worst = data.get("best_day"), data.get("worst_day")
    if best and worst:
        best_date = datetime.fromisoformat(best["date"])
        insights.append(
            f"Melhor dia: {best_date.strftime('%d/%m')} ({WEEKDAYS[best_date.weekday()]}) "
            f"com {format_currency(best['total_revenue'])}"
        )
        if best["date"] != worst["date"]:
            worst_date = datetime.fromisoformat(worst["date"])
            insights.append(
                f"Menor dia: {worst_date.strftime('%d/%m')} ({WEEKDAYS[worst_date.weekday()]}) "
                f"com {format_currency(worst['total_revenue'])}"
            )

    weeks = [daily[i:i + 7] for i in range(0, min(len(daily), 28), 7)]
    averages = [sum(d["total_revenue"] for d in w) / len(w) for w in weeks if w]
    if len(averages) >= 2:
        trend = averages[-1] - averages[0]
        if trend > 0 and averages[0] > 0:
            insights.append(f"Tendência positiva: crescimento de {trend / averages[0] * 100:.1f}% entre a primeira e a última semana.")
        elif trend < 0 and averages[0] > 0:
            insights.append(f"Tendência de declínio: redução de {abs(trend) / averages[0] * 100:.1f}% entre a primeira e a última semana.")
        elif trend == 0:
            insights.append("Vendas estáveis ao longo do mês.")

    return insights


def generate_monthly_report_pdf(data: Dict, year: int, month: int) -> io.BytesIO:
    """Relatório mensal: KPIs, análises e tabela diária"""
    styles = getSampleStyleSheet()
    title = "Relatório Mensal de Vendas"
    title_style = ParagraphStyle("MonthlyTitle", parent=styles["Heading1"], fontSize=20, alignment=1, spaceAfter=4)
    period_style = ParagraphStyle("MonthlyPeriod", parent=styles["Normal"], alignment=1)

    content = [
        Paragraph(title, title_style),
        Paragraph(f"Período: {MONTHS[month - 1]} {year}", period_style),
        Spacer(1, 20),
        Paragraph("Resumo Executivo", styles["Heading2"]),
    ]

    transactions = data["total_transactions"]
    kpis = [
        ["Métrica", "Valor"],
        ["Receita Total do Mês", format_currency(data["total_revenue"])],
        ["Total de Transações", str(transactions)],
        ["Receita Média Diária", format_currency(data["average_daily_revenue"])],
        ["Ticket Médio", format_currency(data["total_revenue"] / transactions) if transactions else "N/A"],
    ]
    kpi_table = Table(kpis, colWidths=[220, 180])
    kpi_table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), PRIMARY_COLOR),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 1), (0, -1), "Helvetica-Bold"),
        ("ALIGN", (1, 1), (1, -1), "RIGHT"),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ]))
    content.extend([kpi_table, Spacer(1, 20), Paragraph("Insights e Análises", styles["Heading2"])])

    for insight in monthly_insights(data):
        content.append(Paragraph(f"• {insight}", styles["Normal"]))
    content.append(Spacer(1, 20))

    content.append(Paragraph("Vendas Diárias", styles["Heading2"]))
    rows = [["Data", "Dia da Semana", "Transações", "Receita"]]
    for day in data["daily_sales"]:
        when = datetime.fromisoformat(day["date"])
        rows.append([
            when.strftime("%d/%m/%Y"),
            WEEKDAYS[when.weekday()],
            str(day["transaction_count"]),
            format_currency(day["total_revenue"]),
        ])
    daily_table = Table(rows, repeatRows=1)
    daily_table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), PRIMARY_COLOR),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("ALIGN", (2, 1), (-1, -1), "RIGHT"),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.whitesmoke]),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
    ]))
    content.append(daily_table)

    return _build(title, content)
