from datetime import datetime

from moloja.services.analytics import monthly_sales_data
from moloja.services.cart import checkout
from moloja.services.receipts import (
    generate_monthly_report_pdf,
    generate_receipt_pdf,
    monthly_insights,
    receipt_filename,
)


def test_receipt_pdf(user, make_product):
    user.name = "Cantina da Esquina"
    user.tax_id = "5417000000"
    user.tax_rate = 14
    user.receipt_show_signature = True
    arroz = make_product(price=500, stock=5)
    sale = checkout(user, [{"product_id": arroz.id, "quantity": 2}], amount_paid=1000,
                    customer={"name": "Ana", "nif": "123"}, notes="Entregar amanhã",
                    date=datetime(2024, 5, 15, 10, 30))

    pdf = generate_receipt_pdf(sale, user)

    assert pdf.getvalue().startswith(b"%PDF")
    assert receipt_filename(sale) == f"recibo-{str(sale.id).zfill(8)}-2024-05-15.pdf"


def test_receipt_without_profile(user, make_product):
    arroz = make_product(price=500, stock=5)
    sale = checkout(user, [{"product_id": arroz.id, "quantity": 1}], amount_paid=500)
    assert generate_receipt_pdf(sale).getvalue().startswith(b"%PDF")


def test_monthly_report_pdf():
    data = monthly_sales_data([(datetime(2024, 3, 2), 1000), (datetime(2024, 3, 9), 250)], 2024, 3)
    pdf = generate_monthly_report_pdf(data, 2024, 3)
    assert pdf.getvalue().startswith(b"%PDF")


def test_monthly_insights_mention_frequency_and_best_day():
    data = monthly_sales_data([(datetime(2024, 3, 2), 1000), (datetime(2024, 3, 9), 250)], 2024, 3)
    insights = monthly_insights(data)
    assert insights[0].startswith("Oportunidade de melhoria")
    assert any(i.startswith("Melhor dia: 02/03") for i in insights)
