"""
Utilidade: formatação de valores para recibos e relatórios (pt-AO)
"""
from datetime import date, datetime

CURRENCY_SYMBOLS = {
    "AOA": "Kz",
    "MZN": "MT",
    "BRL": "R$",
    "EUR": "€",
    "USD": "$",
}


def format_currency(value, currency="AOA"):
    """1234.5 -> '1 234,50 Kz'"""
    value = float(value or 0)
    sign = "-" if value < 0 else ""
    integer, decimals = f"{abs(value):.2f}".split(".")
    groups = []
    while integer:
        groups.insert(0, integer[-3:])
        integer = integer[:-3]
    symbol = CURRENCY_SYMBOLS.get(currency, currency)
    return f"{sign}{' '.join(groups)},{decimals} {symbol}"


def format_date(value):
    """Data no formato dd/mm/aaaa"""
    if value is None:
        return ""
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if isinstance(value, (date, datetime)):
        return value.strftime("%d/%m/%Y")
    return str(value)
