"""
Serviço: Interpretação de frases ditas por voz

- parse_voice_input: nome + preço ("arroz de 500")
- parse_sale_voice_input / parse_expense_voice_input: Experta Go
- parse_voice_order: pedido para o carrinho com quantidade e confiança
- identify_command_type / process_voice_command: comandos da Experta AI
"""
import math
import random
import re
import time
from typing import Dict, Optional

from ..utils.pt_number import normalize_thousands_in_text, parse_pt_number_flexible
from ..utils.text_match import normalize_text, strip_accents

# ============================================
# Helpers
# ============================================

AMOUNT = r"(\d+(?:[,.]\d{1,2})?)"


def _to_float(raw: str) -> float:
    """'12,5' -> 12.5 (valores já sem separador de milhares)"""
    value = parse_pt_number_flexible(raw)
    if math.isnan(value):
        value = float(raw.replace(",", "."))
    return float(value)


def format_amount(value) -> str:
    """500.0 -> '500', 12.5 -> '12.5'"""
    value = float(value)
    return str(int(value)) if value.is_integer() else f"{value:g}"


def _remove_span(text: str, match) -> str:
    return " ".join((text[:match.start()] + " " + text[match.end():]).split())


def generate_generic_product_name() -> str:
    return f"Produto{int(time.time() * 1000)}{random.randint(0, 99)}"


def generate_generic_expense_description() -> str:
    return f"Despesa{int(time.time() * 1000)}{random.randint(0, 99)}"


# ============================================
# Nome + preço
# ============================================

FILLER_WORDS_RE = re.compile(
    r"\b(comprar|adicionar|lista|pendente|pagar|quero|gostaria de|por favor)\b"
)

PRICE_PATTERNS = [
    re.compile(r"\b(?:de|por|custa|vale)\s+(?:kz\s*)?" + AMOUNT + r"(?:\s*(?:kz|kzs|kwanzas?|aoa|reais|real))?\b"),
]


def parse_voice_input(text: str) -> Dict:
    """
    Extrai nome e preço de uma frase.

    Exemplos:
        "arroz de 500" -> {"name": "arroz", "price": 500.0}
        "quero leite"  -> {"name": "leite", "price": None}
    """
    clean = normalize_thousands_in_text((text or "").lower())
    clean = " ".join(FILLER_WORDS_RE.sub(" ", clean).split())

    price = None
    name = clean
    for pattern in PRICE_PATTERNS:
        match = pattern.search(clean)
        if match:
            price = _to_float(match.group(1))
            name = _remove_span(clean, match)
            break

    return {"name": name, "price": price}


# ============================================
# Experta Go: vendas e despesas
# ============================================

SALE_QUANTITY_PATTERNS = [
    re.compile(r"^(\d+)\s+"),
    re.compile(r"\b(\d+)\s+(?:unidades?|unids?|pcs?|peças?|pecas?)\b", re.IGNORECASE),
    re.compile(r"\b(\d+)\s+(?:kg|quilos?|gramas?|g)\b", re.IGNORECASE),
]

LEADING_QUANTITY_RE = re.compile(
    r"^\d+\s+(?:(?:unidades?|unids?|pcs?|peças?|pecas?|pacotes?|caixas?|kg|quilos?|gramas?|g)\s+)?(?:de\s+)?"
)


def parse_sale_voice_input(text: str) -> Dict:
    """
    Venda rápida: "2 pacotes de arroz de 500" -> 2 x arroz a 500 kz.
    Sem nome reconhecível usa um nome genérico (Produto<ts><n>).
    """
    normalized = normalize_thousands_in_text(text or "")
    parsed = parse_voice_input(normalized)

    quantity = 0
    for pattern in SALE_QUANTITY_PATTERNS:
        match = pattern.search(normalized)
        if match:
            quantity = int(match.group(1))
            break
    if quantity <= 0:
        quantity = 1

    name = LEADING_QUANTITY_RE.sub("", parsed["name"]).strip()
    if not name:
        name = generate_generic_product_name()

    price = parsed["price"] or 0.0
    processed = f"{quantity} {name}"
    if price > 0:
        processed += f" de {format_amount(price)} kz cada"

    return {
        "name": name,
        "price": price,
        "quantity": quantity,
        "original_text": text,
        "processed_text": processed,
    }


EXPENSE_AMOUNT_PATTERNS = [
    re.compile(r"\b(?:de|por|custou|paguei|gastei)\s+" + AMOUNT + r"(?:\s*(?:kz|kzs|kwanzas?|aoa|reais?))?\b", re.IGNORECASE),
    re.compile(r"\b" + AMOUNT + r"\s*(?:kz|kzs|kwanzas?|aoa|reais?)\b", re.IGNORECASE),
    re.compile(r"(?:r\$|\bkz)\s*" + AMOUNT + r"\b", re.IGNORECASE),
]

EXPENSE_VERBS_RE = re.compile(r"\b(comprei|gastei|paguei|despesa|custo)\b", re.IGNORECASE)


def parse_expense_voice_input(text: str) -> Dict:
    """
    Despesa rápida: "paguei a luz 15 mil kwanzas" -> luz / 15000.
    """
    normalized = normalize_thousands_in_text(text or "")

    amount = 0.0
    description = normalized
    for pattern in EXPENSE_AMOUNT_PATTERNS:
        match = pattern.search(normalized)
        if match:
            amount = _to_float(match.group(1))
            description = _remove_span(normalized, match)
            break

    description = " ".join(EXPENSE_VERBS_RE.sub(" ", description).split())
    description = re.sub(r"^(?:a|o|as|os|de|da|do|na|no)\s+", "", description, flags=re.IGNORECASE).strip()
    if not description:
        description = generate_generic_expense_description()

    processed = description
    if amount > 0:
        processed += f" de {format_amount(amount)} kz"

    return {
        "description": description,
        "amount": amount,
        "original_text": text,
        "processed_text": processed,
    }


# ============================================
# Pedido por voz para o carrinho
# ============================================

ORDER_FILLER_RE = re.compile(r"\b(quero|adicionar|comprar|colocar|no carrinho|por favor|preciso)\b")

ORDER_PRICE_PATTERNS = [
    re.compile(r"\b(?:de|por|custa|vale|a)\s+(?:r\$\s*|kz\s*)?" + AMOUNT + r"(?:\s*(?:reais|kwanzas?|kzs?|aoa))?\b"),
    re.compile(r"\b" + AMOUNT + r"\s*(?:reais|kwanzas?|kzs?|aoa)\b"),
    re.compile(r"(?:r\$|\bkz)\s*" + AMOUNT + r"\b"),
]

ORDER_UNIT_RE = re.compile(
    r"^(\d+)\s*(unidades|unidade|un|pacotes|pacote|caixas|caixa|kg|kilos|kilo|quilos|quilo|litros|litro|l)\s+(?:de\s+)?(.+)$"
)
ORDER_QUANTITY_RE = re.compile(r"^(\d+)\s+(?:de\s+)?(.+)$")


def parse_voice_order(text: str) -> Dict:
    """
    Interpreta um pedido para o carrinho.

    Returns:
        {"name", "price", "quantity", "unit", "confidence", "original_text"}
        confidence: 0.5 base, 0.6 com quantidade, 0.7 com quantidade e
        unidade; +0.1 quando há preço
    """
    clean = normalize_thousands_in_text((text or "").lower())
    clean = " ".join(ORDER_FILLER_RE.sub(" ", clean).split())

    price: Optional[float] = None
    confidence = 0.5
    quantity = 1
    unit = None

    for pattern in ORDER_PRICE_PATTERNS:
        match = pattern.search(clean)
        # Número no início é quantidade, não preço
        if match and match.start() > 0:
            price = _to_float(match.group(1))
            clean = _remove_span(clean, match)
            break

    name = clean
    match = ORDER_UNIT_RE.match(clean)
    if match:
        quantity = int(match.group(1))
        unit = match.group(2)
        name = match.group(3)
        confidence = 0.7
    else:
        match = ORDER_QUANTITY_RE.match(clean)
        if match:
            quantity = int(match.group(1))
            name = match.group(2)
            confidence = 0.6

    if price is not None:
        confidence += 0.1

    name = re.sub(r"^(?:um|uma|de|da|do)\s+", "", name).strip()

    return {
        "name": name,
        "price": price,
        "quantity": max(quantity, 1),
        "unit": unit,
        "confidence": round(confidence, 2),
        "original_text": text,
    }


# ============================================
# Comandos da Experta AI
# ============================================

ADD_PRODUCT = "add_product"
REGISTER_SALE = "register_sale"
REGISTER_EXPENSE = "register_expense"
CHECK_STOCK = "check_stock"
UNKNOWN = "unknown"

COMMAND_KEYWORDS = {
    ADD_PRODUCT: [
        "adicionar", "adicione", "coloque", "colocar", "inserir", "insira",
        "quero", "comprar", "carrinho", "cesta",
    ],
    REGISTER_SALE: [
        "venda", "vendido", "registrar venda", "registre venda", "nova venda",
        "completar venda", "complete venda", "finalizar venda", "finalize venda",
    ],
    REGISTER_EXPENSE: [
        "despesa", "gasto", "registrar despesa", "registrar gasto", "paguei", "pagamento",
    ],
    CHECK_STOCK: [
        "estoque", "stock", "quantidade", "disponível", "verificar estoque", "quanto tem", "quantos tem",
    ],
}

EXPENSE_CATEGORIES = {
    "Aluguel": ["aluguel", "renda", "casa", "apartamento", "loja", "espaço"],
    "Salários": ["salário", "salario", "funcionário", "funcionarios", "pagamento de pessoal", "folha"],
    "Fornecedores": ["fornecedor", "mercadoria", "produto", "estoque", "reposição", "compra de"],
    "Impostos": ["imposto", "taxa", "tributo", "fiscal", "iva", "iuc"],
    "Serviços": ["luz", "água", "energia", "gás", "internet", "telefone", "serviço"],
    "Manutenção": ["manutenção", "reparo", "conserto", "arrumação", "concerto", "equipamento"],
    "Transporte": ["transporte", "combustível", "gasolina", "diesel", "entrega", "frete"],
}

STOCK_PHRASES = [
    "estoque de", "stock de", "quantidade de", "quanto tem de", "quantos tem de",
    "temos quanto", "temos", "verificar", "checar",
]


def identify_command_type(text: str) -> Dict:
    """Tipo de comando com maior proporção de palavras-chave encontradas"""
    normalized = normalize_text(text)
    best, highest = UNKNOWN, 0.0

    for command_type, keywords in COMMAND_KEYWORDS.items():
        matches = sum(1 for k in keywords if normalize_text(k) in normalized)
        confidence = matches / len(keywords) if matches else 0.0
        if confidence > highest:
            best, highest = command_type, confidence

    # Frase com números ou minimamente longa: provavelmente um produto
    if best == UNKNOWN and (re.search(r"\d+", normalized) or len(normalized) > 3):
        return {"type": ADD_PRODUCT, "confidence": 0.4}

    return {"type": best, "confidence": round(highest, 3)}


def extract_sale_info(text: str) -> Dict:
    normalized = normalize_thousands_in_text(text.lower())

    amount = 0.0
    match = re.search(r"(?:valor|total|venda de|vendido por|vendi por|por)\s+(?:r\$|\$|kz)?\s*([\d.,]*\d)", normalized)
    if match:
        parsed = parse_pt_number_flexible(match.group(1))
        if not math.isnan(parsed):
            amount = float(parsed)

    customer = "Cliente não identificado"
    match = re.search(
        r"(?:ao cliente|cliente|para|comprador)\s+([a-zà-ú\s]+?)(?=\s*(?:pagou|pagando|usando|com|valor|por|\d)|$)",
        normalized,
    )
    if match and match.group(1).strip():
        customer = match.group(1).strip()

    plain = strip_accents(normalized)
    if any(k in plain for k in ("cartao", "credito", "visa", "mastercard", "multicaixa")):
        payment_method = "card"
    elif any(k in plain for k in ("pix", "transferencia", "digital")):
        payment_method = "pix"
    elif "mbway" in plain or "mb way" in plain:
        payment_method = "mbway"
    else:
        payment_method = "cash"

    return {"amount": amount, "customer": customer, "payment_method": payment_method}


def extract_expense_info(text: str) -> Dict:
    normalized = normalize_thousands_in_text(text.lower())

    amount = 0.0
    match = re.search(
        r"(?:valor|despesa de|gasto de|paguei|pagamento de|custa|custou|gastei|custo de)\s+(?:r\$|\$|kz)?\s*([\d.,]*\d)",
        normalized,
    )
    if match:
        parsed = parse_pt_number_flexible(match.group(1))
        if not math.isnan(parsed):
            amount = float(parsed)

    category = "Diversos"
    plain = strip_accents(normalized)
    for name, keywords in EXPENSE_CATEGORIES.items():
        if any(strip_accents(k) in plain for k in keywords):
            category = name
            break

    description = _remove_span(normalized, match) if match else text.strip()
    return {"amount": amount, "category": category, "description": description}


def extract_product_name_for_stock(text: str) -> str:
    lowered = text.lower()
    for phrase in STOCK_PHRASES:
        if phrase in lowered:
            product = lowered.split(phrase, 1)[1].strip()
            if product:
                return product

    cleaned = re.sub(r"estoque|stock|quantidade|disponível|verificar|quanto tem|quantos tem|checar|temos", "", lowered)
    return " ".join(cleaned.split())


def process_voice_command(text: str, products=None) -> Dict:
    """Reconhece o comando e extrai os dados de cada tipo"""
    from .product_match import find_best_product_match

    recognized = identify_command_type(text)
    command = {"type": recognized["type"], "text": text, "confidence": recognized["confidence"], "data": {}}

    if command["type"] == ADD_PRODUCT:
        order = parse_voice_order(text)
        command["data"] = {"order": order}
        if products:
            match = find_best_product_match(order, products)
            if match:
                command["data"]["match"] = match
    elif command["type"] == REGISTER_SALE:
        command["data"] = extract_sale_info(text)
    elif command["type"] == REGISTER_EXPENSE:
        command["data"] = extract_expense_info(text)
    elif command["type"] == CHECK_STOCK:
        command["data"] = {"product_name": extract_product_name_for_stock(text)}

    return command
