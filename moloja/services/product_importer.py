"""
Serviço: Importação de produtos a partir de texto
Formato: "Nome do produto (1 234,56 AOA); Outro produto (500,00 AOA);"
"""
import logging
import re
from typing import Dict, List

logger = logging.getLogger(__name__)

ENTRY_RE = re.compile(r"(.+?)\s*\(([0-9\s.]+,\d+)\s*AOA\)", re.IGNORECASE)

CATEGORY_KEYWORDS = [
    ("Alimentos Básicos", ["Arroz", "Fuba", "Farinha", "Feijão", "Grão"]),
    ("Óleos e Temperos", ["Óleo", "Azeite", "Vinagre"]),
    ("Laticínios", ["Leite", "Manteiga", "Queijo", "Natas"]),
    ("Bolachas e Snacks", ["Bolacha", "Biscoito", "Chocolate"]),
    ("Bebidas", ["Vinho", "Cerveja", "Whisky", "Vodka", "Sumo"]),
    ("Limpeza", ["Pasta", "Sabão", "Detergente", "Lixivia"]),
    ("Higiene", ["Papel", "Guardanapo", "Cotonetes", "Absorvente"]),
    ("Papelaria", ["Caderno", "Lápis", "Caneta", "Marcador"]),
    ("Eletrônicos", ["Cabo", "Carregador", "Comando"]),
]


def guess_category(name: str) -> str:
    for category, keywords in CATEGORY_KEYWORDS:
        if any(k in name for k in keywords):
            return category
    return "Outros"


def parse_product_text(text: str) -> List[Dict]:
    """
    Converte o texto em produtos {name, price, category}.
    Entradas que não seguem o formato são ignoradas.
    """
    products = []
    for entry in (text or "").split(";"):
        entry = entry.strip()
        if not entry:
            continue

        match = ENTRY_RE.search(entry)
        if not match:
            logger.warning("Produto não reconhecido: %s", entry)
            continue

        name = match.group(1).strip()
        price_text = re.sub(r"[\s.]", "", match.group(2)).replace(",", ".")
        products.append({
            "name": name,
            "price": float(price_text),
            "category": guess_category(name),
        })

    return products
