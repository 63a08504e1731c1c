"""
Serviço: Correspondência entre texto reconhecido e produtos do catálogo
"""
from typing import Dict, List, Optional

from ..utils.text_match import normalize_text, similarity, word_similarity


def _field(product, name):
    if isinstance(product, dict):
        return product.get(name)
    return getattr(product, name, None)


def find_best_product_match(parsed_order: Dict, products) -> Optional[Dict]:
    """
    Melhor produto para um pedido de voz já interpretado.

    Nome ou código exato vale 1.0. Caso contrário a pontuação é a
    proporção de palavras encontradas, com bónus por início do nome,
    categoria e preço próximo. Abaixo de 0.3 não há correspondência.

    Returns:
        {"product": ..., "confidence": float} ou None
    """
    if not products:
        return None

    query = normalize_text(parsed_order.get("name") or "")
    if not query:
        return None

    for product in products:
        code = _field(product, "code")
        if normalize_text(_field(product, "name") or "") == query or (code and normalize_text(code) == query):
            return {"product": product, "confidence": 1.0}

    query_words = [w for w in query.split(" ") if len(w) > 2]
    if not query_words:
        return None

    price = parsed_order.get("price")
    best = None

    for product in products:
        name = normalize_text(_field(product, "name") or "")
        matched = [w for w in query_words if w in name]
        if not matched:
            continue

        score = len(matched) / len(query_words)

        if name.startswith(query):
            score += 0.2

        if query in normalize_text(_field(product, "category") or ""):
            score += 0.1

        product_price = _field(product, "price")
        if price and product_price:
            ratio = abs(product_price - price) / product_price
            if ratio < 0.1:
                score += 0.2
            elif ratio < 0.2:
                score += 0.1

        if best is None or score > best["confidence"]:
            best = {"product": product, "confidence": round(score, 3)}

    if best and best["confidence"] < 0.3:
        return None
    return best


def find_similar_products(recognized_text: str, products, threshold=0.5) -> List[Dict]:
    """
    Produtos parecidos com o texto (Levenshtein por palavra).
    A categoria conta com metade do peso.
    """
    text = normalize_text(recognized_text)
    results = []

    for product in products:
        name_score = word_similarity(normalize_text(_field(product, "name") or ""), text)
        category_score = similarity(normalize_text(_field(product, "category") or ""), text) * 0.5
        score = max(name_score, category_score)
        if score >= threshold:
            results.append({"product": product, "similarity": round(score, 3)})

    results.sort(key=lambda r: r["similarity"], reverse=True)
    return results
