"""
Serviço: Pesquisa de produtos
Filtro por vários termos, janela paginada (scroll infinito) e debounce
"""
import threading
from typing import Dict, List, Optional

from ..utils.text_match import normalize_text

INITIAL_DISPLAY_COUNT = 20
LOAD_MORE_STEP = 8
NEAR_BOTTOM_THRESHOLD = 500  # px
DEFAULT_DEBOUNCE_WAIT = 0.3  # segundos


def _field(product, name):
    if isinstance(product, dict):
        return product.get(name)
    return getattr(product, name, None)


def _searchable_text(product) -> str:
    parts = [_field(product, "name"), _field(product, "code"), _field(product, "category")]
    return " ".join(normalize_text(str(p)) for p in parts if p)


def filter_products(products, query: Optional[str]) -> List:
    """
    Devolve os produtos cujo nome, código ou categoria contém todos os termos.
    Sem query devolve a lista completa.
    """
    terms = normalize_text(query or "").split()
    if not terms:
        return list(products)

    return [
        product for product in products
        if all(term in _searchable_text(product) for term in terms)
    ]


def is_near_bottom(scroll_y, viewport_height, page_height, threshold=NEAR_BOTTOM_THRESHOLD) -> bool:
    """True quando o fim da página está a menos de `threshold` px"""
    return scroll_y + viewport_height >= page_height - threshold


class SearchWindow:
    """
    Janela de resultados visíveis.

    Uma nova pesquisa volta a mostrar 20 itens; cada `load_more` perto do
    fim da lista acrescenta mais 8.
    """

    def __init__(self, products, query=""):
        self.products = list(products)
        self.query = ""
        self.display_count = INITIAL_DISPLAY_COUNT
        self._filtered = self.products
        self.set_query(query)

    def set_query(self, query):
        self.query = query or ""
        self.display_count = INITIAL_DISPLAY_COUNT
        self._filtered = filter_products(self.products, self.query)

    def set_products(self, products):
        self.products = list(products)
        self._filtered = filter_products(self.products, self.query)

    @property
    def filtered(self) -> List:
        return self._filtered

    @property
    def visible(self) -> List:
        return self._filtered[:self.display_count]

    @property
    def has_more(self) -> bool:
        return self.display_count < len(self._filtered)

    def load_more(self, near_bottom=True) -> bool:
        """Aumenta a janela; devolve True se cresceu"""
        if not near_bottom or not self.has_more:
            return False
        self.display_count += LOAD_MORE_STEP
        return True


class Debouncer:
    """
    Agrupa chamadas rápidas: só o último valor enviado dentro do intervalo
    chega ao callback.
    """

    def __init__(self, callback, wait=DEFAULT_DEBOUNCE_WAIT):
        self.callback = callback
        self.wait = wait
        self._timer = None
        self._lock = threading.Lock()

    def submit(self, value):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.wait, self.callback, args=(value,))
            self._timer.daemon = True
            self._timer.start()

    def cancel(self):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None and self._timer.is_alive()


def search_products_with_alternatives(products, search_terms) -> List:
    """
    Pesquisa com vários termos alternativos (ex: variações da fala).
    Os primeiros termos pesam mais; devolve os produtos por relevância.
    """
    if not products or not search_terms:
        return []

    scores: Dict[int, float] = {}
    by_key = {}

    for term_index, raw_term in enumerate(search_terms):
        term = normalize_text(raw_term)
        if not term:
            continue
        weight = 1 / (term_index + 1)

        for position, product in enumerate(products):
            name = normalize_text(_field(product, "name") or "")
            category = normalize_text(_field(product, "category") or "")
            code = normalize_text(_field(product, "code") or "")

            score = 0.0
            if name == term or (code and code == term):
                score = 10 * weight
            elif term in name:
                score = 5 * weight
                if name.startswith(term):
                    score += 3 * weight
            elif term in category:
                score = 2 * weight
            elif code and term in code:
                score = 4 * weight

            if score == 0:
                words = [w for w in term.split(" ") if len(w) > 2]
                name_words = name.split(" ")
                matched = [w for w in words if any(w in nw for nw in name_words)]
                if matched:
                    score = len(matched) / len(words) * 3 * weight

            if score > 0:
                key = _field(product, "id")
                if key is None:
                    key = position
                by_key[key] = product
                scores[key] = scores.get(key, 0) + score

    ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
    return [by_key[key] for key, _ in ranked]
