import threading

from moloja.services.product_search import (
    INITIAL_DISPLAY_COUNT,
    LOAD_MORE_STEP,
    Debouncer,
    SearchWindow,
    filter_products,
    is_near_bottom,
    search_products_with_alternatives,
)

PRODUCTS = [
    {"id": 1, "name": "Arroz Tio Lucas 1kg", "code": "ARZ01", "category": "Alimentos Básicos"},
    {"id": 2, "name": "Açúcar Refinado", "code": "ACU01", "category": "Alimentos Básicos"},
    {"id": 3, "name": "Leite Nido", "code": "LT01", "category": "Laticínios"},
    {"id": 4, "name": "Sumo Compal Manga", "code": None, "category": "Bebidas"},
]


class TestFilterProducts:
    def test_all_terms_must_match(self):
        result = filter_products(PRODUCTS, "arroz 1kg")
        assert [p["id"] for p in result] == [1]

    def test_accent_and_case_insensitive(self):
        assert [p["id"] for p in filter_products(PRODUCTS, "ACUCAR")] == [2]
        assert [p["id"] for p in filter_products(PRODUCTS, "laticinios")] == [3]

    def test_matches_code_and_category(self):
        assert [p["id"] for p in filter_products(PRODUCTS, "lt01")] == [3]
        assert [p["id"] for p in filter_products(PRODUCTS, "basicos")] == [1, 2]

    def test_empty_query_returns_everything(self):
        assert filter_products(PRODUCTS, "") == PRODUCTS
        assert filter_products(PRODUCTS, None) == PRODUCTS

    def test_no_match(self):
        assert filter_products(PRODUCTS, "arroz leite") == []


class TestSearchWindow:
    def _many(self, n):
        return [{"id": i, "name": f"Produto {i}", "category": "Outros"} for i in range(n)]

    def test_initial_window(self):
        window = SearchWindow(self._many(50))
        assert len(window.visible) == INITIAL_DISPLAY_COUNT
        assert window.has_more

    def test_load_more_grows_by_step(self):
        window = SearchWindow(self._many(50))
        assert window.load_more() is True
        assert len(window.visible) == INITIAL_DISPLAY_COUNT + LOAD_MORE_STEP

    def test_load_more_only_near_bottom(self):
        window = SearchWindow(self._many(50))
        assert window.load_more(near_bottom=False) is False
        assert len(window.visible) == INITIAL_DISPLAY_COUNT

    def test_new_query_resets_window(self):
        window = SearchWindow(self._many(50))
        window.load_more()
        window.set_query("produto")
        assert window.display_count == INITIAL_DISPLAY_COUNT

    def test_stops_when_everything_is_visible(self):
        window = SearchWindow(self._many(22))
        assert window.load_more() is True
        assert not window.has_more
        assert window.load_more() is False
        assert len(window.visible) == 22

    def test_visible_items_match_query(self):
        window = SearchWindow(PRODUCTS, "manga")
        assert [p["id"] for p in window.visible] == [4]


def test_is_near_bottom():
    assert is_near_bottom(scroll_y=1600, viewport_height=800, page_height=2800)
    assert not is_near_bottom(scroll_y=0, viewport_height=800, page_height=2800)


class TestDebouncer:
    def test_only_last_value_is_delivered(self):
        received = []
        done = threading.Event()

        def callback(value):
            received.append(value)
            done.set()

        debouncer = Debouncer(callback, wait=0.05)
        for value in ("a", "ar", "arr", "arroz"):
            debouncer.submit(value)

        assert done.wait(2)
        assert received == ["arroz"]

    def test_cancel(self):
        received = []
        debouncer = Debouncer(received.append, wait=0.05)
        debouncer.submit("x")
        debouncer.cancel()
        assert not debouncer.pending
        assert received == []


class TestSearchWithAlternatives:
    def test_exact_name_ranks_first(self):
        products = [
            {"id": 1, "name": "Leite Nido", "category": "Laticínios"},
            {"id": 2, "name": "Leite", "category": "Laticínios"},
        ]
        result = search_products_with_alternatives(products, ["leite"])
        assert [p["id"] for p in result] == [2, 1]

    def test_first_terms_weigh_more(self):
        result = search_products_with_alternatives(PRODUCTS, ["sumo", "arroz"])
        assert [p["id"] for p in result] == [4, 1]

    def test_no_terms(self):
        assert search_products_with_alternatives(PRODUCTS, []) == []
