import pytest

from moloja.services.product_match import find_best_product_match, find_similar_products
from moloja.services.speech_corrections import apply_known_corrections
from moloja.services.voice_parser import (
    ADD_PRODUCT,
    CHECK_STOCK,
    REGISTER_EXPENSE,
    REGISTER_SALE,
    extract_expense_info,
    extract_sale_info,
    identify_command_type,
    parse_expense_voice_input,
    parse_sale_voice_input,
    parse_voice_input,
    parse_voice_order,
    process_voice_command,
)


class TestParseVoiceInput:
    def test_name_and_price(self):
        assert parse_voice_input("arroz de 500") == {"name": "arroz", "price": 500.0}

    def test_spelled_out_price(self):
        assert parse_voice_input("óleo por dois mil") == {"name": "óleo", "price": 2000.0}

    def test_filler_words_removed(self):
        assert parse_voice_input("quero leite") == {"name": "leite", "price": None}


class TestParseSaleVoiceInput:
    def test_quantity_name_and_price(self):
        result = parse_sale_voice_input("2 pacotes de arroz de 500")
        assert result["quantity"] == 2
        assert result["name"] == "arroz"
        assert result["price"] == 500
        assert result["processed_text"] == "2 arroz de 500 kz cada"

    def test_default_quantity(self):
        result = parse_sale_voice_input("pão de 100")
        assert result["quantity"] == 1
        assert result["name"] == "pão"

    def test_thousands_in_price(self):
        assert parse_sale_voice_input("gasosa de 1.500")["price"] == 1500

    def test_generic_name_when_missing(self):
        result = parse_sale_voice_input("de 300")
        assert result["name"].startswith("Produto")
        assert result["price"] == 300


class TestParseExpenseVoiceInput:
    def test_amount_with_currency(self):
        result = parse_expense_voice_input("paguei a luz 15 mil kwanzas")
        assert result["amount"] == 15000
        assert result["description"] == "luz"
        assert result["processed_text"] == "luz de 15000 kz"

    def test_amount_after_verb(self):
        result = parse_expense_voice_input("transporte gastei 200")
        assert result["amount"] == 200
        assert result["description"] == "transporte"

    def test_generic_description(self):
        result = parse_expense_voice_input("gastei 500")
        assert result["description"].startswith("Despesa")
        assert result["amount"] == 500


class TestParseVoiceOrder:
    def test_quantity_and_unit(self):
        order = parse_voice_order("quero 2 kg de arroz")
        assert order["quantity"] == 2
        assert order["unit"] == "kg"
        assert order["name"] == "arroz"
        assert order["confidence"] == 0.7

    def test_price_raises_confidence(self):
        order = parse_voice_order("3 sabonetes a 250 kz")
        assert order["quantity"] == 3
        assert order["price"] == 250
        assert order["name"] == "sabonetes"
        assert order["confidence"] == 0.7

    def test_name_only(self):
        order = parse_voice_order("leite")
        assert order == {
            "name": "leite", "price": None, "quantity": 1, "unit": None,
            "confidence": 0.5, "original_text": "leite",
        }


class TestProductMatch:
    products = [
        {"id": 1, "name": "Arroz Tio Lucas", "code": "ARZ01", "category": "Alimentos", "price": 500},
        {"id": 2, "name": "Leite Nido", "code": "LT01", "category": "Laticínios", "price": 1200},
    ]

    def test_exact_code(self):
        match = find_best_product_match({"name": "lt01"}, self.products)
        assert match["product"]["id"] == 2
        assert match["confidence"] == 1.0

    def test_partial_words(self):
        match = find_best_product_match({"name": "arroz", "price": 500}, self.products)
        assert match["product"]["id"] == 1

    def test_no_match(self):
        assert find_best_product_match({"name": "sabão"}, self.products) is None

    def test_similar_products_tolerate_typos(self):
        similar = find_similar_products("aroz", self.products)
        assert similar and similar[0]["product"]["id"] == 1


class TestCommands:
    @pytest.mark.parametrize("text,expected", [
        ("registrar venda de 5000 ao cliente joão", REGISTER_SALE),
        ("registrar despesa de luz", REGISTER_EXPENSE),
        ("verificar estoque de arroz", CHECK_STOCK),
        ("adicionar arroz no carrinho", ADD_PRODUCT),
    ])
    def test_identify_command_type(self, text, expected):
        assert identify_command_type(text)["type"] == expected

    def test_unrecognised_text_falls_back_to_product(self):
        assert identify_command_type("feijão") == {"type": ADD_PRODUCT, "confidence": 0.4}

    def test_extract_sale_info(self):
        info = extract_sale_info("venda de dois mil para maria pagou com cartão")
        assert info["amount"] == 2000
        assert info["customer"] == "maria"
        assert info["payment_method"] == "card"

    def test_extract_expense_info(self):
        info = extract_expense_info("despesa de 3.500 com combustível")
        assert info["amount"] == 3500
        assert info["category"] == "Transporte"

    def test_check_stock_extracts_product(self):
        command = process_voice_command("verificar estoque de arroz")
        assert command["data"] == {"product_name": "arroz"}


def test_known_speech_corrections():
    assert apply_known_corrections("2 que bom de 3000") == "2 tibone de 3000"
