"""
Serviço: Catálogo de exemplo por módulo (talho / supermercado)
Importado uma vez quando o utilizador escolhe o módulo
"""
import logging
from typing import Dict

from ..db import db
from ..models import MeatCut, SupermarketProduct

logger = logging.getLogger(__name__)

SAMPLE_MEAT_CUTS = [
    {"name": "Lombo de Vaca", "animal_type": "beef", "price_per_kg": 3500, "cost_per_kg": 2800, "stock_weight": 35.5,
     "description": "Corte premium do lombo bovino, ideal para bifes e assados especiais", "barcode": "BF001"},
    {"name": "Picanha", "animal_type": "beef", "price_per_kg": 4200, "cost_per_kg": 3400, "stock_weight": 28.2,
     "description": "Corte nobre e suculento, perfeito para churrascos", "barcode": "BF002"},
    {"name": "Alcatra", "animal_type": "beef", "price_per_kg": 3800, "cost_per_kg": 3000, "stock_weight": 42.8,
     "description": "Corte versátil da parte traseira, ótimo para bifes e assados", "barcode": "BF003"},
    {"name": "T-bone", "animal_type": "beef", "price_per_kg": 4500, "cost_per_kg": 3600, "stock_weight": 18.5,
     "description": "Bife com osso em formato de T", "barcode": "BF004"},
    {"name": "Acém", "animal_type": "beef", "price_per_kg": 2800, "cost_per_kg": 2200, "stock_weight": 56.7,
     "description": "Corte macio e saboroso, ideal para estufados e cozidos", "barcode": "BF005"},
    {"name": "Lombo de Porco", "animal_type": "pork", "price_per_kg": 2600, "cost_per_kg": 2000, "stock_weight": 40.2,
     "description": "Corte magro do lombo, ideal para assados e bifes", "barcode": "PK001"},
    {"name": "Costeletas de Porco", "animal_type": "pork", "price_per_kg": 2400, "cost_per_kg": 1900, "stock_weight": 52.5,
     "description": "Cortes com osso, perfeitos para grelhados e fritos", "barcode": "PK002"},
    {"name": "Peito de Frango", "animal_type": "chicken", "price_per_kg": 1800, "cost_per_kg": 1400, "stock_weight": 65.8,
     "description": "Corte magro e versátil, ideal para grelhados e refogados", "barcode": "CH001"},
    {"name": "Coxas de Frango", "animal_type": "chicken", "price_per_kg": 1600, "cost_per_kg": 1200, "stock_weight": 72.3,
     "description": "Parte saborosa da perna, ótima para assados e fritos", "barcode": "CH002"},
    {"name": "Pernil de Cordeiro", "animal_type": "lamb", "price_per_kg": 3800, "cost_per_kg": 3000, "stock_weight": 28.4,
     "description": "Corte nobre da perna, ideal para assados festivos", "barcode": "LM001"},
]

SAMPLE_SUPERMARKET_PRODUCTS = [
    {"name": "Arroz Agulha 5kg", "category_type": "groceries", "price": 4500, "cost": 3600, "stock": 40,
     "barcode": "SM001", "brand": "Tio Lucas", "unit": "saco"},
    {"name": "Fuba de Milho 1kg", "category_type": "groceries", "price": 650, "cost": 480, "stock": 80,
     "barcode": "SM002", "unit": "unidade"},
    {"name": "Feijão Manteiga 1kg", "category_type": "groceries", "price": 1200, "cost": 900, "stock": 35,
     "barcode": "SM003", "unit": "unidade"},
    {"name": "Óleo Vegetal 1L", "category_type": "groceries", "price": 1500, "cost": 1150, "stock": 50,
     "barcode": "SM004", "unit": "garrafa"},
    {"name": "Leite UHT 1L", "category_type": "dairy", "price": 900, "cost": 700, "stock": 60,
     "barcode": "SM005", "unit": "pacote"},
    {"name": "Queijo Flamengo 200g", "category_type": "dairy", "price": 2200, "cost": 1700, "stock": 15,
     "barcode": "SM006", "unit": "unidade"},
    {"name": "Pão de Forma", "category_type": "bakery", "price": 800, "cost": 550, "stock": 25,
     "barcode": "SM007", "unit": "unidade"},
    {"name": "Água Mineral 1.5L", "category_type": "beverages", "price": 300, "cost": 200, "stock": 120,
     "barcode": "SM008", "unit": "garrafa"},
    {"name": "Sumo de Laranja 1L", "category_type": "beverages", "price": 1100, "cost": 800, "stock": 30,
     "barcode": "SM009", "unit": "pacote"},
    {"name": "Sabão em Pó 1kg", "category_type": "household", "price": 1800, "cost": 1350, "stock": 20,
     "barcode": "SM010", "unit": "unidade"},
    {"name": "Pasta de Dentes", "category_type": "personal", "price": 750, "cost": 520, "stock": 45,
     "barcode": "SM011", "unit": "unidade"},
    {"name": "Bolacha Maria", "category_type": "snacks", "price": 450, "cost": 300, "stock": 70,
     "barcode": "SM012", "unit": "pacote"},
]


def import_sample_data(user, module) -> Dict:
    """
    Insere o catálogo de exemplo do módulo.
    Itens cujo código de barras já existe para o utilizador são ignorados.
    """
    if module == "butcher":
        model, samples = MeatCut, SAMPLE_MEAT_CUTS
    elif module == "supermarket":
        model, samples = SupermarketProduct, SAMPLE_SUPERMARKET_PRODUCTS
    else:
        raise ValueError(f"Módulo inválido: {module}")

    existing = {
        barcode for (barcode,) in
        db.session.query(model.barcode).filter(model.user_id == user.id, model.barcode.isnot(None)).all()
    }

    created = 0
    for sample in samples:
        if sample["barcode"] in existing:
            continue
        db.session.add(model(user_id=user.id, **sample))
        created += 1

    db.session.commit()
    logger.info("📦 Dados de exemplo (%s): %d criados, %d já existiam", module, created, len(samples) - created)
    return {"module": module, "created": created, "skipped": len(samples) - created}
