"""
Modelos da base de dados
Um modelo por tabela; cada linha pertence a um utilizador
"""
from .user import User
from .product import Product
from .meat_cut import MeatCut
from .supermarket_product import SupermarketProduct
from .sale import Sale
from .sale_item import SaleItem
from .expense import Expense
from .credit_note import CreditNote
from .voice_order_list import VoiceOrderList
from .voice_sale import VoiceSale
from .voice_expense import VoiceExpense
from .voice_product import VoiceProduct
from .voice_correction import VoiceCorrection
from .speech_correction import SpeechCorrection
from .financial_report import FinancialReport

__all__ = [
    "User",
    "Product",
    "MeatCut",
    "SupermarketProduct",
    "Sale",
    "SaleItem",
    "Expense",
    "CreditNote",
    "VoiceOrderList",
    "VoiceSale",
    "VoiceExpense",
    "VoiceProduct",
    "VoiceCorrection",
    "SpeechCorrection",
    "FinancialReport",
]
