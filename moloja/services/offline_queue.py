"""
Serviço: Fila offline do Experta Go
Vendas e despesas por voz guardadas num ficheiro SQLite local até serem
sincronizadas com a base de dados principal.
"""
import logging
import os
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import date, datetime
from typing import Dict, List, Optional

from ..db import db
from ..models import VoiceExpense, VoiceSale

logger = logging.getLogger(__name__)

RECORD_TYPES = ("sale", "expense")

SCHEMA = """
CREATE TABLE IF NOT EXISTS transactions (
    id TEXT PRIMARY KEY,
    type TEXT NOT NULL,
    description TEXT NOT NULL,
    amount REAL NOT NULL DEFAULT 0,
    timestamp TEXT NOT NULL,
    date TEXT NOT NULL,
    synced INTEGER NOT NULL DEFAULT 0,
    user_id INTEGER
);
CREATE INDEX IF NOT EXISTS idx_transactions_date ON transactions(date);
CREATE INDEX IF NOT EXISTS idx_transactions_type ON transactions(type);
CREATE INDEX IF NOT EXISTS idx_transactions_synced ON transactions(synced);
"""


def _row_to_dict(row) -> Dict:
    record = dict(row)
    record["synced"] = bool(record["synced"])
    return record


class OfflineStore:
    """Armazenamento local de transações por sincronizar"""

    def __init__(self, path):
        self.path = str(path)
        folder = os.path.dirname(self.path)
        if folder:
            os.makedirs(folder, exist_ok=True)
        with self._connect() as conn:
            conn.executescript(SCHEMA)

    @contextmanager
    def _connect(self):
        """Uma ligação por operação; commit no fim, fechada sempre"""
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        try:
            with conn:
                yield conn
        finally:
            conn.close()

    def save_record(self, record: Dict) -> Dict:
        """Guarda uma transação nova (sempre por sincronizar)"""
        record_type = record.get("type")
        if record_type not in RECORD_TYPES:
            raise ValueError("Tipo inválido: use 'sale' ou 'expense'")

        description = (record.get("description") or "").strip()
        if not description:
            raise ValueError("Descrição obrigatória")

        amount = float(record.get("amount") or 0)
        if amount < 0:
            raise ValueError("O valor não pode ser negativo")

        now = datetime.now()
        full_record = {
            "id": str(uuid.uuid4()),
            "type": record_type,
            "description": description,
            "amount": amount,
            "timestamp": record.get("timestamp") or now.isoformat(),
            "date": record.get("date") or date.today().isoformat(),
            "synced": False,
            "user_id": record.get("user_id"),
        }

        with self._connect() as conn:
            conn.execute(
                "INSERT INTO transactions (id, type, description, amount, timestamp, date, synced, user_id) "
                "VALUES (?, ?, ?, ?, ?, ?, 0, ?)",
                (
                    full_record["id"],
                    full_record["type"],
                    full_record["description"],
                    full_record["amount"],
                    full_record["timestamp"],
                    full_record["date"],
                    full_record["user_id"],
                ),
            )
        return full_record

    def get_record(self, record_id) -> Optional[Dict]:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM transactions WHERE id = ?", (record_id,)).fetchone()
        return _row_to_dict(row) if row else None

    def get_all_records(self, user_id=None) -> List[Dict]:
        query = "SELECT * FROM transactions"
        params = ()
        if user_id is not None:
            query += " WHERE user_id = ?"
            params = (user_id,)
        with self._connect() as conn:
            rows = conn.execute(query + " ORDER BY timestamp", params).fetchall()
        return [_row_to_dict(r) for r in rows]

    def get_unsynced_records(self, user_id=None) -> List[Dict]:
        query = "SELECT * FROM transactions WHERE synced = 0"
        params = ()
        if user_id is not None:
            query += " AND user_id = ?"
            params = (user_id,)
        with self._connect() as conn:
            rows = conn.execute(query + " ORDER BY timestamp", params).fetchall()
        return [_row_to_dict(r) for r in rows]

    def mark_as_synced(self, record_id) -> bool:
        """Marca como sincronizada; False se não existir"""
        with self._connect() as conn:
            cursor = conn.execute("UPDATE transactions SET synced = 1 WHERE id = ?", (record_id,))
        return cursor.rowcount > 0

    def get_todays_stats(self, today=None, user_id=None) -> Dict:
        """Contagens e somas das vendas e despesas de hoje"""
        today = today or date.today()
        day = today.isoformat() if isinstance(today, date) else str(today)

        query = "SELECT type, COUNT(1) AS total, COALESCE(SUM(amount), 0) AS amount FROM transactions WHERE date = ?"
        params = [day]
        if user_id is not None:
            query += " AND user_id = ?"
            params.append(user_id)
        query += " GROUP BY type"

        with self._connect() as conn:
            rows = {r["type"]: r for r in conn.execute(query, params).fetchall()}

        sales = rows.get("sale")
        expenses = rows.get("expense")
        return {
            "today_sales": sales["total"] if sales else 0,
            "today_expenses": expenses["total"] if expenses else 0,
            "total_revenue": sales["amount"] if sales else 0,
            "total_expenses": expenses["amount"] if expenses else 0,
        }

    def clear_synced_records(self, user_id=None) -> int:
        """Apaga as já sincronizadas; devolve quantas"""
        query = "DELETE FROM transactions WHERE synced = 1"
        params = ()
        if user_id is not None:
            query += " AND user_id = ?"
            params = (user_id,)
        with self._connect() as conn:
            cursor = conn.execute(query, params)
        return cursor.rowcount


def _record_datetime(record):
    """Hora local do registo; timestamps com fuso (ex.: "Z") são convertidos"""
    try:
        when = datetime.fromisoformat(record["timestamp"].replace("Z", "+00:00"))
    except (KeyError, AttributeError, ValueError):
        return datetime.now()
    if when.tzinfo is not None:
        when = when.astimezone().replace(tzinfo=None)
    return when


def sync_offline_records(store: OfflineStore, user) -> Dict:
    """
    Envia as transações por sincronizar para a base de dados.

    Uma única passagem: se um registo falhar fica por sincronizar e
    segue-se para o próximo.
    """
    synced, failed = [], []

    for record in store.get_unsynced_records(user_id=user.id):
        try:
            when = _record_datetime(record)
            if record["type"] == "sale":
                entry = VoiceSale(
                    user_id=user.id,
                    original_voice_input=record["description"],
                    processed_text=record["description"],
                    product_name=record["description"],
                    quantity=1,
                    unit_price=record["amount"],
                    total_amount=record["amount"],
                    is_generic_product=False,
                    correction_pending=True,
                    sale_date=when,
                )
            else:
                entry = VoiceExpense(
                    user_id=user.id,
                    original_voice_input=record["description"],
                    processed_text=record["description"],
                    description=record["description"],
                    amount=record["amount"],
                    is_generic_description=False,
                    correction_pending=True,
                    expense_date=when,
                )
            db.session.add(entry)
            db.session.commit()
            store.mark_as_synced(record["id"])
            synced.append(record["id"])
        except Exception as e:
            db.session.rollback()
            logger.error("Erro ao sincronizar registo offline %s: %s", record["id"], e)
            failed.append(record["id"])

    if synced:
        logger.info("🔄 %d registos offline sincronizados", len(synced))

    return {"synced": synced, "failed": failed}
