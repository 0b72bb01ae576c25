"""Keyword-driven answers to questions about the user's finances.

``answer`` picks one of five fixed templates by substring match, checking
the rules in order and stopping at the first hit. ``AnswerSlot`` adds the
simulated thinking delay: one pending answer at a time, and a newer
question cancels the older one.
"""

from __future__ import annotations

import asyncio
from typing import Callable

from .aggregate import largest_category
from .logging_setup import get_logger
from .logic import validate_question
from .models import CategoryTotal, Totals

logger = get_logger(__name__)

SAVINGS_KEYWORDS = ("economizar", "gastar menos")
BALANCE_KEYWORDS = ("saldo", "como estou")
INVESTMENT_KEYWORDS = ("investir", "guardar")
CATEGORY_KEYWORDS = ("categoria", "gasto")

POSITIVE_BALANCE_REMARK = "✅ Seu saldo está positivo!"
NEGATIVE_BALANCE_REMARK = "⚠️ Atenção ao seu saldo negativo!"
NO_EXPENSES_MESSAGE = (
    "📈 Análise por categorias:\n"
    "Nenhuma despesa registrada ainda. Adicione despesas para ver a análise."
)


def money(value: float) -> str:
    return f"R$ {value:.2f}"


def _contains_any(text: str, keywords) -> bool:
    return any(keyword in text for keyword in keywords)


def _savings(totals: Totals) -> str:
    return (
        "💡 Com base nos seus dados:\n"
        f"- Seu saldo atual é {money(totals.balance)}\n"
        f"- Você gastou {money(totals.total_expense)} este mês\n"
        "- Sugiro criar um orçamento para controlar melhor seus gastos"
    )


def _balance(totals: Totals) -> str:
    remark = POSITIVE_BALANCE_REMARK if totals.balance > 0 else NEGATIVE_BALANCE_REMARK
    return (
        "📊 Seu panorama financeiro:\n"
        f"• Saldo atual: {money(totals.balance)}\n"
        f"• Receitas totais: {money(totals.total_income)}\n"
        f"• Despesas totais: {money(totals.total_expense)}\n"
        f"{remark}"
    )


def _investment() -> str:
    return (
        "💰 Recomendações de investimento:\n"
        "• Reserve 10-20% da sua renda para investimentos\n"
        "• Comece com fundos conservadores se for iniciante\n"
        "• Considere a renda fixa para segurança"
    )


def _categories(breakdown: list[CategoryTotal]) -> str:
    largest = largest_category(breakdown)
    if largest is None:
        return NO_EXPENSES_MESSAGE
    lines = "\n".join(f"• {entry.category}: {money(entry.total)}" for entry in breakdown)
    return (
        "📈 Análise por categorias:\n"
        f"{lines}\n"
        "\n"
        f"💡 Maior gasto: {largest.category} ({money(largest.total)})"
    )


def _fallback(totals: Totals, transaction_count: int) -> str:
    return (
        f"🤖 Com base nas suas {transaction_count} transações:\n"
        f"• Saldo: {money(totals.balance)}\n"
        f"• Receitas: {money(totals.total_income)}\n"
        f"• Despesas: {money(totals.total_expense)}\n"
        "\n"
        "Dica: Mantenha um registro detalhado para melhor controle!"
    )


def answer(
    question: str,
    totals: Totals,
    breakdown: list[CategoryTotal],
    transaction_count: int,
) -> str:
    text = validate_question(question).lower()

    if _contains_any(text, SAVINGS_KEYWORDS):
        return _savings(totals)
    if _contains_any(text, BALANCE_KEYWORDS):
        return _balance(totals)
    if _contains_any(text, INVESTMENT_KEYWORDS):
        return _investment()
    if _contains_any(text, CATEGORY_KEYWORDS):
        return _categories(breakdown)
    return _fallback(totals, transaction_count)


class AnswerSlot:
    """Holds at most one pending answer.

    ``submit`` sleeps for ``delay`` seconds and then calls ``compute``. A
    second ``submit`` cancels the first, whose caller gets ``None`` back
    instead of a stale answer.
    """

    def __init__(self, delay: float = 1.5):
        self.delay = delay
        self._task: asyncio.Task | None = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    async def _run(self, compute: Callable[[], str]) -> str:
        if self.delay > 0:
            await asyncio.sleep(self.delay)
        return compute()

    async def submit(self, compute: Callable[[], str]) -> str | None:
        if self.pending:
            logger.debug("superseding pending answer")
            self._task.cancel()
        task = asyncio.ensure_future(self._run(compute))
        self._task = task
        try:
            return await task
        except asyncio.CancelledError:
            if self._task is not task:
                return None
            raise
        finally:
            if self._task is task:
                self._task = None

    def cancel(self) -> None:
        if self.pending:
            self._task.cancel()
        self._task = None
