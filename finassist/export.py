import csv
from datetime import date
from decimal import Decimal
from io import StringIO

from .logic import EmptyStateError

HEADER = ["Data", "Descrição", "Categoria", "Tipo", "Valor"]


def to_delimited_text(transactions) -> str:
    """Render the ledger as CSV text, newest first.

    Text fields are always quoted and the amount never is. Lines are joined
    with ``\\n`` and the last line has no terminator.
    """
    if not transactions:
        raise EmptyStateError("no transactions to export")

    output = StringIO()
    output.write(",".join(HEADER) + "\n")
    writer = csv.writer(output, quoting=csv.QUOTE_NONNUMERIC, lineterminator="\n")
    for txn in transactions:
        writer.writerow(
            [
                txn.date_display,
                txn.description,
                txn.category,
                txn.kind,
                Decimal(f"{txn.amount:.2f}"),
            ]
        )
    return output.getvalue()[:-1]


def export_filename(today: date | None = None) -> str:
    current = today or date.today()
    return f"financas-{current.strftime('%d-%m-%Y')}.csv"
