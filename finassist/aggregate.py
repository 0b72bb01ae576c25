from .models import CategoryTotal, Totals


def compute_totals(transactions) -> Totals:
    income = 0.0
    expense = 0.0
    for txn in transactions:
        if txn.kind == "income":
            income += txn.amount
        elif txn.kind == "expense":
            expense += txn.amount
    return Totals(balance=income - expense, total_income=income, total_expense=expense)


def compute_category_breakdown(transactions) -> list[CategoryTotal]:
    # dicts keep first-seen order
    sums: dict[str, float] = {}
    for txn in transactions:
        if txn.kind != "expense":
            continue
        sums[txn.category] = sums.get(txn.category, 0.0) + txn.amount
    return [CategoryTotal(category=name, total=total) for name, total in sums.items()]


def largest_category(breakdown) -> CategoryTotal | None:
    largest = None
    for entry in breakdown:
        if largest is None or entry.total > largest.total:
            largest = entry
    return largest
