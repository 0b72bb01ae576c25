from datetime import datetime, timezone
from pathlib import Path

from fastapi import Depends, FastAPI, Form, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from .aggregate import compute_category_breakdown, compute_totals, largest_category
from .assistant import AnswerSlot, answer
from .export import export_filename, to_delimited_text
from .ledger import Ledger
from .logging_setup import configure_logging, get_logger
from .logic import EmptyStateError, ValidationError, validate_question
from .settings import Settings, get_settings

logger = get_logger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(PACKAGE_DIR / "templates"))


def get_ledger(request: Request) -> Ledger:
    return request.app.state.ledger


def get_answer_slot(request: Request) -> AnswerSlot:
    return request.app.state.answer_slot


def _summary(ledger: Ledger) -> dict:
    transactions = ledger.transactions
    totals = compute_totals(transactions)
    breakdown = compute_category_breakdown(transactions)
    return {
        "totals": {
            "balance": round(totals.balance, 2),
            "total_income": round(totals.total_income, 2),
            "total_expense": round(totals.total_expense, 2),
        },
        "by_category": [
            {"category": entry.category, "total": round(entry.total, 2)}
            for entry in breakdown
        ],
        "transaction_count": len(transactions),
        "recent": [txn.to_dict() for txn in ledger.recent()],
    }


def _wants_html(request: Request) -> bool:
    return "text/html" in request.headers.get("accept", "")


def _render_dashboard(
    request: Request,
    ledger: Ledger,
    *,
    question: str = "",
    answer_text: str | None = None,
    alert: str | None = None,
    status_code: int = 200,
) -> HTMLResponse:
    transactions = ledger.transactions
    breakdown = compute_category_breakdown(transactions)
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "totals": compute_totals(transactions),
            "breakdown": breakdown,
            "largest": largest_category(breakdown),
            "transactions": ledger.recent(),
            "question": question,
            "answer": answer_text,
            "alert": alert,
        },
        status_code=status_code,
    )


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(title="finassist")
    app.state.settings = settings
    app.state.ledger = Ledger.load(settings)
    app.state.answer_slot = AnswerSlot(delay=settings.assistant_delay)
    app.mount(
        "/static", StaticFiles(directory=str(PACKAGE_DIR / "static")), name="static"
    )

    @app.get("/", response_class=HTMLResponse)
    def index(request: Request, ledger: Ledger = Depends(get_ledger)):
        return _render_dashboard(request, ledger)

    @app.get("/health")
    def health():
        return {
            "status": "OK",
            "message": "finassist is running",
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    @app.get("/api/summary")
    def summary(ledger: Ledger = Depends(get_ledger)):
        return _summary(ledger)

    @app.post("/transactions", status_code=201)
    def create_transaction(
        request: Request,
        kind: str = Form(...),
        amount: str = Form(default=""),
        description: str = Form(default=""),
        category: str = Form(default=""),
        ledger: Ledger = Depends(get_ledger),
    ):
        try:
            txn = ledger.add(kind, amount, description, category)
        except ValidationError as exc:
            logger.info("rejected transaction: %s", exc)
            if _wants_html(request):
                return _render_dashboard(
                    request, ledger, alert="Preencha todos os campos!", status_code=400
                )
            raise HTTPException(status_code=400, detail=str(exc)) from exc
        if _wants_html(request):
            return RedirectResponse(url="/", status_code=303)
        return txn.to_dict()

    @app.post("/clear")
    def clear(
        request: Request,
        confirm: str = Form(default=""),
        ledger: Ledger = Depends(get_ledger),
    ):
        cleared = confirm.strip().lower() == "yes"
        if cleared:
            ledger.clear()
        if _wants_html(request):
            return RedirectResponse(url="/", status_code=303)
        return {"cleared": cleared}

    @app.post("/ask")
    async def ask(
        request: Request,
        question: str = Form(default=""),
        ledger: Ledger = Depends(get_ledger),
        slot: AnswerSlot = Depends(get_answer_slot),
    ):
        try:
            validate_question(question)
        except ValidationError as exc:
            if _wants_html(request):
                return _render_dashboard(
                    request, ledger, alert="Digite uma pergunta!", status_code=400
                )
            raise HTTPException(status_code=400, detail=str(exc)) from exc

        def compute() -> str:
            transactions = ledger.transactions
            return answer(
                question,
                compute_totals(transactions),
                compute_category_breakdown(transactions),
                len(transactions),
            )

        text = await slot.submit(compute)
        if text is None:
            return JSONResponse(
                status_code=409, content={"detail": "superseded by a newer question"}
            )
        if _wants_html(request):
            return _render_dashboard(request, ledger, question=question, answer_text=text)
        return {"answer": text}

    @app.get("/export.csv")
    def export_csv(ledger: Ledger = Depends(get_ledger)):
        try:
            body = to_delimited_text(ledger.transactions)
        except EmptyStateError as exc:
            raise HTTPException(status_code=404, detail=str(exc)) from exc
        filename = export_filename()
        return Response(
            content="\ufeff" + body,
            media_type="text/csv; charset=utf-8",
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    return app
