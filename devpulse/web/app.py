"""
FastAPI Web Application - Monthly Check-in Form
================================================

Web UI for the monthly developer check-in: a four-step wizard, an
"already completed" page, and an admin table with CSV export.

Wizard state travels in the form itself (hidden fields), so the
server keeps no per-visitor session state.
"""

import logging
from contextlib import asynccontextmanager
from html import escape
from typing import List, Optional

from fastapi import APIRouter, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse, Response
from pydantic import BaseModel

from devpulse.application import (
    CheckInWorkflow,
    EntryStatus,
    Step,
    SubmissionResult,
    WizardState,
    decrement_bugs,
    increment_bugs,
    next_step,
    previous_step,
    select_satisfaction,
    set_bugs,
    set_comments,
    set_completion,
)
from devpulse.domain import InvalidIdentityError, Review, SatisfactionLevel, WizardError
from devpulse.infrastructure.config import Settings, get_settings
from devpulse.infrastructure.export import build_csv, report_filename
from devpulse.infrastructure.llm import InsightService
from devpulse.infrastructure.persistence import LocalStore
from devpulse.infrastructure.sheets import SheetsRecorder

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

COMPLETION_HINT = (
    "Considera el porcentaje de tareas finalizadas vs lo que habías estimado. "
    "¿Se llegó al objetivo o hubo que patear algo?"
)


class ReviewOut(BaseModel):
    id: str
    developerEmail: str
    completionPercentage: int
    bugCount: int
    satisfaction: int
    comments: Optional[str] = None
    timestamp: str
    monthId: str
    monthName: str


# ══════════════════════════════════════════════════════════════════
#  SHARED CSS - reused across all pages
# ══════════════════════════════════════════════════════════════════

SHARED_CSS = """
    :root {
        --bg: #f8fafc;
        --card: #ffffff;
        --border: #e2e8f0;
        --text: #1e293b;
        --text-muted: #64748b;
        --primary: #4f46e5;
        --primary-dark: #4338ca;
        --primary-soft: #eef2ff;
        --success: #16a34a;
        --success-soft: #dcfce7;
        --danger: #ef4444;
    }

    * { margin: 0; padding: 0; box-sizing: border-box; }

    body {
        font-family: 'Inter', -apple-system, BlinkMacSystemFont, sans-serif;
        background: var(--bg);
        color: var(--text);
        min-height: 100vh;
        display: flex; flex-direction: column; align-items: center;
        padding: 48px 16px;
    }

    header { text-align: center; margin-bottom: 32px; max-width: 560px; }
    header h1 { font-size: 30px; font-weight: 800; }
    header p { color: var(--text-muted); margin-top: 8px; }

    .card {
        background: var(--card);
        border-radius: 24px;
        box-shadow: 0 20px 40px rgba(15,23,42,0.08);
        padding: 32px;
        width: 100%; max-width: 560px;
        position: relative;
        text-align: center;
    }
    .card.wide { max-width: 1100px; text-align: left; }

    .progress { position: absolute; top: 0; left: 0; right: 0; height: 6px;
                background: var(--border); border-radius: 24px 24px 0 0; overflow: hidden; }
    .progress div { height: 100%; background: var(--primary); transition: width 0.5s; }

    h2 { font-size: 20px; font-weight: 700; margin-bottom: 24px; }
    .big-number { font-size: 48px; font-weight: 900; color: var(--primary); margin-bottom: 16px; }
    .muted { color: var(--text-muted); font-size: 13px; }
    .hint { cursor: help; color: var(--text-muted); font-size: 16px; }

    .btn {
        background: var(--primary);
        color: #fff;
        border: none;
        padding: 14px 28px;
        border-radius: 12px;
        font-weight: 700;
        font-size: 15px;
        cursor: pointer;
        text-decoration: none;
        font-family: inherit;
    }
    .btn:hover { background: var(--primary-dark); }
    .btn:disabled { opacity: 0.5; cursor: default; }
    .btn-ghost { background: transparent; color: var(--text-muted); }
    .btn-ghost:hover { background: transparent; color: var(--text); }
    .btn-round { width: 56px; height: 56px; border-radius: 50%; padding: 0;
                 background: #fff; color: var(--text-muted); border: 2px solid var(--border); font-size: 22px; }
    .btn-round:hover { background: var(--bg); }
    .btn-success { background: var(--success); }
    .btn-success:hover { background: #15803d; }

    .actions { display: flex; gap: 16px; margin-top: 32px; }
    .actions .btn { flex: 2; }
    .actions .btn-ghost { flex: 1; }

    .counter { display: flex; align-items: center; justify-content: center; gap: 32px; }
    .counter span { font-size: 48px; font-weight: 900; width: 64px; }

    input[type="range"] { width: 100%; accent-color: var(--primary); }
    input[type="email"], textarea {
        width: 100%;
        padding: 12px 16px;
        border: 2px solid var(--border);
        border-radius: 12px;
        font-family: inherit; font-size: 15px;
    }
    textarea { height: 128px; resize: none; }
    input:focus, textarea:focus { outline: none; border-color: var(--primary); }

    .emoji-grid { display: grid; grid-template-columns: repeat(5, 1fr); gap: 8px; }
    .emoji-grid input { display: none; }
    .emoji-grid label {
        display: flex; flex-direction: column; align-items: center;
        padding: 12px 4px; border-radius: 16px; border: 2px solid transparent; cursor: pointer;
    }
    .emoji-grid label:hover { background: var(--bg); }
    .emoji-grid input:checked + label { border-color: var(--primary); background: var(--primary-soft); }
    .emoji-grid .emoji { font-size: 36px; margin-bottom: 8px; }
    .emoji-grid .label { font-size: 9px; font-weight: 700; text-transform: uppercase; }

    .alert { padding: 12px 16px; border-radius: 12px; margin-bottom: 20px; font-size: 14px; }
    .alert-error { background: #fef2f2; color: var(--danger); }

    .badge-icon { width: 72px; height: 72px; border-radius: 20px; margin: 0 auto 20px;
                  display: flex; align-items: center; justify-content: center; font-size: 34px; }
    .badge-icon.primary { background: var(--primary-soft); }
    .badge-icon.success { background: var(--success-soft); }

    .insight { background: var(--primary-soft); border-left: 4px solid var(--primary);
               padding: 20px 24px; border-radius: 16px; text-align: left; margin-top: 20px;
               font-style: italic; color: #312e81; line-height: 1.6; }

    table { width: 100%; border-collapse: collapse; font-size: 14px; }
    th { text-align: left; font-size: 11px; text-transform: uppercase; letter-spacing: 1px;
         color: var(--text-muted); padding-bottom: 12px; border-bottom: 1px solid var(--border); }
    td { padding: 14px 8px 14px 0; border-bottom: 1px solid var(--border); }
    td.center, th.center { text-align: center; }
    td.comment { max-width: 280px; overflow: hidden; text-overflow: ellipsis; white-space: nowrap;
                 font-style: italic; color: var(--text-muted); }
    .footer-bar { display: flex; justify-content: space-between; align-items: center; margin-top: 24px; }

    a { color: var(--primary); text-decoration: none; }
"""


# ══════════════════════════════════════════════════════════════════
#  HTML TEMPLATE RENDERERS
# ══════════════════════════════════════════════════════════════════

def _page(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html lang="es">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{escape(title)}</title>
    <style>
        {SHARED_CSS}
    </style>
</head>
<body>
{body}
</body>
</html>"""


def render_login_page(organization: str, message: str = "") -> str:
    msg_html = f'<div class="alert alert-error">{escape(message)}</div>' if message else ""
    return _page(f"{organization} Check-in", f"""
    <div class="card">
        <div class="badge-icon primary">🚀</div>
        <h2>Bienvenido a {escape(organization)} Check-in</h2>
        <p class="muted" style="margin-bottom: 24px;">Ingresa tu email corporativo para comenzar tu revisión.</p>
        {msg_html}
        <form method="post" action="/login">
            <input type="email" name="email" placeholder="tu@empresa.com" required>
            <div class="actions"><button type="submit" class="btn">Ingresar</button></div>
        </form>
    </div>""")


def render_already_done_page(organization: str, identity: str, period_label: str) -> str:
    return _page(f"{organization} Check-in", f"""
    <div class="card">
        <div class="badge-icon success">📅</div>
        <h2>¡Misión Cumplida!</h2>
        <p class="muted" style="margin-bottom: 20px;">Ya completaste tu check-in de
            <strong style="color: var(--primary);">{escape(period_label)}</strong>.</p>
        <p class="muted" style="background: var(--bg); padding: 16px; border-radius: 12px; margin-bottom: 24px;">
            Gracias por mantener al equipo informado.</p>
        <a href="/logout" class="muted">Cerrar sesión ({escape(identity)})</a>
    </div>""")


def _hidden_fields(state: WizardState, *exclude: str) -> str:
    values = {
        "step": int(state.step),
        "completion": state.completion,
        "bugs": state.bugs,
        "satisfaction": state.satisfaction,
        "comments": state.comments,
    }
    return "".join(
        f'<input type="hidden" name="{name}" value="{escape(str(value))}">'
        for name, value in values.items()
        if name not in exclude and value is not None
    )


def _render_step(state: WizardState) -> str:
    back = '<button type="submit" name="action" value="back" class="btn btn-ghost">Atrás</button>'

    if state.step == Step.COMPLETION:
        return f"""
        {_hidden_fields(state, "completion")}
        <h2>1. Completitud del Sprint <span class="hint" title="{escape(COMPLETION_HINT)}">ⓘ</span></h2>
        <div class="big-number"><output id="completion-value">{state.completion}</output>%</div>
        <input type="range" name="completion" min="0" max="100" step="5" value="{state.completion}"
               oninput="document.getElementById('completion-value').value = this.value">
        <div class="actions">
            <button type="submit" name="action" value="next" class="btn">Continuar</button>
        </div>"""

    if state.step == Step.BUGS:
        return f"""
        {_hidden_fields(state)}
        <h2>2. Cantidad de Bugs / Errores</h2>
        <div class="counter">
            <button type="submit" name="action" value="bugs_down" class="btn btn-round">−</button>
            <span>{state.bugs}</span>
            <button type="submit" name="action" value="bugs_up" class="btn btn-round">+</button>
        </div>
        <p class="muted" style="margin-top: 16px;">Errores detectados en tu desarrollo este último sprint.</p>
        <div class="actions">
            {back}
            <button type="submit" name="action" value="next" class="btn">Siguiente</button>
        </div>"""

    if state.step == Step.SATISFACTION:
        choices = ""
        for level in SatisfactionLevel:
            checked = " checked" if state.satisfaction == level.level else ""
            choices += f"""
            <input type="radio" id="sat-{level.level}" name="satisfaction" value="{level.level}"{checked}>
            <label for="sat-{level.level}">
                <span class="emoji">{level.emoji}</span>
                <span class="label" style="color: {level.color};">{level.label}</span>
            </label>"""
        return f"""
        {_hidden_fields(state, "satisfaction")}
        <h2>3. Satisfacción con el trabajo</h2>
        <div class="emoji-grid">{choices}</div>
        <div class="actions">
            {back}
            <button type="submit" name="action" value="next" class="btn">Siguiente</button>
        </div>"""

    return f"""
        {_hidden_fields(state, "comments")}
        <h2>4. ¿Algún comentario adicional?</h2>
        <textarea name="comments" placeholder="Cuéntanos más sobre cómo fue tu mes (opcional)...">{escape(state.comments)}</textarea>
        <div class="actions">
            {back}
            <button type="submit" name="action" value="submit" class="btn">Finalizar Check-in</button>
        </div>"""


def render_wizard_page(
    organization: str,
    state: WizardState,
    identity: str,
    period_label: str,
    error: str = ""
) -> str:
    progress = min(int(state.step), 4) / 4 * 100
    error_html = f'<div class="alert alert-error">{escape(error)}</div>' if error else ""
    return _page(f"{organization} Check-in", f"""
    <header>
        <div class="badge-icon primary">🚀</div>
        <h1>{escape(organization)} Check-in</h1>
        <p>Reporte para <strong>{escape(identity)}</strong> • {escape(period_label)}</p>
    </header>
    <div class="card">
        <div class="progress"><div style="width: {progress:.0f}%;"></div></div>
        {error_html}
        <form method="post" action="/checkin">
            {_render_step(state)}
        </form>
    </div>""")


def render_done_page(organization: str, result: SubmissionResult) -> str:
    remote_note = ""
    if not result.remote_saved:
        remote_note = '<p class="muted">La copia remota no pudo confirmarse; tu reporte quedó guardado localmente.</p>'
    return _page(f"{organization} Check-in", f"""
    <div class="card">
        <div class="progress"><div style="width: 100%;"></div></div>
        <div class="badge-icon success">✔</div>
        <h2>¡Recibido!</h2>
        <p class="muted">Tu reporte mensual ha sido guardado exitosamente.</p>
        <div class="insight">“{escape(result.insight)}”</div>
        {remote_note}
        <p class="muted" style="margin-top: 24px;">Puedes cerrar esta pestaña de forma segura.</p>
    </div>""")


def render_admin_page(reviews: List[Review]) -> str:
    """Render all local reviews, newest first."""
    if reviews:
        rows = ""
        for r in reversed(reviews):
            rows += f"""
            <tr>
                <td><strong>{escape(r.identity)}</strong></td>
                <td>{escape(r.period_label)}</td>
                <td class="center"><code>{r.completion_percent}%</code></td>
                <td class="center">{r.bug_count}</td>
                <td class="center">{escape(r.satisfaction_emoji)}</td>
                <td class="comment" title="{escape(r.comments or '')}">{escape(r.comments or '-')}</td>
            </tr>"""
        content = f"""
        <table>
            <thead>
                <tr>
                    <th>Email</th><th>Mes</th><th class="center">Sprint</th>
                    <th class="center">Bugs</th><th class="center">Sentimiento</th><th>Comentarios</th>
                </tr>
            </thead>
            <tbody>{rows}</tbody>
        </table>"""
        download = '<a href="/admin/export.csv" class="btn btn-success">Descargar CSV para Excel</a>'
    else:
        content = '<div class="muted" style="text-align: center; padding: 80px 0; font-style: italic;">No hay registros cargados.</div>'
        download = '<button class="btn btn-success" disabled>Descargar CSV para Excel</button>'

    return _page("Panel de Control", f"""
    <div class="card wide">
        <h2>Panel de Control</h2>
        <p class="muted" style="margin-bottom: 24px;">Reportes mensuales del equipo</p>
        {content}
        <div class="footer-bar">
            <span class="muted">Total: {len(reviews)} reportes</span>
            {download}
        </div>
    </div>""")


# ══════════════════════════════════════════════════════════════════
#  ROUTES
# ══════════════════════════════════════════════════════════════════

router = APIRouter()


def _workflow(request: Request) -> CheckInWorkflow:
    return request.app.state.workflow


def _organization(request: Request) -> str:
    return request.app.state.settings.checkin.organization_name


# ── Identity ───────────────────────────────────────────────────

@router.get("/", response_class=HTMLResponse)
def index(request: Request):
    workflow = _workflow(request)
    organization = _organization(request)
    identity = workflow.identity()

    status = workflow.entry_status(identity)
    if status is EntryStatus.NEEDS_IDENTITY:
        return render_login_page(organization)
    if status is EntryStatus.ALREADY_COMPLETED:
        return render_already_done_page(organization, identity, workflow.period_label)
    return render_wizard_page(organization, workflow.new_state(), identity, workflow.period_label)


@router.post("/login")
async def login(request: Request, email: str = Form(...)):
    try:
        _workflow(request).login(email)
    except InvalidIdentityError:
        return HTMLResponse(render_login_page(_organization(request), message="Ingresa un email válido."))
    return RedirectResponse(url="/", status_code=303)


@router.get("/logout")
async def logout(request: Request):
    _workflow(request).logout()
    return RedirectResponse(url="/", status_code=303)


# ── Wizard ─────────────────────────────────────────────────────

@router.post("/checkin", response_class=HTMLResponse)
def checkin(
    request: Request,
    action: str = Form("next"),
    step: int = Form(1),
    completion: int = Form(80),
    bugs: int = Form(0),
    satisfaction: Optional[int] = Form(None),
    comments: str = Form(""),
):
    workflow = _workflow(request)
    organization = _organization(request)

    identity = workflow.identity()
    if not identity:
        return RedirectResponse(url="/", status_code=303)
    if workflow.store.has_review(identity, workflow.period):
        return HTMLResponse(render_already_done_page(organization, identity, workflow.period_label))

    # DONE is never posted back; it only follows a submit
    try:
        current = Step(min(step, Step.COMMENTS))
    except ValueError:
        current = Step.COMPLETION

    state = WizardState(step=current)
    state = set_completion(state, completion)
    state = set_bugs(state, bugs)
    state = set_comments(state, comments)

    error = ""
    try:
        if satisfaction is not None:
            state = select_satisfaction(state, satisfaction)

        if action == "back":
            state = previous_step(state)
        elif action == "bugs_up":
            state = increment_bugs(state)
        elif action == "bugs_down":
            state = decrement_bugs(state)
        elif action == "submit":
            result = workflow.submit(identity, state)
            logger.info(f"Check-in completed for {identity} ({result.review.period})")
            return HTMLResponse(render_done_page(organization, result))
        else:
            state = next_step(state)
    except WizardError as e:
        error = str(e)

    return HTMLResponse(render_wizard_page(organization, state, identity, workflow.period_label, error))


# ── Admin ──────────────────────────────────────────────────────

@router.get("/admin", response_class=HTMLResponse)
async def admin(request: Request):
    return render_admin_page(_workflow(request).reviews())


@router.get("/admin/export.csv")
async def export_csv(request: Request):
    content = build_csv(_workflow(request).reviews())
    return Response(
        content=content.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{report_filename()}"'},
    )


# ── API Endpoints ──────────────────────────────────────────────

@router.get("/api/reviews", response_model=List[ReviewOut], response_model_exclude_none=True)
async def api_list_reviews(request: Request):
    return [r.to_dict() for r in _workflow(request).reviews()]


@router.get("/api/status")
def api_status(request: Request):
    workflow = _workflow(request)
    return {
        "period": workflow.period,
        "warnings": request.app.state.settings.validate(),
        "remote": workflow.recorder.status(),
    }


# ══════════════════════════════════════════════════════════════════
#  APP FACTORY
# ══════════════════════════════════════════════════════════════════

def build_workflow(settings: Settings) -> CheckInWorkflow:
    return CheckInWorkflow(
        store=LocalStore(settings.database_file),
        recorder=SheetsRecorder(settings),
        insights=InsightService(settings),
        default_completion=settings.checkin.default_completion,
    )


def create_app(settings: Optional[Settings] = None, workflow: Optional[CheckInWorkflow] = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.workflow.store.init()
        for issue in settings.validate():
            logger.warning(issue)
        logger.info("Local store ready")
        yield

    app = FastAPI(title="DevPulse Check-in", description="Monthly developer check-in", lifespan=lifespan)
    app.state.settings = settings
    app.state.workflow = workflow or build_workflow(settings)
    app.include_router(router)
    return app


app = create_app()
