import os

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.templating import Jinja2Templates

from .database import recent_logs
from .models import IterationMode, SessionSnapshot, Verdict
from .session import QuizSession

PACKAGE_DIR = os.path.dirname(os.path.abspath(__file__))
STATIC_DIR = os.path.join(PACKAGE_DIR, "static")

templates = Jinja2Templates(directory=os.path.join(PACKAGE_DIR, "templates"))
router = APIRouter()


# --- Dependencies ---
def get_quiz(request: Request) -> QuizSession:
    return request.app.state.quiz


# --- Routes ---
@router.get("/", response_class=HTMLResponse)
async def home(request: Request, quiz: QuizSession = Depends(get_quiz)):
    return templates.TemplateResponse(
        request,
        "quiz.html",
        {"snapshot": quiz.snapshot(), "modes": [m.value for m in IterationMode]},
    )


@router.get("/api/state", response_model=SessionSnapshot)
async def get_state(quiz: QuizSession = Depends(get_quiz)):
    return quiz.snapshot()


@router.post("/api/words", response_model=SessionSnapshot)
async def add_word(word: str = Form(""), quiz: QuizSession = Depends(get_quiz)):
    quiz.add_word(word)
    await quiz.settle()
    return quiz.snapshot()


@router.post("/api/words/delete", response_model=SessionSnapshot)
async def delete_word(word: str = Form(...), quiz: QuizSession = Depends(get_quiz)):
    if not quiz.delete_word(word):
        return JSONResponse({"error": "Word not found"}, status_code=404)
    await quiz.settle()
    return quiz.snapshot()


@router.post("/api/mode", response_model=SessionSnapshot)
async def change_mode(mode: str = Form(...), quiz: QuizSession = Depends(get_quiz)):
    try:
        new_mode = IterationMode(mode)
    except ValueError:
        return JSONResponse({"error": f"Unknown mode: {mode}"}, status_code=400)
    quiz.change_mode(new_mode)
    await quiz.settle()
    return quiz.snapshot()


@router.post("/api/reveal", response_model=SessionSnapshot)
async def reveal_answer(quiz: QuizSession = Depends(get_quiz)):
    if not quiz.reveal():
        return JSONResponse({"error": "No round awaiting an answer"}, status_code=400)
    return quiz.snapshot()


@router.post("/submit_answer", response_model=Verdict)
async def submit_answer(answer: str = Form(""), quiz: QuizSession = Depends(get_quiz)):
    verdict = quiz.submit(answer)
    if verdict is None:
        return JSONResponse({"error": "No round awaiting an answer"}, status_code=400)
    return verdict


@router.get("/api/logs")
def get_logs(request: Request, limit: int = 100):
    db_path = request.app.state.db_path
    if not db_path:
        return JSONResponse({"error": "Database logging is disabled"}, status_code=404)
    return recent_logs(db_path, limit)
