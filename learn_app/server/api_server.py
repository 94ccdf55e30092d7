"""FastAPI server that serves the quiz player page and its JSON API."""

from __future__ import annotations

from dataclasses import asdict
from threading import Thread

from fastapi import Depends, FastAPI
from fastapi.responses import HTMLResponse
from pydantic import BaseModel
import uvicorn

from learn_app.constants.network_constants import DEFAULT_HOST, DEFAULT_PORT
from learn_app.core.markdown_math_renderer import MATHJAX_SCRIPT_URL, renderer
from learn_app.core.models import SessionView
from learn_app.core.quiz_player import QuizPlayer

_PLAYER_PAGE_HTML = """<!doctype html>
<html lang="en">
  <head>
    <meta charset="utf-8" />
    <title>LearnQt Quiz</title>
    <meta name="viewport" content="width=device-width, initial-scale=1" />
    <style>
      :root { font-family: 'Inter', system-ui, sans-serif; background: #0b1120; color: #f5f7ff; }
      body { margin: 0; display: flex; min-height: 100vh; }
      aside { width: 16rem; background: #111a30; padding: 1rem; overflow-y: auto; }
      aside input { width: 100%; box-sizing: border-box; padding: 0.5rem; border-radius: 0.5rem; border: none; margin-bottom: 0.75rem; }
      .chapter { padding: 0.4rem 0.5rem; border-radius: 0.5rem; color: #94a3b8; }
      .chapter.active { background: #1f9aa5; color: #fff; }
      main { flex: 1; padding: 1.5rem; display: flex; flex-direction: column; gap: 1rem; }
      .card { background: #111a30; border-radius: 0.75rem; padding: 1.5rem; box-shadow: 0 0.5rem 1.5rem rgba(0, 0, 0, 0.4); }
      .hidden { display: none !important; }
      header { display: flex; justify-content: space-between; align-items: center; gap: 1rem; }
      #timer { font-size: 1.4rem; font-variant-numeric: tabular-nums; color: #facc15; }
      #timer.low { color: #f87171; }
      .track { width: 100%; height: 0.5rem; background: rgba(31, 154, 165, 0.25); border-radius: 999px; overflow: hidden; }
      #progress-fill { height: 100%; background: #1f9aa5; width: 0; transition: width 150ms ease; }
      #question-text { font-size: 1.15rem; line-height: 1.6; }
      .difficulty { font-size: 0.8rem; text-transform: uppercase; color: #94a3b8; }
      .options { display: grid; gap: 0.6rem; }
      .option { text-align: left; border: 2px solid transparent; border-radius: 0.75rem; padding: 0.9rem 1rem; font-size: 1rem; background: #1e293b; color: #fff; cursor: pointer; }
      .option.selected { border-color: #1f9aa5; background: #134e55; }
      .option:disabled { cursor: default; opacity: 0.7; }
      .nav { display: flex; justify-content: space-between; gap: 0.5rem; }
      button.primary { border: none; border-radius: 0.75rem; padding: 0.7rem 1.4rem; font-size: 1rem; background: #1f9aa5; color: #fff; cursor: pointer; }
      button.primary:disabled { opacity: 0.5; cursor: not-allowed; }
      button.danger { background: #b91c1c; }
      .palette { display: flex; flex-wrap: wrap; gap: 0.4rem; }
      .palette button { width: 2.4rem; height: 2.4rem; border-radius: 0.5rem; border: none; color: #fff; cursor: pointer; background: #334155; }
      .palette button.answered { background: #16a34a; }
      .palette button.current { background: #1f9aa5; }
      .palette button.here { outline: 2px solid #facc15; }
      #modal { position: fixed; inset: 0; background: rgba(0, 0, 0, 0.6); display: flex; align-items: center; justify-content: center; }
      #modal .card { min-width: 20rem; text-align: center; }
      #score { font-size: 3rem; font-weight: bold; }
    </style>
    <script>
      window.MathJax = { tex: { inlineMath: [['$','$']], displayMath: [['$$','$$']] }, svg: { fontCache: 'global' } };
    </script>
    <script defer src="__MATHJAX__"></script>
  </head>
  <body>
    <aside>
      <input id="chapter-search" type="search" placeholder="Search chapters" />
      <div id="chapter-list"></div>
    </aside>
    <main>
      <section class="card" id="loading-card"><p>Loading quiz…</p></section>
      <section class="card hidden" id="empty-card">
        <h2>No quiz available</h2>
        <p>Open a quiz from your dashboard to get started.</p>
      </section>
      <section class="hidden" id="quiz-area">
        <header class="card">
          <div>
            <h2 id="quiz-name"></h2>
            <span id="answered"></span>
          </div>
          <span id="timer"></span>
        </header>
        <div class="track"><div id="progress-fill"></div></div>
        <section class="card">
          <div class="difficulty" id="difficulty"></div>
          <p id="question-number"></p>
          <div id="question-text"></div>
          <div class="options" id="options"></div>
        </section>
        <div class="nav">
          <button class="primary" id="prev-button">Previous</button>
          <button class="primary" id="submit-button">Submit quiz</button>
          <button class="primary" id="next-button">Next</button>
        </div>
        <section class="card">
          <div class="palette" id="palette"></div>
        </section>
        <button class="primary danger" id="reset-button">Reset quiz</button>
      </section>
    </main>
    <div id="modal" class="hidden">
      <div class="card">
        <h2>Quiz submitted</h2>
        <div id="score"></div>
        <p id="verdict"></p>
        <p id="time-summary"></p>
        <button class="primary" id="close-modal">Review</button>
      </div>
    </div>
    <script>
      const params = new URLSearchParams(window.location.search);
      const el = id => document.getElementById(id);
      let lastQuestionKey = null;
      let modalShownFor = null;

      function setVisibility(element, isVisible) {
        element.classList.toggle('hidden', !isVisible);
      }

      async function call(path, body) {
        const options = body === undefined ? { method: 'POST' } : {
          method: 'POST',
          headers: { 'Content-Type': 'application/json' },
          body: JSON.stringify(body)
        };
        const response = await fetch(path, options);
        render(await response.json());
      }

      function formatDuration(ms) {
        const seconds = Math.round(ms / 1000);
        return `${Math.floor(seconds / 60)}m ${seconds % 60}s`;
      }

      function typesetMath() {
        if (window.MathJax && window.MathJax.typesetPromise) {
          window.MathJax.typesetPromise([el('question-text'), el('options')]).catch(() => {});
        }
      }

      function render(state) {
        setVisibility(el('loading-card'), state.phase === 'loading');
        setVisibility(el('empty-card'), state.phase === 'empty');
        setVisibility(el('quiz-area'), state.phase === 'active' || state.phase === 'submitted');
        if (!state.question) {
          return;
        }
        const locked = state.phase !== 'active';
        el('quiz-name').textContent = state.quiz_name;
        el('answered').textContent = `${state.answered_count} of ${state.question_count} answered`;
        el('timer').textContent = state.formatted_time_remaining;
        el('timer').classList.toggle('low', state.time_remaining < 60);
        el('progress-fill').style.width = `${state.progress_percentage}%`;
        el('question-number').textContent = `Question ${state.current_question + 1} of ${state.question_count}`;
        el('difficulty').textContent = state.question.difficulty || '';

        const questionKey = `${state.question.id}|${state.question.selected_option}|${state.phase}`;
        if (questionKey !== lastQuestionKey) {
          lastQuestionKey = questionKey;
          el('question-text').innerHTML = state.question_html;
          const options = el('options');
          options.innerHTML = '';
          state.options_html.forEach((html, index) => {
            const button = document.createElement('button');
            button.className = 'option' + (state.question.selected_option === index ? ' selected' : '');
            button.innerHTML = `${String.fromCharCode(65 + index)}. ${html}`;
            button.disabled = locked;
            button.addEventListener('click', () => call('/answer', { question_id: state.question.id, option_index: index }));
            options.appendChild(button);
          });
          typesetMath();
        }

        el('prev-button').disabled = locked || state.current_question === 0;
        el('next-button').disabled = locked || state.current_question === state.question_count - 1;
        el('submit-button').disabled = locked;

        const palette = el('palette');
        palette.innerHTML = '';
        state.statuses.forEach((status, index) => {
          const button = document.createElement('button');
          button.textContent = index + 1;
          button.className = status + (index === state.current_question ? ' here' : '');
          button.disabled = locked;
          button.addEventListener('click', () => call('/navigate', { index }));
          palette.appendChild(button);
        });

        if (state.summary && modalShownFor !== state.quiz_id) {
          modalShownFor = state.quiz_id;
          el('score').textContent = `${state.summary.score}%`;
          el('verdict').textContent = state.summary.passed === null ? '' : (state.summary.passed ? 'Passed' : 'Not passed yet');
          el('time-summary').textContent =
            `Total ${formatDuration(state.summary.total_time_spent_ms)}, ` +
            `about ${formatDuration(state.summary.avg_time_per_question_ms)} per question`;
          setVisibility(el('modal'), true);
        }
      }

      async function refreshChapters() {
        const search = encodeURIComponent(el('chapter-search').value || '');
        const response = await fetch(`/chapters?search=${search}`);
        const chapters = await response.json();
        el('chapter-list').innerHTML = chapters.map(ch =>
          `<div class="chapter${ch.active ? ' active' : ''}">${ch.emoji} ${ch.name}</div>`).join('');
      }

      async function poll() {
        try {
          const response = await fetch('/state');
          render(await response.json());
        } catch (error) {
          console.error('Error fetching state:', error);
        }
      }

      el('prev-button').addEventListener('click', () => call('/previous'));
      el('next-button').addEventListener('click', () => call('/next'));
      el('submit-button').addEventListener('click', () => call('/submit'));
      el('reset-button').addEventListener('click', () => {
        if (confirm('Start this quiz over? Your answers will be lost.')) {
          modalShownFor = null;
          lastQuestionKey = null;
          call('/reset');
        }
      });
      el('close-modal').addEventListener('click', () => setVisibility(el('modal'), false));
      el('chapter-search').addEventListener('input', refreshChapters);

      call('/load', { quiz_id: params.get('q'), chapter: params.get('ch') }).then(refreshChapters);
      setInterval(poll, 1000);
    </script>
  </body>
</html>
""".replace("__MATHJAX__", MATHJAX_SCRIPT_URL)


class LoadPayload(BaseModel):
    """Quiz identifier and decorative chapter name taken from the page URL."""

    quiz_id: str | None = None
    chapter: str | None = None


class AnswerPayload(BaseModel):
    """Payload schema for a selected option."""

    question_id: str | int
    option_index: int


class NavigatePayload(BaseModel):
    index: int


def serialize_view(view: SessionView) -> dict[str, object]:
    """Convert a session view to JSON, adding rendered question HTML."""
    payload = asdict(view)
    if view.question is not None:
        payload["question_html"] = renderer.render_fragment(view.question.text)
        payload["options_html"] = renderer.render_options(view.question.options)
    else:
        payload["question_html"] = None
        payload["options_html"] = []
    return payload


def _get_quiz_player_dependency(quiz_player: QuizPlayer):
    def dependency() -> QuizPlayer:
        return quiz_player

    return dependency


def create_api_app(quiz_player: QuizPlayer) -> FastAPI:
    """Create a FastAPI application wired to the provided quiz player."""
    app = FastAPI(title="LearnQt Player API", version="0.1.0")
    player_dep = _get_quiz_player_dependency(quiz_player)

    @app.get("/", response_class=HTMLResponse)
    def serve_player_page() -> str:
        return _PLAYER_PAGE_HTML

    @app.post("/load")
    def load_quiz(payload: LoadPayload, player: QuizPlayer = Depends(player_dep)) -> dict[str, object]:
        return serialize_view(player.load(payload.quiz_id, chapter=payload.chapter))

    @app.get("/state")
    def get_state(player: QuizPlayer = Depends(player_dep)) -> dict[str, object]:
        return serialize_view(player.get_view())

    @app.post("/answer")
    def select_answer(payload: AnswerPayload, player: QuizPlayer = Depends(player_dep)) -> dict[str, object]:
        return serialize_view(player.select_answer(str(payload.question_id), payload.option_index))

    @app.post("/navigate")
    def navigate(payload: NavigatePayload, player: QuizPlayer = Depends(player_dep)) -> dict[str, object]:
        return serialize_view(player.go_to_question(payload.index))

    @app.post("/next")
    def next_question(player: QuizPlayer = Depends(player_dep)) -> dict[str, object]:
        return serialize_view(player.next_question())

    @app.post("/previous")
    def previous_question(player: QuizPlayer = Depends(player_dep)) -> dict[str, object]:
        return serialize_view(player.previous_question())

    @app.post("/submit")
    def submit_quiz(player: QuizPlayer = Depends(player_dep)) -> dict[str, object]:
        return serialize_view(player.submit())

    @app.post("/reset")
    def reset_quiz(player: QuizPlayer = Depends(player_dep)) -> dict[str, object]:
        return serialize_view(player.reset())

    @app.get("/chapters")
    def list_chapters(search: str | None = None, player: QuizPlayer = Depends(player_dep)) -> list[dict[str, object]]:
        return [asdict(chapter) for chapter in player.get_chapters(search)]

    return app


def start_api_server(
    quiz_player: QuizPlayer,
    host: str = DEFAULT_HOST,
    port: int = DEFAULT_PORT,
) -> Thread:
    """Start the FastAPI server in a background daemon thread."""
    app = create_api_app(quiz_player)
    config = uvicorn.Config(app=app, host=host, port=port, log_level="info")
    server = uvicorn.Server(config)

    def run_server() -> None:
        server.run()

    thread = Thread(target=run_server, name="QuizApiServer", daemon=True)
    thread.start()
    return thread
