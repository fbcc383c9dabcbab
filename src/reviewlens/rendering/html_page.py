"""HTML rendering for the single analysis page.

Maps an AnalysisState (plus the current textarea draft) to a complete page.
All user and model text is escaped; there is no templating engine.
"""

from __future__ import annotations

import json
from html import escape
from typing import List, Optional

from ..controller.state import AnalysisState
from ..llm.schema import AnalysisResult

SENTIMENT_CLASSES = {
    "Positive": "sentiment-positive",
    "Negative": "sentiment-negative",
    "Neutral": "sentiment-neutral",
    "Mixed": "sentiment-mixed",
}

_STYLE = """
body { margin: 0; font-family: system-ui, sans-serif; background: #f8fafc; color: #0f172a; }
header, main, footer { max-width: 960px; margin: 0 auto; padding: 16px 24px; }
header { display: flex; justify-content: space-between; border-bottom: 1px solid #e2e8f0; }
main { display: grid; grid-template-columns: 5fr 7fr; gap: 48px; padding-top: 40px; }
textarea { width: 100%; height: 16rem; padding: 16px; border: 1px solid #e2e8f0; border-radius: 16px; resize: none; box-sizing: border-box; }
button { width: 100%; height: 3.5rem; margin-top: 12px; border: 0; border-radius: 12px; background: #4f46e5; color: #fff; font-weight: 600; cursor: pointer; }
button:disabled { background: #f1f5f9; color: #94a3b8; cursor: not-allowed; }
.char-count { font: 12px monospace; color: #94a3b8; text-align: right; }
.error { margin-top: 16px; padding: 16px; background: #fff1f2; border: 1px solid #ffe4e6; border-radius: 12px; color: #be123c; }
.card { background: #fff; border: 1px solid #e2e8f0; border-radius: 24px; padding: 32px; margin-bottom: 24px; }
.label { font-size: 10px; font-weight: 700; letter-spacing: .2em; text-transform: uppercase; color: #94a3b8; }
.badge { display: inline-block; padding: 6px 12px; border-radius: 999px; font-weight: 700; }
.sentiment-positive { color: #10b981; background: #ecfdf5; }
.sentiment-negative { color: #f43f5e; background: #fff1f2; }
.sentiment-neutral { color: #64748b; background: #f1f5f9; }
.sentiment-mixed { color: #f59e0b; background: #fffbeb; }
.confidence { font: 700 1.5rem monospace; }
.summary { font-style: italic; font-size: 1.1rem; color: #475569; }
.sarcasm-yes { background: #fef3c7; color: #b45309; }
.sarcasm-no { background: #f1f5f9; color: #64748b; }
.theme { display: inline-block; margin: 0 8px 8px 0; padding: 8px 16px; background: #f8fafc; border: 1px solid #e2e8f0; border-radius: 12px; }
.empty { min-height: 400px; border: 2px dashed #e2e8f0; border-radius: 24px; display: flex; flex-direction: column; align-items: center; justify-content: center; text-align: center; color: #94a3b8; }
.spinner { display: inline-block; width: 1em; height: 1em; border: 2px solid currentColor; border-right-color: transparent; border-radius: 50%; animation: spin 1s linear infinite; }
@keyframes spin { to { transform: rotate(360deg); } }
"""

LOADING_LABEL = '<span class="spinner"></span> Analyzing Review...'

# Blank input never submits; a real submit locks the trigger and shows the spinner
_FORM_SCRIPT = (
    "if(!this.review.value.trim())return false;"
    "this.run.disabled=true;"
    f"this.run.innerHTML={json.dumps(LOADING_LABEL)};"
    "return true;"
)
_INPUT_SCRIPT = (
    "this.form.run.disabled=!this.value.trim();"
    "document.getElementById('char-count').textContent=this.value.length+' chars';"
)


def format_confidence(confidence: float) -> str:
    return f"{confidence * 100:.1f}%"


def _render_form(state: AnalysisState, draft: str) -> str:
    disabled = state.is_loading or not draft.strip()
    if state.is_loading:
        button_label = LOADING_LABEL
    else:
        button_label = "Run Analysis"

    return (
        f'<form method="post" action="/analyze" onsubmit="{escape(_FORM_SCRIPT)}">'
        f'<textarea name="review" placeholder="Paste your Amazon review here..." '
        f'oninput="{_INPUT_SCRIPT}">{escape(draft)}</textarea>'
        f'<div class="char-count" id="char-count">{len(draft)} chars</div>'
        f'<button type="submit" name="run"{" disabled" if disabled else ""}>{button_label}</button>'
        f"</form>"
    )


def _render_error(error: Optional[str]) -> str:
    if not error:
        return ""
    return f'<div class="error" role="alert"><p>{escape(error)}</p></div>'


def _render_themes(themes: List[str]) -> str:
    return "".join(f'<span class="theme">{escape(t)}</span>' for t in themes)


def render_result(result: AnalysisResult) -> str:
    sentiment_class = SENTIMENT_CLASSES.get(result.sentiment, "sentiment-neutral")
    sarcasm = "YES" if result.is_sarcastic else "NO"
    return (
        '<section class="card" id="result">'
        '<div class="label">Overall Sentiment</div>'
        f'<div class="badge {sentiment_class}">{escape(result.sentiment)}</div>'
        '<div class="label">Confidence</div>'
        f'<div class="confidence">{format_confidence(result.confidence)}</div>'
        "<h3>Executive Summary</h3>"
        f'<p class="summary">&quot;{escape(result.summary)}&quot;</p>'
        '<div class="label">Emotional Tone</div>'
        f"<p>{escape(result.tone)}</p>"
        '<div class="label">Sarcasm Detected</div>'
        f'<div class="badge sarcasm-{sarcasm.lower()}">{sarcasm}</div>'
        "</section>"
        '<section class="card" id="themes">'
        "<h3>Key Themes &amp; Features</h3>"
        f"<div>{_render_themes(result.top_themes)}</div>"
        "</section>"
    )


def _render_placeholder() -> str:
    return (
        '<div class="empty" id="placeholder">'
        "<h3>No Analysis Yet</h3>"
        "<p>Enter a review on the left and click &quot;Run Analysis&quot; to see the results here.</p>"
        "</div>"
    )


def render_page(state: AnalysisState, draft: Optional[str] = None, title: str = "ReviewLens AI") -> str:
    """
    Full page for the given state.
    draft defaults to the text of the state's current or last request.
    """
    if draft is None:
        draft = state.input_text

    refresh = '<meta http-equiv="refresh" content="2;url=/">' if state.is_loading else ""
    right = render_result(state.result) if state.result else _render_placeholder()

    return (
        "<!DOCTYPE html>"
        '<html lang="en"><head><meta charset="utf-8">'
        f"{refresh}"
        f"<title>{escape(title)}</title>"
        f"<style>{_STYLE}</style>"
        "</head><body>"
        f"<header><h1>{escape(title)}</h1><span class=\"label\">Review Sentiment Engine</span></header>"
        "<main>"
        "<div>"
        "<h2>Analyze Customer Feedback</h2>"
        "<p>Paste an Amazon product review below to extract deep insights, emotional tone, and hidden sarcasm.</p>"
        f"{_render_form(state, draft)}"
        f"{_render_error(state.error)}"
        "</div>"
        f"<div>{right}</div>"
        "</main>"
        "</body></html>"
    )
