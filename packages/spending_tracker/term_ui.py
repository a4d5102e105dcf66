"""Terminal prompts for the review flow (prompt_toolkit-based).

Kept apart from the review logic so the prompts can be driven in tests with a
pipe input and a dummy output.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from prompt_toolkit import PromptSession
from prompt_toolkit.auto_suggest import AutoSuggest, Suggestion
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.styles import Style
from prompt_toolkit.validation import ValidationError, Validator

from .models import Transaction


def _best_prefix_match(words: Sequence[str], text: str) -> str | None:
    """Return the first word that ``text`` is a strict, case-insensitive prefix of."""

    if not text:
        return None
    lower = text.lower()
    for w in words:
        wl = w.lower()
        if wl == lower:
            return None
        if wl.startswith(lower):
            return w
    return None


class _PrefixSuggest(AutoSuggest):
    def __init__(self, vocab: Sequence[str]) -> None:
        self._vocab = list(vocab)

    def get_suggestion(self, buffer, document):
        text = document.text
        cand = _best_prefix_match(self._vocab, text)
        if cand:
            return Suggestion(cand[len(text) :])
        return None


class _CategoryValidator(Validator):
    def __init__(self, allowed_lower: set[str]) -> None:
        self._allowed_lower = allowed_lower

    def validate(self, document) -> None:
        text = document.text.strip()
        if text and text.lower() not in self._allowed_lower:
            raise ValidationError(
                message="Choose a category from the list, or leave empty to skip."
            )


def _session_like(session: PromptSession | None, kb: KeyBindings) -> PromptSession:
    if session is None:
        return PromptSession(key_bindings=kb)
    return PromptSession(
        input=getattr(session, "input", None),
        output=getattr(session, "output", None),
        key_bindings=kb,
    )


def select_category(
    categories: Iterable[str],
    *,
    message: str = "Category (Enter on empty to skip): ",
    session: PromptSession | None = None,
) -> str | None:
    """Prompt for one of ``categories``; returns ``None`` when left empty.

    Typing a prefix shows the remainder of the first matching category as
    grey inline text. Tab completes it; Enter completes and submits.
    """

    words = list(categories)
    canonical = {w.lower(): w for w in words}
    completer = WordCompleter(words, ignore_case=True, match_middle=True, sentence=True)

    kb = KeyBindings()

    @kb.add("tab", eager=True)
    def _(event) -> None:  # pragma: no cover - exercised through prompt input
        b = event.app.current_buffer
        cand = _best_prefix_match(words, b.document.text)
        if cand:
            b.insert_text(cand[len(b.document.text) :])
        elif b.complete_state is None:
            b.start_completion(select_first=True)
        else:
            b.complete_next()

    @kb.add("enter", eager=True)
    def _(event) -> None:  # pragma: no cover - exercised through prompt input
        b = event.app.current_buffer
        cs = b.complete_state
        if cs is not None and cs.current_completion is not None:
            b.apply_completion(cs.current_completion)
        else:
            cand = _best_prefix_match(words, b.document.text)
            if cand:
                b.insert_text(cand[len(b.document.text) :])
        b.validate_and_handle()

    sess = _session_like(session, kb)
    result = sess.prompt(
        message,
        completer=completer,
        auto_suggest=_PrefixSuggest(words),
        validator=_CategoryValidator(set(canonical)),
        validate_while_typing=False,
        key_bindings=kb,
        style=Style.from_dict({"auto-suggestion": "fg:#888888"}),
    )
    text = result.strip()
    if not text:
        return None
    return canonical.get(text.lower(), text)


def describe_transaction(tx: Transaction) -> str:
    """Multi-line summary shown above the category prompt."""

    return f"Date: {tx.date}\nDescription: {tx.description}\nAmount: ${tx.amount:.2f}"


__all__ = ["select_category", "describe_transaction"]
