from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def isolate_user_config(tmp_path_factory, monkeypatch):
    """Point the user-global configuration directory at an empty temp dir.

    Tests must not pick up a ``~/.config/ccommit/config.json`` from the
    machine running them.
    """
    config_dir = tmp_path_factory.mktemp("user_config")
    monkeypatch.setattr(
        "conventional_commit.config.loader._get_config_directory",
        lambda: Path(config_dir),
    )
    yield config_dir


class ScriptedPrompter:
    """Prompter returning canned answers in call order, per method."""

    def __init__(self, choose=(), choose_many=(), input=(), write=(), confirm=()):
        self.answers = {
            "choose": list(choose),
            "choose_many": list(choose_many),
            "input": list(input),
            "write": list(write),
            "confirm": list(confirm),
        }
        self.calls = []

    def _next(self, kind, *args):
        self.calls.append((kind,) + args)
        answers = self.answers[kind]
        if not answers:
            raise AssertionError(f"Unexpected {kind} prompt: {args}")
        answer = answers.pop(0)
        if isinstance(answer, BaseException):
            raise answer
        if callable(answer):
            return answer(*args)
        return answer

    def choose(self, header, choices):
        return self._next("choose", header, list(choices))

    def choose_many(self, header, choices):
        return self._next("choose_many", header, list(choices))

    def input(self, prompt, value="", char_limit=None):
        return self._next("input", prompt)

    def write(self, prompt):
        return self._next("write", prompt)

    def confirm(self, question, default=False):
        return self._next("confirm", question)


@pytest.fixture
def scripted_prompter():
    return ScriptedPrompter
