from __future__ import annotations

import pytest
from sqlalchemy import func, select

from ptstudio.models import Exercise, Template, TemplateExercise, User
from ptstudio.seeds import demo


def _count(session, model) -> int:
    return session.scalar(select(func.count()).select_from(model))


class TestSeedCommands:
    @pytest.fixture()
    def runner(self, app):
        return app.test_cli_runner()

    def test_demo_is_idempotent(self, session, runner):
        first = runner.invoke(args=["seed", "demo"])
        second = runner.invoke(args=["seed", "demo"])

        assert first.exit_code == 0, first.output
        assert second.exit_code == 0, second.output
        assert "Seed summary:" in first.output
        assert "templates" in first.output and "created= 1" in first.output
        assert "created= 0" in second.output

        assert _count(session, User) == 1 + len(demo.CLIENTS)
        assert _count(session, Exercise) == len(demo.EXERCISES)
        assert _count(session, Template) == 1
        assert _count(session, TemplateExercise) == len(demo.TEMPLATE_TREE)

    def test_demo_refused_in_production(self, app, runner, monkeypatch):
        monkeypatch.setitem(app.config, "APP_ENV", "production")

        result = runner.invoke(args=["seed", "demo"])

        assert result.exit_code != 0
        assert "non-production" in result.output

    def test_fresh_requires_confirmation(self, runner):
        result = runner.invoke(args=["seed", "fresh"], input="n\n")

        assert result.exit_code != 0
        assert "Aborted" in result.output
