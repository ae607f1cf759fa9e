"""Unit tests for environment-bound settings."""

from reactAgent.config.settings import GovernanceSettings, ModelSettings, ObservabilitySettings


class TestSettings:
    def test_governance_defaults(self, monkeypatch):
        for name in ("MAX_STEPS", "MAX_DEPTH", "MAX_PARALLEL", "PLAN_FIRST"):
            monkeypatch.delenv(name, raising=False)
        governance = GovernanceSettings(_env_file=None)
        assert governance.max_depth == 2
        assert governance.child_max_steps < governance.max_steps
        assert governance.answer_timeout is None

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("MAX_DEPTH", "3")
        monkeypatch.setenv("MAX_PARALLEL", "8")
        monkeypatch.setenv("AUTO_APPROVE", "true")
        governance = GovernanceSettings(_env_file=None)
        assert governance.max_depth == 3
        assert governance.max_parallel == 8
        assert governance.auto_approve is True

    def test_model_id_aliases(self, monkeypatch):
        monkeypatch.delenv("MODEL_ID", raising=False)
        monkeypatch.delenv("MODEL_CHAT", raising=False)
        monkeypatch.setenv("MODEL_CHAT_ID", "my-model")
        assert ModelSettings(_env_file=None).model_id == "my-model"

    def test_field_names_accepted(self):
        assert ObservabilitySettings(log_dir=None, _env_file=None).log_dir is None
