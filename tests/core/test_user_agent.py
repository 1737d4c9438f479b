# tests/core/test_user_agent.py
from link_prober.services import user_agent_service
from link_prober.services.user_agent_service import PROBE_PRODUCT, generate_default_user_agent


def test_user_agent_contains_version_and_product(monkeypatch):
    monkeypatch.setattr(user_agent_service.platform, "system", lambda: "Linux")
    agent = generate_default_user_agent("121.0.0.0")

    assert agent.startswith("Mozilla/5.0 (X11; Linux x86_64)")
    assert "Chrome/121.0.0.0" in agent
    assert agent.endswith(PROBE_PRODUCT)


def test_unknown_os_and_no_product(monkeypatch):
    monkeypatch.setattr(user_agent_service.platform, "system", lambda: "Plan9")
    agent = generate_default_user_agent(product="")

    assert "(Unknown OS)" in agent
    assert agent.endswith("Safari/537.36")
