import pytest

from provisioning.user_check import registry_contains_user, user_exists

REGISTRY = [
    "root:x:0:0:root:/root:/bin/bash",
    "solana2:x:1002:1002::/home/solana2:/bin/bash",
]


def test_exact_match_finds_user():
    assert registry_contains_user(
        REGISTRY + ["solana:x:1001:1001::/home/solana:/bin/bash"], "solana"
    )


def test_exact_match_ignores_similar_names():
    assert registry_contains_user(REGISTRY, "solana", "exact") is False


def test_substring_match_reproduces_legacy_behaviour():
    assert registry_contains_user(REGISTRY, "solana", "substring") is True


@pytest.mark.parametrize("mode", ["exact", "substring"])
def test_empty_registry(mode):
    assert registry_contains_user([], "solana", mode) is False


def test_user_exists_logs_when_found(fake_state, app_settings, mock_logger):
    fake_state.shared["registry"].append("solana:x:1001:1001::/home/solana:/bin/bash")

    assert user_exists(fake_state, app_settings, mock_logger) is True
    mock_logger.info.assert_called_once_with(
        "ℹ️ User solana already exists", exc_info=False
    )


def test_user_exists_respects_match_mode(fake_state, app_settings):
    fake_state.shared["registry"].append(REGISTRY[1])

    assert user_exists(fake_state, app_settings) is False

    substring_settings = app_settings.model_copy(
        update={"user_match_mode": "substring"}
    )
    assert user_exists(fake_state, substring_settings) is True
