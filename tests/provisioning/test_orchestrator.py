import os
import stat

from common.system_state import DryRunSystemState
from provisioning.orchestrator import ProvisioningOrchestrator

from conftest import PRIVATE_KEY_BYTES, PUBLIC_KEY_BYTES, FakeSystemState


def test_fresh_host_is_fully_provisioned(fake_state, app_settings, host_root):
    exit_code = ProvisioningOrchestrator(fake_state, app_settings).run()

    assert exit_code == 0
    assert {"sudo", "adm"} <= set(fake_state.user_groups("solana"))
    assert (host_root / "sudoers").read_text(encoding="utf-8").splitlines()[
        -1
    ] == "solana ALL=(ALL) NOPASSWD:ALL"

    ssh_dir = host_root / "home" / "solana" / ".ssh"
    assert (ssh_dir / "authorized_keys").read_bytes() == PUBLIC_KEY_BYTES
    assert (ssh_dir / "id_ecdsa").read_bytes() == PRIVATE_KEY_BYTES
    assert stat.S_IMODE(os.stat(ssh_dir / "id_ecdsa").st_mode) & 0o077 == 0
    config = (ssh_dir / "config").read_text(encoding="utf-8")
    assert "BatchMode yes" in config
    assert "StrictHostKeyChecking no" in config


def test_second_run_is_a_no_op(fake_state, app_settings):
    assert ProvisioningOrchestrator(fake_state, app_settings).run() == 0
    mutations_after_first_run = list(fake_state.mutations)

    orchestrator = ProvisioningOrchestrator(fake_state, app_settings)
    assert orchestrator.run() == 0

    assert fake_state.mutations == mutations_after_first_run
    assert [r.step_tag for r in orchestrator.results] == ["PREFLIGHT", "USER_CHECK"]


def test_non_linux_exits_one_without_mutation(app_settings):
    state = FakeSystemState(app_settings, os_name="FreeBSD")

    assert ProvisioningOrchestrator(state, app_settings).run() == 1
    assert state.mutations == []


def test_non_root_exits_one_without_mutation(app_settings):
    state = FakeSystemState(app_settings, username="solana")

    assert ProvisioningOrchestrator(state, app_settings).run() == 1
    assert state.mutations == []


def test_missing_key_stops_before_ssh_files(fake_state, app_settings, host_root):
    (host_root / "solana-id_ecdsa.pub").unlink()

    orchestrator = ProvisioningOrchestrator(fake_state, app_settings)

    assert orchestrator.run() == 1
    # the account is created before the keys are checked
    assert "create_user:solana" in fake_state.mutations
    assert not (host_root / "home" / "solana" / ".ssh").exists()
    assert orchestrator.results[-1].step_tag == "KEY_MATERIAL"


def test_similar_account_does_not_block_exact_match(fake_state, app_settings):
    fake_state.shared["registry"].append(
        "solana2:x:1002:1002::/home/solana2:/bin/bash"
    )

    assert ProvisioningOrchestrator(fake_state, app_settings).run() == 0
    assert "create_user:solana" in fake_state.mutations


def test_similar_account_blocks_substring_match(fake_state, app_settings):
    fake_state.shared["registry"].append(
        "solana2:x:1002:1002::/home/solana2:/bin/bash"
    )
    settings = app_settings.model_copy(update={"user_match_mode": "substring"})

    assert ProvisioningOrchestrator(fake_state, settings).run() == 0
    assert fake_state.mutations == []


def test_dry_run_plans_every_mutation(mocker, app_settings, host_root):
    mocker.patch("common.system_state.platform.system", return_value="Linux")
    mocker.patch(
        "common.system_state.SystemState.effective_username",
        return_value="root",
    )
    mock_elevated = mocker.patch("common.system_state.run_elevated_command")
    state = DryRunSystemState(app_settings)

    assert ProvisioningOrchestrator(state, app_settings).run() == 0

    mock_elevated.assert_not_called()
    assert len(state.planned_actions) == 9
    assert state.planned_actions[-1].startswith("[as solana] write")
    assert not (host_root / "home" / "solana").exists()
