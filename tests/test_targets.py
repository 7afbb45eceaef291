"""
Tests for boxconf.targets and boxconf.host modules.

Tests the in-memory targets and the configuration runner including:
- Setter and directive capability answers
- Recording of applied directives
- Provisioner activation rules
- Runner callback ordering
"""

from __future__ import annotations

import pytest

from boxconf.exceptions import ConfigError
from boxconf.host import ConfigRunner, get_runner, reset_runner
from boxconf.targets import ChefSoloProvisioner, MachineConfig


class TestMachineConfig:
    """Tests for the recording machine target."""

    def test_has_setter(self):
        machine = MachineConfig()

        assert machine.has_setter("box")
        assert machine.has_setter("host_name")
        assert not machine.has_setter("forward_port")
        assert not machine.has_setter("share_folder")

    def test_setter_last_value_wins(self):
        machine = MachineConfig()

        machine.invoke_setter("box", "lucid32")
        machine.invoke_setter("box", "precise64")

        assert machine.to_dict() == {"box": "precise64"}

    def test_unknown_setter_raises(self):
        with pytest.raises(ConfigError):
            MachineConfig().invoke_setter("memory", 512)

    def test_generic_directives_accumulate(self):
        machine = MachineConfig()

        machine.invoke_generic("forward_port", "web", 80, 8080)
        machine.invoke_generic("forward_port", "ssl", 443, 8443)
        machine.invoke_generic("share_folder", "app", "/srv/app", "/host/app", {"nfs": True})
        machine.invoke_generic("network", "33.33.33.10")
        machine.invoke_generic("customize", ["modifyvm", ":id", "--memory", "1024"])

        data = machine.to_dict()
        assert data["forwarded_ports"] == [
            {"label": "web", "guest": 80, "host": 8080},
            {"label": "ssl", "guest": 443, "host": 8443},
        ]
        assert data["shared_folders"] == [
            {
                "label": "app",
                "guest_path": "/srv/app",
                "host_path": "/host/app",
                "options": {"nfs": True},
            }
        ]
        assert data["networks"] == [{"ip": "33.33.33.10", "options": {}}]
        assert data["customizations"] == [["modifyvm", ":id", "--memory", "1024"]]

    def test_unknown_directive_raises(self):
        with pytest.raises(ConfigError, match="Unknown machine directive"):
            MachineConfig().invoke_generic("teleport", "mars")

    def test_bad_directive_arguments_raise_config_error(self):
        with pytest.raises(ConfigError, match="Invalid arguments"):
            MachineConfig().invoke_generic("forward_port", "web")

    def test_inactive_provisioner_not_in_output(self):
        machine = MachineConfig()
        machine.invoke_setter("box", "lucid32")

        assert "chef_solo" not in machine.to_dict()


class TestChefSoloProvisioner:
    """Tests for the recording chef-solo provisioner."""

    def test_dispatch_before_activate_raises(self):
        provisioner = ChefSoloProvisioner()

        with pytest.raises(ConfigError, match="not active"):
            provisioner.invoke_setter("log_level", "debug")
        with pytest.raises(ConfigError):
            provisioner.register_unit("apache2")

    def test_paths_accumulate(self):
        provisioner = ChefSoloProvisioner()
        provisioner.activate()

        provisioner.invoke_setter("cookbooks_path", "/a")
        provisioner.invoke_setter("cookbooks_path", "/b")

        assert provisioner.to_dict()["cookbooks_path"] == ["/a", "/b"]

    def test_json_merge_and_run_list(self):
        provisioner = ChefSoloProvisioner()
        provisioner.activate()

        provisioner.merge_params({"a": 1, "b": 1})
        provisioner.register_unit("apache2")
        provisioner.merge_params({"a": 2})
        provisioner.register_unit("mysql")
        provisioner.invoke_generic("add_role", "web")

        data = provisioner.to_dict()
        assert data["json"] == {"a": 2, "b": 1}
        assert data["run_list"] == ["recipe[apache2]", "recipe[mysql]", "role[web]"]

    def test_unknown_directive_raises(self):
        provisioner = ChefSoloProvisioner()
        provisioner.activate()

        with pytest.raises(ConfigError, match="Unknown chef_solo directive"):
            provisioner.invoke_generic("add_spell", "fireball")


class TestConfigRunner:
    """Tests for the configuration-resolution host."""

    def test_runs_callbacks_in_order(self):
        runner = ConfigRunner()
        order: list[str] = []
        runner.register_commit_callback(lambda target: order.append("first"))
        runner.register_commit_callback(lambda target: order.append("second"))

        ran = runner.run(MachineConfig())

        assert ran == 2
        assert order == ["first", "second"]

    def test_callbacks_consumed(self):
        runner = ConfigRunner()
        calls: list[object] = []
        runner.register_commit_callback(calls.append)

        runner.run(MachineConfig())
        ran = runner.run(MachineConfig())

        assert ran == 0
        assert len(calls) == 1
        assert runner.pending == 0

    def test_callback_error_propagates(self):
        runner = ConfigRunner()

        def fail(target):
            raise ConfigError("boom")

        runner.register_commit_callback(fail)

        with pytest.raises(ConfigError, match="boom"):
            runner.run(MachineConfig())

    def test_global_runner_lifecycle(self):
        first = get_runner()
        assert get_runner() is first

        reset_runner()

        assert get_runner() is not first
