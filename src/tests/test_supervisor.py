"""
Tests for the ProcessSupervisor and its policy.

Requires Python 3.11+.
"""

import pytest

from supervisor.models import Policy, ReconcileOutcome
from supervisor.supervisor import ProcessSupervisor


class TestPolicy:
    """Test cases for Policy."""

    def test_reexec_forces_kill(self, command):
        policy = Policy(command=command, reexec=True, kill=False)
        assert policy.kill is True
        assert policy.kill_before_restart is True

    def test_kill_alone_does_not_kill_before_restart(self, command):
        """Killing before a restart needs reexec too."""
        policy = Policy(command=command, kill=True)
        assert policy.kill is True
        assert policy.kill_before_restart is False

    def test_command_required(self):
        with pytest.raises(ValueError):
            Policy(command=())

    def test_negative_interval_rejected(self, command):
        with pytest.raises(ValueError):
            Policy(command=command, interval_ms=-5)

    def test_command_is_tuple(self):
        policy = Policy(command=["make", "test"])
        assert policy.command == ("make", "test")
        assert policy.program == "make"

    def test_interval_seconds(self, command):
        assert Policy(command=command, interval_ms=250).interval_s == 0.25


class TestStartup:
    """Initial spawn behaviour."""

    def test_reexec_spawns_at_start(self, reexec_policy, launcher):
        supervisor = ProcessSupervisor(reexec_policy, launcher)
        child = supervisor.start()

        assert child is not None
        assert supervisor.is_occupied
        assert launcher.spawn_count == 1

    def test_without_reexec_nothing_at_start(self, plain_policy, launcher):
        supervisor = ProcessSupervisor(plain_policy, launcher)

        assert supervisor.start() is None
        assert not supervisor.is_occupied
        assert launcher.spawn_count == 0

    def test_start_failure_leaves_slot_empty(self, reexec_policy, launcher, capsys):
        launcher.fail_next.append("No such file or directory")
        supervisor = ProcessSupervisor(reexec_policy, launcher)

        assert supervisor.start() is None
        assert not supervisor.is_occupied
        assert "spawn_failed" in capsys.readouterr().err


class TestKillAndRestart:
    """reexec=True (kill implied)."""

    def test_running_child_killed_and_waited_before_spawn(self, reexec_policy, launcher):
        supervisor = ProcessSupervisor(reexec_policy, launcher)
        first = supervisor.start()
        launcher.calls.clear()

        outcome = supervisor.reconcile()

        assert outcome is ReconcileOutcome.RESTARTED
        assert launcher.actions() == ["kill", "wait", "spawn"]
        assert launcher.calls[0][1] == first.pid
        assert supervisor.child is not first
        assert supervisor.child is launcher.children[-1]

    def test_kill_failure_skips_spawn(self, reexec_policy, launcher, capsys):
        supervisor = ProcessSupervisor(reexec_policy, launcher)
        supervisor.start().kill_error = "Operation not permitted"
        launcher.calls.clear()

        outcome = supervisor.reconcile()

        assert outcome is ReconcileOutcome.RESTART_SKIPPED
        assert launcher.actions() == ["kill"]
        assert not supervisor.is_occupied
        err = capsys.readouterr().err
        assert "kill_failed" in err
        assert "restart_skipped" in err

    def test_wait_failure_skips_spawn(self, reexec_policy, launcher, capsys):
        supervisor = ProcessSupervisor(reexec_policy, launcher)
        supervisor.start().wait_error = "No child processes"
        launcher.calls.clear()

        outcome = supervisor.reconcile()

        assert outcome is ReconcileOutcome.RESTART_SKIPPED
        assert launcher.actions() == ["kill", "wait"]
        assert not supervisor.is_occupied
        assert "wait_failed" in capsys.readouterr().err

    def test_next_trigger_after_skip_spawns(self, reexec_policy, launcher):
        """A skipped restart is retried on the following trigger."""
        supervisor = ProcessSupervisor(reexec_policy, launcher)
        supervisor.start().kill_error = "denied"
        supervisor.reconcile()

        outcome = supervisor.reconcile()

        assert outcome is ReconcileOutcome.SPAWNED
        assert supervisor.is_occupied
        assert launcher.spawn_count == 2

    def test_spawn_failure_after_kill(self, reexec_policy, launcher):
        supervisor = ProcessSupervisor(reexec_policy, launcher)
        supervisor.start()
        launcher.fail_next.append("exec format error")

        assert supervisor.reconcile() is ReconcileOutcome.SPAWN_FAILED
        assert not supervisor.is_occupied

        assert supervisor.reconcile() is ReconcileOutcome.SPAWNED
        assert supervisor.is_occupied

    def test_terminated_is_logged(self, reexec_policy, launcher, capsys):
        supervisor = ProcessSupervisor(reexec_policy, launcher)
        supervisor.start()
        supervisor.reconcile()

        out = capsys.readouterr().out
        assert "child_terminated" in out
        assert out.count("child_started") == 2


class TestLeaveRunning:
    """kill before restart disabled."""

    def test_running_child_left_alone(self, command, launcher):
        policy = Policy(command=command, kill=True)
        supervisor = ProcessSupervisor(policy, launcher)
        supervisor.reconcile()
        first = supervisor.child
        launcher.calls.clear()

        outcome = supervisor.reconcile()

        assert outcome is ReconcileOutcome.LEFT_RUNNING
        assert supervisor.child is first
        assert launcher.actions() == ["poll"]

    def test_exited_child_is_replaced(self, plain_policy, launcher):
        supervisor = ProcessSupervisor(plain_policy, launcher)
        supervisor.reconcile()
        first = supervisor.child
        first.exit(0)

        outcome = supervisor.reconcile()

        assert outcome is ReconcileOutcome.SPAWNED
        assert supervisor.child is not first
        assert "kill" not in launcher.actions()

    def test_no_reexec_trigger_spawns(self, plain_policy, launcher):
        """Without reexec the first trigger still starts the command."""
        supervisor = ProcessSupervisor(plain_policy, launcher)
        supervisor.start()

        assert supervisor.reconcile() is ReconcileOutcome.SPAWNED
        assert launcher.spawn_count == 1

    def test_spawn_failure_is_not_fatal(self, plain_policy, launcher, capsys):
        launcher.fail_next.append("Permission denied")
        supervisor = ProcessSupervisor(plain_policy, launcher)

        assert supervisor.reconcile() is ReconcileOutcome.SPAWN_FAILED
        assert "Permission denied" in capsys.readouterr().err
        assert supervisor.reconcile() is ReconcileOutcome.SPAWNED


class TestShutdown:

    def test_shutdown_kills_running_child(self, reexec_policy, launcher):
        supervisor = ProcessSupervisor(reexec_policy, launcher)
        supervisor.start()
        launcher.calls.clear()

        supervisor.shutdown()

        assert launcher.actions() == ["poll", "kill", "wait"]
        assert not supervisor.is_occupied

    def test_shutdown_with_empty_slot(self, plain_policy, launcher):
        supervisor = ProcessSupervisor(plain_policy, launcher)
        supervisor.shutdown()
        assert launcher.calls == []
