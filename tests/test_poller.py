import logging
from datetime import timedelta
from functools import partial

import pytest

from kcm_e2e.errors import ConvergenceTimeout, InsufficientReplicas, NotReady, QueryError
from kcm_e2e.expectations import ExpectationRegistry, ProviderKind
from kcm_e2e.poller import Poller
from kcm_e2e.prober import verify_controllers_up

from helpers import FakeCluster, Script, not_ready, ready

REGISTRY = ExpectationRegistry(replica_overrides={ProviderKind.AZURE: 2})
TARGETS = REGISTRY.targets_for([ProviderKind.AWS, ProviderKind.AZURE])
CORE, AWS, AZURE = TARGETS


def all_ready():
    return {
        CORE.label_selector: [ready("kcm-controller-manager")],
        AWS.label_selector: [ready("capa-controller-manager")],
        AZURE.label_selector: [ready("capz-controller-manager"), ready("azureserviceoperator-controller-manager")],
    }


def poller(clock, timeout=60, interval=10):
    return Poller(timeout, interval, clock=clock, sleep=clock.sleep)


def test_converges_on_first_tick_without_sleeping(clock):
    tick = partial(verify_controllers_up, TARGETS, FakeCluster(all_ready()))
    assert poller(clock).until_converged(tick, "Controller validation") == 1
    assert clock.sleeps == []


def test_not_ready_then_converged(clock, caplog):
    deployments = all_ready()
    deployments[AZURE.label_selector] = Script(
        [ready("capz-controller-manager"), not_ready("azureserviceoperator-controller-manager")],
        [ready("capz-controller-manager"), ready("azureserviceoperator-controller-manager")],
    )
    tick = partial(verify_controllers_up, TARGETS, FakeCluster(deployments))

    with caplog.at_level(logging.WARNING, logger="kcm_e2e.poller"):
        attempts = poller(clock).until_converged(tick, "Controller validation")

    assert attempts == 2
    assert clock.now == 10
    assert "NotReady infrastructure-azure" in caplog.text


def test_insufficient_replicas_until_timeout(clock):
    deployments = all_ready()
    deployments[AZURE.label_selector] = [ready("capz-controller-manager")]
    tick = partial(verify_controllers_up, TARGETS, FakeCluster(deployments))

    with pytest.raises(ConvergenceTimeout) as exc:
        poller(clock, timeout=30, interval=10).until_converged(tick, "Controller validation")

    assert exc.value.attempts == 4
    assert isinstance(exc.value.last_error, InsufficientReplicas)
    assert "infrastructure-azure" in str(exc.value)
    assert clock.now == 30


def test_timeout_dominates_interval(clock):
    tick = partial(verify_controllers_up, TARGETS, FakeCluster())
    with pytest.raises(ConvergenceTimeout) as exc:
        poller(clock, timeout=1, interval=10).until_converged(tick)
    assert exc.value.attempts == 2
    assert clock.sleeps == [1]
    assert clock.now == 1


def test_last_failure_is_reported(clock):
    errors = iter([NotReady(name, "not ready") for name in ("first", "second", "third")])

    def tick():
        raise next(errors)

    with pytest.raises(ConvergenceTimeout) as exc:
        poller(clock, timeout=15, interval=10).until_converged(tick)
    assert exc.value.last_error.target == "third"


def test_regression_after_success_is_caught(clock):
    # no state survives between ticks: a target that was ready and regressed fails again
    deployments = all_ready()
    deployments[AWS.label_selector] = Script(
        [ready("capa-controller-manager")],
        [not_ready("capa-controller-manager")],
    )
    deployments[AZURE.label_selector] = Script(
        [not_ready("capz-controller-manager"), ready("azureserviceoperator-controller-manager")],
        [ready("capz-controller-manager"), ready("azureserviceoperator-controller-manager")],
    )
    tick = partial(verify_controllers_up, TARGETS, FakeCluster(deployments))
    with pytest.raises(ConvergenceTimeout) as exc:
        poller(clock, timeout=20, interval=10).until_converged(tick)
    assert exc.value.last_error.target == "infrastructure-aws"


def test_hard_error_propagates_immediately(clock):
    calls = []

    def tick():
        calls.append(1)
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        poller(clock).until_converged(tick)
    assert calls == [1]
    assert clock.sleeps == []


def test_accepts_timedelta(clock):
    p = Poller(timedelta(minutes=15), timedelta(seconds=10), clock=clock, sleep=clock.sleep)
    assert p.timeout == 900
    assert p.interval == 10


def test_rejects_bad_durations():
    with pytest.raises(ValueError):
        Poller(-1, 10)
    with pytest.raises(ValueError):
        Poller(10, 0)


def test_last_attempt_runs_at_the_deadline(clock):
    deployments = all_ready()
    deployments[AWS.label_selector] = Script(
        [not_ready("capa-controller-manager")],
        [not_ready("capa-controller-manager")],
        [ready("capa-controller-manager")],
    )
    tick = partial(verify_controllers_up, TARGETS, FakeCluster(deployments))
    assert poller(clock, timeout=20, interval=10).until_converged(tick) == 3
    assert clock.now == 20


def test_query_error_is_retried(clock):
    deployments = all_ready()
    deployments[CORE.label_selector] = Script(
        QueryError(CORE.label_selector, "connection refused"),
        [ready("kcm-controller-manager")],
    )
    tick = partial(verify_controllers_up, TARGETS, FakeCluster(deployments))
    assert poller(clock).until_converged(tick) == 2
    assert clock.now == 10


def test_persistent_query_error_times_out(clock):
    deployments = all_ready()
    deployments[AWS.label_selector] = QueryError(AWS.label_selector, "connection refused")
    tick = partial(verify_controllers_up, TARGETS, FakeCluster(deployments))
    with pytest.raises(ConvergenceTimeout) as exc:
        poller(clock, timeout=30, interval=10).until_converged(tick)
    assert isinstance(exc.value.last_error, QueryError)
    assert exc.value.last_error.target == "infrastructure-aws"
    assert exc.value.attempts == 4
