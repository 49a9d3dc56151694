"""Tests for the fluent builder surface."""

from riel import Pipeline, StepKind, pipeline


def noop(*args):
    return None


def test_factory_returns_pipeline():
    assert isinstance(pipeline(), Pipeline)


def test_builder_methods_return_same_instance():
    p = pipeline()

    assert p.step(noop) is p
    assert p.fail(noop) is p
    assert p.fail_fast(noop) is p


def test_entries_follow_registration_order():
    p = pipeline().step(noop).fail(noop).step(noop, name="second").fail_fast(noop)

    assert [e.kind for e in p.entries] == [StepKind.STEP, StepKind.FAIL, StepKind.STEP, StepKind.FAILFAST]
    assert p.entries[2].name == "second"
    assert len(p) == 4


def test_builder_does_not_validate_callbacks():
    p = pipeline().step("not callable")

    assert len(p) == 1


def test_repr_includes_name_and_size():
    assert repr(pipeline("orders").step(noop)) == "Pipeline(name='orders', entries=1)"


async def test_non_callable_step_fails_at_run_time():
    outcome = await pipeline().step("not callable").run({})

    assert outcome.ok is False
    assert isinstance(outcome.error, TypeError)
