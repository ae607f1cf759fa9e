"""Unit tests for SubAgentSpawner with a stubbed task runner."""

import asyncio

import pytest

from reactAgent.memory import WorkingMemory, merge_key
from reactAgent.runtime import DepthGuard, ExecutionContext, SubAgentSpawner
from reactAgent.schema import SubTaskRequest, TaskResult, TaskStatus


def _context(depth=0, max_depth=2, memory=None):
    return ExecutionContext(
        task_id="parent",
        depth=depth,
        memory=memory if memory is not None else WorkingMemory(depth=depth),
        depth_guard=DepthGuard(max_depth),
    )


class RecordingRunner:
    """Stands in for Orchestrator.execute."""

    def __init__(self, delay=0.01, fail_on=()):
        self.delay = delay
        self.fail_on = set(fail_on)
        self.tasks = []
        self.contexts = []
        self.active = 0
        self.peak = 0

    async def __call__(self, task, context):
        self.tasks.append(task)
        self.contexts.append(context)
        self.active += 1
        self.peak = max(self.peak, self.active)
        try:
            await asyncio.sleep(self.delay)
            if task.description in self.fail_on:
                raise RuntimeError(f"worker crashed on {task.description}")
            context.memory.store(f"wrote:{task.description}", context.depth)
            return TaskResult(
                task_id=task.task_id,
                status=TaskStatus.DONE,
                output=f"did {task.description}",
                step_count=2,
            )
        finally:
            self.active -= 1


def _spawner(runner, **overrides):
    values = dict(child_max_steps=5, token_budget=1000, max_parallel=4, subtask_timeout=30.0)
    values.update(overrides)
    return SubAgentSpawner(runner, **values)


class TestSequentialSpawn:
    @pytest.mark.asyncio
    async def test_depth_zero_child_shares_memory(self):
        runner = RecordingRunner()
        context = _context(depth=0)
        result = await _spawner(runner).spawn(context, SubTaskRequest("collect"))

        assert result.status == TaskStatus.DONE
        assert result.steps_used == 2
        assert runner.contexts[0].memory is context.memory
        assert context.memory.recall("wrote:collect") == 1
        assert result.memory_delta == {"wrote:collect": 1}
        # Shared memory needs no merge entry
        assert merge_key("collect", 0) not in context.memory

    @pytest.mark.asyncio
    async def test_deeper_child_gets_isolated_clone(self):
        runner = RecordingRunner()
        parent_memory = WorkingMemory(depth=1, entries={"seen": True})
        context = _context(depth=1, memory=parent_memory)
        await _spawner(runner).spawn(context, SubTaskRequest("dig"))

        child_memory = runner.contexts[0].memory
        assert child_memory is not parent_memory
        assert child_memory.scope == "isolated"
        assert child_memory.recall("seen") is True
        assert "wrote:dig" not in parent_memory
        merged = parent_memory.recall(merge_key("dig", 0))
        assert merged["memory"] == {"wrote:dig": 2}
        assert merged["status"] == "done"

    @pytest.mark.asyncio
    async def test_child_task_defaults(self):
        runner = RecordingRunner()
        context = _context()
        await _spawner(runner).spawn(context, SubTaskRequest("x"))
        task = runner.tasks[0]
        child_context = runner.contexts[0]

        assert task.max_steps == 5
        assert task.depth == 1
        assert task.silent and not task.plan_first
        assert child_context.depth == 1
        assert not child_context.interactive
        assert child_context.depth_guard is context.depth_guard

    @pytest.mark.asyncio
    async def test_default_budget_below_parent(self):
        runner = RecordingRunner()
        spawner = _spawner(runner)

        tight = _context()
        tight.max_steps = 4
        await spawner.spawn(tight, SubTaskRequest("tight"))
        minimal = _context()
        minimal.max_steps = 1
        await spawner.spawn(minimal, SubTaskRequest("minimal"))
        roomy = _context()
        roomy.max_steps = 30
        await spawner.spawn(roomy, SubTaskRequest("roomy"))

        assert [t.max_steps for t in runner.tasks] == [3, 1, 5]
        assert [c.max_steps for c in runner.contexts] == [3, 1, 5]

    @pytest.mark.asyncio
    async def test_explicit_budget_wins(self):
        runner = RecordingRunner()
        context = _context()
        context.max_steps = 3
        await _spawner(runner).spawn(context, SubTaskRequest("x", max_steps=8))
        assert runner.tasks[0].max_steps == 8

    @pytest.mark.asyncio
    async def test_overrides_and_memory_seed(self):
        runner = RecordingRunner()
        context = _context(depth=1)
        request = SubTaskRequest("x", max_steps=2, memory_seed={"hint": "look left"})
        result = await _spawner(runner).spawn(context, request)

        assert runner.tasks[0].max_steps == 2
        assert runner.contexts[0].memory.recall("hint") == "look left"
        # The seed is input, not something the child produced
        assert "hint" not in result.memory_delta

    @pytest.mark.asyncio
    async def test_depth_limit_does_not_run(self):
        runner = RecordingRunner()
        context = _context(depth=2, max_depth=2)
        result = await _spawner(runner).spawn(context, SubTaskRequest("too deep"))

        assert result.status == TaskStatus.DEPTH_LIMIT
        assert runner.tasks == []
        assert context.depth_guard.in_flight == 0
        assert len(context.memory) == 0

    @pytest.mark.asyncio
    async def test_crash_becomes_error_result(self):
        runner = RecordingRunner(fail_on={"boom"})
        context = _context()
        result = await _spawner(runner).spawn(context, SubTaskRequest("boom"))
        assert result.status == TaskStatus.ERROR
        assert "worker crashed" in result.output
        assert context.depth_guard.in_flight == 0

    @pytest.mark.asyncio
    async def test_spawn_sequence_keeps_order(self):
        runner = RecordingRunner()
        results = await _spawner(runner).spawn_sequence(_context(), [SubTaskRequest("a"), SubTaskRequest("b")])
        assert [r.index for r in results] == [0, 1]
        assert [t.description for t in runner.tasks] == ["a", "b"]
        assert runner.peak == 1


class TestParallelSpawn:
    @pytest.mark.asyncio
    async def test_results_in_request_order_with_isolated_clones(self):
        runner = RecordingRunner()
        context = _context(depth=0)
        requests = [SubTaskRequest(name) for name in ("a", "b", "c")]
        results = await _spawner(runner).spawn_parallel(context, requests)

        assert [r.description for r in results] == ["a", "b", "c"]
        assert [r.index for r in results] == [0, 1, 2]
        memories = [c.memory for c in runner.contexts]
        assert len({id(m) for m in memories}) == 3
        assert all(m is not context.memory for m in memories)
        # Branch writes only reach the parent through merge keys
        assert "wrote:a" not in context.memory
        for i, name in enumerate(("a", "b", "c")):
            assert context.memory.recall(merge_key(name, i))["memory"] == {f"wrote:{name}": 1}

    @pytest.mark.asyncio
    async def test_pool_is_bounded(self):
        runner = RecordingRunner(delay=0.02)
        requests = [SubTaskRequest(f"t{i}") for i in range(6)]
        results = await _spawner(runner, max_parallel=2).spawn_parallel(_context(), requests)
        assert len(results) == 6
        assert runner.peak == 2

    @pytest.mark.asyncio
    async def test_failure_does_not_cancel_siblings(self):
        runner = RecordingRunner(fail_on={"b"})
        context = _context()
        results = await _spawner(runner).spawn_parallel(
            context, [SubTaskRequest("a"), SubTaskRequest("b"), SubTaskRequest("c")]
        )
        assert [r.status for r in results] == [TaskStatus.DONE, TaskStatus.ERROR, TaskStatus.DONE]
        assert context.memory.recall(merge_key("b", 1))["status"] == "error"
        assert context.depth_guard.in_flight == 0

    @pytest.mark.asyncio
    async def test_parallel_at_max_depth(self):
        runner = RecordingRunner()
        context = _context(depth=1, max_depth=1)
        results = await _spawner(runner).spawn_parallel(context, [SubTaskRequest("a"), SubTaskRequest("b")])
        assert [r.status for r in results] == [TaskStatus.DEPTH_LIMIT, TaskStatus.DEPTH_LIMIT]
        assert runner.tasks == []
        assert len(context.memory) == 0

    @pytest.mark.asyncio
    async def test_empty_request_list(self):
        assert await _spawner(RecordingRunner()).spawn_parallel(_context(), []) == []


class TestSubTaskRequest:
    def test_coerce_string_and_mapping(self):
        assert SubTaskRequest.coerce(" a ").description == "a"
        request = SubTaskRequest.coerce({"task": "b", "max_steps": 3, "memory_seed": {"k": 1}})
        assert (request.description, request.max_steps, request.memory_seed) == ("b", 3, {"k": 1})

    def test_coerce_rejects_other_types(self):
        with pytest.raises(ValueError):
            SubTaskRequest.coerce(42)


class TestCancellation:
    @pytest.mark.asyncio
    async def test_cancelled_parallel_spawn_releases_slots(self):
        runner = RecordingRunner(delay=10)
        context = _context()
        spawn = asyncio.ensure_future(
            _spawner(runner).spawn_parallel(context, [SubTaskRequest("a"), SubTaskRequest("b")])
        )
        while runner.active < 2:
            await asyncio.sleep(0.01)
        assert context.depth_guard.in_flight == 2

        spawn.cancel()
        with pytest.raises(asyncio.CancelledError):
            await spawn
        assert context.depth_guard.in_flight == 0

    @pytest.mark.asyncio
    async def test_cancelled_sequential_spawn_releases_slot(self):
        runner = RecordingRunner(delay=10)
        context = _context(depth=1)
        spawn = asyncio.ensure_future(_spawner(runner).spawn(context, SubTaskRequest("slow")))
        while runner.active < 1:
            await asyncio.sleep(0.01)
        assert context.depth_guard.live_at(2) == 1

        spawn.cancel()
        with pytest.raises(asyncio.CancelledError):
            await spawn
        assert context.depth_guard.in_flight == 0
        # Nothing is merged for a child that never finished
        assert len(context.memory) == 0
