"""Unit tests for the Ask/Answer protocol."""

import asyncio

import pytest

from reactAgent.hitl import SILENT_ASK_REASON, AskChannel, AskState
from reactAgent.memory import WorkingMemory
from reactAgent.runtime import DepthGuard, ExecutionContext
from reactAgent.utils.error_handler import AbortedError, AgentError, TaskTimeoutError
from tests.fakes import ScriptedOperator, SilentOperator


def _context(**overrides):
    values = dict(task_id="t1", depth=0, memory=WorkingMemory(), depth_guard=DepthGuard(2))
    values.update(overrides)
    return ExecutionContext(**values)


class TestAskChannel:
    @pytest.mark.asyncio
    async def test_answer_returns_to_running(self):
        operator = ScriptedOperator(["Paris"])
        channel = AskChannel(operator)
        answer = await channel.ask("Which city?", _context())
        assert answer == "Paris"
        assert channel.state == AskState.RUNNING
        assert operator.questions == ["Which city?"]

    @pytest.mark.asyncio
    async def test_silent_context_never_waits(self):
        operator = ScriptedOperator(["unused"])
        channel = AskChannel(operator)
        with pytest.raises(AgentError) as exc_info:
            await channel.ask("Which city?", _context(silent=True))
        assert str(exc_info.value) == SILENT_ASK_REASON
        assert channel.state == AskState.RUNNING
        assert operator.questions == []

    @pytest.mark.asyncio
    async def test_sub_agent_context_is_silent(self):
        channel = AskChannel(ScriptedOperator(["x"]))
        with pytest.raises(AgentError):
            await channel.ask("?", _context(depth=1))

    @pytest.mark.asyncio
    async def test_abort_while_waiting(self):
        context = _context()
        channel = AskChannel(SilentOperator(), poll_interval=0.01)

        async def abort_soon():
            await asyncio.sleep(0.05)
            assert channel.state == AskState.AWAITING_ANSWER
            context.cancel.request_cancel("operator left")

        with pytest.raises(AbortedError):
            await asyncio.gather(channel.ask("Anyone?", context), abort_soon())
        assert channel.state == AskState.ABORTED

    @pytest.mark.asyncio
    async def test_answer_timeout(self):
        channel = AskChannel(SilentOperator(), answer_timeout=0.05, poll_interval=0.01)
        with pytest.raises(TaskTimeoutError):
            await channel.ask("Anyone?", _context())
        assert channel.state == AskState.ABORTED

    @pytest.mark.asyncio
    async def test_task_deadline_ends_the_wait(self, fake_clock):
        context = _context(clock=fake_clock, deadline=fake_clock() + 10)
        channel = AskChannel(SilentOperator(), poll_interval=0.01, clock=fake_clock)

        async def pass_deadline():
            await asyncio.sleep(0.03)
            fake_clock.advance(60)

        with pytest.raises(TaskTimeoutError):
            await asyncio.gather(channel.ask("Anyone?", context), pass_deadline())
        assert channel.state == AskState.ABORTED

    @pytest.mark.asyncio
    async def test_already_aborted_task_cannot_ask(self):
        context = _context()
        context.cancel.request_cancel()
        operator = ScriptedOperator(["x"])
        with pytest.raises(AbortedError):
            await AskChannel(operator).ask("?", context)
        assert operator.questions == []
