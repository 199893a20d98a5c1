# tests/core/test_cpu.py
"""
lr35902_tracer.core.cpuモジュールの単体テスト。
命令サイクルのテンプレート（フェッチ→デコード→実行→PC確定）を、最小のテスト用CPUで検証します。
"""
from typing import Dict, List, Optional, Tuple

import pytest

from lr35902_tracer.core.state import CpuState
from lr35902_tracer.core.cpu import AbstractCpu
from lr35902_tracer.core.errors import DecodeError
from lr35902_tracer.transport.bus import Bus, RAM
from lr35902_tracer.common.types import RegisterLayoutInfo, RegisterInfo


class FakeCpu(AbstractCpu):
    """0x00 をNOP（1バイト）、0x01 を2バイト命令として扱うテスト用CPU。"""

    def _create_initial_state(self) -> CpuState:
        return CpuState()

    def _decode(self, opcode: int) -> Optional[str]:
        return {0x00: "NOP", 0x01: "SKIP"}.get(opcode)

    def _execute(self, instruction: str) -> int:
        # 実行中はまだPCが確定していないことを記録する
        self.pc_seen_during_execute = self._state.pc
        return self._state.pc + (2 if instruction == "SKIP" else 1)

    def _cycles_of(self, instruction: str) -> int:
        return 4

    def _describe(self, address: int, instruction: str) -> str:
        return instruction

    def get_register_map(self) -> Dict[str, int]:
        return {"PC": self._state.pc, "SP": self._state.sp}

    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        return [RegisterLayoutInfo("Test Group", [RegisterInfo("PC", 16), RegisterInfo("SP", 16)])]

    def get_flag_state(self) -> Dict[str, bool]:
        return {}

    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        return []


@pytest.fixture
def fake_cpu():
    bus = Bus()
    bus.register_device(0x0000, 0xFFFF, RAM(0x10000))
    return FakeCpu(bus), bus


class TestCpuState:
    def test_cpu_state_init_default(self):
        state = CpuState()
        assert state.pc == 0x0000
        assert state.sp == 0x0000


class TestAbstractCpu:
    # @intent:test_case_commit 実行が返したPCはサイクルの最後に確定されることを検証します。
    def test_step_commits_returned_pc(self, fake_cpu):
        cpu, bus = fake_cpu
        bus.load_bytes(0x0000, bytes([0x01, 0xEE, 0x00]))

        first = cpu.step()
        assert cpu.pc_seen_during_execute == 0x0000
        assert first.state.pc == 0x0002

        second = cpu.step()
        assert second.state.pc == 0x0003
        assert second.metadata.cycle_count == 8

    def test_step_masks_pc_to_16_bits(self, fake_cpu):
        cpu, bus = fake_cpu
        cpu.get_state().pc = 0xFFFF
        bus.load(0xFFFF, 0x01)
        cpu.step()
        assert cpu.get_state().pc == 0x0001

    def test_decode_failure(self, fake_cpu):
        cpu, bus = fake_cpu
        bus.load(0x0000, 0x02)
        with pytest.raises(DecodeError):
            cpu.step()
        assert cpu.get_state().pc == 0x0000

    def test_reset_clears_cycle_count(self, fake_cpu):
        cpu, _ = fake_cpu
        cpu.run(3)
        assert cpu.cycle_count == 12
        cpu.reset()
        assert cpu.cycle_count == 0
        assert cpu.get_state().pc == 0x0000

    def test_restore_state_with_cycle_count(self, fake_cpu):
        cpu, bus = fake_cpu
        saved = cpu.run(1)[0]
        cpu.run(2)
        assert cpu.cycle_count == 12

        cpu.restore_state(saved.state, saved.metadata.cycle_count)
        assert cpu.cycle_count == 4
        assert cpu.get_state().pc == 0x0001

        # サイクル数を省略した場合は累計値を変更しない
        cpu.restore_state(CpuState())
        assert cpu.cycle_count == 4
        assert cpu.bus is bus
