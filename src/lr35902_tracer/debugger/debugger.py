# lr35902_tracer/debugger/debugger.py
"""
デバッガモジュール。

コアエンジンの実行を制御し、ユーザーが指定した条件（ブレークポイント）で
実行を中断させる責務を負います。中断は常に命令サイクルの境界で行われます。
"""
import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional

from lr35902_tracer.core.cpu import AbstractCpu
from lr35902_tracer.core.errors import CpuError
from lr35902_tracer.core.snapshot import Snapshot
from lr35902_tracer.core.state import CpuState
from lr35902_tracer.transport.bus import BusAccessType

logger = logging.getLogger(__name__)

# @intent:responsibility ブレークポイントの条件タイプを定義します。
class BreakpointConditionType(Enum):
    PC_MATCH = "PC_MATCH"               # プログラムカウンタが特定のアドレスに一致
    MEMORY_READ = "MEMORY_READ"         # 特定のアドレスが読み込まれた
    MEMORY_WRITE = "MEMORY_WRITE"       # 特定のアドレスに書き込まれた
    REGISTER_VALUE = "REGISTER_VALUE"   # 特定のレジスタが特定の値になった
    REGISTER_CHANGE = "REGISTER_CHANGE" # 特定のレジスタの値が変化した
    FLAG_VALUE = "FLAG_VALUE"           # 特定のフラグが特定の値になった

# @intent:responsibility ブレークポイントをトリガーする条件を定義します。
@dataclass(frozen=True)
class BreakpointCondition:
    """
    ブレークポイントがヒットするための条件を定義するデータクラス。
    """
    condition_type: BreakpointConditionType
    value: Optional[int] = None           # PC_MATCH, REGISTER_VALUE, FLAG_VALUE(0/1)で使用
    address: Optional[int] = None         # MEMORY_READ, MEMORY_WRITEで使用
    register_name: Optional[str] = None   # REGISTER_VALUE, REGISTER_CHANGE, FLAG_VALUEで使用 (例: "a", "hl", "flag_z")
    enabled: bool = True

# @intent:responsibility コアエンジンの実行制御とブレークポイント管理を行います。
class Debugger:
    """
    CPUの実行を制御し、ブレークポイントの管理と実行履歴（ステップバック）を提供するクラス。
    """
    def __init__(self, cpu: AbstractCpu):
        self._cpu = cpu
        self._breakpoints: List[BreakpointCondition] = []
        self._running: bool = False
        self._previous_state: CpuState = replace(self._cpu.get_state())
        self._last_snapshot: Optional[Snapshot] = None
        self._history: List[Snapshot] = []
        # @intent:responsibility 履歴が尽きた時に戻るための初期状態を保持します。
        self._initial_state: CpuState = replace(self._cpu.get_state())
        self._initial_cycle_count: int = self._cpu.cycle_count

    @property
    def running(self) -> bool:
        return self._running

    def add_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition not in self._breakpoints:
            self._breakpoints.append(condition)

    def remove_breakpoint(self, condition: BreakpointCondition) -> None:
        if condition in self._breakpoints:
            self._breakpoints.remove(condition)

    def get_breakpoints(self) -> List[BreakpointCondition]:
        return list(self._breakpoints)

    def get_history(self) -> List[Snapshot]:
        return list(self._history)

    def get_last_snapshot(self) -> Optional[Snapshot]:
        return self._last_snapshot

    def _pc_breakpoint_hit(self, pc: int) -> bool:
        return any(
            bp.enabled and bp.condition_type == BreakpointConditionType.PC_MATCH and bp.value == pc
            for bp in self._breakpoints
        )

    def _check_other_breakpoints(self, snapshot: Snapshot) -> bool:
        """
        Snapshotに基づいてPC_MATCH以外のブレークポイントをチェックします。
        """
        current_state = snapshot.state

        for bp in self._breakpoints:
            if not bp.enabled:
                continue

            if bp.condition_type == BreakpointConditionType.MEMORY_READ:
                if any(a.access_type == BusAccessType.READ and a.address == bp.address for a in snapshot.bus_activity):
                    return True
            elif bp.condition_type == BreakpointConditionType.MEMORY_WRITE:
                if any(a.access_type == BusAccessType.WRITE and a.address == bp.address for a in snapshot.bus_activity):
                    return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_VALUE:
                if bp.register_name and hasattr(current_state, bp.register_name):
                    if getattr(current_state, bp.register_name) == bp.value:
                        return True
            elif bp.condition_type == BreakpointConditionType.FLAG_VALUE:
                if bp.register_name and hasattr(current_state, bp.register_name):
                    if getattr(current_state, bp.register_name) == bool(bp.value):
                        return True
            elif bp.condition_type == BreakpointConditionType.REGISTER_CHANGE:
                if bp.register_name and hasattr(current_state, bp.register_name):
                    if getattr(current_state, bp.register_name) != getattr(self._previous_state, bp.register_name):
                        return True
        return False

    def step_instruction(self) -> Snapshot:
        """
        CPUを1命令分実行し、その結果のSnapshotを返します。
        デコード失敗などのCpuErrorはそのまま呼び出し元へ伝播します。
        """
        self._previous_state = replace(self._cpu.get_state())
        if not self._history:
            # 構築後に書き換えられたレジスタも含め、最初の命令直前の状態を起点とする
            self._initial_state = self._previous_state
            self._initial_cycle_count = self._cpu.cycle_count
        snapshot = self._cpu.step()
        self._last_snapshot = snapshot
        self._history.append(snapshot)
        return snapshot

    def step_back(self) -> Optional[Snapshot]:
        """
        実行履歴を1つ戻り、CPUとメモリの状態を復元します。
        """
        if not self._history:
            return None

        snapshot_to_revert = self._history.pop()

        # バスアクティビティを逆順にスキャンし、書き込み操作があれば元に戻す
        bus = self._cpu.bus
        for access in reversed(snapshot_to_revert.bus_activity):
            if access.access_type == BusAccessType.WRITE and access.previous_data is not None:
                bus.load(access.address, access.previous_data)
        bus.get_and_clear_activity_log()

        if self._history:
            previous_snapshot = self._history[-1]
            self._cpu.restore_state(previous_snapshot.state, previous_snapshot.metadata.cycle_count)
            self._last_snapshot = previous_snapshot
            return previous_snapshot

        self._cpu.restore_state(self._initial_state, self._initial_cycle_count)
        self._last_snapshot = None
        return None

    # @intent:responsibility ブレークポイント、stop()、または指定命令数に達するまで実行を継続します。
    # @intent:post-condition CpuErrorが発生した場合は停止し、ログを残して再送出します。PCは失敗した命令を指したままです。
    # @intent:post-condition どのような例外で抜けた場合でも、running は False に戻ります。
    def run(self, max_steps: Optional[int] = None) -> int:
        """
        CPUの実行を継続し、実行した命令数を返します。
        """
        self._running = True
        steps = 0

        # 現在のPCにあるブレークポイントは、最初の1命令では無視して先へ進む
        skip_pc_check = self._pc_breakpoint_hit(self._cpu.get_state().pc)

        try:
            while self._running:
                if max_steps is not None and steps >= max_steps:
                    break

                current_pc = self._cpu.get_state().pc
                if not skip_pc_check and self._pc_breakpoint_hit(current_pc):
                    logger.info("Breakpoint hit at PC: %#06x", current_pc)
                    break
                skip_pc_check = False

                try:
                    snapshot = self.step_instruction()
                except CpuError as e:
                    logger.error("Execution stopped at PC %#06x: %s", current_pc, e)
                    raise
                steps += 1

                if self._check_other_breakpoints(snapshot):
                    logger.info("Breakpoint hit at PC: %#06x", snapshot.state.pc)
                    break
        finally:
            self._running = False

        return steps

    def run_back(self) -> None:
        """
        CPUの実行を逆方向（過去）へ連続的に戻します。
        """
        self._running = True

        while self._running:
            snapshot = self.step_back()

            if snapshot is None:
                self._running = False
                logger.info("Reached start of history.")
                return

            if self._pc_breakpoint_hit(snapshot.state.pc):
                self._running = False
                logger.info("Reverse breakpoint hit at PC: %#06x", snapshot.state.pc)
                return

            # 戻った時点のSnapshot（＝その命令実行直後の状態）で評価する
            if self._check_other_breakpoints(snapshot):
                self._running = False
                logger.info("Reverse breakpoint hit at PC: %#06x", snapshot.state.pc)

    def stop(self) -> None:
        self._running = False
