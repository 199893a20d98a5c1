# lr35902_tracer/core/cpu.py
"""
Core Layer (抽象CPU)

このモジュールは、CPUの基本的な状態管理と命令サイクル（フェッチ→デコード→実行→PC確定）の
駆動に関する抽象化を提供します。具体的な命令の振る舞いはInstruction Layerに移譲されます。
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Any, Dict, List, Optional, Tuple

from lr35902_tracer.transport.bus import Bus
from lr35902_tracer.core.errors import DecodeError
from lr35902_tracer.core.snapshot import Snapshot, Metadata
from lr35902_tracer.core.state import CpuState
from lr35902_tracer.common.types import SymbolMap, RegisterLayoutInfo

logger = logging.getLogger(__name__)

# @intent:responsibility 抽象CPUの基本機能とインターフェースを定義します。
class AbstractCpu(ABC):
    """
    全てのCPUエミュレーションの基底となる抽象クラス。
    CPUは自身の状態を排他的に所有し、Busへの参照を1つ保持します。
    """
    # @intent:pre-condition `bus`は有効なBusオブジェクトである必要があります。
    def __init__(self, bus: Bus):
        self._bus = bus
        self._state: CpuState = self._create_initial_state()
        self._cycle_count: int = 0
        self._symbol_map: SymbolMap = {}
        self._reverse_symbol_map: Dict[int, str] = {}

    def set_symbol_map(self, symbol_map: SymbolMap) -> None:
        """
        シンボルマップ（名前とアドレスの対応表）を設定します。
        """
        self._symbol_map = symbol_map
        self._reverse_symbol_map = {addr: name for name, addr in symbol_map.items()}

    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        """
        CPUの初期状態を生成して返します。
        """
        pass

    # @intent:responsibility CPUをリセットし、初期状態に戻します。
    def reset(self) -> None:
        self._state = self._create_initial_state()
        self._cycle_count = 0

    def get_state(self) -> CpuState:
        """
        現在のCPUの状態を返します。返り値は実体であり、変更はCPUに反映されます。
        """
        return self._state

    # @intent:responsibility 保存しておいた状態と累計サイクル数をCPUに復元します（ステップバック用）。
    def restore_state(self, state: CpuState, cycle_count: Optional[int] = None) -> None:
        self._state = replace(state)
        if cycle_count is not None:
            self._cycle_count = cycle_count

    @property
    def cycle_count(self) -> int:
        return self._cycle_count

    @property
    def bus(self) -> Bus:
        return self._bus

    # @intent:responsibility 現在のPCからオペコードをフェッチします。PCはまだ進めません。
    def _fetch(self) -> int:
        return self._bus.read_byte(self._state.pc)

    @abstractmethod
    def _decode(self, opcode: int) -> Optional[Any]:
        """
        オペコードをデコードします。表にない場合はNoneを返します。
        """
        pass

    @abstractmethod
    def _execute(self, instruction: Any) -> int:
        """
        デコードされた命令を実行し、次のPCを返します。PC自体は変更しません。
        """
        pass

    @abstractmethod
    def _cycles_of(self, instruction: Any) -> int:
        pass

    @abstractmethod
    def _describe(self, address: int, instruction: Any) -> str:
        pass

    # @intent:responsibility CPUを1命令サイクル進め、その結果のスナップショットを返します。
    # @intent:rationale Template Methodパターンを採用し、フェッチ→デコード→実行→PC確定の順序をここで固定します。
    # @intent:post-condition デコード失敗時はDecodeErrorを送出し、PCは進めません。
    def step(self) -> Snapshot:
        """
        CPUを1命令サイクル進め、その時点でのCPUとバスの状態を含むSnapshotオブジェクトを返します。
        """
        # 前サイクルまでの残存ログを破棄
        self._bus.get_and_clear_activity_log()
        initial_pc = self._state.pc

        opcode = self._fetch()
        instruction = self._decode(opcode)
        if instruction is None:
            raise DecodeError(opcode, initial_pc)

        next_pc = self._execute(instruction)
        self._state.pc = next_pc & 0xFFFF

        return self._create_snapshot(initial_pc, instruction)

    # @intent:responsibility 指定された命令数だけ実行します。例外はそのまま呼び出し元へ伝播します。
    def run(self, max_steps: int) -> List[Snapshot]:
        return [self.step() for _ in range(max_steps)]

    def _create_snapshot(self, initial_pc: int, instruction: Any) -> Snapshot:
        bus_activity = self._bus.get_and_clear_activity_log()
        self._cycle_count += self._cycles_of(instruction)

        symbol_label = self._reverse_symbol_map.get(initial_pc, "")
        symbol_info = f"{symbol_label}: " if symbol_label else ""
        symbol_info += self._describe(initial_pc, instruction)

        logger.debug("%#06x: %s -> PC=%#06x", initial_pc, symbol_info, self._state.pc)

        return Snapshot(
            state=replace(self._state),
            instruction=instruction,
            metadata=Metadata(cycle_count=self._cycle_count, symbol_info=symbol_info),
            bus_activity=bus_activity,
        )

    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        """
        現在のレジスタ値を辞書形式で返す。
        """
        pass

    @abstractmethod
    def get_register_layout(self) -> List[RegisterLayoutInfo]:
        """
        レジスタをどのように配置・グループ化すべきかの定義を返す。
        """
        pass

    @abstractmethod
    def get_flag_state(self) -> Dict[str, bool]:
        """
        現在のフラグの各ビットの状態を辞書形式で返す。
        """
        pass

    @abstractmethod
    def disassemble(self, start_addr: int, length: int) -> List[Tuple[int, str, str]]:
        """
        指定されたメモリ範囲を逆アセンブルし、(address, hex_bytes, mnemonic) のタプルリストを返す。
        """
        pass
