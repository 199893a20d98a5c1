# lr35902_tracer/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令サイクル後のCPUとバスの状態を記録した不変のデータ構造を定義します。
デバッガへの情報提供と、ステップバック時の状態復元に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional

from lr35902_tracer.core.state import CpuState
from lr35902_tracer.transport.bus import BusAccess

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True)
class Metadata:
    """
    実行に関するメタデータ（累計サイクル数、シンボル情報など）を記録するデータクラス。
    """
    cycle_count: int
    symbol_info: Optional[str] = None # 例: "main_loop: ADD A,B"

# @intent:responsibility ある一時点におけるCPUとバスの状態を不変に記録します。
@dataclass(frozen=True)
class Snapshot:
    """
    1命令サイクル完了時点の状態を記録したデータ構造。
    stateは実行後の状態のコピーであり、以降のCPUの実行によって変化しません。
    """
    state: CpuState
    instruction: Any # アーキテクチャ固有のデコード済み命令
    metadata: Metadata
    bus_activity: List[BusAccess] = field(default_factory=list)
