# pivotlab/planning/planners/base.py
from abc import ABC, abstractmethod
from typing import Generic, Optional, Tuple, TypeVar

from pivotlab.graph.base import GraphBase
from pivotlab.planning.interfaces import ISearchObserver
from pivotlab.visualization.observers import EfficientObserver

S = TypeVar("S")


class SteppedSearch(ABC, Generic[S]):
    """
    所有逐步搜索引擎的抽象基类 (显式状态机)

    每调用一次 advance() 推进到下一个快照点并返回 (snapshot, done)：
    - 还有快照时返回 (snapshot, False)，终止快照带 finished=True
    - 终止快照交出之后，返回 (None, True)
    同时实现迭代器协议，for 循环即可拉取全部快照。
    实例只能跑一次，重新搜索需要新建。
    """

    def __init__(self,
                 graph: GraphBase,
                 source: int,
                 target: int,
                 observer: Optional[ISearchObserver] = None):
        if not graph.has_node(source):
            raise ValueError(f"Source node {source} is not in the graph")
        if not graph.has_node(target):
            raise ValueError(f"Target node {target} is not in the graph")

        self.graph = graph
        self.source = source
        self.target = target
        self.observer = observer if observer is not None else EfficientObserver()
        self.observer.set_graph_info(graph)

        self._done = False
        self._steps = 0

    @property
    def done(self) -> bool:
        return self._done

    @property
    def steps(self) -> int:
        """已交出的快照数量"""
        return self._steps

    def advance(self) -> Tuple[Optional[S], bool]:
        if self._done:
            return None, True
        snapshot = self._step()
        self._steps += 1
        if getattr(snapshot, "finished", False):
            self._done = True
        return snapshot, False

    @abstractmethod
    def _step(self) -> S:
        """执行到下一个快照点，返回该快照"""
        pass

    def __iter__(self):
        return self

    def __next__(self) -> S:
        snapshot, done = self.advance()
        if done:
            raise StopIteration
        return snapshot

    def run_to_completion(self) -> S:
        """一直拉到终止快照并返回它"""
        last = None
        for snapshot in self:
            last = snapshot
        return last
