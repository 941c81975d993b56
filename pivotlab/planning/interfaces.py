from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class ISearchObserver(ABC):
    """
    搜索观察者接口
    用于解耦搜索算法与 记录/调试/可视化 逻辑。
    支持三种模式：
    1. Efficient: 空实现，无开销
    2. Experiment: 记录关键数据用于回放与对比
    3. Debug: 详细日志记录用于问题排查
    """

    @abstractmethod
    def record_frontier_entry(self, item: Any, distance: float = 0.0):
        """记录加入/更新 frontier 的节点 (或簇) 及其暂定代价"""
        pass

    @abstractmethod
    def record_current_expansion(self, item: Any):
        """记录当前正在处理的节点 (或簇)"""
        pass

    @abstractmethod
    def record_edge(self, start_node: Any, end_node: Any):
        """记录一条已确定的路段 (分段解析结果)"""
        pass

    @abstractmethod
    def set_graph_info(self, graph_info: Any):
        """设置图信息 (用于可视化背景等)"""
        pass

    @abstractmethod
    def log(self, message: str, level: str = 'INFO', payload: Optional[Dict] = None):
        """
        结构化日志记录
        :param message: 日志消息
        :param level: 日志级别 'INFO', 'WARN', 'ERROR', 'DEBUG'
        :param payload: 额外的结构化数据 (如起终点、步数等)
        """
        pass
