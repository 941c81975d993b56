import logging
import time
import os
from typing import Any, List, Tuple, Dict, Optional
from pivotlab.planning.interfaces import ISearchObserver


class EfficientObserver(ISearchObserver):
    """
    高效运行模式
    除了必要的流程不额外进行信息记录。
    相当于 NoOp。
    """
    def record_frontier_entry(self, item: Any, distance: float = 0.0): pass
    def record_current_expansion(self, item: Any): pass
    def record_edge(self, start_node: Any, end_node: Any): pass
    def set_graph_info(self, graph_info: Any): pass
    def log(self, message: str, level: str = 'INFO', payload: Optional[Dict] = None):
        # 仅在 ERROR 级别打印
        if level == 'ERROR':
            print(f"[ERROR] {message}")


class ExperimentObserver(ISearchObserver):
    """
    实验模式
    记录 frontier 推入、处理顺序、分段解析出的路段等关键内容。
    这些信息主要用于两种算法的比较和可视化 (Replay)。
    """
    def __init__(self):
        # 存储格式: List[Tuple[item, distance]]
        self.frontier_history: List[Tuple[Any, float]] = []
        # 存储格式: List[item] (节点 id 或簇 id)
        self.expanded: List[Any] = []
        # 存储格式: List[Tuple[start, end]]
        self.edges: List[Tuple[Any, Any]] = []
        self.graph_info = None
        # 存储格式: List[Tuple[level, message]]
        self.messages: List[Tuple[str, str]] = []

    def record_frontier_entry(self, item: Any, distance: float = 0.0):
        self.frontier_history.append((item, distance))

    def record_current_expansion(self, item: Any):
        self.expanded.append(item)

    def record_edge(self, start_node: Any, end_node: Any):
        self.edges.append((start_node, end_node))

    def set_graph_info(self, graph_info: Any):
        self.graph_info = graph_info

    def log(self, message: str, level: str = 'INFO', payload: Optional[Dict] = None):
        # 实验模式不打印，只保留消息以便事后检查 (比如有没有分段回退)
        self.messages.append((level, message))


class DebugObserver(ISearchObserver):
    """
    Debug 模式
    用于详细分析一次搜索为什么结果不对。
    将详细日志写入文件，同时保留回放数据以便对照。
    """
    def __init__(self, log_dir: str = "logs/search_debug"):
        # 复用 ExperimentObserver 的存储，以便 Debug 时也能画图
        self.viz_observer = ExperimentObserver()

        self.log_dir = log_dir
        os.makedirs(self.log_dir, exist_ok=True)

        # 配置 Logger (同一秒内多次创建也要拿到独立的 logger)
        timestamp = time.strftime("%Y%m%d_%H%M%S")
        session = f"{timestamp}_{id(self):x}"
        self.log_file = os.path.join(self.log_dir, f"search_debug_{session}.log")

        self.logger = logging.getLogger(f"SearchDebug_{session}")
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False

        if not self.logger.handlers:
            fh = logging.FileHandler(self.log_file, encoding='utf-8')
            fh.setLevel(logging.DEBUG)
            formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(message)s')
            fh.setFormatter(formatter)
            self.logger.addHandler(fh)

        self.logger.info("=== Debug Session Started ===")

    def record_frontier_entry(self, item: Any, distance: float = 0.0):
        self.viz_observer.record_frontier_entry(item, distance)
        self.logger.debug(f"Frontier Push: {item} d={distance:.3f}")

    def record_current_expansion(self, item: Any):
        self.viz_observer.record_current_expansion(item)
        self.logger.debug(f"Expanding: {item}")

    def record_edge(self, start_node: Any, end_node: Any):
        self.viz_observer.record_edge(start_node, end_node)

    def set_graph_info(self, graph_info: Any):
        self.viz_observer.set_graph_info(graph_info)
        self.logger.info(f"Graph Info set: {graph_info}")

    def log(self, message: str, level: str = 'INFO', payload: Optional[Dict] = None):
        self.viz_observer.log(message, level, payload)
        if payload:
            message = f"{message} | Payload: {payload}"

        if level == 'DEBUG':
            self.logger.debug(message)
        elif level == 'WARN':
            self.logger.warning(message)
        elif level == 'ERROR':
            self.logger.error(message)
        else:
            self.logger.info(message)

    def close(self):
        """释放文件句柄 (测试中清理临时目录前需要)"""
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)
        # 每个会话的 logger 名字都不同，关闭后从 logging 的注册表里移除
        logging.Logger.manager.loggerDict.pop(self.logger.name, None)

    # Proxy properties for ExperimentObserver compatibility
    @property
    def expanded(self): return self.viz_observer.expanded
    @property
    def frontier_history(self): return self.viz_observer.frontier_history
    @property
    def edges(self): return self.viz_observer.edges
    @property
    def messages(self): return self.viz_observer.messages
    @property
    def graph_info(self): return self.viz_observer.graph_info
