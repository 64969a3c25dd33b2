from typing import Hashable, Iterable, List


class MenuError(Exception):
    """菜单异常基类"""


class DuplicateIdentity(MenuError):
    """同一个 self_id 被声明了多次"""
    def __init__(self, identity: Hashable, routes: Iterable[str] = ()):
        self.identity = identity
        self.routes = list(routes)
        super().__init__(f"重复的菜单标识: {identity!r} (routes: {', '.join(self.routes)})")


class CyclicReference(MenuError):
    """父菜单引用形成了环"""
    def __init__(self, cycle: Iterable[Hashable]):
        self.cycle: List[Hashable] = list(cycle)
        chain = " -> ".join(repr(item) for item in self.cycle)
        super().__init__(f"菜单父级引用存在循环: {chain}")


class RegistryFrozen(MenuError):
    """注册表已冻结, 不能再注册"""


class ManifestError(MenuError):
    """菜单清单文件格式错误"""
    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"菜单清单 {path} 无效: {reason}")
