import logging
from dataclasses import dataclass, field
from functools import cached_property
from typing import Optional, Dict, List, Hashable, Tuple, Iterator, Iterable, Any, TYPE_CHECKING

from .errors import DuplicateIdentity, CyclicReference

if TYPE_CHECKING:
    from .discovery import MenuDiscovery

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MenuDeclaration:
    """菜单声明, 每个参与菜单的页面组件一条"""
    route: str                          # 页面路由
    label: str                          # 菜单显示名称
    self_id: Hashable                   # 组件自身标识, 全局唯一
    parent_id: Optional[Hashable] = None  # 父组件标识, None 表示顶级菜单
    icon: str = ""                      # 图标类名 (Bootstrap Icons)


@dataclass(frozen=True)
class MenuNode:
    """菜单树节点"""
    route: str
    label: str
    self_id: Hashable
    parent_id: Optional[Hashable] = None
    icon: str = ""
    children: Tuple["MenuNode", ...] = field(default_factory=tuple)

    def walk(self) -> Iterator["MenuNode"]:
        """先序遍历当前节点及其所有子孙节点"""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def to_dict(self) -> Dict[str, Any]:
        """转换为可 JSON 序列化的字典"""
        # 自底向上生成, 层级再深也不会触发递归上限
        finished: Dict[int, Dict[str, Any]] = {}
        for node in reversed(list(self.walk())):
            finished[id(node)] = {
                "route": node.route,
                "label": node.label,
                "id": identity_name(node.self_id),
                "parent": identity_name(node.parent_id) if node.parent_id is not None else None,
                "icon": node.icon,
                "children": [finished.pop(id(child)) for child in node.children],
            }
        return finished[id(self)]


def identity_name(identity: Hashable) -> str:
    """类标识输出为 module.QualName, 其他标识直接 str()"""
    if isinstance(identity, type):
        return f"{identity.__module__}.{identity.__qualname__}"
    return str(identity)


def find_trail(nodes: Iterable[MenuNode], route: str) -> List[MenuNode]:
    """查找从根节点到指定路由节点的路径, 找不到返回空列表"""
    path: List[MenuNode] = []
    stack = [(node, 0) for node in reversed(list(nodes))]
    while stack:
        node, depth = stack.pop()
        del path[depth:]
        path.append(node)
        if node.route == route:
            return list(path)
        stack.extend((child, depth + 1) for child in reversed(node.children))
    return []


class MenuTreeBuilder:
    """菜单树构建器

    从 discovery 拿到全部菜单声明, 按 parent_id 分组, 再从顶级菜单
    (parent_id 为 None) 开始展开。展开用显式栈完成, 不受递归深度限制。

    同级菜单的顺序就是声明被发现的顺序, 不做重新排序。

    :param discovery: 菜单声明来源
    :param strict: 为 True 时重复标识和循环引用直接抛异常,
                   否则记录警告并丢弃有问题的声明
    """
    def __init__(self, discovery: "MenuDiscovery", strict: bool = False):
        self.discovery = discovery
        self.strict = strict

    @cached_property
    def menu_items(self) -> List[MenuNode]:
        """首次访问时构建的菜单树, 之后复用"""
        return self.build()

    def build(self) -> List[MenuNode]:
        """重新扫描声明并构建菜单树, 返回顶级菜单节点列表"""
        declarations = self._collect()
        groups = self._group_by_parent(declarations)
        tree = self._expand(groups)

        placed = sum(1 for root in tree for _ in root.walk())
        if placed < len(declarations):
            logger.debug(
                "%s menu declarations are unreachable from any root", len(declarations) - placed
            )
        return tree

    def unreachable(self) -> List[MenuDeclaration]:
        """返回不会出现在菜单树中的声明 (父级不存在, 或处于循环中)"""
        declarations = self._collect()
        placed = set()
        for root in self._expand(self._group_by_parent(declarations)):
            placed.update(node.self_id for node in root.walk())
        return [decl for decl in declarations if decl.self_id not in placed]

    def _collect(self) -> List[MenuDeclaration]:
        """执行一次 discovery, 去掉重复标识和循环引用"""
        declarations: Dict[Hashable, MenuDeclaration] = {}
        for declaration in self.discovery.discover():
            existing = declarations.get(declaration.self_id)
            if existing is not None:
                if self.strict:
                    raise DuplicateIdentity(declaration.self_id, [existing.route, declaration.route])
                logger.warning(
                    "Duplicate menu identity %r: keeping %s, ignoring %s",
                    declaration.self_id, existing.route, declaration.route
                )
                continue
            declarations[declaration.self_id] = declaration

        for cycle in self._find_cycles(declarations):
            if self.strict:
                raise CyclicReference(cycle)
            logger.warning("Cyclic menu parents dropped: %s", " -> ".join(repr(i) for i in cycle))
            for identity in cycle:
                declarations.pop(identity, None)

        return list(declarations.values())

    @staticmethod
    def _find_cycles(declarations: Dict[Hashable, MenuDeclaration]) -> List[List[Hashable]]:
        """沿 parent_id 链查找循环, 每个循环只返回一次"""
        cycles = []
        checked = set()
        for start in declarations:
            chain: List[Hashable] = []
            on_chain = set()
            current = start
            while current in declarations and current not in checked:
                if current in on_chain:
                    cycles.append(chain[chain.index(current):] + [current])
                    break
                chain.append(current)
                on_chain.add(current)
                current = declarations[current].parent_id
            checked.update(chain)
        return cycles

    @staticmethod
    def _group_by_parent(
        declarations: List[MenuDeclaration],
    ) -> Dict[Optional[Hashable], List[MenuDeclaration]]:
        groups: Dict[Optional[Hashable], List[MenuDeclaration]] = {}
        for declaration in declarations:
            groups.setdefault(declaration.parent_id, []).append(declaration)
        return groups

    def _expand(
        self,
        groups: Dict[Optional[Hashable], List[MenuDeclaration]],
    ) -> List[MenuNode]:
        # 标识已去重且无环, 每个声明只会入栈展开一次
        roots = groups.get(None, [])
        built: Dict[Hashable, MenuNode] = {}
        stack = [(decl, False) for decl in reversed(roots)]
        while stack:
            decl, children_built = stack.pop()
            children = groups.get(decl.self_id, [])
            if not children_built:
                stack.append((decl, True))
                stack.extend((child, False) for child in reversed(children))
                continue
            built[decl.self_id] = MenuNode(
                route=decl.route,
                label=decl.label,
                self_id=decl.self_id,
                parent_id=decl.parent_id,
                icon=decl.icon,
                children=tuple(built.pop(child.self_id) for child in children),
            )
        return [built.pop(decl.self_id) for decl in roots]
