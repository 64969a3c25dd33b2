import json
from abc import ABC, abstractmethod
from html import escape
from typing import Any, Dict, List, Sequence, Set, Tuple

from ..core.menu import MenuNode, find_trail


class BaseRenderer(ABC):
    """渲染器基类"""

    @abstractmethod
    def render(self, nodes: Sequence[MenuNode], context: Dict[str, Any] = None) -> str:
        """渲染菜单树"""
        pass


class HtmlMenuRenderer(BaseRenderer):
    """渲染为嵌套的 Bootstrap nav 列表

    context 中的 active_route 对应的节点加 active class, 其所有祖先节点加 open class
    """
    def render(self, nodes: Sequence[MenuNode], context: Dict[str, Any] = None) -> str:
        context = context or {}
        active_route = context.get("active_route")
        trail = find_trail(nodes, active_route) if active_route else []
        open_ids = {node.self_id for node in trail[:-1]}
        if not nodes:
            return ""

        # 显式栈展开, 深层菜单不受递归深度限制
        parts: List[str] = []
        stack: List[Tuple[str, Any, int]] = [("list", tuple(nodes), 0)]
        while stack:
            kind, value, depth = stack.pop()
            if kind == "text":
                parts.append(value)
            elif kind == "list":
                css = "nav flex-column" if depth == 0 else "nav flex-column submenu"
                parts.append(f'<ul class="{css}">\n')
                stack.append(("text", "</ul>\n", depth))
                stack.extend(("item", node, depth) for node in reversed(value))
            else:
                parts.append(self._open_item(value, active_route, open_ids))
                stack.append(("text", "</li>\n", depth))
                if value.children:
                    stack.append(("list", value.children, depth + 1))
        return "".join(parts)

    def _open_item(self, node: MenuNode, active_route, open_ids: Set) -> str:
        classes = ["nav-link"]
        if node.route == active_route:
            classes.append("active")
        item_classes = ["nav-item"]
        if node.self_id in open_ids:
            item_classes.append("open")

        icon = f'<i class="{escape(node.icon)}"></i> ' if node.icon else ""
        link = (
            f'<a class="{" ".join(classes)}" href="{escape(node.route)}">'
            f'{icon}{escape(node.label)}</a>'
        )
        return f'<li class="{" ".join(item_classes)}">{link}\n'


class JsonMenuRenderer(BaseRenderer):
    """渲染为 JSON 字符串"""
    def render(self, nodes: Sequence[MenuNode], context: Dict[str, Any] = None) -> str:
        data: List[Dict[str, Any]] = [node.to_dict() for node in nodes]
        return json.dumps(data, ensure_ascii=False)
