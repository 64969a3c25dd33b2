import importlib
import inspect
import json
import logging
import os
from abc import ABC, abstractmethod
from types import ModuleType
from typing import Type, List, Iterable, Iterator, Sequence, Tuple, Union

from .errors import RegistryFrozen, ManifestError
from .menu import MenuDeclaration
from .page import MenuPage

logger = logging.getLogger(__name__)


class MenuDiscovery(ABC):
    """菜单声明来源基类"""

    @abstractmethod
    def discover(self) -> Sequence[MenuDeclaration]:
        """返回当前所有菜单声明, 顺序即菜单的同级顺序"""
        pass


class MenuRegistry(MenuDiscovery):
    """菜单注册表

    启动阶段注册, 之后只读。freeze() 之后再注册会抛出 RegistryFrozen。
    """
    def __init__(self):
        self._declarations: List[MenuDeclaration] = []
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self):
        """冻结注册表"""
        if not self._frozen:
            logger.info("Menu registry frozen with %s declarations", len(self._declarations))
        self._frozen = True

    def register(self, declaration: MenuDeclaration) -> MenuDeclaration:
        """注册菜单声明"""
        if self._frozen:
            raise RegistryFrozen(f"菜单注册表已冻结, 无法注册 {declaration.route}")
        self._declarations.append(declaration)
        return declaration

    def register_page(self, page_cls: Type[MenuPage]) -> Type[MenuPage]:
        """注册页面类, 也可以当作类装饰器使用"""
        declaration = page_cls.declaration()
        if declaration is None:
            raise ValueError(f"{page_cls.__name__} 没有声明 menu_route")
        self.register(declaration)
        return page_cls

    def discover(self) -> Tuple[MenuDeclaration, ...]:
        return tuple(self._declarations)

    def __len__(self) -> int:
        return len(self._declarations)


class ModuleDiscovery(MenuDiscovery):
    """扫描模块中声明了 menu_route 的 MenuPage 子类

    :param modules: 模块路径字符串或模块对象
    """
    def __init__(self, modules: Iterable[Union[str, ModuleType]]):
        self.modules = list(modules)

    def pages(self) -> List[Type[MenuPage]]:
        """按定义顺序返回所有声明菜单的页面类"""
        pages = []
        for module in self.modules:
            if isinstance(module, str):
                module = importlib.import_module(module)
            for cls in self._iter_classes(vars(module), module.__name__):
                if issubclass(cls, MenuPage) and cls.declares_menu() and cls not in pages:
                    pages.append(cls)
        return pages

    def discover(self) -> List[MenuDeclaration]:
        return [page.declaration() for page in self.pages()]

    def _iter_classes(self, namespace: dict, module_name: str) -> Iterator[type]:
        # 包括嵌套在其他类中的页面类, 跳过从别处导入的类
        for value in list(namespace.values()):
            if not inspect.isclass(value) or value.__module__ != module_name:
                continue
            yield value
            yield from self._iter_classes(
                {k: v for k, v in vars(value).items() if inspect.isclass(v)
                 and v.__qualname__.startswith(value.__qualname__ + ".")},
                module_name,
            )


class ManifestDiscovery(MenuDiscovery):
    """从 JSON 清单文件读取菜单声明

    文件内容是对象列表::

        [{"route": "/team", "label": "Team", "id": "team"},
         {"route": "/team/a", "label": "A", "id": "team-a", "parent": "team"}]
    """
    def __init__(self, path: str):
        self.path = path

    def discover(self) -> List[MenuDeclaration]:
        if not os.path.exists(self.path):
            logger.info("Menu manifest %s not found, no declarations loaded", self.path)
            return []
        try:
            with open(self.path, encoding="utf-8") as f:
                entries = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as e:
            raise ManifestError(self.path, str(e)) from e

        if not isinstance(entries, list):
            raise ManifestError(self.path, "顶层必须是列表")

        declarations = []
        for index, entry in enumerate(entries):
            if not isinstance(entry, dict):
                raise ManifestError(self.path, f"第 {index} 项不是对象")
            missing = [key for key in ("route", "label", "id") if entry.get(key) in (None, "")]
            if missing:
                raise ManifestError(self.path, f"第 {index} 项缺少字段: {', '.join(missing)}")
            if not isinstance(entry["id"], (str, int)) or \
                    not isinstance(entry.get("parent"), (str, int, type(None))):
                raise ManifestError(self.path, f"第 {index} 项的 id/parent 必须是字符串或整数")
            wrong_type = [key for key in ("route", "label", "icon")
                          if entry.get(key) is not None and not isinstance(entry[key], str)]
            if wrong_type:
                raise ManifestError(self.path, f"第 {index} 项的字段必须是字符串: {', '.join(wrong_type)}")
            declarations.append(MenuDeclaration(
                route=entry["route"],
                label=entry["label"],
                self_id=entry["id"],
                parent_id=entry.get("parent"),
                icon=entry.get("icon") or "",
            ))
        return declarations


class ChainDiscovery(MenuDiscovery):
    """依次合并多个来源"""
    def __init__(self, *sources: MenuDiscovery):
        self.sources = list(sources)

    def discover(self) -> List[MenuDeclaration]:
        declarations: List[MenuDeclaration] = []
        for source in self.sources:
            declarations.extend(source.discover())
        return declarations
